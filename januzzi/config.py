import os
from dotenv import load_dotenv

load_dotenv()

# --- BANCO DE DADOS ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./januzzi.db")

# Corrige URL do Postgres se vier com 'postgres://' (padrão antigo do Render)
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# --- TOKEN ---
SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7))

# --- ADMINISTRADOR ---
# Nunca guardado como conta: usuário e hash da senha vêm do ambiente
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "")
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH", "")

# --- ACESSO ---
TRIAL_DAYS = int(os.getenv("TRIAL_DAYS", 30))
SESSION_CHECK_INTERVAL = float(os.getenv("SESSION_CHECK_INTERVAL", 60))
EMAIL_DOMAIN = os.getenv("EMAIL_DOMAIN", "user.com")

# --- DIVERSOS ---
CACHE_DIR = os.getenv("CACHE_DIR") or None
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("LOG_JSON", "1").strip().lower() in {"1", "true", "yes", "sim"}
TIMEZONE = os.getenv("TIMEZONE", "America/Sao_Paulo")


def maintenance_mode() -> bool:
    """Lido a cada requisição, para poder ligar/desligar sem redeploy."""
    raw = (os.getenv("MAINTENANCE_MODE", "0") or "0").strip().lower()
    return raw in {"1", "true", "yes", "sim"}
