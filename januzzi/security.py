import hmac
from datetime import timedelta

from passlib.context import CryptContext
from jose import JWTError, jwt

from januzzi import config
from januzzi.entitlement import utcnow

ADMIN_UID = "admin"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str):
    return pwd_context.hash(password)


def verify_password(password, hashed):
    return pwd_context.verify(password, hashed)


def email_sintetico(username: str) -> str:
    return f"{username}@{config.EMAIL_DOMAIN}"


def criar_token_jwt(data: dict):
    to_encode = data.copy()
    expire = utcnow() + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def ler_token_jwt(token: str):
    """Devolve o payload ou None se o token for inválido ou expirado."""
    try:
        return jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except JWTError:
        return None


def verificar_admin(username: str, password: str) -> bool:
    # Sem ADMIN_PASSWORD_HASH configurado o login de admin fica desativado
    if not config.ADMIN_USERNAME or not config.ADMIN_PASSWORD_HASH:
        return False
    if not hmac.compare_digest(username or "", config.ADMIN_USERNAME):
        return False
    try:
        return verify_password(password or "", config.ADMIN_PASSWORD_HASH)
    except ValueError:
        return False
