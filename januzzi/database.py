from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from januzzi.config import DATABASE_URL

# Configurações extras para SQLite (necessário para threads do FastAPI)
connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()
