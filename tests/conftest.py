import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "0")
os.environ["MAINTENANCE_MODE"] = "0"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from januzzi import config, models  # noqa: F401
from januzzi.auth import cadastrar
from januzzi.backend import DocumentStore
from januzzi.database import Base
from januzzi.dependencies import get_db
from januzzi.routes.main import app
from januzzi.routes.sessao import get_session_factory
from januzzi.security import hash_password

ADMIN_USERNAME = "admin_teste"
ADMIN_PASSWORD = "senha-do-admin"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def banco():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return DocumentStore(db)


@pytest.fixture
def client():
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def admin_hash():
    return hash_password(ADMIN_PASSWORD)


@pytest.fixture
def admin_config(monkeypatch, admin_hash):
    monkeypatch.setattr(config, "ADMIN_USERNAME", ADMIN_USERNAME)
    monkeypatch.setattr(config, "ADMIN_PASSWORD_HASH", admin_hash)


@pytest.fixture
def admin_headers(client, admin_config):
    resp = client.post("/admin/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def usuario(store):
    """Conta comum recém-cadastrada (30 dias de teste)."""
    return cadastrar(store, "maria", "segredo123")


@pytest.fixture
def session_factory():
    return TestingSessionLocal
