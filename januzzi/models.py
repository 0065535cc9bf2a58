import uuid

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    JSON,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from januzzi.database import Base
from januzzi.entitlement import calcular_acesso, utcnow


def novo_uid():
    return uuid.uuid4().hex


class IdentidadeBD(Base):
    """Credencial de login. Separada da conta, como no provedor de identidade."""
    __tablename__ = "identidades"

    uid = Column(String(32), primary_key=True, default=novo_uid)
    email = Column(String, unique=True, index=True, nullable=False)  # {username}@user.com
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class UsuarioBD(Base):
    __tablename__ = "users"

    uid = Column(String(32), primary_key=True)
    username = Column(String, unique=True, index=True, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    is_approved = Column(Boolean, default=False, nullable=False)

    # Janela de acesso: access_started_at + access_duration (segundos)
    access_duration = Column(BigInteger, nullable=True)
    access_started_at = Column(DateTime(timezone=True), nullable=True)
    access_expiration_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Perfil (coletado depois do cadastro)
    cpf = Column(String(11), nullable=True)
    phone = Column(String(15), nullable=True)
    email = Column(String, unique=True, nullable=True)

    # 🔗 Relacionamento
    empresas = relationship("EmpresaBD", back_populates="dono", cascade="all, delete-orphan")

    def acesso(self, now=None):
        return calcular_acesso(self.access_duration, self.access_started_at, now)

    @property
    def profile(self):
        return {"cpf": self.cpf, "phone": self.phone, "email": self.email}


class DadosUsuarioBD(Base):
    __tablename__ = "user_data"

    uid = Column(String(32), primary_key=True)
    transactions = Column(JSON, default=list, nullable=False)
    categories = Column(JSON, default=list, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class EmpresaBD(Base):
    __tablename__ = "companies"
    __table_args__ = (UniqueConstraint("user_id", "cnpj", name="uq_companies_user_cnpj"),)

    id = Column(String(32), primary_key=True, default=novo_uid)
    name = Column(String, nullable=False)
    cnpj = Column(String(14), nullable=False)
    user_id = Column(String(32), ForeignKey("users.uid"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # 🔗 Relacionamento
    dono = relationship("UsuarioBD", back_populates="empresas")
