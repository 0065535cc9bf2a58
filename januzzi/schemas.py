from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from januzzi.grants import MAX_DIAS_ACESSO


class UsuarioSignup(BaseModel):
    username: str
    password: str


class UsuarioLogin(BaseModel):
    username: str
    password: str


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    redirect: str


class PerfilInput(BaseModel):
    cpf: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class RenomearInput(BaseModel):
    username: str


class ConcessaoInput(BaseModel):
    dias: int = Field(..., ge=1, le=MAX_DIAS_ACESSO)


class Perfil(BaseModel):
    cpf: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    cpf_formatado: Optional[str] = None
    phone_formatado: Optional[str] = None


class UsuarioOut(BaseModel):
    uid: str
    username: str
    is_admin: bool
    is_approved: bool
    access_duration: Optional[int] = None
    access_started_at: Optional[datetime] = None
    access_expiration_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    profile: Perfil
    dias_restantes: int
    tempo_restante: str
    status: str


class EstatisticasOut(BaseModel):
    total: int
    ativos: int
    bloqueados: int
    pendentes: int


class TransacaoInput(BaseModel):
    description: str
    amount: float = Field(..., gt=0)
    category: str
    type: Literal["income", "expense", "investment"]
    date: Optional[datetime] = None
    companyId: Optional[str] = None


class CategoriaInput(BaseModel):
    name: str
    color: str = Field("#6B7280", pattern=r"^#[0-9A-Fa-f]{6}$")


class DadosOut(BaseModel):
    transactions: List[dict]
    categories: List[dict]


class ResumoOut(BaseModel):
    inicio: datetime
    fim: datetime
    receitas: float
    despesas: float
    investimentos: float
    saldo: float


class EmpresaInput(BaseModel):
    name: str
    cnpj: str


class EmpresaOut(BaseModel):
    id: str
    name: str
    cnpj: str
    cnpjFormatado: str
    userId: str
    createdAt: datetime
