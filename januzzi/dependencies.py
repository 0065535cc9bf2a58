from typing import Optional

from sqlalchemy.orm import Session
from fastapi import Depends, HTTPException, Header

from januzzi.auth import Identidade
from januzzi.backend import DocumentStore
from januzzi.database import SessionLocal
from januzzi.errors import AccountExpired, AccountPendingApproval
from januzzi.security import ADMIN_UID, ler_token_jwt


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)):
    return DocumentStore(db)


def identidade_do_token(token: Optional[str]) -> Optional[Identidade]:
    payload = ler_token_jwt(token) if token else None
    if not payload or not payload.get("sub"):
        return None
    return Identidade(
        uid=payload["sub"],
        username=payload.get("username", ""),
        is_admin=payload.get("role") == "admin" and payload["sub"] == ADMIN_UID,
    )


def get_current_identity(authorization: Optional[str] = Header(None)) -> Identidade:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(401, "Não autenticado")

    identidade = identidade_do_token(authorization.split(" ")[1])
    if identidade is None:
        raise HTTPException(401, "Token inválido ou expirado")
    return identidade


def get_usuario_ativo(
    identidade: Identidade = Depends(get_current_identity),
    store: DocumentStore = Depends(get_store),
):
    """Conta do usuário logado, com a janela de acesso conferida a cada requisição."""
    if identidade.is_admin:
        raise HTTPException(403, "Rota exclusiva de usuários")

    conta = store.get_user_account(identidade.uid)
    if conta is None:
        raise HTTPException(401, "Usuário não encontrado")
    if not conta.is_approved:
        raise AccountPendingApproval()
    if conta.acesso().expired:
        raise AccountExpired()
    return conta


def require_admin(identidade: Identidade = Depends(get_current_identity)) -> Identidade:
    if not identidade.is_admin:
        raise HTTPException(403, "Apenas Admin")
    return identidade
