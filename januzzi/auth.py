"""
Cadastro e login.

O login por usuário usa um e-mail sintético (``{username}@user.com``) na tabela
de identidades; a conta e os dados ficam em documentos separados, criados no
cadastro.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from januzzi import config
from januzzi.backend import DocumentStore
from januzzi.entitlement import utcnow
from januzzi.errors import (
    AccountExpired,
    AccountNotFound,
    AccountPendingApproval,
    InvalidCredentials,
    ValidationError,
)
from januzzi.grants import garantir_username_livre, iniciar_teste
from januzzi.log import get_logger
from januzzi.security import (
    ADMIN_UID,
    criar_token_jwt,
    email_sintetico,
    hash_password,
    verificar_admin,
    verify_password,
)
from januzzi.validators import validar_senha

logger = get_logger(__name__)


@dataclass
class Identidade:
    uid: str
    username: str
    is_admin: bool = False


def token_para(identidade: Identidade) -> str:
    return criar_token_jwt({
        "sub": identidade.uid,
        "username": identidade.username,
        "role": "admin" if identidade.is_admin else "user",
    })


def cadastrar(store: DocumentStore, username: str, password: str, now: Optional[datetime] = None):
    username = (username or "").strip()
    if not username:
        raise ValidationError("Informe o nome de usuário")
    validar_senha(password)
    garantir_username_livre(store, username)

    identidade = store.create_identity(email_sintetico(username), hash_password(password))
    uid = identidade.uid

    campos = {"username": username, "is_admin": False, "created_at": now or utcnow()}
    campos.update(iniciar_teste(config.TRIAL_DAYS, now))
    conta = store.set_user_account(uid, campos)
    store.set_user_data(uid)

    logger.info("usuario_cadastrado", uid=uid, username=username, dias_teste=config.TRIAL_DAYS)
    return conta


def entrar(store: DocumentStore, username: str, password: str, now: Optional[datetime] = None) -> Identidade:
    username = (username or "").strip()
    identidade = store.get_identity_by_email(email_sintetico(username))
    if identidade is None or not verify_password(password or "", identidade.hashed_password):
        logger.info("login_recusado", username=username, motivo="credenciais")
        raise InvalidCredentials()

    conta = store.get_user_account(identidade.uid)
    if conta is None:
        logger.warning("login_recusado", uid=identidade.uid, motivo="conta_inexistente")
        raise AccountNotFound()

    if not conta.is_admin:
        if not conta.is_approved:
            raise AccountPendingApproval()
        if conta.acesso(now).expired:
            logger.info("login_recusado", uid=conta.uid, motivo="expirado")
            raise AccountExpired()

    logger.info("login", uid=conta.uid)
    return Identidade(uid=conta.uid, username=conta.username, is_admin=conta.is_admin)


def entrar_admin(username: str, password: str) -> Identidade:
    if not verificar_admin(username, password):
        logger.warning("login_admin_recusado", username=username)
        raise InvalidCredentials("Credenciais de administrador inválidas")
    logger.info("login_admin", username=username)
    return Identidade(uid=ADMIN_UID, username=username, is_admin=True)
