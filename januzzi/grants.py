"""
Concessão, renovação e revogação de acesso (operações do administrador).

A janela de acesso de uma conta é sempre ``access_started_at +
access_duration``, com a duração em segundos. ``access_expiration_date`` é
gravado junto para o painel do admin e obedece à mesma soma.

As verificações de unicidade (username, e-mail, CNPJ) varrem a coleção e
filtram em Python. Duas requisições simultâneas podem passar as duas pela
varredura; nesse caso o índice único do banco barra a segunda no commit.
"""

from datetime import datetime, timedelta
from typing import Optional

from januzzi.backend import DocumentStore
from januzzi.entitlement import SEGUNDOS_POR_DIA, as_utc, utcnow
from januzzi.errors import AccountNotFound, BackendUnavailable, DuplicateIdentifier, ValidationError
from januzzi.log import get_logger
from januzzi.security import email_sintetico

logger = get_logger(__name__)

# Cem anos; acima disso a data de expiração estoura o datetime
MAX_DIAS_ACESSO = 36500


def _conta_ou_erro(store: DocumentStore, uid: str):
    conta = store.get_user_account(uid)
    if conta is None:
        raise AccountNotFound()
    return conta


def nova_expiracao(expiracao_atual, dias: int, now: datetime) -> datetime:
    """Soma à expiração ainda válida; se já passou (ou não existe), conta a partir de agora."""
    expiracao_atual = as_utc(expiracao_atual)
    if expiracao_atual is not None and expiracao_atual > now:
        return expiracao_atual + timedelta(days=dias)
    return now + timedelta(days=dias)


def conceder_acesso(store: DocumentStore, uid: str, dias: int, now: Optional[datetime] = None):
    if dias is None or int(dias) < 1:
        raise ValidationError("A duração do acesso deve ser de pelo menos 1 dia")
    if int(dias) > MAX_DIAS_ACESSO:
        raise ValidationError(f"A duração do acesso deve ser de no máximo {MAX_DIAS_ACESSO} dias")

    now = as_utc(now) or utcnow()
    conta = _conta_ou_erro(store, uid)

    expiracao_atual = as_utc(conta.access_expiration_date)
    expiracao = nova_expiracao(expiracao_atual, int(dias), now)

    # Extensão mantém o início da janela; renovação recomeça a contar de agora
    inicio = as_utc(conta.access_started_at)
    renovacao = not (expiracao_atual is not None and expiracao_atual > now and inicio is not None)
    if renovacao:
        inicio = now

    conta = store.update_user_account(uid, {
        "is_approved": True,
        "access_started_at": inicio,
        "access_duration": int((expiracao - inicio).total_seconds()),
        "access_expiration_date": expiracao,
    })
    logger.info(
        "acesso_concedido",
        uid=uid,
        dias=int(dias),
        renovacao=renovacao,
        expira_em=expiracao.isoformat(),
    )
    return conta


def revogar_acesso(store: DocumentStore, uid: str):
    _conta_ou_erro(store, uid)
    conta = store.update_user_account(uid, {
        "is_approved": False,
        "access_started_at": None,
        "access_duration": None,
        "access_expiration_date": None,
    })
    logger.info("acesso_revogado", uid=uid)
    return conta


def iniciar_teste(dias: int, now: Optional[datetime] = None) -> dict:
    """Campos de acesso de uma conta recém-criada (aprovada, com período de teste)."""
    now = as_utc(now) or utcnow()
    return {
        "is_approved": True,
        "access_started_at": now,
        "access_duration": dias * SEGUNDOS_POR_DIA,
        "access_expiration_date": now + timedelta(days=dias),
    }


def excluir_usuario(store: DocumentStore, uid: str, uid_autenticado: Optional[str] = None):
    """
    Remove conta e dados. A credencial de login só é removida quando a conta é
    a da própria identidade autenticada. Quando o admin exclui outro usuário,
    a credencial fica e o nome continua ocupado para novos cadastros.

    Não há transação entre as duas remoções: se a credencial falhar depois dos
    documentos já apagados, o erro sobe e nada é desfeito.
    """
    if not store.delete_account(uid):
        raise AccountNotFound()
    logger.info("conta_excluida", uid=uid)

    if uid_autenticado is not None and uid == uid_autenticado:
        try:
            store.delete_identity(uid)
        except BackendUnavailable:
            logger.error("exclusao_parcial", uid=uid, etapa="identidade")
            raise BackendUnavailable(
                "Os dados do usuário foram removidos, mas não foi possível remover o login"
            )
        logger.info("identidade_excluida", uid=uid)


def listar_usuarios(store: DocumentStore, busca: Optional[str] = None):
    contas = [c for c in store.list_user_accounts() if not c.is_admin]
    if busca:
        termo = busca.lower()
        contas = [c for c in contas if termo in c.username.lower()]
    return contas


# ==========================================
# Unicidade (varredura completa)
# ==========================================

def username_em_uso(store: DocumentStore, username: str, exclude_uid: Optional[str] = None) -> bool:
    # A credencial sobrevive à exclusão feita pelo admin e continua segurando o nome
    identidade = store.get_identity_by_email(email_sintetico(username))
    if identidade is not None and identidade.uid != exclude_uid:
        return True
    return any(
        c.username == username and c.uid != exclude_uid
        for c in store.list_user_accounts()
        if not c.is_admin
    )


def email_em_uso(store: DocumentStore, email: str, exclude_uid: Optional[str] = None) -> bool:
    return any(c.email == email and c.uid != exclude_uid for c in store.list_user_accounts())


def cnpj_em_uso(store: DocumentStore, uid: str, cnpj: str) -> bool:
    return any(e.cnpj == cnpj for e in store.list_companies(uid))


def garantir_username_livre(store, username, exclude_uid=None):
    if username_em_uso(store, username, exclude_uid):
        raise DuplicateIdentifier("Nome de usuário já está em uso")


def garantir_email_livre(store, email, exclude_uid=None):
    if email_em_uso(store, email, exclude_uid):
        raise DuplicateIdentifier("Este e-mail já está em uso por outro usuário.")


def garantir_cnpj_livre(store, uid, cnpj):
    if cnpj_em_uso(store, uid, cnpj):
        raise DuplicateIdentifier("CNPJ já cadastrado")
