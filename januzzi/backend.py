"""
Fachada de documentos sobre o banco.

O sistema trata conta e dados do usuário como dois documentos independentes
(``users/{uid}`` e ``user_data/{uid}``), sem transação entre eles: cada
escrita é um commit próprio e a última escrita vence.

``assinaturas`` é o registro em processo das inscrições em tempo real nos
documentos de dados. Toda escrita feita por ``DocumentStore.update_user_data``
notifica os inscritos daquele uid.
"""

import threading
from typing import Callable, Dict, List, Optional

from sqlalchemy.exc import DataError, IntegrityError, OperationalError
from sqlalchemy.orm import Session

from januzzi.errors import BackendUnavailable, DuplicateIdentifier, ValidationError
from januzzi.log import get_logger
from januzzi.models import DadosUsuarioBD, EmpresaBD, IdentidadeBD, UsuarioBD

logger = get_logger(__name__)

CAMPOS_CONTA = {
    "username", "is_admin", "is_approved", "access_duration", "access_started_at",
    "access_expiration_date", "created_at", "cpf", "phone", "email",
}


class Assinaturas:
    """Callbacks por uid. Seguro para uso a partir do threadpool do FastAPI."""

    def __init__(self):
        self._callbacks: Dict[str, List[Callable]] = {}
        self._lock = threading.Lock()

    def inscrever(self, uid: str, callback: Callable[[dict], None]) -> Callable[[], None]:
        with self._lock:
            self._callbacks.setdefault(uid, []).append(callback)

        def cancelar():
            with self._lock:
                lista = self._callbacks.get(uid, [])
                if callback in lista:
                    lista.remove(callback)
                if not lista:
                    self._callbacks.pop(uid, None)

        return cancelar

    def publicar(self, uid: str, dados: dict):
        with self._lock:
            callbacks = list(self._callbacks.get(uid, []))
        for callback in callbacks:
            callback(dados)

    def total(self, uid: str) -> int:
        with self._lock:
            return len(self._callbacks.get(uid, []))


assinaturas = Assinaturas()


def dados_como_dict(dados: Optional[DadosUsuarioBD]) -> dict:
    if dados is None:
        return {"transactions": [], "categories": []}
    return {
        "transactions": list(dados.transactions or []),
        "categories": list(dados.categories or []),
    }


def conta_como_dict(conta: UsuarioBD) -> dict:
    def iso(valor):
        return valor.isoformat() if valor is not None else None

    return {
        "uid": conta.uid,
        "username": conta.username,
        "is_admin": conta.is_admin,
        "is_approved": conta.is_approved,
        "access_duration": conta.access_duration,
        "access_started_at": iso(conta.access_started_at),
        "access_expiration_date": iso(conta.access_expiration_date),
        "created_at": iso(conta.created_at),
        "profile": conta.profile,
    }


class DocumentStore:
    def __init__(self, db: Session, hub: Assinaturas = assinaturas):
        self.db = db
        self.hub = hub

    def _commit(self, operacao: str, uid: str = None, duplicado: str = None):
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateIdentifier(duplicado)
        except DataError as e:
            # Valor fora do tamanho/faixa da coluna
            self.db.rollback()
            logger.warning("dados_rejeitados", operacao=operacao, uid=uid, erro=str(e))
            raise ValidationError()
        except OperationalError as e:
            self.db.rollback()
            logger.error("backend_indisponivel", operacao=operacao, uid=uid, erro=str(e))
            raise BackendUnavailable()

    # --- Identidade ---

    def get_identity_by_email(self, email: str) -> Optional[IdentidadeBD]:
        return self.db.query(IdentidadeBD).filter(IdentidadeBD.email == email).first()

    def create_identity(self, email: str, hashed_password: str) -> IdentidadeBD:
        identidade = IdentidadeBD(email=email, hashed_password=hashed_password)
        self.db.add(identidade)
        self._commit("create_identity", duplicado="Nome de usuário já está em uso")
        return identidade

    def update_identity_email(self, uid: str, email: str):
        identidade = self.db.get(IdentidadeBD, uid)
        if identidade is not None:
            identidade.email = email
            self._commit("update_identity_email", uid, duplicado="Nome de usuário já está em uso")

    def delete_identity(self, uid: str):
        identidade = self.db.get(IdentidadeBD, uid)
        if identidade is not None:
            self.db.delete(identidade)
            self._commit("delete_identity", uid)

    # --- Conta ---

    def get_user_account(self, uid: str) -> Optional[UsuarioBD]:
        return self.db.get(UsuarioBD, uid)

    def list_user_accounts(self) -> List[UsuarioBD]:
        return self.db.query(UsuarioBD).order_by(UsuarioBD.created_at).all()

    def set_user_account(self, uid: str, fields: dict) -> UsuarioBD:
        conta = UsuarioBD(uid=uid, **fields)
        self.db.merge(conta)
        self._commit("set_user_account", uid)
        return self.db.get(UsuarioBD, uid)

    def update_user_account(self, uid: str, partial: dict) -> Optional[UsuarioBD]:
        conta = self.db.get(UsuarioBD, uid)
        if conta is None:
            return None
        for campo, valor in partial.items():
            if campo not in CAMPOS_CONTA:
                raise ValueError(f"Campo desconhecido: {campo}")
            setattr(conta, campo, valor)
        self._commit("update_user_account", uid)
        return conta

    # --- Dados (transações e categorias) ---

    def get_user_data(self, uid: str) -> dict:
        return dados_como_dict(self.db.get(DadosUsuarioBD, uid))

    def set_user_data(self, uid: str, transactions=None, categories=None):
        self.db.merge(DadosUsuarioBD(uid=uid, transactions=transactions or [], categories=categories or []))
        self._commit("set_user_data", uid)

    def update_user_data(self, uid: str, transactions=None, categories=None) -> dict:
        dados = self.db.get(DadosUsuarioBD, uid)
        if dados is None:
            dados = DadosUsuarioBD(uid=uid, transactions=[], categories=[])
            self.db.add(dados)
        # Listas novas: o SQLAlchemy não detecta mutação dentro de JSON
        if transactions is not None:
            dados.transactions = list(transactions)
        if categories is not None:
            dados.categories = list(categories)
        self._commit("update_user_data", uid)

        snapshot = dados_como_dict(dados)
        self.hub.publicar(uid, snapshot)
        return snapshot

    def subscribe_user_data(self, uid: str, callback: Callable[[dict], None]) -> Callable[[], None]:
        """Entrega o estado atual imediatamente e depois cada nova escrita."""
        cancelar = self.hub.inscrever(uid, callback)
        callback(self.get_user_data(uid))
        return cancelar

    # --- Exclusão ---

    def delete_account(self, uid: str) -> bool:
        """Remove os documentos de conta e de dados (a identidade é à parte)."""
        conta = self.db.get(UsuarioBD, uid)
        dados = self.db.get(DadosUsuarioBD, uid)
        if conta is None and dados is None:
            return False
        if dados is not None:
            self.db.delete(dados)
        if conta is not None:
            self.db.delete(conta)
        self._commit("delete_account", uid)
        return True

    # --- Empresas ---

    def list_companies(self, uid: str) -> List[EmpresaBD]:
        return (
            self.db.query(EmpresaBD)
            .filter(EmpresaBD.user_id == uid)
            .order_by(EmpresaBD.created_at.desc())
            .all()
        )

    def add_company(self, uid: str, name: str, cnpj: str) -> EmpresaBD:
        empresa = EmpresaBD(name=name, cnpj=cnpj, user_id=uid)
        self.db.add(empresa)
        self._commit("add_company", uid, duplicado="CNPJ já cadastrado")
        return empresa

    def delete_company(self, uid: str, company_id: str) -> bool:
        empresa = (
            self.db.query(EmpresaBD)
            .filter(EmpresaBD.id == company_id, EmpresaBD.user_id == uid)
            .first()
        )
        if empresa is None:
            return False
        self.db.delete(empresa)
        self._commit("delete_company", uid)
        return True
