"""
SessionGuard: vigia a sessão de um usuário autenticado.

Estados::

    NAO_AUTENTICADO --entrar(uid)--> VALIDA --tick/expirou--> EXPIRADA
          ^                            |                          |
          +-------------sair()---------+------logout forçado------+

Enquanto a sessão é válida existem duas tarefas de fundo independentes: a
verificação periódica de expiração (uma ``asyncio.Task``) e a inscrição em
tempo real no documento de dados. As duas são canceladas juntas em ``sair()``
para nunca agir sobre um uid antigo. Administrador não expira.
"""

import asyncio
import inspect
from enum import Enum
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from januzzi import config
from januzzi.backend import DocumentStore, assinaturas, conta_como_dict
from januzzi.cache import CHAVE_DADOS, CHAVE_USUARIO, CacheLocal
from januzzi.entitlement import calcular_acesso, utcnow
from januzzi.errors import LOGIN_EXPIRADO, BackendUnavailable
from januzzi.log import get_logger

logger = get_logger(__name__)


class EstadoSessao(str, Enum):
    NAO_AUTENTICADO = "unauthenticated"
    VALIDA = "authenticated-valid"
    EXPIRADA = "authenticated-expired"


async def _chamar(callback, *args):
    if callback is None:
        return
    resultado = callback(*args)
    if inspect.isawaitable(resultado):
        await resultado


class SessionGuard:
    def __init__(
        self,
        session_factory,
        *,
        intervalo: Optional[float] = None,
        cache: Optional[CacheLocal] = None,
        on_dados: Optional[Callable] = None,
        on_redirect: Optional[Callable] = None,
        on_sair: Optional[Callable] = None,
        relogio: Callable = utcnow,
        hub=assinaturas,
    ):
        self.session_factory = session_factory
        self.intervalo = intervalo if intervalo is not None else config.SESSION_CHECK_INTERVAL
        self.cache = cache if cache is not None else CacheLocal(config.CACHE_DIR)
        self.on_dados = on_dados
        self.on_redirect = on_redirect
        self.on_sair = on_sair
        self.relogio = relogio
        self.hub = hub

        self.estado = EstadoSessao.NAO_AUTENTICADO
        self.transicoes: List[EstadoSessao] = []
        self.uid: Optional[str] = None
        self.is_admin = False
        self._tarefa: Optional[asyncio.Task] = None
        self._cancelar_assinatura: Optional[Callable] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        if self.estado != EstadoSessao.NAO_AUTENTICADO:
            await self.sair()

    # --- acesso ao banco (roda no threadpool) ---

    def _ler_conta(self, uid: str) -> Optional[dict]:
        with self.session_factory() as db:
            conta = DocumentStore(db, self.hub).get_user_account(uid)
            return conta_como_dict(conta) if conta is not None else None

    def _inscrever(self, uid: str):
        loop = self._loop

        def callback(dados):
            loop.call_soon_threadsafe(self._receber_dados, uid, dados)

        with self.session_factory() as db:
            return DocumentStore(db, self.hub).subscribe_user_data(uid, callback)

    # --- transições ---

    def _mudar(self, estado: EstadoSessao):
        self.estado = estado
        self.transicoes.append(estado)

    def _expirou(self, conta: dict) -> bool:
        acesso = calcular_acesso(conta["access_duration"], conta["access_started_at"], self.relogio())
        return acesso.expired

    async def entrar(self, uid: str, is_admin: bool = False) -> EstadoSessao:
        """Evento de login do provedor de identidade."""
        await self._parar()
        self._loop = asyncio.get_running_loop()

        if is_admin:
            self.uid, self.is_admin = uid, True
            self._mudar(EstadoSessao.VALIDA)
            return self.estado

        conta = await run_in_threadpool(self._ler_conta, uid)
        if conta is None:
            logger.warning("sessao_sem_conta", uid=uid)
            await self.sair()
            return self.estado

        self.uid, self.is_admin = uid, False
        if self._expirou(conta):
            await self._expirar()
            return EstadoSessao.EXPIRADA

        self._mudar(EstadoSessao.VALIDA)
        self.cache.gravar(CHAVE_USUARIO, conta)
        self._cancelar_assinatura = await run_in_threadpool(self._inscrever, uid)
        self._tarefa = asyncio.create_task(self._vigiar(uid))
        logger.info("sessao_iniciada", uid=uid, intervalo=self.intervalo)
        return self.estado

    async def verificar(self) -> EstadoSessao:
        """Uma rodada da verificação periódica."""
        if self.estado != EstadoSessao.VALIDA or self.is_admin:
            return self.estado

        uid = self.uid
        conta = await run_in_threadpool(self._ler_conta, uid)
        if uid != self.uid:
            # sessão trocou enquanto lia
            return self.estado
        if conta is None:
            logger.warning("sessao_sem_conta", uid=uid)
            await self.sair()
        elif self._expirou(conta):
            await self._expirar()
        else:
            self.cache.gravar(CHAVE_USUARIO, conta)
        return self.estado

    async def _vigiar(self, uid: str):
        while self.uid == uid and self.estado == EstadoSessao.VALIDA:
            await asyncio.sleep(self.intervalo)
            try:
                await self.verificar()
            except (BackendUnavailable, SQLAlchemyError) as e:
                # Falha do banco não derruba o verificador: tenta de novo no próximo tick
                logger.error("sessao_verificacao_falhou", uid=uid, erro=str(e))

    async def _expirar(self):
        self._mudar(EstadoSessao.EXPIRADA)
        logger.info("sessao_expirada", uid=self.uid)
        await self._encerrar()
        await _chamar(self.on_redirect, LOGIN_EXPIRADO)
        await _chamar(self.on_sair)

    async def sair(self):
        await self._encerrar()
        await _chamar(self.on_sair)

    async def _encerrar(self):
        uid = self.uid
        await self._parar()
        self.cache.limpar()
        self.uid, self.is_admin = None, False
        self._mudar(EstadoSessao.NAO_AUTENTICADO)
        logger.info("sessao_encerrada", uid=uid)

    async def _parar(self):
        if self._cancelar_assinatura is not None:
            self._cancelar_assinatura()
            self._cancelar_assinatura = None

        tarefa, self._tarefa = self._tarefa, None
        if tarefa is not None and tarefa is not asyncio.current_task() and not tarefa.done():
            tarefa.cancel()
            try:
                await tarefa
            except asyncio.CancelledError:
                pass

    def _receber_dados(self, uid: str, dados: dict):
        if uid != self.uid or self.estado != EstadoSessao.VALIDA:
            return
        self.cache.gravar(CHAVE_DADOS, dados)
        if self.on_dados is not None:
            resultado = self.on_dados(dados)
            if inspect.isawaitable(resultado):
                asyncio.ensure_future(resultado)

    def restaurar(self):
        """Conta e dados do último login, para o primeiro carregamento."""
        return self.cache.ler(CHAVE_USUARIO), self.cache.ler(CHAVE_DADOS)
