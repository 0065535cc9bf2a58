import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from januzzi.cache import CacheLocal
from januzzi.database import SessionLocal
from januzzi.dependencies import identidade_do_token
from januzzi.log import get_logger
from januzzi.session_guard import EstadoSessao, SessionGuard

router = APIRouter(tags=["sessao"])
logger = get_logger(__name__)

FIM = object()


def get_session_factory():
    return SessionLocal


@router.websocket("/ws/sessao")
async def sessao(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
    session_factory=Depends(get_session_factory),
):
    """
    Mantém a sessão do painel: envia o documento de dados a cada mudança e
    encerra com um evento ``expirado`` quando a janela de acesso acaba.
    """
    identidade = identidade_do_token(token)
    if identidade is None:
        await websocket.close(code=4401)
        return

    await websocket.accept()
    fila: asyncio.Queue = asyncio.Queue()

    guard = SessionGuard(
        session_factory,
        cache=CacheLocal(namespace=identidade.uid),
        on_dados=lambda dados: fila.put_nowait({"evento": "dados", **dados}),
        on_redirect=lambda url: fila.put_nowait({"evento": "expirado", "redirect": url}),
        on_sair=lambda: fila.put_nowait(FIM),
    )

    async def enviar():
        while True:
            mensagem = await fila.get()
            if mensagem is FIM:
                return
            await websocket.send_json(mensagem)

    async def receber():
        # Só serve para perceber a desconexão do cliente
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            return

    async with guard:
        estado = await guard.entrar(identidade.uid, identidade.is_admin)
        if estado == EstadoSessao.VALIDA:
            await websocket.send_json({"evento": "sessao", "estado": estado.value, "uid": identidade.uid})

        tarefas = [asyncio.create_task(enviar()), asyncio.create_task(receber())]
        _, pendentes = await asyncio.wait(tarefas, return_when=asyncio.FIRST_COMPLETED)
        for tarefa in pendentes:
            tarefa.cancel()
        await asyncio.gather(*pendentes, return_exceptions=True)

    if EstadoSessao.EXPIRADA in guard.transicoes:
        logger.info("ws_sessao_expirada", uid=identidade.uid)
    if websocket.client_state == WebSocketState.CONNECTED:
        await websocket.close()
