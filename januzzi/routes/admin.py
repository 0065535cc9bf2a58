from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from januzzi import grants
from januzzi.auth import Identidade
from januzzi.backend import DocumentStore
from januzzi.dependencies import get_store, require_admin
from januzzi.entitlement import estatisticas
from januzzi.routes.auth import usuario_out
from januzzi.schemas import ConcessaoInput, EstatisticasOut, UsuarioOut

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/usuarios", response_model=List[UsuarioOut])
def listar(
    busca: Optional[str] = Query(None),
    store: DocumentStore = Depends(get_store),
    admin: Identidade = Depends(require_admin),
):
    return [usuario_out(conta) for conta in grants.listar_usuarios(store, busca)]


@router.get("/estatisticas", response_model=EstatisticasOut)
def ver_estatisticas(store: DocumentStore = Depends(get_store), admin: Identidade = Depends(require_admin)):
    return estatisticas(grants.listar_usuarios(store))


# --- APROVAR / ADICIONAR DIAS ---
@router.post("/usuarios/{uid}/acesso", response_model=UsuarioOut)
def conceder(
    uid: str,
    dados: ConcessaoInput,
    store: DocumentStore = Depends(get_store),
    admin: Identidade = Depends(require_admin),
):
    return usuario_out(grants.conceder_acesso(store, uid, dados.dias))


# --- BLOQUEAR ---
@router.delete("/usuarios/{uid}/acesso", response_model=UsuarioOut)
def revogar(uid: str, store: DocumentStore = Depends(get_store), admin: Identidade = Depends(require_admin)):
    return usuario_out(grants.revogar_acesso(store, uid))


# --- DELETAR ---
@router.delete("/usuarios/{uid}")
def deletar(uid: str, store: DocumentStore = Depends(get_store), admin: Identidade = Depends(require_admin)):
    grants.excluir_usuario(store, uid, uid_autenticado=admin.uid)
    return {"msg": "Usuário removido"}
