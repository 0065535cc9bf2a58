from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from januzzi import finance
from januzzi.backend import DocumentStore
from januzzi.dependencies import get_store, get_usuario_ativo
from januzzi.grants import garantir_cnpj_livre
from januzzi.log import get_logger
from januzzi.models import EmpresaBD, UsuarioBD
from januzzi.schemas import EmpresaInput, EmpresaOut
from januzzi.validators import formatar_cnpj, validar_cnpj

router = APIRouter(prefix="/empresas", tags=["empresas"])
logger = get_logger(__name__)


def _empresa_out(e: EmpresaBD) -> EmpresaOut:
    return EmpresaOut(
        id=e.id,
        name=e.name,
        cnpj=e.cnpj,
        cnpjFormatado=formatar_cnpj(e.cnpj),
        userId=e.user_id,
        createdAt=e.created_at,
    )


@router.get("", response_model=List[EmpresaOut])
def listar(usuario: UsuarioBD = Depends(get_usuario_ativo), store: DocumentStore = Depends(get_store)):
    return [_empresa_out(e) for e in store.list_companies(usuario.uid)]


@router.post("", response_model=EmpresaOut, status_code=201)
def criar(dados: EmpresaInput, usuario: UsuarioBD = Depends(get_usuario_ativo), store: DocumentStore = Depends(get_store)):
    name = dados.name.strip()
    if not name:
        raise HTTPException(400, "Informe o nome da empresa")
    cnpj = validar_cnpj(dados.cnpj)
    garantir_cnpj_livre(store, usuario.uid, cnpj)

    empresa = store.add_company(usuario.uid, name, cnpj)
    logger.info("empresa_criada", uid=usuario.uid, empresa=empresa.id)
    return _empresa_out(empresa)


@router.delete("/{company_id}")
def deletar(company_id: str, usuario: UsuarioBD = Depends(get_usuario_ativo), store: DocumentStore = Depends(get_store)):
    if not store.delete_company(usuario.uid, company_id):
        raise HTTPException(404, "Não encontrado ou sem permissão")
    return {"msg": "Apagado"}


@router.get("/{company_id}/transacoes")
def transacoes_da_empresa(
    company_id: str,
    filtro: Literal["day", "month", "year"] = Query("month"),
    data: Optional[date] = Query(None),
    usuario: UsuarioBD = Depends(get_usuario_ativo),
    store: DocumentStore = Depends(get_store),
):
    if not any(e.id == company_id for e in store.list_companies(usuario.uid)):
        raise HTTPException(404, "Não encontrado ou sem permissão")

    inicio, fim = finance.intervalo(data or finance.hoje(), filtro)
    transacoes = finance.filtrar(
        store.get_user_data(usuario.uid)["transactions"], inicio, fim, companyId=company_id
    )
    return {"transactions": finance.ordenar_por_data(transacoes), **finance.resumo(transacoes)}
