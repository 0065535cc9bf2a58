from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from januzzi import finance
from januzzi.backend import DocumentStore
from januzzi.dependencies import get_store, get_usuario_ativo
from januzzi.models import UsuarioBD
from januzzi.schemas import CategoriaInput, DadosOut, ResumoOut, TransacaoInput

router = APIRouter(tags=["dados"])


def _dados_out(dados: dict) -> DadosOut:
    return DadosOut(
        transactions=finance.ordenar_por_data(dados["transactions"]),
        categories=finance.categorias_ou_padrao(dados["categories"]),
    )


@router.get("/dados", response_model=DadosOut)
def ver_dados(usuario: UsuarioBD = Depends(get_usuario_ativo), store: DocumentStore = Depends(get_store)):
    return _dados_out(store.get_user_data(usuario.uid))


# --- TRANSAÇÕES ---
@router.post("/transacoes", response_model=DadosOut, status_code=201)
def criar_transacao(
    d: TransacaoInput,
    usuario: UsuarioBD = Depends(get_usuario_ativo),
    store: DocumentStore = Depends(get_store),
):
    dados = store.get_user_data(usuario.uid)
    transacao = finance.nova_transacao(**d.model_dump())
    # Mais recente primeiro
    dados = store.update_user_data(usuario.uid, transactions=[transacao] + dados["transactions"])
    return _dados_out(dados)


@router.delete("/transacoes/{id}", response_model=DadosOut)
def deletar_transacao(id: str, usuario: UsuarioBD = Depends(get_usuario_ativo), store: DocumentStore = Depends(get_store)):
    dados = store.get_user_data(usuario.uid)
    restantes = [t for t in dados["transactions"] if t["id"] != id]
    if len(restantes) == len(dados["transactions"]):
        raise HTTPException(404, "Não encontrado ou sem permissão")
    return _dados_out(store.update_user_data(usuario.uid, transactions=restantes))


# --- CATEGORIAS ---
@router.post("/categorias", response_model=DadosOut, status_code=201)
def criar_categoria(
    c: CategoriaInput,
    usuario: UsuarioBD = Depends(get_usuario_ativo),
    store: DocumentStore = Depends(get_store),
):
    dados = store.get_user_data(usuario.uid)
    categorias = finance.categorias_ou_padrao(dados["categories"])
    if any(cat["name"].strip().lower() == c.name.strip().lower() for cat in categorias):
        raise HTTPException(400, "Já existe uma categoria com esse nome")

    categoria = {"id": finance.novo_id(), "name": c.name.strip(), "color": c.color}
    return _dados_out(store.update_user_data(usuario.uid, categories=categorias + [categoria]))


@router.delete("/categorias/{id}", response_model=DadosOut)
def deletar_categoria(id: str, usuario: UsuarioBD = Depends(get_usuario_ativo), store: DocumentStore = Depends(get_store)):
    dados = store.get_user_data(usuario.uid)
    categorias = finance.categorias_ou_padrao(dados["categories"])
    restantes = [c for c in categorias if c["id"] != id]
    if len(restantes) == len(categorias):
        raise HTTPException(404, "Categoria não encontrada")
    return _dados_out(store.update_user_data(usuario.uid, categories=restantes))


# --- RESUMO (SALDO DO PERÍODO) ---
@router.get("/resumo", response_model=ResumoOut)
def ver_resumo(
    filtro: Literal["day", "month", "year"] = Query("month"),
    data: Optional[date] = Query(None),
    usuario: UsuarioBD = Depends(get_usuario_ativo),
    store: DocumentStore = Depends(get_store),
):
    inicio, fim = finance.intervalo(data or finance.hoje(), filtro)
    transacoes = finance.filtrar(store.get_user_data(usuario.uid)["transactions"], inicio, fim)
    return ResumoOut(inicio=inicio, fim=fim, **finance.resumo(transacoes))
