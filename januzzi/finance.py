"""Transações e categorias guardadas no documento de dados do usuário."""

import uuid
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from dateutil import tz
from dateutil.relativedelta import relativedelta

from januzzi import config
from januzzi.entitlement import as_utc, utcnow

CATEGORIAS_PADRAO = [
    {"id": "alimentacao", "name": "Alimentação", "color": "#F59E0B"},
    {"id": "moradia", "name": "Moradia", "color": "#3B82F6"},
    {"id": "transporte", "name": "Transporte", "color": "#10B981"},
    {"id": "saude", "name": "Saúde", "color": "#EF4444"},
    {"id": "lazer", "name": "Lazer", "color": "#8B5CF6"},
    {"id": "salario", "name": "Salário", "color": "#22C55E"},
]

FILTROS = ("day", "month", "year")


def novo_id() -> str:
    return uuid.uuid4().hex[:9]


def hoje() -> date:
    return datetime.now(tz.gettz(config.TIMEZONE)).date()


def categorias_ou_padrao(categories: List[dict]) -> List[dict]:
    return categories if categories else list(CATEGORIAS_PADRAO)


def nova_transacao(description, amount, category, type, date=None, companyId=None) -> dict:
    transacao = {
        "id": novo_id(),
        "description": description,
        "amount": float(amount),
        "category": category,
        "date": (as_utc(date) or utcnow()).isoformat(),
        "type": type,
    }
    if companyId:
        transacao["companyId"] = companyId
    return transacao


def ordenar_por_data(transactions: List[dict]) -> List[dict]:
    return sorted(transactions, key=lambda t: as_utc(t["date"]), reverse=True)


def intervalo(dia: date, filtro: str, fuso: Optional[str] = None):
    """Início e fim (UTC) do dia, mês ou ano de ``dia`` no fuso local."""
    if filtro not in FILTROS:
        raise ValueError(f"Filtro inválido: {filtro}")
    zona = tz.gettz(fuso or config.TIMEZONE)

    inicio = datetime.combine(dia, time.min, tzinfo=zona)
    if filtro == "day":
        fim = inicio + relativedelta(days=1)
    elif filtro == "month":
        inicio = inicio.replace(day=1)
        fim = inicio + relativedelta(months=1)
    else:
        inicio = inicio.replace(month=1, day=1)
        fim = inicio + relativedelta(years=1)

    return as_utc(inicio), as_utc(fim) - timedelta(microseconds=1)


def filtrar(transactions: List[dict], inicio: datetime, fim: datetime, companyId: Optional[str] = None):
    resultado = []
    for t in transactions:
        if companyId is not None and t.get("companyId") != companyId:
            continue
        if inicio <= as_utc(t["date"]) <= fim:
            resultado.append(t)
    return resultado


def resumo(transactions: List[dict]) -> dict:
    receitas = sum(t["amount"] for t in transactions if t["type"] == "income")
    despesas = sum(t["amount"] for t in transactions if t["type"] == "expense")
    investimentos = sum(t["amount"] for t in transactions if t["type"] == "investment")
    return {
        "receitas": receitas,
        "despesas": despesas,
        "investimentos": investimentos,
        # Tudo que não é receita sai do saldo
        "saldo": receitas - despesas - investimentos,
    }
