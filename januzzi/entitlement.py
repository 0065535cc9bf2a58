"""
Cálculo da janela de acesso.

Uma conta comum pode usar o painel enquanto ``started_at + access_duration``
estiver no futuro. ``access_duration`` é sempre em segundos e ``started_at`` é
o início da janela atual (não a data de cadastro, que fica em ``created_at``).

Nada aqui faz I/O: as funções podem ser chamadas a cada requisição ou a cada
tick do SessionGuard.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Union

from dateutil.parser import isoparse

SEGUNDOS_POR_DIA = 24 * 60 * 60
EXPIRADO = "Expirado"

Timestamp = Union[datetime, str, None]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(valor: Timestamp) -> Optional[datetime]:
    """Normaliza para datetime com fuso UTC. Datas sem fuso (SQLite) são tratadas como UTC."""
    if valor is None or valor == "":
        return None
    if isinstance(valor, str):
        valor = isoparse(valor)
    if valor.tzinfo is None:
        return valor.replace(tzinfo=timezone.utc)
    return valor.astimezone(timezone.utc)


@dataclass(frozen=True)
class Entitlement:
    remaining_seconds: Optional[int]
    expired: bool

    @property
    def remaining_days(self) -> int:
        if self.remaining_seconds is None:
            return 0
        return max(0, math.ceil(self.remaining_seconds / SEGUNDOS_POR_DIA))

    @property
    def label(self) -> str:
        if self.expired:
            return EXPIRADO
        dias = self.remaining_seconds // SEGUNDOS_POR_DIA
        if dias > 0:
            return f"{dias} {'dia' if dias == 1 else 'dias'} de acesso"
        horas = (self.remaining_seconds % SEGUNDOS_POR_DIA) // 3600
        minutos = (self.remaining_seconds % 3600) // 60
        return f"{horas}h {minutos}min de acesso"


def calcular_acesso(
    access_duration: Optional[int],
    started_at: Timestamp,
    now: Optional[datetime] = None,
) -> Entitlement:
    # Duração ou início ausentes significam "sem concessão válida", nunca "ilimitado"
    inicio = as_utc(started_at)
    if not access_duration or inicio is None:
        return Entitlement(remaining_seconds=None, expired=True)

    now = as_utc(now) or utcnow()
    elapsed = math.floor((now - inicio).total_seconds())
    remaining = int(access_duration) - elapsed
    return Entitlement(remaining_seconds=remaining, expired=remaining <= 0)


def dias_restantes(access_duration, started_at, now=None) -> int:
    return calcular_acesso(access_duration, started_at, now).remaining_days


def formatar_tempo_restante(access_duration, started_at, now=None) -> str:
    return calcular_acesso(access_duration, started_at, now).label


# ==========================================
# Painel do administrador
# ==========================================

def status_usuario(conta, now: Optional[datetime] = None) -> str:
    """Rótulo mostrado ao lado de cada usuário na lista do admin."""
    if conta.is_admin:
        return "Administrador"
    if not conta.is_approved:
        return "Pendente"
    if conta.access_expiration_date is None:
        return "Ativo"

    acesso = calcular_acesso(conta.access_duration, conta.access_started_at, now)
    if acesso.expired:
        return "Bloqueado"
    return f"{acesso.remaining_days} dias restantes"


def estatisticas(contas, now: Optional[datetime] = None) -> dict:
    now = as_utc(now) or utcnow()
    ativos = bloqueados = pendentes = 0

    for conta in contas:
        expira_em = as_utc(conta.access_expiration_date)
        if not conta.is_approved:
            pendentes += 1
        elif expira_em is None or now <= expira_em:
            ativos += 1
        if expira_em is not None and now > expira_em:
            bloqueados += 1

    return {
        "total": len(contas),
        "ativos": ativos,
        "bloqueados": bloqueados,
        "pendentes": pendentes,
    }
