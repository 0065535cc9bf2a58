"""Testes do cálculo da janela de acesso (sem banco, relógio fixo)."""

import math
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from januzzi.entitlement import (
    EXPIRADO,
    SEGUNDOS_POR_DIA,
    calcular_acesso,
    dias_restantes,
    estatisticas,
    formatar_tempo_restante,
    status_usuario,
)

AGORA = datetime(2026, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


class TestCalcularAcesso:

    @pytest.mark.parametrize("duracao", [1, 3600, SEGUNDOS_POR_DIA, 30 * SEGUNDOS_POR_DIA, 45 * SEGUNDOS_POR_DIA + 7])
    def test_janela_recem_aberta_nao_expira(self, duracao):
        acesso = calcular_acesso(duracao, AGORA, now=AGORA)
        assert acesso.expired is False
        assert acesso.remaining_days == math.ceil(duracao / SEGUNDOS_POR_DIA)

    @pytest.mark.parametrize("passados", [0, 1, 3600])
    def test_expira_quando_tempo_decorrido_alcanca_duracao(self, passados):
        duracao = 10 * SEGUNDOS_POR_DIA
        inicio = AGORA - timedelta(seconds=duracao + passados)
        acesso = calcular_acesso(duracao, inicio, now=AGORA)
        assert acesso.expired is True
        assert acesso.remaining_days == 0
        assert acesso.label == EXPIRADO

    @pytest.mark.parametrize("duracao, inicio", [
        (None, AGORA),
        (0, AGORA),
        (30 * SEGUNDOS_POR_DIA, None),
        (30 * SEGUNDOS_POR_DIA, ""),
        (None, None),
    ])
    def test_dados_ausentes_contam_como_expirado(self, duracao, inicio):
        acesso = calcular_acesso(duracao, inicio, now=AGORA)
        assert acesso.expired is True
        assert acesso.remaining_days == 0
        assert acesso.label == "Expirado"

    def test_aceita_string_iso(self):
        inicio = (AGORA - timedelta(days=2)).isoformat()
        assert dias_restantes(5 * SEGUNDOS_POR_DIA, inicio, now=AGORA) == 3

    def test_data_sem_fuso_e_tratada_como_utc(self):
        inicio = (AGORA - timedelta(days=1)).replace(tzinfo=None)
        assert dias_restantes(3 * SEGUNDOS_POR_DIA, inicio, now=AGORA) == 2

    def test_inicio_no_futuro_nao_e_limitado(self):
        # relógio adiantado: o tempo decorrido fica negativo e sobra mais que a duração
        inicio = AGORA + timedelta(days=2)
        acesso = calcular_acesso(SEGUNDOS_POR_DIA, inicio, now=AGORA)
        assert acesso.expired is False
        assert acesso.remaining_seconds == 3 * SEGUNDOS_POR_DIA

    def test_dias_restantes_arredonda_para_cima(self):
        inicio = AGORA - timedelta(hours=12)
        assert dias_restantes(2 * SEGUNDOS_POR_DIA, inicio, now=AGORA) == 2

    def test_calculo_e_idempotente(self):
        inicio = AGORA - timedelta(days=4)
        primeiro = calcular_acesso(10 * SEGUNDOS_POR_DIA, inicio, now=AGORA)
        segundo = calcular_acesso(10 * SEGUNDOS_POR_DIA, inicio, now=AGORA)
        assert primeiro == segundo


class TestFormatarTempoRestante:

    def test_plural(self):
        assert formatar_tempo_restante(5 * SEGUNDOS_POR_DIA, AGORA, now=AGORA) == "5 dias de acesso"

    def test_singular(self):
        inicio = AGORA - timedelta(hours=1)
        assert formatar_tempo_restante(2 * SEGUNDOS_POR_DIA, inicio, now=AGORA) == "1 dia de acesso"

    def test_menos_de_um_dia_mostra_horas_e_minutos(self):
        inicio = AGORA - timedelta(hours=20, minutes=15)
        assert formatar_tempo_restante(SEGUNDOS_POR_DIA, inicio, now=AGORA) == "3h 45min de acesso"

    def test_expirado(self):
        inicio = AGORA - timedelta(days=2)
        assert formatar_tempo_restante(SEGUNDOS_POR_DIA, inicio, now=AGORA) == "Expirado"


def _conta(**kw):
    base = dict(
        is_admin=False,
        is_approved=True,
        access_duration=None,
        access_started_at=None,
        access_expiration_date=None,
    )
    base.update(kw)
    return SimpleNamespace(**base)


def _conta_com_janela(inicio, dias):
    return _conta(
        access_started_at=inicio,
        access_duration=dias * SEGUNDOS_POR_DIA,
        access_expiration_date=inicio + timedelta(days=dias),
    )


class TestPainelAdmin:

    def test_status(self):
        assert status_usuario(_conta(is_admin=True), AGORA) == "Administrador"
        assert status_usuario(_conta(is_approved=False), AGORA) == "Pendente"
        assert status_usuario(_conta(), AGORA) == "Ativo"
        assert status_usuario(_conta_com_janela(AGORA, 12), AGORA) == "12 dias restantes"
        assert status_usuario(_conta_com_janela(AGORA - timedelta(days=20), 10), AGORA) == "Bloqueado"

    def test_estatisticas(self):
        contas = [
            _conta_com_janela(AGORA, 10),
            _conta_com_janela(AGORA - timedelta(days=20), 10),
            _conta(is_approved=False),
            _conta(),
        ]
        assert estatisticas(contas, AGORA) == {
            "total": 4,
            "ativos": 2,
            "bloqueados": 1,
            "pendentes": 1,
        }
