"""Januzzi Finance: controle financeiro com janela de acesso por usuário."""

__version__ = "1.0.0"
