"""
Configuração do structlog.

Todos os módulos pegam o logger com ``get_logger(__name__)`` e registram
eventos no formato chave/valor.
"""

import logging
import sys

import structlog

from januzzi import config

_configurado = False


def configurar_logs(nivel: str = None, json: bool = None):
    global _configurado

    nivel = (nivel or config.LOG_LEVEL).upper()
    json = config.LOG_JSON if json is None else json

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, nivel, logging.INFO),
    )

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configurado = True


def get_logger(name: str):
    if not _configurado:
        configurar_logs()
    return structlog.get_logger(name)
