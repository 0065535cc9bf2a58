"""
Erros de domínio.

Cada erro carrega a mensagem que vai para o usuário e o status HTTP usado
pelos handlers registrados em ``januzzi.routes.main``.
"""

from typing import Optional

LOGIN_EXPIRADO = "/login?expired=true"


class JanuzziError(Exception):
    status_code = 400
    mensagem = "Ocorreu um erro inesperado"

    def __init__(self, mensagem: Optional[str] = None):
        self.mensagem = mensagem or self.mensagem
        super().__init__(self.mensagem)


class InvalidCredentials(JanuzziError):
    status_code = 401
    mensagem = "Usuário ou senha inválidos"


class AccountNotFound(JanuzziError):
    status_code = 404
    mensagem = "Usuário não encontrado"


class AccountExpired(JanuzziError):
    status_code = 403
    mensagem = "Seu acesso expirou. Renove para continuar."
    redirect = LOGIN_EXPIRADO


class AccountPendingApproval(JanuzziError):
    status_code = 403
    mensagem = "Sua conta está aguardando aprovação do administrador"


class DuplicateIdentifier(JanuzziError):
    status_code = 409
    mensagem = "Identificador já está em uso"


class ValidationError(JanuzziError):
    status_code = 422
    mensagem = "Dados inválidos"


class BackendUnavailable(JanuzziError):
    status_code = 503
    mensagem = "Serviço indisponível. Tente novamente em alguns minutos."
