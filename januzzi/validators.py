"""Validação e formatação de CPF, CNPJ, telefone e e-mail."""

import re

from januzzi.errors import ValidationError

EMAIL_RE = re.compile(r"^([^@\s]+)@([^@\s]+)\.[^@\s]+$")
TAMANHO_MINIMO_SENHA = 6


def somente_digitos(valor: str) -> str:
    return re.sub(r"\D", "", valor or "")


def _digito_verificador(digitos: str, pesos) -> int:
    soma = sum(int(d) * p for d, p in zip(digitos, pesos))
    resto = (soma * 10) % 11
    return 0 if resto == 10 else resto


def cpf_valido(cpf: str) -> bool:
    cpf = somente_digitos(cpf)
    if len(cpf) != 11:
        return False
    # 111.111.111-11 e afins passam no cálculo mas não existem
    if cpf == cpf[0] * 11:
        return False
    if _digito_verificador(cpf[:9], range(10, 1, -1)) != int(cpf[9]):
        return False
    return _digito_verificador(cpf[:10], range(11, 1, -1)) == int(cpf[10])


def cnpj_valido(cnpj: str) -> bool:
    cnpj = somente_digitos(cnpj)
    if len(cnpj) != 14 or cnpj == cnpj[0] * 14:
        return False

    def digito(base, pesos):
        resto = sum(int(d) * p for d, p in zip(base, pesos)) % 11
        return 0 if resto < 2 else 11 - resto

    pesos = [5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]
    if digito(cnpj[:12], pesos) != int(cnpj[12]):
        return False
    return digito(cnpj[:13], [6] + pesos) == int(cnpj[13])


def telefone_valido(telefone: str) -> bool:
    return 11 <= len(somente_digitos(telefone)) <= 15


def email_valido(email: str) -> bool:
    return bool(email) and EMAIL_RE.match(email) is not None


def formatar_cpf(cpf: str) -> str:
    d = somente_digitos(cpf)[:11]
    if len(d) != 11:
        return d
    return f"{d[:3]}.{d[3:6]}.{d[6:9]}-{d[9:]}"


def formatar_telefone(telefone: str) -> str:
    d = somente_digitos(telefone)[:11]
    if len(d) != 11:
        return d
    return f"({d[:2]}) {d[2:7]}-{d[7:]}"


def formatar_cnpj(cnpj: str) -> str:
    d = somente_digitos(cnpj)[:14]
    if len(d) != 14:
        return d
    return f"{d[:2]}.{d[2:5]}.{d[5:8]}/{d[8:12]}-{d[12:]}"


# --- Versões que levantam erro (usadas nas rotas) ---

def validar_cpf(cpf: str) -> str:
    if not cpf_valido(cpf):
        raise ValidationError("CPF inválido")
    return somente_digitos(cpf)


def validar_cnpj(cnpj: str) -> str:
    if not cnpj_valido(cnpj):
        raise ValidationError("CNPJ inválido")
    return somente_digitos(cnpj)


def validar_telefone(telefone: str) -> str:
    if not telefone_valido(telefone):
        raise ValidationError("Número de telefone inválido")
    return somente_digitos(telefone)


def validar_email(email: str) -> str:
    email = (email or "").strip()
    if not email_valido(email):
        raise ValidationError("E-mail inválido")
    return email


def validar_senha(password: str) -> str:
    if len(password or "") < TAMANHO_MINIMO_SENHA:
        raise ValidationError(f"A senha deve ter pelo menos {TAMANHO_MINIMO_SENHA} caracteres")
    return password
