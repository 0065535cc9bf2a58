from fastapi import APIRouter, Depends, status

from januzzi import auth
from januzzi.backend import DocumentStore
from januzzi.dependencies import get_current_identity, get_store, get_usuario_ativo
from januzzi.entitlement import status_usuario
from januzzi.errors import ValidationError
from januzzi.grants import excluir_usuario, garantir_email_livre, garantir_username_livre
from januzzi.log import get_logger
from januzzi.models import UsuarioBD
from januzzi.security import email_sintetico
from januzzi.schemas import Perfil, PerfilInput, RenomearInput, TokenOut, UsuarioLogin, UsuarioOut, UsuarioSignup
from januzzi.validators import formatar_cpf, formatar_telefone, validar_cpf, validar_email, validar_telefone

router = APIRouter(tags=["auth"])
logger = get_logger(__name__)


def usuario_out(conta: UsuarioBD, now=None) -> UsuarioOut:
    acesso = conta.acesso(now)
    return UsuarioOut(
        uid=conta.uid,
        username=conta.username,
        is_admin=conta.is_admin,
        is_approved=conta.is_approved,
        access_duration=conta.access_duration,
        access_started_at=conta.access_started_at,
        access_expiration_date=conta.access_expiration_date,
        created_at=conta.created_at,
        profile=Perfil(
            **conta.profile,
            cpf_formatado=formatar_cpf(conta.cpf) if conta.cpf else None,
            phone_formatado=formatar_telefone(conta.phone) if conta.phone else None,
        ),
        dias_restantes=acesso.remaining_days,
        tempo_restante=acesso.label,
        status=status_usuario(conta, now),
    )


# --- CADASTRO ---
@router.post("/signup", status_code=status.HTTP_201_CREATED)
def cadastrar_usuario(dados: UsuarioSignup, store: DocumentStore = Depends(get_store)):
    conta = auth.cadastrar(store, dados.username, dados.password)
    return {"msg": "Conta criada com sucesso!", "usuario": usuario_out(conta)}


# --- LOGIN ---
@router.post("/login", response_model=TokenOut)
def login(dados: UsuarioLogin, store: DocumentStore = Depends(get_store)):
    identidade = auth.entrar(store, dados.username, dados.password)
    return TokenOut(access_token=auth.token_para(identidade), redirect="/dashboard")


@router.post("/admin/login", response_model=TokenOut)
def login_admin(dados: UsuarioLogin):
    identidade = auth.entrar_admin(dados.username, dados.password)
    return TokenOut(access_token=auth.token_para(identidade), redirect="/admin")


@router.post("/logout")
def logout(identidade: auth.Identidade = Depends(get_current_identity)):
    # Token é stateless: o cliente descarta o token e o cache local
    logger.info("logout", uid=identidade.uid)
    return {"msg": "Sessão encerrada", "redirect": "/login"}


# --- PERFIL ---
@router.get("/me", response_model=UsuarioOut)
def get_me(conta: UsuarioBD = Depends(get_usuario_ativo)):
    return usuario_out(conta)


@router.put("/me/perfil", response_model=UsuarioOut)
def update_perfil(
    dados: PerfilInput,
    conta: UsuarioBD = Depends(get_usuario_ativo),
    store: DocumentStore = Depends(get_store),
):
    campos = {}
    if dados.cpf is not None:
        campos["cpf"] = validar_cpf(dados.cpf)
    if dados.phone is not None:
        campos["phone"] = validar_telefone(dados.phone)
    if dados.email is not None:
        email = validar_email(dados.email)
        garantir_email_livre(store, email, exclude_uid=conta.uid)
        campos["email"] = email

    conta = store.update_user_account(conta.uid, campos)
    return usuario_out(conta)


@router.put("/me/username", response_model=UsuarioOut)
def renomear(
    dados: RenomearInput,
    conta: UsuarioBD = Depends(get_usuario_ativo),
    store: DocumentStore = Depends(get_store),
):
    username = dados.username.strip()
    if not username:
        raise ValidationError("Informe o nome de usuário")
    garantir_username_livre(store, username, exclude_uid=conta.uid)

    # Dois documentos, dois commits: o login acompanha o novo nome
    store.update_identity_email(conta.uid, email_sintetico(username))
    conta = store.update_user_account(conta.uid, {"username": username})
    logger.info("usuario_renomeado", uid=conta.uid, username=username)
    return usuario_out(conta)


# --- EXCLUIR A PRÓPRIA CONTA ---
@router.delete("/me")
def excluir_conta(conta: UsuarioBD = Depends(get_usuario_ativo), store: DocumentStore = Depends(get_store)):
    # Conta da própria identidade: a credencial de login também sai
    excluir_usuario(store, conta.uid, uid_autenticado=conta.uid)
    return {"msg": "Conta removida", "redirect": "/login"}
