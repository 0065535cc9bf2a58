from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse

router = APIRouter(tags=["paginas"])

LAYOUT = """<!doctype html>
<html lang="pt-BR">
<head><meta charset="utf-8"><title>Januzzi Finance</title></head>
<body>{conteudo}</body>
</html>"""


def _pagina(conteudo: str, status_code: int = 200):
    return HTMLResponse(LAYOUT.format(conteudo=conteudo), status_code=status_code)


@router.get("/", include_in_schema=False)
def home():
    return {"msg": "API Januzzi Finance Online 🚀"}


@router.get("/login", response_class=HTMLResponse)
def pagina_login(expired: bool = Query(False)):
    aviso = ""
    if expired:
        aviso = "<p class='aviso'>Seu acesso expirou. Fale com o administrador para renovar.</p>"
    return _pagina(f"<h1>Acesso ao Sistema</h1>{aviso}")


@router.get("/dashboard", response_class=HTMLResponse)
def pagina_dashboard():
    return _pagina("<h1>Painel</h1>")


@router.get("/admin", response_class=HTMLResponse)
def pagina_admin():
    return _pagina("<h1>Gerenciamento de Usuários</h1>")


@router.get("/manutencao", response_class=HTMLResponse)
def pagina_manutencao():
    return _pagina("<h1>Sistema em manutenção</h1><p>Voltamos em breve.</p>", status_code=503)
