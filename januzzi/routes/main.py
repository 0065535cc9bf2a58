from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from januzzi.errors import AccountExpired, BackendUnavailable, JanuzziError
from januzzi.log import get_logger
from januzzi.middleware import MaintenanceMiddleware
from januzzi.routes import admin, auth, dados, empresas, paginas, sessao

logger = get_logger(__name__)

app = FastAPI(title="Januzzi Finance")

# ⚠️ NÃO usar Base.metadata.create_all quando há Alembic
# As tabelas são criadas via migrations

# CORS (Permite que o navegador aceite requisições)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MaintenanceMiddleware)


@app.exception_handler(JanuzziError)
def erro_de_dominio(request: Request, exc: JanuzziError):
    conteudo = {"detail": exc.mensagem}
    if isinstance(exc, AccountExpired):
        conteudo["redirect"] = exc.redirect
    return JSONResponse(status_code=exc.status_code, content=conteudo)


@app.exception_handler(OperationalError)
def banco_indisponivel(request: Request, exc: OperationalError):
    logger.error("backend_indisponivel", path=request.url.path, erro=str(exc))
    erro = BackendUnavailable()
    return JSONResponse(status_code=erro.status_code, content={"detail": erro.mensagem})


app.include_router(paginas.router)
app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(dados.router)
app.include_router(empresas.router)
app.include_router(sessao.router)
