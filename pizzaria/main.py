from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from pizzaria.config.settings import CORS_ALLOW_ALL, CORS_ORIGINS, ENABLE_DOCS
from pizzaria.core.context import get_app_context
from pizzaria.core.exception_handlers import (
    general_exception_handler,
    http_client_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from pizzaria.core.http.exceptions import HttpClientError
from pizzaria.utils.logger import logger

from pizzaria.api.auth import auth_controller
from pizzaria.api.caixas.router.router import router as caixa_router
from pizzaria.api.cardapio.router.router import api_cardapio
from pizzaria.api.pedidos.router.router import api_pedidos
from pizzaria.api.relatorios.router.router import router as relatorios_router

# ──────────────────────────
# Instância FastAPI
# ──────────────────────────
app = FastAPI(
    title="API Pizzaria",
    version="1.0.0",
    description="Pedidos, cozinha, caixa, cardápio e comanda da pizzaria",
    docs_url=("/swagger" if ENABLE_DOCS else None),
    redoc_url=("/redoc" if ENABLE_DOCS else None),
    openapi_url=("/openapi.json" if ENABLE_DOCS else None),
    redirect_slashes=False,
)

# ───────────────────────────
# Exception Handlers Globais
# ───────────────────────────
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(HttpClientError, http_client_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# ───────────────────────────
# CORS
# ───────────────────────────
# - CORS_ALLOW_ALL=true => allow_origins=["*"], allow_credentials=False
# - Caso contrário => CORS_ORIGINS (vazio cai para ["*"]); credenciais só com origens explícitas
if CORS_ALLOW_ALL:
    allowed_origins = ["*"]
    allow_credentials = False
else:
    allowed_origins = CORS_ORIGINS or ["*"]
    allow_credentials = bool(CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ───────────────────────────
# Startup / Shutdown
# ───────────────────────────
@app.on_event("startup")
async def startup():
    ctx = get_app_context()
    logger.info(f"Iniciando API. Backend em {ctx.environment.get_api_base_url()}")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Encerrando API...")
    await get_app_context().aclose()
    logger.info("API encerrada.")


# ───────────────────────────
# Rotas
# ───────────────────────────
@app.get("/")
async def root():
    return {"status": "ok", "message": "API is running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}


app.include_router(auth_controller.router)
app.include_router(api_pedidos)
app.include_router(caixa_router)
app.include_router(api_cardapio)
app.include_router(relatorios_router)
