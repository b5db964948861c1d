from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pizzaria.core.http.exceptions import HttpClientError, ServerUnreachableError
from pizzaria.utils.logger import logger


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"[API] Requisição inválida em {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Dados inválidos", "errors": exc.errors()},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def http_client_exception_handler(request: Request, exc: HttpClientError):
    """Erro do backend que escapou de uma ação: repassa status e mensagem."""
    if isinstance(exc, ServerUnreachableError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        status_code = exc.status_code or status.HTTP_502_BAD_GATEWAY
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"[API] Erro não tratado em {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Erro interno do servidor"},
    )
