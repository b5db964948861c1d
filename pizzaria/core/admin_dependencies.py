# pizzaria/core/admin_dependencies.py

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from pizzaria.api.auth.schema_auth import Usuario
from pizzaria.api.auth.service_auth import AuthService
from pizzaria.core.context import AppContext, get_app_context
from pizzaria.utils.logger import logger

credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Não autenticado",
    headers={"WWW-Authenticate": "Bearer"},
)

forbidden_exception = HTTPException(
    status_code=status.HTTP_403_FORBIDDEN,
    detail="Você não tem permissão para acessar este recurso",
)


def get_context() -> AppContext:
    return get_app_context()


def get_optional_token(request: Request, ctx: AppContext = Depends(get_context)) -> Optional[str]:
    """Token do cookie de sessão; na falta dele, do header Authorization."""
    token = request.cookies.get(ctx.settings.auth_cookie_name)
    if token:
        return token

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.replace("Bearer ", "", 1).strip() or None
    return None


def get_token(token: Optional[str] = Depends(get_optional_token)) -> str:
    if not token:
        logger.warning("[AUTH] Cookie de sessão e cabeçalho Authorization ausentes.")
        raise credentials_exception
    return token


async def get_current_user(
    token: str = Depends(get_token),
    ctx: AppContext = Depends(get_context),
) -> Usuario:
    user = await AuthService(ctx).get_user(token)
    if user is None:
        raise credentials_exception
    return user


def require_admin(current_user: Usuario = Depends(get_current_user)) -> Usuario:
    if not current_user.is_admin:
        logger.warning(f"[AUTH] Acesso negado. role={current_user.role}")
        raise forbidden_exception
    return current_user
