# pizzaria/api/auth/auth_controller.py

from fastapi import APIRouter, Depends, HTTPException, Response, status

from pizzaria.api.auth.schema_auth import LoginRequest, LoginResponse, RegisterRequest, Usuario
from pizzaria.api.auth.service_auth import AuthService, opcoes_cookie
from pizzaria.core.admin_dependencies import get_context, get_current_user
from pizzaria.core.context import AppContext

router = APIRouter(tags=["auth"], prefix="/auth")


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    ctx: AppContext = Depends(get_context),
):
    resultado = await AuthService(ctx).login_action(payload.email, payload.password)
    if not resultado.success:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=resultado.error)

    # Token fica só no cookie HTTP-only
    response.set_cookie(value=resultado.data["token"], **opcoes_cookie(ctx.settings))
    return LoginResponse(redirect_to=resultado.data["redirect_to"])


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(ctx: AppContext = Depends(get_context)):
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(ctx.settings.auth_cookie_name, path="/")
    return response


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, ctx: AppContext = Depends(get_context)):
    resultado = await AuthService(ctx).register_action(payload.name, payload.email, payload.password)
    if not resultado.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=resultado.error)
    return resultado.data


@router.get("/me", response_model=Usuario, summary="Retorna o usuário atual a partir do cookie de sessão")
def obter_usuario_atual(current_user: Usuario = Depends(get_current_user)):
    return current_user
