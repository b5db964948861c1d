"""
Autenticação do painel: login, cadastro, usuário atual e política do cookie
de sessão (`token_pizzaria`).
"""
from typing import Any, Dict, Optional

from pizzaria.api.auth.schema_auth import AuthResponse, Usuario
from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao
from pizzaria.config.settings import Settings
from pizzaria.core.context import AppContext
from pizzaria.core.http.client import HttpRequestOptions
from pizzaria.core.http.exceptions import HttpClientError, ServerUnreachableError
from pizzaria.utils.logger import logger

MSG_LOGIN_SEM_CONEXAO = (
    "Não foi possível conectar ao servidor. Verifique se o backend está rodando e acessível."
)
MSG_LOGIN_INVALIDO = "Email ou senha incorretos."
MSG_SERVICO_NAO_ENCONTRADO = "Serviço não encontrado. Verifique a URL da API."
MSG_LOGIN_FALHOU = "Erro ao fazer o login. Tente novamente."


def opcoes_cookie(settings: Settings) -> Dict[str, Any]:
    """Parâmetros de `Response.set_cookie` para o token de sessão."""
    return {
        "key": settings.auth_cookie_name,
        "max_age": settings.auth_cookie_max_age,
        "path": "/",
        "httponly": True,
        "samesite": "strict",
        "secure": settings.is_production,
    }


def mensagem_erro_login(erro: Exception) -> str:
    if isinstance(erro, ServerUnreachableError):
        return MSG_LOGIN_SEM_CONEXAO
    if isinstance(erro, HttpClientError):
        if erro.status_code == 401:
            return MSG_LOGIN_INVALIDO
        if erro.status_code == 404:
            return MSG_SERVICO_NAO_ENCONTRADO
        return erro.message or MSG_LOGIN_FALHOU
    return MSG_LOGIN_FALHOU


class AuthService:
    def __init__(self, ctx: AppContext):
        self.ctx = ctx

    async def login_action(self, email: str, password: str) -> ResultadoAcao:
        """`data` traz `token` e `redirect_to` em caso de sucesso."""
        try:
            resposta = await self.ctx.api.post(
                "/api/auth/session",
                {"email": email, "password": password},
                HttpRequestOptions(skip_auth=True),
            )
            auth = AuthResponse.model_validate(resposta or {})
        except Exception as e:
            logger.error(f"[Auth] Erro no login: {e}")
            return ResultadoAcao.falha(mensagem_erro_login(e))

        return ResultadoAcao.ok({"token": auth.token, "redirect_to": "/dashboard"})

    async def register_action(self, name: str, email: str, password: str) -> ResultadoAcao:
        try:
            await self.ctx.api.post(
                "/api/auth/users",
                {"name": name, "email": email, "password": password},
                HttpRequestOptions(skip_auth=True),
            )
        except HttpClientError as e:
            logger.error(f"[Auth] Erro ao criar conta: {e}")
            return ResultadoAcao.falha(e.message or "Erro ao criar conta")
        return ResultadoAcao.ok({"redirect_to": "/login"})

    async def get_user(self, token: Optional[str]) -> Optional[Usuario]:
        """Usuário do token; `None` sem token ou em qualquer erro."""
        if not token:
            return None
        try:
            dados = await self.ctx.api.get("/api/auth/me", HttpRequestOptions(token=token))
            return Usuario.model_validate(dados) if dados else None
        except Exception as e:
            logger.warning(f"[Auth] Não foi possível obter o usuário atual: {e}")
            return None

