import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv

# Carrega o .env manualmente se estiver fora do Docker
if not os.getenv("RUNNING_IN_DOCKER"):
    dotenv_path = Path(__file__).resolve().parents[2] / ".env"
    load_dotenv(dotenv_path=dotenv_path)


def _bool_env(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _numero_env(env: Mapping[str, str], nome: str, default, conversor=float):
    """Converte a variável; valor malformado cai no padrão com aviso."""
    bruto = env.get(nome)
    if bruto is None or not str(bruto).strip():
        return default
    try:
        return conversor(str(bruto).strip())
    except ValueError:
        logging.getLogger(__name__).warning(
            f"[Config] {nome}={bruto!r} inválido; usando {default}"
        )
        return default


@dataclass(frozen=True)
class Settings:
    """Configuração da aplicação lida das variáveis de ambiente."""

    # Resolução da URL da API (ordem de precedência em core.environment)
    api_url: str = ""
    cloudflare_tunnel_url: str = ""
    environment_type: str = "local"
    app_env: str = "development"
    backend_port: int = 8081

    # Cliente HTTP
    http_timeout_seconds: float = 15.0

    # Polling das telas do painel
    orders_poll_seconds: float = 5.0
    order_detail_poll_seconds: float = 3.0

    # Cookie de sessão
    auth_cookie_name: str = "token_pizzaria"
    auth_cookie_max_age: int = 60 * 60 * 24 * 30

    # FastAPI
    cors_origins: List[str] = field(default_factory=list)
    cors_allow_all: bool = False
    enable_docs: bool = True

    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"


def carregar_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Monta um `Settings` a partir de `environ` (padrão: os.environ)."""
    env = os.environ if environ is None else environ

    return Settings(
        api_url=(env.get("API_URL") or "").strip(),
        cloudflare_tunnel_url=(env.get("CLOUDFLARE_TUNNEL_URL") or "").strip(),
        environment_type=(env.get("ENVIRONMENT_TYPE") or "local").strip(),
        app_env=(env.get("APP_ENV") or "development").strip(),
        backend_port=_numero_env(env, "BACKEND_PORT", 8081, int),
        http_timeout_seconds=_numero_env(env, "HTTP_TIMEOUT_SECONDS", 15.0),
        orders_poll_seconds=_numero_env(env, "ORDERS_POLL_SECONDS", 5.0),
        order_detail_poll_seconds=_numero_env(env, "ORDER_DETAIL_POLL_SECONDS", 3.0),
        auth_cookie_name=env.get("AUTH_COOKIE_NAME", "token_pizzaria"),
        cors_origins=[o.strip() for o in env.get("CORS_ORIGINS", "").split(",") if o.strip()],
        cors_allow_all=_bool_env(env.get("CORS_ALLOW_ALL")),
        enable_docs=_bool_env(env.get("ENABLE_DOCS"), default=True),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
    )


settings = carregar_settings()

# Atalhos no nível do módulo
API_URL = settings.api_url
CLOUDFLARE_TUNNEL_URL = settings.cloudflare_tunnel_url
ENVIRONMENT_TYPE = settings.environment_type
APP_ENV = settings.app_env
CORS_ORIGINS = settings.cors_origins
CORS_ALLOW_ALL = settings.cors_allow_all
ENABLE_DOCS = settings.enable_docs
LOG_LEVEL = settings.log_level
