"""
Resolução do ambiente de conexão com a API.

Cada ambiente é uma variante imutável (Local, Tunnel, Production) e a escolha é
feita uma única vez por `resolve_environment`, uma função pura das settings.

Precedência (a primeira regra que casar vence):
1. API_URL preenchida -> Production com a URL literal (esquema preservado)
2. CLOUDFLARE_TUNNEL_URL preenchida -> Tunnel com a URL, sempre seguro
3. APP_ENV=production -> Tunnel com o domínio padrão seguro
4. ENVIRONMENT_TYPE (cloudflare/production -> domínio padrão; local/development
   ou desconhecido -> http://localhost:<BACKEND_PORT>)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Union
from urllib.parse import urlsplit

from pizzaria.config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

DEFAULT_TUNNEL_URL = "https://talkfoodsoftwerk.net"
DEFAULT_BACKEND_PORT = 8081
DEFAULT_FRONTEND_PORT = 3000
SAFE_DEFAULT_URL = f"http://localhost:{DEFAULT_BACKEND_PORT}"


class EnvironmentType(str, Enum):
    LOCAL = "local"
    DEVELOPMENT = "development"
    CLOUDFLARE_TUNNEL = "cloudflare"
    PRODUCTION = "production"


@dataclass(frozen=True)
class LocalEnvironment:
    base_url: str
    hostname: str = "localhost"
    backend_port: int = DEFAULT_BACKEND_PORT
    frontend_port: int = DEFAULT_FRONTEND_PORT
    protocol: str = "http"
    is_secure: bool = False
    kind: Literal["local"] = "local"


@dataclass(frozen=True)
class TunnelEnvironment:
    base_url: str
    hostname: str
    backend_port: int = DEFAULT_BACKEND_PORT
    frontend_port: int = DEFAULT_FRONTEND_PORT
    protocol: str = "https"
    is_secure: bool = True
    kind: Literal["tunnel"] = "tunnel"


@dataclass(frozen=True)
class ProductionEnvironment:
    base_url: str
    hostname: str
    protocol: str = "https"
    is_secure: bool = True
    backend_port: int = 443
    frontend_port: int = 443
    kind: Literal["production"] = "production"


EnvironmentConfig = Union[LocalEnvironment, TunnelEnvironment, ProductionEnvironment]


def extrair_hostname(url: str) -> str:
    """Hostname da URL; 'localhost' quando a URL não puder ser interpretada."""
    try:
        hostname = urlsplit(url).hostname
    except ValueError as e:
        logger.warning(f"[Environment] URL inválida '{url}': {e}")
        return "localhost"
    if not hostname:
        logger.warning(f"[Environment] URL sem hostname: '{url}'")
        return "localhost"
    return hostname


def _local(porta: int) -> LocalEnvironment:
    return LocalEnvironment(base_url=f"http://localhost:{porta}", backend_port=porta)


def _tunnel(url: str) -> TunnelEnvironment:
    return TunnelEnvironment(base_url=url, hostname=extrair_hostname(url))


def _production(url: str) -> ProductionEnvironment:
    try:
        scheme = urlsplit(url).scheme.lower()
    except ValueError:
        scheme = ""
    protocol = scheme or "https"
    return ProductionEnvironment(
        base_url=url,
        hostname=extrair_hostname(url),
        protocol=protocol,
        is_secure=protocol == "https",
    )


def resolve_environment(cfg: Settings) -> EnvironmentConfig:
    """Escolhe a variante de ambiente. Nunca levanta exceção."""
    try:
        if cfg.api_url:
            return _production(cfg.api_url)

        if cfg.cloudflare_tunnel_url:
            return _tunnel(cfg.cloudflare_tunnel_url)

        if cfg.is_production:
            return _tunnel(DEFAULT_TUNNEL_URL)

        env_type = (cfg.environment_type or "").strip().lower()
        if env_type in (EnvironmentType.CLOUDFLARE_TUNNEL.value, EnvironmentType.PRODUCTION.value):
            return _tunnel(DEFAULT_TUNNEL_URL)

        return _local(cfg.backend_port)
    except Exception as e:
        logger.error(f"[Environment] Erro ao resolver ambiente, usando padrão {SAFE_DEFAULT_URL}: {e}")
        return LocalEnvironment(base_url=SAFE_DEFAULT_URL)


class EnvironmentConfigManager:
    """Guarda o ambiente resolvido durante a vida da instância."""

    def __init__(self, cfg: Optional[Settings] = None):
        self._settings = cfg or default_settings
        self._config: Optional[EnvironmentConfig] = None

    def resolve(self) -> EnvironmentConfig:
        if self._config is None:
            self._config = resolve_environment(self._settings)
            logger.info(f"[Environment] Ambiente '{self._config.kind}' -> {self._config.base_url}")
        return self._config

    def get_api_base_url(self) -> str:
        return self.resolve().base_url

    def override(self, config: EnvironmentConfig) -> None:
        self._config = config

    def reset(self, cfg: Optional[Settings] = None) -> None:
        if cfg is not None:
            self._settings = cfg
        self._config = None
