"""
Contexto da aplicação: instâncias explícitas dos colaboradores compartilhados.

Ambiente resolvido, clientes HTTP, adapter e barramento de eventos são criados
aqui e repassados aos serviços, em vez de viverem como estado global de
módulo. O contexto padrão do processo existe só para a camada web.
"""
from __future__ import annotations

from typing import Optional

import httpx

from pizzaria.config.settings import Settings, settings as default_settings
from pizzaria.core.environment import EnvironmentConfigManager
from pizzaria.core.events import OrderEventBus, OrderEventHelpers
from pizzaria.core.http.adapter import ApiAdapter
from pizzaria.core.http.client import AuthenticatedHttpClient, PublicHttpClient


class AppContext:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        environment: Optional[EnvironmentConfigManager] = None,
        events: Optional[OrderEventBus] = None,
    ):
        self.settings = settings or default_settings
        self.environment = environment or EnvironmentConfigManager(self.settings)
        self.events = events or OrderEventBus()
        self.notify = OrderEventHelpers(self.events)
        self._transport = transport
        self._criar_clientes()

    def _criar_clientes(self) -> None:
        # Log de requisições apenas fora de produção
        verbose = not self.settings.is_production
        self.http = AuthenticatedHttpClient(
            self.environment,
            timeout=self.settings.http_timeout_seconds,
            verbose=verbose,
            transport=self._transport,
        )
        self.public_http = PublicHttpClient(
            self.environment,
            timeout=self.settings.http_timeout_seconds,
            verbose=verbose,
            transport=self._transport,
        )
        self.api = ApiAdapter(self.http)

    async def reset_clients(self) -> None:
        """Fecha e recria os dois clientes HTTP (e o adapter que os usa)."""
        await self.aclose()
        self._criar_clientes()

    async def aclose(self) -> None:
        await self.http.aclose()
        await self.public_http.aclose()


_default_context: Optional[AppContext] = None


def get_app_context() -> AppContext:
    global _default_context
    if _default_context is None:
        _default_context = AppContext(default_settings)
    return _default_context


def set_app_context(context: AppContext) -> None:
    global _default_context
    _default_context = context


def reset_app_context() -> None:
    global _default_context
    _default_context = None
