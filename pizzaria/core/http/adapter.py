"""
Adapter de compatibilidade com a chamada legada `request(endpoint, options)`.

As telas antigas montavam `options` com `method` e um `body` já serializado
em string; o adapter desserializa esse corpo e despacha para os métodos
tipados do cliente HTTP, evitando JSON codificado duas vezes.
"""
from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, Mapping, Union

from pizzaria.core.http.client import BaseHttpClient, HttpRequestOptions

OptionsLike = Union[HttpRequestOptions, Mapping[str, Any], None]


class ApiAdapter:
    def __init__(self, client: BaseHttpClient):
        self.client = client

    async def request(self, endpoint: str, options: OptionsLike = None) -> Any:
        opts = HttpRequestOptions.coerce(options)
        method = (opts.method or "GET").upper()

        if method == "GET":
            return await self.client.get(endpoint, opts)
        if method == "POST":
            return await self.client.post(endpoint, self._parse_body(opts.body), replace(opts, body=None))
        if method == "PUT":
            return await self.client.put(endpoint, self._parse_body(opts.body), replace(opts, body=None))
        if method == "DELETE":
            return await self.client.delete(endpoint, opts)
        return await self.client.request(endpoint, opts)

    @staticmethod
    def _parse_body(body: Any) -> Any:
        if isinstance(body, str):
            try:
                return json.loads(body)
            except ValueError:
                return body
        return body

    async def get(self, endpoint: str, options: OptionsLike = None) -> Any:
        return await self.client.get(endpoint, HttpRequestOptions.coerce(options))

    async def post(self, endpoint: str, data: Any = None, options: OptionsLike = None) -> Any:
        return await self.client.post(endpoint, data, HttpRequestOptions.coerce(options))

    async def put(self, endpoint: str, data: Any = None, options: OptionsLike = None) -> Any:
        return await self.client.put(endpoint, data, HttpRequestOptions.coerce(options))

    async def delete(self, endpoint: str, options: OptionsLike = None) -> Any:
        return await self.client.delete(endpoint, HttpRequestOptions.coerce(options))


def get_api_adapter() -> ApiAdapter:
    """Adapter do contexto padrão do processo (mesma instância a vida toda)."""
    from pizzaria.core.context import get_app_context

    return get_app_context().api


async def api_client(endpoint: str, options: OptionsLike = None) -> Any:
    """Atalho legado. Prefira `get_api_adapter()` ou o `AppContext` explícito."""
    return await get_api_adapter().request(endpoint, options)
