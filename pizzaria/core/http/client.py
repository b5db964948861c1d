"""
Clientes HTTP para a API do backend.

`AuthenticatedHttpClient` injeta o token Bearer; `PublicHttpClient` nunca envia
o cabeçalho Authorization. Ambos compartilham a montagem da requisição e o
tratamento das respostas definidos em `BaseHttpClient`.
"""
from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

import httpx

from pizzaria.core.environment import EnvironmentConfigManager
from pizzaria.core.http.exceptions import HttpClientError, HttpError, ServerUnreachableError
from pizzaria.utils.logger import logger


@dataclass
class FormData:
    """Corpo multipart: enviado sem serialização JSON e sem Content-Type fixo."""

    fields: Dict[str, Any] = field(default_factory=dict)
    files: Dict[str, Any] = field(default_factory=dict)


# Chaves do formato antigo de `options` (camelCase)
_OPCOES_LEGADAS = {"skipAuth": "skip_auth"}


@dataclass
class HttpRequestOptions:
    method: str = "GET"
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    token: Optional[str] = None
    silent404: bool = False
    skip_auth: bool = False
    params: Optional[Dict[str, Any]] = None

    @classmethod
    def coerce(cls, value: "HttpRequestOptions | Mapping[str, Any] | None") -> "HttpRequestOptions":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value

        conhecidos = set(cls.__dataclass_fields__)
        kwargs: Dict[str, Any] = {}
        for chave, valor in dict(value).items():
            nome = _OPCOES_LEGADAS.get(chave, chave)
            if nome not in conhecidos:
                logger.warning(f"[HTTP] Opção de requisição desconhecida ignorada: {chave}")
                continue
            kwargs[nome] = valor
        return cls(**kwargs)


def _corpo_vazio(data: Any) -> bool:
    if data is None:
        return True
    if isinstance(data, (str, bytes, dict, list, tuple)) and len(data) == 0:
        return True
    return False


class BaseHttpClient(ABC):
    def __init__(
        self,
        environment: EnvironmentConfigManager,
        *,
        timeout: float = 15.0,
        verbose: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.environment = environment
        self.timeout = timeout
        self.verbose = verbose
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    def build_url(self, endpoint: str) -> str:
        base_url = self.environment.get_api_base_url()
        clean_base = base_url[:-1] if base_url.endswith("/") else base_url
        clean_endpoint = endpoint if endpoint.startswith("/") else f"/{endpoint}"
        return f"{clean_base}{clean_endpoint}"

    @abstractmethod
    def build_headers(self, options: HttpRequestOptions) -> Dict[str, str]:
        raise NotImplementedError

    def _base_headers(self, options: HttpRequestOptions) -> Dict[str, str]:
        headers = dict(options.headers or {})
        if not isinstance(options.body, FormData):
            headers["Content-Type"] = "application/json"
        return headers

    @staticmethod
    def serialize_body(data: Any) -> Any:
        if _corpo_vazio(data):
            return None
        if isinstance(data, FormData):
            return data
        return json.dumps(data)

    # ------------------------------------------------------------------ #
    async def request(self, endpoint: str, options: Optional[HttpRequestOptions] = None) -> Any:
        options = HttpRequestOptions.coerce(options)
        url = self.build_url(endpoint)
        headers = self.build_headers(options)
        return await self._execute(url, options, headers)

    async def get(self, endpoint: str, options: Optional[HttpRequestOptions] = None) -> Any:
        options = HttpRequestOptions.coerce(options)
        return await self.request(endpoint, replace(options, method="GET", body=None))

    async def post(self, endpoint: str, data: Any = None, options: Optional[HttpRequestOptions] = None) -> Any:
        options = HttpRequestOptions.coerce(options)
        return await self.request(endpoint, replace(options, method="POST", body=self.serialize_body(data)))

    async def put(self, endpoint: str, data: Any = None, options: Optional[HttpRequestOptions] = None) -> Any:
        options = HttpRequestOptions.coerce(options)
        return await self.request(endpoint, replace(options, method="PUT", body=self.serialize_body(data)))

    async def delete(self, endpoint: str, options: Optional[HttpRequestOptions] = None) -> Any:
        options = HttpRequestOptions.coerce(options)
        return await self.request(endpoint, replace(options, method="DELETE"))

    # ------------------------------------------------------------------ #
    async def _execute(self, url: str, options: HttpRequestOptions, headers: Dict[str, str]) -> Any:
        method = (options.method or "GET").upper()
        self._log_request(method, url)

        kwargs: Dict[str, Any] = {"headers": headers, "params": options.params}
        body = options.body
        if isinstance(body, FormData):
            kwargs["data"] = body.fields
            kwargs["files"] = body.files or None
        elif isinstance(body, (str, bytes)):
            kwargs["content"] = body
        elif not _corpo_vazio(body):
            kwargs["content"] = json.dumps(body)

        try:
            response = await self._get_client().request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"[HTTP] Falha de conexão em {method} {url}: {e}")
            raise ServerUnreachableError(self.environment.get_api_base_url()) from e
        except httpx.HTTPError as e:
            raise HttpClientError(f"Erro desconhecido ao fazer requisição para {url}") from e

        if not response.is_success:
            if response.status_code == 404 and options.silent404:
                return None
            raise self._create_error(response)

        return self._parse_response(response)

    @staticmethod
    def _parse_response(response: httpx.Response) -> Any:
        text = response.text
        if not text or not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError:
            return None

    @staticmethod
    def _create_error(response: httpx.Response) -> HttpError:
        message = f"HTTP Error: {response.status_code}"
        text = response.text
        if text:
            try:
                payload = json.loads(text)
            except ValueError:
                message = text
            else:
                if isinstance(payload, dict):
                    message = payload.get("error") or payload.get("message") or message
        return HttpError(str(message), status_code=response.status_code)

    def _log_request(self, method: str, url: str) -> None:
        if self.verbose:
            logger.info(f"[HTTP] {method} {url}")


class AuthenticatedHttpClient(BaseHttpClient):
    """Cliente padrão do painel: envia `Authorization: Bearer <token>`."""

    def build_headers(self, options: HttpRequestOptions) -> Dict[str, str]:
        headers = self._base_headers(options)
        if options.token and not options.skip_auth:
            headers["Authorization"] = f"Bearer {options.token}"
        return headers


class PublicHttpClient(BaseHttpClient):
    """Cliente das rotas públicas (cardápio, comanda): nunca autentica."""

    def build_headers(self, options: HttpRequestOptions) -> Dict[str, str]:
        return self._base_headers(options)
