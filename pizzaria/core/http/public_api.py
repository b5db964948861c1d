"""Atalhos para requisições públicas (cardápio e comanda, sem autenticação)."""
from __future__ import annotations

import asyncio
from typing import Any, List, Sequence

from pizzaria.core.http.client import PublicHttpClient


async def fetch_public(client: PublicHttpClient, endpoint: str) -> Any:
    return await client.get(endpoint)


async def post_public(client: PublicHttpClient, endpoint: str, data: Any = None) -> Any:
    return await client.post(endpoint, data)


async def fetch_public_all(client: PublicHttpClient, endpoints: Sequence[str]) -> List[Any]:
    """GETs em paralelo; o resultado segue a ordem de `endpoints`."""
    return list(await asyncio.gather(*(fetch_public(client, e) for e in endpoints)))
