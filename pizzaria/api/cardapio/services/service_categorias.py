from __future__ import annotations

from typing import List, Optional

from pizzaria.api.cardapio.schemas.schema_cardapio import Categoria, CriarCategoriaRequest
from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao
from pizzaria.core.context import AppContext
from pizzaria.core.http.client import HttpRequestOptions
from pizzaria.core.http.exceptions import HttpClientError
from pizzaria.utils.logger import logger


class CategoriasService:
    def __init__(self, ctx: AppContext):
        self.api = ctx.api

    async def listar(self, token: Optional[str]) -> List[Categoria]:
        dados = await self.api.get("/api/category", HttpRequestOptions(token=token, silent404=True))
        if isinstance(dados, dict):
            dados = dados.get("data")
        return [Categoria.model_validate(c) for c in (dados or [])]

    async def criar(self, data: CriarCategoriaRequest, token: Optional[str]) -> ResultadoAcao:
        if not token:
            return ResultadoAcao.falha("Erro ao criar categoria")
        nome = data.name.strip()
        if not nome:
            return ResultadoAcao.falha("Nome da categoria é obrigatório")

        try:
            criada = await self.api.post("/api/category", {"name": nome}, HttpRequestOptions(token=token))
        except HttpClientError as e:
            logger.error(f"[Categorias] Erro ao criar categoria: {e}")
            return ResultadoAcao.falha(e.message or "Erro ao criar categoria")

        logger.info(f"[Categorias] Categoria criada: {nome}")
        return ResultadoAcao.ok(criada if isinstance(criada, dict) else None)
