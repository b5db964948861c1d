"""
Cardápio público e pedido feito pelo cliente (sem login).
"""
from __future__ import annotations

from typing import Any, Dict

from pizzaria.api.cardapio.schemas.schema_cardapio import (
    CardapioPublico,
    Categoria,
    PedidoPublicoRequest,
    Produto,
)
from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao
from pizzaria.core.context import AppContext
from pizzaria.core.http.exceptions import HttpClientError
from pizzaria.core.http.public_api import fetch_public_all, post_public
from pizzaria.utils.logger import logger


def _lista(dados: Any) -> list:
    if isinstance(dados, dict):
        dados = dados.get("data")
    return dados if isinstance(dados, list) else []


class MenuPublicoService:
    def __init__(self, ctx: AppContext):
        self.client = ctx.public_http

    async def carregar_cardapio(self) -> CardapioPublico:
        categorias, produtos = await fetch_public_all(
            self.client,
            ["/public/category", "/public/products?disabled=false"],
        )
        return CardapioPublico(
            categories=[Categoria.model_validate(c) for c in _lista(categorias)],
            products=[Produto.model_validate(p) for p in _lista(produtos)],
        )

    async def create_public_order_action(self, data: PedidoPublicoRequest) -> ResultadoAcao:
        """Cria o pedido já com os itens; o backend o devolve confirmado."""
        if not data.items:
            return ResultadoAcao.falha(
                "É necessário adicionar pelo menos um item ao pedido. "
                "Verifique se o campo 'items' está sendo enviado corretamente."
            )
        for item in data.items:
            if not item.product_id or not item.amount or item.amount <= 0:
                return ResultadoAcao.falha(
                    f"Item inválido: product_id e amount são obrigatórios. Recebido: {item.model_dump()}"
                )

        payload: Dict[str, Any] = data.model_dump(by_alias=True, exclude_none=True)
        try:
            criado = await post_public(self.client, "/public/order", payload)
        except HttpClientError as e:
            logger.error(f"[Cardapio] Erro ao criar pedido público: {e}")
            mensagem = e.message or "Erro ao processar pedido"
            if "item" in mensagem.lower():
                mensagem = (
                    f"{mensagem}. Verifique se o campo 'items' está sendo enviado "
                    f"corretamente com {len(data.items)} item(s)."
                )
            return ResultadoAcao.falha(mensagem)

        order_id = criado.get("id") if isinstance(criado, dict) else None
        return ResultadoAcao.ok({"id": str(order_id) if order_id is not None else None})
