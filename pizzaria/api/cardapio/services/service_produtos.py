"""CRUD de produtos do cardápio (painel administrativo)."""
from __future__ import annotations

import json
from typing import List, Optional

from pizzaria.api.cardapio.schemas.schema_cardapio import Produto, ProdutoRequest
from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao
from pizzaria.core.context import AppContext
from pizzaria.core.http.client import HttpRequestOptions
from pizzaria.core.http.exceptions import HttpClientError
from pizzaria.utils.logger import logger

MSG_CATEGORIA_NAO_ENCONTRADA = "Categoria não encontrada. Verifique se a categoria existe e tente novamente."
MSG_PRODUTO_NAO_ENCONTRADO = "Produto não encontrado. Verifique se o produto ainda existe e tente novamente."
MSG_DELETE_NAO_PERMITIDO = (
    "Erro: Método DELETE não permitido. Verifique a implementação do endpoint no backend."
)


def _mensagem_erro_produto(erro: HttpClientError, acao: str) -> str:
    mensagem = erro.message or ""
    if erro.status_code == 404:
        return MSG_PRODUTO_NAO_ENCONTRADO
    if "categoria" in mensagem.lower() or "category" in mensagem.lower():
        return MSG_CATEGORIA_NAO_ENCONTRADA
    if erro.status_code == 400:
        return f"Erro ao {acao} produto: {mensagem}. Verifique se todos os campos foram preenchidos corretamente."
    return mensagem or f"Erro ao {acao} produto"


class ProdutosService:
    def __init__(self, ctx: AppContext):
        self.api = ctx.api
        self.verbose = not ctx.settings.is_production

    async def listar(self, token: Optional[str], *, disabled: Optional[bool] = None) -> List[Produto]:
        endpoint = "/api/products"
        if disabled is not None:
            endpoint += f"?disabled={'true' if disabled else 'false'}"
        dados = await self.api.get(endpoint, HttpRequestOptions(token=token, silent404=True))
        if isinstance(dados, dict):
            dados = dados.get("data")
        return [Produto.model_validate(p) for p in (dados or [])]

    async def criar(self, data: ProdutoRequest, token: Optional[str]) -> ResultadoAcao:
        if not token:
            return ResultadoAcao.falha("Erro ao criar produto")
        if not data.category or not data.category.strip():
            return ResultadoAcao.falha("Categoria é obrigatória")

        payload = data.model_dump(exclude={"product_id"})
        if self.verbose:
            logger.info(f"[Produtos] Criar produto: {payload}")
        try:
            await self.api.post("/api/product", payload, HttpRequestOptions(token=token))
        except HttpClientError as e:
            logger.error(f"[Produtos] Erro ao criar produto: {e}")
            return ResultadoAcao.falha(_mensagem_erro_produto(e, "criar"))
        return ResultadoAcao.ok()

    async def atualizar(self, data: ProdutoRequest, token: Optional[str]) -> ResultadoAcao:
        if not token:
            return ResultadoAcao.falha("Erro ao atualizar produto")
        if not data.product_id or not data.product_id.strip():
            return ResultadoAcao.falha("ID do produto é obrigatório")
        if not data.category or not data.category.strip():
            return ResultadoAcao.falha("Categoria é obrigatória")

        try:
            await self.api.put("/api/product", data.model_dump(), HttpRequestOptions(token=token))
        except HttpClientError as e:
            logger.error(f"[Produtos] Erro ao atualizar produto {data.product_id}: {e}")
            return ResultadoAcao.falha(_mensagem_erro_produto(e, "atualizar"))
        return ResultadoAcao.ok()

    async def deletar(self, product_id: str, token: Optional[str]) -> ResultadoAcao:
        """
        Remove o produto. Backends antigos respondem 405 na forma com query
        string; nesse caso tenta `/api/product/<id>` e, por último, o id no corpo.
        """
        if not product_id:
            return ResultadoAcao.falha("Falha ao deletar produto: ID não fornecido")
        if not token:
            return ResultadoAcao.falha("Falha ao deletar produto: Token de autenticação não encontrado")

        opts = HttpRequestOptions(token=token)
        try:
            try:
                await self.api.delete(f"/api/product?product_id={product_id}", opts)
            except HttpClientError as e:
                if e.status_code != 405:
                    raise
                logger.warning("[Produtos] DELETE com query string recusado (405), tentando variações")
                try:
                    await self.api.delete(f"/api/product/{product_id}", opts)
                except HttpClientError:
                    await self.api.request(
                        "/api/product",
                        HttpRequestOptions(
                            method="DELETE",
                            token=token,
                            body=json.dumps({"product_id": product_id}),
                        ),
                    )
        except HttpClientError as e:
            logger.error(f"[Produtos] Erro ao deletar produto {product_id}: {e}")
            if e.status_code == 405:
                return ResultadoAcao.falha(MSG_DELETE_NAO_PERMITIDO)
            return ResultadoAcao.falha(e.message or "Erro ao deletar o produto")
        return ResultadoAcao.ok()
