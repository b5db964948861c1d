"""
Ações de pedidos disparadas pelo painel (criar, visualizar, enviar, finalizar,
receber, excluir).

Toda ação devolve `ResultadoAcao`; exceções da camada HTTP são convertidas em
mensagem legível, nunca engolidas em silêncio.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from pizzaria.api.pedidos.schemas.schema_pedido import (
    CriarPedidoRequest,
    LimparPedidosResponse,
    Pedido,
    TipoPedidoEnum,
)
from pizzaria.api.pedidos.services.service_reconciliacao import (
    filtrar_em_producao,
    filtrar_pendentes,
    mesclar_pedidos,
    normalizar_lista_pedidos,
)
from pizzaria.api.pedidos.utils.mensagens_erro import classificar_erro
from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao
from pizzaria.core.http.adapter import ApiAdapter
from pizzaria.core.http.client import HttpRequestOptions
from pizzaria.core.http.exceptions import HttpClientError
from pizzaria.utils.formatacao import reais_para_centavos
from pizzaria.utils.logger import logger

ESCOPO_PENDENTES = "pendentes"
ESCOPO_PRODUCAO = "producao"


class PedidoActions:
    def __init__(self, api: ApiAdapter, *, verbose: bool = False):
        self.api = api
        self.verbose = verbose

    @staticmethod
    def _opts(token: str, **kwargs) -> HttpRequestOptions:
        return HttpRequestOptions(token=token, **kwargs)

    # ------------------------------------------------------------------ #
    async def create_order_action(self, dados: CriarPedidoRequest | Dict[str, Any], token: Optional[str]) -> ResultadoAcao:
        if not token:
            return ResultadoAcao.falha("Erro ao criar pedido")

        if not isinstance(dados, CriarPedidoRequest):
            try:
                dados = CriarPedidoRequest.model_validate(dados)
            except ValidationError as e:
                logger.warning(f"[createOrderAction] Dados inválidos: {e.error_count()} erro(s)")
                return ResultadoAcao.falha("Dados do pedido inválidos")

        payload: Dict[str, Any] = {
            "orderType": dados.order_type.value,
            "items": [],  # backend exige a lista, mesmo vazia
        }

        if dados.order_type == TipoPedidoEnum.MESA:
            if dados.table is None:
                return ResultadoAcao.falha("Número da mesa é obrigatório")
            payload["table"] = int(dados.table)
            if dados.comanda and dados.comanda.strip():
                payload["comanda"] = dados.comanda.strip()
        else:
            if not dados.name or not dados.name.strip():
                return ResultadoAcao.falha("Nome do cliente é obrigatório")
            payload["name"] = dados.name.strip()
            if dados.phone and dados.phone.strip():
                payload["phone"] = dados.phone.strip()

        if self.verbose:
            logger.info(f"[createOrderAction] Payload: {payload}")

        try:
            criado = await self.api.post("/api/order", payload, self._opts(token))
        except Exception as e:
            logger.error(f"[createOrderAction] Erro ao criar pedido: {e}")
            return ResultadoAcao.falha(classificar_erro(e, "Erro ao criar pedido"))

        order_id = criado.get("id") if isinstance(criado, dict) else None
        return ResultadoAcao.ok({"id": str(order_id)} if order_id is not None else None)

    async def update_order_info_action(self, order_id: str, token: Optional[str], *, comanda: Optional[str] = None) -> ResultadoAcao:
        if not token:
            return ResultadoAcao.falha("Erro ao atualizar pedido")
        if not order_id:
            return ResultadoAcao.falha("Pedido inválido")

        payload: Dict[str, Any] = {"order_id": order_id}
        if comanda is not None:
            payload["comanda"] = comanda

        try:
            try:
                await self.api.put("/api/order/update", payload, self._opts(token))
            except HttpClientError as e:
                logger.warning(f"[Pedidos] /api/order/update indisponível ({e}); tentando /api/order")
                await self.api.put("/api/order", payload, self._opts(token))
        except Exception as e:
            return ResultadoAcao.falha(classificar_erro(e, "Erro ao atualizar pedido"))
        return ResultadoAcao.ok()

    async def mark_order_as_viewed_action(self, order_id: str, token: Optional[str]) -> ResultadoAcao:
        if not token:
            return ResultadoAcao.falha("Erro ao marcar pedido como visualizado")
        try:
            await self.api.put("/api/order/viewed", {"order_id": order_id}, self._opts(token))
        except Exception as e:
            return ResultadoAcao.falha(classificar_erro(e, "Erro ao marcar pedido como visualizado"))
        return ResultadoAcao.ok()

    async def send_order_action(self, order_id: str, token: Optional[str], *, name: Optional[str] = None) -> ResultadoAcao:
        """Envia o rascunho para a cozinha; `data` traz o pedido devolvido, se houver."""
        if not token or not order_id:
            return ResultadoAcao.falha("Erro ao enviar pedido para cozinha")
        payload: Dict[str, Any] = {"order_id": order_id}
        if name:
            payload["name"] = name
        try:
            resposta = await self.api.put("/api/order/send", payload, self._opts(token))
        except Exception as e:
            logger.error(f"[Pedidos] Erro ao enviar pedido {order_id}: {e}")
            return ResultadoAcao.falha(classificar_erro(e, "Erro ao enviar pedido para cozinha"))
        return ResultadoAcao.ok(resposta if isinstance(resposta, dict) else None)

    async def finish_order_action(self, order_id: str, token: Optional[str]) -> ResultadoAcao:
        if not order_id or not token:
            return ResultadoAcao.falha("Falha ao finalizar o pedido")
        try:
            await self.api.put("/api/order/finish", {"order_id": order_id}, self._opts(token))
        except Exception as e:
            logger.error(f"[Pedidos] Erro ao finalizar pedido {order_id}: {e}")
            return ResultadoAcao.falha(
                classificar_erro(
                    e,
                    "Falha ao finalizar o pedido",
                    validacao="Erro ao processar a finalização do pedido.",
                )
            )
        return ResultadoAcao.ok()

    async def receive_order_action(
        self,
        order_id: str,
        token: Optional[str],
        *,
        payment_method: Optional[str] = None,
        received_amount: Optional[float] = None,
        is_partial: bool = False,
        item_ids: Optional[List[str]] = None,
    ) -> ResultadoAcao:
        """
        Registra o recebimento de um pedido.

        `received_amount` vem em reais (digitado no caixa) e é enviado em
        centavos. Recebimento parcial (flag ou subconjunto dos itens) usa
        `/api/order/receive-partial` e mantém o pedido aberto; o total usa
        `/api/caixa/receive` e em seguida finaliza o pedido.
        """
        if not order_id or not token:
            return ResultadoAcao.falha("Falha ao receber o pedido")

        metodo = payment_method or "DINHEIRO"
        item_ids = item_ids or []

        try:
            bruto = await self.api.get(f"/api/order/detail?order_id={order_id}", self._opts(token))
            if not bruto:
                return ResultadoAcao.falha("Pedido não encontrado")
            pedido = Pedido.model_validate(bruto)
            if pedido.status:
                return ResultadoAcao.falha("Este pedido já foi finalizado e recebido")

            total = pedido.total
            recebido_centavos = reais_para_centavos(received_amount) if received_amount else None
            parcial = is_partial or (0 < len(item_ids) < len(pedido.items))

            if parcial:
                valor = recebido_centavos if recebido_centavos is not None else total
                await self.api.post(
                    "/api/order/receive-partial",
                    {
                        "order_id": order_id,
                        "item_ids": item_ids,
                        "payment_method": metodo,
                        "amount": valor,
                        "received_amount": valor,
                        "is_partial": True,
                    },
                    self._opts(token, silent404=True),
                )
                return ResultadoAcao.ok()

            payload: Dict[str, Any] = {
                "order_id": order_id,
                "amount": total,
                "payment_method": metodo,
            }
            if recebido_centavos is not None:
                payload["received_amount"] = recebido_centavos
            await self.api.post("/api/caixa/receive", payload, self._opts(token, silent404=True))
        except Exception as e:
            logger.error(f"[Pedidos] Erro ao receber pedido {order_id}: {e}")
            return ResultadoAcao.falha(
                classificar_erro(
                    e,
                    "Falha ao receber o pedido",
                    validacao="Erro ao processar o recebimento do pedido.",
                )
            )

        try:
            await self.api.put("/api/order/finish", {"order_id": order_id}, self._opts(token))
        except Exception as e:
            logger.error(f"[Pedidos] Erro ao finalizar pedido {order_id} após recebimento: {e}")
            return ResultadoAcao.falha(
                classificar_erro(
                    e,
                    "Erro ao finalizar o pedido",
                    validacao="Erro ao processar a finalização do pedido.",
                )
            )
        return ResultadoAcao.ok()

    async def add_item_action(self, order_id: str, product_id: str, amount: int, token: Optional[str]) -> ResultadoAcao:
        if not token or not order_id:
            return ResultadoAcao.falha("Erro ao adicionar item")
        if not product_id or amount <= 0:
            return ResultadoAcao.falha("Produto e quantidade válidos são obrigatórios")
        try:
            await self.api.post(
                "/api/order/add",
                {"order_id": order_id, "product_id": product_id, "amount": amount},
                self._opts(token),
            )
        except Exception as e:
            logger.error(f"[Pedidos] Erro ao adicionar item ao pedido {order_id}: {e}")
            return ResultadoAcao.falha(classificar_erro(e, "Erro ao adicionar item"))
        return ResultadoAcao.ok()

    async def delete_order_action(self, order_id: str, token: Optional[str]) -> ResultadoAcao:
        """Exclui o pedido (mesa volta a ficar livre). 404 conta como já excluído."""
        if not token or not order_id:
            return ResultadoAcao.falha("Erro ao fechar pedido")
        try:
            await self.api.delete(f"/api/order?order_id={order_id}", self._opts(token, silent404=True))
        except Exception as e:
            logger.error(f"[Pedidos] Erro ao deletar pedido {order_id}: {e}")
            return ResultadoAcao.falha(classificar_erro(e, "Erro ao fechar pedido"))
        return ResultadoAcao.ok()

    # ------------------------------------------------------------------ #
    async def listar_pedidos(self, token: Optional[str]) -> List[Pedido]:
        """Rascunhos e não rascunhos em paralelo, mesclados por id."""
        opts = self._opts(token, silent404=True)
        rascunhos, nao_rascunhos = await asyncio.gather(
            self.api.get("/api/orders?draft=true", opts),
            self.api.get("/api/orders?draft=false", opts),
        )
        rascunhos = normalizar_lista_pedidos(rascunhos)
        nao_rascunhos = normalizar_lista_pedidos(nao_rascunhos)
        fallback: List[Pedido] = []
        if not rascunhos and not nao_rascunhos:
            fallback = normalizar_lista_pedidos(await self.api.get("/api/orders", opts))
        return mesclar_pedidos(rascunhos, nao_rascunhos, fallback)

    async def clear_orders_action(self, token: Optional[str], escopo: str = ESCOPO_PENDENTES) -> ResultadoAcao:
        """Exclui todos os pedidos pendentes (ou só os em produção, na Cozinha)."""
        if not token:
            return ResultadoAcao.falha("Erro ao limpar pedidos")
        try:
            pedidos = await self.listar_pedidos(token)
        except Exception as e:
            logger.error(f"[Pedidos] Erro ao limpar pedidos: {e}")
            return ResultadoAcao.falha(classificar_erro(e, "Erro ao limpar pedidos"))

        alvos: Iterable[Pedido] = (
            filtrar_em_producao(pedidos) if escopo == ESCOPO_PRODUCAO else filtrar_pendentes(pedidos)
        )
        resumo = LimparPedidosResponse()
        for pedido in alvos:
            try:
                await self.api.delete(f"/api/order?order_id={pedido.id}", self._opts(token))
                resumo.deleted += 1
            except HttpClientError as e:
                logger.error(f"[Pedidos] Erro ao deletar pedido {pedido.id}: {e}")
                resumo.errors += 1
        return ResultadoAcao.ok(resumo.model_dump())
