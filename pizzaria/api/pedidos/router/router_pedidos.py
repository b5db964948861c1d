from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, status

from pizzaria.api.pedidos.schemas.schema_pedido import (
    AdicionarItemRequest,
    AtualizarPedidoRequest,
    CriarPedidoRequest,
    EnviarPedidoRequest,
    PainelPedidosResponse,
    Pedido,
    ReceberPedidoRequest,
)
from pizzaria.api.pedidos.services.service_pedido_actions import PedidoActions
from pizzaria.api.pedidos.services.service_reconciliacao import (
    agrupar_pedidos,
    filtrar_pendentes,
    ordenar_pedidos,
)
from pizzaria.api.shared.resultado_http import resultado_ou_erro
from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao
from pizzaria.core.admin_dependencies import get_context, get_token
from pizzaria.core.context import AppContext
from pizzaria.core.http.client import HttpRequestOptions
from pizzaria.utils.logger import logger

router = APIRouter(
    prefix="/dashboard/pedidos",
    tags=["Dashboard - Pedidos"],
    dependencies=[Depends(get_token)],
)


def _actions(ctx: AppContext) -> PedidoActions:
    return PedidoActions(ctx.api, verbose=not ctx.settings.is_production)


@router.get("", response_model=PainelPedidosResponse)
async def listar_pedidos(
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    """Pedidos não finalizados, ordenados (novos primeiro) e agrupados por mesa/balcão."""
    pedidos = ordenar_pedidos(filtrar_pendentes(await _actions(ctx).listar_pedidos(token)))
    return PainelPedidosResponse(orders=pedidos, groups=agrupar_pedidos(pedidos))


@router.post("", response_model=ResultadoAcao, status_code=status.HTTP_201_CREATED)
async def criar_pedido(
    data: CriarPedidoRequest = Body(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    resultado = resultado_ou_erro(await _actions(ctx).create_order_action(data, token))
    ctx.notify.notify_order_created()
    return resultado


@router.delete("", response_model=ResultadoAcao)
async def limpar_pedidos(
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    resultado = resultado_ou_erro(await _actions(ctx).clear_orders_action(token))
    logger.info(f"[Pedidos] Limpeza concluída: {resultado.data}")
    ctx.notify.notify_order_deleted()
    return resultado


@router.post("/itens", response_model=ResultadoAcao)
async def adicionar_item(
    data: AdicionarItemRequest = Body(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    resultado = resultado_ou_erro(
        await _actions(ctx).add_item_action(data.order_id, data.product_id, data.amount, token)
    )
    ctx.notify.notify_order_updated()
    return resultado


@router.get("/{order_id}", response_model=Pedido)
async def detalhe_pedido(
    order_id: str = Path(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    dados = await ctx.api.get(
        f"/api/order/detail?order_id={order_id}",
        HttpRequestOptions(token=token, silent404=True),
    )
    if not dados:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pedido não encontrado")
    return Pedido.model_validate(dados)


@router.put("/{order_id}", response_model=ResultadoAcao)
async def atualizar_pedido(
    order_id: str = Path(...),
    data: AtualizarPedidoRequest = Body(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    resultado = resultado_ou_erro(
        await _actions(ctx).update_order_info_action(order_id, token, comanda=data.comanda)
    )
    ctx.notify.notify_order_updated()
    return resultado


@router.put("/{order_id}/visualizar", response_model=ResultadoAcao)
async def marcar_como_visualizado(
    order_id: str = Path(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    resultado = resultado_ou_erro(await _actions(ctx).mark_order_as_viewed_action(order_id, token))
    ctx.notify.notify_order_viewed()
    return resultado


@router.put("/{order_id}/enviar", response_model=ResultadoAcao)
async def enviar_para_cozinha(
    order_id: str = Path(...),
    data: Optional[EnviarPedidoRequest] = Body(None),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    resultado = resultado_ou_erro(await _actions(ctx).send_order_action(order_id, token, name=data.name if data else None))
    ctx.notify.notify_order_updated()
    return resultado


@router.put("/{order_id}/finalizar", response_model=ResultadoAcao)
async def finalizar_pedido(
    order_id: str = Path(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    resultado = resultado_ou_erro(await _actions(ctx).finish_order_action(order_id, token))
    ctx.notify.notify_order_finished()
    return resultado


@router.post("/{order_id}/receber", response_model=ResultadoAcao)
async def receber_pedido(
    order_id: str = Path(...),
    data: Optional[ReceberPedidoRequest] = Body(None),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    data = data or ReceberPedidoRequest()
    resultado = resultado_ou_erro(
        await _actions(ctx).receive_order_action(
            order_id,
            token,
            payment_method=data.payment_method,
            received_amount=data.received_amount,
            is_partial=data.is_partial,
            item_ids=data.item_ids,
        )
    )
    ctx.notify.notify_order_received()
    return resultado


@router.delete("/{order_id}", response_model=ResultadoAcao)
async def fechar_pedido(
    order_id: str = Path(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    """Exclui o pedido e libera a mesa."""
    resultado = resultado_ou_erro(await _actions(ctx).delete_order_action(order_id, token))
    ctx.notify.notify_order_deleted()
    return resultado
