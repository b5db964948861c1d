from fastapi import APIRouter, Depends, Path

from pizzaria.api.pedidos.schemas.schema_pedido import PainelPedidosResponse
from pizzaria.api.pedidos.services.service_pedido_actions import ESCOPO_PRODUCAO, PedidoActions
from pizzaria.api.pedidos.services.service_reconciliacao import (
    agrupar_pedidos,
    filtrar_em_producao,
    ordenar_pedidos,
)
from pizzaria.api.shared.resultado_http import resultado_ou_erro
from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao
from pizzaria.core.admin_dependencies import get_context, get_token
from pizzaria.core.context import AppContext

router = APIRouter(
    prefix="/dashboard/cozinha",
    tags=["Dashboard - Cozinha"],
    dependencies=[Depends(get_token)],
)


@router.get("", response_model=PainelPedidosResponse)
async def listar_em_producao(
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    pedidos = await PedidoActions(ctx.api).listar_pedidos(token)
    em_producao = ordenar_pedidos(filtrar_em_producao(pedidos))
    return PainelPedidosResponse(orders=em_producao, groups=agrupar_pedidos(em_producao))


@router.put("/{order_id}/finalizar", response_model=ResultadoAcao)
async def finalizar(
    order_id: str = Path(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    resultado = resultado_ou_erro(await PedidoActions(ctx.api).finish_order_action(order_id, token))
    ctx.notify.notify_order_finished()
    return resultado


@router.delete("", response_model=ResultadoAcao)
async def limpar_cozinha(
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    resultado = resultado_ou_erro(await PedidoActions(ctx.api).clear_orders_action(token, ESCOPO_PRODUCAO))
    ctx.notify.notify_order_deleted()
    return resultado
