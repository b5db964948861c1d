"""Rotas públicas: cardápio, pedido do cliente e comanda da mesa."""
from fastapi import APIRouter, Body, Depends, HTTPException, Path, status

from pizzaria.api.cardapio.schemas.schema_cardapio import CardapioPublico, PedidoPublicoRequest, Produto
from pizzaria.api.cardapio.services.service_menu_publico import MenuPublicoService
from pizzaria.api.pedidos.schemas.schema_pedido import (
    EnviarComandaRequest,
    ItemComandaRequest,
    QuantidadeItemRequest,
)
from pizzaria.api.pedidos.services.service_polling import ComandaMesa
from pizzaria.api.shared.resultado_http import resultado_ou_erro
from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao
from pizzaria.core.admin_dependencies import get_context
from pizzaria.core.context import AppContext


router = APIRouter(prefix="/menu", tags=["Public - Cardápio"])


async def _comanda(table: int, ctx: AppContext) -> ComandaMesa:
    comanda = ComandaMesa(ctx, table)
    await comanda.carregar()
    return comanda


async def _produto(ctx: AppContext, product_id: str) -> Produto:
    cardapio = await MenuPublicoService(ctx).carregar_cardapio()
    produto = next((p for p in cardapio.products if p.id == product_id), None)
    if produto is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Produto não encontrado")
    return produto


@router.get("", response_model=CardapioPublico)
async def cardapio(ctx: AppContext = Depends(get_context)):
    return await MenuPublicoService(ctx).carregar_cardapio()


@router.post("/pedido", response_model=ResultadoAcao, status_code=status.HTTP_201_CREATED)
async def criar_pedido_publico(
    data: PedidoPublicoRequest = Body(...),
    ctx: AppContext = Depends(get_context),
):
    resultado = resultado_ou_erro(await MenuPublicoService(ctx).create_public_order_action(data))
    ctx.notify.notify_order_created()
    return resultado


@router.get("/comanda/{table}")
async def ver_comanda(
    table: int = Path(..., ge=1, description="Número da mesa"),
    ctx: AppContext = Depends(get_context),
):
    comanda = await _comanda(table, ctx)
    await comanda.atualizar_consumo()
    return comanda.resumo()


@router.post("/comanda/{table}/itens")
async def adicionar_item_comanda(
    table: int = Path(..., ge=1, description="Número da mesa"),
    data: ItemComandaRequest = Body(...),
    ctx: AppContext = Depends(get_context),
):
    produto = await _produto(ctx, data.product_id)
    comanda = await _comanda(table, ctx)
    resultado_ou_erro(await comanda.adicionar_item(produto, data.amount))
    ctx.notify.notify_order_updated()
    return comanda.resumo()


@router.put("/comanda/{table}/itens/{item_id}")
async def alterar_quantidade_item(
    table: int = Path(..., ge=1, description="Número da mesa"),
    item_id: str = Path(...),
    data: QuantidadeItemRequest = Body(...),
    ctx: AppContext = Depends(get_context),
):
    comanda = await _comanda(table, ctx)
    resultado_ou_erro(await comanda.alterar_quantidade(item_id, data.amount))
    ctx.notify.notify_order_updated()
    return comanda.resumo()


@router.delete("/comanda/{table}/itens/{item_id}")
async def remover_item_comanda(
    table: int = Path(..., ge=1, description="Número da mesa"),
    item_id: str = Path(...),
    ctx: AppContext = Depends(get_context),
):
    comanda = await _comanda(table, ctx)
    resultado_ou_erro(await comanda.remover_item(item_id))
    ctx.notify.notify_order_updated()
    return comanda.resumo()


@router.post("/comanda/{table}/enviar", response_model=ResultadoAcao)
async def enviar_comanda(
    table: int = Path(..., ge=1, description="Número da mesa"),
    data: EnviarComandaRequest = Body(...),
    ctx: AppContext = Depends(get_context),
):
    comanda = await _comanda(table, ctx)
    resultado = resultado_ou_erro(await comanda.enviar(data.name))
    ctx.notify.notify_table_opened()
    return resultado
