from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from pizzaria.api.cardapio.schemas.schema_cardapio import Produto, ProdutoRequest
from pizzaria.api.cardapio.services.service_produtos import ProdutosService
from pizzaria.api.shared.resultado_http import resultado_ou_erro
from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao
from pizzaria.core.admin_dependencies import get_context, get_token, require_admin
from pizzaria.core.context import AppContext

router = APIRouter(
    prefix="/dashboard/produtos",
    tags=["Dashboard - Produtos"],
    dependencies=[Depends(get_token)],
)


@router.get("", response_model=List[Produto])
async def listar_produtos(
    disabled: Optional[bool] = Query(None),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    return await ProdutosService(ctx).listar(token, disabled=disabled)


@router.post("", response_model=ResultadoAcao, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
async def criar_produto(
    data: ProdutoRequest = Body(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    return resultado_ou_erro(await ProdutosService(ctx).criar(data, token))


@router.put("/{product_id}", response_model=ResultadoAcao, dependencies=[Depends(require_admin)])
async def atualizar_produto(
    product_id: str = Path(...),
    data: ProdutoRequest = Body(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    data = data.model_copy(update={"product_id": product_id})
    return resultado_ou_erro(await ProdutosService(ctx).atualizar(data, token))


@router.delete("/{product_id}", response_model=ResultadoAcao, dependencies=[Depends(require_admin)])
async def deletar_produto(
    product_id: str = Path(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    return resultado_ou_erro(await ProdutosService(ctx).deletar(product_id, token))
