from typing import List

from fastapi import APIRouter, Body, Depends, status

from pizzaria.api.cardapio.schemas.schema_cardapio import Categoria, CriarCategoriaRequest
from pizzaria.api.cardapio.services.service_categorias import CategoriasService
from pizzaria.api.shared.resultado_http import resultado_ou_erro
from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao
from pizzaria.core.admin_dependencies import get_context, get_token, require_admin
from pizzaria.core.context import AppContext

router = APIRouter(
    prefix="/dashboard/categorias",
    tags=["Dashboard - Categorias"],
    dependencies=[Depends(get_token)],
)


@router.get("", response_model=List[Categoria])
async def listar_categorias(
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    return await CategoriasService(ctx).listar(token)


@router.post("", response_model=ResultadoAcao, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(require_admin)])
async def criar_categoria(
    data: CriarCategoriaRequest = Body(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    return resultado_ou_erro(await CategoriasService(ctx).criar(data, token))
