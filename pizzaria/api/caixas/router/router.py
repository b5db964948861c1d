from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query, status

from pizzaria.api.caixas.schemas.schema_caixa import AbrirCaixaRequest, CaixaStatus, TrocoResponse, Venda
from pizzaria.api.caixas.services.service_caixa import CaixaService, calcular_troco
from pizzaria.api.shared.resultado_http import resultado_ou_erro
from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao
from pizzaria.core.admin_dependencies import get_context, get_token
from pizzaria.core.context import AppContext
from pizzaria.utils.logger import logger

router = APIRouter(
    prefix="/dashboard/caixa",
    tags=["Dashboard - Caixa"],
    dependencies=[Depends(get_token)],
)


@router.get("/status", response_model=CaixaStatus)
async def status_caixa(
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    return await CaixaService(ctx).obter_status(token)


@router.post("/abrir", response_model=ResultadoAcao)
async def abrir_caixa(
    data: AbrirCaixaRequest = Body(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    """
    Abre o caixa com o valor inicial informado em reais (enviado ao backend em centavos).
    """
    logger.info(f"[Caixa] Abrir - valor_inicial={data.valor_inicial}")
    return resultado_ou_erro(await CaixaService(ctx).abrir_caixa(data.valor_inicial, token))


@router.post("/fechar", response_model=ResultadoAcao)
async def fechar_caixa(
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    return resultado_ou_erro(await CaixaService(ctx).fechar_caixa(token))


@router.get("/vendas", response_model=List[Venda])
async def listar_vendas(
    data: Optional[date] = Query(None, description="Dia das vendas (padrão: hoje)"),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    return await CaixaService(ctx).listar_vendas(token, data)


@router.get("/vendas/{venda_id}", response_model=Venda)
async def obter_venda(
    venda_id: str = Path(...),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    venda = await CaixaService(ctx).obter_venda(venda_id, token)
    if venda is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Venda não encontrada")
    return venda


@router.get("/troco", response_model=TrocoResponse)
def troco(
    recebido: float = Query(..., ge=0, description="Valor recebido em reais"),
    total: int = Query(..., ge=0, description="Total em centavos"),
):
    return calcular_troco(recebido, total)
