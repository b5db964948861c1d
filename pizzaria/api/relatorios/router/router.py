from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from pizzaria.api.relatorios.schemas.schema_relatorios import MetricasVendas, VendaDiaria
from pizzaria.api.relatorios.services.service_relatorios import RelatoriosService
from pizzaria.core.admin_dependencies import get_context, get_token
from pizzaria.core.context import AppContext

router = APIRouter(
    prefix="/dashboard/relatorios",
    tags=["Dashboard - Relatórios"],
    dependencies=[Depends(get_token)],
)


@router.get("/metricas", response_model=MetricasVendas)
async def metricas(
    dia: Optional[date] = Query(None),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    return await RelatoriosService(ctx).obter_metricas(token, dia)


@router.get("/vendas-diarias", response_model=List[VendaDiaria])
async def vendas_diarias(
    inicio: Optional[date] = Query(None),
    fim: Optional[date] = Query(None),
    ctx: AppContext = Depends(get_context),
    token: str = Depends(get_token),
):
    return await RelatoriosService(ctx).obter_vendas_diarias(token, inicio, fim)
