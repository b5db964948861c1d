"""
Métricas de vendas do painel.

O backend já respondeu com formatos diferentes ao longo das versões
(camelCase, snake_case, envelopes `data`/`items`); tudo é normalizado aqui
antes de chegar na interface.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from pizzaria.api.relatorios.schemas.schema_relatorios import (
    MetodosPagamento,
    MetricasVendas,
    VendaDiaria,
)
from pizzaria.core.context import AppContext
from pizzaria.core.http.client import HttpRequestOptions
from pizzaria.utils.logger import logger

_CHAVES_DATA = ("date", "day_date", "dayDate", "Date", "day")
_CHAVES_TOTAL = ("totalSales", "total", "total_cents", "totalCents", "TotalSales")
_CHAVES_PEDIDOS = ("totalOrders", "orders", "total_orders", "totalOrdersCount", "TotalOrders")
_CHAVES_PAGAMENTOS = ("paymentMethods", "payment_methods", "paymentMethodTotals", "payment_methods_totals")


def _primeiro(raw: Dict[str, Any], chaves) -> Any:
    for chave in chaves:
        valor = raw.get(chave)
        if valor is not None and valor != "":
            return valor
    return None


def _numero(valor: Any) -> int:
    try:
        return int(float(valor))
    except (TypeError, ValueError):
        return 0


def normalizar_metodos_pagamento(entrada: Any) -> MetodosPagamento:
    base = MetodosPagamento()
    if not isinstance(entrada, dict):
        return base

    for chave, valor in entrada.items():
        try:
            quantia = int(float(valor))
        except (TypeError, ValueError):
            continue
        normalizada = "_".join(str(chave).upper().split())
        if "DINHEIRO" in normalizada or normalizada == "CASH":
            base.DINHEIRO += quantia
        elif "PIX" in normalizada:
            base.PIX += quantia
        elif "CREDITO" in normalizada or "CREDIT" in normalizada:
            base.CARTAO_CREDITO += quantia
        elif "DEBITO" in normalizada or "DEBIT" in normalizada:
            base.CARTAO_DEBITO += quantia
    return base


def normalizar_entrada_diaria(raw: Any) -> Optional[VendaDiaria]:
    if not isinstance(raw, dict):
        return None
    data = _primeiro(raw, _CHAVES_DATA)
    if not data:
        return None
    return VendaDiaria(
        date=str(data)[:10],
        total=_numero(_primeiro(raw, _CHAVES_TOTAL)),
        orders=_numero(_primeiro(raw, _CHAVES_PEDIDOS)),
        payment_methods=normalizar_metodos_pagamento(_primeiro(raw, _CHAVES_PAGAMENTOS)),
    )


def normalizar_vendas_diarias(dados: Any) -> List[VendaDiaria]:
    if isinstance(dados, dict):
        dados = dados.get("data") if dados.get("data") is not None else dados.get("items")
    if not isinstance(dados, list):
        return []
    vendas = [normalizar_entrada_diaria(d) for d in dados]
    return sorted((v for v in vendas if v is not None), key=lambda v: v.date)


class RelatoriosService:
    def __init__(self, ctx: AppContext):
        self.api = ctx.api

    async def _get(self, token: Optional[str], *endpoints: str) -> Any:
        """Primeiro endpoint que responder algo; 404 passa para o próximo."""
        for endpoint in endpoints:
            dados = await self.api.get(endpoint, HttpRequestOptions(token=token, silent404=True))
            if dados is not None:
                return dados
        return None

    async def obter_metricas(self, token: Optional[str], dia: Optional[date] = None) -> MetricasVendas:
        """Métricas do dia; sem dados ou em erro devolve tudo zerado."""
        dia_iso = (dia or date.today()).isoformat()
        try:
            bruto = await self._get(
                token,
                f"/api/analytics/metrics?date={dia_iso}",
                f"/api/analytics/daily?date={dia_iso}",
            )
        except Exception as e:
            logger.error(f"[Relatorios] Erro ao carregar métricas: {e}")
            return MetricasVendas()

        if isinstance(bruto, dict) and isinstance(bruto.get("data"), dict):
            bruto = bruto["data"]
        if not isinstance(bruto, dict):
            return MetricasVendas()

        if "totalToday" in bruto or "total_today" in bruto:
            campos = {k: v for k, v in bruto.items() if k not in _CHAVES_PAGAMENTOS}
            metricas = MetricasVendas.model_validate(campos)
            metricas.payment_methods = normalizar_metodos_pagamento(_primeiro(bruto, _CHAVES_PAGAMENTOS))
            return metricas

        entrada = normalizar_entrada_diaria(bruto)
        if entrada is None:
            return MetricasVendas()
        return MetricasVendas(
            total_today=entrada.total,
            orders_today=entrada.orders,
            average_ticket=entrada.total // entrada.orders if entrada.orders else 0,
            payment_methods=entrada.payment_methods,
            date=entrada.date,
        )

    async def obter_vendas_diarias(
        self,
        token: Optional[str],
        inicio: Optional[date] = None,
        fim: Optional[date] = None,
    ) -> List[VendaDiaria]:
        """Vendas por dia no período (padrão: últimos 30 dias), em ordem de data."""
        fim = fim or date.today()
        inicio = inicio or (fim - timedelta(days=29))
        try:
            bruto = await self._get(
                token,
                f"/api/analytics/daily-sales?start={inicio.isoformat()}&end={fim.isoformat()}",
                f"/api/analytics/range?start={inicio.isoformat()}&end={fim.isoformat()}",
            )
        except Exception as e:
            logger.error(f"[Relatorios] Erro ao carregar vendas diárias: {e}")
            return []
        return normalizar_vendas_diarias(bruto)
