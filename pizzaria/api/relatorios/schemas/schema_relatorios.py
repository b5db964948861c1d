from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MetodosPagamento(BaseModel):
    """Totais por forma de pagamento, em centavos."""

    DINHEIRO: int = 0
    PIX: int = 0
    CARTAO_CREDITO: int = 0
    CARTAO_DEBITO: int = 0


class VendaDiaria(BaseModel):
    date: str
    total: int = 0
    orders: int = 0
    payment_methods: MetodosPagamento = Field(default_factory=MetodosPagamento)


class MetricasVendas(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    total_today: int = Field(0, alias="totalToday")
    total_week: int = Field(0, alias="totalWeek")
    total_month: int = Field(0, alias="totalMonth")
    orders_today: int = Field(0, alias="ordersToday")
    orders_week: int = Field(0, alias="ordersWeek")
    orders_month: int = Field(0, alias="ordersMonth")
    average_ticket: int = Field(0, alias="averageTicket")
    growth_rate: float = Field(0, alias="growthRate")
    payment_methods: MetodosPagamento = Field(default_factory=MetodosPagamento, alias="paymentMethods")
    date: Optional[str] = None
