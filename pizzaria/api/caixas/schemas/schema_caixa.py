from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CaixaStatus(BaseModel):
    """Situação do caixa; valores em centavos."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    is_open: bool = Field(False, alias="isOpen")
    opened_at: Optional[datetime] = Field(None, alias="openedAt")
    opened_by: Optional[str] = Field(None, alias="openedBy")
    initial_amount: int = Field(0, alias="initialAmount")
    current_amount: int = Field(0, alias="currentAmount")
    total_sales: int = Field(0, alias="totalSales")
    total_orders: int = Field(0, alias="totalOrders")


class AbrirCaixaRequest(BaseModel):
    valor_inicial: float = Field(..., description="Valor inicial em reais")


class Venda(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    order_id: Optional[str] = None
    amount: int = 0
    payment_method: Optional[str] = None
    received_amount: Optional[int] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")


class TrocoResponse(BaseModel):
    total: int
    recebido: int
    troco: int
