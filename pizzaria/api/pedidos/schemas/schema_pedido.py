from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TipoPedidoEnum(str, Enum):
    MESA = "MESA"
    BALCAO = "BALCAO"


class ProdutoSnapshot(BaseModel):
    """Cópia do produto gravada no item do pedido."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    price: int = 0
    description: Optional[str] = ""
    banner: Optional[str] = None


class ItemPedido(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    amount: int = Field(..., gt=0)
    product: ProdutoSnapshot

    @property
    def subtotal(self) -> int:
        return self.product.price * self.amount


class Pedido(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    table: Optional[int] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    comanda: Optional[str] = None
    order_type: TipoPedidoEnum = Field(TipoPedidoEnum.BALCAO, alias="orderType")
    status: bool = False  # False = produção/aberto, True = finalizado
    draft: bool = False   # True = rascunho, False = enviado para produção
    viewed: Optional[bool] = None
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="createdAt"
    )
    items: List[ItemPedido] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _id_como_texto(cls, v):
        return str(v) if v is not None else v

    @field_validator("comanda", mode="before")
    @classmethod
    def _comanda_como_texto(cls, v):
        if v is None:
            return None
        texto = str(v).strip()
        return texto or None

    @field_validator("items", mode="before")
    @classmethod
    def _items_nulos(cls, v):
        return v or []

    @property
    def is_new(self) -> bool:
        """Pedido ainda não visualizado (`viewed` ausente conta como novo)."""
        return not (self.viewed or False)

    @property
    def is_in_production(self) -> bool:
        return not self.draft and not self.status

    @property
    def total(self) -> int:
        return sum(item.subtotal for item in self.items)


class GrupoPedidos(BaseModel):
    """Pedidos agrupados por mesa (`MESA_<n>`) ou no balcão (`BALCAO`)."""

    key: str
    table: Optional[int] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    comandas: List[str] = Field(default_factory=list)
    orders: List[Pedido] = Field(default_factory=list)
    has_new_orders: bool = False
    has_in_production: bool = False
    has_open: bool = False
    total: int = 0

    @property
    def is_mesa(self) -> bool:
        return self.key.startswith("MESA_")


class CriarPedidoRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_type: TipoPedidoEnum = Field(..., alias="orderType")
    table: Optional[int] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    comanda: Optional[str] = None


class AdicionarItemRequest(BaseModel):
    order_id: str
    product_id: str
    amount: int = Field(1, gt=0)


class EnviarPedidoRequest(BaseModel):
    name: Optional[str] = None


class ReceberPedidoRequest(BaseModel):
    payment_method: str = "DINHEIRO"
    received_amount: Optional[float] = Field(None, ge=0, description="Valor recebido em reais")
    is_partial: bool = False
    item_ids: List[str] = Field(default_factory=list)


class AtualizarPedidoRequest(BaseModel):
    comanda: Optional[str] = None


class LimparPedidosResponse(BaseModel):
    deleted: int = 0
    errors: int = 0


class PainelPedidosResponse(BaseModel):
    orders: List[Pedido] = Field(default_factory=list)
    groups: List[GrupoPedidos] = Field(default_factory=list)


class ItemComandaRequest(BaseModel):
    product_id: str
    amount: int = Field(1, gt=0)


class QuantidadeItemRequest(BaseModel):
    amount: int


class EnviarComandaRequest(BaseModel):
    name: str
