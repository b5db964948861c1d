from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Categoria(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str

    @field_validator("id", mode="before")
    @classmethod
    def _id_como_texto(cls, v):
        return str(v)


class CategoriaResumo(BaseModel):
    id: str
    name: str


class Produto(BaseModel):
    """Produto do cardápio; `price` em centavos."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    price: int = 0
    description: Optional[str] = ""
    banner: Optional[str] = None
    disabled: bool = False
    category_id: Optional[str] = None
    category: Optional[CategoriaResumo] = None

    @field_validator("id", "category_id", mode="before")
    @classmethod
    def _id_como_texto(cls, v):
        return str(v) if v is not None else v


class CriarCategoriaRequest(BaseModel):
    name: str = Field(..., min_length=1)


class ProdutoRequest(BaseModel):
    name: str
    description: str = ""
    price: str
    category: str
    product_id: Optional[str] = None


class ItemPedidoPublico(BaseModel):
    product_id: str
    amount: int


class PedidoPublicoRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_type: str = Field("MESA", alias="orderType")
    table: Optional[int] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    items: List[ItemPedidoPublico] = Field(default_factory=list)


class CardapioPublico(BaseModel):
    categories: List[Categoria] = Field(default_factory=list)
    products: List[Produto] = Field(default_factory=list)
