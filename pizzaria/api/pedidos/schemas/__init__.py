"""
Schemas (DTOs) do domínio de Pedidos.
"""

from .schema_pedido import (
    # Enums
    TipoPedidoEnum,
    # Modelos do backend
    ItemPedido,
    Pedido,
    ProdutoSnapshot,
    # Derivados
    GrupoPedidos,
    PainelPedidosResponse,
    # Request schemas
    AdicionarItemRequest,
    AtualizarPedidoRequest,
    CriarPedidoRequest,
    EnviarComandaRequest,
    EnviarPedidoRequest,
    ItemComandaRequest,
    QuantidadeItemRequest,
    ReceberPedidoRequest,
    LimparPedidosResponse,
)

__all__ = [
    "TipoPedidoEnum",
    "ItemPedido",
    "Pedido",
    "ProdutoSnapshot",
    "GrupoPedidos",
    "PainelPedidosResponse",
    "AdicionarItemRequest",
    "AtualizarPedidoRequest",
    "CriarPedidoRequest",
    "EnviarComandaRequest",
    "EnviarPedidoRequest",
    "ItemComandaRequest",
    "QuantidadeItemRequest",
    "ReceberPedidoRequest",
    "LimparPedidosResponse",
]
