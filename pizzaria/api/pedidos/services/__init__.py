"""
Services do domínio de Pedidos.
"""

from .service_pedido_actions import PedidoActions
from .service_polling import ComandaMesa, DetalhePedido, PainelCozinha, PainelPedidos

__all__ = [
    "PedidoActions",
    "PainelPedidos",
    "PainelCozinha",
    "DetalhePedido",
    "ComandaMesa",
]
