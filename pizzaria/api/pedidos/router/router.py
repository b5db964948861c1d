from fastapi import APIRouter

from pizzaria.api.pedidos.router.router_cozinha import router as router_cozinha
from pizzaria.api.pedidos.router.router_pedidos import router as router_pedidos

api_pedidos = APIRouter(
    tags=["API - Pedidos"]
)

api_pedidos.include_router(router_pedidos)
api_pedidos.include_router(router_cozinha)
