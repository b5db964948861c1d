from fastapi import APIRouter

from pizzaria.api.cardapio.router import router_categorias, router_menu_public, router_produtos

api_cardapio = APIRouter(
    tags=["API - Cardápio"]
)

# Rotas públicas (sem autenticação)
api_cardapio.include_router(router_menu_public.router)

# Rotas do painel (cookie de sessão)
api_cardapio.include_router(router_produtos.router)
api_cardapio.include_router(router_categorias.router)
