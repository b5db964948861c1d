import asyncio

from pizzaria.api.cardapio.schemas.schema_cardapio import (
    CriarCategoriaRequest,
    PedidoPublicoRequest,
    ProdutoRequest,
)
from pizzaria.api.cardapio.services.service_categorias import CategoriasService
from pizzaria.api.cardapio.services.service_menu_publico import MenuPublicoService
from pizzaria.api.cardapio.services.service_produtos import (
    MSG_CATEGORIA_NAO_ENCONTRADA,
    MSG_PRODUTO_NAO_ENCONTRADO,
    ProdutosService,
)
from tests.conftest import TOKEN


def _rodar(ctx, coro_factory):
    async def _com_fechamento():
        try:
            return await coro_factory()
        finally:
            await ctx.aclose()

    return asyncio.run(_com_fechamento())


def test_listar_e_criar_categoria(ctx, backend):
    servico = CategoriasService(ctx)

    async def cenario():
        criada = await servico.criar(CriarCategoriaRequest(name=" Sobremesas "), TOKEN)
        return criada, await servico.listar(TOKEN)

    criada, categorias = _rodar(ctx, cenario)

    assert criada.data == {"id": "c3", "name": "Sobremesas"}
    assert [c.name for c in categorias] == ["Pizzas", "Bebidas", "Sobremesas"]


def test_criar_produto_com_categoria_inexistente(ctx, backend):
    servico = ProdutosService(ctx)
    dados = ProdutoRequest(name="Pizza Doce", price="3900", category="c9")

    resultado = _rodar(ctx, lambda: servico.criar(dados, TOKEN))

    assert resultado.error == MSG_CATEGORIA_NAO_ENCONTRADA


def test_criar_produto_sem_categoria_nao_chama_backend(ctx, backend):
    servico = ProdutosService(ctx)
    resultado = _rodar(ctx, lambda: servico.criar(ProdutoRequest(name="X", price="1", category=" "), TOKEN))
    assert resultado.error == "Categoria é obrigatória"
    assert backend.requisicoes == []


def test_criar_e_listar_produtos(ctx, backend):
    servico = ProdutosService(ctx)

    async def cenario():
        await servico.criar(ProdutoRequest(name="Pizza Doce", price="3900", category="c1"), TOKEN)
        return await servico.listar(TOKEN, disabled=False)

    produtos = _rodar(ctx, cenario)

    assert [p.name for p in produtos] == ["Pizza Calabresa", "Refrigerante", "Pizza Doce"]
    assert produtos[-1].price == 3900
    assert backend.chamadas("GET", "/api/products")[0]["query"] == {"disabled": "false"}


def test_atualizar_produto_inexistente(ctx, backend):
    servico = ProdutosService(ctx)
    dados = ProdutoRequest(name="Nada", price="1", category="c1", product_id="p99")

    resultado = _rodar(ctx, lambda: servico.atualizar(dados, TOKEN))

    assert resultado.error == MSG_PRODUTO_NAO_ENCONTRADO


def test_deletar_produto_tenta_caminho_quando_query_da_405(ctx, backend):
    backend.forcar("DELETE", "/api/product", 405, {"error": "Method Not Allowed"})
    servico = ProdutosService(ctx)

    resultado = _rodar(ctx, lambda: servico.deletar("p1", TOKEN))

    assert resultado.success is True
    assert len(backend.chamadas("DELETE", "/api/product/p1")) == 1
    assert [p["id"] for p in backend.products] == ["p2"]


def test_deletar_produto_405_em_todas_as_formas(ctx, backend):
    backend.forcar("DELETE", "/api/product", 405, {"error": "Method Not Allowed"})
    backend.forcar("DELETE", "/api/product/p1", 405, {"error": "Method Not Allowed"})
    servico = ProdutosService(ctx)

    resultado = _rodar(ctx, lambda: servico.deletar("p1", TOKEN))

    assert resultado.error.startswith("Erro: Método DELETE não permitido")
    assert len(backend.chamadas("DELETE", "/api/product")) == 2
    assert backend.chamadas("DELETE", "/api/product")[1]["body"] == b'{"product_id": "p1"}'


def test_cardapio_publico_sem_autenticacao(ctx, backend):
    backend.products[1]["disabled"] = True

    cardapio = _rodar(ctx, lambda: MenuPublicoService(ctx).carregar_cardapio())

    assert [c.id for c in cardapio.categories] == ["c1", "c2"]
    assert [p.id for p in cardapio.products] == ["p1"]
    assert all("authorization" not in r["headers"] for r in backend.requisicoes)


def test_pedido_publico_exige_itens(ctx, backend):
    servico = MenuPublicoService(ctx)

    sem_itens = _rodar(ctx, lambda: servico.create_public_order_action(PedidoPublicoRequest(table=3)))

    assert sem_itens.success is False
    assert "pelo menos um item" in sem_itens.error
    assert backend.requisicoes == []


def test_pedido_publico_item_com_quantidade_invalida(ctx, backend):
    servico = MenuPublicoService(ctx)
    dados = PedidoPublicoRequest(table=3, items=[{"product_id": "p1", "amount": 0}])

    resultado = _rodar(ctx, lambda: servico.create_public_order_action(dados))

    assert resultado.error.startswith("Item inválido")


def test_pedido_publico_confirmado(ctx, backend):
    servico = MenuPublicoService(ctx)
    dados = PedidoPublicoRequest(table=3, name="Bia", items=[{"product_id": "p1", "amount": 2}])

    resultado = _rodar(ctx, lambda: servico.create_public_order_action(dados))

    assert resultado.data == {"id": "o1"}
    pedido = backend.orders["o1"]
    assert pedido["orderType"] == "MESA"
    assert pedido["draft"] is False
    assert [i["amount"] for i in pedido["items"]] == [2]
