import asyncio

from pizzaria.api.cardapio.schemas.schema_cardapio import Produto
from pizzaria.api.pedidos.services.service_polling import (
    ComandaMesa,
    DetalhePedido,
    PainelCozinha,
    PainelPedidos,
)
from pizzaria.core.events import OrderEvent
from tests.conftest import TOKEN

PIZZA = Produto(id="p1", name="Pizza Calabresa", price=4500, category_id="c1")
REFRI = Produto(id="p2", name="Refrigerante", price=800, category_id="c2")


def test_criar_pedido_de_mesa_aparece_no_grupo_da_mesa(ctx, backend):
    async def cenario():
        painel = PainelPedidos(ctx, TOKEN, intervalo=60)
        try:
            resultado = await painel.criar_pedido({"orderType": "MESA", "table": 5})
            return resultado, painel.grupo("MESA_5")
        finally:
            await painel.parar()
            await ctx.aclose()

    resultado, grupo = asyncio.run(cenario())

    assert resultado.success is True
    assert grupo is not None
    assert [p.id for p in grupo.orders] == ["o1"]
    assert grupo.has_open is True


def test_cozinha_mostra_apenas_pedidos_em_producao(ctx, backend):
    backend.adicionar_pedido(draft=True)
    backend.adicionar_pedido(draft=False)
    backend.adicionar_pedido(draft=False, status=True)

    async def cenario():
        cozinha = PainelCozinha(ctx, TOKEN, intervalo=60)
        try:
            await cozinha.atualizar()
            return [p.id for p in cozinha.pedidos]
        finally:
            await ctx.aclose()

    assert asyncio.run(cenario()) == ["o2"]


def test_erro_na_atualizacao_mantem_lista_anterior(ctx, backend):
    backend.adicionar_pedido(draft=True)

    async def cenario():
        painel = PainelPedidos(ctx, TOKEN, intervalo=60)
        try:
            primeira = await painel.atualizar()
            backend.forcar("GET", "/api/orders", 500, {"error": "indisponível"})
            segunda = await painel.atualizar(silencioso=True)
            return primeira, segunda, [p.id for p in painel.pedidos], painel.carregando
        finally:
            await ctx.aclose()

    assert asyncio.run(cenario()) == (True, False, ["o1"], False)


def test_erro_na_primeira_carga_deixa_lista_vazia(ctx, backend):
    backend.forcar("GET", "/api/orders", 500, {"error": "indisponível"})

    async def cenario():
        painel = PainelPedidos(ctx, TOKEN, intervalo=60)
        try:
            return await painel.atualizar(), painel.pedidos, painel.grupos
        finally:
            await ctx.aclose()

    assert asyncio.run(cenario()) == (False, [], [])


def test_evento_refresh_dispara_atualizacao(ctx, backend):
    async def cenario():
        painel = PainelPedidos(ctx, TOKEN, intervalo=60)
        try:
            await painel.iniciar()
            antes = len(painel.pedidos)
            backend.adicionar_pedido(draft=False)
            ctx.notify.notify_refresh()
            await asyncio.gather(*painel._refreshes)
            depois = [p.id for p in painel.pedidos]
            await painel.parar()
            return antes, depois, ctx.events.listener_count(OrderEvent.REFRESH_ORDERS), painel.ativo
        finally:
            await ctx.aclose()

    assert asyncio.run(cenario()) == (0, ["o1"], 0, False)


def test_polling_periodico_atualiza_sozinho(ctx, backend):
    async def cenario():
        cozinha = PainelCozinha(ctx, TOKEN, intervalo=0.01)
        try:
            await cozinha.iniciar()
            backend.adicionar_pedido(draft=False)
            for _ in range(200):
                if cozinha.pedidos:
                    break
                await asyncio.sleep(0.01)
            return [p.id for p in cozinha.pedidos]
        finally:
            await cozinha.parar()
            await ctx.aclose()

    assert asyncio.run(cenario()) == ["o1"]


def test_marcar_como_visualizado(ctx, backend):
    backend.adicionar_pedido(draft=False)

    async def cenario():
        painel = PainelPedidos(ctx, TOKEN, intervalo=60)
        try:
            await painel.atualizar()
            antes = painel.pedidos[0].is_new
            resultado = await painel.marcar_como_visualizado("o1")
            return antes, resultado.success, painel.pedidos[0].is_new
        finally:
            await ctx.aclose()

    assert asyncio.run(cenario()) == (True, True, False)


# ---------------------------------------------------------------------- #
def test_resposta_atrasada_de_outro_pedido_e_descartada(ctx, backend):
    backend.adicionar_pedido(name="Primeiro")
    backend.adicionar_pedido(name="Segundo")

    async def cenario():
        detalhe = DetalhePedido(ctx, TOKEN, intervalo=60)
        carregar = detalhe._carregar

        async def carregar_e_trocar_selecao(order_id):
            pedido = await carregar(order_id)
            detalhe.order_id = "o2"
            return pedido

        detalhe.order_id = "o1"
        detalhe._carregar = carregar_e_trocar_selecao
        try:
            retorno = await detalhe.buscar()
            return retorno, detalhe.pedido
        finally:
            await ctx.aclose()

    assert asyncio.run(cenario()) == (None, None)


def test_erro_no_detalhe_mantem_pedido_atual(ctx, backend):
    backend.adicionar_pedido(name="Mesa cheia")

    async def cenario():
        detalhe = DetalhePedido(ctx, TOKEN, intervalo=60)
        try:
            await detalhe.selecionar("o1")
            backend.forcar("GET", "/api/order/detail", 500, {"error": "falhou"})
            return await detalhe.buscar()
        finally:
            await detalhe.limpar_selecao()
            await ctx.aclose()

    assert asyncio.run(cenario()).name == "Mesa cheia"


def test_item_aplicado_localmente_quando_detalhe_falha(ctx, backend):
    backend.adicionar_pedido()
    backend.adicionar_item("o1", "p1", 1)

    async def cenario():
        detalhe = DetalhePedido(ctx, TOKEN, intervalo=60)
        try:
            await detalhe.selecionar("o1")
            backend.forcar("GET", "/api/order/detail", 500, {"error": "falhou"})
            resultado = await detalhe.adicionar_item(PIZZA, 2)
            return resultado, [(i.product.id, i.amount) for i in detalhe.pedido.items]
        finally:
            await detalhe.limpar_selecao()
            await ctx.aclose()

    resultado, itens = asyncio.run(cenario())

    assert resultado.success is True
    assert itens == [("p1", 3)]


def test_item_aplicado_localmente_quando_detalhe_volta_vazio(ctx, backend):
    backend.adicionar_pedido()

    async def cenario():
        detalhe = DetalhePedido(ctx, TOKEN, intervalo=60)
        try:
            await detalhe.selecionar("o1")
            backend.forcar("GET", "/api/order/detail", 200)
            resultado = await detalhe.adicionar_item(REFRI, 2)
            return resultado, [(i.product.id, i.amount) for i in detalhe.pedido.items]
        finally:
            await detalhe.limpar_selecao()
            await ctx.aclose()

    resultado, itens = asyncio.run(cenario())

    assert resultado.success is True
    assert itens == [("p2", 2)]


def test_criar_pedido_invalido_pelo_painel_nao_quebra(ctx, backend):
    async def cenario():
        painel = PainelPedidos(ctx, TOKEN, intervalo=60)
        try:
            return await painel.criar_pedido({"orderType": "DELIVERY", "table": 5})
        finally:
            await painel.parar()
            await ctx.aclose()

    resultado = asyncio.run(cenario())

    assert resultado.success is False
    assert resultado.error == "Dados do pedido inválidos"
    assert backend.orders == {}


def test_item_recarregado_do_backend_quando_detalhe_responde(ctx, backend):
    backend.adicionar_pedido()

    async def cenario():
        detalhe = DetalhePedido(ctx, TOKEN, intervalo=60)
        try:
            await detalhe.selecionar("o1")
            await detalhe.adicionar_item(REFRI)
            return [(i.id, i.amount) for i in detalhe.pedido.items]
        finally:
            await detalhe.limpar_selecao()
            await ctx.aclose()

    assert asyncio.run(cenario()) == [("i1", 1)]


def test_fluxo_do_detalhe_envia_finaliza_e_fecha(ctx, backend):
    backend.adicionar_pedido()
    backend.adicionar_item("o1", "p1", 1)
    eventos = []
    for evento in (OrderEvent.ORDER_UPDATED, OrderEvent.ORDER_FINISHED, OrderEvent.ORDER_DELETED):
        ctx.events.on(evento, lambda e=evento: eventos.append(e.value))

    async def cenario():
        detalhe = DetalhePedido(ctx, TOKEN, intervalo=60)
        try:
            await detalhe.selecionar("o1")
            await detalhe.enviar_para_producao()
            em_producao = detalhe.pedido.is_in_production
            await detalhe.finalizar()
            finalizado = detalhe.pedido.status
            fechado = await detalhe.fechar()
            return em_producao, finalizado, fechado.success, detalhe.order_id, detalhe.ativo
        finally:
            await ctx.aclose()

    assert asyncio.run(cenario()) == (True, True, True, None, False)
    assert eventos == ["order:updated", "order:finished", "order:deleted"]
    assert backend.orders == {}


def test_acoes_sem_selecao(ctx):
    detalhe = DetalhePedido(ctx, TOKEN)

    resultado = asyncio.run(detalhe.finalizar())

    assert resultado.error == "Nenhum pedido selecionado"


# ---------------------------------------------------------------------- #
def test_comanda_cria_rascunho_quando_mesa_nao_tem(ctx, backend):
    async def cenario():
        comanda = ComandaMesa(ctx, 7)
        try:
            return await comanda.carregar()
        finally:
            await ctx.aclose()

    pedido = asyncio.run(cenario())

    assert pedido.id == "o1"
    assert pedido.draft is True
    assert backend.orders["o1"]["table"] == 7
    assert "authorization" not in backend.chamadas("POST", "/public/order")[0]["headers"]


def test_comanda_reaproveita_rascunho_existente(ctx, backend):
    backend.adicionar_pedido(orderType="MESA", table=3, draft=True)
    backend.adicionar_item("o1", "p2", 2)

    async def cenario():
        comanda = ComandaMesa(ctx, 3)
        try:
            await comanda.carregar()
            return comanda.pedido.id, comanda.total_pedido_atual
        finally:
            await ctx.aclose()

    assert asyncio.run(cenario()) == ("o1", 1600)
    assert backend.chamadas("POST", "/public/order") == []


def test_fluxo_completo_da_comanda(ctx, backend):
    async def cenario():
        comanda = ComandaMesa(ctx, 7, intervalo=60)
        try:
            await comanda.iniciar()
            await comanda.adicionar_item(PIZZA, 2)
            total_inicial = comanda.total_pedido_atual
            alterado = await comanda.alterar_quantidade(comanda.pedido.items[0].id, 3)
            quantidades = [i.amount for i in comanda.pedido.items]
            nome_curto = await comanda.enviar("A")
            enviado = await comanda.enviar("Ana")
            backend.orders["o1"]["status"] = True
            await comanda.atualizar_consumo()
            return total_inicial, alterado, quantidades, nome_curto, enviado, comanda.resumo()
        finally:
            await comanda.parar()
            await ctx.aclose()

    total_inicial, alterado, quantidades, nome_curto, enviado, resumo = asyncio.run(cenario())

    assert total_inicial == 9000
    assert alterado.success is True
    assert quantidades == [3]
    assert nome_curto.error == "O nome é obrigatório e deve ter pelo menos 2 caracteres"
    assert enviado.data == {"id": "o1"}
    assert backend.orders["o1"]["name"] == "Ana"
    assert resumo["order"]["id"] == "o2"
    assert resumo["current_total"] == 0
    assert resumo["consumed_total"] == 13500


def test_comanda_nao_envia_pedido_vazio(ctx, backend):
    async def cenario():
        comanda = ComandaMesa(ctx, 2)
        try:
            await comanda.carregar()
            return await comanda.enviar("Bruno")
        finally:
            await ctx.aclose()

    assert asyncio.run(cenario()).error == "Adicione itens ao pedido antes de encaminhar"


def test_comanda_remove_item_e_quantidade_zero_remove(ctx, backend):
    backend.adicionar_pedido(orderType="MESA", table=4, draft=True)
    backend.adicionar_item("o1", "p1", 1)
    backend.adicionar_item("o1", "p2", 1)

    async def cenario():
        comanda = ComandaMesa(ctx, 4)
        try:
            await comanda.carregar()
            await comanda.remover_item("i1")
            await comanda.alterar_quantidade("i2", 0)
            return comanda.pedido.items
        finally:
            await ctx.aclose()

    assert asyncio.run(cenario()) == []


def test_comanda_aplica_item_localmente_quando_detalhe_falha(ctx, backend):
    backend.adicionar_pedido(orderType="MESA", table=6, draft=True)

    async def cenario():
        comanda = ComandaMesa(ctx, 6)
        try:
            await comanda.carregar()
            backend.forcar("GET", "/public/order/detail", 500, {"error": "falhou"})
            await comanda.adicionar_item(REFRI, 2)
            return [(i.id, i.product.id, i.amount) for i in comanda.pedido.items]
        finally:
            await ctx.aclose()

    assert asyncio.run(cenario()) == [("", "p2", 2)]
