"""
Telas do painel que se mantêm atualizadas por polling.

- `PainelPedidos`  -> pedidos pendentes (rascunhos + em produção), 5 s
- `PainelCozinha`  -> apenas pedidos em produção, 5 s
- `DetalhePedido`  -> pedido selecionado no modal, 3 s
- `ComandaMesa`    -> comanda pública de uma mesa (cliente sem login)

Cada tela é dona do seu timer; a sincronização entre telas acontece pelo
barramento de eventos (`refresh:orders`), sem coordenação entre timers.
"""
from __future__ import annotations

import asyncio
from contextlib import suppress
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from pizzaria.api.cardapio.schemas.schema_cardapio import Produto
from pizzaria.api.pedidos.schemas.schema_pedido import GrupoPedidos, Pedido, TipoPedidoEnum
from pizzaria.api.pedidos.services.service_pedido_actions import PedidoActions
from pizzaria.api.pedidos.services.service_reconciliacao import (
    agrupar_pedidos,
    aplicar_item_otimista,
    filtrar_em_producao,
    filtrar_finalizados,
    filtrar_pendentes,
    normalizar_lista_pedidos,
    ordenar_pedidos,
)
from pizzaria.api.pedidos.utils.mensagens_erro import classificar_erro
from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao
from pizzaria.core.context import AppContext
from pizzaria.core.events import OrderEvent
from pizzaria.core.http.client import HttpRequestOptions
from pizzaria.core.http.public_api import fetch_public, post_public
from pizzaria.utils.logger import logger


class _Poller:
    """Loop `sleep -> tick` em uma task asyncio, cancelável."""

    def __init__(self, intervalo: float):
        self.intervalo = intervalo
        self._task: Optional[asyncio.Task] = None

    @property
    def ativo(self) -> bool:
        return self._task is not None and not self._task.done()

    def _iniciar_loop(self, tick: Callable[[], Awaitable[Any]]) -> None:
        if self.ativo:
            return

        async def _loop():
            while True:
                await asyncio.sleep(self.intervalo)
                await tick()

        self._task = asyncio.get_running_loop().create_task(_loop())

    async def _parar_loop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None


# ---------------------------------------------------------------------- #
# Listas de pedidos (Pedidos / Cozinha)
# ---------------------------------------------------------------------- #
class PainelPedidosBase(_Poller):
    tag = "[Pedidos]"

    def __init__(self, ctx: AppContext, token: Optional[str], *, intervalo: Optional[float] = None):
        super().__init__(intervalo if intervalo is not None else ctx.settings.orders_poll_seconds)
        self.ctx = ctx
        self.token = token
        self.actions = PedidoActions(ctx.api, verbose=not ctx.settings.is_production)

        self.pedidos: List[Pedido] = []
        self.grupos: List[GrupoPedidos] = []
        self.carregando = False
        self._carregado = False
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._refreshes: Set[asyncio.Task] = set()

    def _filtrar(self, pedidos: List[Pedido]) -> List[Pedido]:
        raise NotImplementedError

    async def buscar_pedidos(self) -> List[Pedido]:
        """Consulta rascunhos e não rascunhos em paralelo e mescla por id."""
        return await self.actions.listar_pedidos(self.token)

    async def atualizar(self, silencioso: bool = False) -> bool:
        """
        Recarrega a lista. Em erro mantém o estado anterior (na primeira carga,
        lista vazia) e devolve False; nunca propaga a exceção.
        """
        if not silencioso:
            self.carregando = True
        try:
            pedidos = await self.buscar_pedidos()
        except Exception as e:
            logger.error(f"{self.tag} Erro ao buscar pedidos: {e}")
            if not self._carregado:
                self.pedidos, self.grupos = [], []
            return False
        finally:
            self.carregando = False

        self.pedidos = ordenar_pedidos(self._filtrar(pedidos))
        self.grupos = agrupar_pedidos(self.pedidos)
        self._carregado = True
        return True

    def _agendar_atualizacao(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"{self.tag} refresh:orders recebido fora do loop de eventos; ignorado")
            return
        tarefa = loop.create_task(self.atualizar(silencioso=True))
        self._refreshes.add(tarefa)
        tarefa.add_done_callback(self._refreshes.discard)

    async def iniciar(self) -> None:
        await self.atualizar()
        if self._unsubscribe is None:
            self._unsubscribe = self.ctx.events.on(OrderEvent.REFRESH_ORDERS, self._agendar_atualizacao)
        self._iniciar_loop(lambda: self.atualizar(silencioso=True))

    async def parar(self) -> None:
        await self._parar_loop()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def marcar_como_visualizado(self, order_id: str) -> ResultadoAcao:
        resultado = await self.actions.mark_order_as_viewed_action(order_id, self.token)
        if resultado.success:
            self.ctx.notify.notify_order_viewed()
            await self.atualizar(silencioso=True)
        return resultado

    def grupo(self, key: str) -> Optional[GrupoPedidos]:
        return next((g for g in self.grupos if g.key == key), None)


class PainelPedidos(PainelPedidosBase):
    """Tela Pedidos: tudo que ainda não foi finalizado."""

    def _filtrar(self, pedidos: List[Pedido]) -> List[Pedido]:
        return filtrar_pendentes(pedidos)

    async def criar_pedido(self, dados: Any) -> ResultadoAcao:
        resultado = await self.actions.create_order_action(dados, self.token)
        if resultado.success:
            self.ctx.notify.notify_order_created()
            await self.atualizar(silencioso=True)
        return resultado

    async def limpar(self) -> ResultadoAcao:
        resultado = await self.actions.clear_orders_action(self.token)
        if resultado.success:
            self.ctx.notify.notify_order_deleted()
            await self.atualizar(silencioso=True)
        return resultado


class PainelCozinha(PainelPedidosBase):
    """Tela Cozinha: apenas pedidos enviados e não finalizados."""

    tag = "[Cozinha]"

    def _filtrar(self, pedidos: List[Pedido]) -> List[Pedido]:
        return filtrar_em_producao(pedidos)


# ---------------------------------------------------------------------- #
# Detalhe do pedido (modal)
# ---------------------------------------------------------------------- #
class DetalhePedido(_Poller):
    """
    Pedido selecionado no painel, recarregado a cada 3 s enquanto houver
    seleção.

    Respostas que chegam depois de a seleção mudar (ou com outro id) são
    descartadas; erros de consulta mantêm o pedido atual.
    """

    def __init__(self, ctx: AppContext, token: Optional[str], *, intervalo: Optional[float] = None):
        super().__init__(intervalo if intervalo is not None else ctx.settings.order_detail_poll_seconds)
        self.ctx = ctx
        self.token = token
        self.actions = PedidoActions(ctx.api, verbose=not ctx.settings.is_production)

        self.order_id: Optional[str] = None
        self.pedido: Optional[Pedido] = None

    async def _carregar(self, order_id: str) -> Optional[Pedido]:
        bruto = await self.ctx.api.get(
            f"/api/order/detail?order_id={order_id}",
            HttpRequestOptions(token=self.token),
        )
        if not bruto:
            return None
        return Pedido.model_validate(bruto)

    async def buscar(self) -> Optional[Pedido]:
        selecionado = self.order_id
        if not selecionado:
            return None

        try:
            pedido = await self._carregar(selecionado)
        except Exception as e:
            logger.error(f"[Pedidos] Erro ao buscar detalhes do pedido {selecionado}: {e}")
            return self.pedido

        if self.order_id != selecionado:
            logger.debug(f"[Pedidos] Resposta do pedido {selecionado} descartada: seleção mudou")
            return self.pedido
        if pedido is None or pedido.id != selecionado:
            return self.pedido

        self.pedido = pedido
        return pedido

    async def selecionar(self, order_id: str) -> Optional[Pedido]:
        if order_id != self.order_id:
            self.pedido = None
        self.order_id = order_id
        pedido = await self.buscar()
        self._iniciar_loop(self.buscar)
        return pedido

    async def limpar_selecao(self) -> None:
        self.order_id = None
        self.pedido = None
        await self._parar_loop()

    # ------------------------------------------------------------------ #
    async def adicionar_item(self, produto: Produto, amount: int = 1) -> ResultadoAcao:
        order_id = self.order_id
        if not order_id:
            return ResultadoAcao.falha("Nenhum pedido selecionado")

        resultado = await self.actions.add_item_action(order_id, produto.id, amount, self.token)
        if not resultado.success:
            return resultado

        self.ctx.notify.notify_order_updated()
        try:
            pedido = await self._carregar(order_id)
        except Exception as e:
            logger.warning(f"[Pedidos] Detalhe indisponível após adicionar item ({e}); aplicando localmente")
            pedido = None

        if self.order_id != order_id:
            return resultado
        if pedido is not None and pedido.id == order_id:
            self.pedido = pedido
        elif self.pedido is not None:
            self.pedido = aplicar_item_otimista(self.pedido, produto, amount)
        return resultado

    async def enviar_para_producao(self, name: Optional[str] = None) -> ResultadoAcao:
        if not self.order_id:
            return ResultadoAcao.falha("Nenhum pedido selecionado")
        resultado = await self.actions.send_order_action(self.order_id, self.token, name=name)
        if resultado.success:
            self.ctx.notify.notify_order_updated()
            await self.buscar()
        return resultado

    async def finalizar(self) -> ResultadoAcao:
        if not self.order_id:
            return ResultadoAcao.falha("Nenhum pedido selecionado")
        resultado = await self.actions.finish_order_action(self.order_id, self.token)
        if resultado.success:
            self.ctx.notify.notify_order_finished()
            await self.buscar()
        return resultado

    async def receber(self, **kwargs: Any) -> ResultadoAcao:
        if not self.order_id:
            return ResultadoAcao.falha("Nenhum pedido selecionado")
        resultado = await self.actions.receive_order_action(self.order_id, self.token, **kwargs)
        if resultado.success:
            self.ctx.notify.notify_order_received()
            await self.buscar()
        return resultado

    async def fechar(self) -> ResultadoAcao:
        """Exclui o pedido selecionado (libera a mesa) e encerra a seleção."""
        if not self.order_id:
            return ResultadoAcao.falha("Nenhum pedido selecionado")
        resultado = await self.actions.delete_order_action(self.order_id, self.token)
        if resultado.success:
            await self.limpar_selecao()
            self.ctx.notify.notify_order_deleted()
        return resultado


# ---------------------------------------------------------------------- #
# Comanda pública da mesa
# ---------------------------------------------------------------------- #
class ComandaMesa(_Poller):
    """
    Comanda de autoatendimento de uma mesa, via cliente público.

    Mantém o rascunho atual da mesa (`pedido`) e, por polling, os pedidos já
    finalizados (`consumidos`) para exibir o total consumido.
    """

    def __init__(self, ctx: AppContext, table: int, *, intervalo: Optional[float] = None):
        super().__init__(intervalo if intervalo is not None else ctx.settings.orders_poll_seconds)
        self.ctx = ctx
        self.table = int(table)
        self.pedido: Optional[Pedido] = None
        self.consumidos: List[Pedido] = []

    @property
    def client(self):
        return self.ctx.public_http

    @property
    def total_pedido_atual(self) -> int:
        return self.pedido.total if self.pedido else 0

    @property
    def total_consumido(self) -> int:
        return sum(p.total for p in self.consumidos)

    def _novo_rascunho(self, order_id: str) -> Pedido:
        return Pedido(
            id=order_id,
            table=self.table,
            order_type=TipoPedidoEnum.MESA,
            status=False,
            draft=True,
            items=[],
        )

    async def _detalhe(self, order_id: str) -> Optional[Pedido]:
        bruto = await fetch_public(self.client, f"/public/order/detail?order_id={order_id}")
        return Pedido.model_validate(bruto) if bruto else None

    async def _criar_rascunho(self) -> Pedido:
        criado = await post_public(
            self.client,
            "/public/order",
            {"orderType": TipoPedidoEnum.MESA.value, "table": self.table, "items": []},
        )
        if not isinstance(criado, dict) or criado.get("id") is None:
            raise ValueError("Resposta sem id ao criar pedido da mesa")
        return self._novo_rascunho(str(criado["id"]))

    async def carregar(self) -> Optional[Pedido]:
        """Carrega o rascunho da mesa ou cria um novo."""
        try:
            bruto = await fetch_public(self.client, f"/public/orders?table={self.table}&draft=true")
            rascunho = next((p for p in normalizar_lista_pedidos(bruto) if p.draft), None)
            if rascunho is None:
                self.pedido = await self._criar_rascunho()
                return self.pedido
            try:
                self.pedido = await self._detalhe(rascunho.id) or rascunho
            except Exception as e:
                logger.warning(f"[Comanda] Detalhe do pedido {rascunho.id} indisponível: {e}")
                self.pedido = rascunho
        except Exception as e:
            logger.error(f"[Comanda] Erro ao carregar/criar pedido da mesa {self.table}: {e}")
        return self.pedido

    async def _recarregar_detalhe(self) -> bool:
        try:
            pedido = await self._detalhe(self.pedido.id)
        except Exception as e:
            logger.warning(f"[Comanda] Não foi possível recarregar o pedido {self.pedido.id}: {e}")
            return False
        if pedido is not None:
            self.pedido = pedido
        return True

    async def adicionar_item(self, produto: Produto, amount: int = 1) -> ResultadoAcao:
        if amount <= 0:
            return ResultadoAcao.falha("Quantidade deve ser maior que zero")
        try:
            if self.pedido is None:
                self.pedido = await self._criar_rascunho()
            await post_public(
                self.client,
                "/public/order/add",
                {"order_id": self.pedido.id, "product_id": produto.id, "amount": amount},
            )
        except Exception as e:
            logger.error(f"[Comanda] Erro ao adicionar item: {e}")
            return ResultadoAcao.falha(classificar_erro(e, "Erro ao adicionar item ao pedido"))

        if not await self._recarregar_detalhe():
            self.pedido = aplicar_item_otimista(self.pedido, produto, amount)
        return ResultadoAcao.ok()

    async def remover_item(self, item_id: str) -> ResultadoAcao:
        if self.pedido is None:
            return ResultadoAcao.falha("Nenhum pedido aberto para a mesa")
        try:
            await self.client.delete(f"/public/order/remove?item_id={item_id}")
        except Exception as e:
            logger.error(f"[Comanda] Erro ao remover item {item_id}: {e}")
            return ResultadoAcao.falha(classificar_erro(e, "Erro ao remover item"))

        if not await self._recarregar_detalhe():
            # remoção confirmada pelo backend
            itens = [i for i in self.pedido.items if i.id != item_id]
            self.pedido = self.pedido.model_copy(update={"items": itens})
        return ResultadoAcao.ok()

    async def alterar_quantidade(self, item_id: str, nova_quantidade: int) -> ResultadoAcao:
        """Sem endpoint de atualização: remove o item e inclui de novo com a nova quantidade."""
        if self.pedido is None:
            return ResultadoAcao.falha("Nenhum pedido aberto para a mesa")
        if nova_quantidade <= 0:
            return await self.remover_item(item_id)

        item = next((i for i in self.pedido.items if i.id == item_id), None)
        if item is None:
            return ResultadoAcao.falha("Item não encontrado no pedido")
        if item.amount == nova_quantidade:
            return ResultadoAcao.ok()

        try:
            await self.client.delete(f"/public/order/remove?item_id={item_id}")
            await post_public(
                self.client,
                "/public/order/add",
                {"order_id": self.pedido.id, "product_id": item.product.id, "amount": nova_quantidade},
            )
        except Exception as e:
            logger.error(f"[Comanda] Erro ao alterar quantidade do item {item_id}: {e}")
            await self._recarregar_detalhe()
            return ResultadoAcao.falha(classificar_erro(e, "Erro ao alterar quantidade"))

        await self._recarregar_detalhe()
        return ResultadoAcao.ok()

    async def enviar(self, nome: str) -> ResultadoAcao:
        """Encaminha o rascunho para a cozinha e abre um novo rascunho para a mesa."""
        if self.pedido is None or not self.pedido.items:
            return ResultadoAcao.falha("Adicione itens ao pedido antes de encaminhar")
        nome = (nome or "").strip()
        if len(nome) < 2:
            return ResultadoAcao.falha("O nome é obrigatório e deve ter pelo menos 2 caracteres")

        try:
            await self.client.put("/public/order/send", {"order_id": self.pedido.id, "name": nome})
        except Exception as e:
            logger.error(f"[Comanda] Erro ao encaminhar pedido {self.pedido.id}: {e}")
            return ResultadoAcao.falha(classificar_erro(e, "Erro ao encaminhar pedido"))

        enviado = self.pedido.id
        self.pedido = None
        await self.carregar()
        return ResultadoAcao.ok({"id": enviado})

    # ------------------------------------------------------------------ #
    async def atualizar_consumo(self) -> List[Pedido]:
        """Pedidos finalizados da mesa; em erro mantém a lista anterior."""
        try:
            bruto = await fetch_public(self.client, f"/public/orders?table={self.table}")
        except Exception as e:
            logger.error(f"[Comanda] Erro ao carregar pedidos da mesa {self.table}: {e}")
            return self.consumidos
        self.consumidos = filtrar_finalizados(normalizar_lista_pedidos(bruto))
        return self.consumidos

    async def iniciar(self) -> None:
        await self.carregar()
        await self.atualizar_consumo()
        self._iniciar_loop(self.atualizar_consumo)

    async def parar(self) -> None:
        await self._parar_loop()

    def resumo(self) -> Dict[str, Any]:
        return {
            "table": self.table,
            "order": self.pedido.model_dump(by_alias=True, mode="json") if self.pedido else None,
            "current_total": self.total_pedido_atual,
            "consumed_total": self.total_consumido,
        }
