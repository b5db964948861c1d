"""
Regras de reconciliação dos pedidos exibidos no painel.

Funções puras: recebem o que veio das consultas e devolvem listas filtradas,
ordenadas e agrupadas. Nada aqui faz I/O.
"""
from __future__ import annotations

from datetime import timezone
from typing import Any, Dict, Iterable, List

from pydantic import ValidationError

from pizzaria.api.cardapio.schemas.schema_cardapio import Produto
from pizzaria.api.pedidos.schemas.schema_pedido import (
    GrupoPedidos,
    ItemPedido,
    Pedido,
    ProdutoSnapshot,
    TipoPedidoEnum,
)
from pizzaria.utils.logger import logger

CHAVE_BALCAO = "BALCAO"


def normalizar_lista_pedidos(data: Any) -> List[Pedido]:
    """Aceita `[...]` ou `{"data": [...]}`; qualquer outra coisa vira lista vazia."""
    if isinstance(data, dict):
        data = data.get("data")
    if not isinstance(data, list):
        return []

    pedidos: List[Pedido] = []
    for bruto in data:
        if isinstance(bruto, Pedido):
            pedidos.append(bruto)
            continue
        try:
            pedidos.append(Pedido.model_validate(bruto))
        except ValidationError as e:
            logger.warning(f"[Pedidos] Pedido ignorado por formato inválido: {e.errors()[:1]}")
    return pedidos


def mesclar_pedidos(*listas: Iterable[Pedido]) -> List[Pedido]:
    """Une as listas por id; a primeira ocorrência de cada id prevalece."""
    por_id: Dict[str, Pedido] = {}
    for lista in listas:
        for pedido in lista:
            if pedido.id not in por_id:
                por_id[pedido.id] = pedido
    return list(por_id.values())


def filtrar_pendentes(pedidos: Iterable[Pedido]) -> List[Pedido]:
    """Tela Pedidos: tudo que não foi finalizado (rascunhos e em produção)."""
    return [p for p in pedidos if not p.status]


def filtrar_em_producao(pedidos: Iterable[Pedido]) -> List[Pedido]:
    """Tela Cozinha: apenas draft=False e status=False."""
    return [p for p in pedidos if p.is_in_production]


def filtrar_finalizados(pedidos: Iterable[Pedido]) -> List[Pedido]:
    return [p for p in pedidos if p.status]


def _timestamp(pedido: Pedido) -> float:
    created = pedido.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.timestamp()


def ordenar_pedidos(pedidos: Iterable[Pedido]) -> List[Pedido]:
    """Não visualizados primeiro; dentro de cada bloco, mais recentes primeiro."""
    return sorted(pedidos, key=lambda p: (0 if p.is_new else 1, -_timestamp(p)))


def chave_grupo(pedido: Pedido) -> str:
    if pedido.order_type == TipoPedidoEnum.MESA and pedido.table:
        return f"MESA_{pedido.table}"
    return CHAVE_BALCAO


def _ordem_grupo(grupo: GrupoPedidos):
    # novos primeiro; depois mesas em ordem crescente; balcão por último
    return (
        0 if grupo.has_new_orders else 1,
        0 if grupo.table and grupo.is_mesa else 1,
        grupo.table or 0,
    )


def agrupar_pedidos(pedidos: Iterable[Pedido]) -> List[GrupoPedidos]:
    grupos: Dict[str, GrupoPedidos] = {}

    for pedido in pedidos:
        key = chave_grupo(pedido)
        grupo = grupos.get(key)
        if grupo is None:
            grupo = GrupoPedidos(
                key=key,
                table=pedido.table if key != CHAVE_BALCAO else None,
                name=pedido.name,
                phone=pedido.phone,
            )
            grupos[key] = grupo

        grupo.orders.append(pedido)
        if pedido.comanda and pedido.comanda not in grupo.comandas:
            grupo.comandas.append(pedido.comanda)
        if pedido.is_new:
            grupo.has_new_orders = True
        if pedido.is_in_production:
            grupo.has_in_production = True
        grupo.total += pedido.total

    for grupo in grupos.values():
        # aberto: ao menos um rascunho e nenhum pedido em produção
        tem_rascunho = any(p.draft for p in grupo.orders)
        grupo.has_open = tem_rascunho and not grupo.has_in_production

    return sorted(grupos.values(), key=_ordem_grupo)


def filtrar_grupo_por_termo(grupo: GrupoPedidos, termo: str, tipo: TipoPedidoEnum) -> bool:
    normalizado = (termo or "").strip().lower()
    if not normalizado:
        return True
    if tipo == TipoPedidoEnum.MESA:
        return str(grupo.table or "").startswith(normalizado)
    nomes = [p.name or "" for p in grupo.orders] + [grupo.name or ""]
    return any(normalizado in c.lower() for c in grupo.comandas) or any(
        normalizado in n.lower() for n in nomes
    )


def aplicar_item_otimista(pedido: Pedido, produto: Produto, amount: int = 1) -> Pedido:
    """
    Aplica localmente a inclusão de um item quando o detalhe não pôde ser
    recarregado: soma na linha do mesmo produto ou cria uma linha nova (sem id).
    A próxima consulta bem-sucedida substitui este estado por completo.
    """
    itens = [item.model_copy() for item in pedido.items]
    for i, item in enumerate(itens):
        if item.product.id == produto.id:
            itens[i] = item.model_copy(update={"amount": item.amount + amount})
            break
    else:
        itens.append(
            ItemPedido(
                id="",
                amount=amount,
                product=ProdutoSnapshot(
                    id=produto.id,
                    name=produto.name,
                    price=produto.price,
                    description=produto.description,
                    banner=produto.banner,
                ),
            )
        )
    return pedido.model_copy(update={"items": itens})
