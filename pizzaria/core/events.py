"""
Barramento de eventos de pedidos.

Os eventos são apenas sinais ("algo mudou, busque de novo"); nenhum dado é
transportado. Cada tela registra seus listeners ao montar e remove ao
desmontar.
"""
from enum import Enum
from typing import Callable, Dict, List, Union
import logging

logger = logging.getLogger(__name__)

OrderEventListener = Callable[[], None]


class OrderEvent(str, Enum):
    ORDER_CREATED = "order:created"
    ORDER_UPDATED = "order:updated"
    ORDER_FINISHED = "order:finished"
    ORDER_RECEIVED = "order:received"
    ORDER_VIEWED = "order:viewed"
    ORDER_DELETED = "order:deleted"
    TABLE_OPENED = "table:opened"
    REFRESH_ORDERS = "refresh:orders"


EventName = Union[OrderEvent, str]


def _chave(event: EventName) -> str:
    return event.value if isinstance(event, OrderEvent) else str(event)


class OrderEventBus:
    """Publish/subscribe síncrono, executa os listeners na ordem de registro."""

    def __init__(self):
        self._listeners: Dict[str, List[OrderEventListener]] = {}

    def on(self, event: EventName, listener: OrderEventListener) -> Callable[[], None]:
        """Registra um listener e devolve a função que o remove."""
        listeners = self._listeners.setdefault(_chave(event), [])
        if listener not in listeners:
            listeners.append(listener)

        def unsubscribe() -> None:
            self.off(event, listener)

        return unsubscribe

    def off(self, event: EventName, listener: OrderEventListener) -> None:
        listeners = self._listeners.get(_chave(event))
        if listeners and listener in listeners:
            listeners.remove(listener)

    def emit(self, event: EventName) -> None:
        chave = _chave(event)
        # cópia: um listener pode se remover durante a emissão
        for listener in list(self._listeners.get(chave, [])):
            try:
                listener()
            except Exception as e:
                logger.error(f"Erro ao executar listener do evento {chave}: {e}")

    def listener_count(self, event: EventName) -> int:
        return len(self._listeners.get(_chave(event), []))

    def remove_all_listeners(self) -> None:
        self._listeners.clear()


class OrderEventHelpers:
    """Emite o evento específico seguido de `refresh:orders`."""

    def __init__(self, bus: OrderEventBus):
        self.bus = bus

    def _notify(self, event: OrderEvent) -> None:
        self.bus.emit(event)
        self.bus.emit(OrderEvent.REFRESH_ORDERS)

    def notify_order_created(self) -> None:
        self._notify(OrderEvent.ORDER_CREATED)

    def notify_order_updated(self) -> None:
        self._notify(OrderEvent.ORDER_UPDATED)

    def notify_order_finished(self) -> None:
        self._notify(OrderEvent.ORDER_FINISHED)

    def notify_order_received(self) -> None:
        self._notify(OrderEvent.ORDER_RECEIVED)

    def notify_order_viewed(self) -> None:
        self._notify(OrderEvent.ORDER_VIEWED)

    def notify_order_deleted(self) -> None:
        self._notify(OrderEvent.ORDER_DELETED)

    def notify_table_opened(self) -> None:
        self._notify(OrderEvent.TABLE_OPENED)

    def notify_refresh(self) -> None:
        self.bus.emit(OrderEvent.REFRESH_ORDERS)
