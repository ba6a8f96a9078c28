"""Bus de eventos de dominio en proceso."""

import logging
from collections import defaultdict

from app.application.interfaces.event_publisher import EventHandler, EventPublisher
from app.domain.events import DomainEvent

logger = logging.getLogger(__name__)


class InProcessEventBus(EventPublisher):
    """
    Despacha cada evento a sus suscriptores en orden de registro, esperando
    a cada uno antes de retornar.

    Un suscriptor que falla se registra en el log y no impide a los demás;
    el estado que dejó a medias se recupera con el worker de liquidaciones.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)
        self.published: list[DomainEvent] = []

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    async def publish(self, event: DomainEvent) -> None:
        self.published.append(event)
        handlers = self._handlers.get(type(event), [])
        logger.info(
            "Publishing domain event",
            extra={"event_id": event.event_id, "event_type": event.event_type, "handlers": len(handlers)},
        )
        for handler in handlers:
            try:
                await handler(event)
            except Exception as e:
                logger.error(
                    "Error processing domain event",
                    exc_info=e,
                    extra={"event_id": event.event_id, "event_type": event.event_type},
                )
