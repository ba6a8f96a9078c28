from collections.abc import Awaitable, Callable
from typing import Protocol

from app.domain.events import DomainEvent

EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventPublisher(Protocol):
    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        ...

    async def publish(self, event: DomainEvent) -> None:
        ...
