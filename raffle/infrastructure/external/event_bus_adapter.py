"""
Event Bus Adapter.

Implementa IEventPublisher con fan-out sobre asyncio.Queue.

  use case ──publish(event)──▸ handlers registrados (await en orden)
                          └──▸ cola de cada consumidor suscrito
                               (WebSocketManager, auditoría, ...)

CÓMO SE PROTEGE MEMORIA:
- Cada cola tiene capacidad fija (event_bus_max_queue_size).
- Política drop-oldest: un consumidor lento pierde los eventos más
  viejos de SU cola; el publicador nunca se bloquea.

Un handler que falla se registra en el log y no afecta al resto.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from raffle.application.ports.event_publisher import IEventPublisher
from raffle.domain.events.domain_events import DomainEvent
from raffle.shared.logging.logger import get_logger

logger = get_logger("event_bus")

EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventBusAdapter(IEventPublisher):
    """Publicador de eventos del sorteo, en memoria."""

    def __init__(self, max_queue_size: int = 10_000) -> None:
        self._queue_capacity = max_queue_size
        self._queues: Dict[str, List[Tuple[str, asyncio.Queue]]] = {}
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._subscription_lock = asyncio.Lock()
        self._published = 0
        self._dropped = 0

    async def publish(self, event: DomainEvent) -> None:
        topic = type(event).__name__
        self._published += 1
        logger.debug("Evento %s (%s)", topic, event.event_id)

        for handler in self._handlers.get(topic, ()):
            try:
                await handler(event)
            except Exception as e:
                logger.error("Handler de %s falló: %s", topic, e)

        payload = event.to_dict()
        for consumer, queue in self._queues.get(topic, ()):
            self._deliver(topic, consumer, queue, payload)

    def _deliver(self, topic: str, consumer: str, queue: asyncio.Queue, payload: dict) -> None:
        if queue.full():
            try:
                queue.get_nowait()
            except asyncio.QueueEmpty:
                pass
            else:
                self._dropped += 1
                logger.warning("Cola de '%s' llena en %s: se descarta el evento más viejo", consumer, topic)
        try:
            queue.put_nowait(payload)
        except asyncio.QueueFull:
            logger.error("Evento %s perdido para '%s'", topic, consumer)

    async def publish_all(self, events: List[DomainEvent]) -> None:
        """Publica en orden; usado para los eventos acumulados de una operación."""
        for event in events:
            await self.publish(event)

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)
        logger.info("Handler registrado para %s", event_type)

    async def subscribe(self, event_type: str, consumer_name: str) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_capacity)
        async with self._subscription_lock:
            self._queues.setdefault(event_type, []).append((consumer_name, queue))
        logger.info("'%s' suscrito a %s", consumer_name, event_type)
        return queue

    async def unsubscribe_all(self, event_type: Optional[str] = None) -> None:
        """Sin argumento limpia todo (shutdown)."""
        async with self._subscription_lock:
            if event_type is None:
                self._queues.clear()
                self._handlers.clear()
                return
            self._queues.pop(event_type, None)
            self._handlers.pop(event_type, None)

    @property
    def subscriber_count(self) -> int:
        return sum(len(consumers) for consumers in self._queues.values())

    @property
    def published_count(self) -> int:
        return self._published

    @property
    def dropped_count(self) -> int:
        return self._dropped
