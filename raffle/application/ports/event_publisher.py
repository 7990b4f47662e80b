"""
Raffle – Application Port: Event Publisher
============================================
Interfaz para publicar eventos de dominio.

Los use cases publican eventos; la infraestructura decide CÓMO
entregarlos (colas en memoria, WebSocket, etc.)
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional

from raffle.domain.events.domain_events import DomainEvent


class IEventPublisher(ABC):
    """Interfaz para publicar eventos del sistema."""

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """Publica un evento a todos los consumidores de su tipo."""

    @abstractmethod
    async def publish_all(self, events: List[DomainEvent]) -> None:
        """Publica varios eventos en orden."""

    @abstractmethod
    def register_handler(
        self,
        event_type: str,
        handler: Callable[[DomainEvent], Awaitable[None]],
    ) -> None:
        """Registra un handler async para un tipo de evento."""

    @abstractmethod
    async def subscribe(self, event_type: str, consumer_name: str) -> asyncio.Queue:
        """Suscribe un consumidor y devuelve su Queue exclusiva."""

    async def unsubscribe_all(self, event_type: Optional[str] = None) -> None:
        """Libera consumidores (todos si event_type es None). Hook opcional de shutdown."""
        return None
