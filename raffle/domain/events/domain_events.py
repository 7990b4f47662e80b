"""
Raffle – Domain Events
========================
Eventos de dominio: HECHOS ya confirmados del sorteo.

Son inmutables y llevan timestamp. Los casos de uso los acumulan
durante la sección atómica y solo los publican tras confirmar la
operación: un fulfill revertido no emite WinnerPicked.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True)
class DomainEvent:
    """Evento base de dominio."""

    event_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": self.__class__.__name__,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class RaffleEntered(DomainEvent):
    """Evento: un participante compró un boleto."""

    player: str = ""
    amount: int = 0
    entrant_index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "player": self.player,
            "amount": self.amount,
            "entrant_index": self.entrant_index,
        })
        return base


@dataclass(frozen=True)
class RequestedRaffleWinner(DomainEvent):
    """Evento: se pidió aleatoriedad al oráculo; la ronda está calculando."""

    request_id: Any = None

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base["request_id"] = self.request_id
        return base


@dataclass(frozen=True)
class WinnerPicked(DomainEvent):
    """Evento: ganador elegido y pozo transferido."""

    winner: str = ""
    request_id: Any = None
    amount: int = 0
    random_value: int = 0

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "winner": self.winner,
            "request_id": self.request_id,
            "amount": self.amount,
            # uint256 no cabe en un number de JSON sin perder precisión
            "random_value": str(self.random_value),
        })
        return base
