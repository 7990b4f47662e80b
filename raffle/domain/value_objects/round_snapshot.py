"""
Raffle – Domain Value Object: RoundSnapshot
=============================================
Foto inmutable del agregado de ronda.

Se toma antes de cada sección con efectos externos (oráculo, pago)
y se restaura tal cual si esa interacción falla: la finalización es
transaccional, nunca queda a medias.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from raffle.domain.entities.round import RoundState
from raffle.domain.value_objects.pending_request import PendingRequest


@dataclass(frozen=True, slots=True)
class RoundSnapshot:
    state: RoundState
    started_at: float
    entrants: tuple
    pool: int
    pending: Optional[PendingRequest]
    last_winner: Optional[str]
