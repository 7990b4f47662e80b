"""
Raffle DTOs.

Data Transfer Objects para transferir el estado de la ronda entre
capas sin exponer el agregado mutable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from raffle.application.state.round_state import RoundStateManager


@dataclass(frozen=True)
class RaffleStatusDTO:
    """Vista confirmada de la ronda (interfaz de consulta)."""

    entry_fee: int
    interval_seconds: int
    state: str
    state_ordinal: int
    started_at: float
    entrant_count: int
    pool: int
    last_winner: Optional[str] = None
    pending_request_id: Any = None

    @classmethod
    def from_state(cls, state: RoundStateManager) -> "RaffleStatusDTO":
        return cls(
            entry_fee=state.round.entry_fee,
            interval_seconds=state.round.interval_seconds,
            state=state.round.state.name,
            state_ordinal=int(state.round.state),
            started_at=state.round.started_at,
            entrant_count=state.registry.count(),
            pool=state.ledger.balance,
            last_winner=state.last_winner,
            pending_request_id=state.pending.request_id if state.pending else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry_fee": self.entry_fee,
            "interval_seconds": self.interval_seconds,
            "state": self.state,
            "state_ordinal": self.state_ordinal,
            "started_at": self.started_at,
            "entrant_count": self.entrant_count,
            "pool": self.pool,
            "last_winner": self.last_winner,
            "pending_request_id": self.pending_request_id,
        }
