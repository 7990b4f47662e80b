"""
Raffle – Domain Value Object: UpkeepCheck
===========================================
Resultado de evaluar si la ronda puede sortearse.
"""

from __future__ import annotations

from dataclasses import dataclass

from raffle.domain.entities.round import RoundState


@dataclass(frozen=True, slots=True)
class UpkeepDiagnostic:
    """Tripleta de observabilidad (pool, entrants, estado)."""

    pool: int
    entrant_count: int
    state: RoundState

    @property
    def state_ordinal(self) -> int:
        return int(self.state)

    def to_dict(self) -> dict:
        return {
            "pool": self.pool,
            "entrant_count": self.entrant_count,
            "state": self.state.name,
            "state_ordinal": self.state_ordinal,
        }


@dataclass(frozen=True, slots=True)
class UpkeepCheck:
    """ready + diagnóstico + condiciones incumplidas (vacío si ready)."""

    ready: bool
    diagnostic: UpkeepDiagnostic
    reasons: tuple = ()

    def to_dict(self) -> dict:
        return {
            "ready": self.ready,
            "diagnostic": self.diagnostic.to_dict(),
            "reasons": list(self.reasons),
        }
