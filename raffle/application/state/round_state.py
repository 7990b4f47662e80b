"""
Raffle – Round State Manager
==============================
Agregado único en memoria: Round + EntrantRegistry + FundsLedger +
PendingRequest + último ganador, detrás de UN solo asyncio.Lock.

DISEÑO:
  - Una sola ronda viva; se reinicia, nunca se recrea.
  - Toda operación que muta el agregado toma el lock durante su
    sección atómica (join, performUpkeep, fulfill). Las lecturas
    coherentes también lo toman: así nunca se observa el estado
    provisional de un fulfill esperando al riel de pagos.
  - snapshot()/restore() dan semántica transaccional a las
    operaciones con interacción externa.

INVARIANTES:
  - pending is not None  ⇔  round.state == CALCULATING
  - pool == entry_fee * count() si todos pagan la cuota exacta

THREADING:
  Todo corre en un solo event-loop asyncio. El lock solo importa en
  los puntos de await (oráculo y pago), donde otras coroutines
  podrían intercalarse.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from raffle.application.services.funds_ledger import FundsLedger
from raffle.domain.entities.round import Round, RoundState
from raffle.domain.services.entrant_registry import EntrantRegistry
from raffle.domain.value_objects.pending_request import PendingRequest
from raffle.domain.value_objects.round_snapshot import RoundSnapshot
from raffle.shared.logging.logger import get_logger

logger = get_logger("round_state")


class RoundStateManager:
    """Dueño del agregado de ronda y de su frontera de exclusión mutua."""

    def __init__(self, round_: Round, ledger: FundsLedger) -> None:
        self.round = round_
        self.registry = EntrantRegistry(round_)
        self.ledger = ledger
        self.pending: Optional[PendingRequest] = None
        self.last_winner: Optional[str] = None
        self.lock = asyncio.Lock()

    # ════════════════════════════════════════════════════════════════
    #  TRANSACCIONES
    # ════════════════════════════════════════════════════════════════

    def snapshot(self) -> RoundSnapshot:
        return RoundSnapshot(
            state=self.round.state,
            started_at=self.round.started_at,
            entrants=self.registry.entrants(),
            pool=self.ledger.balance,
            pending=self.pending,
            last_winner=self.last_winner,
        )

    def restore(self, snap: RoundSnapshot) -> None:
        """Deshace todos los efectos internos posteriores a snap."""
        self.round.state = snap.state
        self.round.started_at = snap.started_at
        self.registry.restore(snap.entrants)
        self.ledger.restore(snap.pool)
        self.pending = snap.pending
        self.last_winner = snap.last_winner
        logger.warning(
            "Estado de ronda restaurado (state=%s, entrants=%d, pool=%d)",
            snap.state.name, len(snap.entrants), snap.pool,
        )

    # ════════════════════════════════════════════════════════════════
    #  CONSULTAS
    # ════════════════════════════════════════════════════════════════

    @property
    def state(self) -> RoundState:
        return self.round.state

    @property
    def pool(self) -> int:
        return self.ledger.balance

    def entrant_count(self) -> int:
        return self.registry.count()

    def to_dict(self) -> dict:
        return {
            **self.round.to_dict(),
            "entrant_count": self.registry.count(),
            "pool": self.ledger.balance,
            "last_winner": self.last_winner,
            "pending_request": self.pending.to_dict() if self.pending else None,
        }
