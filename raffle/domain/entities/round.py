"""
Raffle – Domain Entity: Round
================================
La ronda del sorteo y su máquina de estados.

═══════════════════════════════════════════════════════════════
            CICLO DE VIDA DE LA RONDA
═══════════════════════════════════════════════════════════════

  Arranque
     │
     ▼
  OPEN ──(performUpkeep exitoso)──▸ CALCULATING
   ▲                                   │
   └────(fulfill exitoso, reopen)──────┘

  - OPEN:        acepta entradas; el upkeep puede dispararse.
  - CALCULATING: rechaza entradas; espera exactamente un callback
                 del oráculo de aleatoriedad.

No hay estado terminal: la ronda se reinicia, nunca se recrea.
Cualquier otra transición es ilegal.

POR QUÉ NO frozen=True:
  Igual que un trade, la ronda tiene un ciclo de vida mutable. Se
  muta in-place solo a través de los métodos de transición.
"""

from __future__ import annotations

import time
from enum import IntEnum
from typing import Optional

from raffle.domain.exceptions.domain_errors import (
    InvalidArgument,
    InvalidStateTransition,
    RoundNotOpen,
)


class RoundState(IntEnum):
    """Estados de la ronda. El valor entero es el ordinal de diagnóstico."""
    OPEN = 0
    CALCULATING = 1


class Round:
    """
    Ronda única y viva del sorteo.

    entry_fee e interval_seconds son inmutables para toda la vida
    del sistema; state y started_at cambian solo vía transiciones.
    """

    __slots__ = ("_entry_fee", "_interval_seconds", "state", "started_at")

    def __init__(
        self,
        entry_fee: int,
        interval_seconds: int,
        started_at: Optional[float] = None,
    ) -> None:
        if not isinstance(entry_fee, int) or entry_fee <= 0:
            raise InvalidArgument("entry_fee debe ser un entero positivo", "entry_fee", entry_fee)
        if interval_seconds < 0:
            raise InvalidArgument("interval_seconds no puede ser negativo", "interval_seconds", interval_seconds)

        self._entry_fee = entry_fee
        self._interval_seconds = interval_seconds
        self.state: RoundState = RoundState.OPEN
        self.started_at: float = time.time() if started_at is None else started_at

    @property
    def entry_fee(self) -> int:
        return self._entry_fee

    @property
    def interval_seconds(self) -> int:
        return self._interval_seconds

    # ════════════════════════════════════════════════════════════════
    #  TRANSICIONES DE ESTADO
    # ════════════════════════════════════════════════════════════════

    def begin_calculating(self) -> None:
        """OPEN → CALCULATING (solo vía upkeep exitoso)."""
        if self.state != RoundState.OPEN:
            raise RoundNotOpen(self.state)
        self.state = RoundState.CALCULATING

    def reopen(self, now: float) -> None:
        """CALCULATING → OPEN (solo vía finalización exitosa). Reinicia el reloj."""
        if self.state != RoundState.CALCULATING:
            raise InvalidStateTransition(self.state, RoundState.OPEN)
        self.state = RoundState.OPEN
        self.started_at = now

    # ════════════════════════════════════════════════════════════════
    #  CONSULTAS
    # ════════════════════════════════════════════════════════════════

    @property
    def is_open(self) -> bool:
        return self.state == RoundState.OPEN

    def elapsed(self, now: float) -> float:
        return now - self.started_at

    def to_dict(self) -> dict:
        return {
            "state": self.state.name,
            "state_ordinal": int(self.state),
            "started_at": self.started_at,
            "entry_fee": self._entry_fee,
            "interval_seconds": self._interval_seconds,
        }
