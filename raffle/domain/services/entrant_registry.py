"""
Raffle – Domain Service: Entrant Registry
===========================================
Lista ordenada de participantes de la ronda actual.

DISEÑO:
  - No se exige unicidad: la misma identidad puede entrar varias
    veces; cada aparición es una entrada pagada y un boleto.
  - Orden de inserción preservado → entrant_at(i) es estable
    durante toda la ronda (el índice ganador depende de ello).
  - Se vacía exactamente cuando la ronda se finaliza.

Las validaciones de join se hacen ANTES de mutar: un join fallido
nunca deja rastro en el registro.
"""

from __future__ import annotations

from typing import Iterable

from raffle.domain.entities.round import Round
from raffle.domain.exceptions.domain_errors import (
    IndexOutOfRange,
    InsufficientPayment,
    InvalidArgument,
    RoundNotOpen,
)


class EntrantRegistry:
    """Participantes de la ronda, ligados a la ronda que los admite."""

    def __init__(self, round_: Round) -> None:
        self._round = round_
        self._entrants: list[str] = []

    # ════════════════════════════════════════════════════════════════
    #  ESCRITURA
    # ════════════════════════════════════════════════════════════════

    def join(self, identity: str, paid_amount: int) -> int:
        """
        Registra una entrada pagada.

        Returns: índice del nuevo boleto.

        Raises:
            InvalidArgument: identidad vacía o monto no entero.
            InsufficientPayment: paid_amount < entry_fee.
            RoundNotOpen: la ronda está en CALCULATING.
        """
        if not isinstance(identity, str) or not identity.strip():
            raise InvalidArgument("identity no puede estar vacía", "identity", identity)
        if not isinstance(paid_amount, int) or isinstance(paid_amount, bool):
            raise InvalidArgument("paid_amount debe ser entero", "paid_amount", paid_amount)
        if paid_amount < self._round.entry_fee:
            raise InsufficientPayment(paid_amount, self._round.entry_fee)
        if not self._round.is_open:
            raise RoundNotOpen(self._round.state)

        self._entrants.append(identity)
        return len(self._entrants) - 1

    def reset(self) -> None:
        """Vacía el registro. Solo durante la finalización de la ronda."""
        self._entrants.clear()

    def restore(self, entrants: Iterable[str]) -> None:
        """Restaura el contenido exacto de un snapshot (rollback)."""
        self._entrants = list(entrants)

    # ════════════════════════════════════════════════════════════════
    #  CONSULTAS
    # ════════════════════════════════════════════════════════════════

    def count(self) -> int:
        return len(self._entrants)

    def entrant_at(self, index: int) -> str:
        if index < 0 or index >= len(self._entrants):
            raise IndexOutOfRange(index, len(self._entrants))
        return self._entrants[index]

    def entrants(self) -> tuple:
        return tuple(self._entrants)
