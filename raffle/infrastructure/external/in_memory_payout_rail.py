"""
In-Memory Payout Rail.

Riel de pagos en memoria: acredita saldos por identidad. Permite
bloquear destinatarios para simular transferencias rechazadas
(cuentas que no aceptan fondos).
"""

from __future__ import annotations

from collections import defaultdict

from raffle.application.ports.payout_rail import IPayoutRail
from raffle.shared.logging.logger import get_logger

logger = get_logger("payout_rail")


class InMemoryPayoutRail(IPayoutRail):
    """Implementación en memoria de IPayoutRail."""

    def __init__(self) -> None:
        self._balances: dict[str, int] = defaultdict(int)
        self._blocked: set[str] = set()
        self._transfers: list[tuple[str, int]] = []

    async def transfer(self, to: str, amount: int) -> bool:
        if to in self._blocked:
            logger.warning("Transferencia a %s rechazada (bloqueado)", to)
            return False
        self._balances[to] += amount
        self._transfers.append((to, amount))
        return True

    def block(self, identity: str) -> None:
        self._blocked.add(identity)

    def unblock(self, identity: str) -> None:
        self._blocked.discard(identity)

    def balance_of(self, identity: str) -> int:
        return self._balances.get(identity, 0)

    @property
    def transfers(self) -> list[tuple[str, int]]:
        return list(self._transfers)
