"""
Raffle – Application Service: Funds Ledger
============================================
Pozo de cuotas de la ronda y ejecución del pago al ganador.

CONTRATO DE payout():
  - Argumentos inválidos (monto negativo, destinatario vacío, monto
    mayor al saldo retenido) → InvalidArgument.
  - Transferencia fallida (el riel devuelve False, lanza, o excede
    el timeout) → devuelve False. Nunca lanza por esto: es una
    condición recuperable que decide el llamador.
  - El saldo solo se descuenta si la transferencia se completó.

Sin reintentos: la política de reintento pertenece al llamador.
"""

from __future__ import annotations

import asyncio

from raffle.application.ports.payout_rail import IPayoutRail
from raffle.domain.exceptions.domain_errors import InvalidArgument
from raffle.shared.logging.logger import get_logger

logger = get_logger("funds_ledger")


class FundsLedger:
    """Saldo retenido por el sistema (el pozo) + riel de pagos."""

    def __init__(self, payout_rail: IPayoutRail, payout_timeout: float = 10.0) -> None:
        self._rail = payout_rail
        self._payout_timeout = payout_timeout
        self._balance: int = 0

    @property
    def balance(self) -> int:
        return self._balance

    def deposit(self, amount: int) -> None:
        if amount < 0:
            raise InvalidArgument("deposit no admite montos negativos", "amount", amount)
        self._balance += amount

    def restore(self, balance: int) -> None:
        """Restaura el saldo de un snapshot (rollback)."""
        self._balance = balance

    async def payout(self, to: str, amount: int) -> bool:
        if not isinstance(amount, int) or amount < 0:
            raise InvalidArgument("amount debe ser un entero no negativo", "amount", amount)
        if not to:
            raise InvalidArgument("destinatario vacío", "to", to)
        if amount > self._balance:
            raise InvalidArgument(
                f"amount {amount} excede el saldo retenido {self._balance}", "amount", amount,
            )

        try:
            ok = await asyncio.wait_for(
                self._rail.transfer(to, amount), timeout=self._payout_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Pago a %s por %d excedió %.1fs", to, amount, self._payout_timeout)
            return False
        except Exception as e:
            logger.warning("Pago a %s por %d falló en el riel: %s", to, amount, e)
            return False

        if not ok:
            logger.warning("Pago a %s por %d rechazado por el riel", to, amount)
            return False

        self._balance -= amount
        logger.info("Pagados %d a %s (saldo restante=%d)", amount, to, self._balance)
        return True
