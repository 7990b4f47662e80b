"""
Raffle – Application Port: Payout Rail
========================================
Interfaz hacia el riel de pagos que transfiere el pozo al ganador.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class IPayoutRail(ABC):
    """
    Riel de transferencias.

    IMPLEMENTACIONES POSIBLES:
    - InMemoryPayoutRail (local / tests)
    - Wallet on-chain, pasarela de pagos, etc.
    """

    @abstractmethod
    async def transfer(self, to: str, amount: int) -> bool:
        """
        Transfiere amount a to.

        Returns:
            True si la transferencia se completó, False si fue rechazada.
        """
