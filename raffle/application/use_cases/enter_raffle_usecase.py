"""
Enter Raffle Use Case.

Caso de uso para comprar un boleto en la ronda actual.
"""

from __future__ import annotations

from dataclasses import dataclass

from raffle.application.ports.event_publisher import IEventPublisher
from raffle.application.state.round_state import RoundStateManager
from raffle.domain.events.domain_events import RaffleEntered
from raffle.shared.logging.logger import get_logger

logger = get_logger("enter_raffle")


@dataclass
class EnterRaffleResult:
    """Resultado de una entrada aceptada."""
    identity: str
    entrant_index: int
    entrant_count: int
    pool: int

    def to_dict(self) -> dict:
        return {
            "identity": self.identity,
            "entrant_index": self.entrant_index,
            "entrant_count": self.entrant_count,
            "pool": self.pool,
        }


class EnterRaffleUseCase:
    """
    Caso de uso: entrar al sorteo.

    Orquesta:
    1. Validación y registro del participante (EntrantRegistry)
    2. Depósito del pago en el pozo (FundsLedger)
    3. Publicación de RaffleEntered

    Todo bajo el lock del agregado: un join nunca se intercala con el
    check-then-act de performUpkeep ni con un fulfill en curso.
    """

    def __init__(self, state: RoundStateManager, event_publisher: IEventPublisher):
        self._state = state
        self._event_publisher = event_publisher

    async def execute(self, identity: str, amount: int) -> EnterRaffleResult:
        """
        Raises:
            InsufficientPayment, RoundNotOpen, InvalidArgument
        """
        async with self._state.lock:
            index = self._state.registry.join(identity, amount)
            self._state.ledger.deposit(amount)
            result = EnterRaffleResult(
                identity=identity,
                entrant_index=index,
                entrant_count=self._state.registry.count(),
                pool=self._state.ledger.balance,
            )

        logger.info("Entrada #%d de %s (%d) – pool=%d", index, identity, amount, result.pool)
        await self._event_publisher.publish(
            RaffleEntered(player=identity, amount=amount, entrant_index=index)
        )
        return result
