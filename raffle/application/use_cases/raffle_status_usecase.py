"""
Raffle Status Use Case.

Interfaz de consulta: cuota, estado, participantes, último ganador
y marca de inicio de la ronda. Solo lectura.
"""

from __future__ import annotations

from raffle.application.dto.raffle_dto import RaffleStatusDTO
from raffle.application.state.round_state import RoundStateManager


class GetRaffleStatusUseCase:
    """Caso de uso: leer una vista confirmada de la ronda."""

    def __init__(self, state: RoundStateManager):
        self._state = state

    async def execute(self) -> RaffleStatusDTO:
        async with self._state.lock:
            return RaffleStatusDTO.from_state(self._state)

    async def entrant_at(self, index: int) -> str:
        """Raises: IndexOutOfRange"""
        async with self._state.lock:
            return self._state.registry.entrant_at(index)
