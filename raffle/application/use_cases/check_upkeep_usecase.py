"""
Check Upkeep Use Case.

checkUpkeep de solo lectura. Sin efectos: seguro para llamarlo tan
seguido como quiera el keeper externo.
"""

from __future__ import annotations

import time
from typing import Optional

from raffle.application.state.round_state import RoundStateManager
from raffle.domain.services.upkeep_evaluator import UpkeepEvaluator
from raffle.domain.value_objects.upkeep_check import UpkeepCheck


class CheckUpkeepUseCase:
    """Caso de uso: ¿hay que disparar el sorteo?"""

    def __init__(self, state: RoundStateManager, evaluator: Optional[UpkeepEvaluator] = None):
        self._state = state
        self._evaluator = evaluator or UpkeepEvaluator()

    async def execute(self, now: Optional[float] = None) -> UpkeepCheck:
        now = time.time() if now is None else now
        # Lectura coherente: nunca evalúa el estado provisional de un fulfill en curso
        async with self._state.lock:
            return self._evaluator.evaluate(
                self._state.round,
                self._state.registry.count(),
                self._state.ledger.balance,
                now,
            )
