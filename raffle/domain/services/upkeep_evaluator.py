"""
Raffle – Domain Service: Upkeep Evaluator
===========================================
Predicado puro: ¿se puede disparar el sorteo ahora?

CONDICIONES (AND lógico, todas obligatorias):
  1. now - started_at >= interval_seconds
  2. state == OPEN
  3. entrant_count > 0
  4. pool > 0

Sin efectos secundarios; se puede llamar tantas veces como se
quiera. Se usa dos veces: como checkUpkeep de solo lectura y como
precondición dentro de performUpkeep, evaluada en la misma sección
atómica que la transición de estado.
"""

from __future__ import annotations

from raffle.domain.entities.round import Round, RoundState
from raffle.domain.value_objects.upkeep_check import UpkeepCheck, UpkeepDiagnostic


class UpkeepEvaluator:
    """Evaluador stateless de las condiciones de upkeep."""

    def evaluate(
        self,
        round_: Round,
        entrant_count: int,
        pool: int,
        now: float,
    ) -> UpkeepCheck:
        reasons: list[str] = []
        if round_.elapsed(now) < round_.interval_seconds:
            reasons.append("interval_not_elapsed")
        if round_.state != RoundState.OPEN:
            reasons.append("round_not_open")
        if entrant_count <= 0:
            reasons.append("no_entrants")
        if pool <= 0:
            reasons.append("empty_pool")

        diagnostic = UpkeepDiagnostic(
            pool=pool,
            entrant_count=entrant_count,
            state=round_.state,
        )
        return UpkeepCheck(ready=not reasons, diagnostic=diagnostic, reasons=tuple(reasons))
