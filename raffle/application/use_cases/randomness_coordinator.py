"""
Randomness Coordinator Use Case.

Orquesta el sorteo en dos tiempos contra un oráculo externo y no
confiable:

  perform_upkeep()                      fulfill(request_id, random_value)
  ─────────────────                     ─────────────────────────────────
  1. re-evaluar upkeep (atómico)        1. validar y consumir PendingRequest
  2. OPEN → CALCULATING                 2. elegir ganador, registrar last_winner,
  3. pedir aleatoriedad al oráculo         vaciar registro, CALCULATING → OPEN
  4. guardar PendingRequest             3. pagar TODO el pozo al ganador (último)
  5. publicar RequestedRaffleWinner     4. publicar WinnerPicked

EFECTOS ANTES DE INTERACCIÓN:
  En fulfill todos los cambios internos se aplican ANTES del pago, de
  modo que el riel externo nunca observa una ronda a medio cerrar. Si
  el pago falla se restaura el snapshot completo: la ronda vuelve a
  CALCULATING con la solicitud pendiente intacta y el llamador puede
  reintentar. Nunca se reporta éxito con los fondos sin mover.

EXCLUSIÓN MUTUA:
  Ambas operaciones corren bajo el lock del agregado, de modo que el
  check-then-act es atómico frente a join, performUpkeep o fulfill
  concurrentes. Un segundo performUpkeep mientras se calcula nunca
  ve ready=True.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, List, Optional

from raffle.application.ports.event_publisher import IEventPublisher
from raffle.application.ports.randomness_oracle import (
    IRandomnessOracle,
    RandomnessOracleError,
    RandomnessRequestConfig,
)
from raffle.application.state.round_state import RoundStateManager
from raffle.domain.events.domain_events import DomainEvent, RequestedRaffleWinner, WinnerPicked
from raffle.domain.exceptions.domain_errors import (
    DomainError,
    PayoutFailed,
    RandomnessRequestFailed,
    UnknownRequest,
    UpkeepNotNeeded,
)
from raffle.domain.services.upkeep_evaluator import UpkeepEvaluator
from raffle.domain.services.winner_selection import select_winner_index
from raffle.domain.value_objects.pending_request import PendingRequest
from raffle.shared.logging.logger import get_logger

logger = get_logger("randomness_coordinator")


@dataclass
class FulfillResult:
    """Resultado de una finalización exitosa."""
    request_id: Any
    winner: str
    winner_index: int
    amount: int
    random_value: int

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "winner": self.winner,
            "winner_index": self.winner_index,
            "amount": self.amount,
            "random_value": str(self.random_value),
        }


class RandomnessCoordinator:
    """Caso de uso: disparar el sorteo y consumir el callback del oráculo."""

    def __init__(
        self,
        state: RoundStateManager,
        oracle: IRandomnessOracle,
        event_publisher: IEventPublisher,
        request_config: RandomnessRequestConfig,
        evaluator: Optional[UpkeepEvaluator] = None,
        request_timeout: float = 10.0,
    ):
        self._state = state
        self._oracle = oracle
        self._event_publisher = event_publisher
        self._request_config = request_config
        self._evaluator = evaluator or UpkeepEvaluator()
        self._request_timeout = request_timeout

    # ════════════════════════════════════════════════════════════════
    #  performUpkeep
    # ════════════════════════════════════════════════════════════════

    async def perform_upkeep(self, now: Optional[float] = None) -> PendingRequest:
        """
        Dispara el sorteo si las condiciones se cumplen.

        Raises:
            UpkeepNotNeeded: con (pool, entrants, state_ordinal) leídos
                en la misma sección atómica que la evaluación.
            RandomnessRequestFailed: el oráculo no aceptó la solicitud;
                la ronda queda OPEN y sin solicitud pendiente.
        """
        now = time.time() if now is None else now

        async with self._state.lock:
            check = self._evaluator.evaluate(
                self._state.round,
                self._state.registry.count(),
                self._state.ledger.balance,
                now,
            )
            if not check.ready:
                d = check.diagnostic
                logger.debug("performUpkeep rechazado: %s", ", ".join(check.reasons))
                raise UpkeepNotNeeded(d.pool, d.entrant_count, d.state_ordinal)

            snap = self._state.snapshot()
            self._state.round.begin_calculating()
            try:
                request_id = await asyncio.wait_for(
                    self._oracle.request_randomness(self._request_config),
                    timeout=self._request_timeout,
                )
            except asyncio.TimeoutError:
                self._state.restore(snap)
                raise RandomnessRequestFailed(
                    f"el oráculo no respondió en {self._request_timeout:.1f}s"
                )
            except (RandomnessOracleError, OSError) as e:
                self._state.restore(snap)
                raise RandomnessRequestFailed(str(e)) from e
            except BaseException:
                self._state.restore(snap)
                raise

            pending = PendingRequest(request_id=request_id, issued_at=now)
            self._state.pending = pending

        logger.info(
            "Ganador solicitado: request_id=%s (entrants=%d, pool=%d)",
            request_id, check.diagnostic.entrant_count, check.diagnostic.pool,
        )
        await self._event_publisher.publish(RequestedRaffleWinner(request_id=request_id))
        return pending

    # ════════════════════════════════════════════════════════════════
    #  fulfill
    # ════════════════════════════════════════════════════════════════

    async def fulfill(
        self,
        request_id: Any,
        random_value: int,
        now: Optional[float] = None,
    ) -> FulfillResult:
        """
        Consume el callback del oráculo y finaliza la ronda.

        Raises:
            UnknownRequest: no hay solicitud pendiente o el id no coincide
                (incluye callbacks duplicados o repetidos).
            InvalidArgument: random_value no es un entero no negativo.
            PayoutFailed: el pago falló; todo el estado se restauró.
        """
        now = time.time() if now is None else now

        async with self._state.lock:
            pending = self._state.pending
            if pending is None or not pending.matches(request_id):
                raise UnknownRequest(request_id)

            # count > 0 garantizado: el upkeep lo exigió y en CALCULATING no entra nadie
            winner_index = select_winner_index(random_value, self._state.registry.count())
            snap = self._state.snapshot()

            # 1. Consumir la solicitud
            self._state.pending = None

            # 2. Efectos internos
            winner = self._state.registry.entrant_at(winner_index)
            amount = self._state.ledger.balance
            self._state.last_winner = winner
            self._state.round.reopen(now)
            self._state.registry.reset()
            events: List[DomainEvent] = [
                WinnerPicked(
                    winner=winner,
                    request_id=request_id,
                    amount=amount,
                    random_value=random_value,
                ),
            ]

            # 3. Interacción externa (último paso)
            try:
                paid = await self._state.ledger.payout(winner, amount)
            except BaseException:
                self._state.restore(snap)
                raise
            if not paid:
                self._state.restore(snap)
                raise PayoutFailed(winner, amount, request_id)

        logger.info(
            "Ganador: %s (índice %d) cobra %d – request_id=%s",
            winner, winner_index, amount, request_id,
        )
        await self._event_publisher.publish_all(events)
        return FulfillResult(
            request_id=request_id,
            winner=winner,
            winner_index=winner_index,
            amount=amount,
            random_value=random_value,
        )

    async def on_randomness_ready(self, request_id: Any, random_value: int) -> None:
        """
        Callback registrado en el oráculo.

        El oráculo no tiene a quién reportar un rechazo: se registra y la
        solicitud (si seguía pendiente) queda disponible para reintento.
        """
        try:
            await self.fulfill(request_id, random_value)
        except DomainError as e:
            logger.warning("Callback del oráculo rechazado: %s", e.to_dict())
