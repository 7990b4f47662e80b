"""
Raffle – Upkeep Keeper
========================
Colaborador externo que automatiza el sorteo: consulta checkUpkeep
cada `poll_interval` segundos y dispara performUpkeep cuando toca.

  ┌────────┐  checkUpkeep   ┌──────────────────┐
  │ Keeper │───────────────▸│ CheckUpkeepUseCase│
  │ (task) │  performUpkeep ┌──────────────────────┐
  │        │───────────────▸│ RandomnessCoordinator │
  └────────┘                └──────────────────────┘

- Es idempotente por construcción: el core re-evalúa las condiciones
  dentro de performUpkeep, así que una carrera con otro keeper o una
  llamada manual termina en UpkeepNotNeeded (se registra en debug).
- Un fallo del oráculo no mata el loop: se reintenta en el siguiente
  poll, no antes. El core nunca reintenta por su cuenta.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from raffle.application.use_cases.check_upkeep_usecase import CheckUpkeepUseCase
from raffle.application.use_cases.randomness_coordinator import RandomnessCoordinator
from raffle.domain.exceptions.domain_errors import (
    DomainError,
    RandomnessRequestFailed,
    UpkeepNotNeeded,
)
from raffle.domain.value_objects.pending_request import PendingRequest
from raffle.shared.logging.logger import get_logger

logger = get_logger("upkeep_keeper")


class UpkeepKeeper:
    """Loop de polling de upkeep como background task."""

    def __init__(
        self,
        check_upkeep: CheckUpkeepUseCase,
        coordinator: RandomnessCoordinator,
        poll_interval: float = 5.0,
    ) -> None:
        self._check_upkeep = check_upkeep
        self._coordinator = coordinator
        self._poll_interval = poll_interval
        self._task: Optional[asyncio.Task] = None

        # Contadores de monitoreo
        self._polls = 0
        self._triggers = 0
        self._failures = 0

    async def run_once(self) -> Optional[PendingRequest]:
        """Un ciclo check → perform. Devuelve la solicitud emitida, si hubo."""
        self._polls += 1
        check = await self._check_upkeep.execute()
        if not check.ready:
            logger.debug("Upkeep no necesario: %s", ", ".join(check.reasons))
            return None

        try:
            pending = await self._coordinator.perform_upkeep()
        except UpkeepNotNeeded as e:
            logger.debug("Carrera en performUpkeep: %s", e.to_dict())
            return None
        except RandomnessRequestFailed as e:
            self._failures += 1
            logger.warning("performUpkeep falló: %s", e.reason)
            return None

        self._triggers += 1
        return pending

    async def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.create_task(self._run_forever(), name="upkeep-keeper")
        logger.info("UpkeepKeeper iniciado (poll=%.1fs)", self._poll_interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("UpkeepKeeper detenido")

    async def _run_forever(self) -> None:
        while True:
            try:
                await self.run_once()
            except DomainError as e:
                self._failures += 1
                logger.error("Error de dominio en keeper: %s", e.to_dict())
            await asyncio.sleep(self._poll_interval)

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def stats(self) -> dict:
        return {
            "running": self.running,
            "polls": self._polls,
            "triggers": self._triggers,
            "failures": self._failures,
        }
