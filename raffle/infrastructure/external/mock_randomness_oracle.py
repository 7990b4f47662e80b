"""
Mock Randomness Oracle.

Oráculo local al estilo de un coordinador VRF de pruebas:

  - request_randomness() emite ids secuenciales (1, 2, 3, ...) y los
    guarda como solicitudes abiertas.
  - fulfill(request_id, random_value=None) entrega el callback a
    demanda; sin random_value usa secrets.randbits(256).
  - Con auto_fulfill_delay, cada solicitud se responde sola tras N
    segundos en un task propio (modo desarrollo sin relay externo).

Rechaza entregar ids que nunca emitió o que ya entregó: igual que el
oráculo real, responde exactamente una vez por solicitud aceptada.
"""

from __future__ import annotations

import asyncio
import secrets
from typing import Any, Optional

from raffle.application.ports.randomness_oracle import (
    IRandomnessOracle,
    RandomnessCallback,
    RandomnessOracleError,
    RandomnessRequestConfig,
)
from raffle.shared.logging.logger import get_logger

logger = get_logger("mock_oracle")


class MockRandomnessOracle(IRandomnessOracle):
    """Implementación en memoria de IRandomnessOracle."""

    def __init__(self, auto_fulfill_delay: Optional[float] = None) -> None:
        self._auto_fulfill_delay = auto_fulfill_delay
        self._callback: Optional[RandomnessCallback] = None
        self._next_request_id = 1
        self._open_requests: dict[int, RandomnessRequestConfig] = {}
        self._tasks: set[asyncio.Task] = set()

    def bind(self, callback: RandomnessCallback) -> None:
        self._callback = callback

    async def request_randomness(self, config: RandomnessRequestConfig) -> int:
        request_id = self._next_request_id
        self._next_request_id += 1
        self._open_requests[request_id] = config
        logger.info("Solicitud %d aceptada (num_words=%d)", request_id, config.num_words)

        if self._auto_fulfill_delay is not None:
            task = asyncio.create_task(
                self._auto_fulfill(request_id), name=f"mock-oracle-fulfill-{request_id}",
            )
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        return request_id

    async def fulfill(self, request_id: int, random_value: Optional[int] = None) -> int:
        """
        Entrega el callback de una solicitud abierta.

        Returns: el valor aleatorio entregado.
        """
        if request_id not in self._open_requests:
            raise RandomnessOracleError(f"Solicitud inexistente: {request_id}")
        if self._callback is None:
            raise RandomnessOracleError("No hay callback registrado")

        del self._open_requests[request_id]
        value = secrets.randbits(256) if random_value is None else random_value
        await self._callback(request_id, value)
        return value

    async def _auto_fulfill(self, request_id: int) -> None:
        try:
            await asyncio.sleep(self._auto_fulfill_delay)
            await self.fulfill(request_id)
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("Auto-fulfill de %d falló: %s", request_id, e)

    async def disconnect(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

    @property
    def open_requests(self) -> list[Any]:
        return list(self._open_requests)
