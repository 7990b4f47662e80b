"""
Raffle – Application Port: Randomness Oracle
==============================================
Interfaz hacia la fuente externa y asíncrona de aleatoriedad.

Protocolo en dos tiempos:
  1. request_randomness(config) → request_id   (envío, respuesta inmediata)
  2. más tarde, la infraestructura del oráculo invoca el callback
     on_randomness_ready(request_id, random_value) exactamente una
     vez por solicitud aceptada.

El core no confía en el oráculo: ids desconocidos o repetidos se
rechazan explícitamente en RandomnessCoordinator.fulfill().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

RandomnessCallback = Callable[[Any, int], Awaitable[None]]


class RandomnessOracleError(Exception):
    """Error técnico del oráculo (conexión, timeout, rechazo)."""


@dataclass(frozen=True, slots=True)
class RandomnessRequestConfig:
    """Parámetros de conexión de la solicitud (estilo coordinador VRF)."""

    key_hash: str
    subscription_id: int
    request_confirmations: int = 3
    callback_gas_limit: int = 500_000
    num_words: int = 1

    def to_dict(self) -> dict:
        return {
            "key_hash": self.key_hash,
            "subscription_id": self.subscription_id,
            "request_confirmations": self.request_confirmations,
            "callback_gas_limit": self.callback_gas_limit,
            "num_words": self.num_words,
        }


class IRandomnessOracle(ABC):
    """
    Interfaz del oráculo de aleatoriedad.

    IMPLEMENTACIONES:
    - MockRandomnessOracle (local / tests)
    - WebSocketRandomnessOracle (relay remoto)
    """

    @abstractmethod
    async def request_randomness(self, config: RandomnessRequestConfig) -> Any:
        """
        Envía una solicitud de aleatoriedad.

        Returns:
            request_id opaco que correlaciona el callback futuro.

        Raises:
            RandomnessOracleError si la solicitud no fue aceptada.
        """

    @abstractmethod
    def bind(self, callback: RandomnessCallback) -> None:
        """Registra el callback on_randomness_ready(request_id, random_value)."""

    async def connect(self) -> None:
        """Hook opcional para adaptadores con conexión."""
        return None

    async def disconnect(self) -> None:
        """Hook opcional de cierre."""
        return None
