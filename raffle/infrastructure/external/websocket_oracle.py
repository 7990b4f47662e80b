"""
WebSocket Randomness Oracle.

Adapta un relay de oráculo VRF (JSON sobre WebSocket) a la interfaz
IRandomnessOracle.

PROTOCOLO:
  → {"action": "request_random_words", "nonce": "...", "key_hash": ...,
     "subscription_id": ..., "request_confirmations": ...,
     "callback_gas_limit": ..., "num_words": ...}
  ← {"type": "request_accepted", "nonce": "...", "request_id": ...}
  ← {"type": "request_rejected", "nonce": "...", "reason": "..."}
  ... más tarde ...
  ← {"type": "random_words_fulfilled", "request_id": ..., "random_words": [...]}

El nonce correlaciona el envío con su acuse; el request_id (emitido
por el oráculo) correlaciona el callback con la ronda. Solo se usa
la primera palabra aleatoria.

RECONEXIÓN:
  Backoff exponencial con jitter mientras el adaptador está corriendo.
  Las solicitudes esperando acuse al caer la conexión fallan de
  inmediato con RandomnessOracleError (el core revierte a OPEN).

CALLBACKS:
  Cada fulfillment se entrega en su propio task. El loop de escucha
  sigue leyendo acuses mientras un callback espera el lock de la ronda.
"""

from __future__ import annotations

import asyncio
import json
import random
import uuid
from typing import Any, Optional

import websockets
from websockets.exceptions import ConnectionClosed, InvalidHandshake

from raffle.application.ports.randomness_oracle import (
    IRandomnessOracle,
    RandomnessCallback,
    RandomnessOracleError,
    RandomnessRequestConfig,
)
from raffle.shared.logging.logger import get_logger

logger = get_logger("websocket_oracle")


def _parse_word(word: Any) -> int:
    """Palabras aleatorias llegan como entero o como string decimal/hex."""
    if isinstance(word, str):
        return int(word, 0)
    return int(word)


class WebSocketRandomnessOracle(IRandomnessOracle):
    """Implementación de IRandomnessOracle contra un relay WebSocket."""

    def __init__(
        self,
        url: str,
        request_timeout: float = 10.0,
        reconnect_base_delay: float = 1.0,
        reconnect_max_delay: float = 60.0,
    ) -> None:
        self._url = url
        self._request_timeout = request_timeout
        self._reconnect_base_delay = reconnect_base_delay
        self._reconnect_max_delay = reconnect_max_delay

        self._ws = None
        self._running = False
        self._callback: Optional[RandomnessCallback] = None
        self._acks: dict[str, asyncio.Future] = {}
        self._listen_task: Optional[asyncio.Task] = None
        self._callback_tasks: set[asyncio.Task] = set()
        self._reconnect_attempt = 0

        # Stats
        self._requests_sent = 0
        self._fulfillments_received = 0

    def bind(self, callback: RandomnessCallback) -> None:
        self._callback = callback

    # ════════════════════════════════════════════════════════════════
    #  IRandomnessOracle Implementation
    # ════════════════════════════════════════════════════════════════

    async def request_randomness(self, config: RandomnessRequestConfig) -> Any:
        if self._ws is None:
            raise RandomnessOracleError("Oráculo no conectado")

        nonce = uuid.uuid4().hex
        ack: asyncio.Future = asyncio.get_running_loop().create_future()
        self._acks[nonce] = ack
        try:
            await self._ws.send(json.dumps({
                "action": "request_random_words",
                "nonce": nonce,
                **config.to_dict(),
            }))
            self._requests_sent += 1
            return await asyncio.wait_for(ack, timeout=self._request_timeout)
        except asyncio.TimeoutError:
            raise RandomnessOracleError(
                f"Sin acuse del oráculo en {self._request_timeout:.1f}s"
            )
        except ConnectionClosed as e:
            raise RandomnessOracleError(f"Conexión cerrada: {e}") from e
        finally:
            self._acks.pop(nonce, None)

    async def connect(self) -> None:
        if self._running:
            logger.warning("WebSocketRandomnessOracle ya está conectado")
            return
        self._running = True
        await self._connect()

    async def disconnect(self) -> None:
        self._running = False
        if self._listen_task is not None:
            self._listen_task.cancel()
            self._listen_task = None
        if self._ws is not None:
            try:
                await self._ws.close()
            except ConnectionClosed:
                pass
            self._ws = None
        self._fail_pending_acks("oráculo desconectado")
        for task in list(self._callback_tasks):
            task.cancel()
        self._callback_tasks.clear()
        logger.info("WebSocketRandomnessOracle desconectado")

    # ════════════════════════════════════════════════════════════════
    #  Mensajes
    # ════════════════════════════════════════════════════════════════

    async def handle_message(self, raw: str) -> None:
        """Procesa un mensaje del relay (acuses y callbacks)."""
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Mensaje no-JSON recibido: %s", e)
            return

        msg_type = data.get("type")
        if msg_type == "request_accepted":
            ack = self._acks.get(data.get("nonce"))
            if ack is not None and not ack.done():
                ack.set_result(data["request_id"])

        elif msg_type == "request_rejected":
            ack = self._acks.get(data.get("nonce"))
            if ack is not None and not ack.done():
                ack.set_exception(RandomnessOracleError(data.get("reason", "rechazada")))

        elif msg_type == "random_words_fulfilled":
            words = data.get("random_words") or []
            if not words:
                logger.error("Fulfillment sin palabras para request %s", data.get("request_id"))
                return
            self._fulfillments_received += 1
            if self._callback is None:
                logger.error("Fulfillment recibido sin callback registrado")
                return
            try:
                value = _parse_word(words[0])
            except ValueError:
                logger.error("Palabra aleatoria inválida para request %s: %r", data.get("request_id"), words[0])
                return
            # Los acuses nunca esperan detrás de un callback (toma el lock de la ronda)
            task = asyncio.create_task(
                self._deliver(data["request_id"], value),
                name=f"oracle-fulfill-{data['request_id']}",
            )
            self._callback_tasks.add(task)
            task.add_done_callback(self._callback_tasks.discard)

        elif "error" in data:
            logger.error("Error del oráculo: %s", data["error"])

    async def _deliver(self, request_id: Any, value: int) -> None:
        try:
            await self._callback(request_id, value)
        except Exception as e:
            logger.error("Error entregando fulfillment %s: %s", request_id, e)

    # ════════════════════════════════════════════════════════════════
    #  Connection Management
    # ════════════════════════════════════════════════════════════════

    async def _connect(self) -> None:
        try:
            self._ws = await websockets.connect(self._url)
            self._reconnect_attempt = 0
            self._listen_task = asyncio.create_task(self._listen(), name="oracle-ws-listen")
            logger.info("Conectado al relay del oráculo: %s", self._url)
        except (OSError, InvalidHandshake, asyncio.TimeoutError) as e:
            logger.error("Error conectando al oráculo: %s", e)
            self._listen_task = asyncio.create_task(self._reconnect(), name="oracle-ws-reconnect")

    async def _reconnect(self) -> None:
        """Reconexión con backoff exponencial."""
        if not self._running:
            return
        self._reconnect_attempt += 1
        delay = min(
            self._reconnect_base_delay * (2 ** self._reconnect_attempt),
            self._reconnect_max_delay,
        )
        jitter = random.uniform(0, delay * 0.1)
        logger.info("Reconectando en %.2fs (intento %d)", delay + jitter, self._reconnect_attempt)
        await asyncio.sleep(delay + jitter)
        if self._running:
            await self._connect()

    async def _listen(self) -> None:
        if self._ws is None:
            return
        try:
            async for message in self._ws:
                await self.handle_message(message)
        except ConnectionClosed:
            logger.warning("Conexión con el oráculo cerrada")
        except asyncio.CancelledError:
            return

        self._ws = None
        self._fail_pending_acks("conexión perdida")
        if self._running:
            await self._reconnect()

    def _fail_pending_acks(self, reason: str) -> None:
        for ack in self._acks.values():
            if not ack.done():
                ack.set_exception(RandomnessOracleError(reason))

    def get_stats(self) -> dict:
        return {
            "connected": self._ws is not None,
            "running": self._running,
            "requests_sent": self._requests_sent,
            "fulfillments_received": self._fulfillments_received,
            "awaiting_ack": len(self._acks),
            "callbacks_in_flight": len(self._callback_tasks),
        }
