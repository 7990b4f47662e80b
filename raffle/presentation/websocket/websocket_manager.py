"""
Raffle – WebSocket Manager (broadcast a clientes)
===================================================
Gestiona conexiones WebSocket y les reenvía los eventos del sorteo
en tiempo real.

ARQUITECTURA:
  EventBus ──(RaffleEntered)─────────▸ WSManager._broadcast_loop()
  EventBus ──(RequestedRaffleWinner)─▸ WSManager._broadcast_loop()
  EventBus ──(WinnerPicked)──────────▸ WSManager._broadcast_loop()
       │
       ▼
  [Cliente WS 1, Cliente WS 2, ...]

NO BLOQUEA EL LOOP PRINCIPAL:
- Cada tópico tiene su propio task de broadcast.
- El envío a cada cliente usa asyncio.wait_for con timeout; un
  cliente lento o caído se elimina sin afectar a los demás.
"""

from __future__ import annotations

import asyncio
import json
from typing import Set

from fastapi import WebSocket, WebSocketDisconnect

from raffle.application.ports.event_publisher import IEventPublisher
from raffle.shared.logging.logger import get_logger

logger = get_logger("ws_manager")

# tipo de evento de dominio → "type" del mensaje al cliente
BROADCAST_TOPICS = {
    "RaffleEntered": "raffle_entered",
    "RequestedRaffleWinner": "winner_requested",
    "WinnerPicked": "winner_picked",
}

SEND_TIMEOUT_SECONDS = 5.0


class WebSocketManager:
    """Gestiona conexiones de clientes y broadcast de eventos del sorteo."""

    def __init__(self, event_publisher: IEventPublisher) -> None:
        self._event_publisher = event_publisher
        self._clients: Set[WebSocket] = set()
        self._broadcast_tasks: list[asyncio.Task] = []

    async def start(self) -> None:
        """Lanzar un loop de broadcast por tópico."""
        for event_type, message_type in BROADCAST_TOPICS.items():
            queue = await self._event_publisher.subscribe(event_type, f"ws_broadcast_{message_type}")
            self._broadcast_tasks.append(
                asyncio.create_task(
                    self._broadcast_loop(queue, message_type),
                    name=f"ws-broadcast-{message_type}",
                )
            )
        logger.info("WebSocketManager iniciado – tópicos: %s", ", ".join(BROADCAST_TOPICS))

    async def stop(self) -> None:
        """Cancelar broadcast y cerrar todos los clientes."""
        for task in self._broadcast_tasks:
            task.cancel()
        self._broadcast_tasks.clear()

        for ws in list(self._clients):
            try:
                await ws.close()
            except (RuntimeError, WebSocketDisconnect):
                pass
        self._clients.clear()
        logger.info("WebSocketManager detenido")

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._clients.add(websocket)
        logger.info("Cliente WS conectado. Total: %d", len(self._clients))

    def disconnect(self, websocket: WebSocket) -> None:
        self._clients.discard(websocket)
        logger.info("Cliente WS desconectado. Total: %d", len(self._clients))

    async def broadcast(self, message_type: str, data: dict) -> None:
        """Enviar un mensaje a todos los clientes en paralelo."""
        if not self._clients:
            return
        payload = json.dumps({"type": message_type, "data": data})

        disconnected: list[WebSocket] = []
        await asyncio.gather(
            *(self._safe_send(ws, payload, disconnected) for ws in list(self._clients))
        )
        for ws in disconnected:
            self._clients.discard(ws)

    async def _broadcast_loop(self, queue: asyncio.Queue, message_type: str) -> None:
        try:
            while True:
                data = await queue.get()
                await self.broadcast(message_type, data)
        except asyncio.CancelledError:
            pass  # Shutdown limpio

    async def _safe_send(
        self, ws: WebSocket, payload: str, disconnected: list[WebSocket]
    ) -> None:
        """
        Envía con timeout; si falla, marca el cliente para limpieza.
        No lanza excepciones: un cliente caído no rompe el gather de broadcast.
        """
        try:
            await asyncio.wait_for(ws.send_text(payload), timeout=SEND_TIMEOUT_SECONDS)
        except (WebSocketDisconnect, asyncio.TimeoutError, Exception) as e:
            logger.debug("Envío a cliente WS falló (%s): %s", type(e).__name__, e)
            disconnected.append(ws)

    @property
    def client_count(self) -> int:
        return len(self._clients)
