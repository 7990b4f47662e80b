"""
Raffle – Presentation Layer
=============================
API HTTP y WebSocket.

Este módulo contiene:
- api/: FastAPI routes, schemas y mapeo de errores
- websocket/: broadcast de eventos del sorteo

REGLA DE DEPENDENCIA:
Esta capa SOLO llama a use cases de application/.
De domain/ solo conoce las excepciones (para mapearlas a HTTP);
no accede a infrastructure/.
"""

from raffle.presentation.api.routes import router, init_routes
from raffle.presentation.api.errors import register_exception_handlers
from raffle.presentation.websocket.websocket_manager import WebSocketManager

__all__ = [
    "router",
    "init_routes",
    "register_exception_handlers",
    "WebSocketManager",
]
