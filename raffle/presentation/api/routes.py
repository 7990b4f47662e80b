"""
Raffle – API Routes (FastAPI)
===============================
Endpoints REST y WebSocket del sorteo.

Endpoints disponibles:
  WS   /ws/raffle                    → eventos del sorteo en tiempo real
  GET  /api/health                   → health check
  GET  /api/raffle                   → estado de la ronda (consulta)
  GET  /api/raffle/entrants/{index}  → participante en un índice
  POST /api/raffle/enter             → comprar un boleto
  GET  /api/upkeep                   → checkUpkeep (sin efectos)
  POST /api/upkeep                   → performUpkeep
  POST /api/oracle/fulfill           → callback del oráculo (fulfill)
  GET  /api/keeper                   → estado del keeper

Los errores de dominio se propagan tal cual; el handler registrado en
errors.py los convierte en JSON con su código HTTP.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, WebSocket, WebSocketDisconnect

from raffle.presentation.api.schemas import (
    EnterRequest,
    EntrantSchema,
    FulfillRequest,
    HealthResponse,
    PendingRequestSchema,
)
from raffle.shared.logging.logger import get_logger

logger = get_logger("api.routes")

router = APIRouter()

# Referencias a componentes inyectados desde main.py
_enter_raffle = None
_check_upkeep = None
_coordinator = None
_raffle_status = None
_ws_manager = None
_keeper = None


def init_routes(
    enter_raffle,
    check_upkeep,
    coordinator,
    raffle_status,
    ws_manager=None,
    keeper=None,
) -> None:
    """Inyectar dependencias desde main.py al arrancar."""
    global _enter_raffle, _check_upkeep, _coordinator
    global _raffle_status, _ws_manager, _keeper
    _enter_raffle = enter_raffle
    _check_upkeep = check_upkeep
    _coordinator = coordinator
    _raffle_status = raffle_status
    _ws_manager = ws_manager
    _keeper = keeper


def _require(component, name: str):
    if component is None:
        raise HTTPException(status_code=503, detail=f"{name} not ready")
    return component


# ─── WebSocket endpoint ───────────────────────────────────────────────

@router.websocket("/ws/raffle")
async def raffle_stream(websocket: WebSocket) -> None:
    """Los clientes reciben aquí entradas, solicitudes y ganadores."""
    if _ws_manager is None:
        await websocket.close(code=1011, reason="Server not ready")
        return

    await _ws_manager.connect(websocket)
    try:
        while True:
            try:
                data = await websocket.receive_text()
                logger.debug("Mensaje de cliente WS: %s", data[:100])
            except WebSocketDisconnect:
                break
    finally:
        _ws_manager.disconnect(websocket)


# ─── Estado ───────────────────────────────────────────────────────────

@router.get("/api/health", response_model=HealthResponse)
async def health_check() -> dict:
    return {"status": "ok", "service": "raffle"}


@router.get("/api/raffle")
async def raffle_status() -> dict:
    """Cuota, estado, participantes, pozo, último ganador, inicio de ronda."""
    status = await _require(_raffle_status, "Raffle status").execute()
    return status.to_dict()


@router.get("/api/raffle/entrants/{index}", response_model=EntrantSchema)
async def entrant_at(index: int) -> dict:
    identity = await _require(_raffle_status, "Raffle status").entrant_at(index)
    return {"index": index, "identity": identity}


# ─── Entradas ─────────────────────────────────────────────────────────

@router.post("/api/raffle/enter", status_code=201)
async def enter_raffle(body: EnterRequest) -> dict:
    result = await _require(_enter_raffle, "Enter raffle").execute(body.identity, body.amount)
    return result.to_dict()


# ─── Upkeep ───────────────────────────────────────────────────────────

@router.get("/api/upkeep")
async def check_upkeep() -> dict:
    """checkUpkeep: (ready, diagnóstico). Sin efectos."""
    check = await _require(_check_upkeep, "Check upkeep").execute()
    return check.to_dict()


@router.post("/api/upkeep", response_model=PendingRequestSchema)
async def perform_upkeep() -> dict:
    pending = await _require(_coordinator, "Coordinator").perform_upkeep()
    return pending.to_dict()


# ─── Oráculo ──────────────────────────────────────────────────────────

@router.post("/api/oracle/fulfill")
async def fulfill(body: FulfillRequest) -> dict:
    """Entrega de aleatoriedad (relay HTTP del oráculo o reintento manual)."""
    result = await _require(_coordinator, "Coordinator").fulfill(body.request_id, body.random_value)
    return result.to_dict()


@router.get("/api/keeper")
async def keeper_status() -> dict:
    if _keeper is None:
        return {"running": False, "enabled": False}
    return {"enabled": True, **_keeper.stats}
