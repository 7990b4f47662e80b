"""
Raffle – Main Application Entry Point
=======================================
Orquesta los componentes del sorteo: ronda + oráculo + riel de pagos +
keeper + broadcast WebSocket.

ARQUITECTURA DE ARRANQUE:
  1. Configurar logging
  2. Crear instancias (Container: Event Bus, RoundState, use cases, ...)
  3. FastAPI lifespan startup:
     a. Registrar el callback del coordinador en el oráculo y conectarlo
     b. Inyectar dependencias en las rutas
     c. Iniciar WebSocketManager (broadcast a clientes)
     d. Iniciar UpkeepKeeper (si está habilitado)
  4. FastAPI lifespan shutdown:
     a. Detener todo en orden inverso

FLUJO DEL SORTEO:
  POST /api/raffle/enter → EnterRaffleUseCase → EventBus(RaffleEntered)
  Keeper → checkUpkeep → performUpkeep → Oráculo.request_randomness
       → EventBus(RequestedRaffleWinner)
  Oráculo → on_randomness_ready → fulfill → FundsLedger.payout
       → EventBus(WinnerPicked) → WebSocketManager → Clientes

  uvicorn raffle.main:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from raffle.container import Container, init_container
from raffle.presentation.api.errors import register_exception_handlers
from raffle.presentation.api.routes import router, init_routes
from raffle.shared.logging.logger import setup_logging, get_logger

logger = get_logger("main")


def create_app(container: Optional[Container] = None) -> FastAPI:
    """Construye la app FastAPI sobre un contenedor (el global por defecto)."""
    if container is None:
        container = init_container()
    settings = container.settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup/shutdown lifecycle de la aplicación.
        Las coroutines de larga duración (keeper, broadcast) se lanzan como tasks.
        """
        setup_logging(settings.debug)
        logger.info("=" * 60)
        logger.info("  Raffle Keeper")
        logger.info("  Cuota de entrada: %d", settings.entry_fee)
        logger.info("  Intervalo de ronda: %ds", settings.interval_seconds)
        logger.info("  Oráculo: %s", settings.oracle_backend)
        logger.info("  Keeper: %s (poll=%.1fs)",
                    "habilitado" if settings.keeper_enabled else "deshabilitado",
                    settings.keeper_poll_interval_seconds)
        logger.info("=" * 60)

        # El coordinador registra su callback en el oráculo al construirse
        coordinator = container.coordinator
        await container.randomness_oracle.connect()

        init_routes(
            enter_raffle=container.enter_raffle,
            check_upkeep=container.check_upkeep,
            coordinator=coordinator,
            raffle_status=container.raffle_status,
            ws_manager=container.ws_manager,
            keeper=container.keeper if settings.keeper_enabled else None,
        )

        await container.ws_manager.start()
        if settings.keeper_enabled:
            await container.keeper.start()

        app.state.container = container
        logger.info("✓ Todos los componentes iniciados correctamente")

        yield  # ← La app está corriendo aquí

        # ── SHUTDOWN ──
        logger.info("Iniciando shutdown...")
        if settings.keeper_enabled:
            await container.keeper.stop()
        await container.ws_manager.stop()
        await container.randomness_oracle.disconnect()
        await container.event_publisher.unsubscribe_all()
        logger.info("✓ Shutdown completo")

    app = FastAPI(
        title="Raffle Keeper",
        description="Sorteo recurrente con aleatoriedad externa verificable y upkeep automatizado",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    from raffle.shared.config.settings import settings

    uvicorn.run("raffle.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
