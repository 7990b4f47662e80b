"""
Raffle – Settings (Pydantic BaseSettings)
=========================================
Configuración centralizada cargada desde variables de entorno / .env.
Se usa pydantic-settings para validación estricta al arranque.

Todas las variables usan el prefijo RAFFLE_ (e.g. RAFFLE_ENTRY_FEE).
La cuota de entrada y el intervalo son inmutables durante la vida
del proceso: el core los lee una sola vez al construir la ronda.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # ─── Ronda ──────────────────────────────────────────────────────────
    entry_fee: int = Field(
        default=10_000_000_000_000_000,
        gt=0,
        description="Cuota fija de entrada (unidad mínima, e.g. wei)",
    )
    interval_seconds: int = Field(
        default=30,
        ge=0,
        description="Tiempo mínimo de ronda antes de poder sortear",
    )

    # ─── Oráculo de aleatoriedad ────────────────────────────────────────
    oracle_backend: str = Field(
        default="mock",
        description="Implementación del oráculo: mock | websocket",
    )
    oracle_ws_url: str = Field(
        default="ws://localhost:8545/vrf",
        description="Endpoint WebSocket del relay del oráculo",
    )
    oracle_key_hash: str = Field(
        default="0x474e34a077df58807dbe9c96d3c009b23b3c6d0cce433e59bbf5b34f823bc56c",
        description="Gas lane / key hash del coordinador VRF",
    )
    oracle_subscription_id: int = Field(default=0, ge=0, description="ID de suscripción")
    oracle_request_confirmations: int = Field(default=3, ge=1)
    oracle_callback_gas_limit: int = Field(default=500_000, gt=0)
    oracle_num_words: int = Field(default=1, ge=1)
    oracle_request_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Timeout para que el oráculo acepte una solicitud",
    )
    oracle_reconnect_base_delay: float = Field(default=1.0, gt=0)
    oracle_reconnect_max_delay: float = Field(default=60.0, gt=0)
    mock_fulfill_delay_seconds: float | None = Field(
        default=None,
        description="Si se define, el oráculo mock responde solo tras N segundos",
    )

    # ─── Pagos ──────────────────────────────────────────────────────────
    payout_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Timeout de la transferencia al ganador",
    )

    # ─── Keeper (upkeep automático) ─────────────────────────────────────
    keeper_enabled: bool = Field(default=True, description="Lanzar el keeper al arranque")
    keeper_poll_interval_seconds: float = Field(
        default=5.0, gt=0, description="Intervalo entre checkUpkeep del keeper",
    )

    # ─── Event Bus ──────────────────────────────────────────────────────
    event_bus_max_queue_size: int = Field(
        default=10_000,
        description="Tamaño máximo de cola del Event Bus para contrapresión",
    )

    # ─── Server ─────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    debug: bool = Field(default=False)

    model_config = {
        "env_prefix": "RAFFLE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton global – se importa donde se necesite
settings = Settings()
