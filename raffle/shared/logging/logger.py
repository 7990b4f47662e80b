"""
Raffle – Logging configuration
================================
Logging legible para desarrollo: una línea por evento con el logger
de origen, de modo que las transiciones de ronda (entrada, solicitud
al oráculo, ganador) se pueden seguir con un simple grep.
"""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-32s | %(message)s"

# Librerías que inundan el log en nivel INFO
_NOISY_LOGGERS = ("websockets", "uvicorn.access", "httpx")


def setup_logging(debug: bool = False) -> None:
    """Configura el root logger una sola vez al arranque."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    if not root.handlers:
        root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Fábrica de loggers bajo el namespace ``raffle.``."""
    return logging.getLogger(f"raffle.{name}")
