"""
Raffle – API error mapping
============================
Traduce DomainError a respuestas JSON con el código HTTP adecuado.
El cuerpo lleva los datos estructurados del error (to_dict()).
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from raffle.domain.exceptions.domain_errors import DomainError
from raffle.shared.logging.logger import get_logger

logger = get_logger("api.errors")

HTTP_STATUS_BY_CODE = {
    "INSUFFICIENT_PAYMENT": 400,
    "ROUND_NOT_OPEN": 409,
    "UPKEEP_NOT_NEEDED": 409,
    "INVALID_STATE_TRANSITION": 409,
    "UNKNOWN_REQUEST": 404,
    "INDEX_OUT_OF_RANGE": 404,
    "INVALID_ARGUMENT": 422,
    "PAYOUT_FAILED": 502,
    "RANDOMNESS_REQUEST_FAILED": 502,
}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = HTTP_STATUS_BY_CODE.get(exc.code, 400)
    if status_code >= 500:
        logger.warning("%s %s → %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(exc.to_dict()))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
