"""
Raffle – Domain Exceptions
============================
Excepciones específicas del dominio del sorteo.

Cada excepción lleva los datos estructurados necesarios para que el
llamador decida si reintentar, ajustar parámetros o abandonar. Nada
de esto se reintenta dentro del core.

JERARQUÍA:
    DomainError (base)
    ├── InsufficientPayment
    ├── RoundNotOpen
    ├── UpkeepNotNeeded
    ├── UnknownRequest
    ├── PayoutFailed
    ├── IndexOutOfRange
    ├── InvalidArgument
    ├── InvalidStateTransition
    └── RandomnessRequestFailed
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def details(self) -> Dict[str, Any]:
        """Campos estructurados propios de cada error."""
        return {}

    def to_dict(self) -> dict:
        return {
            "error": self.code,
            "message": self.message,
            **self.details(),
        }


class InsufficientPayment(DomainError):
    """El pago no cubre la cuota de entrada."""

    def __init__(self, paid: int, required: int):
        super().__init__(
            f"Pago insuficiente: enviado={paid}, requerido={required}",
            code="INSUFFICIENT_PAYMENT",
        )
        self.paid = paid
        self.required = required

    def details(self) -> Dict[str, Any]:
        return {"paid": self.paid, "required": self.required}


class RoundNotOpen(DomainError):
    """La ronda no acepta entradas (está calculando ganador)."""

    def __init__(self, state: Any):
        super().__init__(f"La ronda no está abierta (estado={state})", code="ROUND_NOT_OPEN")
        self.state = state

    def details(self) -> Dict[str, Any]:
        return {"state": getattr(self.state, "name", str(self.state))}


class UpkeepNotNeeded(DomainError):
    """
    performUpkeep invocado sin cumplir las condiciones.

    El diagnóstico (pool, entrant_count, state_ordinal) se lee en la
    misma sección atómica que la evaluación.
    """

    def __init__(self, pool: int, entrant_count: int, state_ordinal: int):
        super().__init__(
            f"Upkeep no necesario (pool={pool}, entrants={entrant_count}, state={state_ordinal})",
            code="UPKEEP_NOT_NEEDED",
        )
        self.pool = pool
        self.entrant_count = entrant_count
        self.state_ordinal = state_ordinal

    def details(self) -> Dict[str, Any]:
        return {
            "pool": self.pool,
            "entrant_count": self.entrant_count,
            "state_ordinal": self.state_ordinal,
        }


class UnknownRequest(DomainError):
    """Callback con request_id inexistente, ya consumido o sin solicitud pendiente."""

    def __init__(self, request_id: Any):
        super().__init__(f"Solicitud desconocida: {request_id}", code="UNKNOWN_REQUEST")
        self.request_id = request_id

    def details(self) -> Dict[str, Any]:
        return {"request_id": self.request_id}


class PayoutFailed(DomainError):
    """La transferencia del pozo al ganador falló; la finalización se revierte."""

    def __init__(self, winner: str, amount: int, request_id: Any):
        super().__init__(
            f"Pago fallido a {winner} por {amount} (request={request_id})",
            code="PAYOUT_FAILED",
        )
        self.winner = winner
        self.amount = amount
        self.request_id = request_id

    def details(self) -> Dict[str, Any]:
        return {"winner": self.winner, "amount": self.amount, "request_id": self.request_id}


class IndexOutOfRange(DomainError):
    """Índice de participante fuera de rango."""

    def __init__(self, index: int, count: int):
        super().__init__(f"Índice {index} fuera de rango (count={count})", code="INDEX_OUT_OF_RANGE")
        self.index = index
        self.count = count

    def details(self) -> Dict[str, Any]:
        return {"index": self.index, "count": self.count}


class InvalidArgument(DomainError):
    """Argumento inválido (monto negativo, identidad vacía, etc.)."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message, code="INVALID_ARGUMENT")
        self.field = field
        self.value = value

    def details(self) -> Dict[str, Any]:
        return {"field": self.field, "value": self.value}


class InvalidStateTransition(DomainError):
    """Transición de estado no contemplada por la máquina de estados."""

    def __init__(self, current: Any, target: Any):
        super().__init__(
            f"Transición ilegal {getattr(current, 'name', current)} → {getattr(target, 'name', target)}",
            code="INVALID_STATE_TRANSITION",
        )
        self.current = current
        self.target = target

    def details(self) -> Dict[str, Any]:
        return {
            "current": getattr(self.current, "name", str(self.current)),
            "target": getattr(self.target, "name", str(self.target)),
        }


class RandomnessRequestFailed(DomainError):
    """El oráculo no aceptó la solicitud; la ronda vuelve a OPEN sin solicitud pendiente."""

    def __init__(self, reason: str):
        super().__init__(f"Solicitud de aleatoriedad fallida: {reason}", code="RANDOMNESS_REQUEST_FAILED")
        self.reason = reason

    def details(self) -> Dict[str, Any]:
        return {"reason": self.reason}
