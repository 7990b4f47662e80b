"""
Raffle – API Schemas (Pydantic)
=================================
Schemas de validación para request/response de la API REST.

Los montos no se acotan aquí: un monto menor a la cuota debe llegar
al dominio para responder InsufficientPayment, no un 422 genérico.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Union


class EnterRequest(BaseModel):
    identity: str = Field(..., description="Dirección / identidad del participante")
    amount: int = Field(..., description="Monto pagado (unidad mínima)")


class FulfillRequest(BaseModel):
    request_id: Union[int, str] = Field(..., description="Token de correlación del oráculo")
    random_value: int = Field(..., description="Palabra aleatoria entregada por el oráculo")


class HealthResponse(BaseModel):
    status: str
    service: str


class PendingRequestSchema(BaseModel):
    request_id: Union[int, str]
    issued_at: float


class EntrantSchema(BaseModel):
    index: int
    identity: str
