"""
Raffle – Domain Value Object: PendingRequest
==============================================
Solicitud de aleatoriedad en vuelo. Existe si y solo si la ronda
está en CALCULATING; se destruye al consumir su callback.

- frozen=True → inmutable, se puede compartir entre coroutines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PendingRequest:
    """Token de correlación emitido por el oráculo + momento de emisión."""

    request_id: Any   # opaco, lo decide el oráculo
    issued_at: float

    def matches(self, request_id: Any) -> bool:
        return self.request_id == request_id

    def to_dict(self) -> dict:
        return {"request_id": self.request_id, "issued_at": self.issued_at}
