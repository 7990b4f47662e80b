"""
Raffle – Domain Layer
=======================
Núcleo puro del sistema. CERO dependencias externas.

Este módulo contiene:
- entities/: Round (máquina de estados OPEN ⇄ CALCULATING)
- value_objects/: PendingRequest, UpkeepCheck, RoundSnapshot
- services/: EntrantRegistry, UpkeepEvaluator, selección de ganador
- events/: Eventos de dominio
- exceptions/: Excepciones de dominio

REGLA DE DEPENDENCIA:
Este módulo NO puede importar de:
- infrastructure/
- presentation/
- application/
- Frameworks externos (FastAPI, websockets, etc.)
"""

from raffle.domain.entities.round import Round, RoundState
from raffle.domain.value_objects.pending_request import PendingRequest
from raffle.domain.value_objects.upkeep_check import UpkeepCheck, UpkeepDiagnostic
from raffle.domain.value_objects.round_snapshot import RoundSnapshot

__all__ = [
    "Round",
    "RoundState",
    "PendingRequest",
    "UpkeepCheck",
    "UpkeepDiagnostic",
    "RoundSnapshot",
]
