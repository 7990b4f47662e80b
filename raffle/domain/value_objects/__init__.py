"""Domain value objects."""
from raffle.domain.value_objects.pending_request import PendingRequest
from raffle.domain.value_objects.upkeep_check import UpkeepCheck, UpkeepDiagnostic
from raffle.domain.value_objects.round_snapshot import RoundSnapshot

__all__ = ["PendingRequest", "UpkeepCheck", "UpkeepDiagnostic", "RoundSnapshot"]
