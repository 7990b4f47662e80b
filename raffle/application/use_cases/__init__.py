"""Application use cases - Business logic orchestration."""

from raffle.application.use_cases.enter_raffle_usecase import (
    EnterRaffleUseCase,
    EnterRaffleResult,
)
from raffle.application.use_cases.check_upkeep_usecase import CheckUpkeepUseCase
from raffle.application.use_cases.randomness_coordinator import (
    RandomnessCoordinator,
    FulfillResult,
)
from raffle.application.use_cases.raffle_status_usecase import GetRaffleStatusUseCase

__all__ = [
    "EnterRaffleUseCase",
    "EnterRaffleResult",
    "CheckUpkeepUseCase",
    "RandomnessCoordinator",
    "FulfillResult",
    "GetRaffleStatusUseCase",
]
