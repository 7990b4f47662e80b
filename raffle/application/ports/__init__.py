"""Application ports - Interfaces to infrastructure."""
from raffle.application.ports.event_publisher import IEventPublisher
from raffle.application.ports.payout_rail import IPayoutRail
from raffle.application.ports.randomness_oracle import (
    IRandomnessOracle,
    RandomnessCallback,
    RandomnessOracleError,
    RandomnessRequestConfig,
)

__all__ = [
    "IEventPublisher",
    "IPayoutRail",
    "IRandomnessOracle",
    "RandomnessCallback",
    "RandomnessOracleError",
    "RandomnessRequestConfig",
]
