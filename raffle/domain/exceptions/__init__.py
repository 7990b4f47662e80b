"""Domain exceptions."""
from raffle.domain.exceptions.domain_errors import (
    DomainError,
    InsufficientPayment,
    RoundNotOpen,
    UpkeepNotNeeded,
    UnknownRequest,
    PayoutFailed,
    IndexOutOfRange,
    InvalidArgument,
    InvalidStateTransition,
    RandomnessRequestFailed,
)

__all__ = [
    "DomainError",
    "InsufficientPayment",
    "RoundNotOpen",
    "UpkeepNotNeeded",
    "UnknownRequest",
    "PayoutFailed",
    "IndexOutOfRange",
    "InvalidArgument",
    "InvalidStateTransition",
    "RandomnessRequestFailed",
]
