"""Domain events."""
from raffle.domain.events.domain_events import (
    DomainEvent,
    RaffleEntered,
    RequestedRaffleWinner,
    WinnerPicked,
)

__all__ = ["DomainEvent", "RaffleEntered", "RequestedRaffleWinner", "WinnerPicked"]
