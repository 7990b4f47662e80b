"""Domain entities."""
from raffle.domain.entities.round import Round, RoundState

__all__ = ["Round", "RoundState"]
