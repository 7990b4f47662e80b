"""Data Transfer Objects."""
from raffle.application.dto.raffle_dto import RaffleStatusDTO

__all__ = ["RaffleStatusDTO"]
