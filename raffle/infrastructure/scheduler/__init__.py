"""Scheduling collaborators."""
from raffle.infrastructure.scheduler.upkeep_keeper import UpkeepKeeper

__all__ = ["UpkeepKeeper"]
