"""Domain services - pure business logic."""
from raffle.domain.services.entrant_registry import EntrantRegistry
from raffle.domain.services.upkeep_evaluator import UpkeepEvaluator
from raffle.domain.services.winner_selection import select_winner_index

__all__ = ["EntrantRegistry", "UpkeepEvaluator", "select_winner_index"]
