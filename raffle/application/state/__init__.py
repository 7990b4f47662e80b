"""In-memory round aggregate."""
from raffle.application.state.round_state import RoundStateManager

__all__ = ["RoundStateManager"]
