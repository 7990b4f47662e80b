"""External systems - oracle, payout rail and messaging."""

from raffle.infrastructure.external.event_bus_adapter import EventBusAdapter
from raffle.infrastructure.external.in_memory_payout_rail import InMemoryPayoutRail
from raffle.infrastructure.external.mock_randomness_oracle import MockRandomnessOracle
from raffle.infrastructure.external.websocket_oracle import WebSocketRandomnessOracle

__all__ = [
    "EventBusAdapter",
    "InMemoryPayoutRail",
    "MockRandomnessOracle",
    "WebSocketRandomnessOracle",
]
