"""Fixtures compartidas: una ronda con reloj explícito y sus colaboradores en memoria."""

from __future__ import annotations

import pytest

from raffle.application.ports.randomness_oracle import RandomnessRequestConfig
from raffle.application.services.funds_ledger import FundsLedger
from raffle.application.state.round_state import RoundStateManager
from raffle.application.use_cases.check_upkeep_usecase import CheckUpkeepUseCase
from raffle.application.use_cases.enter_raffle_usecase import EnterRaffleUseCase
from raffle.application.use_cases.randomness_coordinator import RandomnessCoordinator
from raffle.domain.entities.round import Round
from raffle.infrastructure.external.event_bus_adapter import EventBusAdapter
from raffle.infrastructure.external.in_memory_payout_rail import InMemoryPayoutRail
from raffle.infrastructure.external.mock_randomness_oracle import MockRandomnessOracle

FEE = 10
INTERVAL = 30
T0 = 1_000.0
AFTER_INTERVAL = T0 + INTERVAL + 1


class EventRecorder:
    """Registra los eventos publicados, en orden."""

    def __init__(self, bus: EventBusAdapter) -> None:
        self.events = []
        for event_type in ("RaffleEntered", "RequestedRaffleWinner", "WinnerPicked"):
            bus.register_handler(event_type, self._record)

    async def _record(self, event) -> None:
        self.events.append(event)

    def of_type(self, name: str) -> list:
        return [e for e in self.events if type(e).__name__ == name]


@pytest.fixture
def round_() -> Round:
    return Round(entry_fee=FEE, interval_seconds=INTERVAL, started_at=T0)


@pytest.fixture
def rail() -> InMemoryPayoutRail:
    return InMemoryPayoutRail()


@pytest.fixture
def ledger(rail) -> FundsLedger:
    return FundsLedger(rail, payout_timeout=1.0)


@pytest.fixture
def state(round_, ledger) -> RoundStateManager:
    return RoundStateManager(round_, ledger)


@pytest.fixture
def bus() -> EventBusAdapter:
    return EventBusAdapter(max_queue_size=100)


@pytest.fixture
def recorder(bus) -> EventRecorder:
    return EventRecorder(bus)


@pytest.fixture
def oracle() -> MockRandomnessOracle:
    return MockRandomnessOracle()


@pytest.fixture
def request_config() -> RandomnessRequestConfig:
    return RandomnessRequestConfig(key_hash="0xabc", subscription_id=1)


@pytest.fixture
def coordinator(state, oracle, bus, request_config) -> RandomnessCoordinator:
    coordinator = RandomnessCoordinator(
        state=state,
        oracle=oracle,
        event_publisher=bus,
        request_config=request_config,
        request_timeout=1.0,
    )
    oracle.bind(coordinator.on_randomness_ready)
    return coordinator


@pytest.fixture
def enter(state, bus) -> EnterRaffleUseCase:
    return EnterRaffleUseCase(state, bus)


@pytest.fixture
def check_upkeep(state) -> CheckUpkeepUseCase:
    return CheckUpkeepUseCase(state)
