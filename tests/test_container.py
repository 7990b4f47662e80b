import pytest

from raffle.container import Container, create_test_container
from raffle.infrastructure.external.in_memory_payout_rail import InMemoryPayoutRail
from raffle.infrastructure.external.mock_randomness_oracle import MockRandomnessOracle
from raffle.infrastructure.external.websocket_oracle import WebSocketRandomnessOracle
from raffle.shared.config.settings import Settings


def test_use_cases_share_one_round():
    container = Container(settings=Settings(entry_fee=5))
    assert container.round_state is container.round_state
    assert container.round_state.round.entry_fee == 5
    assert container.enter_raffle._state is container.coordinator._state
    assert container.check_upkeep._state is container.round_state


def test_oracle_backend_selection():
    assert isinstance(Container(settings=Settings()).randomness_oracle, MockRandomnessOracle)
    ws = Container(settings=Settings(oracle_backend="websocket")).randomness_oracle
    assert isinstance(ws, WebSocketRandomnessOracle)


async def test_coordinator_binds_oracle_callback():
    container = Container(settings=Settings(entry_fee=1, interval_seconds=0))
    coordinator = container.coordinator

    await container.enter_raffle.execute("alice", 1)
    pending = await coordinator.perform_upkeep()
    await container.randomness_oracle.fulfill(pending.request_id, 0)

    assert container.round_state.last_winner == "alice"


def test_override_and_reset():
    rail = InMemoryPayoutRail()
    container = create_test_container(payout_rail=rail)
    assert container.payout_rail is rail

    container.reset()
    assert container.payout_rail is not rail

    with pytest.raises(ValueError):
        container.override("nope", object())


def test_reset_clears_every_dependency():
    container = Container(settings=Settings())
    container.coordinator
    container.ws_manager

    container.reset()

    lazy_fields = [name for name in vars(container) if name.startswith("_")]
    assert lazy_fields
    assert all(getattr(container, name) is None for name in lazy_fields)
