"""RandomnessCoordinator: performUpkeep, fulfill y sus rollbacks."""

import asyncio

import pytest

from raffle.application.ports.randomness_oracle import IRandomnessOracle, RandomnessOracleError
from raffle.application.use_cases.randomness_coordinator import RandomnessCoordinator
from raffle.domain.entities.round import RoundState
from raffle.domain.exceptions import (
    InvalidArgument,
    PayoutFailed,
    RandomnessRequestFailed,
    RoundNotOpen,
    UnknownRequest,
    UpkeepNotNeeded,
)
from tests.conftest import AFTER_INTERVAL, T0


class RejectingOracle(IRandomnessOracle):
    def bind(self, callback):
        pass

    async def request_randomness(self, config):
        raise RandomnessOracleError("subscription underfunded")


class SilentOracle(IRandomnessOracle):
    def bind(self, callback):
        pass

    async def request_randomness(self, config):
        await asyncio.sleep(5)


async def _enter_all(enter, *players):
    for player in players:
        await enter.execute(player, 10)


# ─── performUpkeep ────────────────────────────────────────────────────

async def test_perform_upkeep_rejected_with_diagnostic(coordinator, state, oracle, recorder):
    with pytest.raises(UpkeepNotNeeded) as exc:
        await coordinator.perform_upkeep(now=AFTER_INTERVAL)

    assert exc.value.to_dict()["pool"] == 0
    assert exc.value.entrant_count == 0
    assert exc.value.state_ordinal == 0
    assert state.state == RoundState.OPEN
    assert state.pending is None
    assert oracle.open_requests == []
    assert recorder.events == []


async def test_perform_upkeep_rejected_before_interval(coordinator, enter):
    await _enter_all(enter, "alice")
    with pytest.raises(UpkeepNotNeeded) as exc:
        await coordinator.perform_upkeep(now=T0 + 1)
    assert exc.value.pool == 10
    assert exc.value.entrant_count == 1


async def test_perform_upkeep_requests_randomness(coordinator, enter, state, oracle, recorder):
    await _enter_all(enter, "alice", "bob")

    pending = await coordinator.perform_upkeep(now=AFTER_INTERVAL)

    assert pending.request_id == 1
    assert pending.issued_at == AFTER_INTERVAL
    assert state.state == RoundState.CALCULATING
    assert state.pending == pending
    assert oracle.open_requests == [1]
    [event] = recorder.of_type("RequestedRaffleWinner")
    assert event.request_id == 1


async def test_second_perform_upkeep_is_rejected(coordinator, enter, oracle):
    await _enter_all(enter, "alice")
    await coordinator.perform_upkeep(now=AFTER_INTERVAL)

    with pytest.raises(UpkeepNotNeeded) as exc:
        await coordinator.perform_upkeep(now=AFTER_INTERVAL)
    assert exc.value.state_ordinal == 1
    assert oracle.open_requests == [1]


async def test_concurrent_perform_upkeep_triggers_once(coordinator, enter, oracle):
    await _enter_all(enter, "alice")

    results = await asyncio.gather(
        coordinator.perform_upkeep(now=AFTER_INTERVAL),
        coordinator.perform_upkeep(now=AFTER_INTERVAL),
        return_exceptions=True,
    )

    errors = [r for r in results if isinstance(r, Exception)]
    assert len(errors) == 1
    assert isinstance(errors[0], UpkeepNotNeeded)
    assert oracle.open_requests == [1]


async def test_entries_rejected_while_calculating(coordinator, enter, state):
    await _enter_all(enter, "alice")
    await coordinator.perform_upkeep(now=AFTER_INTERVAL)

    with pytest.raises(RoundNotOpen):
        await enter.execute("bob", 10)
    assert state.entrant_count() == 1
    assert state.pool == 10


async def test_oracle_rejection_rolls_back_to_open(state, bus, request_config, enter, recorder):
    coordinator = RandomnessCoordinator(state, RejectingOracle(), bus, request_config)
    await _enter_all(enter, "alice")

    with pytest.raises(RandomnessRequestFailed) as exc:
        await coordinator.perform_upkeep(now=AFTER_INTERVAL)

    assert "underfunded" in exc.value.reason
    assert state.state == RoundState.OPEN
    assert state.pending is None
    assert recorder.of_type("RequestedRaffleWinner") == []


async def test_oracle_timeout_rolls_back_to_open(state, bus, request_config, enter):
    coordinator = RandomnessCoordinator(
        state, SilentOracle(), bus, request_config, request_timeout=0.01,
    )
    await _enter_all(enter, "alice")

    with pytest.raises(RandomnessRequestFailed):
        await coordinator.perform_upkeep(now=AFTER_INTERVAL)
    assert state.state == RoundState.OPEN
    assert state.pending is None


# ─── fulfill ──────────────────────────────────────────────────────────

async def test_fulfill_pays_winner_and_reopens(coordinator, enter, state, rail, recorder):
    await _enter_all(enter, "alice", "bob", "carol")
    await coordinator.perform_upkeep(now=AFTER_INTERVAL)

    result = await coordinator.fulfill(1, 7, now=2_000.0)

    assert result.winner == "bob"  # 7 % 3 == 1
    assert result.winner_index == 1
    assert result.amount == 30
    assert rail.balance_of("bob") == 30
    assert state.state == RoundState.OPEN
    assert state.round.started_at == 2_000.0
    assert state.entrant_count() == 0
    assert state.pool == 0
    assert state.last_winner == "bob"
    assert state.pending is None

    [event] = recorder.of_type("WinnerPicked")
    assert event.winner == "bob"
    assert event.amount == 30
    assert event.to_dict()["random_value"] == "7"


async def test_fulfill_without_pending_request(coordinator, state):
    with pytest.raises(UnknownRequest):
        await coordinator.fulfill(1, 7)
    assert state.state == RoundState.OPEN


async def test_fulfill_with_wrong_request_id(coordinator, enter, state):
    await _enter_all(enter, "alice")
    await coordinator.perform_upkeep(now=AFTER_INTERVAL)

    with pytest.raises(UnknownRequest) as exc:
        await coordinator.fulfill(99, 7)
    assert exc.value.request_id == 99
    assert state.state == RoundState.CALCULATING
    assert state.pending.request_id == 1


async def test_duplicate_fulfill_is_rejected(coordinator, enter, rail, recorder):
    await _enter_all(enter, "alice", "bob")
    await coordinator.perform_upkeep(now=AFTER_INTERVAL)
    await coordinator.fulfill(1, 0)

    with pytest.raises(UnknownRequest):
        await coordinator.fulfill(1, 0)
    assert rail.transfers == [("alice", 20)]
    assert len(recorder.of_type("WinnerPicked")) == 1


async def test_invalid_random_value_changes_nothing(coordinator, enter, state):
    await _enter_all(enter, "alice")
    await coordinator.perform_upkeep(now=AFTER_INTERVAL)

    with pytest.raises(InvalidArgument):
        await coordinator.fulfill(1, -5)
    assert state.state == RoundState.CALCULATING
    assert state.pending.request_id == 1


async def test_failed_payout_restores_everything(coordinator, enter, state, rail, recorder):
    await _enter_all(enter, "alice", "bob")
    await coordinator.perform_upkeep(now=AFTER_INTERVAL)
    rail.block("bob")

    with pytest.raises(PayoutFailed) as exc:
        await coordinator.fulfill(1, 1, now=2_000.0)

    assert exc.value.winner == "bob"
    assert exc.value.amount == 20
    assert state.state == RoundState.CALCULATING
    assert state.pending.request_id == 1
    assert state.registry.entrants() == ("alice", "bob")
    assert state.pool == 20
    assert state.last_winner is None
    assert state.round.started_at == T0
    assert recorder.of_type("WinnerPicked") == []


async def test_fulfill_can_be_retried_after_payout_failure(coordinator, enter, state, rail):
    await _enter_all(enter, "alice", "bob")
    await coordinator.perform_upkeep(now=AFTER_INTERVAL)
    rail.block("bob")
    with pytest.raises(PayoutFailed):
        await coordinator.fulfill(1, 1)

    rail.unblock("bob")
    result = await coordinator.fulfill(1, 1)
    assert result.winner == "bob"
    assert rail.balance_of("bob") == 20
    assert state.state == RoundState.OPEN


# ─── callback del oráculo ─────────────────────────────────────────────

async def test_oracle_callback_finalizes_round(coordinator, enter, state, oracle, rail):
    await _enter_all(enter, "alice", "bob")
    await coordinator.perform_upkeep(now=AFTER_INTERVAL)

    await oracle.fulfill(1, random_value=3)

    assert state.state == RoundState.OPEN
    assert state.last_winner == "bob"
    assert rail.balance_of("bob") == 20
    assert oracle.open_requests == []


async def test_rejected_callback_keeps_request_pending(coordinator, enter, state, oracle, rail):
    await _enter_all(enter, "alice")
    await coordinator.perform_upkeep(now=AFTER_INTERVAL)
    rail.block("alice")

    await oracle.fulfill(1, random_value=0)

    assert state.state == RoundState.CALCULATING
    assert state.pending.request_id == 1

    rail.unblock("alice")
    await coordinator.fulfill(1, 0)
    assert state.state == RoundState.OPEN
