"""WebSocketRandomnessOracle contra una conexión simulada (sin red)."""

import asyncio
import json

import pytest

from raffle.application.ports.randomness_oracle import RandomnessOracleError
from raffle.application.use_cases.randomness_coordinator import RandomnessCoordinator
from raffle.domain.entities.round import RoundState
from raffle.infrastructure.external.websocket_oracle import WebSocketRandomnessOracle
from tests.conftest import AFTER_INTERVAL


class FakeConnection:
    """Registra lo enviado y responde con el mensaje que se le configure."""

    def __init__(self, oracle, reply=None):
        self._oracle = oracle
        self._reply = reply
        self.sent = []

    async def send(self, raw):
        message = json.loads(raw)
        self.sent.append(message)
        if self._reply is not None:
            reply = {**self._reply, "nonce": message["nonce"]}
            asyncio.get_running_loop().create_task(self._oracle.handle_message(json.dumps(reply)))

    async def close(self):
        pass


async def _settle(oracle):
    """Espera los callbacks de fulfillment en vuelo."""
    await asyncio.gather(*list(oracle._callback_tasks))


@pytest.fixture
def ws_oracle():
    return WebSocketRandomnessOracle("ws://oracle.test", request_timeout=0.05)


async def test_request_requires_connection(ws_oracle, request_config):
    with pytest.raises(RandomnessOracleError):
        await ws_oracle.request_randomness(request_config)


async def test_accepted_request_returns_oracle_id(ws_oracle, request_config):
    conn = FakeConnection(ws_oracle, {"type": "request_accepted", "request_id": "0xfeed"})
    ws_oracle._ws = conn

    request_id = await ws_oracle.request_randomness(request_config)

    assert request_id == "0xfeed"
    [sent] = conn.sent
    assert sent["action"] == "request_random_words"
    assert sent["key_hash"] == "0xabc"
    assert sent["num_words"] == 1
    assert ws_oracle.get_stats()["awaiting_ack"] == 0


async def test_rejected_request_raises(ws_oracle, request_config):
    ws_oracle._ws = FakeConnection(
        ws_oracle, {"type": "request_rejected", "reason": "subscription underfunded"},
    )
    with pytest.raises(RandomnessOracleError, match="underfunded"):
        await ws_oracle.request_randomness(request_config)


async def test_missing_ack_times_out(ws_oracle, request_config):
    ws_oracle._ws = FakeConnection(ws_oracle)
    with pytest.raises(RandomnessOracleError):
        await ws_oracle.request_randomness(request_config)


@pytest.mark.parametrize("word, expected", [(7, 7), ("12", 12), ("0xff", 255)])
async def test_fulfillment_invokes_callback(ws_oracle, word, expected):
    received = []

    async def callback(request_id, value):
        received.append((request_id, value))

    ws_oracle.bind(callback)
    await ws_oracle.handle_message(json.dumps({
        "type": "random_words_fulfilled",
        "request_id": 3,
        "random_words": [word, 99],
    }))
    await _settle(ws_oracle)

    assert received == [(3, expected)]
    assert ws_oracle.get_stats()["fulfillments_received"] == 1


async def test_fulfillment_without_words_is_ignored(ws_oracle):
    received = []

    async def callback(request_id, value):
        received.append(value)

    ws_oracle.bind(callback)
    await ws_oracle.handle_message(json.dumps({"type": "random_words_fulfilled", "request_id": 3}))
    await _settle(ws_oracle)
    assert received == []


async def test_callback_errors_are_contained(ws_oracle):
    async def callback(request_id, value):
        raise RuntimeError("boom")

    ws_oracle.bind(callback)
    await ws_oracle.handle_message(json.dumps({
        "type": "random_words_fulfilled", "request_id": 1, "random_words": [1],
    }))
    await _settle(ws_oracle)
    assert ws_oracle.get_stats()["callbacks_in_flight"] == 0


async def test_garbage_messages_are_ignored(ws_oracle):
    await ws_oracle.handle_message("not json")
    await ws_oracle.handle_message(json.dumps({"error": "rate limited"}))


async def test_disconnect_fails_pending_acks(ws_oracle, request_config):
    ws_oracle._ws = FakeConnection(ws_oracle)
    ws_oracle._request_timeout = 5.0

    request = asyncio.create_task(ws_oracle.request_randomness(request_config))
    await asyncio.sleep(0)
    await ws_oracle.disconnect()

    with pytest.raises(RandomnessOracleError, match="desconectado"):
        await request
    assert ws_oracle.get_stats()["connected"] is False


async def test_invalid_word_is_ignored(ws_oracle):
    received = []

    async def callback(request_id, value):
        received.append(value)

    ws_oracle.bind(callback)
    await ws_oracle.handle_message(json.dumps({
        "type": "random_words_fulfilled", "request_id": 1, "random_words": ["zz"],
    }))
    await _settle(ws_oracle)
    assert received == []


class RelayConnection:
    """Relay que entrega un fulfillment viejo justo antes del acuse, en ese orden."""

    def __init__(self, oracle):
        self._oracle = oracle
        self._relay_task = None

    async def send(self, raw):
        nonce = json.loads(raw)["nonce"]
        self._relay_task = asyncio.get_running_loop().create_task(self._relay(nonce))

    async def _relay(self, nonce):
        await self._oracle.handle_message(json.dumps({
            "type": "random_words_fulfilled", "request_id": "stale", "random_words": [5],
        }))
        await self._oracle.handle_message(json.dumps({
            "type": "request_accepted", "nonce": nonce, "request_id": "fresh",
        }))

    async def close(self):
        pass


async def test_stale_fulfillment_does_not_block_ack(state, bus, request_config, enter):
    ws_oracle = WebSocketRandomnessOracle("ws://oracle.test", request_timeout=0.5)
    coordinator = RandomnessCoordinator(state, ws_oracle, bus, request_config, request_timeout=0.5)
    ws_oracle.bind(coordinator.on_randomness_ready)
    ws_oracle._ws = RelayConnection(ws_oracle)
    await enter.execute("alice", 10)

    pending = await coordinator.perform_upkeep(now=AFTER_INTERVAL)
    await _settle(ws_oracle)

    assert pending.request_id == "fresh"
    assert state.state == RoundState.CALCULATING
    assert state.pending.request_id == "fresh"
    assert state.entrant_count() == 1
