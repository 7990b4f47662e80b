"""WebSocketManager: broadcast de eventos con clientes simulados."""

import asyncio
import json

import pytest
from websockets.exceptions import ConnectionClosedError

from raffle.domain.events.domain_events import RequestedRaffleWinner
from raffle.presentation.websocket.websocket_manager import WebSocketManager


class FakeClient:
    def __init__(self, fail_with=None):
        self._fail_with = fail_with
        self.messages = []

    async def accept(self):
        pass

    async def send_text(self, payload):
        if self._fail_with is not None:
            raise self._fail_with
        self.messages.append(json.loads(payload))

    async def close(self):
        pass


@pytest.fixture
async def manager(bus):
    manager = WebSocketManager(bus)
    await manager.start()
    yield manager
    await manager.stop()


async def _wait_for(predicate):
    for _ in range(100):
        if predicate():
            return
        await asyncio.sleep(0.01)


async def test_events_reach_connected_clients(manager, bus):
    client = FakeClient()
    await manager.connect(client)

    await bus.publish(RequestedRaffleWinner(request_id=1))
    await _wait_for(lambda: client.messages)

    assert client.messages[0]["type"] == "winner_requested"
    assert client.messages[0]["data"]["request_id"] == 1


async def test_dead_client_does_not_stop_broadcast(manager, bus):
    broken = FakeClient(fail_with=ConnectionClosedError(None, None))
    healthy = FakeClient()
    await manager.connect(broken)
    await manager.connect(healthy)

    await bus.publish(RequestedRaffleWinner(request_id=1))
    await bus.publish(RequestedRaffleWinner(request_id=2))
    await _wait_for(lambda: len(healthy.messages) == 2)

    assert [m["data"]["request_id"] for m in healthy.messages] == [1, 2]
    assert manager.client_count == 1
    assert all(not task.done() for task in manager._broadcast_tasks)


async def test_transport_errors_drop_the_client(manager):
    client = FakeClient(fail_with=OSError("broken pipe"))
    await manager.connect(client)

    await manager.broadcast("winner_picked", {"winner": "alice"})

    assert manager.client_count == 0
