import pytest

from raffle.domain.events.domain_events import RaffleEntered, WinnerPicked
from raffle.infrastructure.external.event_bus_adapter import EventBusAdapter


async def test_subscribers_receive_serialized_events(bus):
    queue = await bus.subscribe("RaffleEntered", "test")
    await bus.publish(RaffleEntered(player="alice", amount=10, entrant_index=0))

    data = queue.get_nowait()
    assert data["event_type"] == "RaffleEntered"
    assert data["player"] == "alice"
    assert bus.published_count == 1


async def test_events_are_routed_by_type(bus):
    queue = await bus.subscribe("WinnerPicked", "test")
    await bus.publish(RaffleEntered(player="alice", amount=10))
    assert queue.empty()


async def test_full_queue_drops_oldest():
    bus = EventBusAdapter(max_queue_size=2)
    queue = await bus.subscribe("RaffleEntered", "slow")
    for i in range(3):
        await bus.publish(RaffleEntered(player=f"p{i}", amount=10, entrant_index=i))

    assert queue.qsize() == 2
    assert bus.dropped_count == 1
    assert queue.get_nowait()["player"] == "p1"
    assert queue.get_nowait()["player"] == "p2"


async def test_failing_handler_does_not_stop_delivery(bus):
    seen = []

    async def broken(event):
        raise RuntimeError("boom")

    async def healthy(event):
        seen.append(event)

    bus.register_handler("WinnerPicked", broken)
    bus.register_handler("WinnerPicked", healthy)
    queue = await bus.subscribe("WinnerPicked", "test")

    await bus.publish(WinnerPicked(winner="bob", request_id=1, amount=20, random_value=2**255))

    assert len(seen) == 1
    assert queue.get_nowait()["random_value"] == str(2**255)


async def test_unsubscribe_all(bus):
    await bus.subscribe("RaffleEntered", "a")
    await bus.subscribe("WinnerPicked", "b")
    assert bus.subscriber_count == 2

    await bus.unsubscribe_all("RaffleEntered")
    assert bus.subscriber_count == 1

    await bus.unsubscribe_all()
    assert bus.subscriber_count == 0
