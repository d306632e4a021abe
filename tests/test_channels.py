import asyncio

import pytest

from chromascape_console.clock import ManualClock
from chromascape_console.errors import BackendError
from chromascape_console.models import LogUpdate, Topic
from chromascape_console.settings import Settings
from chromascape_console.transport import (
    ChannelState,
    ConnectionManager,
    PollingChannel,
    WebSocketChannel,
)

from conftest import FakeSocket


def push_channel(client, clock, topic, received):
    return WebSocketChannel(
        topic, lambda t, update: received.append(update), clock,
        connect=client.open_socket, reconnect_delay=2.0,
    )


def poll_channel(client, clock, topic, received, interval=0.5):
    return PollingChannel(
        topic, lambda t, update: received.append(update), clock,
        fetch=client.fetch_topic, interval=interval,
    )


# --- Push ---


def test_push_delivers_in_order_and_drops_malformed(client):
    received = []

    async def scenario():
        clock = ManualClock()
        socket = FakeSocket(["10", "oops", "30"], stay_open=True)
        client.sockets[Topic.PROGRESS].append(socket)
        channel = push_channel(client, clock, Topic.PROGRESS, received)
        channel.start()
        await clock.settle()
        assert channel.state is ChannelState.CONNECTED

        socket.feed("45")
        await clock.settle()
        await channel.stop()
        assert socket.closed
        assert channel.state is ChannelState.IDLE

    asyncio.run(scenario())
    assert received == [10, 30, 45]


def test_push_log_lines_arrive_as_increments(client):
    received = []

    async def scenario():
        clock = ManualClock()
        client.sockets[Topic.LOGS].append(FakeSocket(["first", "second"], stay_open=True))
        channel = push_channel(client, clock, Topic.LOGS, received)
        channel.start()
        await clock.settle()
        await channel.stop()

    asyncio.run(scenario())
    assert received == [LogUpdate(["first"]), LogUpdate(["second"])]


def test_push_reconnects_after_fixed_delay(client):
    received = []

    async def scenario():
        clock = ManualClock()
        client.sockets[Topic.STATE].append(FakeSocket(["true"]))  # closes after one message
        channel = push_channel(client, clock, Topic.STATE, received)
        channel.start()
        await clock.settle()
        assert channel.state is ChannelState.CLOSED
        assert channel.reconnect_pending

        await clock.advance(1.9)
        assert client.calls["open_socket"] == 1

        await clock.advance(0.2)
        assert client.calls["open_socket"] == 2
        assert channel.state is ChannelState.CONNECTED
        assert not channel.reconnect_pending
        await channel.stop()

    asyncio.run(scenario())
    assert received == [True]


def test_repeated_closes_keep_one_pending_reconnect(client):
    async def scenario():
        clock = ManualClock()
        sockets = [FakeSocket() for _ in range(7)]  # each closes right after opening
        first, second = sockets[0], sockets[1]
        client.sockets[Topic.LOGS].extend(sockets)
        channel = push_channel(client, clock, Topic.LOGS, [])
        channel.start()
        await clock.settle()

        # Close fires again on the dead socket
        await first.close()
        await first.close()
        await clock.settle()
        assert clock.pending() == 1
        assert client.calls["open_socket"] == 1

        await clock.advance(2.0)
        assert client.opened[Topic.LOGS] == [first, second]
        assert clock.pending() == 1

        # Keeps retrying forever, never more than one attempt at a time
        for _ in range(5):
            await clock.advance(2.0)
            assert clock.pending() == 1
        assert client.calls["open_socket"] == 7
        await channel.stop()
        assert clock.pending() == 0

    asyncio.run(scenario())


def test_hanging_connect_is_never_duplicated(client):
    async def scenario():
        clock = ManualClock()
        client.gates["open_socket"] = asyncio.Event()
        channel = push_channel(client, clock, Topic.STATE, [])
        channel.start()
        await clock.advance(30.0)
        assert client.calls["open_socket"] == 1
        assert channel.state is ChannelState.CONNECTING
        await channel.stop()

    asyncio.run(scenario())


def test_failed_connect_is_retried(client):
    async def scenario():
        clock = ManualClock()
        client.failing.add("open_socket")
        channel = push_channel(client, clock, Topic.PROGRESS, [])
        channel.start()
        await clock.settle()
        assert channel.state is ChannelState.CLOSED

        client.failing.clear()
        await clock.advance(2.0)
        assert channel.state is ChannelState.CONNECTED
        assert channel.attempts == 2
        await channel.stop()

    asyncio.run(scenario())


def test_socket_error_tears_down_and_reconnects(client):
    received = []

    async def scenario():
        clock = ManualClock()
        socket = FakeSocket(["1"], stay_open=True)
        client.sockets[Topic.PROGRESS].append(socket)
        channel = push_channel(client, clock, Topic.PROGRESS, received)
        channel.start()
        await clock.settle()

        socket.fail(BackendError("connection reset"))
        socket.feed("99")  # after the error, never read
        await clock.settle()
        assert socket.closed
        assert channel.state is ChannelState.CLOSED

        await clock.advance(2.0)
        assert len(client.opened[Topic.PROGRESS]) == 2
        await channel.stop()

    asyncio.run(scenario())
    assert received == [1]


def test_superseded_connection_cannot_deliver(client):
    received = []

    async def scenario():
        clock = ManualClock()
        client.sockets[Topic.STATE].append(FakeSocket(stay_open=True))
        channel = push_channel(client, clock, Topic.STATE, received)
        channel.start()
        await clock.settle()
        old_generation = channel.generation
        assert channel._deliver(old_generation, "true")

        client.opened[Topic.STATE][0].drop()
        await clock.advance(2.0)
        assert channel.generation != old_generation
        assert not channel._deliver(old_generation, "false")
        await channel.stop()

    asyncio.run(scenario())
    assert received == [True]


# --- Pull ---


def test_poll_runs_at_fixed_cadence(client):
    received = []

    async def scenario():
        clock = ManualClock()
        client.topic_bodies[Topic.STATE] = "true"
        channel = poll_channel(client, clock, Topic.STATE, received, interval=0.5)
        channel.start()
        await clock.settle()
        assert client.calls["fetch_state"] == 1
        await clock.advance(1.0)
        assert client.calls["fetch_state"] == 3
        await channel.stop()

    asyncio.run(scenario())
    assert received == [True, True, True]


def test_slow_poll_keeps_fixed_cadence():
    started = []

    async def scenario():
        clock = ManualClock()

        async def slow_fetch(topic):
            started.append(clock.time())
            await clock.sleep(0.2)
            return "true"

        channel = PollingChannel(topic=Topic.STATE, on_update=lambda t, update: None, clock=clock,
                                 fetch=slow_fetch, interval=0.5)
        channel.start()
        await clock.advance(1.1)
        await channel.stop()

    asyncio.run(scenario())
    assert started == pytest.approx([0.0, 0.5, 1.0])


def test_failed_poll_is_retried_next_tick(client):
    received = []

    async def scenario():
        clock = ManualClock()
        client.failing.add("fetch_progress")
        channel = poll_channel(client, clock, Topic.PROGRESS, received, interval=5.0)
        channel.start()
        await clock.settle()
        assert channel.state is ChannelState.CLOSED

        client.failing.clear()
        client.topic_bodies[Topic.PROGRESS] = "55"
        await clock.advance(5.0)
        assert channel.state is ChannelState.CONNECTED
        await channel.stop()

    asyncio.run(scenario())
    assert received == [55]


def test_poll_snapshot_and_malformed_body(client):
    received = []

    async def scenario():
        clock = ManualClock()
        client.topic_bodies[Topic.LOGS] = '["a", "b"]'
        channel = poll_channel(client, clock, Topic.LOGS, received, interval=0.6)
        channel.start()
        await clock.settle()
        client.topic_bodies[Topic.LOGS] = "<html>oops</html>"
        await clock.advance(0.6)
        client.topic_bodies[Topic.LOGS] = '["a", "b", "c"]'
        await clock.advance(0.6)
        await channel.stop()

    asyncio.run(scenario())
    assert received == [
        LogUpdate(["a", "b"], snapshot=True),
        LogUpdate(["a", "b", "c"], snapshot=True),
    ]


# --- Manager ---


def test_manager_picks_transport_per_topic(client):
    settings = Settings(transport="push", state_transport="pull")

    async def scenario():
        manager = ConnectionManager(settings, client, ManualClock())
        manager.start()
        await manager.clock.settle()
        assert isinstance(manager.channel(Topic.LOGS), WebSocketChannel)
        assert isinstance(manager.channel(Topic.PROGRESS), WebSocketChannel)
        assert isinstance(manager.channel(Topic.STATE), PollingChannel)
        assert manager.channel(Topic.STATE).interval == settings.state_poll_interval
        await manager.stop()
        assert set(manager.states().values()) == {ChannelState.IDLE}

    asyncio.run(scenario())


def test_manager_start_twice_keeps_one_channel_per_topic(client):
    async def scenario():
        manager = ConnectionManager(Settings(), client, ManualClock())
        manager.start()
        manager.start()
        await manager.clock.settle()
        assert client.calls["open_socket"] == 3
        await manager.stop()

    asyncio.run(scenario())


def test_failing_subscriber_does_not_block_others(client):
    received = []

    def broken(update):
        raise RuntimeError("render failed")

    async def scenario():
        client.sockets[Topic.PROGRESS].append(FakeSocket(["12", "13"], stay_open=True))
        manager = ConnectionManager(Settings(), client, ManualClock())
        manager.subscribe(Topic.PROGRESS, broken)
        manager.subscribe(Topic.PROGRESS, received.append)
        manager.start()
        await manager.clock.settle()
        assert manager.states()[Topic.PROGRESS] is ChannelState.CONNECTED
        await manager.stop()

    asyncio.run(scenario())
    assert received == [12, 13]
