"""Tests for the periodic trigger and its event channel."""

import asyncio

import pytest

from hwsync.controller.periodic import (
    ChannelClosedError,
    EventChannel,
    PeriodicEvent,
    PeriodicRunner,
)


class TestEventChannel:
    @pytest.mark.asyncio
    async def test_send_receive(self):
        channel: EventChannel[int] = EventChannel(maxsize=2)

        await channel.send(1)
        await channel.send(2)

        assert await channel.receive() == 1
        assert await channel.receive() == 2

    @pytest.mark.asyncio
    async def test_receive_after_close_drains_then_ends(self):
        channel: EventChannel[int] = EventChannel(maxsize=1)
        await channel.send(1)

        channel.close()

        assert await channel.receive() == 1
        assert await channel.receive() is None

    @pytest.mark.asyncio
    async def test_close_wakes_blocked_receiver(self):
        channel: EventChannel[int] = EventChannel()
        receiver = asyncio.create_task(channel.receive())
        await asyncio.sleep(0)

        channel.close()

        assert await asyncio.wait_for(receiver, timeout=1) is None

    @pytest.mark.asyncio
    async def test_send_on_closed_channel(self):
        channel: EventChannel[int] = EventChannel()
        channel.close()

        with pytest.raises(ChannelClosedError):
            await channel.send(1)

    @pytest.mark.asyncio
    async def test_async_iteration(self):
        channel: EventChannel[int] = EventChannel(maxsize=3)
        for i in range(3):
            await channel.send(i)
        channel.close()

        assert [item async for item in channel] == [0, 1, 2]


class TestPeriodicRunner:
    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            PeriodicRunner(0, EventChannel())

    @pytest.mark.asyncio
    async def test_initial_event_sent_immediately(self):
        channel: EventChannel[PeriodicEvent] = EventChannel()
        runner = PeriodicRunner(60.0, channel)
        task = asyncio.create_task(runner.start())

        event = await asyncio.wait_for(channel.receive(), timeout=1)

        assert event.source == "periodic"
        assert event.sequence == 0
        runner.stop()
        await asyncio.wait_for(task, timeout=1)

    @pytest.mark.asyncio
    async def test_ticks_every_interval(self):
        channel: EventChannel[PeriodicEvent] = EventChannel()
        runner = PeriodicRunner(0.01, channel)
        task = asyncio.create_task(runner.start())

        events = [await asyncio.wait_for(channel.receive(), timeout=1) for _ in range(3)]

        assert [e.sequence for e in events] == [0, 1, 2]
        runner.stop()
        await asyncio.wait_for(task, timeout=1)

    @pytest.mark.asyncio
    async def test_stop_closes_channel(self):
        channel: EventChannel[PeriodicEvent] = EventChannel()
        runner = PeriodicRunner(60.0, channel)
        task = asyncio.create_task(runner.start())
        await channel.receive()

        runner.stop()
        await asyncio.wait_for(task, timeout=1)

        assert channel.closed
        assert await channel.receive() is None

    @pytest.mark.asyncio
    async def test_stop_while_blocked_on_full_channel_drops_tick(self):
        """Test a tick waiting for room in the channel is not delivered after stop."""
        channel: EventChannel[PeriodicEvent] = EventChannel(maxsize=1)
        runner = PeriodicRunner(0.01, channel)
        task = asyncio.create_task(runner.start())
        # Initial event fills the channel; the next tick blocks on send
        await asyncio.sleep(0.05)

        runner.stop()
        await asyncio.wait_for(task, timeout=1)

        first = await channel.receive()
        assert first.sequence == 0
        assert await channel.receive() is None
        assert channel.closed

    @pytest.mark.asyncio
    async def test_cancel_closes_channel(self):
        channel: EventChannel[PeriodicEvent] = EventChannel()
        runner = PeriodicRunner(60.0, channel)
        task = asyncio.create_task(runner.start())
        await channel.receive()

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert channel.closed
