"""
Unit Tests for the Broadcast Channel.

Covers fan-out to every subscriber, unsubscribe and channel close.
"""

import asyncio

import pytest

from noteprompt.events.broadcast import BroadcastChannel


@pytest.fixture
def channel() -> BroadcastChannel[int]:
    return BroadcastChannel("test")


class TestPublish:
    async def test_every_subscriber_receives_every_value(self, channel):
        first = channel.subscribe()
        second = channel.subscribe()

        channel.publish(1)
        channel.publish(2)

        assert [await first.get(), await first.get()] == [1, 2]
        assert [await second.get(), await second.get()] == [1, 2]

    async def test_late_subscriber_misses_earlier_values(self, channel):
        channel.publish(1)
        late = channel.subscribe()
        channel.publish(2)

        assert await late.get() == 2

    async def test_publish_without_subscribers_is_noop(self, channel):
        channel.publish(1)
        assert channel.subscriber_count == 0

    async def test_get_waits_for_value(self, channel):
        subscription = channel.subscribe()
        waiter = asyncio.create_task(subscription.get())
        await asyncio.sleep(0)
        assert not waiter.done()

        channel.publish(7)

        assert await asyncio.wait_for(waiter, timeout=1) == 7


class TestUnsubscribe:
    async def test_unsubscribe_ends_iteration(self, channel):
        subscription = channel.subscribe()
        channel.publish(1)
        subscription.unsubscribe()
        channel.publish(2)

        received = [value async for value in subscription]

        assert received == [1]
        assert not subscription.active
        assert channel.subscriber_count == 0

    async def test_unsubscribe_leaves_others_active(self, channel):
        leaving = channel.subscribe()
        staying = channel.subscribe()

        leaving.unsubscribe()
        channel.publish(3)

        assert staying.active
        assert await staying.get() == 3

    async def test_unsubscribe_twice_is_harmless(self, channel):
        subscription = channel.subscribe()
        subscription.unsubscribe()
        subscription.unsubscribe()

        with pytest.raises(StopAsyncIteration):
            await subscription.get()
        with pytest.raises(StopAsyncIteration):
            await subscription.get()

    async def test_context_manager_unsubscribes(self, channel):
        async with channel.subscribe() as subscription:
            assert channel.subscriber_count == 1

        assert channel.subscriber_count == 0
        assert not subscription.active


class TestClose:
    async def test_close_ends_all_subscriptions(self, channel):
        first = channel.subscribe()
        second = channel.subscribe()
        channel.publish(1)

        channel.close()

        assert [value async for value in first] == [1]
        assert [value async for value in second] == [1]
        assert channel.is_closed
        assert channel.subscriber_count == 0

    async def test_close_wakes_waiting_reader(self, channel):
        subscription = channel.subscribe()
        waiter = asyncio.create_task(subscription.get())
        await asyncio.sleep(0)

        channel.close()

        with pytest.raises(StopAsyncIteration):
            await asyncio.wait_for(waiter, timeout=1)

    async def test_publish_after_close_is_ignored(self, channel):
        channel.close()
        channel.publish(1)
        assert channel.subscriber_count == 0

    async def test_subscribe_after_close_is_already_ended(self, channel):
        channel.close()

        subscription = channel.subscribe()

        assert not subscription.active
        assert [value async for value in subscription] == []

    async def test_close_is_idempotent(self, channel):
        channel.close()
        channel.close()
        assert channel.is_closed
