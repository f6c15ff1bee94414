"""
Broadcast Channel.

In-process one-to-many notification channel. Every published value is
delivered to every subscriber registered at publish time; late subscribers
do not see earlier values. Each subscription buffers values in its own
asyncio.Queue and is consumed with ``async for``.

Usage:
    channel: BroadcastChannel[list[Note]] = BroadcastChannel("notes")

    async with channel.subscribe() as subscription:
        async for snapshot in subscription:
            render(snapshot)

    channel.publish(snapshot)
    channel.close()
"""

import asyncio
from typing import Any, Generic, TypeVar

from noteprompt.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_CLOSED: Any = object()


class Subscription(Generic[T]):
    """
    Handle for one listener on a BroadcastChannel.

    Iteration ends when the listener unsubscribes or the channel closes;
    values queued before that point are still delivered.
    """

    def __init__(self, channel: "BroadcastChannel[T]") -> None:
        self._channel = channel
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._active = True

    @property
    def active(self) -> bool:
        """Whether values are still being delivered to this subscription."""
        return self._active

    def _deliver(self, value: T) -> None:
        if self._active:
            self._queue.put_nowait(value)

    def _end(self) -> None:
        if self._active:
            self._active = False
            self._queue.put_nowait(_CLOSED)

    def unsubscribe(self) -> None:
        """Stop receiving values. Other subscriptions are unaffected."""
        self._channel._remove(self)
        self._end()

    async def get(self) -> T:
        """
        Wait for the next value.

        Raises:
            StopAsyncIteration: If the subscription has ended and is drained
        """
        value = await self._queue.get()
        if value is _CLOSED:
            # Keep the marker so later reads also see the end.
            self._queue.put_nowait(_CLOSED)
            raise StopAsyncIteration
        return value

    def __aiter__(self) -> "Subscription[T]":
        return self

    async def __anext__(self) -> T:
        return await self.get()

    async def __aenter__(self) -> "Subscription[T]":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class BroadcastChannel(Generic[T]):
    """Publish/subscribe channel owned by a single producer."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._subscribers: list[Subscription[T]] = []
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscription[T]:
        """
        Register a new listener.

        Subscribing to a closed channel returns a subscription that has
        already ended.
        """
        subscription: Subscription[T] = Subscription(self)
        if self._closed:
            subscription._end()
        else:
            self._subscribers.append(subscription)
            logger.debug(
                "Subscriber added",
                extra={"channel": self.name, "subscribers": len(self._subscribers)},
            )
        return subscription

    def _remove(self, subscription: Subscription[T]) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)
            logger.debug(
                "Subscriber removed",
                extra={"channel": self.name, "subscribers": len(self._subscribers)},
            )

    def publish(self, value: T) -> None:
        """Deliver a value to every current subscriber. No-op once closed."""
        if self._closed:
            return
        for subscription in list(self._subscribers):
            subscription._deliver(value)
        logger.debug(
            "Broadcast published",
            extra={"channel": self.name, "subscribers": len(self._subscribers)},
        )

    def close(self) -> None:
        """End every subscription and refuse further values."""
        if self._closed:
            return
        self._closed = True
        for subscription in self._subscribers:
            subscription._end()
        self._subscribers.clear()
        logger.debug("Channel closed", extra={"channel": self.name})
