"""In-process broadcast hub: fans change events out to every connected client.

Each subscriber owns an asyncio queue bound to the event loop it subscribed
from. publish() may be called from any thread (sync FastAPI endpoints run in
the threadpool), so events are handed over with call_soon_threadsafe.
"""

import asyncio
import logging
import threading

logger = logging.getLogger(__name__)


class Subscription:
    """One connected client's view of the hub."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._queue: asyncio.Queue[str] = asyncio.Queue()

    async def get(self) -> str:
        """Wait for the next event."""
        return await self._queue.get()

    def _deliver(self, event: str) -> None:
        self._loop.call_soon_threadsafe(self._queue.put_nowait, event)


class BroadcastHub:
    """Implements UpdateNotifier for WebSocket clients of the API."""

    def __init__(self) -> None:
        self._subscribers: set[Subscription] = set()
        self._lock = threading.Lock()

    def subscribe(self) -> Subscription:
        """Register a subscriber. Must be called from inside a running event loop."""
        subscription = Subscription(asyncio.get_running_loop())
        with self._lock:
            self._subscribers.add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscribers.discard(subscription)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event: str) -> int:
        with self._lock:
            subscribers = list(self._subscribers)
        reached = 0
        for subscription in subscribers:
            try:
                subscription._deliver(event)
            except RuntimeError:
                # Event loop already closed; the client is gone.
                logger.warning("Dropping subscriber with closed event loop")
                self.unsubscribe(subscription)
                continue
            reached += 1
        return reached
