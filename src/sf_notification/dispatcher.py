"""NotificationDispatcher - fire-and-forget, at-most-once delivery.

dispatch() never blocks and never raises: it enqueues onto a bounded
asyncio.Queue and returns. One background worker drains the queue into a
NotifierProtocol. A full queue drops the message; a failing notifier is
logged. Neither outcome reaches the purchase that produced the message.
"""

import asyncio
import logging
from dataclasses import dataclass

from config.settings import settings
from src.sf_notification.notifier import NotifierProtocol, RedisNotifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    buyer_id: str
    message: str


class NotificationDispatcher:
    def __init__(
        self,
        notifier: NotifierProtocol | None = None,
        maxsize: int | None = None,
    ) -> None:
        self._notifier: NotifierProtocol = notifier or RedisNotifier()
        size = settings.NOTIFICATION_QUEUE_SIZE if maxsize is None else maxsize
        if size < 1:
            # asyncio.Queue treats 0 as unbounded
            raise ValueError(f"notification queue size must be at least 1, got {size}")
        self._queue: asyncio.Queue[Notification] = asyncio.Queue(maxsize=size)
        self._worker: asyncio.Task[None] | None = None

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def dispatch(self, buyer_id: str, message: str) -> bool:
        """Enqueue a notification. Returns False if it was dropped."""
        try:
            self._queue.put_nowait(Notification(buyer_id, message))
        except asyncio.QueueFull:
            logger.warning("notification queue full, dropping message for %s", buyer_id)
            return False
        return True

    def start(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._run(), name="notification-dispatcher")

    async def stop(self) -> None:
        """Deliver whatever is queued, then stop the worker."""
        if self._worker is None:
            return
        await self._queue.join()
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

    async def drain(self) -> int:
        """Deliver queued notifications inline; used when no worker is running."""
        delivered = 0
        while not self._queue.empty():
            item = self._queue.get_nowait()
            try:
                if await self._deliver(item):
                    delivered += 1
            finally:
                self._queue.task_done()
        return delivered

    async def _run(self) -> None:
        while True:
            item = await self._queue.get()
            try:
                await self._deliver(item)
            finally:
                self._queue.task_done()

    async def _deliver(self, item: Notification) -> bool:
        try:
            await self._notifier.notify(item.buyer_id, item.message)
        except Exception:
            logger.exception("notification delivery failed for %s", item.buyer_id)
            return False
        return True


_dispatcher: NotificationDispatcher | None = None


def get_notification_dispatcher() -> NotificationDispatcher:
    global _dispatcher  # noqa: PLW0603
    if _dispatcher is None:
        _dispatcher = NotificationDispatcher()
    return _dispatcher
