"""In-process fault center queue."""

import asyncio
import logging
from typing import Awaitable, Callable

from app.models.event import AlertEvent
from app.publishers.base import BasePublisher

logger = logging.getLogger(__name__)


class QueuePublisher(BasePublisher):
    """Publishes events onto an asyncio queue consumed in-process."""

    def __init__(self, maxsize: int = 0):
        self._queue: asyncio.Queue[AlertEvent] = asyncio.Queue(maxsize=maxsize)

    @property
    def name(self) -> str:
        return "queue"

    @property
    def enabled(self) -> bool:
        return True

    @property
    def queue(self) -> asyncio.Queue[AlertEvent]:
        return self._queue

    async def publish(self, event: AlertEvent) -> bool:
        self._queue.put_nowait(event)
        logger.debug(f"Queued event {event.event_id} for fault center {event.fault_center_id}")
        return True

    async def consume(self, handler: Callable[[AlertEvent], Awaitable[None]]) -> None:
        """Hand queued events to handler until cancelled."""
        while True:
            event = await self._queue.get()
            try:
                await handler(event)
            except Exception as e:
                logger.exception(f"Failed to handle queued event {event.event_id}: {e}")
            finally:
                self._queue.task_done()
