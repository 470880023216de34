"""Base class for fault center publishers."""

import logging
from abc import ABC, abstractmethod

from app.models.event import AlertEvent

logger = logging.getLogger(__name__)


class BasePublisher(ABC):
    """Abstract base class for fault center publishers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Publisher name for logging."""
        ...

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether the publisher is enabled."""
        ...

    @abstractmethod
    async def publish(self, event: AlertEvent) -> bool:
        """Hand an event to the fault center."""
        ...

    async def publish_safe(self, event: AlertEvent) -> bool:
        """Publish event with error handling."""
        if not self.enabled:
            return False
        try:
            return await self.publish(event)
        except Exception as e:
            logger.exception(f"Failed to publish event {event.event_id} via {self.name}: {e}")
            return False
