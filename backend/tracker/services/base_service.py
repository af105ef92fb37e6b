"""
Base service class.
Services contain business logic and coordinate repositories.
"""

from abc import ABC
from typing import Any, Optional

from tracker.core.events import EventBus


class BaseService(ABC):
    """Base service class for all services."""

    event_bus: Optional[EventBus] = None

    async def publish(self, name: str, **payload: Any) -> None:
        """Publish a domain event when the service was given a bus."""
        if self.event_bus is not None:
            await self.event_bus.publish(name, **payload)
