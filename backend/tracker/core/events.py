"""
In-process domain events.

Mutations publish a DomainEvent after they commit. The change log in
`tracker.core.change_log` subscribes to the staff-level events when the
container is built.

Published events:
- activity.updated: a daily activity row was created, updated or deleted
- targets.saved: monthly target rows were replaced for a staff member
- annual_target.saved: an annual Self Assessment target was saved and redistributed
- leave.changed: a staff leave range was created, updated or deleted
- bank_holidays.synced: the bank holiday feed was imported
"""

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Union

logger = logging.getLogger(__name__)


ACTIVITY_UPDATED = "activity.updated"
TARGETS_SAVED = "targets.saved"
ANNUAL_TARGET_SAVED = "annual_target.saved"
LEAVE_CHANGED = "leave.changed"
BANK_HOLIDAYS_SYNCED = "bank_holidays.synced"


@dataclass(frozen=True)
class DomainEvent:
    """A named event with a free-form payload."""
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


Handler = Callable[[DomainEvent], Union[None, Awaitable[None]]]


class EventBus:
    """Publish/subscribe registry. Handlers may be plain or async callables."""

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        """Register a handler for an event name."""
        handlers = self._handlers.setdefault(name, [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        handlers = self._handlers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, name: str) -> List[Handler]:
        return list(self._handlers.get(name, []))

    async def publish(self, name: str, **payload: Any) -> DomainEvent:
        """
        Deliver an event to every subscriber in registration order.

        A failing handler is logged and does not stop delivery to the others.

        Args:
            name: Event name
            **payload: Event data

        Returns:
            The published event
        """
        event = DomainEvent(name=name, payload=payload)
        for handler in self.handlers_for(name):
            try:
                result = handler(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(
                    f"Event handler failed for {name}",
                    extra={"handler": getattr(handler, "__name__", repr(handler))},
                )
        logger.debug(f"Published {name}", extra={"payload": payload})
        return event
