"""
In-memory event bus implementation.

Handlers subscribe to an event class and receive that class and all of
its subclasses, so a handler subscribed to DomainEvent sees everything.
"""

import asyncio
import logging
from typing import Dict, List, Type

from core.domain.events import DomainEvent, EventBus, EventHandler

logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """
    In-memory event bus implementation.

    Handlers run concurrently on the publisher's event loop. A failing
    handler is logged and never propagates to the publisher.
    """

    def __init__(self):
        """Initialize the event bus."""
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """
        Subscribe to a domain event type.

        Args:
            event_type: The type of event to subscribe to
            handler: The handler to call when event is published
        """
        handlers = self._handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
        logger.debug(f"Subscribed {handler.__class__.__name__} to {event_type.__name__}")

    def clear(self) -> None:
        """Drop every subscription."""
        self._handlers.clear()

    def handlers_for(self, event: DomainEvent) -> List[EventHandler]:
        handlers: List[EventHandler] = []
        for cls in type(event).__mro__:
            for handler in self._handlers.get(cls, []):
                if handler not in handlers:
                    handlers.append(handler)
        return handlers

    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event.

        Args:
            event: The domain event to publish
        """
        handlers = self.handlers_for(event)

        if not handlers:
            logger.debug(f"No handlers registered for {event.event_type}")
            return

        logger.info(f"Publishing {event.event_type} to {len(handlers)} handler(s)")

        tasks = [self._handle_event(handler, event) for handler in handlers]
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _handle_event(self, handler: EventHandler, event: DomainEvent) -> None:
        """
        Handle an event with a specific handler.

        Args:
            handler: The handler to use
            event: The event to handle
        """
        try:
            await handler.handle(event)
            logger.debug(
                f"Successfully handled {event.event_type} with {handler.__class__.__name__}"
            )
        except Exception as e:
            logger.error(
                f"Error handling {event.event_type} with {handler.__class__.__name__}: {e}",
                exc_info=True,
            )
            raise


# Global event bus instance
event_bus = InMemoryEventBus()
