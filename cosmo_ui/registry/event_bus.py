"""
Event bus for registry change notifications.

Registry operations are synchronous, so publishing is too: sync handlers run
inline, async handlers are scheduled as tasks on the running loop.
"""

import asyncio
import inspect
from collections import defaultdict
from typing import Any, Callable, Dict, List, Set

from cosmo_ui.setup_logging import get_logger

logger = get_logger(__name__)

ALL_EVENTS = "*"


class EventBus:
    """Simple event bus for decoupling registries from renderers."""

    def __init__(self):
        self._handlers: Dict[str, List[Callable]] = defaultdict(list)
        self._async_handlers: Dict[str, List[Callable]] = defaultdict(list)
        self._pending: Set[asyncio.Task] = set()

    def subscribe(self, event_type: str, handler: Callable):
        """Subscribe to an event type (``"*"`` for every event)."""
        if inspect.iscoroutinefunction(handler):
            self._async_handlers[event_type].append(handler)
        else:
            self._handlers[event_type].append(handler)
        logger.debug(f"Subscribed handler to event type: {event_type}")

    def unsubscribe(self, event_type: str, handler: Callable):
        """Unsubscribe from an event type."""
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)
        if handler in self._async_handlers[event_type]:
            self._async_handlers[event_type].remove(handler)

    def clear(self):
        self._handlers.clear()
        self._async_handlers.clear()

    def publish(self, event_type: str, data: Dict[str, Any]):
        """Deliver an event to all subscribers. Handler errors are logged, never raised."""
        logger.debug(f"Publishing event: {event_type}")

        for handler in self._handlers[event_type] + self._handlers[ALL_EVENTS]:
            try:
                handler(data)
            except Exception as e:
                logger.error(f"Error in sync handler for {event_type}: {e}")

        async_handlers = self._async_handlers[event_type] + self._async_handlers[ALL_EVENTS]
        if not async_handlers:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"No running event loop; dropping {len(async_handlers)} async handler(s) for {event_type}")
            return
        for handler in async_handlers:
            task = loop.create_task(self._handle_async(handler, dict(data), event_type))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def _handle_async(self, handler: Callable, data: Dict[str, Any], event_type: str):
        """Handle async event handler with error handling."""
        try:
            await handler(data)
        except Exception as e:
            logger.error(f"Error in async handler for {event_type}: {e}")


# Event type constants
class RegistryEvents:
    """Event types published by component managers."""

    COMPONENT_ADDED = "component.added"
    COMPONENT_REMOVED = "component.removed"
    COMPONENT_EVICTED = "component.evicted"
    COMPONENT_REJECTED = "component.rejected"
    COMPONENT_UPDATED = "component.updated"
    COMPONENT_DISMISSED = "component.dismissed"
    COMPONENT_EXPIRED = "component.expired"
    REGISTRY_CLEARED = "registry.cleared"
