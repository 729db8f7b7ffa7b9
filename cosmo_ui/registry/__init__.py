from cosmo_ui.registry.event_bus import ALL_EVENTS, EventBus, RegistryEvents
from cosmo_ui.registry.manager import (
    ComponentManager,
    FifoEvictionManager,
    PriorityEvictionManager,
    RegistryEntry,
    StackedComponent,
)
from cosmo_ui.registry.managers import (
    ContextBadgeManager,
    HUDCardManager,
    ProgressRingManager,
    StatusIndicatorManager,
)
from cosmo_ui.registry.store import ComponentStore

__all__ = [
    "ALL_EVENTS",
    "ComponentManager",
    "ComponentStore",
    "ContextBadgeManager",
    "EventBus",
    "FifoEvictionManager",
    "HUDCardManager",
    "PriorityEvictionManager",
    "ProgressRingManager",
    "RegistryEntry",
    "RegistryEvents",
    "StackedComponent",
    "StatusIndicatorManager",
]
