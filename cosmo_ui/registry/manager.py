"""
Capacity-bounded lifecycle registry for component instances.

A manager owns an insertion-ordered map of entries keyed by component id.
Every entry carries a monotonic insertion sequence number (used for FIFO
eviction and tie-breaking) and, when the instance expires on its own, the
handle of its expiry timer. All operations are synchronous and run on the
event loop thread; timers are plain ``loop.call_later`` callbacks.
"""

import asyncio
import itertools
from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable, ClassVar, Dict, Generic, Iterator, List, Mapping, Optional, TypeVar

from pydantic.alias_generators import to_camel

from cosmo_ui.config import get_registry_config
from cosmo_ui.exceptions import InvalidConfigError
from cosmo_ui.models.base import ComponentFamily, CosmoModel
from cosmo_ui.registry.event_bus import ALL_EVENTS, EventBus, RegistryEvents
from cosmo_ui.setup_logging import get_logger
from cosmo_ui.validation.registry import get_validator

logger = get_logger(__name__)

T = TypeVar("T", bound=CosmoModel)


@dataclass
class RegistryEntry(Generic[T]):
    instance: T
    insertion_seq: int
    timer: Optional[asyncio.TimerHandle] = None

    def cancel_timer(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None


@dataclass(frozen=True)
class StackedComponent(Generic[T]):
    """A live instance plus its offset within its position group."""
    instance: T
    position: str
    stack_index: int


def _camel_keys(patch: Mapping[str, Any]) -> Dict[str, Any]:
    return {(to_camel(key) if "_" in key else key): value for key, value in patch.items()}


class ComponentManager(Generic[T]):
    """Base registry: admission, removal, expiry, grouping and change events.

    Subclasses choose the eviction policy through ``_select_eviction``.
    """

    family: ClassVar[ComponentFamily]

    def __init__(
        self,
        max_concurrent: Optional[int] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        event_bus: Optional[EventBus] = None,
    ):
        if max_concurrent is None:
            max_concurrent = get_registry_config().as_capacities()[self.family.value]
        if max_concurrent < 1:
            raise InvalidConfigError(
                f"maxConcurrent for {self.family.value} must be at least 1, got {max_concurrent}",
                context={'family': self.family.value},
            )
        self.max_concurrent = max_concurrent
        self.events = event_bus or EventBus()
        self._loop = loop
        self._validator = get_validator(self.family)
        self._entries: Dict[str, RegistryEntry[T]] = {}
        self._seq = itertools.count()

    # === Read access ===

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, component_id: object) -> bool:
        return component_id in self._entries

    def __iter__(self) -> Iterator[T]:
        return iter(self.instances())

    def get(self, component_id: str) -> Optional[T]:
        entry = self._entries.get(component_id)
        return entry.instance if entry is not None else None

    def entry(self, component_id: str) -> Optional[RegistryEntry[T]]:
        return self._entries.get(component_id)

    def ids(self) -> List[str]:
        return list(self._entries)

    def instances(self) -> List[T]:
        return [entry.instance for entry in self._entries.values()]

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self.max_concurrent

    # === Mutations ===

    def add(self, component: Any) -> bool:
        """Admit a component. Returns False when the eviction policy rejects it."""
        instance = self._coerce(component)
        component_id = instance.id

        existing = self._entries.pop(component_id, None)
        if existing is not None:
            # Same id: replace, re-sequence and re-arm, never evict
            existing.cancel_timer()
            self._insert(instance)
            logger.info(f"{self.family.value} {component_id} replaced ({len(self)}/{self.max_concurrent})")
            self._publish(RegistryEvents.COMPONENT_ADDED, component_id, replaced=True)
            return True

        if self.is_full:
            victim_id = self._select_eviction(instance)
            if victim_id is None:
                logger.warning(
                    f"{self.family.value} {component_id} rejected: registry full "
                    f"({self.max_concurrent}) and nothing evictable"
                )
                self._publish(RegistryEvents.COMPONENT_REJECTED, component_id)
                return False
            self._drop(victim_id)
            logger.info(f"{self.family.value} {victim_id} evicted to admit {component_id}")
            self._publish(RegistryEvents.COMPONENT_EVICTED, victim_id, evicted_for=component_id)

        self._insert(instance)
        logger.info(f"{self.family.value} {component_id} added ({len(self)}/{self.max_concurrent})")
        self._publish(RegistryEvents.COMPONENT_ADDED, component_id, replaced=False)
        return True

    def remove(self, component_id: str) -> bool:
        """Delete unconditionally. Unknown ids are a no-op."""
        if self._drop(component_id) is None:
            return False
        self._publish(RegistryEvents.COMPONENT_REMOVED, component_id)
        return True

    def update(self, component_id: str, patch: Any) -> Optional[T]:
        """Merge a partial patch into a stored instance.

        The merged result goes back through the sanitizer; capacity, insertion
        order and the expiry timer are left alone. Unknown ids are a no-op.
        """
        entry = self._entries.get(component_id)
        if entry is None:
            return None
        if isinstance(patch, CosmoModel):
            patch = patch.to_dict()
        changes = {k: v for k, v in _camel_keys(patch).items() if k != "id"}
        merged = {**entry.instance.to_dict(), **changes, "id": component_id}
        entry.instance = self._validator.sanitize(merged)
        self._publish(RegistryEvents.COMPONENT_UPDATED, component_id, fields=sorted(changes))
        return entry.instance

    def dismiss(self, component_id: str) -> bool:
        """User-initiated removal, refused for non-dismissible instances."""
        return self._dismiss(component_id, RegistryEvents.COMPONENT_DISMISSED)

    def clear_all(self) -> None:
        count = len(self._entries)
        for entry in self._entries.values():
            entry.cancel_timer()
        self._entries.clear()
        logger.info(f"{self.family.value} registry cleared ({count} removed)")
        self._publish(RegistryEvents.REGISTRY_CLEARED, None, removed=count)

    def close(self) -> None:
        """Cancel every timer, drop every entry and every listener."""
        for entry in self._entries.values():
            entry.cancel_timer()
        self._entries.clear()
        self.events.clear()

    # === Grouping ===

    def grouped(self) -> Dict[str, List[StackedComponent[T]]]:
        """Live instances partitioned by position, each with its stack index."""
        groups: Dict[str, List[StackedComponent[T]]] = {}
        for entry in sorted(self._entries.values(), key=self._stack_key):
            position = entry.instance.position
            group = groups.setdefault(position, [])
            group.append(StackedComponent(entry.instance, position, len(group)))
        return groups

    def stacked(self) -> List[StackedComponent[T]]:
        return [item for group in self.grouped().values() for item in group]

    # === Listeners ===

    def subscribe(self, listener: Callable, event_type: str = ALL_EVENTS) -> None:
        self.events.subscribe(event_type, listener)

    def unsubscribe(self, listener: Callable, event_type: str = ALL_EVENTS) -> None:
        self.events.unsubscribe(event_type, listener)

    # === Policy hooks ===

    def _select_eviction(self, incoming: T) -> Optional[str]:
        """Id to evict so ``incoming`` fits, or None to reject it."""
        raise NotImplementedError

    def _stack_key(self, entry: RegistryEntry[T]) -> Any:
        return entry.insertion_seq

    def _can_dismiss(self, instance: T) -> bool:
        return getattr(instance, "dismissible", True) is not False

    # === Internals ===

    def _coerce(self, component: Any) -> T:
        model = self._validator.model
        if isinstance(component, model):
            return component
        if isinstance(component, Mapping):
            return self._validator.sanitize(component)
        raise TypeError(
            f"{type(self).__name__} stores {model.__name__} instances, got {type(component).__name__}"
        )

    def _insert(self, instance: T) -> RegistryEntry[T]:
        entry = RegistryEntry(instance=instance, insertion_seq=next(self._seq))
        self._entries[instance.id] = entry
        entry.timer = self._schedule_expiry(entry)
        return entry

    def _drop(self, component_id: str) -> Optional[RegistryEntry[T]]:
        entry = self._entries.pop(component_id, None)
        if entry is not None:
            entry.cancel_timer()
        return entry

    def _dismiss(self, component_id: str, event_type: str) -> bool:
        entry = self._entries.get(component_id)
        if entry is None:
            return False
        if not self._can_dismiss(entry.instance):
            logger.warning(f"{self.family.value} {component_id} is not dismissible; ignoring")
            return False
        self._drop(component_id)
        self._publish(event_type, component_id)
        return True

    def _get_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            return None

    def _schedule_expiry(self, entry: RegistryEntry[T]) -> Optional[asyncio.TimerHandle]:
        delay = entry.instance.expiry_seconds
        if delay is None:
            return None
        loop = self._get_loop()
        if loop is None:
            logger.warning(
                f"No event loop available; auto-expiry disabled for {self.family.value} {entry.instance.id}"
            )
            return None
        logger.debug(f"Scheduling expiry of {self.family.value} {entry.instance.id} in {delay}s")
        return loop.call_later(delay, self._expire, entry.instance.id, entry.insertion_seq)

    def _expire(self, component_id: str, insertion_seq: int) -> None:
        entry = self._entries.get(component_id)
        if entry is None or entry.insertion_seq != insertion_seq:
            logger.debug(f"Stale expiry for {self.family.value} {component_id} ignored")
            return
        entry.timer = None
        self._dismiss(component_id, RegistryEvents.COMPONENT_EXPIRED)

    def _publish(self, event_type: str, component_id: Optional[str], **extra: Any) -> None:
        data = {
            'type': event_type,
            'family': self.family.value,
            'component_id': component_id,
            'size': len(self._entries),
        }
        data.update(extra)
        self.events.publish(event_type, data)


class PriorityEvictionManager(ComponentManager[T]):
    """At capacity, evict the lowest priority entry only for a strictly higher incoming priority."""

    def _select_eviction(self, incoming: T) -> Optional[str]:
        lowest: Optional[RegistryEntry[T]] = None
        for entry in sorted(self._entries.values(), key=attrgetter("insertion_seq")):
            # strict < keeps the earliest-inserted of equal minimums
            if lowest is None or entry.instance.priority < lowest.instance.priority:
                lowest = entry
        if lowest is not None and incoming.priority > lowest.instance.priority:
            return lowest.instance.id
        return None

    def _stack_key(self, entry: RegistryEntry[T]) -> Any:
        return (-entry.instance.priority, entry.insertion_seq)


class FifoEvictionManager(ComponentManager[T]):
    """At capacity, always evict the oldest entry."""

    def _select_eviction(self, incoming: T) -> Optional[str]:
        if not self._entries:
            return None
        oldest = min(self._entries.values(), key=attrgetter("insertion_seq"))
        return oldest.instance.id
