"""
Explicit owner of the per-family registries.

Whatever owns the UI tree's lifetime constructs one store, hands it to the
code that needs it and closes it on teardown.
"""

import asyncio
from typing import Any, Dict, Optional, Type

from cosmo_ui.config import RegistryConfig, get_registry_config
from cosmo_ui.models.base import ComponentFamily
from cosmo_ui.models.validation import CorrectionResult
from cosmo_ui.registry.event_bus import EventBus
from cosmo_ui.registry.manager import ComponentManager
from cosmo_ui.registry.managers import (
    ContextBadgeManager,
    HUDCardManager,
    ProgressRingManager,
    StatusIndicatorManager,
)
from cosmo_ui.setup_logging import get_logger
from cosmo_ui.validation.registry import resolve_family

logger = get_logger(__name__)

MANAGER_CLASSES: Dict[ComponentFamily, Type[ComponentManager]] = {
    ComponentFamily.HUD_CARD: HUDCardManager,
    ComponentFamily.CONTEXT_BADGE: ContextBadgeManager,
    ComponentFamily.PROGRESS_RING: ProgressRingManager,
    ComponentFamily.STATUS_INDICATOR: StatusIndicatorManager,
}


class ComponentStore:
    """One independent manager per family, sharing a single event bus."""

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.config = config or get_registry_config()
        self.events = event_bus or EventBus()
        capacities = self.config.as_capacities()
        self._managers: Dict[ComponentFamily, ComponentManager] = {
            family: manager_cls(
                max_concurrent=capacities[family.value],
                loop=loop,
                event_bus=self.events,
            )
            for family, manager_cls in MANAGER_CLASSES.items()
        }
        self._closed = False

    def manager(self, family: Any) -> ComponentManager:
        return self._managers[resolve_family(family)]

    @property
    def hud_cards(self) -> HUDCardManager:
        return self._managers[ComponentFamily.HUD_CARD]

    @property
    def context_badges(self) -> ContextBadgeManager:
        return self._managers[ComponentFamily.CONTEXT_BADGE]

    @property
    def progress_rings(self) -> ProgressRingManager:
        return self._managers[ComponentFamily.PROGRESS_RING]

    @property
    def status_indicators(self) -> StatusIndicatorManager:
        return self._managers[ComponentFamily.STATUS_INDICATOR]

    def admit(self, result: CorrectionResult, allow_unverified: bool = False) -> bool:
        """Add a corrector's output to its family registry.

        Only valid results are admitted unless ``allow_unverified`` is set, in
        which case the sanitized fallback of an invalid result is used.
        """
        if result.is_valid:
            instance = result.instance
        elif allow_unverified:
            logger.warning(f"Admitting unverified {result.family.value} {result.sanitized.id}")
            instance = result.sanitized
        else:
            logger.info(f"Refusing invalid {result.family.value} ({len(result.errors)} error(s))")
            return False
        return self.manager(result.family).add(instance)

    def sizes(self) -> Dict[str, int]:
        return {family.value: len(manager) for family, manager in self._managers.items()}

    def clear_all(self) -> None:
        for manager in self._managers.values():
            manager.clear_all()

    def close(self) -> None:
        if self._closed:
            return
        for manager in self._managers.values():
            manager.close()
        self.events.clear()
        self._closed = True

    def __enter__(self) -> "ComponentStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
