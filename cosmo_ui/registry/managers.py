"""
One manager per component family.
"""

from typing import Any, Optional

from cosmo_ui.models.base import ComponentFamily
from cosmo_ui.models.context_badge import ContextBadge
from cosmo_ui.models.hud_card import PINNED_PRIORITY, HUDCard
from cosmo_ui.models.progress_ring import ProgressRing
from cosmo_ui.models.status_indicator import StatusIndicator
from cosmo_ui.registry.manager import FifoEvictionManager, PriorityEvictionManager


class HUDCardManager(PriorityEvictionManager[HUDCard]):
    family = ComponentFamily.HUD_CARD

    def _can_dismiss(self, instance: HUDCard) -> bool:
        return instance.dismissible is not False and instance.priority < PINNED_PRIORITY


class ContextBadgeManager(FifoEvictionManager[ContextBadge]):
    family = ComponentFamily.CONTEXT_BADGE


class ProgressRingManager(FifoEvictionManager[ProgressRing]):
    family = ComponentFamily.PROGRESS_RING

    def update_value(self, component_id: str, value: Any) -> Optional[ProgressRing]:
        """Animate a ring; the value is clamped to 0..100 like any other patch."""
        return self.update(component_id, {"value": value})


class StatusIndicatorManager(FifoEvictionManager[StatusIndicator]):
    family = ComponentFamily.STATUS_INDICATOR

    def update_state(self, component_id: str, state: Any) -> Optional[StatusIndicator]:
        return self.update(component_id, {"state": state})
