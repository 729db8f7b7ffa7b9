from cosmo_ui.validation.base import ComponentValidator
from cosmo_ui.validation.context_badge import ContextBadgeValidator
from cosmo_ui.validation.hud_card import HUDCardValidator
from cosmo_ui.validation.progress_ring import ProgressRingValidator
from cosmo_ui.validation.registry import get_validator, resolve_family
from cosmo_ui.validation.status_indicator import StatusIndicatorValidator

__all__ = [
    "ComponentValidator",
    "ContextBadgeValidator",
    "HUDCardValidator",
    "ProgressRingValidator",
    "StatusIndicatorValidator",
    "get_validator",
    "resolve_family",
]
