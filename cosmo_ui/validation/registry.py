"""
Family tag -> validator lookup.

Dispatch is explicit on the ComponentFamily tag, never on the shape of
the candidate.
"""

from typing import Any, Dict

from cosmo_ui.exceptions import UnknownFamilyError
from cosmo_ui.models.base import ComponentFamily
from cosmo_ui.validation.base import ComponentValidator
from cosmo_ui.validation.context_badge import ContextBadgeValidator
from cosmo_ui.validation.hud_card import HUDCardValidator
from cosmo_ui.validation.progress_ring import ProgressRingValidator
from cosmo_ui.validation.status_indicator import StatusIndicatorValidator

# Validators hold no state, one shared instance per family is enough
_VALIDATORS: Dict[ComponentFamily, ComponentValidator] = {
    ComponentFamily.HUD_CARD: HUDCardValidator(),
    ComponentFamily.CONTEXT_BADGE: ContextBadgeValidator(),
    ComponentFamily.PROGRESS_RING: ProgressRingValidator(),
    ComponentFamily.STATUS_INDICATOR: StatusIndicatorValidator(),
}


def resolve_family(family: Any) -> ComponentFamily:
    try:
        return ComponentFamily.parse(family)
    except ValueError as e:
        raise UnknownFamilyError(family, cause=e) from e


def get_validator(family: Any) -> ComponentValidator:
    """Return the validator for a family tag (enum member or tag string)."""
    return _VALIDATORS[resolve_family(family)]
