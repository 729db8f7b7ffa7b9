from cosmo_ui.models.base import (
    ANCHOR_TYPES,
    AUTO_ANCHORS,
    GRID_POSITIONS,
    POSITIONS,
    VARIANTS,
    ARMetadata,
    ComponentFamily,
    CosmoModel,
)
from cosmo_ui.models.context_badge import (
    CONTEXTBADGE_CONSTRAINTS,
    CONTEXTBADGE_ICONS,
    ContextBadge,
    ContextBadgeMetadata,
)
from cosmo_ui.models.hud_card import (
    HUDCARD_CONSTRAINTS,
    HUDCARD_ICONS,
    PINNED_PRIORITY,
    HUDCard,
    HUDCardAction,
    HUDCardMetadata,
)
from cosmo_ui.models.progress_ring import PROGRESSRING_CONSTRAINTS, ProgressRing
from cosmo_ui.models.status_indicator import (
    STATUSINDICATOR_CONSTRAINTS,
    STATUSINDICATOR_STATES,
    StatusIndicator,
)
from cosmo_ui.models.validation import (
    ComponentInstance,
    CorrectionResult,
    ValidationIssue,
    ValidationResult,
)

MODELS_BY_FAMILY = {
    ComponentFamily.HUD_CARD: HUDCard,
    ComponentFamily.CONTEXT_BADGE: ContextBadge,
    ComponentFamily.PROGRESS_RING: ProgressRing,
    ComponentFamily.STATUS_INDICATOR: StatusIndicator,
}

__all__ = [
    "ANCHOR_TYPES",
    "AUTO_ANCHORS",
    "GRID_POSITIONS",
    "POSITIONS",
    "VARIANTS",
    "ARMetadata",
    "ComponentFamily",
    "CosmoModel",
    "CONTEXTBADGE_CONSTRAINTS",
    "CONTEXTBADGE_ICONS",
    "ContextBadge",
    "ContextBadgeMetadata",
    "HUDCARD_CONSTRAINTS",
    "HUDCARD_ICONS",
    "PINNED_PRIORITY",
    "HUDCard",
    "HUDCardAction",
    "HUDCardMetadata",
    "PROGRESSRING_CONSTRAINTS",
    "ProgressRing",
    "STATUSINDICATOR_CONSTRAINTS",
    "STATUSINDICATOR_STATES",
    "StatusIndicator",
    "ComponentInstance",
    "CorrectionResult",
    "ValidationIssue",
    "ValidationResult",
    "MODELS_BY_FAMILY",
]
