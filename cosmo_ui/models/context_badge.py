"""
ContextBadge - a small status pill, simpler than a HUDCard.
"""

import re
from typing import ClassVar, Literal, Optional, Tuple, get_args

from pydantic import Field

from cosmo_ui.models.base import ARMetadata, ComponentFamily, CosmoModel, Position, Variant


ContextBadgeIcon = Literal[
    "none", "info", "check", "alert", "error", "bell", "clock", "star", "user", "wifi", "battery"
]

CONTEXTBADGE_ICONS: Tuple[str, ...] = get_args(ContextBadgeIcon)

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")

CONTEXTBADGE_CONSTRAINTS = {
    "label": {"max_length": 30},
    "auto_dismiss": {"min": 1000, "max": 30000},  # milliseconds
    "max_concurrent": 8,
}


class ContextBadgeMetadata(ARMetadata):
    # CSS selector / element id on the web, object or anchor name in AR
    follow_target: Optional[str] = Field(None, min_length=1)


class ContextBadge(CosmoModel):
    family: ClassVar[ComponentFamily] = ComponentFamily.CONTEXT_BADGE

    id: str = Field(min_length=1)
    label: str = Field(min_length=1, max_length=30)
    variant: Variant = "neutral"
    icon: ContextBadgeIcon = "none"
    position: Position = "top-right"
    contextual_color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN.pattern)
    auto_dismiss_ms: Optional[int] = Field(None, ge=1000, le=30000)
    dismissible: bool = True
    pulse: bool = False
    metadata: Optional[ContextBadgeMetadata] = None

    @property
    def expiry_seconds(self) -> Optional[float]:
        if self.auto_dismiss_ms is None:
            return None
        return self.auto_dismiss_ms / 1000.0
