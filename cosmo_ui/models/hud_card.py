"""
HUDCard - a lightweight, glanceable card for contextual information.
"""

from typing import ClassVar, List, Literal, Optional, Tuple, get_args

from pydantic import Field, model_validator

from cosmo_ui.models.base import ARMetadata, ComponentFamily, CosmoModel, Position, Variant


HUDCardIcon = Literal["none", "info", "check", "alert", "error", "bell", "clock", "star"]
HUDCardActionVariant = Literal["primary", "secondary", "destructive"]

HUDCARD_ICONS: Tuple[str, ...] = get_args(HUDCardIcon)
HUDCARD_ACTION_VARIANTS: Tuple[str, ...] = get_args(HUDCardActionVariant)

HUDCARD_CONSTRAINTS = {
    "title": {"max_length": 60},
    "content": {"max_length": 200},
    "actions": {"max_count": 2, "label_max_length": 20},
    "auto_hide": {"min": 3, "max": 30},  # seconds
    "priority": {"min": 1, "max": 5, "default": 3},
    "max_concurrent": 5,
}

# Cards at or above this priority are pinned: never dismissible, never auto-hidden
PINNED_PRIORITY = 4


class HUDCardMetadata(ARMetadata):
    z_index: Optional[float] = None  # deprecated, priority orders cards now


class HUDCardAction(CosmoModel):
    id: str = Field(min_length=1)
    label: str = Field(min_length=1, max_length=20)
    variant: HUDCardActionVariant = "primary"


class HUDCard(CosmoModel):
    """A notification card. Priority 1 is lowest, 5 is critical."""
    family: ClassVar[ComponentFamily] = ComponentFamily.HUD_CARD

    id: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=60)
    content: str = Field(min_length=1, max_length=200)
    variant: Variant = "neutral"
    priority: int = Field(3, ge=1, le=5)
    position: Position = "top-right"
    icon: HUDCardIcon = "none"
    auto_hide_after_seconds: Optional[float] = Field(None, ge=3, le=30)
    dismissible: bool = True
    actions: List[HUDCardAction] = Field(default_factory=list, max_length=2)
    metadata: Optional[HUDCardMetadata] = None

    @model_validator(mode="after")
    def _pinned_cards_stay_put(self) -> "HUDCard":
        if self.priority >= PINNED_PRIORITY and (self.dismissible or self.auto_hide_after_seconds is not None):
            raise ValueError("priority >= 4 cards must not be dismissible or auto-hidden")
        return self

    @property
    def is_pinned(self) -> bool:
        return self.priority >= PINNED_PRIORITY

    @property
    def expiry_seconds(self) -> Optional[float]:
        if self.is_pinned:
            return None
        return self.auto_hide_after_seconds
