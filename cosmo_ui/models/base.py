"""
Shared building blocks for component models.

Attributes are snake_case in Python and camelCase on the wire; the JSON
shape is what the LLM emits and what renderers consume.
"""

from enum import Enum
from typing import Any, Dict, Literal, Optional, Tuple, get_args

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ComponentFamily(str, Enum):
    """Closed set of component families handled by the engine."""
    HUD_CARD = "HUDCard"
    CONTEXT_BADGE = "ContextBadge"
    PROGRESS_RING = "ProgressRing"
    STATUS_INDICATOR = "StatusIndicator"

    @classmethod
    def parse(cls, value: Any) -> "ComponentFamily":
        """Accept an enum member or its tag string ("HUDCard", "hudcard", ...)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            needle = value.replace("_", "").replace("-", "").lower()
            for member in cls:
                if member.value.lower() == needle or member.name.replace("_", "").lower() == needle:
                    return member
        raise ValueError(f"Unknown component family: {value!r}")


Variant = Literal["neutral", "info", "success", "warning", "error"]

Position = Literal[
    "top-left",
    "top-center",
    "top-right",
    "center-left",
    "center-right",
    "bottom-left",
    "bottom-center",
    "bottom-right",
]

# ProgressRing and StatusIndicator may also sit dead center
GridPosition = Literal[
    "top-left",
    "top-center",
    "top-right",
    "center-left",
    "center",
    "center-right",
    "bottom-left",
    "bottom-center",
    "bottom-right",
]

AnchorType = Literal["screen-space", "world-space"]
AutoAnchor = Literal["face", "surface", "gaze"]

VARIANTS: Tuple[str, ...] = get_args(Variant)
POSITIONS: Tuple[str, ...] = get_args(Position)
GRID_POSITIONS: Tuple[str, ...] = get_args(GridPosition)
ANCHOR_TYPES: Tuple[str, ...] = get_args(AnchorType)
AUTO_ANCHORS: Tuple[str, ...] = get_args(AutoAnchor)


class CosmoModel(BaseModel):
    """Base class for every wire-facing model."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-shaped dict (camelCase keys, unset optionals omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ARMetadata(CosmoModel):
    """AR/spatial placement shared by all families."""
    anchor_type: Optional[AnchorType] = None
    world_position: Optional[Tuple[float, float, float]] = None
    world_rotation: Optional[Tuple[float, float, float]] = None
    auto_anchor: Optional[AutoAnchor] = None
    auto_anchor_distance: Optional[float] = Field(None, gt=0)
