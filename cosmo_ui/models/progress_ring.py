"""
ProgressRing - circular completion indicator.
"""

from typing import ClassVar, Optional

from pydantic import Field

from cosmo_ui.models.base import ARMetadata, ComponentFamily, CosmoModel, GridPosition, Variant


PROGRESSRING_CONSTRAINTS = {
    "value": {"min": 0, "max": 100},
    "size": {"min": 24, "max": 200, "default": 48},
    "thickness": {"min": 2, "max": 20, "default": 6},
    "label": {"max_length": 30},
    "max_concurrent": 6,
}


class ProgressRing(CosmoModel):
    family: ClassVar[ComponentFamily] = ComponentFamily.PROGRESS_RING

    id: str = Field(min_length=1)
    value: float = Field(ge=0, le=100)
    size: float = Field(48, ge=24, le=200)
    thickness: float = Field(6, ge=2, le=20)
    variant: Variant = "neutral"
    animated: bool = True
    show_value: bool = False
    label: Optional[str] = Field(None, min_length=1, max_length=30)
    position: GridPosition = "center"
    metadata: Optional[ARMetadata] = None

    @property
    def expiry_seconds(self) -> Optional[float]:
        return None
