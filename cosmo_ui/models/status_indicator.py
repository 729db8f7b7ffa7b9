"""
StatusIndicator - minimal status dot for connection, recording or health state.
"""

from typing import ClassVar, Literal, Optional, Tuple, get_args

from pydantic import Field

from cosmo_ui.models.base import ARMetadata, ComponentFamily, CosmoModel, GridPosition


StatusIndicatorState = Literal["idle", "active", "loading", "success", "warning", "error"]

STATUSINDICATOR_STATES: Tuple[str, ...] = get_args(StatusIndicatorState)

STATUSINDICATOR_CONSTRAINTS = {
    "size": {"min": 8, "max": 32, "default": 12},
    "label": {"max_length": 20},
    "max_concurrent": 10,
}


class StatusIndicator(CosmoModel):
    family: ClassVar[ComponentFamily] = ComponentFamily.STATUS_INDICATOR

    id: str = Field(min_length=1)
    state: StatusIndicatorState
    label: Optional[str] = Field(None, min_length=1, max_length=20)
    size: float = Field(12, ge=8, le=32)
    pulse: bool = False
    glow: bool = False
    position: GridPosition = "top-right"
    metadata: Optional[ARMetadata] = None

    @property
    def expiry_seconds(self) -> Optional[float]:
        return None
