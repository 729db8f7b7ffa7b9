"""
StatusIndicator validator and sanitizer.
"""

from typing import Any, Dict

from cosmo_ui.models.base import GRID_POSITIONS, ComponentFamily
from cosmo_ui.models.status_indicator import (
    STATUSINDICATOR_CONSTRAINTS,
    STATUSINDICATOR_STATES,
    StatusIndicator,
)
from cosmo_ui.models.validation import ValidationResult
from cosmo_ui.validation.base import (
    ComponentValidator,
    check_bool,
    check_enum,
    check_metadata,
    check_number,
    check_string,
    clean_bool,
    clean_enum,
    clean_metadata,
    clean_number,
    clean_string,
    lookup,
)

SIZE = STATUSINDICATOR_CONSTRAINTS["size"]
LABEL_MAX = STATUSINDICATOR_CONSTRAINTS["label"]["max_length"]
DEFAULT_STATE = "idle"


class StatusIndicatorValidator(ComponentValidator[StatusIndicator]):
    family = ComponentFamily.STATUS_INDICATOR
    model = StatusIndicator
    id_prefix = "indicator"

    def _validate_fields(self, data: Dict[str, Any], result: ValidationResult) -> None:
        check_enum(data, "state", STATUSINDICATOR_STATES, result, required=True)
        check_string(data, "label", result, max_length=LABEL_MAX)
        check_number(data, "size", result, minimum=SIZE["min"], maximum=SIZE["max"], unit="px")
        check_bool(data, "pulse", result)
        check_bool(data, "glow", result)
        check_enum(data, "position", GRID_POSITIONS, result)
        check_metadata(data, result)

    def _sanitize_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        state = clean_enum(lookup(data, "state"), STATUSINDICATOR_STATES, DEFAULT_STATE)
        return {
            "state": state,
            "label": clean_string(lookup(data, "label"), LABEL_MAX, None),
            "size": clean_number(lookup(data, "size"), SIZE["min"], SIZE["max"], SIZE["default"]),
            # loading dots pulse unless told otherwise
            "pulse": clean_bool(lookup(data, "pulse"), state == "loading"),
            "glow": clean_bool(lookup(data, "glow"), False),
            "position": clean_enum(lookup(data, "position"), GRID_POSITIONS, "top-right"),
            "metadata": clean_metadata(lookup(data, "metadata")),
        }
