"""
ProgressRing validator and sanitizer.
"""

from typing import Any, Dict

from cosmo_ui.models.base import GRID_POSITIONS, VARIANTS, ComponentFamily
from cosmo_ui.models.progress_ring import PROGRESSRING_CONSTRAINTS, ProgressRing
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

VALUE = PROGRESSRING_CONSTRAINTS["value"]
SIZE = PROGRESSRING_CONSTRAINTS["size"]
THICKNESS = PROGRESSRING_CONSTRAINTS["thickness"]
LABEL_MAX = PROGRESSRING_CONSTRAINTS["label"]["max_length"]


class ProgressRingValidator(ComponentValidator[ProgressRing]):
    family = ComponentFamily.PROGRESS_RING
    model = ProgressRing
    id_prefix = "ring"

    def _validate_fields(self, data: Dict[str, Any], result: ValidationResult) -> None:
        check_number(data, "value", result, minimum=VALUE["min"], maximum=VALUE["max"], required=True, unit="%")
        check_number(data, "size", result, minimum=SIZE["min"], maximum=SIZE["max"], unit="px")
        check_number(data, "thickness", result, minimum=THICKNESS["min"], maximum=THICKNESS["max"], unit="px")
        check_enum(data, "variant", VARIANTS, result)
        check_enum(data, "position", GRID_POSITIONS, result)
        check_bool(data, "animated", result)
        check_bool(data, "showValue", result)
        check_string(data, "label", result, max_length=LABEL_MAX)
        check_metadata(data, result)

    def _sanitize_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "value": clean_number(lookup(data, "value"), VALUE["min"], VALUE["max"], VALUE["min"]),
            "size": clean_number(lookup(data, "size"), SIZE["min"], SIZE["max"], SIZE["default"]),
            "thickness": clean_number(
                lookup(data, "thickness"), THICKNESS["min"], THICKNESS["max"], THICKNESS["default"]
            ),
            "variant": clean_enum(lookup(data, "variant"), VARIANTS, "neutral"),
            "animated": clean_bool(lookup(data, "animated"), True),
            "showValue": clean_bool(lookup(data, "showValue"), False),
            "label": clean_string(lookup(data, "label"), LABEL_MAX, None),
            "position": clean_enum(lookup(data, "position"), GRID_POSITIONS, "center"),
            "metadata": clean_metadata(lookup(data, "metadata")),
        }
