"""
ContextBadge validator and sanitizer.
"""

from typing import Any, Dict, Mapping

from cosmo_ui.models.base import POSITIONS, VARIANTS, ComponentFamily
from cosmo_ui.models.context_badge import (
    CONTEXTBADGE_CONSTRAINTS,
    CONTEXTBADGE_ICONS,
    HEX_COLOR_PATTERN,
    ContextBadge,
)
from cosmo_ui.models.validation import ValidationResult
from cosmo_ui.validation.base import (
    MISSING,
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

LABEL_MAX = CONTEXTBADGE_CONSTRAINTS["label"]["max_length"]
AUTO_DISMISS_MIN = CONTEXTBADGE_CONSTRAINTS["auto_dismiss"]["min"]
AUTO_DISMISS_MAX = CONTEXTBADGE_CONSTRAINTS["auto_dismiss"]["max"]


def _check_follow_target(metadata: Mapping[str, Any], result: ValidationResult) -> None:
    target = lookup(metadata, "followTarget")
    if target is MISSING or target is None:
        return
    if not isinstance(target, str) or not target.strip():
        result.error("metadata.followTarget", "metadata.followTarget must be a non-empty string")


def _keep_follow_target(metadata: Mapping[str, Any], cleaned: Dict[str, Any]) -> None:
    target = clean_string(lookup(metadata, "followTarget"), None, None)
    if target:
        cleaned["followTarget"] = target


class ContextBadgeValidator(ComponentValidator[ContextBadge]):
    family = ComponentFamily.CONTEXT_BADGE
    model = ContextBadge
    id_prefix = "badge"

    def _validate_fields(self, data: Dict[str, Any], result: ValidationResult) -> None:
        check_string(data, "label", result, max_length=LABEL_MAX, required=True)
        check_enum(data, "variant", VARIANTS, result)
        check_enum(data, "icon", CONTEXTBADGE_ICONS, result)
        check_enum(data, "position", POSITIONS, result)
        check_bool(data, "dismissible", result)
        check_bool(data, "pulse", result)

        color = lookup(data, "contextualColor")
        if color is not MISSING and color is not None:
            if not isinstance(color, str) or not HEX_COLOR_PATTERN.fullmatch(color):
                result.error("contextualColor", "contextualColor must be a hex color like #ff5500")

        check_number(
            data, "autoDismissMs", result,
            minimum=AUTO_DISMISS_MIN, maximum=AUTO_DISMISS_MAX, unit="ms",
        )
        check_metadata(data, result, extra_checks=(_check_follow_target,))

    def _sanitize_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        color = lookup(data, "contextualColor")
        if not isinstance(color, str) or not HEX_COLOR_PATTERN.fullmatch(color.strip()):
            color = None
        else:
            color = color.strip()

        auto_dismiss = clean_number(lookup(data, "autoDismissMs"), AUTO_DISMISS_MIN, AUTO_DISMISS_MAX, None)

        return {
            "label": clean_string(lookup(data, "label"), LABEL_MAX, "Status"),
            "variant": clean_enum(lookup(data, "variant"), VARIANTS, "neutral"),
            "icon": clean_enum(lookup(data, "icon"), CONTEXTBADGE_ICONS, "none"),
            "position": clean_enum(lookup(data, "position"), POSITIONS, "top-right"),
            "contextualColor": color,
            "autoDismissMs": None if auto_dismiss is None else int(round(auto_dismiss)),
            "dismissible": clean_bool(lookup(data, "dismissible"), True),
            "pulse": clean_bool(lookup(data, "pulse"), False),
            "metadata": clean_metadata(lookup(data, "metadata"), extra_fields=(_keep_follow_target,)),
        }
