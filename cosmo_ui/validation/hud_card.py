"""
HUDCard validator and sanitizer.
"""

from typing import Any, Dict, List, Mapping

from cosmo_ui.models.base import POSITIONS, VARIANTS, ComponentFamily
from cosmo_ui.models.hud_card import (
    HUDCARD_ACTION_VARIANTS,
    HUDCARD_CONSTRAINTS,
    HUDCARD_ICONS,
    PINNED_PRIORITY,
    HUDCard,
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
    clamp,
    clean_bool,
    clean_enum,
    clean_metadata,
    clean_number,
    clean_string,
    coerce_number,
    is_number,
    lookup,
)

TITLE_MAX = HUDCARD_CONSTRAINTS["title"]["max_length"]
CONTENT_MAX = HUDCARD_CONSTRAINTS["content"]["max_length"]
ACTIONS_MAX = HUDCARD_CONSTRAINTS["actions"]["max_count"]
ACTION_LABEL_MAX = HUDCARD_CONSTRAINTS["actions"]["label_max_length"]
AUTO_HIDE_MIN = HUDCARD_CONSTRAINTS["auto_hide"]["min"]
AUTO_HIDE_MAX = HUDCARD_CONSTRAINTS["auto_hide"]["max"]
PRIORITY_MIN = HUDCARD_CONSTRAINTS["priority"]["min"]
PRIORITY_MAX = HUDCARD_CONSTRAINTS["priority"]["max"]
PRIORITY_DEFAULT = HUDCARD_CONSTRAINTS["priority"]["default"]


def _check_z_index(metadata: Mapping[str, Any], result: ValidationResult) -> None:
    z_index = lookup(metadata, "zIndex")
    if z_index is not MISSING and z_index is not None and not is_number(z_index):
        result.error("metadata.zIndex", "metadata.zIndex must be a number")


def _keep_z_index(metadata: Mapping[str, Any], cleaned: Dict[str, Any]) -> None:
    z_index = coerce_number(lookup(metadata, "zIndex"))
    if z_index is not None:
        cleaned["zIndex"] = z_index


def _effective_priority(data: Mapping[str, Any]) -> int:
    priority = coerce_number(lookup(data, "priority"))
    if priority is None:
        return PRIORITY_DEFAULT
    return int(clamp(round(priority), PRIORITY_MIN, PRIORITY_MAX))


class HUDCardValidator(ComponentValidator[HUDCard]):
    family = ComponentFamily.HUD_CARD
    model = HUDCard
    id_prefix = "card"

    def _validate_fields(self, data: Dict[str, Any], result: ValidationResult) -> None:
        check_string(data, "title", result, max_length=TITLE_MAX, required=True)
        check_string(data, "content", result, max_length=CONTENT_MAX, required=True)
        check_enum(data, "variant", VARIANTS, result)
        check_enum(data, "position", POSITIONS, result)
        check_enum(data, "icon", HUDCARD_ICONS, result)
        check_bool(data, "dismissible", result)

        priority = lookup(data, "priority")
        if priority is not MISSING and priority is not None:
            if not is_number(priority) or priority != int(priority) or not PRIORITY_MIN <= priority <= PRIORITY_MAX:
                result.error("priority", f"priority must be an integer between {PRIORITY_MIN} and {PRIORITY_MAX}")

        check_number(
            data, "autoHideAfterSeconds", result,
            minimum=AUTO_HIDE_MIN, maximum=AUTO_HIDE_MAX, unit="seconds",
        )
        self._validate_actions(data, result)
        check_metadata(data, result, extra_checks=(_check_z_index,))

        # Pinned cards: the sanitizer coerces these, the validator only reports them
        if _effective_priority(data) >= PINNED_PRIORITY:
            dismissible = lookup(data, "dismissible")
            if dismissible is MISSING or dismissible is None or dismissible is True:
                result.error(
                    "dismissible",
                    "dismissible must be false when priority >= 4 (critical cards stay visible)",
                )
            auto_hide = lookup(data, "autoHideAfterSeconds")
            if auto_hide is not MISSING and auto_hide is not None:
                result.error(
                    "autoHideAfterSeconds",
                    "autoHideAfterSeconds must be null when priority >= 4 (critical cards never auto-hide)",
                )

    def _validate_actions(self, data: Dict[str, Any], result: ValidationResult) -> None:
        actions = lookup(data, "actions")
        if actions is MISSING or actions is None:
            return
        if not isinstance(actions, list):
            result.error("actions", "actions must be an array")
            return
        if len(actions) > ACTIONS_MAX:
            result.error("actions", f"Too many actions: max {ACTIONS_MAX} allowed (got {len(actions)})")

        for index, action in enumerate(actions):
            path = f"actions[{index}]"
            if not isinstance(action, Mapping):
                result.error(path, f"{path} must be an object")
                continue
            check_string(action, "label", result, max_length=ACTION_LABEL_MAX, required=True, path=f"{path}.label")
            action_id = lookup(action, "id")
            if action_id is MISSING:
                action_id = lookup(action, "actionId")
            if action_id is MISSING or action_id is None or not isinstance(action_id, str) or not action_id.strip():
                result.error(f"{path}.id", f"{path}.id is required")
            check_enum(action, "variant", HUDCARD_ACTION_VARIANTS, result, path=f"{path}.variant")

    def _sanitize_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        priority = _effective_priority(data)

        auto_hide = lookup(data, "autoHideAfterSeconds")
        auto_hide = None if auto_hide is MISSING else clean_number(auto_hide, AUTO_HIDE_MIN, AUTO_HIDE_MAX, None)
        dismissible = clean_bool(lookup(data, "dismissible"), True)

        # Critical cards are pinned regardless of what was requested
        if priority >= PINNED_PRIORITY:
            dismissible = False
            auto_hide = None

        return {
            "title": clean_string(lookup(data, "title"), TITLE_MAX, "Untitled"),
            "content": clean_string(lookup(data, "content"), CONTENT_MAX, "No content"),
            "variant": clean_enum(lookup(data, "variant"), VARIANTS, "neutral"),
            "priority": priority,
            "position": clean_enum(lookup(data, "position"), POSITIONS, "top-right"),
            "icon": clean_enum(lookup(data, "icon"), HUDCARD_ICONS, "none"),
            "autoHideAfterSeconds": auto_hide,
            "dismissible": dismissible,
            "actions": self._sanitize_actions(lookup(data, "actions")),
            "metadata": clean_metadata(lookup(data, "metadata"), extra_fields=(_keep_z_index,)),
        }

    def _sanitize_actions(self, actions: Any) -> List[Dict[str, Any]]:
        if not isinstance(actions, list):
            return []
        cleaned = []
        for action in actions:
            if not isinstance(action, Mapping):
                continue
            label = clean_string(lookup(action, "label"), ACTION_LABEL_MAX, None)
            if label is None:
                continue
            action_id = lookup(action, "id")
            if action_id is MISSING:
                action_id = lookup(action, "actionId")
            cleaned.append({
                "id": clean_string(action_id, None, None) or f"action-{len(cleaned) + 1}",
                "label": label,
                "variant": clean_enum(lookup(action, "variant"), HUDCARD_ACTION_VARIANTS, "primary"),
            })
            if len(cleaned) == ACTIONS_MAX:
                break
        return cleaned
