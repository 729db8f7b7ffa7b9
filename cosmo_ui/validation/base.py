"""
Shared machinery for the per-family validators.

Every family validator offers two pure operations:

- ``validate(candidate)`` reports structured errors and warnings and never
  mutates its input.
- ``sanitize(candidate)`` always returns a renderable model instance:
  defaults applied, numbers clamped, strings truncated, unknown enum values
  replaced by the family default.

Candidates are the raw JSON objects an LLM produced (camelCase keys), but a
snake_case key or an already-built model is accepted as well.
"""

import math
import sys
import time
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Generic, Iterable, Mapping, Optional, Sequence, Type, TypeVar

from pydantic.alias_generators import to_snake

from cosmo_ui.models.base import ANCHOR_TYPES, AUTO_ANCHORS, ComponentFamily, CosmoModel
from cosmo_ui.models.validation import ValidationResult
from cosmo_ui.setup_logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=CosmoModel)

MISSING = object()


# === Candidate access ===

def as_mapping(candidate: Any) -> Optional[Dict[str, Any]]:
    """Normalize a candidate to a plain dict, or None if it is not an object."""
    if isinstance(candidate, CosmoModel):
        return candidate.to_dict()
    if isinstance(candidate, Mapping):
        return dict(candidate)
    return None


def lookup(data: Mapping[str, Any], key: str) -> Any:
    """Read a camelCase key, falling back to its snake_case spelling."""
    if key in data:
        return data[key]
    snake = to_snake(key)
    if snake in data:
        return data[snake]
    return MISSING


def is_number(value: Any) -> bool:
    """True for finite ints/floats. Booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # ints are exact; huge ones would overflow math.isfinite
    return isinstance(value, int) or math.isfinite(value)


def is_vector3(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) == 3 and all(is_number(v) for v in value)


def timestamp_id(prefix: str) -> str:
    """Deterministic-format placeholder id: ``<prefix>-<epoch ms>``."""
    return f"{prefix}-{int(time.time() * 1000)}"


# === Validation checks ===

def check_string(
    data: Mapping[str, Any],
    key: str,
    result: ValidationResult,
    max_length: Optional[int] = None,
    required: bool = False,
    path: Optional[str] = None,
) -> None:
    field_name = path or key
    value = lookup(data, key)
    if value is MISSING or value is None:
        if required:
            result.error(field_name, f"{field_name} is required")
        return
    if not isinstance(value, str):
        result.error(field_name, f"{field_name} must be a string")
        return
    if not value.strip():
        result.error(field_name, f"{field_name} must not be empty")
        return
    if max_length is not None and len(value) > max_length:
        result.error(
            field_name,
            f"{field_name} exceeds max length of {max_length} characters (got {len(value)})",
        )


def check_enum(
    data: Mapping[str, Any],
    key: str,
    allowed: Sequence[str],
    result: ValidationResult,
    required: bool = False,
    path: Optional[str] = None,
) -> None:
    field_name = path or key
    value = lookup(data, key)
    if value is MISSING or value is None:
        if required:
            result.error(field_name, f"{field_name} is required (one of: {', '.join(allowed)})")
        return
    if value not in allowed:
        result.error(field_name, f"Invalid {field_name} {value!r}. Must be one of: {', '.join(allowed)}")


def check_bool(data: Mapping[str, Any], key: str, result: ValidationResult) -> None:
    value = lookup(data, key)
    if value is MISSING or value is None:
        return
    if not isinstance(value, bool):
        result.error(key, f"{key} must be a boolean")


def check_number(
    data: Mapping[str, Any],
    key: str,
    result: ValidationResult,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    required: bool = False,
    unit: str = "",
) -> None:
    """Wrong type is an error; a number outside its range is only a warning (it gets clamped)."""
    value = lookup(data, key)
    if value is MISSING or value is None:
        if required:
            result.error(key, f"{key} is required")
        return
    if not is_number(value):
        result.error(key, f"{key} must be a finite number")
        return
    suffix = f" {unit}" if unit else ""
    shown = coerce_number(value)
    if minimum is not None and value < minimum:
        result.warn(key, f"{key} {shown} is below minimum {minimum}{suffix}; it will be clamped")
    elif maximum is not None and value > maximum:
        result.warn(key, f"{key} {shown} exceeds maximum {maximum}{suffix}; it will be clamped")


def check_metadata(
    data: Mapping[str, Any],
    result: ValidationResult,
    extra_checks: Iterable[Any] = (),
) -> None:
    value = lookup(data, "metadata")
    if value is MISSING or value is None:
        return
    if not isinstance(value, Mapping):
        result.error("metadata", "metadata must be an object")
        return

    check_enum(value, "anchorType", ANCHOR_TYPES, result, path="metadata.anchorType")
    anchor_type = lookup(value, "anchorType")

    for key in ("worldPosition", "worldRotation"):
        vector = lookup(value, key)
        if vector is MISSING or vector is None:
            continue
        if not is_vector3(vector):
            result.error(f"metadata.{key}", f"metadata.{key} must be an array of 3 numbers [x, y, z]")
        elif key == "worldPosition" and anchor_type != "world-space":
            result.warn(
                "metadata.worldPosition",
                "worldPosition is ignored unless anchorType is 'world-space'",
            )

    check_enum(value, "autoAnchor", AUTO_ANCHORS, result, path="metadata.autoAnchor")

    distance = lookup(value, "autoAnchorDistance")
    if distance is not MISSING and distance is not None:
        if not is_number(distance) or distance <= 0:
            result.error(
                "metadata.autoAnchorDistance",
                "metadata.autoAnchorDistance must be a positive number (meters)",
            )

    for extra in extra_checks:
        extra(value, result)


# === Sanitizing helpers ===

def clean_string(value: Any, max_length: Optional[int], fallback: Optional[str]) -> Optional[str]:
    """Strip, truncate, and fall back when nothing usable is left."""
    if isinstance(value, bool) or value is MISSING or value is None:
        return fallback
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return fallback
    cleaned = value.strip()
    if max_length is not None and len(cleaned) > max_length:
        cleaned = cleaned[:max_length].rstrip()
    return cleaned or fallback


def clean_enum(value: Any, allowed: Sequence[str], default: Any) -> Any:
    if isinstance(value, str) and value in allowed:
        return value
    if isinstance(value, str) and value.strip().lower() in allowed:
        return value.strip().lower()
    return default


def clean_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    return default


def coerce_number(value: Any) -> Optional[float]:
    """Numbers and numeric strings become numbers; NaN, inf and junk become None."""
    if isinstance(value, bool) or value is MISSING or value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if isinstance(value, int):
        try:
            value = float(value)
        except OverflowError:
            # Beyond float range: saturate so clamping still lands on the bound
            value = math.copysign(sys.float_info.max, value)
    if not isinstance(value, float) or not math.isfinite(value):
        return None
    return value


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def clean_number(value: Any, minimum: float, maximum: float, default: Optional[float]) -> Optional[float]:
    number = coerce_number(value)
    if number is None:
        return default
    return clamp(number, minimum, maximum)


def clean_metadata(value: Any, extra_fields: Iterable[Any] = ()) -> Optional[Dict[str, Any]]:
    """Keep the well-formed metadata entries, drop the rest. Empty result -> None."""
    if not isinstance(value, Mapping):
        return None
    cleaned: Dict[str, Any] = {}

    anchor_type = lookup(value, "anchorType")
    if anchor_type in ANCHOR_TYPES:
        cleaned["anchorType"] = anchor_type
    for key in ("worldPosition", "worldRotation"):
        vector = lookup(value, key)
        if is_vector3(vector):
            cleaned[key] = [coerce_number(v) for v in vector]
    auto_anchor = lookup(value, "autoAnchor")
    if auto_anchor in AUTO_ANCHORS:
        cleaned["autoAnchor"] = auto_anchor
    distance = coerce_number(lookup(value, "autoAnchorDistance"))
    if distance is not None and distance > 0:
        cleaned["autoAnchorDistance"] = distance

    for extra in extra_fields:
        extra(value, cleaned)

    return cleaned or None


# === Validator base ===

class ComponentValidator(ABC, Generic[T]):
    """Validator + sanitizer pair for one component family."""

    family: ClassVar[ComponentFamily]
    model: ClassVar[Type[CosmoModel]]
    id_prefix: ClassVar[str]

    def validate(self, candidate: Any) -> ValidationResult:
        """Check a candidate. Pure: never raises, never mutates."""
        result = ValidationResult()
        data = as_mapping(candidate)
        if data is None:
            result.error("_root", f"{self.family.value} must be a JSON object, got {type(candidate).__name__}")
            return result
        check_string(data, "id", result, required=True)
        self._validate_fields(data, result)
        return result

    def sanitize(self, candidate: Any) -> T:
        """Best-effort complete instance. Never raises for bad data."""
        data = as_mapping(candidate)
        if data is None:
            logger.debug(f"Sanitizing non-object {self.family.value} candidate ({type(candidate).__name__})")
            data = {}
        fields = self._sanitize_fields(data)
        fields["id"] = clean_string(lookup(data, "id"), None, None) or timestamp_id(self.id_prefix)
        return self.model.model_validate(fields)

    def is_renderable(self, candidate: Any) -> bool:
        return self.validate(candidate).valid

    @abstractmethod
    def _validate_fields(self, data: Dict[str, Any], result: ValidationResult) -> None:
        ...

    @abstractmethod
    def _sanitize_fields(self, data: Dict[str, Any]) -> Dict[str, Any]:
        ...
