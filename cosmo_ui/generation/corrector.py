"""
Correction step for AI-generated components.

A corrector runs one sanitize -> validate pass over a candidate and, when the
sanitized output still fails validation, builds the correction prompt that
the next generation attempt should receive. It holds no state between calls.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional

from cosmo_ui.models.base import ComponentFamily
from cosmo_ui.models.validation import CorrectionResult, ValidationIssue
from cosmo_ui.generation.prompts import build_correction_prompt
from cosmo_ui.setup_logging import get_logger
from cosmo_ui.validation.base import ComponentValidator, as_mapping
from cosmo_ui.validation.registry import get_validator, resolve_family

logger = get_logger(__name__)


def _hud_card_hints(issue: ValidationIssue) -> List[str]:
    hints = []
    if issue.field == "title" and "max length" in issue.message:
        hints.append("Shorten the title to 60 characters or less")
    if issue.field == "content" and "max length" in issue.message:
        hints.append("Reduce content to 200 characters or less")
    if issue.field.startswith("actions"):
        if issue.field == "actions" and "max" in issue.message:
            hints.append("Remove extra actions (max 2 allowed)")
        if issue.field.endswith(".label"):
            hints.append("Shorten action labels to 20 characters or less")
    if issue.field == "autoHideAfterSeconds":
        hints.append("Set auto-hide between 3-30 seconds, or null")
    if issue.field == "dismissible" and "priority" in issue.message:
        hints.append("Critical cards (priority 4-5) must set dismissible to false")
    return hints


def _context_badge_hints(issue: ValidationIssue) -> List[str]:
    hints = []
    if issue.field == "label" and "max length" in issue.message:
        hints.append("Shorten the label to 30 characters or less")
    if issue.field == "contextualColor":
        hints.append("Use hex color format like #ff5500")
    if issue.field == "autoDismissMs":
        hints.append("Set autoDismissMs between 1000-30000ms, or null")
    return hints


def _progress_ring_hints(issue: ValidationIssue) -> List[str]:
    hints = []
    if issue.field == "value":
        hints.append("Value must be a number between 0 and 100")
    if issue.field == "size":
        hints.append("Size should be between 24-200 pixels")
    if issue.field == "thickness":
        hints.append("Thickness should be between 2-20 pixels")
    if issue.field == "label" and "max length" in issue.message:
        hints.append("Shorten the label to 30 characters or less")
    return hints


def _status_indicator_hints(issue: ValidationIssue) -> List[str]:
    hints = []
    if issue.field == "state":
        hints.append("State must be one of: idle, active, loading, success, warning, error")
    if issue.field == "size":
        hints.append("Size should be between 8-32 pixels")
    if issue.field == "label" and "max length" in issue.message:
        hints.append("Shorten the label to 20 characters or less")
    return hints


HINT_RULES: Dict[ComponentFamily, Callable[[ValidationIssue], List[str]]] = {
    ComponentFamily.HUD_CARD: _hud_card_hints,
    ComponentFamily.CONTEXT_BADGE: _context_badge_hints,
    ComponentFamily.PROGRESS_RING: _progress_ring_hints,
    ComponentFamily.STATUS_INDICATOR: _status_indicator_hints,
}


class ComponentCorrector:
    """Validate-and-correct for one component family."""

    def __init__(self, family: Any, validator: Optional[ComponentValidator] = None):
        self.family = resolve_family(family)
        self.validator = validator or get_validator(self.family)

    def validate_and_correct(self, candidate: Any) -> CorrectionResult:
        # Sanitize first so defaults are applied, then judge the sanitized output
        sanitized = self.validator.sanitize(candidate)
        validation = self.validator.validate(sanitized)

        errors = list(validation.errors)
        if as_mapping(candidate) is None:
            # Wrong JSON shape: the fallback is renderable but nothing was verified
            errors = self.validator.validate(candidate).errors + errors

        if not errors:
            return CorrectionResult(
                family=self.family,
                is_valid=True,
                sanitized=sanitized,
                instance=sanitized,
                warnings=list(validation.warnings),
            )

        logger.debug(f"{self.family.value} candidate rejected with {len(errors)} error(s)")
        return CorrectionResult(
            family=self.family,
            is_valid=False,
            sanitized=sanitized,
            errors=errors,
            warnings=list(validation.warnings),
            correction_prompt=build_correction_prompt(self.family, candidate, errors),
        )

    def validate_batch(self, candidates: Iterable[Any]) -> List[CorrectionResult]:
        return [self.validate_and_correct(candidate) for candidate in candidates]

    def is_safe_to_render(self, result: CorrectionResult) -> bool:
        """Valid, or carrying only warnings with a sanitized fallback."""
        return result.is_valid or (not result.errors and result.sanitized is not None)

    def get_error_summary(self, result: CorrectionResult) -> str:
        if result.is_valid:
            return "Valid"

        parts = []
        error_count = len(result.errors)
        warning_count = len(result.warnings)
        if error_count:
            parts.append(f"{error_count} error{'s' if error_count > 1 else ''}")
        if warning_count:
            parts.append(f"{warning_count} warning{'s' if warning_count > 1 else ''}")
        return ", ".join(parts)

    def generate_hints(self, result: CorrectionResult) -> List[str]:
        """Short fix-it hints for common mistakes, de-duplicated in order."""
        rule = HINT_RULES[self.family]
        hints: List[str] = []
        for issue in list(result.errors) + list(result.warnings):
            for hint in rule(issue):
                if hint not in hints:
                    hints.append(hint)
        return hints


def validate_component(family: Any, candidate: Any) -> CorrectionResult:
    """One-shot helper: validate and correct a single candidate."""
    return ComponentCorrector(family).validate_and_correct(candidate)


def format_validation_errors(result: CorrectionResult) -> str:
    if result.is_valid:
        return "No errors"

    lines: List[str] = []
    if result.errors:
        lines.append("Errors:")
        for idx, err in enumerate(result.errors, start=1):
            lines.append(f"  {idx}. [{err.field}] {err.message}")

    if result.warnings:
        if lines:
            lines.append("")
        lines.append("Warnings:")
        for idx, warn in enumerate(result.warnings, start=1):
            lines.append(f"  {idx}. [{warn.field}] {warn.message}")

    return "\n".join(lines)
