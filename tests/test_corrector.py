"""Unit tests for the corrector and the correction prompt text."""

from __future__ import annotations

import json
from typing import Any, Dict

import pytest

from cosmo_ui.generation import (
    ComponentCorrector,
    build_correction_prompt,
    build_generation_prompt,
    build_parse_failure_prompt,
    format_validation_errors,
    validate_component,
)
from cosmo_ui.models import ComponentFamily, CorrectionResult, ValidationIssue, ValidationResult
from cosmo_ui.validation import HUDCardValidator


class StrictTitleValidator(HUDCardValidator):
    """A rule the sanitizer cannot fix: titles must not be the placeholder."""

    def _validate_fields(self, data: Dict[str, Any], result: ValidationResult) -> None:
        super()._validate_fields(data, result)
        if data.get("title") == "Untitled":
            result.error("title", "title is required")


class TestValidateAndCorrect:
    def test_valid_candidate(self, hud_card_data: Dict[str, Any]) -> None:
        result = ComponentCorrector("HUDCard").validate_and_correct(hud_card_data)

        assert result.is_valid
        assert result.instance is result.sanitized
        assert result.instance.id == "card-welcome"
        assert result.errors == []
        assert result.correction_prompt is None

    def test_sanitizer_fixes_make_candidate_valid(self) -> None:
        result = validate_component(ComponentFamily.HUD_CARD, {"priority": 5, "content": "x" * 500})

        assert result.is_valid
        assert result.sanitized.dismissible is False
        assert len(result.sanitized.content) == 200

    def test_out_of_range_values_are_clamped(self) -> None:
        result = validate_component("ProgressRing", {"id": "r", "value": 150})
        assert result.is_valid
        assert result.instance.value == 100

    def test_non_object_candidate_is_structural_error(self) -> None:
        result = ComponentCorrector("StatusIndicator").validate_and_correct(["idle"])

        assert not result.is_valid
        assert result.instance is None
        assert [e.field for e in result.errors] == ["_root"]
        assert result.sanitized.state == "idle"
        assert "INVALID INDICATOR" in result.correction_prompt

    def test_unfixable_rule_produces_correction_prompt(self) -> None:
        corrector = ComponentCorrector("HUDCard", validator=StrictTitleValidator())
        candidate = {"id": "c", "content": "Body"}

        result = corrector.validate_and_correct(candidate)

        assert not result.is_valid
        assert result.instance is None
        assert result.sanitized.title == "Untitled"
        assert [str(e) for e in result.errors] == ["title: title is required"]
        assert json.dumps(candidate, indent=2) in result.correction_prompt
        assert "- title: title is required" in result.correction_prompt

    def test_validate_and_correct_is_stateless(self, hud_card_data: Dict[str, Any]) -> None:
        corrector = ComponentCorrector("HUDCard", validator=StrictTitleValidator())
        first = corrector.validate_and_correct({"content": "x"})
        second = corrector.validate_and_correct({"content": "x"})
        third = corrector.validate_and_correct(hud_card_data)

        assert first.correction_prompt == second.correction_prompt
        assert third.is_valid

    def test_warnings_are_kept(self) -> None:
        result = validate_component(
            "ContextBadge",
            {"id": "b", "label": "x", "metadata": {"anchorType": "screen-space", "worldPosition": [1, 2, 3]}},
        )
        assert result.is_valid
        assert [w.field for w in result.warnings] == ["metadata.worldPosition"]

    def test_batch(self, context_badge_data: Dict[str, Any]) -> None:
        results = ComponentCorrector("ContextBadge").validate_batch([context_badge_data, None, {}])
        assert [r.is_valid for r in results] == [True, False, True]

    def test_to_dict_uses_wire_keys(self, progress_ring_data: Dict[str, Any]) -> None:
        data = validate_component("ProgressRing", progress_ring_data).to_dict()
        assert data["isValid"] is True
        assert data["family"] == "ProgressRing"
        assert data["instance"]["showValue"] is True
        assert "correctionPrompt" not in data


class TestCorrectorHelpers:
    @pytest.fixture
    def invalid(self) -> CorrectionResult:
        corrector = ComponentCorrector("HUDCard")
        sanitized = corrector.validator.sanitize({"id": "c"})
        return CorrectionResult(
            family=ComponentFamily.HUD_CARD,
            is_valid=False,
            sanitized=sanitized,
            errors=[
                ValidationIssue("title", "title exceeds max length of 60 characters (got 80)"),
                ValidationIssue("actions", "Too many actions: max 2 allowed (got 3)"),
                ValidationIssue("actions[1].label", "actions[1].label exceeds max length of 20 characters (got 30)"),
                ValidationIssue("actions[2].label", "actions[2].label exceeds max length of 20 characters (got 25)"),
            ],
            warnings=[ValidationIssue("autoHideAfterSeconds", "autoHideAfterSeconds 99 exceeds maximum 30", "warning")],
            correction_prompt="fix it",
        )

    def test_error_summary(self, invalid: CorrectionResult) -> None:
        corrector = ComponentCorrector("HUDCard")
        assert corrector.get_error_summary(invalid) == "4 errors, 1 warning"

    def test_error_summary_valid(self, hud_card_data: Dict[str, Any]) -> None:
        corrector = ComponentCorrector("HUDCard")
        assert corrector.get_error_summary(corrector.validate_and_correct(hud_card_data)) == "Valid"

    def test_hints_are_deduplicated_in_order(self, invalid: CorrectionResult) -> None:
        hints = ComponentCorrector("HUDCard").generate_hints(invalid)
        assert hints == [
            "Shorten the title to 60 characters or less",
            "Remove extra actions (max 2 allowed)",
            "Shorten action labels to 20 characters or less",
            "Set auto-hide between 3-30 seconds, or null",
        ]

    @pytest.mark.parametrize(
        "family, field, expected",
        [
            ("ContextBadge", "contextualColor", "Use hex color format like #ff5500"),
            ("ContextBadge", "autoDismissMs", "Set autoDismissMs between 1000-30000ms, or null"),
            ("ProgressRing", "value", "Value must be a number between 0 and 100"),
            ("ProgressRing", "thickness", "Thickness should be between 2-20 pixels"),
            ("StatusIndicator", "state", "State must be one of: idle, active, loading, success, warning, error"),
            ("StatusIndicator", "size", "Size should be between 8-32 pixels"),
        ],
    )
    def test_family_hints(self, family: str, field: str, expected: str) -> None:
        corrector = ComponentCorrector(family)
        result = CorrectionResult(
            family=corrector.family,
            is_valid=False,
            sanitized=corrector.validator.sanitize({}),
            errors=[ValidationIssue(field, "bad")],
        )
        assert corrector.generate_hints(result) == [expected]

    def test_safe_to_render(self, invalid: CorrectionResult) -> None:
        corrector = ComponentCorrector("HUDCard")
        assert not corrector.is_safe_to_render(invalid)

        invalid.errors = []
        assert corrector.is_safe_to_render(invalid)

    def test_format_validation_errors(self, invalid: CorrectionResult) -> None:
        text = format_validation_errors(invalid)
        lines = text.splitlines()
        assert lines[0] == "Errors:"
        assert lines[1] == "  1. [title] title exceeds max length of 60 characters (got 80)"
        assert "" in lines
        assert lines[-2] == "Warnings:"
        assert lines[-1].startswith("  1. [autoHideAfterSeconds]")

    def test_format_validation_errors_valid(self, hud_card_data: Dict[str, Any]) -> None:
        assert format_validation_errors(validate_component("HUDCard", hud_card_data)) == "No errors"


class TestPrompts:
    def test_correction_prompt_layout(self) -> None:
        candidate = {"id": "r", "value": "lots"}
        prompt = build_correction_prompt(
            ComponentFamily.PROGRESS_RING,
            candidate,
            [ValidationIssue("value", "value must be a finite number")],
        )

        assert prompt.startswith("The following ProgressRing has validation errors.")
        assert "INVALID RING:\n" + json.dumps(candidate, indent=2) in prompt
        assert "ERRORS:\n- value: value must be a finite number" in prompt
        assert "RULES REMINDER:\n- value: 0-100 (required, percentage)" in prompt
        assert prompt.rstrip().endswith("Output corrected JSON only.")

    def test_correction_prompt_is_deterministic(self) -> None:
        errors = [ValidationIssue("state", "state is required")]
        a = build_correction_prompt(ComponentFamily.STATUS_INDICATOR, {"id": "i"}, errors)
        b = build_correction_prompt(ComponentFamily.STATUS_INDICATOR, {"id": "i"}, errors)
        assert a == b

    def test_hud_card_reminder_mentions_priority_rule(self) -> None:
        prompt = build_correction_prompt(ComponentFamily.HUD_CARD, {}, [ValidationIssue("title", "title is required")])
        assert "priority >= 4 means no auto-hide and dismissible: false" in prompt

    def test_generation_prompt_with_constraints(self) -> None:
        prompt = build_generation_prompt(
            ComponentFamily.HUD_CARD,
            "battery low",
            {"variant": "warning", "priority": 4, "position": None},
        )
        assert prompt.startswith('Generate a HUDCard for: "battery low"')
        assert '- variant must be: "warning"' in prompt
        assert "- priority must be: 4" in prompt
        assert "position" not in prompt
        assert prompt.endswith("Output valid JSON only:")

    def test_parse_failure_prompt_truncates_long_responses(self) -> None:
        prompt = build_parse_failure_prompt(ComponentFamily.CONTEXT_BADGE, "nonsense " * 200)
        assert "did not contain a valid ContextBadge JSON object" in prompt
        assert "..." in prompt
        assert "(empty)" in build_parse_failure_prompt(ComponentFamily.CONTEXT_BADGE, None)
