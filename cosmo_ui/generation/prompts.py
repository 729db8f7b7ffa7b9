"""
Prompt text for component generation and correction.

Correction prompts are deterministic: the same candidate and errors always
produce the same text, so a prompt can be logged, compared and fed back to
the model unmodified.
"""

import json
from typing import Any, Dict, Iterable, Mapping, Optional

from cosmo_ui.models.base import ComponentFamily
from cosmo_ui.models.validation import ValidationIssue


SYSTEM_PROMPTS: Dict[ComponentFamily, str] = {
    ComponentFamily.HUD_CARD: (
        "You are an AI that generates Cosmo UI HUDCard components. "
        "HUDCards are concise, glanceable, non-invasive notification cards. "
        "Respond with a single JSON object with the fields id, title, content and optionally "
        "variant, priority, position, icon, autoHideAfterSeconds, dismissible, actions. "
        "Output valid JSON only (no markdown, no explanation)."
    ),
    ComponentFamily.CONTEXT_BADGE: (
        "You are an AI that generates Cosmo UI ContextBadge components. "
        "ContextBadges are tiny status pills with a very short label. "
        "Respond with a single JSON object with the fields id, label and optionally "
        "variant, icon, position, contextualColor, autoDismissMs, dismissible, pulse. "
        "Output valid JSON only (no markdown, no explanation)."
    ),
    ComponentFamily.PROGRESS_RING: (
        "You are an AI that generates Cosmo UI ProgressRing components. "
        "ProgressRings show a completion percentage as a circular ring. "
        "Respond with a single JSON object with the fields id, value and optionally "
        "size, thickness, variant, animated, showValue, label, position. "
        "Output valid JSON only (no markdown, no explanation)."
    ),
    ComponentFamily.STATUS_INDICATOR: (
        "You are an AI that generates Cosmo UI StatusIndicator components. "
        "StatusIndicators are minimal dots showing a system or connection state. "
        "Respond with a single JSON object with the fields id, state and optionally "
        "label, size, pulse, glow, position. "
        "Output valid JSON only (no markdown, no explanation)."
    ),
}

RULES_REMINDERS: Dict[ComponentFamily, str] = {
    ComponentFamily.HUD_CARD: "\n".join([
        "- title: max 60 characters",
        "- content: max 200 characters",
        "- actions: max 2, label max 20 characters",
        "- autoHideAfterSeconds: 3-30 seconds (or null)",
        "- variant: neutral, info, success, warning, error",
        "- priority: 1-5; priority >= 4 means no auto-hide and dismissible: false",
    ]),
    ComponentFamily.CONTEXT_BADGE: "\n".join([
        "- label: max 30 characters",
        "- autoDismissMs: 1000-30000 (milliseconds) or null",
        "- contextualColor: must be hex format like #ff5500",
        "- variant: neutral, info, success, warning, error",
    ]),
    ComponentFamily.PROGRESS_RING: "\n".join([
        "- value: 0-100 (required, percentage)",
        "- size: 24-200 pixels (default 48)",
        "- thickness: 2-20 pixels (default 6)",
        "- variant: neutral, info, success, warning, error",
        "- label: max 30 characters",
        "- position: 9-position grid (top-left to bottom-right)",
    ]),
    ComponentFamily.STATUS_INDICATOR: "\n".join([
        "- state: idle, active, loading, success, warning, error (required)",
        "- size: 8-32 pixels (default 12)",
        "- label: max 20 characters",
        "- pulse: boolean (default true for loading state)",
        "- glow: boolean (default false)",
        "- position: 9-position grid (top-left to bottom-right)",
    ]),
}

_CANDIDATE_NOUNS: Dict[ComponentFamily, str] = {
    ComponentFamily.HUD_CARD: "CARD",
    ComponentFamily.CONTEXT_BADGE: "BADGE",
    ComponentFamily.PROGRESS_RING: "RING",
    ComponentFamily.STATUS_INDICATOR: "INDICATOR",
}


def get_system_prompt(family: ComponentFamily) -> str:
    return SYSTEM_PROMPTS[family]


def dump_candidate(candidate: Any) -> str:
    """Stable, readable JSON rendering of whatever the model produced."""
    return json.dumps(candidate, indent=2, ensure_ascii=False, default=str)


def build_correction_prompt(
    family: ComponentFamily,
    candidate: Any,
    errors: Iterable[ValidationIssue],
) -> str:
    """Instruction asking the model to fix the listed violations."""
    error_lines = "\n".join(f"- {e.field}: {e.message}" for e in errors)
    return (
        f"The following {family.value} has validation errors. Please fix them:\n"
        f"\n"
        f"INVALID {_CANDIDATE_NOUNS[family]}:\n"
        f"{dump_candidate(candidate)}\n"
        f"\n"
        f"ERRORS:\n"
        f"{error_lines}\n"
        f"\n"
        f"RULES REMINDER:\n"
        f"{RULES_REMINDERS[family]}\n"
        f"\n"
        f"Please provide a corrected {family.value} JSON. Output corrected JSON only."
    )


def build_parse_failure_prompt(family: ComponentFamily, raw_text: Optional[str]) -> str:
    """Instruction used when the previous response held no JSON object at all."""
    excerpt = (raw_text or "").strip()
    if len(excerpt) > 500:
        excerpt = excerpt[:500] + "..."
    return (
        f"Your previous response did not contain a valid {family.value} JSON object.\n"
        f"\n"
        f"PREVIOUS RESPONSE:\n"
        f"{excerpt or '(empty)'}\n"
        f"\n"
        f"RULES REMINDER:\n"
        f"{RULES_REMINDERS[family]}\n"
        f"\n"
        f"Respond with exactly one {family.value} JSON object. Output valid JSON only (no markdown, no explanation)."
    )


def build_generation_prompt(
    family: ComponentFamily,
    intent: str,
    constraints: Optional[Mapping[str, Any]] = None,
) -> str:
    """Minimal intent prompt, with optional hard constraints (variant, priority, position...)."""
    lines = [f'Generate a {family.value} for: "{intent}"']
    if constraints:
        lines.append("")
        lines.append("Additional constraints:")
        for key, value in constraints.items():
            if value is None:
                continue
            lines.append(f"- {key} must be: {json.dumps(value, default=str)}")
    lines.append("")
    lines.append("Output valid JSON only:")
    return "\n".join(lines)
