"""
Cosmo UI correctness and lifecycle engine.

Turns untrusted LLM output into bounded, live, time-limited UI components:
validators and sanitizers per component family, a corrector and retry loop
for generation, and capacity-bounded registries with eviction and expiry.
"""

from cosmo_ui.generation import ComponentCorrector, ComponentGenerator, GenerationResult, validate_component
from cosmo_ui.models import (
    ComponentFamily,
    ContextBadge,
    CorrectionResult,
    HUDCard,
    ProgressRing,
    StatusIndicator,
    ValidationResult,
)
from cosmo_ui.registry import ComponentStore
from cosmo_ui.validation import get_validator

__version__ = "0.1.0"

__all__ = [
    "ComponentCorrector",
    "ComponentFamily",
    "ComponentGenerator",
    "ComponentStore",
    "ContextBadge",
    "CorrectionResult",
    "GenerationResult",
    "HUDCard",
    "ProgressRing",
    "StatusIndicator",
    "ValidationResult",
    "get_validator",
    "validate_component",
]
