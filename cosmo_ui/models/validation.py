"""
Validation and correction result types.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from cosmo_ui.models.base import ComponentFamily
from cosmo_ui.models.context_badge import ContextBadge
from cosmo_ui.models.hud_card import HUDCard
from cosmo_ui.models.progress_ring import ProgressRing
from cosmo_ui.models.status_indicator import StatusIndicator


ComponentInstance = Union[HUDCard, ContextBadge, ProgressRing, StatusIndicator]

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class ValidationIssue:
    """One problem found on one field. Errors block acceptance, warnings do not."""
    field: str
    message: str
    severity: str = ERROR

    def to_dict(self) -> Dict[str, str]:
        return {'field': self.field, 'message': self.message}

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass
class ValidationResult:
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def error(self, field_name: str, message: str) -> None:
        self.errors.append(ValidationIssue(field_name, message, ERROR))

    def warn(self, field_name: str, message: str) -> None:
        self.warnings.append(ValidationIssue(field_name, message, WARNING))

    def fields_with_errors(self) -> List[str]:
        return [issue.field for issue in self.errors]


@dataclass
class CorrectionResult:
    """Outcome of one sanitize -> validate pass over a candidate.

    `sanitized` is always present and renderable, even when the candidate was
    rejected; `instance` is only set when the sanitized output validated.
    """
    family: ComponentFamily
    is_valid: bool
    sanitized: ComponentInstance
    instance: Optional[ComponentInstance] = None
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    correction_prompt: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'family': self.family.value,
            'isValid': self.is_valid,
            'sanitized': self.sanitized.to_dict(),
        }
        if self.instance is not None:
            data['instance'] = self.instance.to_dict()
        if self.errors:
            data['errors'] = [e.to_dict() for e in self.errors]
        if self.warnings:
            data['warnings'] = [w.to_dict() for w in self.warnings]
        if self.correction_prompt is not None:
            data['correctionPrompt'] = self.correction_prompt
        return data
