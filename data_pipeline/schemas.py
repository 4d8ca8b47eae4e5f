"""
Validation report schemas

Pydantic models for the issues the validators report before a plan or a
score batch is stored.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Any
from datetime import datetime
from enum import Enum


class ValidationSeverity(str, Enum):
    """Issue severity"""
    CRITICAL = "critical"   # cannot be saved
    HIGH = "high"           # cannot be saved, needs manual review
    MEDIUM = "medium"       # saved with a warning
    LOW = "low"             # logged only
    INFO = "info"


class ValidationIssue(BaseModel):
    """Single validation finding"""
    error_type: str = Field(..., description="Issue type")
    severity: ValidationSeverity = Field(..., description="Severity")
    message: str = Field(..., description="Message")
    field: Optional[str] = Field(None, description="Related field")
    value: Optional[Any] = Field(None, description="Offending value")
    suggestion: Optional[str] = Field(None, description="How to fix it")


class ValidationResult(BaseModel):
    """Validation outcome"""
    is_valid: bool = Field(default=True, description="Final validity")
    errors: List[ValidationIssue] = Field(default_factory=list)
    warnings: List[ValidationIssue] = Field(default_factory=list)
    pass_rate: float = Field(default=1.0, description="Share of items that passed (0-1)")
    validated_at: datetime = Field(default_factory=datetime.now)

    @property
    def has_critical_errors(self) -> bool:
        return any(e.severity in [ValidationSeverity.CRITICAL, ValidationSeverity.HIGH] for e in self.errors)

    @property
    def can_save(self) -> bool:
        """Whether the data may be stored"""
        return not self.has_critical_errors
