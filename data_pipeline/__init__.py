"""
Storage boundary adapters

- Row normalization (imported sheets, joined relations)
- Pre-save validation reports for assignment plans and arrow values
"""

from .schemas import (
    ValidationResult,
    ValidationIssue,
    ValidationSeverity,
)
from .normalizer import (
    normalize_gender,
    normalize_category,
    normalize_relation,
    normalize_archer_row,
    normalize_assignment_rows,
)
from .validators import AssignmentValidator, ScoreValidator

__all__ = [
    # Schemas
    "ValidationResult",
    "ValidationIssue",
    "ValidationSeverity",
    # Normalizer
    "normalize_gender",
    "normalize_category",
    "normalize_relation",
    "normalize_archer_row",
    "normalize_assignment_rows",
    # Validators
    "AssignmentValidator",
    "ScoreValidator",
]
