"""
Pre-save validation

Checks an assignment plan or a batch of arrow values before it is stored
and reports the findings instead of raising.
"""

from typing import List, Iterable, Optional, Sequence
from collections import Counter
from datetime import datetime
from loguru import logger

from tournament.assignments import AssignmentPlan, check_club_conflicts
from tournament.constants import ARCHERS_PER_TARGET, SCORE_MIN, SCORE_X
from tournament.models import Archer
from tournament.scoring import is_valid_score

from .schemas import ValidationResult, ValidationIssue, ValidationSeverity


class AssignmentValidator:
    """
    Assignment plan validation

    - target capacity (4 archers)
    - duplicate positions on a target
    - archers placed twice
    - club mates sharing a target (warning only)
    """

    def validate(self, plan: AssignmentPlan, archers: Optional[Iterable[Archer]] = None) -> ValidationResult:
        errors = []
        warnings = []

        by_target = plan.by_target()
        for target_number, placed in by_target.items():
            if len(placed) > ARCHERS_PER_TARGET:
                errors.append(ValidationIssue(
                    error_type="TARGET_OVER_CAPACITY",
                    severity=ValidationSeverity.CRITICAL,
                    message=f"Target {target_number} holds {len(placed)} archers",
                    field="target_number",
                    value=target_number,
                    suggestion=f"At most {ARCHERS_PER_TARGET} archers per target"
                ))

            positions = Counter(a.position for a in placed)
            for position, count in positions.items():
                if count > 1:
                    errors.append(ValidationIssue(
                        error_type="DUPLICATE_POSITION",
                        severity=ValidationSeverity.CRITICAL,
                        message=f"Position {position} used {count} times on target {target_number}",
                        field="position",
                        value=f"{target_number}{position}",
                    ))

        placements = Counter(a.archer_id for a in plan.assignments)
        for archer_id, count in placements.items():
            if count > 1:
                errors.append(ValidationIssue(
                    error_type="DUPLICATE_ARCHER",
                    severity=ValidationSeverity.HIGH,
                    message=f"Archer {archer_id} assigned {count} times",
                    field="archer_id",
                    value=archer_id,
                ))

        if archers is not None:
            for target_number in check_club_conflicts(plan.assignments, archers):
                warnings.append(ValidationIssue(
                    error_type="CLUB_CONFLICT",
                    severity=ValidationSeverity.MEDIUM,
                    message=f"Club mates share target {target_number}",
                    field="target_number",
                    value=target_number,
                    suggestion="Swap archers between targets of the same distance"
                ))

        total = len(by_target)
        failed = len({e.value for e in errors if e.field == "target_number"})
        if errors:
            logger.warning(f"Assignment plan rejected with {len(errors)} errors")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings,
            pass_rate=(total - failed) / total if total > 0 else 1.0,
            validated_at=datetime.now()
        )


class ScoreValidator:
    """Arrow value validation (0-10, 11 = X, None = not shot)"""

    def validate(self, values: Sequence[Optional[int]]) -> ValidationResult:
        errors = []

        for index, value in enumerate(values):
            if value is None:
                continue
            if not is_valid_score(value):
                errors.append(ValidationIssue(
                    error_type="SCORE_OUT_OF_RANGE",
                    severity=ValidationSeverity.CRITICAL,
                    message=f"Arrow {index + 1}: {value!r} is not between {SCORE_MIN} and {SCORE_X}",
                    field=f"arrows.{index}",
                    value=value,
                    suggestion="Use 0-10, or 11 for X"
                ))

        total = len(values)
        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            pass_rate=(total - len(errors)) / total if total > 0 else 1.0,
            validated_at=datetime.now()
        )
