"""
Archery tournament competition engine

Target assignment, score utilities, elimination brackets and the set
system, as pure functions over record snapshots.
"""
from .models import (
    Archer,
    Tournament,
    QualificationScore,
    MatchSet,
    AgeCategory,
    Gender,
    TournamentType,
    TournamentStatus,
    TargetStatus,
    MatchStatus,
)
from .categories import classify_archer, get_distance, get_category_key, get_group_label, parse_category_key
from .assignments import (
    AssignmentResult,
    AssignmentPlan,
    generate_assignments,
    check_club_conflicts,
    derive_target_status,
)
from .scoring import (
    ScoreSummary,
    calculate_total,
    count_xs,
    count_tens,
    is_valid_score,
    summarize_scores,
)
from .brackets import (
    RankedArcher,
    BracketMatch,
    GeneratedBracket,
    generate_bracket,
    process_first_round_byes,
    build_bracket,
    get_round_name,
)
from .matches import (
    SetResult,
    MatchOutcome,
    score_set,
    record_set,
    resolve_shootoff,
    advance_winner,
    apply_match_result,
)
from .exceptions import TournamentEngineError

__all__ = [
    # Records
    "Archer",
    "Tournament",
    "QualificationScore",
    "MatchSet",
    "AgeCategory",
    "Gender",
    "TournamentType",
    "TournamentStatus",
    "TargetStatus",
    "MatchStatus",
    # Categories
    "classify_archer",
    "get_distance",
    "get_category_key",
    "parse_category_key",
    "get_group_label",
    # Assignments
    "AssignmentResult",
    "AssignmentPlan",
    "generate_assignments",
    "check_club_conflicts",
    "derive_target_status",
    # Scoring
    "ScoreSummary",
    "calculate_total",
    "count_xs",
    "count_tens",
    "is_valid_score",
    "summarize_scores",
    # Brackets
    "RankedArcher",
    "BracketMatch",
    "GeneratedBracket",
    "generate_bracket",
    "process_first_round_byes",
    "build_bracket",
    "get_round_name",
    # Matches
    "SetResult",
    "MatchOutcome",
    "score_set",
    "record_set",
    "resolve_shootoff",
    "advance_winner",
    "apply_match_result",
    # Errors
    "TournamentEngineError",
]
