"""
Score utilities

Every total, X count and ten count in the engine goes through these
functions:
- X (11) counts as 10 toward totals but is tracked separately
- None means "not shot yet": contributes 0 and is never counted
- Valid raw values are 0-11
"""
from typing import Dict, Iterable, List, Optional, Tuple
from dataclasses import dataclass, asdict
from collections import defaultdict

from .constants import (
    MAX_SETS,
    POINTS_FOR_SET_LOSS,
    POINTS_FOR_SET_TIE,
    POINTS_FOR_SET_WIN,
    POINTS_TO_WIN,
    SCORE_LABELS,
    SCORE_MAX,
    SCORE_MIN,
    SCORE_X,
)
from .exceptions import InvalidScoreError
from .models import QualificationScore

Arrow = Optional[int]


@dataclass
class ScoreSummary:
    """Aggregated arrows"""
    total: int = 0
    ten_count: int = 0   # includes X
    x_count: int = 0
    arrows: int = 0      # arrows actually shot

    def to_dict(self) -> Dict:
        return asdict(self)


def arrow_value(score: Arrow) -> int:
    """Points an arrow contributes to a total"""
    if score is None:
        return 0
    return SCORE_MAX if score == SCORE_X else score


def calculate_total(scores: Iterable[Arrow]) -> int:
    return sum(arrow_value(s) for s in scores)


def count_xs(scores: Iterable[Arrow]) -> int:
    return sum(1 for s in scores if s == SCORE_X)


def count_tens(scores: Iterable[Arrow]) -> int:
    """Tens including Xs"""
    return sum(1 for s in scores if s in (SCORE_MAX, SCORE_X))


def is_valid_score(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return SCORE_MIN <= value <= SCORE_X


def validate_arrows(scores: Iterable[Arrow]) -> List[Arrow]:
    """Return the arrows as a list, raising on any out-of-range value"""
    arrows = list(scores)
    for index, score in enumerate(arrows):
        if score is not None and not is_valid_score(score):
            raise InvalidScoreError(f"Invalid arrow value at index {index}: {score!r}")
    return arrows


def summarize_scores(scores: Iterable[Arrow]) -> ScoreSummary:
    arrows = [s for s in scores if s is not None]
    return ScoreSummary(
        total=calculate_total(arrows),
        ten_count=count_tens(arrows),
        x_count=count_xs(arrows),
        arrows=len(arrows),
    )


def score_to_label(score: Arrow) -> str:
    """Display label: X, 10..1, M for a miss, - when not shot"""
    if score is None:
        return "-"
    return SCORE_LABELS.get(score, str(score))


# =====================================================
# Set system
# =====================================================

def calculate_set_result(archer1_total: int, archer2_total: int) -> Tuple[int, int]:
    """Set points for a set: 2 win, 1 tie, 0 loss"""
    if archer1_total > archer2_total:
        return POINTS_FOR_SET_WIN, POINTS_FOR_SET_LOSS
    if archer1_total < archer2_total:
        return POINTS_FOR_SET_LOSS, POINTS_FOR_SET_WIN
    return POINTS_FOR_SET_TIE, POINTS_FOR_SET_TIE


def is_match_won(set_points: int, points_to_win: int = POINTS_TO_WIN) -> bool:
    return set_points >= points_to_win


def needs_shootoff(archer1_points: int, archer2_points: int, sets_shot: int, max_sets: int = MAX_SETS) -> bool:
    """Level on set points with every set shot (5-5 after 5 sets by default)"""
    return sets_shot >= max_sets and archer1_points == archer2_points


# =====================================================
# Qualification ends
# =====================================================

def group_scores_by_end(scores: Iterable[QualificationScore]) -> Dict[int, List[QualificationScore]]:
    """Arrows grouped by end, ordered by arrow number"""
    ends: Dict[int, List[QualificationScore]] = defaultdict(list)
    for score in scores:
        ends[score.end_number].append(score)

    for end_scores in ends.values():
        end_scores.sort(key=lambda s: s.arrow_number)

    return dict(sorted(ends.items()))


def calculate_cumulative_score(scores: Iterable[QualificationScore], up_to_end: int) -> int:
    """Running total through an end (inclusive)"""
    return calculate_total(s.score for s in scores if s.end_number <= up_to_end)
