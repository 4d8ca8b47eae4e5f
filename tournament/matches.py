"""
Match / set engine

Set system for elimination matches:
- each set: higher arrow total takes 2 set points, a tie gives 1 each
- first to points_to_win (6) set points wins the match
- level after max_sets (5-5 after 5 sets) goes to a single-arrow shoot-off

State machine: pending -> in_progress -> (shootoff) -> completed.
All functions return new match objects and leave their inputs untouched.
"""
from typing import Dict, Iterable, List, Optional, Sequence
from dataclasses import dataclass, asdict, replace
from loguru import logger

from .brackets import BracketMatch
from .config import competition_config
from .constants import BRONZE_ROUND, SHOOTOFF_SET_NUMBER
from .exceptions import AdvancementError, InvalidScoreError, MatchStateError
from .models import MatchSet, MatchStatus
from .scoring import arrow_value, calculate_set_result, calculate_total, is_match_won, needs_shootoff, validate_arrows


@dataclass
class SetResult:
    """Set points awarded for one set"""
    archer1_points: int
    archer2_points: int
    archer1_total: int = 0
    archer2_total: int = 0

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class MatchOutcome:
    """Match after a set or shoot-off was recorded"""
    match: BracketMatch
    match_set: MatchSet
    set_result: Optional[SetResult] = None

    @property
    def is_decided(self) -> bool:
        return self.match.is_completed


def score_set(archer1_arrows: Sequence[Optional[int]], archer2_arrows: Sequence[Optional[int]]) -> SetResult:
    """Compare two sides' arrows for one set"""
    total1 = calculate_total(validate_arrows(archer1_arrows))
    total2 = calculate_total(validate_arrows(archer2_arrows))
    points1, points2 = calculate_set_result(total1, total2)
    return SetResult(points1, points2, total1, total2)


def _ensure_scorable(match: BracketMatch, expected_status: Iterable[str]) -> None:
    if match.status not in expected_status:
        raise MatchStateError(
            f"Match R{match.round_number}-{match.match_position} is {match.status}"
        )
    if not match.has_both_archers:
        raise MatchStateError(
            f"Match R{match.round_number}-{match.match_position} is missing an archer"
        )


def record_set(
    match: BracketMatch,
    archer1_arrows: Sequence[Optional[int]],
    archer2_arrows: Sequence[Optional[int]],
    set_number: int,
    points_to_win: Optional[int] = None,
    max_sets: Optional[int] = None,
    arrows_per_set: Optional[int] = None,
) -> MatchOutcome:
    """
    Score one set and move the match through its state machine

    Raises:
        MatchStateError: match already decided, waiting for a shoot-off, or
            missing an archer
        InvalidScoreError: arrow value outside 0-11, or more arrows than a
            set holds
    """
    if points_to_win is None:
        points_to_win = competition_config.points_to_win
    if max_sets is None:
        max_sets = competition_config.max_sets
    if arrows_per_set is None:
        arrows_per_set = competition_config.arrows_per_set

    _ensure_scorable(match, (MatchStatus.PENDING.value, MatchStatus.IN_PROGRESS.value))

    for side, arrows in ((1, archer1_arrows), (2, archer2_arrows)):
        if len(arrows) > arrows_per_set:
            raise InvalidScoreError(
                f"Archer {side} shot {len(arrows)} arrows, a set holds {arrows_per_set}"
            )

    result = score_set(archer1_arrows, archer2_arrows)
    archer1_points = match.archer1_set_points + result.archer1_points
    archer2_points = match.archer2_set_points + result.archer2_points

    status = MatchStatus.IN_PROGRESS.value
    winner_id = None

    if is_match_won(archer1_points, points_to_win):
        status, winner_id = MatchStatus.COMPLETED.value, match.archer1_id
    elif is_match_won(archer2_points, points_to_win):
        status, winner_id = MatchStatus.COMPLETED.value, match.archer2_id
    elif needs_shootoff(archer1_points, archer2_points, set_number, max_sets):
        status = MatchStatus.SHOOTOFF.value
    elif set_number >= max_sets:
        # Sets ran out without a tie: the leader takes the match
        status = MatchStatus.COMPLETED.value
        winner_id = match.archer1_id if archer1_points > archer2_points else match.archer2_id

    updated = replace(
        match,
        archer1_set_points=archer1_points,
        archer2_set_points=archer2_points,
        status=status,
        winner_id=winner_id,
    )

    logger.debug(
        f"R{match.round_number}-{match.match_position} set {set_number}: "
        f"{result.archer1_total}-{result.archer2_total}, points {archer1_points}-{archer2_points} ({status})"
    )

    match_set = MatchSet(
        set_number=set_number,
        archer1_arrows=list(archer1_arrows),
        archer2_arrows=list(archer2_arrows),
        archer1_set_result=result.archer1_points,
        archer2_set_result=result.archer2_points,
        is_confirmed=True,
    )
    return MatchOutcome(match=updated, match_set=match_set, set_result=result)


def resolve_shootoff(
    match: BracketMatch,
    archer1_arrow: int,
    archer2_arrow: int,
    archer1_distance: Optional[float] = None,
    archer2_distance: Optional[float] = None,
) -> MatchOutcome:
    """
    Decide a match tied after the last set with one arrow each

    When both distances from the centre are measured, the closer arrow
    wins. Without measurements the ring value decides, and equal values
    require a measurement.

    Raises:
        MatchStateError: match not in shoot-off, values level without a
            measurement, or equal distances
    """
    _ensure_scorable(match, (MatchStatus.SHOOTOFF.value,))
    validate_arrows([archer1_arrow, archer2_arrow])

    if archer1_distance is not None and archer2_distance is not None:
        if archer1_distance == archer2_distance:
            raise MatchStateError("Shoot-off distances cannot be equal")
        archer1_wins = archer1_distance < archer2_distance
    else:
        value1, value2 = arrow_value(archer1_arrow), arrow_value(archer2_arrow)
        if value1 == value2:
            raise MatchStateError("Shoot-off arrows are level; measure distance to centre")
        archer1_wins = value1 > value2

    winner_id = match.archer1_id if archer1_wins else match.archer2_id
    updated = replace(match, status=MatchStatus.COMPLETED.value, winner_id=winner_id)

    logger.info(f"Shoot-off R{match.round_number}-{match.match_position} won by {winner_id}")

    match_set = MatchSet(
        set_number=SHOOTOFF_SET_NUMBER,
        archer1_arrows=[archer1_arrow],
        archer2_arrows=[archer2_arrow],
        is_shootoff=True,
        shootoff_archer1_distance=archer1_distance,
        shootoff_archer2_distance=archer2_distance,
        is_confirmed=True,
    )
    return MatchOutcome(match=updated, match_set=match_set)


def replay_sets(match: BracketMatch, sets: Iterable[MatchSet]) -> BracketMatch:
    """Recompute accumulated set points from confirmed, non shoot-off sets"""
    archer1_points = archer2_points = 0
    for match_set in sets:
        if not match_set.is_confirmed or match_set.is_shootoff:
            continue
        archer1_points += match_set.archer1_set_result or 0
        archer2_points += match_set.archer2_set_result or 0
    return replace(match, archer1_set_points=archer1_points, archer2_set_points=archer2_points)


# =====================================================
# Advancement
# =====================================================

def _find_match(matches: Iterable[BracketMatch], round_number: int, position: int) -> Optional[BracketMatch]:
    for candidate in matches:
        if candidate.round_number == round_number and candidate.match_position == position:
            return candidate
    return None


def _winner_seed(match: BracketMatch) -> Optional[int]:
    return match.archer1_seed if match.winner_id == match.archer1_id else match.archer2_seed


def _fill_slot(target: BracketMatch, first_slot: bool, archer_id: str, seed: Optional[int]) -> BracketMatch:
    current = target.archer1_id if first_slot else target.archer2_id
    if current is not None and current != archer_id:
        raise AdvancementError(
            f"Slot {'1' if first_slot else '2'} of R{target.round_number}-{target.match_position} "
            f"already holds {current}"
        )
    if first_slot:
        return replace(target, archer1_id=archer_id, archer1_seed=seed)
    return replace(target, archer2_id=archer_id, archer2_seed=seed)


def advance_winner(match: BracketMatch, all_matches: Sequence[BracketMatch]) -> Optional[BracketMatch]:
    """
    Place a completed match's winner into the next round

    Odd match positions feed the archer1 slot, even ones archer2. The
    winner keeps the seed that placed them in the bracket.

    Returns:
        Updated next match, or None when the match is a final / bronze match

    Raises:
        AdvancementError: match has no winner, next match missing, or the
            slot already holds another archer
    """
    if not match.is_completed:
        raise AdvancementError(
            f"Match R{match.round_number}-{match.match_position} has no winner yet"
        )
    if match.round_number == BRONZE_ROUND or match.next_match_position is None:
        return None

    next_match = _find_match(all_matches, match.round_number + 1, match.next_match_position)
    if next_match is None:
        raise AdvancementError(
            f"Round {match.round_number + 1} match {match.next_match_position} not found"
        )

    updated = _fill_slot(next_match, match.match_position % 2 == 1, match.winner_id, _winner_seed(match))
    logger.debug(
        f"Advanced {match.winner_id} to R{updated.round_number}-{updated.match_position}"
    )
    return updated


def place_semifinal_loser(match: BracketMatch, all_matches: Sequence[BracketMatch]) -> Optional[BracketMatch]:
    """
    Send a semifinal loser to the bronze match

    Semifinal 1 fills archer1, semifinal 2 fills archer2. Returns None when
    the match is not a semifinal or the bracket has no bronze match.
    """
    if not match.is_completed:
        raise AdvancementError(
            f"Match R{match.round_number}-{match.match_position} has no winner yet"
        )

    final_round = max(m.round_number for m in all_matches)
    if match.round_number != final_round - 1:
        return None

    bronze = _find_match(all_matches, BRONZE_ROUND, 1)
    if bronze is None:
        return None

    if match.winner_id == match.archer1_id:
        loser_id, loser_seed = match.archer2_id, match.archer2_seed
    else:
        loser_id, loser_seed = match.archer1_id, match.archer1_seed

    return _fill_slot(bronze, match.match_position == 1, loser_id, loser_seed)


def apply_match_result(match: BracketMatch, all_matches: Sequence[BracketMatch]) -> List[BracketMatch]:
    """
    Fold a decided match back into the bracket

    Replaces the match itself, fills the next round and, for semifinals,
    the bronze match. Returns a new list in the original order.
    """
    changed = {match.key: match}

    next_match = advance_winner(match, all_matches)
    if next_match is not None:
        changed[next_match.key] = next_match

    bronze = place_semifinal_loser(match, all_matches)
    if bronze is not None:
        changed[bronze.key] = bronze

    return [changed.get(m.key, m) for m in all_matches]
