"""
Elimination bracket generation

Builds the full single-elimination skeleton for one category / gender:
- bracket size = next of 8, 16, 32, 64, 128 that fits every archer
- round 1 from World Archery seeding pairs, empty shells for later rounds
- first-round byes advanced into round 2 before anything is handed out
"""
import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from dataclasses import dataclass, asdict, field, replace
from loguru import logger

from .constants import (
    BRACKET_SEEDINGS,
    BRACKET_SIZES,
    BRONZE_ROUND,
    BRONZE_ROUND_NAME,
    MIN_BRACKET_ARCHERS,
    MIN_BRONZE_ARCHERS,
    ROUND_NAMES,
)
from .exceptions import BracketSizeError, ConflictingBracketError, NotEnoughArchersError
from .models import MatchStatus


@dataclass
class RankedArcher:
    """Archer with qualification stats and a positional seed"""
    archer_id: str
    total_score: int = 0
    ten_count: int = 0     # tens including X
    x_count: int = 0
    seed: int = 0
    first_name: str = ""
    last_name: str = ""

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class BracketMatch:
    """Single elimination match"""
    round_number: int              # 1 = first round, 0 = bronze
    match_position: int            # 1-based within the round
    archer1_id: Optional[str] = None
    archer2_id: Optional[str] = None
    archer1_seed: Optional[int] = None
    archer2_seed: Optional[int] = None
    is_bye: bool = False
    next_match_position: Optional[int] = None   # None for the final and bronze
    archer1_set_points: int = 0
    archer2_set_points: int = 0
    status: str = MatchStatus.PENDING.value
    winner_id: Optional[str] = None

    @property
    def key(self) -> Tuple[int, int]:
        return self.round_number, self.match_position

    @property
    def is_completed(self) -> bool:
        return self.status == MatchStatus.COMPLETED.value and self.winner_id is not None

    @property
    def has_both_archers(self) -> bool:
        return self.archer1_id is not None and self.archer2_id is not None

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class GeneratedBracket:
    """Bracket skeleton for one category / gender"""
    category: str
    gender: str
    bracket_size: int
    total_rounds: int
    matches: List[BracketMatch] = field(default_factory=list)
    ranked_archers: List[RankedArcher] = field(default_factory=list)

    def matches_in_round(self, round_number: int) -> List[BracketMatch]:
        return [m for m in self.matches if m.round_number == round_number]

    def to_dict(self) -> Dict:
        return {
            "category": self.category,
            "gender": self.gender,
            "bracket_size": self.bracket_size,
            "total_rounds": self.total_rounds,
            "matches": [m.to_dict() for m in self.matches],
            "ranked_archers": [a.to_dict() for a in self.ranked_archers],
        }


# =====================================================
# Sizing and seeding
# =====================================================

def get_next_bracket_size(archer_count: int) -> int:
    """Smallest supported bracket that fits every archer (minimum 8)"""
    for size in BRACKET_SIZES:
        if archer_count <= size:
            return size
    raise BracketSizeError(
        f"{archer_count} archers exceed the largest bracket ({BRACKET_SIZES[-1]})"
    )


def get_total_rounds(bracket_size: int) -> int:
    return int(math.log2(bracket_size))


def get_seeding_pairs(bracket_size: int) -> List[Tuple[int, int]]:
    """
    Round 1 seed pairs, top of the bracket first

    8, 16 and 32 use curated tables. Other sizes pair seed i with
    size + 1 - i in seed order, which is not the official layout.
    """
    if bracket_size in BRACKET_SEEDINGS:
        return list(BRACKET_SEEDINGS[bracket_size])

    # TODO: source the official World Archery 64/128 layouts to replace the linear pairing
    return [(seed, bracket_size + 1 - seed) for seed in range(1, bracket_size // 2 + 1)]


def get_next_match_position(match_position: int) -> int:
    """Winner of match N plays match ceil(N/2) in the next round"""
    return math.ceil(match_position / 2)


def sort_ranked_archers(archers: Iterable[RankedArcher]) -> List[RankedArcher]:
    """
    Sort by total, ten count, X count (descending) and assign seeds

    Returns new objects; ties keep input order.
    """
    ordered = sorted(
        archers,
        key=lambda a: (-a.total_score, -a.ten_count, -a.x_count),
    )
    return [replace(archer, seed=index) for index, archer in enumerate(ordered, 1)]


# =====================================================
# Generation
# =====================================================

def generate_bracket(
    ranked_archers: Sequence[RankedArcher],
    category,
    gender,
    top_n: Optional[int] = None,
    existing_matches: Optional[Sequence[BracketMatch]] = None,
) -> GeneratedBracket:
    """
    Generate every round of a bracket

    Round 1 is filled from the seeding pairs; a missing seed leaves a null
    slot and marks the match as a bye. Later rounds are empty shells.
    Byes are NOT advanced here, use build_bracket or call
    process_first_round_byes before handing the matches out.

    Raises:
        ConflictingBracketError: matches already exist for this bracket
        NotEnoughArchersError: fewer than 2 archers
        BracketSizeError: more than 128 archers
    """
    category = getattr(category, "value", category)
    gender = getattr(gender, "value", gender)

    if existing_matches:
        logger.warning(f"Bracket {category}-{gender} already has {len(existing_matches)} matches")
        raise ConflictingBracketError(
            f"Bracket {category}-{gender} already has matches; delete them before regenerating"
        )

    seeded = sort_ranked_archers(ranked_archers)
    if top_n is not None:
        seeded = seeded[:top_n]

    archer_count = len(seeded)
    if archer_count < MIN_BRACKET_ARCHERS:
        logger.warning(f"Bracket {category}-{gender} rejected: {archer_count} archer(s)")
        raise NotEnoughArchersError(
            f"At least {MIN_BRACKET_ARCHERS} archers are needed for a bracket, got {archer_count}"
        )

    bracket_size = get_next_bracket_size(archer_count)
    total_rounds = get_total_rounds(bracket_size)
    by_seed = {archer.seed: archer for archer in seeded}

    matches: List[BracketMatch] = []

    for position, (seed1, seed2) in enumerate(get_seeding_pairs(bracket_size), 1):
        archer1 = by_seed.get(seed1)
        archer2 = by_seed.get(seed2)
        matches.append(BracketMatch(
            round_number=1,
            match_position=position,
            archer1_id=archer1.archer_id if archer1 else None,
            archer2_id=archer2.archer_id if archer2 else None,
            archer1_seed=seed1 if archer1 else None,
            archer2_seed=seed2 if archer2 else None,
            is_bye=archer1 is None or archer2 is None,
            next_match_position=get_next_match_position(position),
        ))

    matches_in_round = bracket_size // 4
    for round_number in range(2, total_rounds + 1):
        for position in range(1, matches_in_round + 1):
            matches.append(BracketMatch(
                round_number=round_number,
                match_position=position,
                next_match_position=(
                    get_next_match_position(position) if round_number < total_rounds else None
                ),
            ))
        matches_in_round //= 2

    logger.info(
        f"Bracket {category}-{gender}: {archer_count} archers, size {bracket_size}, "
        f"{total_rounds} rounds, {sum(1 for m in matches if m.is_bye)} byes"
    )

    return GeneratedBracket(
        category=category,
        gender=gender,
        bracket_size=bracket_size,
        total_rounds=total_rounds,
        matches=matches,
        ranked_archers=seeded,
    )


def _place_winner(next_match: BracketMatch, from_position: int, archer_id: str, seed: Optional[int]) -> None:
    if from_position % 2 == 1:
        next_match.archer1_id = archer_id
        next_match.archer1_seed = seed
    else:
        next_match.archer2_id = archer_id
        next_match.archer2_seed = seed


def _is_empty_branch(match: Optional[BracketMatch]) -> bool:
    """Bye match that will never produce a winner"""
    return (
        match is not None
        and match.is_bye
        and match.winner_id is None
        and match.archer1_id is None
        and match.archer2_id is None
    )


def _resolve_walkovers(updated: List[BracketMatch], index: Dict[Tuple[int, int], BracketMatch]) -> None:
    """
    Complete later-round matches whose opponent can never arrive

    Below four archers a size-8 bracket has round-1 matches with no archer
    at all. The match they feed gets only one archer, who wins it outright
    and moves on. A match fed by two empty branches is empty itself.
    """
    round_number = 2
    while any(m.round_number == round_number for m in updated):
        for match in updated:
            if match.round_number != round_number or match.winner_id is not None:
                continue

            empty1 = _is_empty_branch(index.get((round_number - 1, 2 * match.match_position - 1)))
            empty2 = _is_empty_branch(index.get((round_number - 1, 2 * match.match_position)))

            if empty1 and empty2:
                match.is_bye = True
                continue
            if empty2 and match.archer1_id and not match.archer2_id:
                winner_id, winner_seed = match.archer1_id, match.archer1_seed
            elif empty1 and match.archer2_id and not match.archer1_id:
                winner_id, winner_seed = match.archer2_id, match.archer2_seed
            else:
                continue

            match.is_bye = True
            match.winner_id = winner_id
            match.status = MatchStatus.COMPLETED.value

            next_match = index.get((round_number + 1, match.next_match_position))
            if match.next_match_position is not None and next_match is not None:
                _place_winner(next_match, match.match_position, winner_id, winner_seed)

            logger.debug(
                f"Walkover: {winner_id} wins R{round_number}-{match.match_position} unopposed"
            )
        round_number += 1


def process_first_round_byes(matches: Sequence[BracketMatch]) -> List[BracketMatch]:
    """
    Advance archers who drew a first-round bye

    The present archer goes to round 2 at next_match_position: archer1 slot
    from an odd match, archer2 slot from an even one. The bye match is
    completed with that archer as winner. Later-round matches left with an
    archer who has no possible opponent are completed the same way.
    Returns new match objects.
    """
    updated = [replace(m) for m in matches]
    index = {m.key: m for m in updated}

    for match in updated:
        if match.round_number != 1 or not match.is_bye:
            continue

        winner_id = match.archer1_id or match.archer2_id
        winner_seed = match.archer1_seed if match.archer1_id else match.archer2_seed
        if winner_id is None:
            # Both seeds absent; nothing to advance
            continue

        match.winner_id = winner_id
        match.status = MatchStatus.COMPLETED.value

        next_match = index.get((2, match.next_match_position))
        if next_match is None:
            continue

        _place_winner(next_match, match.match_position, winner_id, winner_seed)

        logger.debug(
            f"Bye: seed {winner_seed} from match {match.match_position} "
            f"to round 2 match {next_match.match_position}"
        )

    _resolve_walkovers(updated, index)
    return updated


def create_bronze_match() -> BracketMatch:
    """Bronze medal match, filled by the semifinal losers"""
    return BracketMatch(round_number=BRONZE_ROUND, match_position=1)


def build_bracket(
    ranked_archers: Sequence[RankedArcher],
    category,
    gender,
    top_n: Optional[int] = None,
    existing_matches: Optional[Sequence[BracketMatch]] = None,
    include_bronze: bool = True,
) -> GeneratedBracket:
    """
    Generate a bracket with first-round byes already resolved

    The only form in which matches should reach the persistence layer:
    round 2 is never visible before bye resolution.
    """
    bracket = generate_bracket(
        ranked_archers, category, gender,
        top_n=top_n, existing_matches=existing_matches,
    )
    matches = process_first_round_byes(bracket.matches)
    if include_bronze and len(bracket.ranked_archers) >= MIN_BRONZE_ARCHERS:
        matches.append(create_bronze_match())
    return replace(bracket, matches=matches)


# =====================================================
# Round names
# =====================================================

def get_round_name(bracket_size: int, round_number: int) -> str:
    """Label for a round: Final, Semifinal, Quarterfinals, 1/8 ..."""
    if round_number == BRONZE_ROUND:
        return BRONZE_ROUND_NAME

    rounds_from_final = get_total_rounds(bracket_size) - round_number + 1
    return ROUND_NAMES.get(rounds_from_final, f"Round {round_number}")


def calculate_expected_matches(bracket_size: int) -> Dict[str, int]:
    """Match count per round label"""
    expected = {}
    matches = bracket_size // 2
    for round_number in range(1, get_total_rounds(bracket_size) + 1):
        expected[get_round_name(bracket_size, round_number)] = matches
        matches //= 2
    return expected
