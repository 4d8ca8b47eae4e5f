"""
Target assignment engine

Distributes archers over targets following World Archery practice:
- archers are grouped by category / gender / distance
- 4 archers per target at positions A, B, C, D
- A and B shoot together (turn AB), then C and D (turn CD)
- clubs are interleaved so club mates rarely share a target (best effort)
"""
from typing import Dict, Iterable, List, Optional, Tuple
from dataclasses import dataclass, asdict, field
from collections import defaultdict
from loguru import logger

from .categories import classify_archer
from .config import competition_config
from .constants import SHOOTING_TURNS, TARGET_POSITIONS
from .models import Archer, TargetStatus


@dataclass
class AssignmentResult:
    """Archer placed on a target"""
    archer_id: str
    target_number: int
    position: str    # A-D
    turn: str        # AB / CD
    distance: int

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class AssignmentPlan:
    """Output of generate_assignments"""
    assignments: List[AssignmentResult] = field(default_factory=list)
    target_count: int = 0

    def by_target(self) -> Dict[int, List[AssignmentResult]]:
        targets: Dict[int, List[AssignmentResult]] = defaultdict(list)
        for assignment in self.assignments:
            targets[assignment.target_number].append(assignment)
        return dict(targets)

    def to_dict(self) -> Dict:
        return {
            "assignments": [a.to_dict() for a in self.assignments],
            "target_count": self.target_count,
        }


@dataclass
class TargetProgress:
    """Derived target state"""
    target_number: int
    status: str
    archer_count: int = 0
    scoring_count: int = 0
    completed_count: int = 0

    def to_dict(self) -> Dict:
        return asdict(self)


# =====================================================
# Grouping
# =====================================================

def group_archers(archers: Iterable[Archer], tournament_type) -> Dict[str, List[Tuple[Archer, int]]]:
    """Archers keyed by category-gender-distance, in first-seen order"""
    groups: Dict[str, List[Tuple[Archer, int]]] = {}

    for archer in archers:
        distance, key = classify_archer(archer, tournament_type)
        groups.setdefault(key, []).append((archer, distance))

    return groups


def interleave_clubs(archers: List[Tuple[Archer, int]]) -> List[Tuple[Archer, int]]:
    """
    Round-robin over clubs, largest club first

    Club-less archers go last. Reduces, but does not eliminate, club mates
    ending up in the same block of four.
    """
    by_club: Dict[str, List[Tuple[Archer, int]]] = {}
    no_club: List[Tuple[Archer, int]] = []

    for item in archers:
        club = item[0].club
        if club:
            by_club.setdefault(club, []).append(item)
        else:
            no_club.append(item)

    # sorted() is stable: equal-sized clubs keep first-seen order
    queues = sorted(by_club.values(), key=len, reverse=True)

    result: List[Tuple[Archer, int]] = []
    depth = 0
    while any(depth < len(q) for q in queues):
        for queue in queues:
            if depth < len(queue):
                result.append(queue[depth])
        depth += 1

    result.extend(no_club)
    return result


# =====================================================
# Assignment
# =====================================================

def generate_assignments(
    archers: Iterable[Archer],
    tournament_type,
    start_target_number: Optional[int] = None,
) -> AssignmentPlan:
    """
    Assign every archer to a target, position and turn

    Each group starts on a fresh target; a group's last target may hold
    fewer than four archers.

    Returns:
        AssignmentPlan with the assignments and the number of targets used
    """
    if start_target_number is None:
        start_target_number = competition_config.start_target_number

    groups = group_archers(archers, tournament_type)
    plan = AssignmentPlan()
    current_target = start_target_number
    slots = len(TARGET_POSITIONS)

    for key, group in groups.items():
        ordered = interleave_clubs(group)

        for index, (archer, distance) in enumerate(ordered):
            slot = index % slots
            if index > 0 and slot == 0:
                current_target += 1

            plan.assignments.append(AssignmentResult(
                archer_id=archer.id,
                target_number=current_target,
                position=TARGET_POSITIONS[slot],
                turn=SHOOTING_TURNS[slot],
                distance=distance,
            ))

        logger.debug(f"Group {key}: {len(ordered)} archers, last target {current_target}")
        current_target += 1

    plan.target_count = current_target - start_target_number
    logger.info(
        f"Assigned {len(plan.assignments)} archers in {len(groups)} groups "
        f"to {plan.target_count} targets"
    )
    return plan


def check_club_conflicts(assignments: Iterable[AssignmentResult], archers: Iterable[Archer]) -> List[int]:
    """
    Target numbers where two or more archers share a club

    Advisory check for reporting; assignment is never blocked on it.
    """
    archer_map = {a.id: a for a in archers}
    clubs_by_target: Dict[int, List[str]] = defaultdict(list)

    for assignment in assignments:
        archer = archer_map.get(assignment.archer_id)
        if archer is None:
            continue
        # Keep targets without clubs so order follows first appearance
        clubs = clubs_by_target[assignment.target_number]
        if archer.club:
            clubs.append(archer.club)

    conflicts = [
        target for target, clubs in clubs_by_target.items()
        if len(clubs) > len(set(clubs))
    ]
    if conflicts:
        logger.debug(f"Club conflicts on targets {conflicts}")
    return conflicts


# =====================================================
# Target status
# =====================================================

def derive_target_status(
    target_number: int,
    arrows_recorded: Dict[str, int],
    finished: Optional[Dict[str, bool]] = None,
    total_arrows: int = 72,
    has_conflict: bool = False,
) -> TargetProgress:
    """
    Recompute a target's status from its assignments

    Args:
        arrows_recorded: assignment id -> arrows with a recorded score
        finished: assignment id -> finished flag
        total_arrows: arrows in the qualification round
        has_conflict: flagged by the caller (e.g. disputed scores)
    """
    finished = finished or {}
    progress = TargetProgress(
        target_number=target_number,
        status=TargetStatus.INACTIVE.value,
        archer_count=len(arrows_recorded),
    )

    for assignment_id, count in arrows_recorded.items():
        if count >= total_arrows or finished.get(assignment_id, False):
            progress.completed_count += 1
        elif count > 0:
            progress.scoring_count += 1

    if has_conflict and progress.archer_count:
        progress.status = TargetStatus.CONFLICT.value
    elif progress.archer_count and progress.completed_count == progress.archer_count:
        progress.status = TargetStatus.CONFIRMED.value
    elif progress.scoring_count or progress.completed_count:
        progress.status = TargetStatus.SCORING.value

    return progress
