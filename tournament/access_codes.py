"""
Access codes for scoring clients

Formats:
- T{target}       target code, routes a scorer to every archer on a target
- T{target}{A-D}  legacy per-archer target code
- M{round}-{match}{A|B}  legacy match code
- 6 random characters without look-alikes (0/O, 1/I)
"""
import random
import re
from typing import Iterable, Optional, Tuple
from dataclasses import dataclass, asdict

from .constants import ACTIVE_TOURNAMENT_STATUSES
from .exceptions import AccessCodeError, AccessCodeNotFoundError, AmbiguousAccessCodeError

CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 6

TARGET_CODE_RE = re.compile(r"^T(\d+)([A-D])?$")
MATCH_CODE_RE = re.compile(r"^M(\d+)-(\d+)([AB])$")
RANDOM_CODE_RE = re.compile(r"^[A-Z0-9]{6}$")


@dataclass
class ParsedAccessCode:
    """Parsed access code"""
    type: str                               # target / match / random
    target_number: Optional[int] = None
    position: Optional[str] = None
    round_number: Optional[int] = None
    match_position: Optional[int] = None
    archer_side: Optional[str] = None       # A = archer1, B = archer2

    def to_dict(self):
        return asdict(self)


def generate_access_code(rng: Optional[random.Random] = None) -> str:
    rng = rng or random.SystemRandom()
    return "".join(rng.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def generate_target_code(target_number: int, position: Optional[str] = None) -> str:
    return f"T{target_number}{position or ''}"


def generate_match_code(round_number: int, match_position: int, archer_side: str) -> str:
    return f"M{round_number}-{match_position}{archer_side}"


def parse_access_code(code: str) -> Optional[ParsedAccessCode]:
    """Parse a code, None when it matches no known format"""
    clean = code.strip().upper()

    match = TARGET_CODE_RE.match(clean)
    if match:
        return ParsedAccessCode(
            type="target",
            target_number=int(match.group(1)),
            position=match.group(2),
        )

    match = MATCH_CODE_RE.match(clean)
    if match:
        return ParsedAccessCode(
            type="match",
            round_number=int(match.group(1)),
            match_position=int(match.group(2)),
            archer_side=match.group(3),
        )

    if RANDOM_CODE_RE.match(clean):
        return ParsedAccessCode(type="random")

    return None


def is_valid_access_code(code: str) -> bool:
    return parse_access_code(code) is not None


def resolve_target_code(code: str, candidates: Iterable[Tuple[str, str]]) -> Tuple[str, str]:
    """
    Pick the target a T-code refers to

    Args:
        code: target code such as "T5"
        candidates: (target_id, tournament_status) for every target with
            that number, across tournaments

    Returns:
        (target_id, phase) where phase is "qualification" or "elimination"

    Raises:
        AccessCodeError: not a target code
        AmbiguousAccessCodeError: several active tournaments use the number
        AccessCodeNotFoundError: no active tournament uses the number
    """
    parsed = parse_access_code(code)
    if parsed is None or parsed.type != "target":
        raise AccessCodeError(f"Not a target code: {code!r}")

    candidates = list(candidates)
    active = [(tid, status) for tid, status in candidates if status in ACTIVE_TOURNAMENT_STATUSES]

    if len(active) > 1:
        raise AmbiguousAccessCodeError(code, [tid for tid, _ in active])
    if not active:
        if candidates:
            raise AccessCodeNotFoundError(f"Target {parsed.target_number} belongs to an inactive tournament")
        raise AccessCodeNotFoundError(f"Target {parsed.target_number} does not exist")

    return active[0]
