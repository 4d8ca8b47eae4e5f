"""Exceptions raised by the competition engine"""


class TournamentEngineError(Exception):
    """Base class for every engine error"""


# ==================== Input contract ====================

class InvalidInputError(TournamentEngineError, ValueError):
    """Caller passed data that violates an operation's contract"""


class NotEnoughArchersError(InvalidInputError):
    """A bracket needs at least two archers"""


class BracketSizeError(InvalidInputError):
    """Archer count exceeds the largest supported bracket"""


class InvalidScoreError(InvalidInputError):
    """Arrow value outside 0-11"""


# ==================== Match state ====================

class MatchStateError(TournamentEngineError):
    """Match is not in a state that allows the requested operation"""


class AdvancementError(TournamentEngineError):
    """Winner cannot be routed to the next round"""


class ConflictingBracketError(TournamentEngineError):
    """Matches already exist for the bracket; delete them before regenerating"""


# ==================== Access codes ====================

class AccessCodeError(TournamentEngineError, ValueError):
    """Access code is malformed or cannot be resolved"""


class AccessCodeNotFoundError(AccessCodeError):
    """No active target matches the code"""


class AmbiguousAccessCodeError(AccessCodeError):
    """Code matches targets in more than one active tournament"""

    def __init__(self, code: str, target_ids):
        self.code = code
        self.target_ids = list(target_ids)
        super().__init__(
            f"Access code {code} matches {len(self.target_ids)} active tournaments"
        )
