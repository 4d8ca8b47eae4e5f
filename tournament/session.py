"""
Qualification scoring session

In-memory state for one scoring client working through a target: which
archer is active, which end and arrow are being entered, and the arrows of
the current end per archer. Created once the access code is resolved and
discarded when the client leaves; nothing here is shared between sessions.
"""
from typing import Dict, List, Optional, Sequence

from .config import qualification_config
from .exceptions import InvalidInputError, InvalidScoreError
from .scoring import calculate_total, is_valid_score


class ScoringSession:
    """Scoring state for the archers on one target"""

    def __init__(self, target_number: int, assignment_ids: Sequence[str], arrows_per_end: Optional[int] = None):
        if not assignment_ids:
            raise InvalidInputError(f"Target {target_number} has no archers to score")

        self.target_number = target_number
        self.assignment_ids: List[str] = list(assignment_ids)
        self.arrows_per_end = arrows_per_end or qualification_config.arrows_per_end
        self.reset()

    def reset(self):
        self.active_index = 0
        self.current_end = 1
        self.current_arrow = 0
        self.end_arrows: Dict[str, List[Optional[int]]] = {
            assignment_id: [None] * self.arrows_per_end for assignment_id in self.assignment_ids
        }

    @property
    def active_assignment(self) -> str:
        return self.assignment_ids[self.active_index]

    def select_archer(self, index: int):
        if not 0 <= index < len(self.assignment_ids):
            raise InvalidInputError(f"No archer at index {index} on target {self.target_number}")
        self.active_index = index
        self.current_arrow = 0

    def set_arrow(self, value: Optional[int], arrow_index: Optional[int] = None):
        """
        Enter (or clear with None) an arrow for the active archer

        Without an explicit index the cursor position is used and the cursor
        moves to the next arrow.
        """
        if value is not None and not is_valid_score(value):
            raise InvalidScoreError(f"Invalid arrow value: {value!r}")

        index = self.current_arrow if arrow_index is None else arrow_index
        if not 0 <= index < self.arrows_per_end:
            raise InvalidInputError(f"Arrow index {index} outside end of {self.arrows_per_end}")

        self.end_arrows[self.active_assignment][index] = value
        if arrow_index is None and index < self.arrows_per_end - 1:
            self.current_arrow = index + 1

    def clear_end(self):
        """Clear the active archer's current end"""
        self.end_arrows[self.active_assignment] = [None] * self.arrows_per_end
        self.current_arrow = 0

    def end_total(self, assignment_id: Optional[str] = None) -> int:
        return calculate_total(self.end_arrows[assignment_id or self.active_assignment])

    def end_complete(self) -> bool:
        """Every archer on the target has every arrow of the end"""
        return all(
            value is not None
            for arrows in self.end_arrows.values()
            for value in arrows
        )

    def confirm_end(self) -> Dict[str, List[int]]:
        """
        Close the current end

        Returns:
            assignment id -> arrows of the confirmed end
        """
        if not self.end_complete():
            raise InvalidInputError(f"End {self.current_end} on target {self.target_number} is incomplete")

        confirmed = {assignment_id: list(arrows) for assignment_id, arrows in self.end_arrows.items()}
        self.current_end += 1
        self.current_arrow = 0
        self.active_index = 0
        self.end_arrows = {
            assignment_id: [None] * self.arrows_per_end for assignment_id in self.assignment_ids
        }
        return confirmed
