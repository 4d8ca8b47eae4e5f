"""
Record models (Pydantic)

Flat snapshots handed to the engine by the persistence layer.
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from enum import Enum

from .constants import SCORE_MIN, SCORE_X


class TournamentType(str, Enum):
    """Tournament type"""
    INDOOR = "indoor"
    OUTDOOR = "outdoor"


class TournamentStatus(str, Enum):
    """Tournament lifecycle"""
    DRAFT = "draft"
    REGISTRATION = "registration"
    QUALIFICATION = "qualification"
    ELIMINATION = "elimination"
    COMPLETED = "completed"


class AgeCategory(str, Enum):
    """Age category"""
    U10 = "u10"
    U13 = "u13"
    U15 = "u15"
    U18 = "u18"
    U21 = "u21"
    SENIOR = "senior"
    MASTER = "master"
    OPEN = "open"


class Gender(str, Enum):
    """Gender"""
    MALE = "male"
    FEMALE = "female"


class TargetStatus(str, Enum):
    """Target status, always derived from assignment progress"""
    INACTIVE = "inactive"
    SCORING = "scoring"
    CONFIRMED = "confirmed"
    CONFLICT = "conflict"


class MatchStatus(str, Enum):
    """Elimination match status"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    SHOOTOFF = "shootoff"
    COMPLETED = "completed"


class Tournament(BaseModel):
    """Tournament"""
    id: str = Field(..., description="Tournament ID")
    name: str = Field(..., description="Tournament name")
    type: TournamentType = Field(default=TournamentType.OUTDOOR, description="indoor/outdoor")
    status: TournamentStatus = Field(default=TournamentStatus.DRAFT, description="Lifecycle status")
    qualification_arrows: int = Field(default=72, ge=1, description="Arrows in qualification")
    arrows_per_end: int = Field(default=6, ge=1, description="Arrows per end")
    elimination_arrows_per_set: int = Field(default=3, ge=1, description="Arrows per set")
    points_to_win_match: int = Field(default=6, ge=1, description="Set points to win a match")

    class Config:
        use_enum_values = True


class Archer(BaseModel):
    """Registered archer"""
    id: str = Field(..., description="Archer ID")
    first_name: str = Field(default="", description="First name")
    last_name: str = Field(default="", description="Last name")
    club: Optional[str] = Field(None, description="Club")
    age_category: AgeCategory = Field(..., description="Age category")
    gender: Gender = Field(..., description="Gender")

    @field_validator("club")
    @classmethod
    def blank_club_is_none(cls, v: Optional[str]) -> Optional[str]:
        """Empty club names mean no club"""
        if v is None:
            return v
        v = " ".join(v.split())
        return v or None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    class Config:
        use_enum_values = True
        frozen = True


class QualificationScore(BaseModel):
    """One arrow of one end"""
    assignment_id: str = Field(..., description="Assignment ID")
    end_number: int = Field(..., ge=1, description="End number")
    arrow_number: int = Field(..., ge=1, description="Arrow number within the end")
    score: Optional[int] = Field(None, ge=SCORE_MIN, le=SCORE_X, description="Arrow value, 11 = X, None = not shot")


class MatchSet(BaseModel):
    """Recorded set of an elimination match"""
    set_number: int = Field(..., ge=1, description="Set number (99 = shoot-off)")
    archer1_arrows: List[Optional[int]] = Field(default_factory=list, description="Archer 1 arrows")
    archer2_arrows: List[Optional[int]] = Field(default_factory=list, description="Archer 2 arrows")
    archer1_set_result: Optional[int] = Field(None, ge=0, le=2, description="Set points for archer 1")
    archer2_set_result: Optional[int] = Field(None, ge=0, le=2, description="Set points for archer 2")
    is_shootoff: bool = Field(default=False)
    shootoff_archer1_distance: Optional[float] = Field(None, ge=0, description="Distance from centre")
    shootoff_archer2_distance: Optional[float] = Field(None, ge=0, description="Distance from centre")
    is_confirmed: bool = Field(default=False)
