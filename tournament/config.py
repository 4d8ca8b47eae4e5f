"""
Engine settings
"""
from pydantic_settings import BaseSettings
from pydantic import Field
from dotenv import load_dotenv

from .constants import (
    ARROWS_PER_SET,
    MAX_SETS,
    POINTS_TO_WIN,
)

load_dotenv()


class CompetitionConfig(BaseSettings):
    """Elimination and target numbering settings"""

    points_to_win: int = Field(default=POINTS_TO_WIN, description="Set points needed to win a match")
    max_sets: int = Field(default=MAX_SETS, description="Sets shot before a shoot-off")
    arrows_per_set: int = Field(default=ARROWS_PER_SET, description="Most arrows per archer in a set")

    start_target_number: int = Field(default=1, description="First target number used by assignments")

    class Config:
        env_prefix = "ARCHERY_"
        case_sensitive = False


class QualificationConfig(BaseSettings):
    """Qualification round settings"""

    arrows_per_end: int = Field(default=6, description="Arrows shot before an end is confirmed")
    total_arrows: int = Field(default=72, description="Arrows in the full qualification round")

    class Config:
        env_prefix = "ARCHERY_QUALIFICATION_"
        case_sensitive = False


# Global settings instances
competition_config = CompetitionConfig()
qualification_config = QualificationConfig()
