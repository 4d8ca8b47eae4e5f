"""
Category classifier

Maps an archer's age category and the tournament type to a shooting
distance, and builds the key that clusters archers who compete together.
"""
from typing import Tuple

from .constants import CATEGORY_LABELS, GENDER_LABELS, INDOOR_DISTANCES, OUTDOOR_DISTANCES
from .models import AgeCategory, Archer, Gender, TournamentType


def _value(item) -> str:
    return item.value if hasattr(item, "value") else item


def get_distance(category, tournament_type) -> int:
    """Distance in meters for a category"""
    category = AgeCategory(category).value
    if TournamentType(tournament_type) == TournamentType.OUTDOOR:
        return OUTDOOR_DISTANCES[category]
    return INDOOR_DISTANCES[category]


def get_category_key(category, gender, distance: int) -> str:
    """Grouping key: category-gender-distance"""
    return f"{_value(category)}-{_value(gender)}-{distance}"


def parse_category_key(key: str) -> Tuple[str, str, int]:
    category, gender, distance = key.split("-")
    return AgeCategory(category).value, Gender(gender).value, int(distance)


def classify_archer(archer: Archer, tournament_type) -> Tuple[int, str]:
    """Distance and grouping key for an archer"""
    distance = get_distance(archer.age_category, tournament_type)
    return distance, get_category_key(archer.age_category, archer.gender, distance)


def get_group_label(category, gender=None) -> str:
    """Display label such as "Under 15 Women"; unknown parts pass through"""
    category = _value(category)
    label = CATEGORY_LABELS.get(category, category)
    if gender:
        gender = _value(gender)
        label = f"{label} {GENDER_LABELS.get(gender, gender)}"
    return label
