"""
Pytest configuration and fixtures for the archery tournament engine tests
"""

import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tournament.brackets import RankedArcher
from tournament.models import Archer


def make_archer(archer_id, category="senior", gender="male", club=None, first_name="", last_name=""):
    return Archer(
        id=archer_id,
        first_name=first_name or archer_id,
        last_name=last_name,
        club=club,
        age_category=category,
        gender=gender,
    )


def make_ranked(count):
    """Archers with strictly decreasing totals: a1 is seed 1"""
    return [
        RankedArcher(archer_id=f"a{i}", total_score=700 - i)
        for i in range(1, count + 1)
    ]


@pytest.fixture(scope="function")
def archer_factory():
    """Archer builder"""
    return make_archer


@pytest.fixture(scope="function")
def ranked_factory():
    """Ranked archer list builder"""
    return make_ranked


@pytest.fixture(scope="function")
def mixed_field():
    """Outdoor field spanning two categories and both genders"""
    return [
        make_archer("s1", "senior", "male", club="Arco Norte"),
        make_archer("s2", "senior", "male", club="Arco Norte"),
        make_archer("s3", "senior", "male", club="Flecha Sur"),
        make_archer("s4", "senior", "male", club="Diana"),
        make_archer("s5", "senior", "male", club="Flecha Sur"),
        make_archer("f1", "senior", "female", club="Diana"),
        make_archer("f2", "senior", "female"),
        make_archer("j1", "u15", "male", club="Arco Norte"),
    ]
