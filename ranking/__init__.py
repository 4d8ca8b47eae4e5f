"""
Qualification ranking

Orders archers by total, ten count and X count, and seeds them for the
elimination brackets.
"""
from .calculator import (
    RankingCalculator,
    ArcherScores,
    rank_archers,
    to_ranked_archer,
    group_for_elimination,
)

__all__ = [
    "RankingCalculator",
    "ArcherScores",
    "rank_archers",
    "to_ranked_archer",
    "group_for_elimination",
]
