"""
Qualification ranking

Orders archers within a category / gender by:
1. total score (X counts 10)
2. ten count (10 + X)
3. X count
Remaining ties keep input order. Seed = 1-based position after sorting,
recomputed on every call and used directly as bracket seeding input.
"""
import json
from typing import List, Dict, Any, Iterable, Optional, Sequence, Union
from dataclasses import dataclass, field
from collections import defaultdict
from loguru import logger

from tournament.brackets import RankedArcher, sort_ranked_archers
from tournament.models import Archer
from tournament.scoring import summarize_scores, validate_arrows


# =====================================================
# Data classes
# =====================================================

@dataclass
class ArcherScores:
    """Archer with every recorded arrow of the qualification round"""
    archer: Archer
    scores: List[Optional[int]] = field(default_factory=list)

    @property
    def group_key(self) -> str:
        return f"{self.archer.age_category}-{self.archer.gender}"


def to_ranked_archer(entry: Union[ArcherScores, RankedArcher]) -> RankedArcher:
    """Aggregate an archer's arrows; no arrows means zeros. Pre-summed entries pass through"""
    if isinstance(entry, RankedArcher):
        return entry
    summary = summarize_scores(validate_arrows(entry.scores))
    return RankedArcher(
        archer_id=entry.archer.id,
        total_score=summary.total,
        ten_count=summary.ten_count,
        x_count=summary.x_count,
        first_name=entry.archer.first_name,
        last_name=entry.archer.last_name,
    )


def rank_archers(entries: Iterable[Union[ArcherScores, RankedArcher]]) -> List[RankedArcher]:
    """Rank one category / gender pool and assign seeds"""
    return sort_ranked_archers(to_ranked_archer(e) for e in entries)


def group_for_elimination(entries: Iterable[ArcherScores], mixed_gender: bool = False) -> Dict[str, List[RankedArcher]]:
    """
    Ranked pools ready for bracket generation

    Keyed by category-gender, or category-mixed when genders shoot together.
    """
    pools: Dict[str, List[ArcherScores]] = defaultdict(list)
    for entry in entries:
        key = f"{entry.archer.age_category}-mixed" if mixed_gender else entry.group_key
        pools[key].append(entry)
    return {key: rank_archers(pool) for key, pool in pools.items()}


# =====================================================
# Ranking calculator
# =====================================================

class RankingCalculator:
    """Qualification ranking over a tournament's score snapshot"""

    def __init__(self, data_file: str = None):
        self.entries: List[ArcherScores] = []

        if data_file:
            self.load_data(data_file)

    def load_data(self, data_file: str):
        """Load a JSON snapshot"""
        with open(data_file, "r", encoding="utf-8") as f:
            self.load_from_data(json.load(f))

    def load_from_data(self, data: Dict[str, Any]):
        """
        Load from an in-memory snapshot

        Args:
            data: {"archers": [...], "scores": {archer_id: [arrow, ...]}}
        """
        scores = data.get("scores", {})
        self.entries = [
            ArcherScores(archer=Archer(**row), scores=scores.get(row["id"], []))
            for row in data.get("archers", [])
        ]
        logger.info(f"Loaded scores for {len(self.entries)} archers")

    def add(self, archer: Archer, scores: Sequence[Optional[int]]):
        self.entries.append(ArcherScores(archer=archer, scores=list(scores)))

    def calculate_rankings(self, category: str = None, gender: str = None) -> List[RankedArcher]:
        """
        Rank archers, optionally filtered

        Args:
            category: age category filter (u10 ... open)
            gender: gender filter (male/female)
        """
        filtered = self.entries
        if category:
            filtered = [e for e in filtered if e.archer.age_category == category]
        if gender:
            filtered = [e for e in filtered if e.archer.gender == gender]
        return rank_archers(filtered)

    def get_all_rankings(self) -> Dict[str, List[RankedArcher]]:
        """
        Rankings for every category / gender present

        Returns:
            {"category-gender": [rankings]}
        """
        all_rankings = {}
        for key, ranked in group_for_elimination(self.entries).items():
            all_rankings[key] = ranked
            logger.info(f"{key}: {len(ranked)} archers")
        return all_rankings

    def export_rankings(self, output_file: str):
        """Write every ranking to JSON"""
        export_data = {
            key: [r.to_dict() for r in ranked]
            for key, ranked in self.get_all_rankings().items()
        }
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(export_data, f, ensure_ascii=False, indent=2)

        logger.info(f"Rankings exported: {output_file}")

    def print_ranking_summary(self, rankings: List[RankedArcher], title: str = "", top_n: int = 20):
        """Print a ranking table"""
        print(f"\n{'='*56}")
        print(f" {title}")
        print(f"{'='*56}")
        print(f"{'Seed':>4} {'Name':<28} {'Total':>7} {'10+X':>5} {'X':>4}")
        print(f"{'-'*56}")

        for r in rankings[:top_n]:
            name = f"{r.first_name} {r.last_name}".strip() or r.archer_id
            if len(name) > 26:
                name = name[:26] + ".."
            print(f"{r.seed:>4} {name:<28} {r.total_score:>7} {r.ten_count:>5} {r.x_count:>4}")
