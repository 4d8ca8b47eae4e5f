"""
Archery tournament engine command line
"""
import json
import sys
from typing import Any, Dict, List, Optional
from loguru import logger

from data_pipeline import AssignmentValidator
from ranking import RankingCalculator
from tournament import (
    Archer,
    Tournament,
    build_bracket,
    check_club_conflicts,
    generate_assignments,
    get_group_label,
    get_round_name,
)
from tournament.exceptions import TournamentEngineError


# Logging setup
logger.remove()
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level="INFO"
)
logger.add(
    "logs/archery_{time:YYYY-MM-DD}.log",
    rotation="1 day",
    retention="30 days",
    level="DEBUG"
)


def load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_output(data: Dict[str, Any], output: Optional[str]):
    """Write JSON to a file, or stdout when no file is given"""
    text = json.dumps(data, ensure_ascii=False, indent=2)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info(f"Saved: {output}")
    else:
        print(text)


# =====================================================
# Commands
# =====================================================

def run_assign(args) -> Dict[str, Any]:
    """Archers file -> assignment plan with club conflicts"""
    data = load_json(args.archers)
    rows: List[Dict[str, Any]] = data["archers"] if isinstance(data, dict) else data
    archers = [Archer(**row) for row in rows]

    tournament_type = args.type
    if tournament_type is None and isinstance(data, dict) and data.get("tournament"):
        tournament = Tournament(**data["tournament"])
        tournament_type = tournament.type
        logger.info(f"{tournament.name}: {tournament_type} tournament")

    plan = generate_assignments(archers, tournament_type or "outdoor", start_target_number=args.start)
    conflicts = check_club_conflicts(plan.assignments, archers)
    validation = AssignmentValidator().validate(plan, archers)

    if conflicts:
        logger.warning(f"Club conflicts on targets: {conflicts}")

    result = plan.to_dict()
    result["club_conflicts"] = conflicts
    result["can_save"] = validation.can_save
    return result


def run_rank(args) -> Dict[str, Any]:
    """Score snapshot -> ranking tables"""
    calculator = RankingCalculator(args.snapshot)

    if args.category or args.gender:
        key = f"{args.category or 'all'}-{args.gender or 'all'}"
        rankings = {key: calculator.calculate_rankings(args.category, args.gender)}
    else:
        rankings = calculator.get_all_rankings()

    if not args.quiet:
        for key, ranked in rankings.items():
            category, gender = key.split("-")
            title = get_group_label(category if category != "all" else "All", gender if gender != "all" else None)
            calculator.print_ranking_summary(ranked, title=title, top_n=args.top)

    return {key: [r.to_dict() for r in ranked] for key, ranked in rankings.items()}


def run_bracket(args) -> Dict[str, Any]:
    """Score snapshot -> elimination bracket with byes resolved"""
    calculator = RankingCalculator(args.snapshot)
    ranked = calculator.calculate_rankings(args.category, args.gender)

    bracket = build_bracket(
        ranked,
        args.category,
        args.gender,
        top_n=args.top_n,
        include_bronze=not args.no_bronze,
    )

    if not args.quiet:
        for round_number in range(1, bracket.total_rounds + 1):
            matches = bracket.matches_in_round(round_number)
            logger.info(f"{get_round_name(bracket.bracket_size, round_number)}: {len(matches)} matches")

    return bracket.to_dict()


COMMANDS = {
    "assign": run_assign,
    "rank": run_rank,
    "bracket": run_bracket,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point"""
    import argparse

    parser = argparse.ArgumentParser(description="Archery tournament competition engine")
    subparsers = parser.add_subparsers(dest="command", required=True)

    assign = subparsers.add_parser("assign", help="Assign archers to targets")
    assign.add_argument("archers", help="JSON file with archer records")
    assign.add_argument("--type", choices=["indoor", "outdoor"], default=None, help="Tournament type (default: from the file, else outdoor)")
    assign.add_argument("--start", type=int, default=None, help="First target number")

    rank = subparsers.add_parser("rank", help="Rank qualification scores")
    rank.add_argument("snapshot", help="JSON file with archers and scores")
    rank.add_argument("--category", help="Age category filter")
    rank.add_argument("--gender", choices=["male", "female"], help="Gender filter")
    rank.add_argument("--top", type=int, default=20, help="Rows printed per ranking")

    bracket = subparsers.add_parser("bracket", help="Generate an elimination bracket")
    bracket.add_argument("snapshot", help="JSON file with archers and scores")
    bracket.add_argument("--category", required=True, help="Age category")
    bracket.add_argument("--gender", required=True, choices=["male", "female"], help="Gender")
    bracket.add_argument("--top-n", type=int, default=None, help="Only the top N seeds qualify")
    bracket.add_argument("--no-bronze", action="store_true", help="Skip the bronze match")

    for sub in (assign, rank, bracket):
        sub.add_argument("--output", "-o", help="Output JSON file")
        sub.add_argument("--quiet", "-q", action="store_true", help="No console tables")

    args = parser.parse_args(argv)

    try:
        result = COMMANDS[args.command](args)
    except TournamentEngineError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1

    write_output(result, args.output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
