"""
End-to-end tests: registration to podium, and the command line
"""

import json
import pytest

import main
from ranking import RankingCalculator
from tournament import (
    apply_match_result,
    build_bracket,
    check_club_conflicts,
    generate_assignments,
    get_round_name,
    record_set,
    resolve_shootoff,
)


def archer_row(archer_id, gender="male", club=None):
    return {
        "id": archer_id,
        "first_name": archer_id.upper(),
        "last_name": "Test",
        "club": club,
        "age_category": "senior",
        "gender": gender,
    }


@pytest.fixture
def snapshot():
    """Six men and two women with distinct totals"""
    archers = [archer_row(f"m{i}", club="Club A" if i % 2 else "Club B") for i in range(1, 7)]
    archers += [archer_row("w1", "female"), archer_row("w2", "female")]
    scores = {f"m{i}": [10] * (10 - i) for i in range(1, 7)}
    scores["w1"] = [9, 9]
    scores["w2"] = [11, 10]
    return {"archers": archers, "scores": scores}


class TestTournamentFlow:
    """Full competition through the engine"""

    def test_qualification_to_final(self, snapshot):
        calculator = RankingCalculator()
        calculator.load_from_data(snapshot)
        archers = [entry.archer for entry in calculator.entries]

        plan = generate_assignments(archers, "outdoor")
        assert plan.target_count == 3
        assert check_club_conflicts(plan.assignments, archers) == [1]

        ranked = calculator.calculate_rankings(category="senior", gender="male")
        assert [r.archer_id for r in ranked] == ["m1", "m2", "m3", "m4", "m5", "m6"]

        bracket = build_bracket(ranked, "senior", "male")
        matches = bracket.matches
        assert bracket.bracket_size == 8

        # 1 and 2 drew byes; 4 v 5 and 3 v 6 are shot
        for position in (2, 3):
            match = next(m for m in matches if m.key == (1, position))
            decided = record_set(match, [10, 10, 10], [9, 9, 9], 1, points_to_win=2).match
            matches = apply_match_result(decided, matches)

        semis = [m for m in matches if m.round_number == 2]
        assert [(m.archer1_id, m.archer2_id) for m in semis] == [("m1", "m4"), ("m3", "m2")]

        # Semifinal 1 goes the distance and is settled by a shoot-off
        semi1 = semis[0]
        for number in range(1, 6):
            semi1 = record_set(semi1, [8, 8, 8], [8, 8, 8], number).match
        assert semi1.status == "shootoff"
        semi1 = resolve_shootoff(semi1, 10, 10, archer1_distance=4.0, archer2_distance=2.5).match
        matches = apply_match_result(semi1, matches)

        semi2 = next(m for m in matches if m.key == (2, 2))
        semi2 = record_set(semi2, [9, 9, 9], [10, 10, 10], 1, points_to_win=2).match
        matches = apply_match_result(semi2, matches)

        final = next(m for m in matches if m.key == (3, 1))
        bronze = next(m for m in matches if m.key == (0, 1))
        assert (final.archer1_id, final.archer2_id) == ("m4", "m2")
        assert (bronze.archer1_id, bronze.archer2_id) == ("m1", "m3")
        assert get_round_name(bracket.bracket_size, final.round_number) == "Final"


class TestCommandLine:
    """main.py subcommands"""

    def test_assign(self, snapshot, tmp_path):
        source = tmp_path / "archers.json"
        source.write_text(json.dumps(snapshot["archers"]), encoding="utf-8")
        output = tmp_path / "plan.json"

        assert main.main(["assign", str(source), "--type", "indoor", "-o", str(output), "-q"]) == 0

        plan = json.loads(output.read_text(encoding="utf-8"))
        assert plan["target_count"] == 3
        assert plan["club_conflicts"] == [1]
        assert plan["can_save"] is True

    def test_assign_type_from_tournament(self, snapshot, tmp_path):
        """Tournament record in the file picks indoor distances"""
        source = tmp_path / "archers.json"
        source.write_text(json.dumps({
            "tournament": {"id": "t1", "name": "Copa Indoor", "type": "indoor"},
            "archers": snapshot["archers"],
        }), encoding="utf-8")
        output = tmp_path / "plan.json"

        assert main.main(["assign", str(source), "--start", "5", "-o", str(output), "-q"]) == 0

        plan = json.loads(output.read_text(encoding="utf-8"))
        assert {a["distance"] for a in plan["assignments"]} == {18}
        assert min(a["target_number"] for a in plan["assignments"]) == 5

    def test_rank(self, snapshot, tmp_path):
        source = tmp_path / "snapshot.json"
        source.write_text(json.dumps(snapshot), encoding="utf-8")
        output = tmp_path / "rankings.json"

        assert main.main(["rank", str(source), "--gender", "female", "-o", str(output), "-q"]) == 0

        rankings = json.loads(output.read_text(encoding="utf-8"))
        assert [r["archer_id"] for r in rankings["all-female"]] == ["w2", "w1"]

    def test_bracket(self, snapshot, tmp_path):
        source = tmp_path / "snapshot.json"
        source.write_text(json.dumps(snapshot), encoding="utf-8")
        output = tmp_path / "bracket.json"

        code = main.main([
            "bracket", str(source), "--category", "senior", "--gender", "female",
            "-o", str(output), "-q",
        ])
        assert code == 0

        bracket = json.loads(output.read_text(encoding="utf-8"))
        assert bracket["bracket_size"] == 8
        semi1 = next(m for m in bracket["matches"] if (m["round_number"], m["match_position"]) == (2, 1))
        assert semi1["archer1_id"] == "w2"

    def test_engine_error_exit_code(self, snapshot, tmp_path):
        """Not enough archers exits with 1"""
        source = tmp_path / "snapshot.json"
        source.write_text(json.dumps(snapshot), encoding="utf-8")

        code = main.main(["bracket", str(source), "--category", "u10", "--gender", "male", "-q"])
        assert code == 1
