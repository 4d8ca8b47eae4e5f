"""
Unit tests for the match / set engine
Tests: set scoring, state machine, shoot-offs, advancement, bronze match
"""

import pytest

from tournament.brackets import BracketMatch, build_bracket
from tournament.config import competition_config
from tournament.exceptions import AdvancementError, InvalidScoreError, MatchStateError
from tournament.matches import (
    advance_winner,
    apply_match_result,
    place_semifinal_loser,
    record_set,
    replay_sets,
    resolve_shootoff,
    score_set,
)
from tournament.models import MatchSet


WIN = [10, 10, 10]
LOSE = [9, 9, 9]
TIE = [8, 8, 8]


def new_match(**overrides):
    values = dict(
        round_number=1, match_position=1,
        archer1_id="a", archer2_id="b",
        archer1_seed=1, archer2_seed=8,
        next_match_position=1,
    )
    values.update(overrides)
    return BracketMatch(**values)


def play(match, sets):
    """Record (archer1, archer2) arrow pairs in order"""
    for number, (arrows1, arrows2) in enumerate(sets, 1):
        match = record_set(match, arrows1, arrows2, number).match
    return match


def win_for_archer1(match):
    return play(match, [(WIN, LOSE)] * 3)


def find(matches, round_number, position):
    return next(m for m in matches if m.round_number == round_number and m.match_position == position)


class TestScoreSet:
    """Single set comparison"""

    def test_win(self):
        result = score_set(WIN, LOSE)
        assert (result.archer1_points, result.archer2_points) == (2, 0)
        assert (result.archer1_total, result.archer2_total) == (30, 27)

    def test_tie(self):
        result = score_set(TIE, TIE)
        assert (result.archer1_points, result.archer2_points) == (1, 1)

    def test_x_counts_ten(self):
        """X X X equals 10 10 10"""
        result = score_set([11, 11, 11], WIN)
        assert (result.archer1_points, result.archer2_points) == (1, 1)

    def test_invalid_arrow(self):
        with pytest.raises(InvalidScoreError):
            score_set([10, 10, 12], WIN)


class TestRecordSet:
    """Set recording and match status"""

    def test_first_set_starts_match(self):
        outcome = record_set(new_match(), WIN, LOSE, 1)
        assert outcome.match.status == "in_progress"
        assert (outcome.match.archer1_set_points, outcome.match.archer2_set_points) == (2, 0)
        assert not outcome.is_decided

    def test_match_set_record(self):
        """Confirmed set row with both results"""
        outcome = record_set(new_match(), TIE, TIE, 1)
        assert outcome.match_set.set_number == 1
        assert outcome.match_set.archer1_arrows == TIE
        assert (outcome.match_set.archer1_set_result, outcome.match_set.archer2_set_result) == (1, 1)
        assert outcome.match_set.is_confirmed
        assert not outcome.match_set.is_shootoff

    def test_input_untouched(self):
        match = new_match()
        record_set(match, WIN, LOSE, 1)
        assert match.archer1_set_points == 0
        assert match.status == "pending"

    def test_six_points_wins(self):
        match = win_for_archer1(new_match())
        assert match.status == "completed"
        assert match.winner_id == "a"
        assert match.archer1_set_points == 6

    def test_archer2_can_win(self):
        match = play(new_match(), [(LOSE, WIN), (TIE, TIE), (LOSE, WIN), (LOSE, WIN)])
        assert match.winner_id == "b"
        assert (match.archer1_set_points, match.archer2_set_points) == (1, 7)

    def test_five_all_goes_to_shootoff(self):
        """Five tied sets leave 5-5"""
        match = play(new_match(), [(TIE, TIE)] * 5)
        assert match.status == "shootoff"
        assert match.winner_id is None
        assert (match.archer1_set_points, match.archer2_set_points) == (5, 5)

    def test_not_level_after_last_set(self):
        """Leader wins when sets run out without a tie"""
        match = new_match()
        for number, (arrows1, arrows2) in enumerate([(WIN, LOSE), (TIE, TIE), (TIE, TIE)], 1):
            match = record_set(match, arrows1, arrows2, number, max_sets=3).match
        assert match.status == "completed"
        assert match.winner_id == "a"

    def test_level_after_custom_last_set(self):
        """3-3 after three of three sets is a shoot-off too"""
        match = play(new_match(), [(TIE, TIE)] * 2)
        match = record_set(match, TIE, TIE, 3, max_sets=3).match
        assert (match.archer1_set_points, match.archer2_set_points) == (3, 3)
        assert match.status == "shootoff"

    def test_too_many_arrows_rejected(self):
        """A set holds three arrows per side"""
        with pytest.raises(InvalidScoreError):
            record_set(new_match(), [10] * 7, [9], 1)

    def test_custom_arrows_per_set(self):
        match = record_set(new_match(), [10] * 6, [9] * 6, 1, arrows_per_set=6).match
        assert match.archer1_set_points == 2

    def test_partial_set_accepted(self):
        """Fewer arrows than the set holds still score"""
        result = record_set(new_match(), [10], [9, 9], 1).set_result
        assert (result.archer1_total, result.archer2_total) == (10, 18)

    def test_custom_points_to_win(self):
        match = record_set(new_match(), WIN, LOSE, 1, points_to_win=2).match
        assert match.winner_id == "a"

    def test_points_to_win_from_settings(self, monkeypatch):
        """Unset threshold comes from the settings, a passed one wins over them"""
        monkeypatch.setattr(competition_config, "points_to_win", 2)
        assert record_set(new_match(), WIN, LOSE, 1).match.status == "completed"
        assert record_set(new_match(), WIN, LOSE, 1, points_to_win=6).match.status == "in_progress"

    def test_completed_match_rejected(self):
        match = win_for_archer1(new_match())
        with pytest.raises(MatchStateError):
            record_set(match, WIN, LOSE, 4)

    def test_shootoff_match_rejects_sets(self):
        match = play(new_match(), [(TIE, TIE)] * 5)
        with pytest.raises(MatchStateError):
            record_set(match, WIN, LOSE, 6)

    def test_missing_archer_rejected(self):
        with pytest.raises(MatchStateError):
            record_set(new_match(archer2_id=None), WIN, LOSE, 1)


class TestShootoff:
    """Single-arrow shoot-off"""

    @pytest.fixture
    def tied(self):
        return play(new_match(), [(TIE, TIE)] * 5)

    def test_higher_arrow_wins(self, tied):
        outcome = resolve_shootoff(tied, 9, 10)
        assert outcome.match.status == "completed"
        assert outcome.match.winner_id == "b"
        assert outcome.match_set.is_shootoff
        assert outcome.match_set.set_number == 99

    def test_x_against_ten_needs_measurement(self, tied):
        """X and 10 are level in a shoot-off without distances"""
        with pytest.raises(MatchStateError):
            resolve_shootoff(tied, 11, 10)

    def test_closest_to_centre_wins(self, tied):
        outcome = resolve_shootoff(tied, 10, 10, archer1_distance=1.5, archer2_distance=3.0)
        assert outcome.match.winner_id == "a"
        assert outcome.match_set.shootoff_archer1_distance == 1.5

    def test_equal_distances_rejected(self, tied):
        with pytest.raises(MatchStateError):
            resolve_shootoff(tied, 10, 10, archer1_distance=2.0, archer2_distance=2.0)

    def test_requires_shootoff_status(self):
        with pytest.raises(MatchStateError):
            resolve_shootoff(new_match(), 10, 9)

    def test_invalid_arrow(self, tied):
        with pytest.raises(InvalidScoreError):
            resolve_shootoff(tied, 12, 9)


class TestReplaySets:
    """Set point recomputation"""

    def test_confirmed_sets_only(self):
        sets = [
            MatchSet(set_number=1, archer1_set_result=2, archer2_set_result=0, is_confirmed=True),
            MatchSet(set_number=2, archer1_set_result=1, archer2_set_result=1, is_confirmed=True),
            MatchSet(set_number=3, archer1_set_result=0, archer2_set_result=2, is_confirmed=False),
            MatchSet(set_number=99, is_shootoff=True, is_confirmed=True),
        ]
        match = replay_sets(new_match(archer1_set_points=9), sets)
        assert (match.archer1_set_points, match.archer2_set_points) == (3, 1)


class TestAdvancement:
    """Winners into the next round, losers into bronze"""

    @pytest.fixture
    def bracket(self, ranked_factory):
        return build_bracket(ranked_factory(8), "senior", "male").matches

    def test_odd_match_fills_archer1(self, bracket):
        decided = win_for_archer1(find(bracket, 1, 1))
        updated = advance_winner(decided, bracket)
        assert updated.key == (2, 1)
        assert (updated.archer1_id, updated.archer1_seed) == ("a1", 1)
        assert updated.archer2_id is None

    def test_even_match_fills_archer2(self, bracket):
        decided = win_for_archer1(find(bracket, 1, 2))
        updated = advance_winner(decided, bracket)
        assert (updated.archer2_id, updated.archer2_seed) == ("a4", 4)

    def test_undecided_match_rejected(self, bracket):
        with pytest.raises(AdvancementError):
            advance_winner(find(bracket, 1, 1), bracket)

    def test_missing_next_match(self, bracket):
        decided = win_for_archer1(find(bracket, 1, 1))
        with pytest.raises(AdvancementError):
            advance_winner(decided, [m for m in bracket if m.round_number == 1])

    def test_occupied_slot_rejected(self, bracket):
        """A different archer already holds the slot"""
        decided = win_for_archer1(find(bracket, 1, 1))
        occupied = [
            m if m.key != (2, 1) else BracketMatch(2, 1, archer1_id="intruder", next_match_position=1)
            for m in bracket
        ]
        with pytest.raises(AdvancementError):
            advance_winner(decided, occupied)

    def test_final_has_no_next_match(self):
        final = win_for_archer1(new_match(round_number=3, next_match_position=None))
        assert advance_winner(final, [final]) is None

    def test_apply_match_result(self, bracket):
        """Match and next match replaced, order kept"""
        decided = win_for_archer1(find(bracket, 1, 3))
        updated = apply_match_result(decided, bracket)

        assert [m.key for m in updated] == [m.key for m in bracket]
        assert find(updated, 1, 3).winner_id == "a3"
        assert find(updated, 2, 2).archer1_id == "a3"
        assert find(bracket, 2, 2).archer1_id is None

    def test_full_bracket_run(self, bracket):
        """Play every match: top seeds reach the final, semifinal losers meet for bronze"""
        matches = bracket
        for round_number in (1, 2):
            for match in [m for m in matches if m.round_number == round_number]:
                matches = apply_match_result(win_for_archer1(find(matches, *match.key)), matches)

        final = find(matches, 3, 1)
        assert (final.archer1_id, final.archer2_id) == ("a1", "a3")

        bronze = find(matches, 0, 1)
        assert (bronze.archer1_id, bronze.archer2_id) == ("a4", "a2")

        final = win_for_archer1(final)
        matches = apply_match_result(final, matches)
        assert find(matches, 3, 1).winner_id == "a1"

    def test_semifinal_loser_only(self, bracket):
        """Non-semifinal matches do not touch the bronze match"""
        decided = win_for_archer1(find(bracket, 1, 1))
        assert place_semifinal_loser(decided, bracket) is None


class TestSmallBrackets:
    """Brackets with fewer than four archers still reach a winner"""

    def test_three_archers(self, ranked_factory):
        """Seed 1 walks over to the final, seeds 2 and 3 shoot the other semifinal"""
        matches = build_bracket(ranked_factory(3), "senior", "male").matches

        semi1 = find(matches, 2, 1)
        assert semi1.status == "completed"
        assert semi1.winner_id == "a1"
        assert find(matches, 3, 1).archer1_id == "a1"
        assert find(matches, 1, 2).winner_id is None

        semi2 = find(matches, 2, 2)
        assert (semi2.archer1_id, semi2.archer2_id) == ("a3", "a2")
        matches = apply_match_result(win_for_archer1(semi2), matches)

        final = find(matches, 3, 1)
        assert (final.archer1_id, final.archer2_id) == ("a1", "a3")
        matches = apply_match_result(win_for_archer1(final), matches)
        assert find(matches, 3, 1).winner_id == "a1"

    def test_two_archers(self, ranked_factory):
        """Both semifinals are walkovers and the final is set at generation"""
        matches = build_bracket(ranked_factory(2), "senior", "male").matches

        assert all(find(matches, 2, p).status == "completed" for p in (1, 2))
        final = find(matches, 3, 1)
        assert (final.archer1_id, final.archer2_id) == ("a1", "a2")
        assert (final.archer1_seed, final.archer2_seed) == (1, 2)

        final = play(final, [(LOSE, WIN)] * 3)
        assert final.winner_id == "a2"

    def test_no_bronze_without_two_semifinals(self, ranked_factory):
        for count in (2, 3):
            matches = build_bracket(ranked_factory(count), "senior", "male").matches
            assert not [m for m in matches if m.round_number == 0]
