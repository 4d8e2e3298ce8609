"""
Unit tests for MatchStateMachine.

Covers the phase lifecycle, hole recording, navigation within the
frontier, history edits with full replay, and that a rejected call
leaves the state exactly as it was.
"""

import pytest

from rrgolf.errors import (
    BeyondFrontierError,
    DuplicateNameError,
    EmptyNameError,
    HoleOutOfRangeError,
    IncompleteResultError,
    InvalidPairingError,
    MatchNotInProgressError,
    UnknownPlayerError,
    WrongPlayerCountError,
    WrongResultCountError,
)
from rrgolf.match.models import INITIAL_STATE, Matchup, Player
from rrgolf.match.state_machine import MatchStateMachine

NAMES = ["Alice", "Bob", "Charlie", "David"]


def _resolve(matchups, first, second):
    return [matchups[0].with_result(first), matchups[1].with_result(second)]


def _play(machine, count, first="player1", second="player2"):
    for _ in range(count):
        machine.record_hole_result(_resolve(machine.current_matchups(), first, second))


def _points(machine):
    return {p.name: p.points for p in machine.state.players}


class TestStartMatch:
    """Tests for start_match and the setup phase."""

    def test_starts_scoring(self, machine):
        state = machine.start_match(NAMES)
        assert state.phase == "scoring"
        assert state.current_hole == 1
        assert state.max_hole_reached == 1
        assert [p.name for p in state.players] == NAMES
        assert state.hole_results == ()

    def test_trims_names(self, machine):
        state = machine.start_match([" Alice", "Bob ", "Charlie", "David"])
        assert state.players[0].name == "Alice"
        assert state.players[1].name == "Bob"

    @pytest.mark.parametrize("names", [NAMES[:3], NAMES + ["Eve"], []])
    def test_wrong_count(self, machine, names):
        with pytest.raises(WrongPlayerCountError):
            machine.start_match(names)

    def test_duplicate_names_leave_setup(self, machine):
        with pytest.raises(DuplicateNameError):
            machine.start_match(["Alice", "Bob", "Alice", "David"])
        assert machine.state.phase == "setup"
        assert machine.state == INITIAL_STATE

    def test_duplicate_after_trim(self, machine):
        with pytest.raises(DuplicateNameError):
            machine.start_match(["Alice", "Alice ", "Charlie", "David"])

    def test_empty_name(self, machine):
        with pytest.raises(EmptyNameError):
            machine.start_match(["Alice", "  ", "Charlie", "David"])

    def test_setup_queries(self, machine):
        assert machine.current_matchups() == (None, None)
        assert machine.get_matchups_for_hole(1) == [None, None]
        assert machine.calculate_stats() == []

    def test_record_in_setup_rejected(self, machine):
        with pytest.raises(MatchNotInProgressError):
            machine.record_hole_result([])

    def test_update_in_setup_rejected(self, machine):
        matchup = Matchup(player1=Player(name="A"), player2=Player(name="B"), result="draw")
        with pytest.raises(MatchNotInProgressError):
            machine.update_hole_result(1, [matchup, matchup])


class TestRecordHoleResult:
    """Tests for record_hole_result."""

    def test_advances_hole(self, started):
        first, second = started.current_matchups()
        state = started.record_hole_result([first.with_result("player1"), second.with_result("draw")])

        assert state.current_hole == 2
        assert state.max_hole_reached == 2
        assert len(state.hole_results) == 1
        assert state.hole_results[0].hole_number == 1
        assert _points(started) == {"Alice": 3, "Bob": 0, "Charlie": 1, "David": 1}

    def test_wrong_result_count(self, started):
        first, _ = started.current_matchups()
        before = started.state
        with pytest.raises(WrongResultCountError):
            started.record_hole_result([first.with_result("player1")])
        assert started.state is before

    def test_incomplete_result(self, started):
        first, second = started.current_matchups()
        before = started.state
        with pytest.raises(IncompleteResultError):
            started.record_hole_result([first.with_result("player1"), second])
        assert started.state is before

    def test_unknown_player_leaves_state(self, started):
        first, second = started.current_matchups()
        stranger = Matchup(player1=Player(name="Eve"), player2=first.player2, result="player1")
        before = started.state
        with pytest.raises(UnknownPlayerError):
            started.record_hole_result([stranger, second.with_result("draw")])
        assert started.state is before

    def test_matchups_must_pair_four_distinct_players(self, started):
        alice, bob, charlie, _ = started.state.players
        lopsided = [
            Matchup(player1=alice, player2=alice, result="player1"),
            Matchup(player1=bob, player2=charlie, result="draw"),
        ]
        before = started.state

        with pytest.raises(InvalidPairingError):
            started.record_hole_result(lopsided)
        assert started.state is before

        _play(started, 1)
        with pytest.raises(InvalidPairingError):
            started.update_hole_result(1, lopsided)
        assert started.player_thru("David") == 1

    def test_scenario_alice_wins_every_hole(self, started):
        _play(started, 18, "player1", "player2")

        state = started.state
        alice = state.find_player("Alice")
        assert state.phase == "complete"
        assert state.current_hole == 18
        assert state.max_hole_reached == 18
        assert alice.points == 54
        assert alice.wins == 18

    def test_scenario_all_draws(self, started):
        _play(started, 18, "draw", "draw")

        for player in started.state.players:
            assert (player.points, player.draws, player.wins, player.losses) == (18, 18, 0, 0)

    def test_no_recording_after_complete(self, started):
        _play(started, 18)
        with pytest.raises(MatchNotInProgressError):
            started.record_hole_result([])
        assert started.current_matchups() == (None, None)

    def test_rescoring_after_navigating_back_replaces(self, started):
        _play(started, 3, "player1", "player1")
        started.navigate_to_hole(2)
        _play(started, 1, "draw", "draw")

        state = started.state
        assert state.current_hole == 3
        assert state.max_hole_reached == 4
        assert [h.hole_number for h in state.hole_results] == [1, 2, 3]
        for player in state.players:
            assert player.holes_completed == 3


class TestNavigation:
    """Tests for navigate_to_hole and get_matchups_for_hole."""

    def test_scenario_frontier(self, started):
        _play(started, 3)
        assert started.state.max_hole_reached == 4

        with pytest.raises(BeyondFrontierError):
            started.navigate_to_hole(5)

        state = started.navigate_to_hole(2)
        assert state.current_hole == 2
        assert state.max_hole_reached == 4

    def test_navigation_keeps_results(self, started):
        _play(started, 3)
        before = started.state
        after = started.navigate_to_hole(1)
        assert after.hole_results == before.hole_results
        assert after.players == before.players

    @pytest.mark.parametrize("hole", [0, 19])
    def test_out_of_range(self, started, hole):
        with pytest.raises(HoleOutOfRangeError):
            started.navigate_to_hole(hole)
        with pytest.raises(HoleOutOfRangeError):
            started.get_matchups_for_hole(hole)

    def test_stored_matchups_for_scored_hole(self, started):
        _play(started, 1, "player2", "draw")
        stored = started.get_matchups_for_hole(1)
        assert [m.result for m in stored] == ["player2", "draw"]

    def test_fresh_matchups_for_unscored_hole(self, started):
        fresh = started.get_matchups_for_hole(5)
        assert [m.result for m in fresh] == [None, None]
        assert (fresh[0].player1.name, fresh[0].player2.name) == ("Alice", "Charlie")


class TestUpdateHoleResult:
    """Tests for update_hole_result and replay."""

    def test_scenario_edit_hole_one(self, started):
        _play(started, 1, "player1", "draw")
        _play(started, 2, "draw", "draw")
        before = started.state
        alice_before = before.find_player("Alice").points

        drawn = _resolve(started.get_matchups_for_hole(1), "draw", "draw")
        after = started.update_hole_result(1, drawn)

        assert after.find_player("Alice").points == alice_before - 2
        assert after.current_hole == before.current_hole
        assert after.max_hole_reached == before.max_hole_reached

    def test_update_then_get_round_trip(self, started):
        _play(started, 4)
        edited = _resolve(started.get_matchups_for_hole(3), "player2", "draw")
        started.update_hole_result(3, edited)
        assert started.get_matchups_for_hole(3) == edited

    def test_insert_missing_hole_within_frontier(self, started):
        _play(started, 2)
        started.navigate_to_hole(3)
        fresh = _resolve(started.get_matchups_for_hole(3), "draw", "draw")
        state = started.update_hole_result(3, fresh)
        assert [h.hole_number for h in state.hole_results] == [1, 2, 3]
        assert state.current_hole == 3

    def test_beyond_frontier(self, started):
        _play(started, 2)
        fresh = _resolve(started.get_matchups_for_hole(5), "draw", "draw")
        with pytest.raises(BeyondFrontierError):
            started.update_hole_result(5, fresh)

    def test_validation_order(self, started):
        with pytest.raises(HoleOutOfRangeError):
            started.update_hole_result(0, [])
        with pytest.raises(WrongResultCountError):
            started.update_hole_result(1, [])

    def test_edit_after_complete(self, started):
        _play(started, 18, "player1", "player2")
        edited = _resolve(started.state.hole_result(18).matchups, "draw", "draw")
        state = started.update_hole_result(18, edited)
        assert state.phase == "complete"
        assert state.find_player("Alice").points == 54 - 2

    def test_replay_matches_incremental(self, started):
        _play(started, 6, "player1", "draw")
        incremental = started.state.players
        state = started.recalculate_stats()
        assert state.players == incremental

    def test_points_and_results_stay_consistent(self, started):
        _play(started, 5, "player1", "player2")
        started.navigate_to_hole(2)
        _play(started, 1, "draw", "player1")
        started.update_hole_result(4, _resolve(started.get_matchups_for_hole(4), "player2", "draw"))
        started.navigate_to_hole(6)
        _play(started, 3, "draw", "draw")
        started.update_hole_result(1, _resolve(started.get_matchups_for_hole(1), "draw", "player2"))

        state = started.state
        assert [h.hole_number for h in state.hole_results] == list(range(1, 9))
        for player in state.players:
            assert player.points == 3 * player.wins + player.draws
            assert started.player_thru(player.name) == 8
        assert sum(p.wins for p in state.players) == sum(p.losses for p in state.players)
        assert state.players == started.recalculate_stats().players


class TestQueriesAndListeners:
    """Tests for stats, listeners, share code and reset."""

    def test_calculate_stats_ranked(self, started):
        _play(started, 1, "player2", "player1")
        ranked = [p.name for p in started.calculate_stats()]
        assert ranked == ["Bob", "Charlie", "Alice", "David"]

    def test_player_thru(self, started):
        _play(started, 5)
        assert started.player_thru("Charlie") == 5
        with pytest.raises(UnknownPlayerError):
            started.player_thru("Eve")

    def test_listeners_receive_commits(self, machine):
        seen = []
        machine.subscribe(seen.append)
        machine.start_match(NAMES)
        with pytest.raises(DuplicateNameError):
            machine.start_match(["A", "A", "B", "C"])
        machine.unsubscribe(seen.append)
        machine.reset_match_state()

        assert len(seen) == 1
        assert seen[0].phase == "scoring"

    def test_failing_listener_does_not_block(self, machine):
        def broken(_state):
            raise RuntimeError("boom")

        machine.subscribe(broken)
        state = machine.start_match(NAMES)
        assert machine.state is state

    def test_set_share_code(self, started):
        assert started.set_share_code("0427").share_code == "0427"

    def test_reset_returns_fresh_initial_state(self, started):
        _play(started, 2)
        state = started.reset_match_state()
        assert state == INITIAL_STATE
        assert state is not INITIAL_STATE

    def test_load_state(self, started):
        _play(started, 3)
        snapshot = started.state
        other = MatchStateMachine()
        other.load_state(snapshot)
        assert other.state == snapshot
        assert other.current_matchups()[0].player1.name == "Alice"
