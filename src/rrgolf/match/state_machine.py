"""
Authoritative in-memory match state.

Phases:  setup -> scoring -> complete   (reset returns to setup from anywhere)

Every public mutator validates first and then swaps in a complete new
MatchState, so a failing call leaves the state untouched. After each
successful swap the new snapshot is handed to subscribed listeners; the
persistence layer subscribes here instead of being called inline.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional, Sequence

from rrgolf.errors import (
    BeyondFrontierError,
    DuplicateNameError,
    EmptyNameError,
    HoleOutOfRangeError,
    IncompleteResultError,
    MatchNotInProgressError,
    UnknownPlayerError,
    WrongPlayerCountError,
    WrongResultCountError,
)
from rrgolf.match.models import (
    HOLE_COUNT,
    MATCHUPS_PER_HOLE,
    PLAYER_COUNT,
    HoleResult,
    Matchup,
    MatchState,
    Player,
    initial_state,
)
from rrgolf.match.rotation import create_matchups_for_hole
from rrgolf.match.scoring import (
    create_player,
    holes_completed,
    process_hole,
    rank,
    replay_holes,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[MatchState], None]
NoMatchups = tuple[None, None]


class MatchStateMachine:
    """
    Owns one match and applies validated transitions to it.

    Usage:
        machine = MatchStateMachine()
        machine.start_match(["Alice", "Bob", "Charlie", "David"])

        first, second = machine.current_matchups()
        machine.record_hole_result([
            first.with_result("player1"),
            second.with_result("draw"),
        ])

        for player in machine.calculate_stats():
            print(player.name, player.points)
    """

    def __init__(self, state: Optional[MatchState] = None):
        self._state = state if state is not None else initial_state()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> MatchState:
        return self._state

    # =========================================================
    # LISTENERS
    # =========================================================

    def subscribe(self, listener: StateListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _commit(self, new_state: MatchState) -> MatchState:
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                # The transition has already happened; a listener cannot undo it.
                logger.exception("State listener %r failed", listener)
        return new_state

    # =========================================================
    # TRANSITIONS
    # =========================================================

    def start_match(self, player_names: Sequence[str]) -> MatchState:
        """Begin a match with exactly four distinct, non-empty names."""
        if isinstance(player_names, str) or len(player_names) != PLAYER_COUNT:
            raise WrongPlayerCountError(f"Exactly {PLAYER_COUNT} player names are required")

        trimmed = [name.strip() if isinstance(name, str) else "" for name in player_names]
        if len(set(trimmed)) != PLAYER_COUNT:
            raise DuplicateNameError("All player names must be unique")
        if any(not name for name in trimmed):
            raise EmptyNameError("All player names must be non-empty")

        players = tuple(create_player(name) for name in trimmed)
        return self._commit(
            MatchState(
                players=players,
                current_hole=1,
                phase="scoring",
                hole_results=(),
                max_hole_reached=1,
                share_code=None,
            )
        )

    def record_hole_result(self, matchup_results: Sequence[Matchup]) -> MatchState:
        """Score the current hole and advance to the next one."""
        state = self._state
        if state.phase != "scoring":
            raise MatchNotInProgressError(
                "Match is already complete" if state.phase == "complete" else "Match has not started"
            )
        matchups = self._validate_results(matchup_results)

        hole = HoleResult(hole_number=state.current_hole, matchups=matchups)
        hole_results = self._insert_hole(state.hole_results, hole)
        if state.hole_result(state.current_hole) is None:
            updated_players = process_hole(state.players, matchups)
        else:
            # re-scoring a hole after navigating back replaces its old result
            updated_players = replay_holes(state.players, hole_results)

        finished = state.current_hole >= HOLE_COUNT
        next_hole = HOLE_COUNT if finished else state.current_hole + 1

        return self._commit(
            replace(
                state,
                players=updated_players,
                current_hole=next_hole,
                phase="complete" if finished else "scoring",
                hole_results=hole_results,
                max_hole_reached=max(state.max_hole_reached, next_hole),
            )
        )

    def navigate_to_hole(self, hole_number: int) -> MatchState:
        """Move back (or forward, up to the frontier) without touching results."""
        self._validate_hole_number(hole_number)
        if hole_number > self._state.max_hole_reached:
            raise BeyondFrontierError(
                f"Cannot navigate beyond hole {self._state.max_hole_reached}"
            )
        return self._commit(replace(self._state, current_hole=hole_number))

    def update_hole_result(self, hole_number: int, matchup_results: Sequence[Matchup]) -> MatchState:
        """
        Replace (or insert) the result of a hole and rebuild all standings.

        Standings are recomputed by replaying every stored hole from zeroed
        players. ``current_hole`` and ``max_hole_reached`` do not move.
        """
        self._validate_hole_number(hole_number)
        state = self._state
        if state.phase == "setup":
            raise MatchNotInProgressError("Match has not started")
        matchups = self._validate_results(matchup_results)
        if hole_number > state.max_hole_reached:
            raise BeyondFrontierError(f"Cannot edit beyond hole {state.max_hole_reached}")

        hole_results = self._insert_hole(
            state.hole_results,
            HoleResult(hole_number=hole_number, matchups=matchups),
        )
        # raises before anything is committed if the edit names unknown players
        recalculated = replay_holes(state.players, hole_results)

        phase = state.phase
        if state.max_hole_reached == HOLE_COUNT and any(
            h.hole_number == HOLE_COUNT for h in hole_results
        ):
            phase = "complete"

        return self._commit(
            replace(state, players=recalculated, hole_results=hole_results, phase=phase)
        )

    def recalculate_stats(self) -> MatchState:
        """Rebuild standings from the stored hole log."""
        state = self._state
        if state.phase == "setup":
            return state
        return self._commit(replace(state, players=replay_holes(state.players, state.hole_results)))

    def load_state(self, state: MatchState) -> MatchState:
        """Adopt a previously persisted (already validated) state."""
        return self._commit(state)

    def set_share_code(self, share_code: Optional[str]) -> MatchState:
        return self._commit(replace(self._state, share_code=share_code))

    def reset_match_state(self) -> MatchState:
        """Return to a fresh setup state. Does not touch persisted copies."""
        return self._commit(initial_state())

    # =========================================================
    # QUERIES
    # =========================================================

    def current_matchups(self) -> tuple[Matchup, Matchup] | NoMatchups:
        if not self._is_scoring():
            return (None, None)
        return create_matchups_for_hole(self._state.players, self._state.current_hole)

    def get_matchups_for_hole(self, hole_number: int) -> list[Matchup] | list[None]:
        """Stored matchups (with results) for a scored hole, else fresh pending ones."""
        self._validate_hole_number(hole_number)
        if not self._is_scoring():
            return [None, None]

        existing = self._state.hole_result(hole_number)
        if existing is not None:
            return list(existing.matchups)
        return list(create_matchups_for_hole(self._state.players, hole_number))

    def calculate_stats(self) -> list[Player]:
        """Current standings, best first."""
        return rank(self._state.players)

    def player_thru(self, player_name: str) -> int:
        """Number of holes a player has been scored on."""
        player = self._state.find_player(player_name)
        if player is None:
            raise UnknownPlayerError(f"Player {player_name} not found")
        return holes_completed(player)

    # =========================================================
    # VALIDATION HELPERS
    # =========================================================

    def _is_scoring(self) -> bool:
        return self._state.phase == "scoring" and len(self._state.players) == PLAYER_COUNT

    @staticmethod
    def _validate_hole_number(hole_number: int) -> None:
        if not isinstance(hole_number, int) or not 1 <= hole_number <= HOLE_COUNT:
            raise HoleOutOfRangeError(f"Hole number must be between 1 and {HOLE_COUNT}")

    @staticmethod
    def _validate_results(matchup_results: Sequence[Matchup]) -> tuple[Matchup, ...]:
        if matchup_results is None or len(matchup_results) != MATCHUPS_PER_HOLE:
            raise WrongResultCountError(
                f"Exactly {MATCHUPS_PER_HOLE} matchup results are required"
            )
        if any(m is None or m.result is None for m in matchup_results):
            raise IncompleteResultError("Both matchups must have results before proceeding")
        return tuple(matchup_results)

    @staticmethod
    def _insert_hole(
        hole_results: tuple[HoleResult, ...],
        hole: HoleResult,
    ) -> tuple[HoleResult, ...]:
        kept = [h for h in hole_results if h.hole_number != hole.hole_number]
        kept.append(hole)
        kept.sort(key=lambda h: h.hole_number)
        return tuple(kept)
