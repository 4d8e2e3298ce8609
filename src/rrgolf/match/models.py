"""
Domain types for a round-robin golf match.

All types are frozen dataclasses and every collection inside a
MatchState is a tuple. Transitions build a new MatchState and swap it
in as a whole.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Optional

# =============================================================================
# Constants
# =============================================================================

PLAYER_COUNT = 4
HOLE_COUNT = 18
MATCHUPS_PER_HOLE = 2

POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1

Phase = Literal["setup", "scoring", "complete"]
MatchupResult = Literal["player1", "player2", "draw"]
Outcome = Literal["win", "draw", "loss"]

ALL_PHASES: tuple[str, ...] = ("setup", "scoring", "complete")
ALL_MATCHUP_RESULTS: tuple[str, ...] = ("player1", "player2", "draw")


@dataclass(frozen=True)
class Player:
    """A participant and their running tally."""

    name: str
    points: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0

    @property
    def holes_completed(self) -> int:
        return self.wins + self.draws + self.losses

    def __repr__(self) -> str:
        return (
            f"<Player(name='{self.name}', points={self.points}, "
            f"W/D/L={self.wins}/{self.draws}/{self.losses})>"
        )


@dataclass(frozen=True)
class Matchup:
    """One head-to-head pairing within a hole. ``result=None`` means pending."""

    player1: Player
    player2: Player
    result: Optional[MatchupResult] = None

    @property
    def is_resolved(self) -> bool:
        return self.result is not None

    def with_result(self, result: Optional[MatchupResult]) -> "Matchup":
        return replace(self, result=result)


@dataclass(frozen=True)
class HoleResult:
    """The two resolved matchups recorded for one hole."""

    hole_number: int
    matchups: tuple[Matchup, ...]


@dataclass(frozen=True)
class MatchState:
    """
    Complete state of one match.

    Invariants (enforced by the state machine and checked on load):
    - max_hole_reached >= current_hole
    - phase == 'complete' iff max_hole_reached == 18 and hole 18 has a result
    - hole_results sorted by hole number, no duplicates, all <= max_hole_reached
    - exactly 4 players outside the setup phase, none inside it
    """

    players: tuple[Player, ...] = ()
    current_hole: int = 1
    phase: Phase = "setup"
    hole_results: tuple[HoleResult, ...] = ()
    max_hole_reached: int = 1
    share_code: Optional[str] = None

    @property
    def is_blank(self) -> bool:
        """True for an untouched setup state (nothing worth persisting)."""
        return self.phase == "setup" and not self.players

    def hole_result(self, hole_number: int) -> Optional[HoleResult]:
        for hole in self.hole_results:
            if hole.hole_number == hole_number:
                return hole
        return None

    def find_player(self, name: str) -> Optional[Player]:
        for player in self.players:
            if player.name == name:
                return player
        return None


INITIAL_STATE = MatchState()


def initial_state() -> MatchState:
    """Return a fresh copy of the initial setup state."""
    return replace(INITIAL_STATE)
