"""
Point accumulation and standings for round-robin golf.

Scoring per matchup:
  win  = 3 points
  draw = 1 point each
  loss = 0 points

Every function here is pure: players are frozen and each update returns
new Player values. ``replay_holes`` rebuilds standings from a zeroed
roster by re-applying the ordered hole log, which is how edits to past
holes are handled (no per-hole deltas are stored).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence

from rrgolf.errors import (
    InvalidNameError,
    InvalidPairingError,
    InvalidOutcomeError,
    InvalidPlayerCountError,
    UnknownPlayerError,
    UnresolvedMatchupError,
    WrongResultCountError,
)
from rrgolf.match.models import (
    MATCHUPS_PER_HOLE,
    PLAYER_COUNT,
    POINTS_FOR_DRAW,
    POINTS_FOR_WIN,
    HoleResult,
    Matchup,
    Outcome,
    Player,
)

# matchup result -> (player1 outcome, player2 outcome)
RESULT_OUTCOMES: dict[str, tuple[Outcome, Outcome]] = {
    "player1": ("win", "loss"),
    "player2": ("loss", "win"),
    "draw": ("draw", "draw"),
}


def create_player(name: str) -> Player:
    """Create a zeroed player from a raw name (trimmed)."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidNameError("Player name must be a non-empty string")
    return Player(name=name.strip())


def apply_outcome(player: Player, outcome: Outcome) -> Player:
    """Return ``player`` with one more win, draw or loss applied."""
    if outcome == "win":
        return replace(player, points=player.points + POINTS_FOR_WIN, wins=player.wins + 1)
    if outcome == "draw":
        return replace(player, points=player.points + POINTS_FOR_DRAW, draws=player.draws + 1)
    if outcome == "loss":
        return replace(player, losses=player.losses + 1)
    raise InvalidOutcomeError(f"Result must be 'win', 'draw', or 'loss', got '{outcome}'")


def holes_completed(player: Player) -> int:
    """Each hole is exactly one game for every player."""
    return player.wins + player.draws + player.losses


def process_hole(players: Sequence[Player], matchups: Sequence[Matchup]) -> tuple[Player, ...]:
    """
    Apply one hole's two resolved matchups to the roster.

    Players are matched by name, so stale Player snapshots inside stored
    matchups are fine. Returns updated players in their original order.

    Raises:
        InvalidPlayerCountError: roster is not exactly 4 players
        WrongResultCountError: not exactly 2 matchups
        UnresolvedMatchupError: a matchup has no result
        UnknownPlayerError: a matchup names someone outside the roster
        InvalidPairingError: the two matchups do not cover four distinct players
        InvalidOutcomeError: result is not 'player1', 'player2' or 'draw'
    """
    if len(players) != PLAYER_COUNT:
        raise InvalidPlayerCountError(f"Must provide exactly {PLAYER_COUNT} players")
    if len(matchups) != MATCHUPS_PER_HOLE:
        raise WrongResultCountError(f"Must provide exactly {MATCHUPS_PER_HOLE} matchups")
    if any(matchup is None or matchup.result is None for matchup in matchups):
        raise UnresolvedMatchupError("All matchups must have results before processing")

    by_name = {player.name: player for player in players}

    names = [name for m in matchups for name in (m.player1.name, m.player2.name)]
    if any(name not in by_name for name in names):
        raise UnknownPlayerError("Matchup contains players not found in players list")
    if len(set(names)) != PLAYER_COUNT:
        raise InvalidPairingError("Each player must appear in exactly one matchup per hole")

    for matchup in matchups:
        name1, name2 = matchup.player1.name, matchup.player2.name
        try:
            outcome1, outcome2 = RESULT_OUTCOMES[matchup.result]
        except KeyError:
            raise InvalidOutcomeError(
                f"Invalid matchup result: {matchup.result}. "
                "Must be 'player1', 'player2', or 'draw'"
            ) from None

        by_name[name1] = apply_outcome(by_name[name1], outcome1)
        by_name[name2] = apply_outcome(by_name[name2], outcome2)

    return tuple(by_name[player.name] for player in players)


def reset_stats(players: Iterable[Player]) -> tuple[Player, ...]:
    """Zero every counter, keeping names and order."""
    return tuple(Player(name=player.name) for player in players)


def replay_holes(players: Sequence[Player], hole_results: Iterable[HoleResult]) -> tuple[Player, ...]:
    """
    Recompute standings from scratch by replaying the hole log.

    Holes are applied in hole-number order regardless of input order, so
    replaying the same log always yields the same standings.
    """
    replayed = reset_stats(players)
    for hole in sorted(hole_results, key=lambda h: h.hole_number):
        replayed = process_hole(replayed, hole.matchups)
    return replayed


def _rank_key(player: Player) -> tuple[int, str, str]:
    # casefold first so "alice" sorts with "Alice"; exact name keeps the order total
    return (-player.points, player.name.casefold(), player.name)


def rank(players: Iterable[Player]) -> list[Player]:
    """Standings: points descending, then name ascending (case-insensitive)."""
    return sorted(players, key=_rank_key)
