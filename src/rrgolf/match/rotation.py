"""
Matchup rotation for 4-player round-robin golf.

A set of four players splits into two pairs in exactly three ways. Holes
cycle through those three partitions, so over any three consecutive holes
starting at 1, 4, 7, ... every player meets every other player once:

    hole 1, 4, 7, ...   P1 vs P2, P3 vs P4
    hole 2, 5, 8, ...   P1 vs P3, P2 vs P4
    hole 3, 6, 9, ...   P1 vs P4, P2 vs P3
"""

from __future__ import annotations

from typing import Sequence

from rrgolf.errors import InvalidHoleError, InvalidPlayerCountError
from rrgolf.match.models import HOLE_COUNT, PLAYER_COUNT, Matchup, Player

Pairing = tuple[int, int]
Pattern = tuple[Pairing, Pairing]

MATCHUP_PATTERNS: tuple[Pattern, ...] = (
    ((0, 1), (2, 3)),
    ((0, 2), (1, 3)),
    ((0, 3), (1, 2)),
)


def get_matchup_pattern(hole_number: int) -> Pattern:
    """Return the two player-index pairs that meet on ``hole_number``."""
    if not 1 <= hole_number <= HOLE_COUNT:
        raise InvalidHoleError(f"Hole number must be between 1 and {HOLE_COUNT}")
    return MATCHUP_PATTERNS[(hole_number - 1) % len(MATCHUP_PATTERNS)]


def get_all_matchup_patterns() -> list[Pattern]:
    """Patterns for holes 1..18 in order."""
    return [get_matchup_pattern(hole) for hole in range(1, HOLE_COUNT + 1)]


def create_matchups_for_hole(
    players: Sequence[Player],
    hole_number: int,
) -> tuple[Matchup, Matchup]:
    """Apply the hole's pattern to concrete players. Both matchups are pending."""
    if len(players) != PLAYER_COUNT:
        raise InvalidPlayerCountError(f"Must provide exactly {PLAYER_COUNT} players")

    (a, b), (c, d) = get_matchup_pattern(hole_number)
    return (
        Matchup(player1=players[a], player2=players[b]),
        Matchup(player1=players[c], player2=players[d]),
    )
