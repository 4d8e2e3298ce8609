"""
Match state engine.

Implements the deterministic rules of a 4-player round-robin golf match:
- Three-way matchup rotation across 18 holes
- 3/1/0 point accumulation per matchup
- Ranked standings
- Phase transitions, backward navigation and history edits with full replay
"""

from rrgolf.match.models import (
    HOLE_COUNT,
    INITIAL_STATE,
    PLAYER_COUNT,
    HoleResult,
    Matchup,
    MatchState,
    Player,
    initial_state,
)
from rrgolf.match.rotation import (
    create_matchups_for_hole,
    get_all_matchup_patterns,
    get_matchup_pattern,
)
from rrgolf.match.scoring import (
    apply_outcome,
    create_player,
    holes_completed,
    process_hole,
    rank,
    replay_holes,
)
from rrgolf.match.state_machine import MatchStateMachine

__all__ = [
    "HOLE_COUNT",
    "INITIAL_STATE",
    "PLAYER_COUNT",
    "HoleResult",
    "Matchup",
    "MatchState",
    "Player",
    "initial_state",
    "create_matchups_for_hole",
    "get_all_matchup_patterns",
    "get_matchup_pattern",
    "apply_outcome",
    "create_player",
    "holes_completed",
    "process_hole",
    "rank",
    "replay_holes",
    "MatchStateMachine",
]
