"""
Persisted record schema for a match.

Both stores hold the same JSON document. Keys are camelCase so existing
records remain readable:

    {
      "players": [{"name": "Alice", "points": 3, "wins": 1, "draws": 0, "losses": 0}, ...],
      "currentHole": 2,
      "phase": "scoring",
      "holeResults": [
        {"holeNumber": 1,
         "matchups": [{"player1": {...}, "player2": {...}, "result": "player1"}, ...]}
      ],
      "maxHoleReached": 2,
      "shareCode": null
    }

Loading validates the document against every MatchState invariant with
Pydantic. Anything that fails is reported as CorruptStateError so the
caller can discard and clear it.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError, model_validator

from rrgolf.errors import CorruptStateError
from rrgolf.match.models import (
    HOLE_COUNT,
    MATCHUPS_PER_HOLE,
    PLAYER_COUNT,
    POINTS_FOR_DRAW,
    POINTS_FOR_WIN,
    HoleResult,
    Matchup,
    MatchState,
    Player,
)

Counter = Annotated[StrictInt, Field(ge=0)]
HoleNumber = Annotated[StrictInt, Field(ge=1, le=HOLE_COUNT)]


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class PlayerRecord(_Record):
    name: StrictStr = Field(min_length=1)
    points: Counter
    wins: Counter
    draws: Counter
    losses: Counter

    @model_validator(mode="after")
    def check_points(self) -> "PlayerRecord":
        expected = POINTS_FOR_WIN * self.wins + POINTS_FOR_DRAW * self.draws
        if self.points != expected:
            raise ValueError(f"{self.name}: points {self.points} != {expected} from W/D/L")
        return self


class MatchupRecord(_Record):
    player1: PlayerRecord
    player2: PlayerRecord
    result: Optional[Literal["player1", "player2", "draw"]] = None


class HoleResultRecord(_Record):
    hole_number: HoleNumber = Field(alias="holeNumber")
    matchups: list[MatchupRecord]

    @model_validator(mode="after")
    def check_matchups(self) -> "HoleResultRecord":
        if len(self.matchups) != MATCHUPS_PER_HOLE:
            raise ValueError(f"hole {self.hole_number} must have {MATCHUPS_PER_HOLE} matchups")
        if any(m.result is None for m in self.matchups):
            raise ValueError(f"hole {self.hole_number} has an unresolved matchup")
        return self


class MatchStateRecord(_Record):
    players: list[PlayerRecord]
    current_hole: HoleNumber = Field(alias="currentHole")
    phase: Literal["setup", "scoring", "complete"]
    hole_results: list[HoleResultRecord] = Field(alias="holeResults")
    max_hole_reached: HoleNumber = Field(alias="maxHoleReached")
    share_code: Optional[StrictStr] = Field(default=None, alias="shareCode")

    @model_validator(mode="after")
    def check_invariants(self) -> "MatchStateRecord":
        if self.max_hole_reached < self.current_hole:
            raise ValueError("maxHoleReached is behind currentHole")

        if self.phase == "setup":
            if self.players or self.hole_results:
                raise ValueError("setup phase must not carry players or results")
            return self

        if len(self.players) != PLAYER_COUNT:
            raise ValueError(f"{self.phase} phase needs exactly {PLAYER_COUNT} players")
        names = {p.name for p in self.players}
        if len(names) != PLAYER_COUNT:
            raise ValueError("player names must be unique")

        hole_numbers = [h.hole_number for h in self.hole_results]
        if len(set(hole_numbers)) != len(hole_numbers):
            raise ValueError("duplicate hole results")
        if any(n > self.max_hole_reached for n in hole_numbers):
            raise ValueError("hole result beyond maxHoleReached")
        for hole in self.hole_results:
            hole_names = [n for m in hole.matchups for n in (m.player1.name, m.player2.name)]
            if any(n not in names for n in hole_names):
                raise ValueError(f"hole {hole.hole_number} names an unknown player")
            if len(set(hole_names)) != PLAYER_COUNT:
                raise ValueError(f"hole {hole.hole_number} does not pair up all four players")

        finished = self.max_hole_reached == HOLE_COUNT and HOLE_COUNT in hole_numbers
        if (self.phase == "complete") != finished:
            raise ValueError("phase disagrees with hole 18 result")
        return self


# =============================================================================
# Conversion
# =============================================================================

def _player_to_dict(player: Player) -> dict[str, Any]:
    return {
        "name": player.name,
        "points": player.points,
        "wins": player.wins,
        "draws": player.draws,
        "losses": player.losses,
    }


def state_to_record(state: MatchState) -> dict[str, Any]:
    """Serialize a MatchState into the persisted JSON document."""
    return {
        "players": [_player_to_dict(p) for p in state.players],
        "currentHole": state.current_hole,
        "phase": state.phase,
        "holeResults": [
            {
                "holeNumber": hole.hole_number,
                "matchups": [
                    {
                        "player1": _player_to_dict(m.player1),
                        "player2": _player_to_dict(m.player2),
                        "result": m.result,
                    }
                    for m in hole.matchups
                ],
            }
            for hole in state.hole_results
        ],
        "maxHoleReached": state.max_hole_reached,
        "shareCode": state.share_code,
    }


def _player_from_record(record: PlayerRecord) -> Player:
    return Player(
        name=record.name,
        points=record.points,
        wins=record.wins,
        draws=record.draws,
        losses=record.losses,
    )


def state_from_record(data: Any) -> MatchState:
    """
    Validate a persisted document and build a MatchState from it.

    Raises:
        CorruptStateError: if the document is not a valid match state
    """
    if not isinstance(data, dict):
        raise CorruptStateError(f"Match record must be an object, got {type(data).__name__}")
    try:
        record = MatchStateRecord.model_validate(data)
    except ValidationError as exc:
        raise CorruptStateError(f"Invalid match record: {exc.error_count()} problem(s)") from exc

    hole_results = tuple(
        HoleResult(
            hole_number=hole.hole_number,
            matchups=tuple(
                Matchup(
                    player1=_player_from_record(m.player1),
                    player2=_player_from_record(m.player2),
                    result=m.result,
                )
                for m in hole.matchups
            ),
        )
        for hole in sorted(record.hole_results, key=lambda h: h.hole_number)
    )

    return MatchState(
        players=tuple(_player_from_record(p) for p in record.players),
        current_hole=record.current_hole,
        phase=record.phase,
        hole_results=hole_results,
        max_hole_reached=record.max_hole_reached,
        share_code=record.share_code or None,
    )
