# gully_api/events.py
"""
Ball-by-ball and administrative events accepted by the scoring engine.

Each event kind is its own frozen dataclass; `Event` is the closed union the
engine dispatches on. `event_from_dict` parses the tagged JSON form used by
the HTTP layer, e.g. {"type": "EXTRA", "kind": "Wd"}.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Union

from gully_api.models import MatchState, Player
from gully_api.rules import NO_BALL_RUNS, WIDE_RUNS

ExtraType = Literal["Wd", "Nb"]

WIDE: ExtraType = "Wd"
NO_BALL: ExtraType = "Nb"


@dataclass(frozen=True)
class Score:
    runs: int


@dataclass(frozen=True)
class Extra:
    kind: ExtraType
    runs: Optional[int] = None

    @property
    def payload(self) -> int:
        if self.runs is not None:
            return self.runs
        return WIDE_RUNS if self.kind == WIDE else NO_BALL_RUNS


@dataclass(frozen=True)
class Wicket:
    pass


@dataclass(frozen=True)
class RetireBatsman:
    pass


@dataclass(frozen=True)
class SetNextBatsman:
    player: Player


@dataclass(frozen=True)
class SetNextBowler:
    player: Player


@dataclass(frozen=True)
class UndoLastBall:
    pass


@dataclass(frozen=True)
class UndoOver:
    pass


@dataclass(frozen=True)
class SetState:
    state: Optional[MatchState]


Event = Union[
    Score,
    Extra,
    Wicket,
    RetireBatsman,
    SetNextBatsman,
    SetNextBowler,
    UndoLastBall,
    UndoOver,
    SetState,
]


# -----------------------------
# Tagged JSON form
# -----------------------------
def event_from_dict(d: Dict[str, Any]) -> Event:
    """
    Parse {"type": ..., ...} into an Event.

    Raises ValueError on unknown types or missing payloads.
    """
    etype = str(d.get("type", "")).strip().upper()

    if etype == "SCORE":
        if "runs" not in d:
            raise ValueError("SCORE requires 'runs'")
        return Score(runs=int(d["runs"]))

    if etype == "EXTRA":
        kind = d.get("kind")
        if kind not in (WIDE, NO_BALL):
            raise ValueError(f"EXTRA kind must be 'Wd' or 'Nb', got {kind!r}")
        runs = d.get("runs")
        return Extra(kind=kind, runs=int(runs) if runs is not None else None)

    if etype == "WICKET":
        return Wicket()

    if etype == "RETIRE_BATSMAN":
        return RetireBatsman()

    if etype in ("SET_NEXT_BATSMAN", "SET_NEXT_BOWLER"):
        player = d.get("player")
        if not isinstance(player, dict):
            raise ValueError(f"{etype} requires a 'player' object")
        p = Player.from_dict(player)
        return SetNextBatsman(p) if etype == "SET_NEXT_BATSMAN" else SetNextBowler(p)

    if etype == "UNDO_LAST_BALL":
        return UndoLastBall()

    if etype == "UNDO_OVER":
        return UndoOver()

    if etype == "SET_STATE":
        state = d.get("state")
        return SetState(MatchState.from_dict(state) if state is not None else None)

    raise ValueError(f"Unknown event type: {d.get('type')!r}")
