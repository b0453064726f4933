# gully_api/game.py
"""
The persisted application record and the match-level operations that move it
between innings. The engine only ever sees MatchState; this module owns the
bits around it (rosters, config, first innings summary, app phase).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from gully_api.engine import apply
from gully_api.events import Event
from gully_api.innings import chase_target, initialize_innings, next_innings_config
from gully_api.models import InningsSnapshot, MatchConfig, MatchState, Team, validate_match_config
from gully_api.rules import DEFAULT_RULES, Ruleset

logger = logging.getLogger(__name__)


class AppPhase(str, Enum):
    TEAM_SETUP = "TEAM_SETUP"
    PLAYER_SETUP = "PLAYER_SETUP"
    COIN_TOSS = "COIN_TOSS"
    MATCH_SETUP = "MATCH_SETUP"
    SCOREBOARD = "SCOREBOARD"


@dataclass
class GameRecord:
    phase: AppPhase = AppPhase.TEAM_SETUP
    team_a: Team = field(default_factory=lambda: Team(name=""))
    team_b: Team = field(default_factory=lambda: Team(name=""))
    match_config: Optional[MatchConfig] = None
    game_state: Optional[MatchState] = None
    first_innings_summary: Optional[InningsSnapshot] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "team_a": self.team_a.to_dict(),
            "team_b": self.team_b.to_dict(),
            "match_config": self.match_config.to_dict() if self.match_config else None,
            "game_state": self.game_state.to_dict() if self.game_state else None,
            "first_innings_summary": (
                self.first_innings_summary.to_dict() if self.first_innings_summary else None
            ),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GameRecord":
        mc = d.get("match_config")
        gs = d.get("game_state")
        fis = d.get("first_innings_summary")
        return cls(
            phase=AppPhase(d.get("phase", AppPhase.TEAM_SETUP.value)),
            team_a=Team.from_dict(d["team_a"]),
            team_b=Team.from_dict(d["team_b"]),
            match_config=MatchConfig.from_dict(mc) if mc else None,
            game_state=MatchState.from_dict(gs) if gs else None,
            first_innings_summary=InningsSnapshot.from_dict(fis) if fis else None,
        )


# -----------------------------
# Match lifecycle
# -----------------------------
def start_match(config: MatchConfig) -> GameRecord:
    """Validated config -> record on the scoreboard with innings 1 seeded."""
    validate_match_config(config)
    logger.info(
        "Starting match %s vs %s, %d overs, %s batting",
        config.team_a.name,
        config.team_b.name,
        config.overs,
        config.batting_team_name,
    )
    return GameRecord(
        phase=AppPhase.SCOREBOARD,
        team_a=config.team_a,
        team_b=config.team_b,
        match_config=config,
        game_state=initialize_innings(config, None),
        first_innings_summary=None,
    )


def apply_event(record: GameRecord, event: Event, rules: Ruleset = DEFAULT_RULES) -> GameRecord:
    return replace(record, game_state=apply(record.game_state, event, rules))


def can_start_next_innings(record: GameRecord) -> bool:
    if record.match_config is None or record.game_state is None:
        return False
    current = record.game_state.current
    return current.innings_over and not current.match_over and current.target is None


def start_next_innings(record: GameRecord) -> GameRecord:
    """
    Seed the chase from the finished first innings.
    Raises ValueError if the first innings is not over (or the match already is).
    """
    if not can_start_next_innings(record):
        raise ValueError("Second innings can only start once the first innings is over")

    first = record.game_state.current
    config = next_innings_config(record.match_config, first)
    target = chase_target(first)
    logger.info("Second innings: %s need %d", config.batting_team_name, target)

    return replace(
        record,
        match_config=config,
        game_state=initialize_innings(config, target),
        first_innings_summary=first,
    )


def share_view(record: GameRecord) -> Dict[str, Any]:
    """
    Read-only export for spectators: the first innings summary and the current
    snapshot, verbatim. The snapshot log stays with the scorer, so a shared
    view cannot be undone or replayed.
    """
    return {
        "first_innings": record.first_innings_summary.to_dict() if record.first_innings_summary else None,
        "current_innings": record.game_state.current.to_dict() if record.game_state else None,
        "team_a": record.team_a.to_dict(),
        "team_b": record.team_b.to_dict(),
    }
