# gully_api/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple

from gully_api.rules import BALLS_PER_OVER


# -----------------------------
# Batting status semantics
# -----------------------------
BattingStatus = Literal["Not Out", "Out", "Retired"]

NOT_OUT: BattingStatus = "Not Out"
OUT: BattingStatus = "Out"
RETIRED: BattingStatus = "Retired"


# -----------------------------
# Rosters
# -----------------------------
@dataclass(frozen=True)
class Player:
    id: str
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Player":
        return cls(id=str(d["id"]), name=str(d["name"]))


@dataclass(frozen=True)
class Team:
    name: str
    players: Tuple[Player, ...] = ()

    def find(self, player_id: str) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "players": [p.to_dict() for p in self.players]}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Team":
        return cls(
            name=str(d["name"]),
            players=tuple(Player.from_dict(p) for p in d.get("players", [])),
        )


@dataclass(frozen=True)
class MatchConfig:
    team_a: Team
    team_b: Team
    overs: int
    batting_team_name: str
    opening_batsman: Player
    opening_bowler: Player

    def teams_for_innings(self) -> Tuple[Team, Team]:
        """(batting_team, bowling_team) picked by name match against team_a."""
        if self.batting_team_name == self.team_a.name:
            return self.team_a, self.team_b
        return self.team_b, self.team_a

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_a": self.team_a.to_dict(),
            "team_b": self.team_b.to_dict(),
            "overs": self.overs,
            "batting_team_name": self.batting_team_name,
            "opening_batsman": self.opening_batsman.to_dict(),
            "opening_bowler": self.opening_bowler.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MatchConfig":
        return cls(
            team_a=Team.from_dict(d["team_a"]),
            team_b=Team.from_dict(d["team_b"]),
            overs=int(d["overs"]),
            batting_team_name=str(d["batting_team_name"]),
            opening_batsman=Player.from_dict(d["opening_batsman"]),
            opening_bowler=Player.from_dict(d["opening_bowler"]),
        )


def validate_match_config(config: MatchConfig) -> None:
    """
    Raises ValueError if the config cannot start an innings.
    Mirrors the checks the match-setup screen performs before kick-off.
    """
    if not config.team_a.players or not config.team_b.players:
        raise ValueError("Both teams must have at least one player")
    if config.team_a.name == config.team_b.name:
        raise ValueError("Team names must be different")
    if config.overs <= 0:
        raise ValueError("Overs must be greater than 0")
    if config.batting_team_name not in (config.team_a.name, config.team_b.name):
        raise ValueError(f"Unknown batting team: {config.batting_team_name}")

    batting, bowling = config.teams_for_innings()
    if batting.find(config.opening_batsman.id) is None:
        raise ValueError(f"Opening batsman {config.opening_batsman.name} is not in {batting.name}")
    if bowling.find(config.opening_bowler.id) is None:
        raise ValueError(f"Opening bowler {config.opening_bowler.name} is not in {bowling.name}")


# -----------------------------
# Per-player innings stats
# -----------------------------
@dataclass
class BattingStats:
    player_id: str
    player_name: str
    runs: int = 0
    fours: int = 0
    balls_faced: int = 0
    status: BattingStatus = NOT_OUT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "player_name": self.player_name,
            "runs": self.runs,
            "fours": self.fours,
            "balls_faced": self.balls_faced,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BattingStats":
        status = d.get("status", NOT_OUT)
        if status not in (NOT_OUT, OUT, RETIRED):
            raise ValueError(f"Invalid batting status: {status}")
        return cls(
            player_id=str(d["player_id"]),
            player_name=str(d["player_name"]),
            runs=int(d.get("runs", 0)),
            fours=int(d.get("fours", 0)),
            balls_faced=int(d.get("balls_faced", 0)),
            status=status,
        )


@dataclass
class BowlingStats:
    player_id: str
    player_name: str
    overs: int = 0  # completed overs only
    balls_in_current_over: int = 0
    wickets: int = 0
    runs_conceded: int = 0
    wides: int = 0
    dot_balls: int = 0
    fours_conceded: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "player_name": self.player_name,
            "overs": self.overs,
            "balls_in_current_over": self.balls_in_current_over,
            "wickets": self.wickets,
            "runs_conceded": self.runs_conceded,
            "wides": self.wides,
            "dot_balls": self.dot_balls,
            "fours_conceded": self.fours_conceded,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BowlingStats":
        return cls(
            player_id=str(d["player_id"]),
            player_name=str(d["player_name"]),
            overs=int(d.get("overs", 0)),
            balls_in_current_over=int(d.get("balls_in_current_over", 0)),
            wickets=int(d.get("wickets", 0)),
            runs_conceded=int(d.get("runs_conceded", 0)),
            wides=int(d.get("wides", 0)),
            dot_balls=int(d.get("dot_balls", 0)),
            fours_conceded=int(d.get("fours_conceded", 0)),
        )


# -----------------------------
# Innings snapshot
# -----------------------------
@dataclass
class InningsSnapshot:
    """
    Complete scoring state of one innings at one instant.

    Snapshots stored in a MatchState log are never mutated after they are
    appended; the engine works on a deep copy.
    """
    runs: int
    wickets: int
    overs_completed: int
    balls_in_current_over: int
    max_overs: int
    target: Optional[int]
    current_batsman_id: str
    current_bowler_id: str
    batting_team: Team
    bowling_team: Team
    remaining_batsmen: List[Player] = field(default_factory=list)
    retired_batsmen: List[Player] = field(default_factory=list)
    match_over: bool = False
    innings_over: bool = False
    status_message: str = ""
    fours: int = 0
    wides_in_current_over: int = 0
    current_over_events: List[str] = field(default_factory=list)
    batting_stats: Dict[str, BattingStats] = field(default_factory=dict)
    bowling_stats: Dict[str, BowlingStats] = field(default_factory=dict)

    @property
    def is_chase(self) -> bool:
        return self.target is not None

    @property
    def legal_balls(self) -> int:
        return self.overs_completed * BALLS_PER_OVER + self.balls_in_current_over

    def to_dict(self) -> Dict[str, Any]:
        return {
            "runs": self.runs,
            "wickets": self.wickets,
            "overs_completed": self.overs_completed,
            "balls_in_current_over": self.balls_in_current_over,
            "max_overs": self.max_overs,
            "target": self.target,
            "current_batsman_id": self.current_batsman_id,
            "current_bowler_id": self.current_bowler_id,
            "batting_team": self.batting_team.to_dict(),
            "bowling_team": self.bowling_team.to_dict(),
            "remaining_batsmen": [p.to_dict() for p in self.remaining_batsmen],
            "retired_batsmen": [p.to_dict() for p in self.retired_batsmen],
            "match_over": self.match_over,
            "innings_over": self.innings_over,
            "status_message": self.status_message,
            "fours": self.fours,
            "wides_in_current_over": self.wides_in_current_over,
            "current_over_events": list(self.current_over_events),
            "batting_stats": {k: v.to_dict() for k, v in self.batting_stats.items()},
            "bowling_stats": {k: v.to_dict() for k, v in self.bowling_stats.items()},
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "InningsSnapshot":
        target = d.get("target")
        return cls(
            runs=int(d["runs"]),
            wickets=int(d["wickets"]),
            overs_completed=int(d["overs_completed"]),
            balls_in_current_over=int(d["balls_in_current_over"]),
            max_overs=int(d["max_overs"]),
            target=int(target) if target is not None else None,
            current_batsman_id=str(d["current_batsman_id"]),
            current_bowler_id=str(d["current_bowler_id"]),
            batting_team=Team.from_dict(d["batting_team"]),
            bowling_team=Team.from_dict(d["bowling_team"]),
            remaining_batsmen=[Player.from_dict(p) for p in d.get("remaining_batsmen", [])],
            retired_batsmen=[Player.from_dict(p) for p in d.get("retired_batsmen", [])],
            match_over=bool(d.get("match_over", False)),
            innings_over=bool(d.get("innings_over", False)),
            status_message=str(d.get("status_message", "")),
            fours=int(d.get("fours", 0)),
            wides_in_current_over=int(d.get("wides_in_current_over", 0)),
            current_over_events=[str(e) for e in d.get("current_over_events", [])],
            batting_stats={k: BattingStats.from_dict(v) for k, v in d.get("batting_stats", {}).items()},
            bowling_stats={k: BowlingStats.from_dict(v) for k, v in d.get("bowling_stats", {}).items()},
        )


# -----------------------------
# Live state: snapshot log
# -----------------------------
@dataclass
class MatchState:
    """
    Append-only log of innings snapshots. log[0] is the innings seed and the
    live state is always the last entry.
    """
    log: List[InningsSnapshot]

    def __post_init__(self) -> None:
        if not self.log:
            raise ValueError("MatchState log must contain at least the seed snapshot")

    @property
    def current(self) -> InningsSnapshot:
        return self.log[-1]

    def to_dict(self) -> Dict[str, Any]:
        return {"log": [s.to_dict() for s in self.log]}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MatchState":
        return cls(log=[InningsSnapshot.from_dict(s) for s in d["log"]])
