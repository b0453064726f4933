# gully_api/stats.py
from __future__ import annotations

import json
from typing import Any, Dict, List

import pandas as pd

from gully_api.models import InningsSnapshot, Player
from gully_api.overs import balls_to_overs, required_run_rate, run_rate
from gully_api.rules import BALLS_PER_OVER, DEFAULT_RULES, Ruleset

DOT_GLYPHS = {"0", "Wkt"}
FOUR_GLYPHS = {"4", "4n"}


# -----------------------------
# Over in progress
# -----------------------------
def over_summary(snapshot: InningsSnapshot) -> Dict[str, int]:
    events = snapshot.current_over_events
    return {
        "balls": snapshot.balls_in_current_over,
        "dots": sum(1 for e in events if e in DOT_GLYPHS),
        "fours": sum(1 for e in events if e in FOUR_GLYPHS),
        "wides": sum(1 for e in events if e == "Wd"),
    }


# -----------------------------
# Bowler quota
# -----------------------------
def available_bowlers(snapshot: InningsSnapshot, rules: Ruleset = DEFAULT_RULES) -> List[Player]:
    """
    Bowlers allowed to take the next over.

    Quota rule (quota = rules.max_overs_per_bowler):
    - fewer than quota-1 overs: always
    - exactly quota-1 overs: only while fewer than rules.max_bowlers_at_quota
      bowlers have already bowled their full quota
    - quota or more: never
    The current bowler is excluded (no consecutive overs).
    """
    quota = rules.max_overs_per_bowler
    at_quota = sum(1 for b in snapshot.bowling_stats.values() if b.overs >= quota)

    out: List[Player] = []
    for p in snapshot.bowling_team.players:
        if p.id == snapshot.current_bowler_id:
            continue
        stats = snapshot.bowling_stats.get(p.id)
        bowled = stats.overs if stats is not None else 0

        if bowled < quota - 1:
            out.append(p)
        elif bowled == quota - 1 and at_quota < rules.max_bowlers_at_quota:
            out.append(p)
    return out


# -----------------------------
# Innings summary
# -----------------------------
def innings_summary(snapshot: InningsSnapshot) -> Dict[str, Any]:
    balls = snapshot.legal_balls
    out: Dict[str, Any] = {
        "batting_team": snapshot.batting_team.name,
        "bowling_team": snapshot.bowling_team.name,
        "innings": 2 if snapshot.is_chase else 1,
        "score": f"{snapshot.runs}/{snapshot.wickets}",
        "overs": balls_to_overs(balls),
        "max_overs": snapshot.max_overs,
        "run_rate": round(run_rate(snapshot.runs, balls), 2),
        "fours": snapshot.fours,
        "status_message": snapshot.status_message,
        "innings_over": snapshot.innings_over,
        "match_over": snapshot.match_over,
        "this_over": over_summary(snapshot),
    }

    if snapshot.target is not None:
        runs_needed = max(0, snapshot.target - snapshot.runs)
        balls_left = max(0, snapshot.max_overs * BALLS_PER_OVER - balls)
        rrr = required_run_rate(runs_needed, balls_left)
        out["target"] = snapshot.target
        out["runs_needed"] = runs_needed
        out["balls_left"] = balls_left
        out["required_run_rate"] = round(rrr, 2) if rrr is not None else None

    return out


# -----------------------------
# Full scorecard
# -----------------------------
BATTING_COLUMNS = ["player_id", "player_name", "status", "runs", "fours", "balls_faced", "strike_rate"]
BOWLING_COLUMNS = [
    "player_id", "player_name", "overs", "runs_conceded", "wickets",
    "wides", "dot_balls", "fours_conceded", "economy",
]


def batting_card(snapshot: InningsSnapshot) -> pd.DataFrame:
    """
    Batting table in roster order, with everyone who has faced a ball listed
    ahead of those who have not.
    """
    rows = [s.to_dict() for s in snapshot.batting_stats.values()]
    if not rows:
        return pd.DataFrame(columns=BATTING_COLUMNS)

    df = pd.DataFrame(rows)
    df["strike_rate"] = [
        round(r * 100 / b, 2) if b > 0 else 0.0 for r, b in zip(df["runs"], df["balls_faced"])
    ]
    df["_batted"] = (df["balls_faced"] > 0) | (df["player_id"] == snapshot.current_batsman_id)
    df = df.sort_values("_batted", ascending=False, kind="stable")
    return df[BATTING_COLUMNS].reset_index(drop=True)


def bowling_card(snapshot: InningsSnapshot) -> pd.DataFrame:
    """Bowlers who have delivered at least one ball or conceded anything."""
    rows = [s.to_dict() for s in snapshot.bowling_stats.values()]
    if not rows:
        return pd.DataFrame(columns=BOWLING_COLUMNS)

    df = pd.DataFrame(rows)
    active = (
        (df["overs"] > 0)
        | (df["balls_in_current_over"] > 0)
        | (df["runs_conceded"] > 0)
        | (df["wickets"] > 0)
    )
    df = df[active].copy()
    if df.empty:
        return pd.DataFrame(columns=BOWLING_COLUMNS)

    balls = df["overs"] * BALLS_PER_OVER + df["balls_in_current_over"]
    df["economy"] = [round(run_rate(int(r), int(b)), 2) for r, b in zip(df["runs_conceded"], balls)]
    df["overs"] = [balls_to_overs(int(b)) for b in balls]
    return df[BOWLING_COLUMNS].reset_index(drop=True)


def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    # round-trip through JSON so numpy scalars become plain Python values
    return json.loads(df.to_json(orient="records"))


def scorecard(snapshot: InningsSnapshot) -> Dict[str, Any]:
    """JSON-ready scorecard for one innings."""
    return {
        "summary": innings_summary(snapshot),
        "batting": _records(batting_card(snapshot)),
        "bowling": _records(bowling_card(snapshot)),
    }
