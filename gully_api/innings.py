# gully_api/innings.py
from __future__ import annotations

from typing import Dict, Optional

from gully_api.models import (
    BattingStats,
    BowlingStats,
    InningsSnapshot,
    MatchConfig,
    MatchState,
)

IN_PROGRESS_MESSAGE = "Match in Progress..."


def progress_message(target: Optional[int]) -> str:
    return f"Target: {target}" if target else IN_PROGRESS_MESSAGE


def initialize_innings(config: MatchConfig, target: Optional[int] = None) -> MatchState:
    """
    Build the seed snapshot for an innings.

    - battingTeam/bowlingTeam are picked by config.batting_team_name
    - every batting player gets zeroed BattingStats, every bowler zeroed BowlingStats
    - remaining_batsmen = batting roster minus the opener
    - target is None for the first innings, first innings runs + 1 for the chase

    No validation here: an opener outside the roster simply has no stats entry.
    Use models.validate_match_config() before calling if the config is untrusted.
    """
    batting_team, bowling_team = config.teams_for_innings()
    opener = config.opening_batsman

    batting_stats: Dict[str, BattingStats] = {
        p.id: BattingStats(player_id=p.id, player_name=p.name) for p in batting_team.players
    }
    bowling_stats: Dict[str, BowlingStats] = {
        p.id: BowlingStats(player_id=p.id, player_name=p.name) for p in bowling_team.players
    }

    seed = InningsSnapshot(
        runs=0,
        wickets=0,
        overs_completed=0,
        balls_in_current_over=0,
        max_overs=config.overs,
        target=target,
        current_batsman_id=opener.id,
        current_bowler_id=config.opening_bowler.id,
        batting_team=batting_team,
        bowling_team=bowling_team,
        remaining_batsmen=[p for p in batting_team.players if p.id != opener.id],
        retired_batsmen=[],
        match_over=False,
        innings_over=False,
        status_message=progress_message(target),
        fours=0,
        wides_in_current_over=0,
        current_over_events=[],
        batting_stats=batting_stats,
        bowling_stats=bowling_stats,
    )
    return MatchState(log=[seed])


def chase_target(first_innings: InningsSnapshot) -> int:
    return first_innings.runs + 1


def next_innings_config(config: MatchConfig, first_innings: InningsSnapshot) -> MatchConfig:
    """
    Config for the second innings: the side that bowled now bats, and the
    first listed player of each side opens.
    """
    new_batting_name = first_innings.bowling_team.name
    if new_batting_name == config.team_a.name:
        new_batting, new_bowling = config.team_a, config.team_b
    else:
        new_batting, new_bowling = config.team_b, config.team_a

    if not new_batting.players or not new_bowling.players:
        raise ValueError("Both teams need at least one player to start the second innings")

    return MatchConfig(
        team_a=config.team_a,
        team_b=config.team_b,
        overs=config.overs,
        batting_team_name=new_batting_name,
        opening_batsman=new_batting.players[0],
        opening_bowler=new_bowling.players[0],
    )
