# gully_api/completion.py
from __future__ import annotations

from typing import Literal

from gully_api.models import InningsSnapshot
from gully_api.rules import DEFAULT_RULES, Ruleset

Phase = Literal["ACTIVE", "INNINGS_OVER", "MATCH_OVER"]

ALL_OUT_MESSAGE = "All Out!"
INNINGS_OVER_MESSAGE = "Innings Over!"
TIE_MESSAGE = "Match Tied!"


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def phase_of(snapshot: InningsSnapshot) -> Phase:
    if snapshot.match_over:
        return "MATCH_OVER"
    if snapshot.innings_over:
        return "INNINGS_OVER"
    return "ACTIVE"


def check_completion(snapshot: InningsSnapshot, rules: Ruleset = DEFAULT_RULES) -> None:
    """
    Updates innings_over/match_over/status_message in-place.

    Rules:
    1) Chase reached: innings + match over, batting side wins by wickets in hand.
    2) All out or overs exhausted:
       - chasing: match over, bowling side wins by (target - 1 - runs) runs, or tie
       - first innings: innings over only
    3) Otherwise unchanged.
    """
    roster_size = len(snapshot.batting_team.players)
    all_out_at = rules.all_out_wickets(roster_size)
    batting_name = snapshot.batting_team.name
    bowling_name = snapshot.bowling_team.name

    if snapshot.target is not None and snapshot.runs >= snapshot.target:
        wickets_in_hand = all_out_at - snapshot.wickets
        snapshot.innings_over = True
        snapshot.match_over = True
        snapshot.status_message = f"{batting_name} won by {_plural(wickets_in_hand, 'wicket')}!"
        return

    all_out = snapshot.wickets >= all_out_at
    overs_finished = snapshot.overs_completed >= snapshot.max_overs

    if not (all_out or overs_finished):
        return

    snapshot.innings_over = True

    if snapshot.target is not None:
        run_difference = snapshot.target - 1 - snapshot.runs
        snapshot.match_over = True
        if run_difference > 0:
            snapshot.status_message = f"{bowling_name} won by {_plural(run_difference, 'run')}!"
        else:
            snapshot.status_message = TIE_MESSAGE
        return

    snapshot.match_over = False
    snapshot.status_message = ALL_OUT_MESSAGE if all_out else INNINGS_OVER_MESSAGE
