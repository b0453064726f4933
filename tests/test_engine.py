"""
Ball-by-ball transition tests for the scoring engine.
"""

import pytest

from gully_api.engine import apply, run_events
from gully_api.events import (
    Extra,
    RetireBatsman,
    Score,
    SetNextBatsman,
    SetNextBowler,
    SetState,
    UndoLastBall,
    Wicket,
)
from gully_api.innings import initialize_innings
from gully_api.models import NOT_OUT, OUT, RETIRED, Player
from gully_api.rules import Ruleset

from conftest import build_team


def _bowler(state, pid="k1"):
    return state.current.bowling_stats[pid]


def _batsman(state, pid="b1"):
    return state.current.batting_stats[pid]


def _next_batsman(state):
    return SetNextBatsman(state.current.remaining_batsmen[0])


# ----------------------------------------------------------------------
# Score
# ----------------------------------------------------------------------
def test_four_updates_team_batsman_and_bowler(state):
    s = apply(state, Score(4))
    cur = s.current

    assert cur.runs == 4
    assert cur.fours == 1
    assert cur.balls_in_current_over == 1
    assert cur.current_over_events == ["4"]
    assert _batsman(s).runs == 4
    assert _batsman(s).fours == 1
    assert _batsman(s).balls_faced == 1
    assert _bowler(s).runs_conceded == 4
    assert _bowler(s).fours_conceded == 1
    assert _bowler(s).dot_balls == 0
    assert _bowler(s).balls_in_current_over == 1


def test_dot_ball_counts_for_bowler(state):
    s = apply(state, Score(0))
    assert s.current.runs == 0
    assert s.current.current_over_events == ["0"]
    assert _bowler(s).dot_balls == 1
    assert _batsman(s).balls_faced == 1


@pytest.mark.parametrize("runs", [1, 2, 3, 6, -4])
def test_other_run_values_are_rejected(state, runs):
    assert apply(state, Score(runs)) is state


def test_dot_ball_over_completion(make_config):
    """maxOvers = 1, six dots: over and innings complete, nothing scored."""
    teams = dict(team_a=build_team("Blue", "b", size=3), team_b=build_team("Black", "k", size=3))
    s = run_events(initialize_innings(make_config(overs=1, **teams), None), [Score(0)] * 6)
    cur = s.current

    assert cur.overs_completed == 1
    assert cur.balls_in_current_over == 0
    assert cur.innings_over is True
    assert cur.match_over is False
    assert cur.runs == 0
    assert cur.status_message == "Innings Over!"
    assert cur.current_over_events == []
    assert _bowler(s).overs == 1
    assert _bowler(s).balls_in_current_over == 0
    assert _bowler(s).dot_balls == 6


def test_ball_accounting_within_and_across_overs(state):
    s = run_events(state, [Score(0), Score(4)] * 2 + [Score(0)])
    assert s.current.balls_in_current_over == 5
    assert s.current.overs_completed == 0

    s = run_events(s, [Score(0)] * 8)
    # 13 legal balls
    assert s.current.overs_completed == 2
    assert s.current.balls_in_current_over == 1
    assert _bowler(s).overs == 2


# ----------------------------------------------------------------------
# Extras
# ----------------------------------------------------------------------
def test_triple_wide_bonus(state):
    s = run_events(state, [Extra("Wd")] * 3)
    cur = s.current

    assert cur.runs == 1 + 1 + 1 + 4
    assert cur.fours == 1
    assert cur.wides_in_current_over == 0
    assert cur.balls_in_current_over == 0
    assert cur.current_over_events == ["Wd", "Wd", "Wd"]
    assert _bowler(s).wides == 3
    assert _bowler(s).runs_conceded == 7
    assert _bowler(s).fours_conceded == 1
    assert _batsman(s).balls_faced == 0
    assert _batsman(s).runs == 0


def test_two_wides_then_over_end_resets_counter(state):
    s = run_events(state, [Extra("Wd"), Extra("Wd")] + [Score(0)] * 6)
    assert s.current.wides_in_current_over == 0
    assert s.current.runs == 2

    s = apply(s, Extra("Wd"))
    assert s.current.wides_in_current_over == 1
    assert s.current.runs == 3
    assert s.current.fours == 0


def test_no_ball_is_four_runs_and_one_four(state):
    s = apply(state, Extra("Nb"))
    cur = s.current

    assert cur.runs == 4
    assert cur.fours == 1
    assert cur.balls_in_current_over == 0
    assert cur.current_over_events == ["4n"]
    assert _bowler(s).runs_conceded == 4
    assert _bowler(s).fours_conceded == 1
    assert _bowler(s).wides == 0
    assert _batsman(s).runs == 0
    assert _batsman(s).fours == 0
    assert _batsman(s).balls_faced == 0


# ----------------------------------------------------------------------
# Wickets
# ----------------------------------------------------------------------
def test_wicket_bookkeeping(state):
    s = apply(state, Wicket())
    cur = s.current

    assert cur.wickets == 1
    assert cur.balls_in_current_over == 1
    assert cur.current_over_events == ["Wkt"]
    assert _batsman(s).status == OUT
    assert _batsman(s).balls_faced == 1
    assert _bowler(s).wickets == 1
    assert _bowler(s).dot_balls == 1
    assert cur.innings_over is False


def test_all_out_only_after_last_man(state):
    """Seven players: the innings survives six wickets and ends on the seventh."""
    s = state
    for _ in range(6):
        s = apply(s, Wicket())
        assert s.current.innings_over is False
        s = apply(s, _next_batsman(s))

    assert s.current.wickets == 6
    assert s.current.remaining_batsmen == []
    assert s.current.current_batsman_id == "b7"

    s = apply(s, Wicket())
    assert s.current.wickets == 7
    assert s.current.innings_over is True
    assert s.current.match_over is False
    assert s.current.status_message == "All Out!"


def test_traditional_all_out_rule(state):
    rules = Ruleset(last_man_standing=False)
    s = state
    for _ in range(5):
        s = apply(s, Wicket(), rules)
        s = apply(s, _next_batsman(s), rules)
    assert s.current.innings_over is False

    s = apply(s, Wicket(), rules)
    assert s.current.wickets == 6
    assert s.current.innings_over is True
    assert s.current.status_message == "All Out!"


# ----------------------------------------------------------------------
# Conservation properties
# ----------------------------------------------------------------------
MIXED_SEQUENCE = [
    Score(4), Extra("Wd"), Score(0), Extra("Nb"), Wicket(),
    Extra("Wd"), Extra("Wd"), Score(4), Score(0), Score(4),
]


def test_run_and_four_conservation(state):
    s = run_events(state, MIXED_SEQUENCE[:4])
    s = apply(s, Wicket())
    s = apply(s, _next_batsman(s))
    s = run_events(s, MIXED_SEQUENCE[5:])
    cur = s.current

    batsman_runs = sum(b.runs for b in cur.batting_stats.values())
    batsman_fours = sum(b.fours for b in cur.batting_stats.values())
    # extras: 3 wides (1 each) + triple-wide bonus 4 + one no-ball 4
    extras = 3 + 4 + 4
    assert cur.runs == batsman_runs + extras == 23

    no_balls = 1
    triple_wides = 1
    assert cur.fours == batsman_fours + no_balls + triple_wides == 5
    assert sum(b.runs_conceded for b in cur.bowling_stats.values()) == cur.runs


def test_history_grows_by_one_per_accepted_event(state):
    s = state
    for i, e in enumerate([Score(0), Extra("Wd"), Wicket(), SetNextBatsman(Player("b2", "Blue 2"))], start=2):
        s = apply(s, e)
        assert len(s.log) == i

    rejected = apply(s, Score(3))
    assert rejected is s


def test_apply_does_not_mutate_previous_state(state):
    before = state.current.to_dict()
    apply(state, Score(4))
    apply(state, Extra("Wd"))
    apply(state, Wicket())
    assert state.current.to_dict() == before
    assert len(state.log) == 1


# ----------------------------------------------------------------------
# Terminal / uninitialised states
# ----------------------------------------------------------------------
def test_events_ignored_after_innings_over(make_config):
    s = run_events(initialize_innings(make_config(overs=1), None), [Score(0)] * 6)
    assert s.current.innings_over

    assert apply(s, Score(4)) is s
    assert apply(s, Extra("Nb")) is s
    assert apply(s, Wicket()) is s
    assert apply(s, SetNextBowler(Player("k2", "Black 2"))) is s

    undone = apply(s, UndoLastBall())
    assert undone.current.innings_over is False
    assert undone.current.balls_in_current_over == 5


def test_events_before_any_state_return_none(state):
    assert apply(None, Score(0)) is None
    assert apply(None, UndoLastBall()) is None
    assert apply(None, SetState(state)) is state
    assert apply(state, SetState(None)) is None


def test_unknown_event_type_raises(state):
    with pytest.raises(TypeError):
        apply(state, object())


# ----------------------------------------------------------------------
# Retire / next batsman / next bowler
# ----------------------------------------------------------------------
def test_retire_and_return(state):
    s = apply(state, Score(4))
    s = apply(s, RetireBatsman())
    cur = s.current

    assert _batsman(s).status == RETIRED
    assert [p.id for p in cur.retired_batsmen] == ["b1"]
    assert cur.balls_in_current_over == 1
    assert cur.runs == 4

    s = apply(s, SetNextBatsman(Player("b2", "Blue 2")))
    s = apply(s, Wicket())
    s = apply(s, SetNextBatsman(Player("b1", "Blue 1")))
    cur = s.current

    assert cur.current_batsman_id == "b1"
    assert cur.retired_batsmen == []
    assert _batsman(s).status == NOT_OUT
    assert _batsman(s).runs == 4


def test_retire_without_replacement_is_ignored(make_config):
    solo_a = build_team("Solo", "s", size=1)
    solo_b = build_team("Duo", "d", size=2)
    s = initialize_innings(make_config(team_a=solo_a, team_b=solo_b, batting="Solo"), None)
    assert apply(s, RetireBatsman()) is s


def test_retire_dismissed_batsman_is_ignored(state):
    s = apply(state, Wicket())
    assert apply(s, RetireBatsman()) is s


def test_next_batsman_must_be_waiting(state):
    assert apply(state, SetNextBatsman(Player("k3", "Black 3"))) is state
    # the current batsman is not in the waiting pools either
    assert apply(state, SetNextBatsman(Player("b1", "Blue 1"))) is state


def test_next_bowler(make_config):
    s = initialize_innings(make_config(), 21)
    s = run_events(s, [Score(0)] * 6)
    s = apply(s, SetNextBowler(Player("k2", "Black 2")))

    assert s.current.current_bowler_id == "k2"
    assert s.current.status_message == "Target: 21"

    s = apply(s, Score(4))
    assert _bowler(s, "k2").runs_conceded == 4
    assert _bowler(s, "k1").runs_conceded == 0


def test_next_bowler_from_batting_side_is_ignored(state):
    assert apply(state, SetNextBowler(Player("b2", "Blue 2"))) is state
