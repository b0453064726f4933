# gully_api/engine.py
"""
Match scoring state machine.

apply(state, event) is the single transition function. It never mutates the
incoming state: accepted events deep-copy the live snapshot, update the copy,
run the completion check and return a new MatchState whose log is one entry
longer. Rejected events return the incoming state object unchanged.
"""

from __future__ import annotations

import copy
import logging
from typing import Optional

from gully_api.completion import check_completion
from gully_api.events import (
    Event,
    Extra,
    RetireBatsman,
    Score,
    SetNextBatsman,
    SetNextBowler,
    SetState,
    UndoLastBall,
    UndoOver,
    Wicket,
    NO_BALL,
    WIDE,
)
from gully_api.innings import progress_message
from gully_api.models import (
    BattingStats,
    BowlingStats,
    InningsSnapshot,
    MatchState,
    NOT_OUT,
    OUT,
    RETIRED,
)
from gully_api.rules import (
    BALLS_PER_OVER,
    DEFAULT_RULES,
    LEGAL_SCORES,
    TRIPLE_WIDE_BONUS,
    WIDES_FOR_BONUS,
    Ruleset,
)

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Entry point
# ----------------------------------------------------------------------
def apply(
    state: Optional[MatchState],
    event: Event,
    rules: Ruleset = DEFAULT_RULES,
) -> Optional[MatchState]:
    if isinstance(event, SetState):
        return event.state

    if state is None:
        logger.debug("Ignoring %s: no match in progress", type(event).__name__)
        return None

    if isinstance(event, UndoLastBall):
        return _undo_last_ball(state)
    if isinstance(event, UndoOver):
        return _undo_over(state)

    current = state.current
    if current.innings_over:
        logger.debug("Ignoring %s: innings is over", type(event).__name__)
        return state

    snap = copy.deepcopy(current)

    if isinstance(event, Score):
        accepted = _apply_score(snap, event)
    elif isinstance(event, Extra):
        accepted = _apply_extra(snap, event)
    elif isinstance(event, Wicket):
        accepted = _apply_wicket(snap)
    elif isinstance(event, RetireBatsman):
        accepted = _apply_retire(snap)
    elif isinstance(event, SetNextBatsman):
        accepted = _apply_next_batsman(snap, event)
    elif isinstance(event, SetNextBowler):
        accepted = _apply_next_bowler(snap, event)
    else:
        raise TypeError(f"Unsupported event: {event!r}")

    if not accepted:
        return state

    check_completion(snap, rules)
    if snap.innings_over and not current.innings_over:
        logger.info(
            "Innings complete: %s %d/%d (%d.%d ov) - %s",
            snap.batting_team.name,
            snap.runs,
            snap.wickets,
            snap.overs_completed,
            snap.balls_in_current_over,
            snap.status_message,
        )

    return MatchState(log=state.log + [snap])


def run_events(state: Optional[MatchState], events, rules: Ruleset = DEFAULT_RULES) -> Optional[MatchState]:
    """Apply events in order; convenience for replays and tests."""
    for e in events:
        state = apply(state, e, rules)
    return state


# ----------------------------------------------------------------------
# Stat lookups
# ----------------------------------------------------------------------
def _batsman(snap: InningsSnapshot) -> Optional[BattingStats]:
    stats = snap.batting_stats.get(snap.current_batsman_id)
    if stats is None:
        logger.debug("Unknown batsman id %s", snap.current_batsman_id)
    return stats


def _bowler(snap: InningsSnapshot) -> Optional[BowlingStats]:
    stats = snap.bowling_stats.get(snap.current_bowler_id)
    if stats is None:
        logger.debug("Unknown bowler id %s", snap.current_bowler_id)
    return stats


def _legal_ball(snap: InningsSnapshot, bowler: BowlingStats, glyph: str) -> None:
    """
    Ball/over bookkeeping shared by Score and Wicket.
    The bowler's ball count mirrors the innings count within the over.
    """
    snap.balls_in_current_over += 1
    snap.current_over_events.append(glyph)

    if snap.balls_in_current_over == BALLS_PER_OVER:
        snap.balls_in_current_over = 0
        snap.overs_completed += 1
        bowler.overs += 1
        bowler.balls_in_current_over = 0
        snap.wides_in_current_over = 0
        snap.current_over_events = []
    else:
        bowler.balls_in_current_over = snap.balls_in_current_over


# ----------------------------------------------------------------------
# Scoring events
# ----------------------------------------------------------------------
def _apply_score(snap: InningsSnapshot, event: Score) -> bool:
    if event.runs not in LEGAL_SCORES:
        logger.debug("Rejecting SCORE of %s runs", event.runs)
        return False

    batsman = _batsman(snap)
    bowler = _bowler(snap)
    if batsman is None or bowler is None:
        return False

    runs = event.runs
    snap.runs += runs
    batsman.runs += runs
    batsman.balls_faced += 1
    bowler.runs_conceded += runs

    if runs == 4:
        snap.fours += 1
        batsman.fours += 1
        bowler.fours_conceded += 1
    else:
        bowler.dot_balls += 1

    _legal_ball(snap, bowler, str(runs))
    return True


def _apply_extra(snap: InningsSnapshot, event: Extra) -> bool:
    bowler = _bowler(snap)
    if bowler is None:
        return False

    runs = event.payload
    if runs < 0:
        logger.debug("Rejecting EXTRA with negative runs %s", runs)
        return False

    snap.runs += runs
    bowler.runs_conceded += runs

    if event.kind == WIDE:
        bowler.wides += 1
        snap.wides_in_current_over += 1
        if snap.wides_in_current_over == WIDES_FOR_BONUS:
            snap.runs += TRIPLE_WIDE_BONUS
            bowler.runs_conceded += TRIPLE_WIDE_BONUS
            snap.fours += 1
            bowler.fours_conceded += 1
            snap.wides_in_current_over = 0
        snap.current_over_events.append("Wd")
        return True

    if event.kind == NO_BALL:
        # Single addition: a no-ball is worth its payload once, and counts as a four.
        snap.fours += 1
        bowler.fours_conceded += 1
        snap.current_over_events.append("4n")
        return True

    logger.debug("Rejecting EXTRA of unknown kind %r", event.kind)
    return False


def _apply_wicket(snap: InningsSnapshot) -> bool:
    batsman = _batsman(snap)
    bowler = _bowler(snap)
    if batsman is None or bowler is None:
        return False

    snap.wickets += 1
    batsman.status = OUT
    batsman.balls_faced += 1
    bowler.wickets += 1
    bowler.dot_balls += 1

    _legal_ball(snap, bowler, "Wkt")
    return True


# ----------------------------------------------------------------------
# Administrative events
# ----------------------------------------------------------------------
def _apply_retire(snap: InningsSnapshot) -> bool:
    batsman = _batsman(snap)
    if batsman is None or batsman.status != NOT_OUT:
        return False

    if not snap.remaining_batsmen and not snap.retired_batsmen:
        logger.debug("Cannot retire %s: no replacement available", batsman.player_name)
        return False

    player = snap.batting_team.find(snap.current_batsman_id)
    if player is None:
        return False

    batsman.status = RETIRED
    snap.retired_batsmen.append(player)
    return True


def _apply_next_batsman(snap: InningsSnapshot, event: SetNextBatsman) -> bool:
    pid = event.player.id
    in_remaining = any(p.id == pid for p in snap.remaining_batsmen)
    in_retired = any(p.id == pid for p in snap.retired_batsmen)
    if not (in_remaining or in_retired):
        logger.debug("Rejecting next batsman %s: not waiting to bat", pid)
        return False

    snap.current_batsman_id = pid
    snap.remaining_batsmen = [p for p in snap.remaining_batsmen if p.id != pid]
    snap.retired_batsmen = [p for p in snap.retired_batsmen if p.id != pid]

    stats = snap.batting_stats.get(pid)
    if stats is not None and stats.status == RETIRED:
        stats.status = NOT_OUT
    return True


def _apply_next_bowler(snap: InningsSnapshot, event: SetNextBowler) -> bool:
    pid = event.player.id
    if snap.bowling_team.find(pid) is None:
        logger.debug("Rejecting next bowler %s: not in %s", pid, snap.bowling_team.name)
        return False

    snap.current_bowler_id = pid
    snap.status_message = progress_message(snap.target)
    return True


# ----------------------------------------------------------------------
# Undo
# ----------------------------------------------------------------------
def _undo_last_ball(state: MatchState) -> MatchState:
    if len(state.log) < 2:
        return state
    return MatchState(log=state.log[:-1])


def _has_deliveries(snap: InningsSnapshot) -> bool:
    return snap.balls_in_current_over > 0 or bool(snap.current_over_events)


def over_start_index(state: MatchState) -> int:
    """
    Index in the log of the snapshot UndoOver restores.

    That is the snapshot just before the first delivery (legal ball or extra)
    of the over in progress, so a bowler picked before the over began stays
    picked. When nothing has been delivered since the last over ended, the
    previous over is the one reset.
    """
    current = state.current
    over = current.overs_completed
    if not _has_deliveries(current):
        over -= 1

    if over < 0:
        return 0

    for i, snap in enumerate(state.log):
        if snap.overs_completed == over and _has_deliveries(snap):
            return max(i - 1, 0)
    return len(state.log) - 1


def _undo_over(state: MatchState) -> MatchState:
    if len(state.log) <= 1:
        return state

    idx = over_start_index(state)
    if idx >= len(state.log) - 1:
        return state
    return MatchState(log=state.log[: idx + 1])
