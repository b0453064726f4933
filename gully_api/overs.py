# gully_api/overs.py
from __future__ import annotations

from typing import Optional

from gully_api.rules import BALLS_PER_OVER


def balls_to_overs(balls: int) -> str:
    """22 legal balls -> "3.4" (completed overs, dot, balls into the next)."""
    if balls < 0:
        raise ValueError("Balls cannot be negative")
    return f"{balls // BALLS_PER_OVER}.{balls % BALLS_PER_OVER}"


def run_rate(runs: int, balls: int) -> float:
    if balls <= 0:
        return 0.0
    return runs * BALLS_PER_OVER / balls


def required_run_rate(runs_needed: int, balls_left: int) -> Optional[float]:
    """
    Runs per over still needed. 0.0 once the target is reached; None when no
    balls remain but runs are still required.
    """
    if runs_needed <= 0:
        return 0.0
    if balls_left <= 0:
        return None
    return runs_needed * BALLS_PER_OVER / balls_left
