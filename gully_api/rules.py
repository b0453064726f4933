# gully_api/rules.py
from __future__ import annotations

from dataclasses import dataclass

from gully_api.config import (
    LAST_MAN_STANDING,
    MAX_OVERS_PER_BOWLER,
    MAX_BOWLERS_AT_QUOTA,
)

BALLS_PER_OVER = 6

# Gully cricket has exactly two scoring strokes: the dot ball and the four.
LEGAL_SCORES = (0, 4)

WIDE_RUNS = 1
NO_BALL_RUNS = 4

# Third wide in one over is punished as a boundary
WIDES_FOR_BONUS = 3
TRIPLE_WIDE_BONUS = 4


@dataclass(frozen=True)
class Ruleset:
    """
    House rules that vary between grounds.

    last_man_standing:
      True  -> all out when wickets == roster size (last batsman bats alone)
      False -> all out when wickets == roster size - 1
    """
    last_man_standing: bool = LAST_MAN_STANDING
    max_overs_per_bowler: int = MAX_OVERS_PER_BOWLER
    max_bowlers_at_quota: int = MAX_BOWLERS_AT_QUOTA

    def all_out_wickets(self, roster_size: int) -> int:
        return roster_size if self.last_man_standing else roster_size - 1


DEFAULT_RULES = Ruleset()
