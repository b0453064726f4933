"""Shared pytest fixtures: two seven-a-side rosters and match configs."""

from __future__ import annotations

import os

import pytest

# Keep config deterministic regardless of a developer's .env
os.environ.setdefault("LAST_MAN_STANDING", "1")
os.environ.setdefault("MAX_OVERS_PER_BOWLER", "3")
os.environ.setdefault("MAX_BOWLERS_AT_QUOTA", "3")

from gully_api.innings import initialize_innings  # noqa: E402
from gully_api.models import MatchConfig, Player, Team  # noqa: E402


def build_team(name: str, prefix: str, size: int = 7) -> Team:
    return Team(
        name=name,
        players=tuple(Player(id=f"{prefix}{i}", name=f"{name} {i}") for i in range(1, size + 1)),
    )


@pytest.fixture
def blue() -> Team:
    return build_team("Blue", "b")


@pytest.fixture
def black() -> Team:
    return build_team("Black", "k")


@pytest.fixture
def make_config(blue, black):
    """Factory: Blue bats first, b1 opens, k1 bowls, unless told otherwise."""

    def _make(overs: int = 5, batting: str = "Blue", team_a: Team = None, team_b: Team = None) -> MatchConfig:
        a = team_a or blue
        b = team_b or black
        bat, bowl = (a, b) if batting == a.name else (b, a)
        return MatchConfig(
            team_a=a,
            team_b=b,
            overs=overs,
            batting_team_name=batting,
            opening_batsman=bat.players[0],
            opening_bowler=bowl.players[0],
        )

    return _make


@pytest.fixture
def config(make_config) -> MatchConfig:
    return make_config()


@pytest.fixture
def state(config):
    return initialize_innings(config, None)
