# gully_api/defaults.py
from __future__ import annotations

import random
import re
import string
from typing import List, Optional

from gully_api.models import Player, Team

_ID_CHARS = string.ascii_lowercase + string.digits


def create_player(name: str, rng: Optional[random.Random] = None) -> Player:
    """
    Player with a unique-enough id for local state, e.g. "player-thippa-lemon-k3j9x0a1b".
    """
    r = rng or random
    name = name.strip()
    if not name:
        raise ValueError("Player name must be non-empty")
    slug = re.sub(r"[\s.]", "-", name.lower())
    suffix = "".join(r.choice(_ID_CHARS) for _ in range(9))
    return Player(id=f"player-{slug}-{suffix}", name=name)


def make_team(name: str, player_names: List[str], rng: Optional[random.Random] = None) -> Team:
    return Team(name=name, players=tuple(create_player(n, rng) for n in player_names))


def default_teams(seed: Optional[int] = None) -> List[Team]:
    """The regular Sunday sides."""
    rng = random.Random(seed)
    return [
        make_team(
            "Team Blue (C: Muzeeb)",
            ["Muzeeb", "Adarsh", "Basuva", "Tahmid", "Waseem", "Sidanna", "Thippa Lemon"],
            rng,
        ),
        make_team(
            "Team Black (C: Pintu)",
            ["Pintu", "Avinash", "Raju", "Manu", "Sachin", "Akash", "Santhosh"],
            rng,
        ),
        make_team(
            "Team White (C: Rahul)",
            ["Rahul", "Shekar", "Thippesh", "Jagga", "Malu", "Veeru", "Shivaraj"],
            rng,
        ),
    ]


def coin_toss(team_a: str, team_b: str, call: str, rng: Optional[random.Random] = None) -> dict:
    """
    team_a calls heads/tails. Returns the toss winner and the face that landed.
    """
    call = call.strip().lower()
    if call not in ("heads", "tails"):
        raise ValueError("call must be 'heads' or 'tails'")
    if team_a == team_b:
        raise ValueError("team_a and team_b must be different")

    r = rng or random
    landed = r.choice(["heads", "tails"])
    winner = team_a if landed == call else team_b
    return {"landed": landed, "call": call, "winner": winner}


def batting_side_after_toss(team_a: str, team_b: str, winner: str, choice: str) -> str:
    """Name of the team batting first given the toss winner's choice (bat/bowl)."""
    choice = choice.strip().lower()
    if winner not in (team_a, team_b):
        raise ValueError(f"Toss winner {winner} is not playing")
    if choice not in ("bat", "bowl"):
        raise ValueError("choice must be 'bat' or 'bowl'")
    if choice == "bat":
        return winner
    return team_b if winner == team_a else team_a
