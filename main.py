# main.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from gully_api import session_store
from gully_api.config import DEFAULT_OVERS, LOG_LEVEL, LOG_TO_FILE, validate_config
from gully_api.defaults import batting_side_after_toss, coin_toss, default_teams
from gully_api.events import event_from_dict
from gully_api.game import (
    GameRecord,
    apply_event,
    can_start_next_innings,
    share_view,
    start_match,
    start_next_innings,
)
from gully_api.logging_config import setup_logging
from gully_api.models import MatchConfig, Player, Team
from gully_api.stats import available_bowlers, innings_summary, scorecard

# -----------------------
# App
# -----------------------
app = FastAPI(
    title="Gully Cricket Scorer API",
    version="0.1.0",
    description="Ball-by-ball scoring for two-innings gully cricket: dots, fours, wides, no-balls and wickets, with undo",
)


@app.on_event("startup")
def on_startup():
    validate_config()
    setup_logging(LOG_LEVEL, log_to_file=LOG_TO_FILE)


@app.get("/health")
def health_check():
    return {"status": "ok", "time": datetime.utcnow().isoformat() + "Z"}


# -----------------------
# Helpers
# -----------------------
def _load_record(key: str) -> GameRecord:
    try:
        record = session_store.load(key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if record is None:
        raise HTTPException(status_code=404, detail=f"No game found for key={key}")
    return record


def _require_live(record: GameRecord, key: str) -> None:
    if record.game_state is None or record.match_config is None:
        raise HTTPException(status_code=409, detail=f"Game {key} has no innings in progress")


def _game_response(key: str, record: GameRecord) -> Dict[str, Any]:
    resp: Dict[str, Any] = {
        "key": key,
        "phase": record.phase.value,
        "record": record.to_dict(),
        "summary": None,
        "history_length": 0,
    }
    if record.game_state is not None:
        resp["summary"] = innings_summary(record.game_state.current)
        resp["history_length"] = len(record.game_state.log)
    return resp


# -----------------------
# Rosters + toss
# -----------------------
class PlayerIn(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class TeamIn(BaseModel):
    name: str = Field(..., min_length=1)
    players: List[PlayerIn] = Field(default_factory=list)


def _to_team(t: TeamIn) -> Team:
    return Team(name=t.name.strip(), players=tuple(Player(id=p.id, name=p.name.strip()) for p in t.players))


@app.get("/api/teams/default")
def get_default_teams(seed: Optional[int] = None):
    return {"teams": [t.to_dict() for t in default_teams(seed)]}


class TossRequest(BaseModel):
    team_a: str = Field(..., description="Team calling the toss")
    team_b: str
    call: Literal["heads", "tails"]
    choice_if_won: Literal["bat", "bowl"] = Field("bat", description="What the toss winner elects")


@app.post("/api/toss")
def toss(req: TossRequest):
    try:
        result = coin_toss(req.team_a, req.team_b, req.call)
        batting = batting_side_after_toss(req.team_a, req.team_b, result["winner"], req.choice_if_won)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {**result, "choice": req.choice_if_won, "batting_team_name": batting}


# -----------------------
# Match setup
# -----------------------
class StartMatchRequest(BaseModel):
    team_a: TeamIn
    team_b: TeamIn
    overs: int = Field(DEFAULT_OVERS, ge=1, le=50)
    batting_team_name: str
    opening_batsman_id: str
    opening_bowler_id: str


@app.post("/api/games/{key}/start")
def start_game(key: str, req: StartMatchRequest):
    team_a = _to_team(req.team_a)
    team_b = _to_team(req.team_b)

    all_players = {p.id: p for p in team_a.players + team_b.players}
    batsman = all_players.get(req.opening_batsman_id)
    bowler = all_players.get(req.opening_bowler_id)
    if batsman is None:
        raise HTTPException(status_code=400, detail=f"Unknown opening_batsman_id: {req.opening_batsman_id}")
    if bowler is None:
        raise HTTPException(status_code=400, detail=f"Unknown opening_bowler_id: {req.opening_bowler_id}")

    config = MatchConfig(
        team_a=team_a,
        team_b=team_b,
        overs=req.overs,
        batting_team_name=req.batting_team_name.strip(),
        opening_batsman=batsman,
        opening_bowler=bowler,
    )

    try:
        with session_store.lock_for(key):
            record = start_match(config)
            session_store.save(key, record)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _game_response(key, record)


@app.get("/api/games/{key}")
def get_game(key: str):
    return _game_response(key, _load_record(key))


@app.delete("/api/games/{key}")
def reset_game(key: str):
    try:
        session_store.clear(key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"key": key, "cleared": True}


# -----------------------
# Live scoring
# -----------------------
EventTypeIn = Literal[
    "SCORE",
    "EXTRA",
    "WICKET",
    "RETIRE_BATSMAN",
    "SET_NEXT_BATSMAN",
    "SET_NEXT_BOWLER",
    "UNDO_LAST_BALL",
    "UNDO_OVER",
]


class EventIn(BaseModel):
    type: EventTypeIn
    runs: Optional[int] = Field(None, description="SCORE: 0 or 4. EXTRA: optional override")
    kind: Optional[Literal["Wd", "Nb"]] = Field(None, description="EXTRA only")
    player_id: Optional[str] = Field(None, description="SET_NEXT_BATSMAN / SET_NEXT_BOWLER")


@app.post("/api/games/{key}/events")
def post_event(key: str, req: EventIn):
    with session_store.lock_for(key):
        record = _load_record(key)
        _require_live(record, key)

        payload: Dict[str, Any] = req.model_dump(exclude_none=True)
        if req.player_id is not None:
            current = record.game_state.current
            roster = current.batting_team if req.type == "SET_NEXT_BATSMAN" else current.bowling_team
            player = roster.find(req.player_id)
            if player is None:
                raise HTTPException(status_code=400, detail=f"Unknown player_id for {roster.name}: {req.player_id}")
            payload["player"] = player.to_dict()

        try:
            event = event_from_dict(payload)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        before = len(record.game_state.log)
        record = apply_event(record, event)
        session_store.save(key, record)

    resp = _game_response(key, record)
    resp["accepted"] = resp["history_length"] != before
    return resp


@app.post("/api/games/{key}/next-innings")
def next_innings(key: str):
    with session_store.lock_for(key):
        record = _load_record(key)
        _require_live(record, key)
        if not can_start_next_innings(record):
            raise HTTPException(status_code=409, detail="First innings is not over (or the match already is)")

        record = start_next_innings(record)
        session_store.save(key, record)

    return _game_response(key, record)


# -----------------------
# Read-only views
# -----------------------
@app.get("/api/games/{key}/scorecard")
def get_scorecard(key: str):
    record = _load_record(key)
    _require_live(record, key)
    return {
        "key": key,
        "first_innings": scorecard(record.first_innings_summary) if record.first_innings_summary else None,
        "current_innings": scorecard(record.game_state.current),
    }


@app.get("/api/games/{key}/share")
def get_share_view(key: str):
    return share_view(_load_record(key))


@app.get("/api/games/{key}/bowlers/available")
def get_available_bowlers(key: str):
    record = _load_record(key)
    _require_live(record, key)
    current = record.game_state.current
    bowlers = available_bowlers(current)
    return {
        "key": key,
        "current_bowler_id": current.current_bowler_id,
        "available": [
            {**p.to_dict(), "overs": current.bowling_stats[p.id].overs if p.id in current.bowling_stats else 0}
            for p in bowlers
        ],
        "none_available": not bowlers,
    }
