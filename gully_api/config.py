# gully_api/config.py
from __future__ import annotations

import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()


def _get_env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, "1" if default else "0").lower()
    return raw in {"1", "true", "yes", "on"}


# -------------------------
# House rules
# -------------------------
# 1 = innings ends when every player is out (last man bats alone)
# 0 = traditional rule, innings ends with one batsman stranded
LAST_MAN_STANDING: bool = _get_env_bool("LAST_MAN_STANDING", True)

DEFAULT_OVERS: int = _get_env_int("DEFAULT_OVERS", 5)

# Bowler quota: a bowler may bowl at most MAX_OVERS_PER_BOWLER overs, and only
# MAX_BOWLERS_AT_QUOTA bowlers may reach that figure in one innings.
MAX_OVERS_PER_BOWLER: int = _get_env_int("MAX_OVERS_PER_BOWLER", 3)
MAX_BOWLERS_AT_QUOTA: int = _get_env_int("MAX_BOWLERS_AT_QUOTA", 3)


# -------------------------
# Session store
# -------------------------
SESSION_TTL_SECONDS: int = _get_env_int("SESSION_TTL_SECONDS", 24 * 3600)


# -------------------------
# Logging
# -------------------------
LOG_LEVEL: str = _get_env("LOG_LEVEL", "INFO").upper()
LOG_TO_FILE: bool = _get_env_bool("LOG_TO_FILE", False)
LOG_DIR: str = _get_env("LOG_DIR", "logs")

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def validate_config() -> None:
    if DEFAULT_OVERS <= 0:
        raise RuntimeError("DEFAULT_OVERS must be positive")

    if MAX_OVERS_PER_BOWLER <= 0:
        raise RuntimeError("MAX_OVERS_PER_BOWLER must be positive")

    if MAX_BOWLERS_AT_QUOTA <= 0:
        raise RuntimeError("MAX_BOWLERS_AT_QUOTA must be positive")

    # TTL validation
    if SESSION_TTL_SECONDS <= 0:
        raise RuntimeError("SESSION_TTL_SECONDS must be positive")

    if LOG_LEVEL not in _LOG_LEVELS:
        raise RuntimeError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {LOG_LEVEL!r}")
