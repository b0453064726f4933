# gully_api/session_store.py
from __future__ import annotations

import threading
import time
from typing import Dict, Optional, Tuple

from gully_api.config import SESSION_TTL_SECONDS
from gully_api.game import GameRecord

# In-memory TTL store for a single instance
# key -> (expires_at_epoch, serialized record)
_store: Dict[str, Tuple[float, dict]] = {}
_locks: Dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()

NAMESPACE = "game"


def make_key(key: str) -> str:
    """
    Namespaced session key.
    Example:
      make_key("alice") -> "game:alice"
    """
    key = str(key).strip()
    if not key:
        raise ValueError("Session key must be non-empty")
    return f"{NAMESPACE}:{key}"


def lock_for(key: str) -> threading.Lock:
    """Per-session lock; callers hold it across load -> apply -> save."""
    k = make_key(key)
    with _locks_guard:
        lock = _locks.get(k)
        if lock is None:
            lock = threading.Lock()
            _locks[k] = lock
        return lock


def _forget(k: str) -> None:
    _store.pop(k, None)
    with _locks_guard:
        lock = _locks.get(k)
        # held locks stay registered
        if lock is not None and not lock.locked():
            del _locks[k]


def _sweep_expired(now: float) -> None:
    for k in [k for k, (exp, _) in _store.items() if now > exp]:
        _forget(k)


def load(key: str) -> Optional[GameRecord]:
    k = make_key(key)
    item = _store.get(k)
    if not item:
        return None

    expires_at, data = item
    if time.time() > expires_at:
        _forget(k)
        return None

    # Stored serialized so callers never share mutable objects with the store
    return GameRecord.from_dict(data)


def save(key: str, record: GameRecord, ttl_seconds: int = SESSION_TTL_SECONDS) -> None:
    if ttl_seconds <= 0:
        return
    now = time.time()
    _sweep_expired(now)
    _store[make_key(key)] = (now + ttl_seconds, record.to_dict())


def clear(key: str) -> None:
    _forget(make_key(key))


def clear_all() -> None:
    _store.clear()
    with _locks_guard:
        _locks.clear()
