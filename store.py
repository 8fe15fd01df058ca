"""
Game state storage keyed by an opaque per-session game id.

Every mutation runs inside ``game_transaction`` so two requests from the
same player (double submit, two tabs) cannot overwrite each other.
"""
import json
import logging
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Optional

import redis

from game import GameState

logger = logging.getLogger(__name__)

KEY_PREFIX = "wordle:game"


class StoreBusyError(Exception):
    """The per-session lock could not be acquired in time."""


def game_key(game_id: str) -> str:
    return f"{KEY_PREFIX}:{game_id}"


class RedisGameStore:
    """Game state as JSON in Redis, expiring with the session."""

    def __init__(self, r: redis.Redis, ttl: int = 86400, lock_timeout: float = 5.0):
        self.r = r
        self.ttl = ttl
        self.lock_timeout = lock_timeout

    def load(self, game_id: str) -> Optional[GameState]:
        raw = self.r.get(game_key(game_id))
        if raw is None:
            return None
        return GameState.from_dict(json.loads(raw))

    def save(self, game_id: str, state: GameState):
        self.r.set(game_key(game_id), json.dumps(state.to_dict()), ex=self.ttl)

    def delete(self, game_id: str):
        self.r.delete(game_key(game_id))

    @contextmanager
    def lock(self, game_id: str):
        lock = self.r.lock(
            f"{game_key(game_id)}:lock",
            timeout=self.lock_timeout,
            blocking_timeout=self.lock_timeout,
        )
        if not lock.acquire():
            raise StoreBusyError(f"Game {game_id} is locked by another request")
        try:
            yield
        finally:
            try:
                lock.release()
            except redis.exceptions.LockError:
                # Lock expired while held; the next holder owns it now.
                logger.error("Lock for game %s expired before release", game_id)


class MemoryGameStore:
    """In-process store for tests and single-process development."""

    def __init__(self, lock_timeout: float = 5.0):
        self.lock_timeout = lock_timeout
        self._data: Dict[str, dict] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def load(self, game_id: str) -> Optional[GameState]:
        data = self._data.get(game_id)
        if data is None:
            return None
        # Round-trip through JSON so callers never share list objects
        return GameState.from_dict(json.loads(json.dumps(data)))

    def save(self, game_id: str, state: GameState):
        self._data[game_id] = json.loads(json.dumps(state.to_dict()))

    def delete(self, game_id: str):
        self._data.pop(game_id, None)

    @contextmanager
    def lock(self, game_id: str):
        with self._guard:
            lock = self._locks.setdefault(game_id, threading.Lock())
        if not lock.acquire(timeout=self.lock_timeout):
            raise StoreBusyError(f"Game {game_id} is locked by another request")
        try:
            yield
        finally:
            lock.release()


@contextmanager
def game_transaction(store, game_id: str, factory: Callable[[], GameState]):
    """
    Lock, load (or create) and yield the state for ``game_id``.

    The state is saved only when the block exits normally.
    """
    with store.lock(game_id):
        state = store.load(game_id)
        if state is None:
            state = factory()
        yield state
        store.save(game_id, state)


def create_store(config):
    """Build the store named by ``GAME_STORE`` in a Flask config mapping."""
    kind = config.get("GAME_STORE", "redis")
    lock_timeout = config.get("GAME_LOCK_TIMEOUT", 5.0)
    if kind == "memory":
        return MemoryGameStore(lock_timeout=lock_timeout)
    if kind == "redis":
        r = redis.from_url(config["REDIS_URL"], decode_responses=True)
        return RedisGameStore(r, ttl=config.get("GAME_STATE_TTL", 86400), lock_timeout=lock_timeout)
    raise ValueError(f"Unknown GAME_STORE '{kind}'")
