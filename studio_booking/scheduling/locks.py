"""
Keyed re-entrant locks.

The check-then-write sequences on a photographer's slot set run while
holding that photographer's lock; lifecycle transitions on a booking
run while holding that booking's lock. Locks are always taken booking
first, then photographers in sorted order.
"""

import logging
import threading
from contextlib import ExitStack, contextmanager
from typing import Iterable, Iterator

logger = logging.getLogger(__name__)


class KeyedLocks:
    """A registry of re-entrant locks, created on demand and dropped when idle."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}
        self._users: dict[str, int] = {}

    def _checkout(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            self._users[key] = self._users.get(key, 0) + 1
            return lock

    def _checkin(self, key: str) -> None:
        with self._guard:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock = self._checkout(key)
        try:
            with lock:
                logger.debug("%s lock acquired: %s", self._name, key)
                yield
        finally:
            self._checkin(key)

    @contextmanager
    def hold_many(self, keys: Iterable[str]) -> Iterator[None]:
        """Hold several keys at once, acquired in sorted order."""
        with ExitStack() as stack:
            for key in sorted(set(keys)):
                stack.enter_context(self.hold(key))
            yield

    def active_keys(self) -> list[str]:
        with self._guard:
            return list(self._locks)
