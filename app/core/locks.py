# app/core/locks.py
from contextlib import contextmanager
from threading import Lock
from typing import Iterator


class KeyedLocks:
    """
    In-process mutexes keyed by record key.

    Sync route handlers run in FastAPI's thread pool, so a plain
    threading.Lock per key serializes read-modify-write cycles on the
    same community / join code / user. Entries are reference counted
    and dropped once nobody holds or waits for them.

    Callers must acquire keys in a consistent order (join code, then
    community, then user); `hold` takes them in the order given.
    """

    def __init__(self) -> None:
        self._guard = Lock()
        self._locks: dict[str, Lock] = {}
        self._refs: dict[str, int] = {}

    def _checkout(self, key: str) -> Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = Lock()
                self._refs[key] = 0
            self._refs[key] += 1
            return lock

    def _checkin(self, key: str) -> None:
        with self._guard:
            self._refs[key] -= 1
            if self._refs[key] == 0:
                del self._refs[key]
                del self._locks[key]

    @contextmanager
    def hold(self, *keys: str) -> Iterator[None]:
        """Acquire every lock in `keys` (duplicates ignored), release in reverse."""
        acquired: list[str] = []
        try:
            for key in dict.fromkeys(keys):
                lock = self._checkout(key)
                try:
                    lock.acquire()
                except BaseException:
                    self._checkin(key)
                    raise
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self._locks[key].release()
                self._checkin(key)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
