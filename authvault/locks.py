"""
authvault.locks
---------------
Per-file mutual exclusion for coroutines sharing one event loop.

- FileLock: FIFO mutex. Ownership is handed directly to the oldest waiter
  on release, so a newcomer can never overtake a queued caller.
- FileLockRegistry: normalized path -> FileLock, created on first use and
  kept for the life of the registry.

The waiter queue is unbounded unless ``max_pending`` is set. There is no
acquire timeout; callers are expected to use ``hold()``.
"""

from __future__ import annotations
from collections import deque
from contextlib import asynccontextmanager
from typing import AsyncIterator, Deque, Dict, Optional
import asyncio, os, threading

from .config import UNBOUNDED
from .errors import LockQueueFullError


class ReleaseHandle:
    """Returned by FileLock.acquire(). Releasing twice is a no-op."""

    __slots__ = ("_lock", "_released")

    def __init__(self, lock: "FileLock"):
        self._lock = lock
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._lock._release()


class FileLock:
    def __init__(self, path: str, max_pending: Optional[int] = UNBOUNDED):
        self.path = path
        self.max_pending = max_pending
        self._locked = False
        self._waiters: Deque[asyncio.Future] = deque()

    def __repr__(self) -> str:
        state = "locked" if self._locked else "unlocked"
        return f"<FileLock {self.path!r} {state} pending={self.pending}>"

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def pending(self) -> int:
        return sum(1 for w in self._waiters if not w.done())

    async def acquire(self) -> ReleaseHandle:
        if not self._locked and self.pending == 0:
            self._locked = True
            return ReleaseHandle(self)

        if self.max_pending is not None and self.pending >= self.max_pending:
            raise LockQueueFullError(
                f"Too many pending operations on {self.path} (max_pending={self.max_pending})"
            )

        fut = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        try:
            await fut
        except asyncio.CancelledError:
            if fut.cancelled():
                try:
                    self._waiters.remove(fut)
                except ValueError:
                    pass
            else:
                # ownership was handed over just before the cancel landed
                self._release()
            raise
        return ReleaseHandle(self)

    def _release(self) -> None:
        while self._waiters:
            fut = self._waiters.popleft()
            if not fut.done():
                # hand ownership straight to the next waiter; stays locked
                fut.set_result(True)
                return
        self._locked = False

    @asynccontextmanager
    async def hold(self) -> AsyncIterator["FileLock"]:
        handle = await self.acquire()
        try:
            yield self
        finally:
            handle.release()


class FileLockRegistry:
    def __init__(self, max_pending: Optional[int] = UNBOUNDED):
        self.max_pending = max_pending
        self._locks: Dict[str, FileLock] = {}
        self._guard = threading.Lock()

    @staticmethod
    def normalize(path: str | os.PathLike) -> str:
        return os.path.normpath(os.path.abspath(os.fspath(path)))

    def lock_for(self, path: str | os.PathLike) -> FileLock:
        key = self.normalize(path)
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = FileLock(key, max_pending=self.max_pending)
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        return self.normalize(path) in self._locks
