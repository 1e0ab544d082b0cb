"""
authvault.storage.record_store
------------------------------
One JSON file per record, each access serialized through the file's lock.

    write   serialize + overwrite; OSError propagates
    read    parse; any failure reads as absent (None)
    remove  unlink; a missing file is not an error

Blocking file calls run via asyncio.to_thread so other records keep
moving while one is on disk.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Callable, Optional
import asyncio, os

from authvault.config import StoreConfig, load_store_config
from authvault.locks import FileLockRegistry
from authvault.logger import get_logger
from authvault.paths import sanitize_file_token
from authvault.serialization import dumps, loads

log = get_logger("authvault.store")


class ReadOutcome(str, Enum):
    ABSENT = "absent"


def classify_read_failure(exc: BaseException) -> ReadOutcome:
    """
    Every read failure (missing file, bad JSON, bad base64, permissions,
    lock queue overflow) collapses to ABSENT. Callers of read() cannot tell
    a broken record from a missing one.
    """
    return ReadOutcome.ABSENT


def _read_text(path: str, encoding: str) -> str:
    with open(path, "r", encoding=encoding) as f:
        return f.read()


def _write_text(path: str, text: str, encoding: str) -> None:
    with open(path, "w", encoding=encoding) as f:
        f.write(text)


class RecordStore:
    def __init__(
        self,
        directory: str | os.PathLike,
        lock_registry: Optional[FileLockRegistry] = None,
        config: Optional[StoreConfig] = None,
    ):
        self.directory = os.fspath(directory)
        self.config = config or load_store_config()
        # an empty registry is falsy (__len__), so test against None
        if lock_registry is None:
            lock_registry = FileLockRegistry(max_pending=self.config.lock_max_pending)
        self.locks = lock_registry

    def path_for(self, file_name: str) -> str:
        return os.path.join(self.directory, sanitize_file_token(file_name))

    async def _run_locked(self, path: str, func: Callable[..., Any], *args: Any) -> Any:
        """
        Run a blocking file call in a worker thread while holding the path's
        lock. The lock stays held until the thread is done, even when the
        caller is cancelled, so the next operation on the path never overlaps
        a call still in flight.
        """
        async with self.locks.lock_for(path).hold():
            task = asyncio.ensure_future(asyncio.to_thread(func, *args))
            try:
                return await asyncio.shield(task)
            except asyncio.CancelledError:
                while not task.done():
                    try:
                        await asyncio.wait({task})
                    except asyncio.CancelledError:
                        continue
                if not task.cancelled():
                    task.exception()  # mark retrieved; the caller only sees the cancel
                raise

    async def write(self, file_name: str, value: Any) -> None:
        path = self.path_for(file_name)
        text = dumps(value, indent=self.config.json_indent)
        try:
            await self._run_locked(path, _write_text, path, text, self.config.encoding)
        except OSError as e:
            log.error(f"[STORE WRITE] failed: {e}", extra={"op": "write", "path": path})
            raise
        log.debug(f"[STORE WRITE] {len(text)} chars", extra={"op": "write", "path": path})

    async def read(self, file_name: str) -> Optional[Any]:
        path = self.path_for(file_name)
        try:
            text = await self._run_locked(path, _read_text, path, self.config.encoding)
            return loads(text)
        except Exception as e:
            outcome = classify_read_failure(e)
            if isinstance(e, FileNotFoundError):
                log.debug("[STORE READ] miss", extra={"op": "read", "path": path})
            else:
                log.warning(
                    f"[STORE READ] {outcome.value}: {type(e).__name__}: {e}",
                    extra={"op": "read", "path": path},
                )
            return None

    async def remove(self, file_name: str) -> None:
        path = self.path_for(file_name)
        try:
            await self._run_locked(path, os.remove, path)
        except FileNotFoundError:
            log.debug("[STORE REMOVE] already absent", extra={"op": "remove", "path": path})
            return
        except OSError as e:
            log.error(f"[STORE REMOVE] failed: {e}", extra={"op": "remove", "path": path})
            raise
        log.debug("[STORE REMOVE] done", extra={"op": "remove", "path": path})
