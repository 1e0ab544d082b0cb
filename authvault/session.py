"""
authvault.session
-----------------
Multi-file auth state: one directory per session, one JSON file per key.

    state = await open_session("sessions/main")
    keys = await state.keys.get("pre-key", {"1", "2"})
    await state.keys.set({"pre-key": {"1": None}})
    await state.save_creds()

The credential bundle lives in ``<base_name>.json``; every other record in
``<category>-<id>.json``. All file access goes through one RecordStore and
its lock registry.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, Mapping, Optional
import asyncio, os, stat

from authvault.config import StoreConfig, load_store_config
from authvault.crypto import init_auth_creds
from authvault.errors import SessionDirectoryError
from authvault.locks import FileLockRegistry
from authvault.logger import get_logger
from authvault.paths import record_file_name, sanitize_base_name
from authvault.storage.models import APP_STATE_SYNC_KEY, AppStateSyncKeyData
from authvault.storage.provider import SignalKeyStore
from authvault.storage.record_store import RecordStore, classify_read_failure

log = get_logger("authvault.session")


class FileKeyStore(SignalKeyStore):
    def __init__(self, store: RecordStore):
        self.store = store

    async def _get_one(self, category: str, record_id: str) -> Optional[Any]:
        value = await self.store.read(record_file_name(category, record_id))
        if category == APP_STATE_SYNC_KEY and value is not None:
            try:
                value = AppStateSyncKeyData.from_dict(value)
            except (TypeError, ValueError, AttributeError) as e:
                # malformed record reads as missing, same as a parse failure
                outcome = classify_read_failure(e)
                log.warning(
                    f"[KEYS GET] undecodable {category}/{record_id} -> {outcome.value}: {e}",
                    extra={"op": "get", "path": self.store.path_for(record_file_name(category, record_id))},
                )
                return None
        return value

    async def get(self, category: str, ids: Iterable[str]) -> Dict[str, Any]:
        ids = list(dict.fromkeys(ids))
        values = await asyncio.gather(*(self._get_one(category, i) for i in ids))
        return dict(zip(ids, values))

    async def set(self, updates: Mapping[str, Mapping[str, Optional[Any]]]) -> None:
        ops = []
        for category, records in updates.items():
            for record_id, value in (records or {}).items():
                file_name = record_file_name(category, record_id)
                if value is not None:
                    ops.append(self.store.write(file_name, value))
                else:
                    ops.append(self.store.remove(file_name))

        # every dispatched op runs to completion; no rollback on failure
        results = await asyncio.gather(*ops, return_exceptions=True)
        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            log.error(f"[KEYS SET] {len(errors)}/{len(ops)} operations failed", extra={"op": "set"})
            raise errors[0]


class SessionState:
    def __init__(self, directory: str, creds: Dict[str, Any], store: RecordStore, cred_file_name: str):
        self.directory = directory
        self.creds = creds
        self.store = store
        self.cred_file_name = cred_file_name
        self.keys = FileKeyStore(store)

    def __repr__(self) -> str:
        return f"<SessionState {self.directory!r} creds={self.cred_file_name!r}>"

    async def save_creds(self) -> None:
        await self.store.write(self.cred_file_name, self.creds)
        log.debug("[CREDS] saved", extra={"op": "save_creds", "path": self.store.path_for(self.cred_file_name)})


def _ensure_directory(directory: str) -> None:
    try:
        info = os.stat(directory)
    except OSError:
        info = None

    if info is not None:
        if not stat.S_ISDIR(info.st_mode):
            raise SessionDirectoryError(
                f"Found non-directory at {directory}, delete or specify a different location."
            )
        return

    os.makedirs(directory, exist_ok=True)
    log.info("[SESSION] created directory", extra={"session": directory})


async def open_session(
    directory: str | os.PathLike,
    name: Optional[str] = None,
    *,
    lock_registry: Optional[FileLockRegistry] = None,
    config: StoreConfig | Dict[str, Any] | None = None,
    init_creds: Callable[[], Dict[str, Any]] = init_auth_creds,
) -> SessionState:
    """
    Open (or create) the session stored in ``directory``.

    Raises SessionDirectoryError when ``directory`` is an existing
    non-directory. A missing credential file is not an error: a fresh bundle
    from ``init_creds`` is used and written on the first save_creds().
    Pass a shared ``lock_registry`` when several sessions may touch the
    same files.
    """
    if not isinstance(config, StoreConfig):
        config = load_store_config(config)

    directory = os.fspath(directory)
    await asyncio.to_thread(_ensure_directory, directory)

    store = RecordStore(directory, lock_registry=lock_registry, config=config)
    cred_file_name = f"{sanitize_base_name(name)}.json"

    creds = await store.read(cred_file_name)
    if creds is None:
        creds = init_creds()
        log.info("[SESSION] initialized new credentials", extra={"session": directory})

    log.info(f"[SESSION] opened creds={cred_file_name}", extra={"session": directory})
    return SessionState(directory, creds, store, cred_file_name)
