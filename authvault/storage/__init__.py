# authvault/storage/__init__.py

from .models import APP_STATE_SYNC_KEY, AppStateSyncKeyData, AppStateSyncKeyFingerprint
from .provider import SignalKeyStore
from .record_store import ReadOutcome, RecordStore, classify_read_failure


__all__ = [
    "APP_STATE_SYNC_KEY",
    "AppStateSyncKeyData",
    "AppStateSyncKeyFingerprint",
    "SignalKeyStore",
    "ReadOutcome",
    "RecordStore",
    "classify_read_failure",
]
