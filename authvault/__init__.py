"""
authvault
=========
File-backed authentication state for long-lived messaging sessions.

Provides:
- open_session(): credential bundle + batched key store over one directory
- Per-file FIFO locking shared by all coroutines on the event loop
- JSON records with lossless binary fields
"""

from .errors import AuthStateError, LockQueueFullError, SessionDirectoryError
from .session import FileKeyStore, SessionState, open_session

__all__ = [
    "AuthStateError",
    "LockQueueFullError",
    "SessionDirectoryError",
    "FileKeyStore",
    "SessionState",
    "open_session",
]
