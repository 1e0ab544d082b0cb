from __future__ import annotations


class AuthStateError(Exception):
    pass


class SessionDirectoryError(AuthStateError):
    """The session path exists but is not a directory. Not recoverable."""


class LockQueueFullError(AuthStateError):
    """A bounded file lock already has ``max_pending`` waiters."""
