"""
authvault.paths
---------------
Maps logical record identifiers to file names that are safe to join onto
the session directory.
"""

from __future__ import annotations
from typing import Optional
import re

DEFAULT_BASE_NAME = "auth"
MAX_BASE_NAME_LEN = 8

_WHITESPACE = re.compile(r"\s+")
_NOT_WORD = re.compile(r"[^A-Za-z0-9_]")


def sanitize_base_name(name: Optional[str] = None) -> str:
    """
    Base name for the credential bundle file.

    "my session!" -> "my_sessi", "" / None / "   " -> "auth".
    Always matches ^[A-Za-z0-9_]{1,8}$.
    """
    base = (name or "").strip() or DEFAULT_BASE_NAME
    base = _WHITESPACE.sub("_", base)
    base = _NOT_WORD.sub("", base)
    base = base[:MAX_BASE_NAME_LEN]
    return base or DEFAULT_BASE_NAME


def sanitize_file_token(token: str) -> str:
    return token.replace("/", "__").replace(":", "-")


def record_file_name(category: str, record_id: str) -> str:
    # sanitized later as a whole by the record store
    return f"{category}-{record_id}.json"
