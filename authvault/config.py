"""
authvault.config
----------------
Runtime settings for the record store and lock registry.

Resolution order per field: explicit ``config`` dict, then environment
variable, then default.

    AUTHVAULT_LOCK_MAX_PENDING   waiters allowed per file lock ("inf" or empty = unbounded)
    AUTHVAULT_JSON_INDENT        indent for record files (empty = compact)
    AUTHVAULT_ENCODING           text encoding for record files
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import os

# Lock queues are unbounded unless configured otherwise; callers of this
# layer never see backpressure from it.
UNBOUNDED: Optional[int] = None


@dataclass(frozen=True)
class StoreConfig:
    lock_max_pending: Optional[int] = UNBOUNDED
    json_indent: Optional[int] = None
    encoding: str = "utf-8"


def _optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int):
        parsed = value
    else:
        text = str(value).strip().lower()
        if text in ("", "inf", "infinity", "none", "unbounded"):
            return None
        try:
            parsed = int(text)
        except ValueError:
            raise ValueError(f"Invalid value for {field_name}: {value!r}") from None
    if parsed < 0:
        raise ValueError(f"{field_name} must be >= 0, got {parsed}")
    return parsed


def load_store_config(config: Dict[str, Any] | None = None) -> StoreConfig:
    config = config or {}

    if "lock_max_pending" in config:
        max_pending = config["lock_max_pending"]
    else:
        max_pending = os.getenv("AUTHVAULT_LOCK_MAX_PENDING")

    if "json_indent" in config:
        indent = config["json_indent"]
    else:
        indent = os.getenv("AUTHVAULT_JSON_INDENT")

    encoding = config.get("encoding") or os.getenv("AUTHVAULT_ENCODING", "utf-8")

    return StoreConfig(
        lock_max_pending=_optional_int(max_pending, "lock_max_pending"),
        json_indent=_optional_int(indent, "json_indent"),
        encoding=encoding,
    )
