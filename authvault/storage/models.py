# authvault/storage/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from authvault.utils import b64d

APP_STATE_SYNC_KEY = "app-state-sync-key"


def _pick(data: Dict[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    # files written by other clients use camelCase field names
    if snake in data:
        return data[snake]
    return data.get(camel, default)


def _as_bytes(value: Any) -> Optional[bytes]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return b64d(value)
    if isinstance(value, list):
        return bytes(value)
    raise TypeError(f"Cannot decode {type(value).__name__} as bytes")


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return int(value)


@dataclass
class AppStateSyncKeyFingerprint:
    raw_id: Optional[int] = None
    current_index: Optional[int] = None
    device_indexes: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "raw_id": self.raw_id,
            "current_index": self.current_index,
            "device_indexes": list(self.device_indexes),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppStateSyncKeyFingerprint":
        return cls(
            raw_id=_as_int(_pick(data, "raw_id", "rawId")),
            current_index=_as_int(_pick(data, "current_index", "currentIndex")),
            device_indexes=[int(i) for i in _pick(data, "device_indexes", "deviceIndexes", None) or []],
        )


@dataclass
class AppStateSyncKeyData:
    """
    Key material used to decrypt app-state sync patches.

    Stored on disk as a plain object; ``get`` on the app-state-sync-key
    category hands it back in this typed form.
    """
    key_data: Optional[bytes] = None
    fingerprint: Optional[AppStateSyncKeyFingerprint] = None
    timestamp: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key_data": self.key_data,
            "fingerprint": self.fingerprint.to_dict() if self.fingerprint else None,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppStateSyncKeyData":
        fpr = _pick(data, "fingerprint", "fingerprint")
        return cls(
            key_data=_as_bytes(_pick(data, "key_data", "keyData")),
            fingerprint=AppStateSyncKeyFingerprint.from_dict(fpr) if fpr else None,
            timestamp=_as_int(data.get("timestamp")),
        )
