"""
authvault.serialization
-----------------------
JSON codec for record files.

Plain JSON with one extension: binary values are written as a tagged object

    {"type": "Buffer", "data": "<base64>"}

and decoded back to the exact original ``bytes``. Typed records (anything
exposing ``to_dict()``) are written through their dict form.
"""

from __future__ import annotations
from typing import Any, Dict, Optional
import json

from .utils import b64e, b64d

BUFFER_TAG = "Buffer"


def replacer(obj: Any) -> Any:
    """``default=`` hook for json.dumps."""
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return {"type": BUFFER_TAG, "data": b64e(bytes(obj))}
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def reviver(obj: Dict[str, Any]) -> Any:
    """``object_hook=`` for json.loads."""
    if obj.get("type") == BUFFER_TAG and len(obj) == 2:
        data = obj.get("data")
        if isinstance(data, str):
            return b64d(data)
        # Node's Buffer#toJSON emits a list of octets
        if isinstance(data, list):
            return bytes(data)
    return obj


def dumps(value: Any, indent: Optional[int] = None) -> str:
    return json.dumps(value, default=replacer, indent=indent, ensure_ascii=False)


def loads(text: str) -> Any:
    return json.loads(text, object_hook=reviver)
