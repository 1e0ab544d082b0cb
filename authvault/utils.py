"""
authvault.utils
---------------
base64 helpers shared by the record codec, typed records and the
credential initializer.
"""

from __future__ import annotations
import base64


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def b64d(s: str) -> bytes:
    return base64.b64decode(s.encode("ascii"))
