# authvault/storage/provider.py
from __future__ import annotations
from typing import Any, Dict, Iterable, Mapping, Optional


class SignalKeyStore:
    """
    Batched key accessor consumed by the session protocol.

    get() returns one entry per requested id (None when absent);
    set() writes non-None values and removes ids mapped to None.
    """
    async def get(self, category: str, ids: Iterable[str]) -> Dict[str, Any]: ...
    async def set(self, updates: Mapping[str, Mapping[str, Optional[Any]]]) -> None: ...
