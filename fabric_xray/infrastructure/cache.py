from __future__ import annotations

import hashlib
import time
from typing import Dict, Iterable, Optional, Tuple

from ..config import SETTINGS


CacheEntry = Tuple[float, bytes]

MAX_ENTRIES = 16


def cache_key(parts: Iterable[bytes | str]) -> str:
    digest = hashlib.sha256()
    for part in parts:
        data = part.encode("utf-8") if isinstance(part, str) else part
        digest.update(len(data).to_bytes(8, "big"))
        digest.update(data)
    return digest.hexdigest()


class ResponseCache:
    def __init__(self, ttl: Optional[float] = None) -> None:
        self._entries: Dict[str, CacheEntry] = {}
        self._ttl = ttl

    @property
    def ttl(self) -> float:
        return SETTINGS.cache_ttl if self._ttl is None else self._ttl

    def get(self, key: str) -> Optional[bytes]:
        entry = self._entries.get(key)
        if not entry:
            return None
        timestamp, data = entry
        if time.time() - timestamp > self.ttl:
            self._entries.pop(key, None)
            return None
        return data

    def put(self, key: str, data: bytes) -> None:
        if len(self._entries) >= MAX_ENTRIES and key not in self._entries:
            oldest = min(self._entries.items(), key=lambda item: item[1][0])[0]
            self._entries.pop(oldest, None)
        self._entries[key] = (time.time(), data)

    def clear(self) -> None:
        self._entries.clear()


CACHE = ResponseCache()
