from __future__ import annotations

import copy
import threading
from typing import Any

from jwtauth.services._shared.clock import epoch_seconds
from jwtauth.services._shared.ports.blacklist_store import BlacklistStore


class InMemoryBlacklistStore(BlacklistStore):
    """
    Process-local blacklist backend with per-key expiry.

    .. note::
       Entries are not shared between workers; use Redis in production.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[int, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> dict[str, Any] | None:
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            expires_at, value = item
            if expires_at <= epoch_seconds():
                del self._entries[key]
                return None
            return copy.deepcopy(value)

    def set(self, key: str, value: dict[str, Any], ttl: int) -> None:
        with self._lock:
            self._entries[key] = (epoch_seconds() + max(1, int(ttl)), copy.deepcopy(value))

    def __len__(self) -> int:
        return len(self._entries)
