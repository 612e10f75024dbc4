from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import redis  # type: ignore[import-untyped]

from jwtauth.services._shared.errors import BlacklistStorageError
from jwtauth.services._shared.ports.blacklist_store import BlacklistStore

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RedisBlacklistStore(BlacklistStore):
    """
    Redis-backed blacklist backend.

    Entries are JSON strings stored with ``SET key value EX ttl``; Redis
    handles expiry.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    def get(self, key: str) -> dict[str, Any] | None:
        try:
            raw = self.r.get(key)
        except redis.RedisError as exc:
            log.error("blacklist.store_error", extra={"op": "get"}, exc_info=True)
            raise BlacklistStorageError(f"Blacklist lookup failed: {exc}") from exc
        if raw is None:
            return None
        if isinstance(raw, bytes | bytearray):
            raw = raw.decode()
        try:
            value = json.loads(raw)
        except ValueError as exc:
            raise BlacklistStorageError(f"Corrupt blacklist entry under {key!r}") from exc
        return value if isinstance(value, dict) else None

    def set(self, key: str, value: dict[str, Any], ttl: int) -> None:
        try:
            # idempotent: a later write for the same jti replaces the entry
            self.r.set(key, json.dumps(value), ex=max(1, int(ttl)))
        except redis.RedisError as exc:
            log.error("blacklist.store_error", extra={"op": "set"}, exc_info=True)
            raise BlacklistStorageError(f"Blacklist write failed: {exc}") from exc

    def ping(self) -> bool:
        """Return ``True`` if the server answers."""
        try:
            return bool(self.r.ping())
        except redis.RedisError:
            return False
