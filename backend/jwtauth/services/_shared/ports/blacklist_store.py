from __future__ import annotations

from typing import Any, Protocol


class BlacklistStore(Protocol):
    """
    Key/value backend for blacklist entries.

    Values are small JSON-compatible mappings. Implementations MUST expire
    entries after ``ttl`` seconds and MUST raise
    :class:`~jwtauth.services._shared.errors.BlacklistStorageError` on backend
    failures instead of answering "not found".
    """

    def get(self, key: str) -> dict[str, Any] | None: ...
    def set(self, key: str, value: dict[str, Any], ttl: int) -> None: ...
