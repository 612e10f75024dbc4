from __future__ import annotations

from typing import Protocol


class TokenSource(Protocol):
    """Port yielding the raw ``Authorization`` header of the current request."""

    def authorization(self) -> str | None: ...


class StaticTokenSource(TokenSource):
    """Token source bound to a fixed header value (CLI use and unit tests)."""

    def __init__(self, header: str | None = None) -> None:
        self.header = header

    def authorization(self) -> str | None:
        return self.header

    def use_token(self, token: str) -> None:
        """Present ``token`` as a bearer credential on subsequent reads."""
        self.header = f"Bearer {token}"
