from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from jwtauth.services.tokens.settings import Algorithm


class SigningStrategy(Protocol):
    """Port over the signing primitive (HMAC / RSA / ECDSA)."""

    def sign(
        self,
        claims: Mapping[str, Any],
        key: Any,
        algorithm: Algorithm,
        headers: Mapping[str, Any] | None = None,
    ) -> str:
        """Return the compact serialization of ``claims`` signed with ``key``."""

    def verify(self, raw: str, key: Any, algorithm: Algorithm) -> bool:
        """Return ``True`` iff the signature of ``raw`` matches ``key``."""
