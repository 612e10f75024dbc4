"""Parsed token value object."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

import jwt

from jwtauth.services._shared.clock import MICROS_PER_SECOND
from jwtauth.services._shared.errors import InvalidToken
from jwtauth.services.tokens.validation import numeric_claim

RESERVED_CLAIMS: tuple[str, ...] = ("jti", "iat", "nbf", "exp")

# Header carrying the issuance instant in epoch microseconds
STAMP_HEADER = "seq"


@dataclass(frozen=True, slots=True)
class Token:
    """
    Immutable view over a compact JWS token.

    :ivar header: Decoded JOSE header (contains at least ``alg``).
    :ivar claims: Decoded payload claims.
    :ivar signature: Base64url signature segment of the wire form.
    :ivar raw: Compact serialization, as sent by clients.
    """

    header: Mapping[str, Any]
    claims: Mapping[str, Any]
    signature: str
    raw: str

    @classmethod
    def parse(cls, raw: str) -> Token:
        """
        Parse a compact token without verifying its signature or time window.

        :param raw: ``header.payload.signature`` string.
        :raises InvalidToken: If the token is malformed.
        """
        try:
            header = jwt.get_unverified_header(raw)
            claims = jwt.decode(raw, options={"verify_signature": False})
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(f"The token could not be parsed: {exc}") from exc
        return cls(
            header=MappingProxyType(dict(header)),
            claims=MappingProxyType(dict(claims)),
            signature=raw.rsplit(".", 1)[-1],
            raw=raw,
        )

    def get_claim(self, name: str, default: Any = None) -> Any:
        return self.claims.get(name, default)

    def get_header(self, name: str, default: Any = None) -> Any:
        return self.header.get(name, default)

    def claims_dict(self) -> dict[str, Any]:
        """Return the claims as a plain, mutable ``dict`` copy."""
        return dict(self.claims)

    @property
    def jti(self) -> str | None:
        value = self.claims.get("jti")
        return None if value is None else str(value)

    @property
    def stamp(self) -> int | None:
        """
        Issuance instant in epoch microseconds, used to order tokens that
        share an ``iat`` second.

        Tokens without the ``seq`` header fall back to the start of their
        ``iat`` second; ``None`` when neither is numeric.
        """
        seq = numeric_claim(self.header.get(STAMP_HEADER))
        if seq is not None:
            return seq
        iat = numeric_claim(self.claims.get("iat"))
        return None if iat is None else iat * MICROS_PER_SECOND

    def serialize(self) -> str:
        """Return the compact wire form."""
        return self.raw


def strip_reserved(claims: Mapping[str, Any]) -> dict[str, Any]:
    """Drop the identity and time claims managed by the issuer."""
    return {k: v for k, v in claims.items() if k not in RESERVED_CLAIMS}


__all__ = ["Token", "RESERVED_CLAIMS", "STAMP_HEADER", "strip_reserved"]
