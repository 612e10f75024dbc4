"""
Domain-level exceptions raised by the token lifecycle services.

These exceptions are **framework-agnostic** and never import Flask or Redis.
They are the stable contract between the services, the storage adapters and
the API layer.

The translation to HTTP responses (RFC 7807) is handled by
``jwtauth/core/errors.py``.
"""

from __future__ import annotations

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class TokenError(Exception):
    """
    Base class for every token lifecycle error.

    Notes
    -----
    - These are *not* HTTP errors.
    - ``reason`` is a short, client-safe explanation of the failure.
    """

    reason: str = "Token error"

    def __init__(self, reason: str | None = None) -> None:
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)

    def __str__(self) -> str:
        return self.reason


class ConfigurationError(ValueError):
    """
    Raised when the JWT settings are invalid.

    :param key: Offending configuration key.
    :param detail: Human-readable explanation.
    """

    def __init__(self, key: str, detail: str) -> None:
        super().__init__(f"{key}: {detail}")
        self.key = key
        self.detail = detail


# --------------------------------------------------------------------------- #
# Specific errors
# --------------------------------------------------------------------------- #


class MissingSubjectClaim(TokenError):
    """Raised when single-point issuance lacks the configured subject claim."""

    def __init__(self, claim: str) -> None:
        self.claim = claim
        super().__init__(f"There is no {claim} key in the claims")


class MissingToken(TokenError):
    """Raised when the request carries no bearer token."""

    reason = "A token is required"


class InvalidToken(TokenError):
    """Raised when the bearer token cannot be parsed."""

    reason = "The token could not be parsed"


class UnsupportedAlgorithm(TokenError):
    """
    Raised for algorithm names outside the supported set.

    :param algorithm: The rejected algorithm name.
    :type algorithm: str | None
    """

    def __init__(self, algorithm: str | None) -> None:
        self.algorithm = algorithm
        super().__init__(f"Algorithm not supported: {algorithm!r}")


class TokenRevoked(TokenError):
    """Raised when the token is present in the blacklist."""

    reason = "Token has been revoked"


class TokenValidationFailed(TokenError):
    """Raised when the time window or the signature check fails."""

    reason = "Token authentication does not pass"


class BlacklistStorageError(TokenError):
    """Raised when the blacklist backend fails (network, serialization...)."""

    reason = "Blacklist storage is unavailable"


__all__ = [
    "TokenError",
    "ConfigurationError",
    "MissingSubjectClaim",
    "MissingToken",
    "InvalidToken",
    "UnsupportedAlgorithm",
    "TokenRevoked",
    "TokenValidationFailed",
    "BlacklistStorageError",
]
