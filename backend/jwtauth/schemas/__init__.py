"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import CheckQuerySchema, ClaimsResponseSchema, TokenResponseSchema

__all__ = [
    "CheckQuerySchema",
    "ClaimsResponseSchema",
    "TokenResponseSchema",
]
