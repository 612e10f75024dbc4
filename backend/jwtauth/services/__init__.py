"""Service layer public API.

Re-exports
----------
- Token lifecycle (from ``jwtauth.services.tokens``)
    * :class:`TokenService`, :class:`Blacklist`, :class:`KeyResolver`
    * :class:`JWTSettings`, :class:`Algorithm`, :class:`LoginMode`
    * :class:`Token`
"""

from __future__ import annotations

from .tokens import (
    Algorithm,
    Blacklist,
    JWTSettings,
    KeyResolver,
    LoginMode,
    Token,
    TokenService,
)

__all__ = [
    "Algorithm",
    "Blacklist",
    "JWTSettings",
    "KeyResolver",
    "LoginMode",
    "Token",
    "TokenService",
]
