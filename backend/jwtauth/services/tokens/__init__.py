"""Token lifecycle: settings, key resolution, blacklist policy and service."""

from __future__ import annotations

from .blacklist import Blacklist, BlacklistReason
from .keys import KeyPurpose, KeyResolver
from .service import TokenService, extract_bearer
from .settings import Algorithm, AlgorithmClass, JWTSettings, LoginMode
from .token import RESERVED_CLAIMS, Token, strip_reserved

__all__ = [
    "Algorithm",
    "AlgorithmClass",
    "Blacklist",
    "BlacklistReason",
    "JWTSettings",
    "KeyPurpose",
    "KeyResolver",
    "LoginMode",
    "RESERVED_CLAIMS",
    "Token",
    "TokenService",
    "extract_bearer",
    "strip_reserved",
]
