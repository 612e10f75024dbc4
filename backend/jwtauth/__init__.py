"""Expose the application factory and the token service at package level.

Provide convenient access to :func:`jwtauth.factory.create_app` so callers can
``from jwtauth import create_app`` without traversing the package structure.
"""

from __future__ import annotations

from .factory import create_app
from .services.tokens import JWTSettings, Token, TokenService

__all__ = ["create_app", "JWTSettings", "Token", "TokenService"]
