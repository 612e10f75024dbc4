"""
jwtauth.services._shared.ports
==============================

Collection of *ports* (hexagonal interfaces) that define the contracts
between the token services and their infrastructure.

Modules
-------
- :mod:`blacklist_store`:
    Defines :class:`~.BlacklistStore`: key/value backend for revocation entries.

- :mod:`token_source`:
    Defines :class:`~.TokenSource`: access to the current request's
    ``Authorization`` header, plus :class:`~.StaticTokenSource`.

- :mod:`signing_strategy`:
    Defines :class:`~.SigningStrategy`: sign/verify over the signature primitive.

Design Notes
------------
Concrete adapters (Redis, in-memory, PyJWT, Flask request) live under
``jwtauth.infra``.
"""

from __future__ import annotations

from .blacklist_store import BlacklistStore
from .signing_strategy import SigningStrategy
from .token_source import StaticTokenSource, TokenSource

__all__ = [
    "BlacklistStore",
    "SigningStrategy",
    "StaticTokenSource",
    "TokenSource",
]
