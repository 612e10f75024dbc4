# jwtauth/infra/jwt/pyjwt_signing_strategy.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import jwt

from jwtauth.services._shared.ports.signing_strategy import SigningStrategy
from jwtauth.services.tokens.settings import Algorithm

# Only the signature is checked here; claims are validated by the service.
_SIGNATURE_ONLY = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
    "require": [],
}


@dataclass(slots=True)
class PyJWTSigningStrategy(SigningStrategy):
    """
    Adapter over PyJWT for the nine supported algorithms.

    .. note::
       RSA and ECDSA require the ``cryptography`` package (``pyjwt[crypto]``).
    """

    def sign(
        self,
        claims: Mapping[str, Any],
        key: Any,
        algorithm: Algorithm,
        headers: Mapping[str, Any] | None = None,
    ) -> str:
        return jwt.encode(
            dict(claims),
            key,
            algorithm=algorithm.value,
            headers=dict(headers) if headers else None,
        )

    def verify(self, raw: str, key: Any, algorithm: Algorithm) -> bool:
        try:
            jwt.decode(raw, key, algorithms=[algorithm.value], options=_SIGNATURE_ONLY)
        except jwt.InvalidTokenError:
            return False
        return True
