# jwtauth/services/tokens/service.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from jwtauth.services._shared.clock import epoch_seconds, next_stamp
from jwtauth.services._shared.errors import (
    MissingSubjectClaim,
    MissingToken,
    TokenRevoked,
    TokenValidationFailed,
)
from jwtauth.services._shared.ports.signing_strategy import SigningStrategy
from jwtauth.services._shared.ports.token_source import TokenSource
from jwtauth.services.tokens.blacklist import Blacklist, BlacklistReason
from jwtauth.services.tokens.keys import KeyPurpose, KeyResolver
from jwtauth.services.tokens.settings import Algorithm, JWTSettings, LoginMode
from jwtauth.services.tokens.token import STAMP_HEADER, Token, strip_reserved
from jwtauth.services.tokens.validation import is_time_valid, numeric_claim

log = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer"


def extract_bearer(header: str | None) -> str:
    """
    Pull the token out of an ``Authorization`` header value.

    The first letter is upper-cased before matching so ``bearer <t>`` is
    accepted.

    :raises MissingToken: If the header is absent or not a bearer credential.
    """
    if header:
        normalized = header.strip()
        normalized = normalized[:1].upper() + normalized[1:]
        scheme, _, token = normalized.partition(" ")
        token = token.strip()
        if scheme == BEARER_PREFIX and token:
            return token
    raise MissingToken()


class TokenService:
    """
    Token lifecycle service (issue / refresh / logout / check).

    This service signs tokens through a pluggable :class:`SigningStrategy`,
    picks key material via :class:`KeyResolver`, reads the current request's
    credential from a :class:`TokenSource` and enforces revocation through the
    :class:`Blacklist`.
    """

    def __init__(
        self,
        *,
        settings: JWTSettings,
        blacklist: Blacklist,
        signer: SigningStrategy,
        token_source: TokenSource,
        key_resolver: KeyResolver | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param settings: Immutable JWT configuration.
        :param blacklist: Revocation policy (shares ``settings``).
        :param signer: Adapter over the signature primitive.
        :param token_source: Access to the inbound ``Authorization`` header.
        :param key_resolver: Defaults to a resolver over ``settings``.
        """
        self.settings = settings
        self.blacklist = blacklist
        self.signer = signer
        self.token_source = token_source
        self.keys = key_resolver or KeyResolver(settings)

    @property
    def ttl(self) -> int:
        return int(self.settings.ttl)

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def issue(self, claims: Mapping[str, Any], insert_into_blacklist_if_sso: bool = True) -> Token:
        """
        Sign a new token carrying ``claims``.

        :param claims: Custom claims. ``jti``/``iat``/``nbf``/``exp`` are
            always overwritten.
        :param insert_into_blacklist_if_sso: In single-point mode, supersede
            every earlier token of the same subject.
        :returns: The issued token.
        :raises MissingSubjectClaim: In sso mode without the subject claim.
        """
        if self.settings.login_type is LoginMode.SSO:
            subject = claims.get(self.settings.sso_key)
            if subject is None or subject == "":
                raise MissingSubjectClaim(self.settings.sso_key)
            jti = str(subject)
        else:
            jti = uuid4().hex

        # seq orders issuances that share an iat second
        headers = {STAMP_HEADER: next_stamp()}
        now = epoch_seconds()
        payload: dict[str, Any] = dict(claims)
        payload.update({"jti": jti, "iat": now, "nbf": now, "exp": now + self.ttl})

        raw = self.signer.sign(
            payload,
            self.keys.resolve_key(KeyPurpose.SIGN),
            self.settings.algorithm,
            headers=headers,
        )
        token = Token.parse(raw)

        if self.settings.login_type is LoginMode.SSO and insert_into_blacklist_if_sso:
            self.blacklist.add(token, BlacklistReason.SUPERSEDE)

        log.info("token.issued", extra={"jti": jti})
        return token

    def refresh(self) -> Token:
        """
        Revoke the current token and issue a replacement with the same
        custom claims.

        :raises MissingToken: If the request carries no token.
        :raises InvalidToken: If the token cannot be parsed.
        """
        token = self.current_token()
        claims = self.blacklist.add(token, BlacklistReason.REFRESH)
        new_token = self.issue(strip_reserved(claims))
        log.info("token.refreshed", extra={"jti": token.jti})
        return new_token

    def logout(self) -> bool:
        """
        Revoke the current token. Logging out twice is not an error.

        :raises MissingToken: If the request carries no token.
        :raises InvalidToken: If the token cannot be parsed.
        """
        token = self.current_token()
        self.blacklist.add(token, BlacklistReason.LOGOUT)
        log.info("token.logout", extra={"jti": token.jti})
        return True

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def check(self, validate_time_window: bool = True, verify_signature: bool = True) -> bool:
        """
        Validate the current token.

        Checks run in order: parse, revocation (when the blacklist is
        enabled), time window, signature. The first failure is raised.

        :raises MissingToken: No token in the request.
        :raises InvalidToken: Malformed token.
        :raises TokenRevoked: Blacklist hit.
        :raises UnsupportedAlgorithm: Header ``alg`` outside the supported set.
        :raises TokenValidationFailed: Time window or signature failure.
        """
        token = self.current_token()

        if self.settings.blacklist_enabled and self.blacklist.has(token):
            log.warning("token.rejected", extra={"jti": token.jti, "reason": "revoked"})
            raise TokenRevoked()

        if validate_time_window and not self.validate_token(token):
            log.warning("token.rejected", extra={"jti": token.jti, "reason": "time_window"})
            raise TokenValidationFailed("Token is expired or not yet valid")

        if verify_signature and not self.verify_token(token):
            log.warning("token.rejected", extra={"jti": token.jti, "reason": "signature"})
            raise TokenValidationFailed("Token signature verification failed")

        return True

    def validate_token(self, token: Token, now: int | None = None) -> bool:
        """Return ``True`` if ``token`` is within its ``nbf``/``exp`` window."""
        return is_time_valid(token.claims, epoch_seconds() if now is None else now)

    def verify_token(self, token: Token) -> bool:
        """
        Verify the signature of ``token``.

        :raises UnsupportedAlgorithm: If the header ``alg`` is unknown.
        """
        algorithm = Algorithm.parse(token.get_header("alg"))
        if algorithm is not self.settings.algorithm:
            # A supported but different algorithm never matches our key material
            return False
        return self.signer.verify(token.raw, self.keys.resolve_key(KeyPurpose.VERIFY), algorithm)

    # ------------------------------------------------------------------ #
    # Request context helpers
    # ------------------------------------------------------------------ #

    def header_token(self) -> str:
        """Return the raw bearer token of the current request."""
        return extract_bearer(self.token_source.authorization())

    def current_token(self) -> Token:
        """Parse the bearer token of the current request."""
        return Token.parse(self.header_token())

    def parsed_claims(self) -> dict[str, Any]:
        """Flat claims of the current token."""
        return self.current_token().claims_dict()

    def remaining_ttl(self) -> int:
        """
        Seconds until the current token expires.

        Negative once expired; ``0`` when ``exp`` is missing or not a number.
        """
        exp = numeric_claim(self.current_token().get_claim("exp"))
        if exp is None:
            return 0
        return exp - epoch_seconds()


__all__ = ["TokenService", "extract_bearer"]
