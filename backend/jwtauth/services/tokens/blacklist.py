"""Revocation policy for issued tokens."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from jwtauth.services._shared.clock import epoch_seconds, next_stamp
from jwtauth.services._shared.errors import InvalidToken
from jwtauth.services._shared.ports.blacklist_store import BlacklistStore
from jwtauth.services.tokens.settings import JWTSettings
from jwtauth.services.tokens.token import Token

log = logging.getLogger(__name__)


class BlacklistReason(str, Enum):
    """Why a token was registered with the blacklist."""

    LOGOUT = "logout"  # revoked immediately
    REFRESH = "refresh"  # revoked once the grace period elapses
    SUPERSEDE = "supersede"  # sso issuance: older tokens for the subject revoked


def _max(a: int | None, b: int | None) -> int | None:
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)


class Blacklist:
    """
    Track revoked and superseded tokens.

    Entries are keyed by ``jti``. In multi-point mode every ``jti`` is unique,
    so an entry governs exactly one token. In single-point mode the ``jti`` is
    the subject, so one entry governs every token of that subject.

    An entry holds issuance cutoffs, compared against :attr:`Token.stamp`:

    ``revoked_before``
        Tokens stamped at or before it are revoked. Logout writes here
        directly; the value only ever grows.
    ``pending``
        ``[cutoff, effective_at]`` pairs written by refreshes and
        supersessions. Tokens stamped at or before ``cutoff`` stay acceptable
        until ``effective_at`` (now + grace period), then are revoked. Pairs
        that have taken effect are folded into ``revoked_before`` on the next
        write.

    Writes read the previous entry and merge into it, so a later issuance for
    the same subject never lifts an earlier revocation. There is no locking:
    two racing writes may lose one of the merges, and two racing refreshes for
    the same subject may both be accepted for up to
    ``blacklist_grace_period`` seconds.
    """

    def __init__(self, store: BlacklistStore, settings: JWTSettings) -> None:
        self.store = store
        self.settings = settings

    @property
    def enabled(self) -> bool:
        return self.settings.blacklist_enabled

    def _key(self, jti: str) -> str:
        return f"{self.settings.blacklist_prefix}{jti}"

    def add(self, token: Token, reason: BlacklistReason = BlacklistReason.LOGOUT) -> dict[str, Any]:
        """
        Register ``token`` and return its claims.

        :param token: Token being revoked, refreshed, or (sso) newly issued.
        :param reason: See :class:`BlacklistReason`.
        :returns: Flat claims of ``token``.
        :raises InvalidToken: If the token has no ``jti`` to revoke.
        :raises BlacklistStorageError: If the backend fails.
        """
        claims = token.claims_dict()
        if not self.enabled:
            return claims
        jti = token.jti
        if jti is None:
            raise InvalidToken("The token has no jti claim and cannot be revoked")

        reason = BlacklistReason(reason)
        if reason is BlacklistReason.SUPERSEDE:
            # everything issued before the new token
            cutoff = (token.stamp or next_stamp()) - 1
        else:
            cutoff = next_stamp()

        now = epoch_seconds()
        key = self._key(jti)
        previous = self.store.get(key) or {}
        revoked_before = previous.get("revoked_before")
        pending: list[list[int]] = []
        for pending_cutoff, effective_at in previous.get("pending") or []:
            if effective_at <= now:
                revoked_before = _max(revoked_before, pending_cutoff)
            else:
                pending.append([pending_cutoff, effective_at])

        grace = self.settings.blacklist_grace_period
        if reason is BlacklistReason.LOGOUT or grace <= 0:
            revoked_before = _max(revoked_before, cutoff)
        else:
            pending.append([cutoff, now + grace])
        if revoked_before is not None:
            pending = [p for p in pending if p[0] > revoked_before]

        self.store.set(
            key,
            {"revoked_before": revoked_before, "pending": pending, "reason": reason.value},
            self.settings.blacklist_retention,
        )
        log.info("blacklist.add", extra={"jti": jti, "reason": reason.value})
        return claims

    def has(self, token: Token) -> bool:
        """
        Return ``True`` if ``token`` is revoked or superseded.

        :raises BlacklistStorageError: If the backend fails.
        """
        if not self.enabled:
            return False
        jti = token.jti
        if jti is None:
            log.warning("blacklist.skipped", extra={"reason": "missing_jti"})
            return False

        entry = self.store.get(self._key(jti))
        if not entry:
            return False

        stamp = token.stamp
        now = epoch_seconds()
        cutoffs = [cutoff for cutoff, effective_at in entry.get("pending") or [] if effective_at <= now]
        if entry.get("revoked_before") is not None:
            cutoffs.append(entry["revoked_before"])
        if not cutoffs:
            # only grace windows still open
            return False
        if stamp is None:
            return True
        return stamp <= max(cutoffs)


__all__ = ["Blacklist", "BlacklistReason"]
