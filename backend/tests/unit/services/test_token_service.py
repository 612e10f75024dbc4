# tests/unit/services/test_token_service.py
"""
Unit tests for :class:`TokenService`.

Flows covered
-------------
- Issuance in multi-point and single-point login modes
- Refresh with claim preservation and grace-period tolerance
- Logout and idempotent re-logout
- ``check`` ordering: parse -> revocation -> time window -> signature
- Bearer header extraction edge cases
"""

from __future__ import annotations

import logging
import re

import jwt
import pytest

from jwtauth.services._shared.errors import (
    InvalidToken,
    MissingSubjectClaim,
    MissingToken,
    TokenRevoked,
    TokenValidationFailed,
    UnsupportedAlgorithm,
)
from jwtauth.services.tokens import Algorithm, LoginMode

NOW = 1704067200  # 2024-01-01T00:00:00Z, see ``frozen``
FOREIGN_SECRET = "not-the-service-secret-" * 3


# ------------------------------ Issuance ---------------------------------- #
def test_mpop_issue_sets_reserved_claims(make_service, token_source, frozen):
    """A multi-point token carries the custom claims plus jti/iat/nbf/exp."""
    service = make_service()
    token = service.issue({"uid": 42})

    assert token.get_claim("uid") == 42
    assert re.fullmatch(r"[0-9a-f]{32}", token.jti)
    assert token.get_claim("iat") == NOW
    assert token.get_claim("nbf") == NOW
    assert token.get_claim("exp") == NOW + 3600
    assert token.get_header("alg") == "HS256"

    token_source.use_token(token.serialize())
    assert service.check() is True


def test_issue_overwrites_caller_reserved_claims(make_service, frozen):
    service = make_service()
    token = service.issue({"uid": 1, "jti": "mine", "iat": 1, "nbf": 1, "exp": 2})

    assert token.jti != "mine"
    assert token.get_claim("iat") == NOW
    assert token.get_claim("exp") - token.get_claim("nbf") == service.ttl


def test_mpop_issuances_are_independent(make_service, token_source, frozen):
    """Two multi-point tokens for the same subject are both valid."""
    service = make_service()
    first = service.issue({"uid": 42})
    second = service.issue({"uid": 42})

    assert first.jti != second.jti
    for token in (first, second):
        token_source.use_token(token.serialize())
        assert service.check() is True


@pytest.mark.parametrize("claims", [{}, {"uid": None}, {"uid": ""}, {"user": 1}])
def test_sso_issue_requires_subject_claim(make_service, claims):
    service = make_service(login_type=LoginMode.SSO)

    with pytest.raises(MissingSubjectClaim) as excinfo:
        service.issue(claims)

    assert str(excinfo.value) == "There is no uid key in the claims"


def test_sso_uses_configured_subject_claim_as_jti(make_service, frozen):
    service = make_service(login_type=LoginMode.SSO, sso_key="user_id")
    token = service.issue({"user_id": 9})

    assert token.jti == "9"
    assert token.get_claim("user_id") == 9


def test_sso_second_issue_revokes_first(make_service, token_source, frozen):
    """Single-point mode keeps exactly one live token per subject."""
    service = make_service(login_type=LoginMode.SSO)
    first = service.issue({"uid": "u1"})
    second = service.issue({"uid": "u1"})

    assert first.jti == second.jti == "u1"
    assert first.serialize() != second.serialize()

    token_source.use_token(first.serialize())
    with pytest.raises(TokenRevoked):
        service.check()

    token_source.use_token(second.serialize())
    assert service.check() is True


def test_sso_other_subjects_are_unaffected(make_service, token_source, frozen):
    service = make_service(login_type=LoginMode.SSO)
    alice = service.issue({"uid": "alice"})
    service.issue({"uid": "bob"})

    token_source.use_token(alice.serialize())
    assert service.check() is True


def test_sso_grace_period_tolerates_superseded_token(make_service, token_source, frozen):
    service = make_service(login_type=LoginMode.SSO, blacklist_grace_period=30)
    first = service.issue({"uid": "u1"})
    service.issue({"uid": "u1"})
    token_source.use_token(first.serialize())

    assert service.check() is True

    frozen.tick(31)
    with pytest.raises(TokenRevoked):
        service.check()


def test_sso_issue_without_blacklist_insert_writes_nothing(make_service, store, frozen):
    service = make_service(login_type=LoginMode.SSO)
    service.issue({"uid": "u1"}, insert_into_blacklist_if_sso=False)

    assert len(store) == 0


def test_sso_uninserted_token_is_valid_in_same_second(make_service, token_source, frozen):
    """Skipping supersession leaves both the earlier and the new token usable."""
    service = make_service(login_type=LoginMode.SSO)
    first = service.issue({"uid": "u1"})
    extra = service.issue({"uid": "u1"}, insert_into_blacklist_if_sso=False)

    assert first.get_claim("iat") == extra.get_claim("iat")
    for token in (first, extra):
        token_source.use_token(token.serialize())
        assert service.check() is True


def test_sso_uninserted_token_after_logout_is_valid(make_service, token_source, frozen):
    service = make_service(login_type=LoginMode.SSO)
    old = service.issue({"uid": "u1"})
    token_source.use_token(old.serialize())
    service.logout()

    fresh = service.issue({"uid": "u1"}, insert_into_blacklist_if_sso=False)

    token_source.use_token(fresh.serialize())
    assert service.check() is True
    token_source.use_token(old.serialize())
    with pytest.raises(TokenRevoked):
        service.check()


def test_asymmetric_issue_and_check(make_service, token_source, rsa_keys, ec_keys, frozen):
    """RS and ES algorithms sign with the private key and verify with the public one."""
    for algorithm, keys in ((Algorithm.RS256, rsa_keys), (Algorithm.ES256, ec_keys["ES256"])):
        service = make_service(algorithm=algorithm, secret=None, keys=keys)
        token = service.issue({"uid": 42})
        assert token.get_header("alg") == algorithm.value

        token_source.use_token(token.serialize())
        assert service.check() is True


# ------------------------------- Refresh ---------------------------------- #
def test_refresh_preserves_custom_claims(make_service, token_source, frozen):
    service = make_service()
    old = service.issue({"uid": 42, "role": "admin"})
    token_source.use_token(old.serialize())

    frozen.tick(5)
    new = service.refresh()

    assert new.get_claim("uid") == 42
    assert new.get_claim("role") == "admin"
    assert new.jti != old.jti
    assert new.get_claim("iat") == old.get_claim("iat") + 5
    assert new.get_claim("nbf") == new.get_claim("iat")
    assert new.get_claim("exp") == new.get_claim("iat") + 3600


def test_refresh_revokes_old_token(make_service, token_source, frozen):
    service = make_service()
    old = service.issue({"uid": 42})
    token_source.use_token(old.serialize())
    new = service.refresh()

    with pytest.raises(TokenRevoked):
        service.check()

    token_source.use_token(new.serialize())
    assert service.check() is True


def test_refresh_accepts_expired_token(make_service, token_source, frozen):
    service = make_service()
    old = service.issue({"uid": 42})
    token_source.use_token(old.serialize())
    frozen.tick(3601)

    new = service.refresh()

    token_source.use_token(new.serialize())
    assert service.check() is True


def test_refresh_grace_period_keeps_old_token_briefly(make_service, token_source, frozen):
    """Requests already in flight with the old token survive the grace window."""
    service = make_service(blacklist_grace_period=10)
    old = service.issue({"uid": 42})
    token_source.use_token(old.serialize())
    service.refresh()

    frozen.tick(9)
    assert service.check() is True

    frozen.tick(2)
    with pytest.raises(TokenRevoked):
        service.check()


def test_sso_refresh_switches_live_token(make_service, token_source, frozen):
    service = make_service(login_type=LoginMode.SSO)
    old = service.issue({"uid": "u1", "scope": "read"})
    token_source.use_token(old.serialize())
    frozen.tick(1)

    new = service.refresh()
    assert new.jti == "u1"
    assert new.get_claim("scope") == "read"

    with pytest.raises(TokenRevoked):
        service.check()

    token_source.use_token(new.serialize())
    assert service.check() is True


def test_refresh_without_token(make_service):
    with pytest.raises(MissingToken):
        make_service().refresh()


# -------------------------------- Logout ---------------------------------- #
def test_logout_revokes_and_is_idempotent(make_service, token_source, frozen):
    service = make_service()
    token = service.issue({"uid": 42})
    token_source.use_token(token.serialize())

    assert service.logout() is True
    with pytest.raises(TokenRevoked):
        service.check()

    assert service.logout() is True


def test_logout_ignores_grace_period(make_service, token_source, frozen):
    service = make_service(blacklist_grace_period=60)
    token = service.issue({"uid": 42})
    token_source.use_token(token.serialize())

    service.logout()

    with pytest.raises(TokenRevoked):
        service.check()


def test_sso_logout_revokes_subject(make_service, token_source, frozen):
    service = make_service(login_type=LoginMode.SSO)
    token = service.issue({"uid": "u1"})
    token_source.use_token(token.serialize())

    service.logout()

    with pytest.raises(TokenRevoked):
        service.check()


def test_sso_logout_survives_reissue_within_grace(make_service, token_source, frozen):
    """A new login for the subject never revives a logged-out token."""
    service = make_service(login_type=LoginMode.SSO, blacklist_grace_period=30)
    old = service.issue({"uid": "u1"})
    token_source.use_token(old.serialize())
    service.logout()
    with pytest.raises(TokenRevoked):
        service.check()

    frozen.tick(5)
    fresh = service.issue({"uid": "u1"})

    with pytest.raises(TokenRevoked):
        service.check()
    token_source.use_token(fresh.serialize())
    assert service.check() is True


def test_mpop_logout_survives_other_logins(make_service, token_source, frozen):
    service = make_service(blacklist_grace_period=30)
    old = service.issue({"uid": 42})
    token_source.use_token(old.serialize())
    service.logout()

    frozen.tick(5)
    service.issue({"uid": 42})

    token_source.use_token(old.serialize())
    with pytest.raises(TokenRevoked):
        service.check()


def test_logout_of_token_without_jti(make_service, token_source, frozen):
    service = make_service()
    claims = {"uid": 42, "iat": NOW, "nbf": NOW, "exp": NOW + 60}
    raw = jwt.encode(claims, FOREIGN_SECRET, algorithm="HS256")
    token_source.use_token(raw)

    with pytest.raises(InvalidToken):
        service.logout()


def test_disabled_blacklist_never_revokes(make_service, token_source, store, frozen):
    service = make_service(blacklist_enabled=False)
    token = service.issue({"uid": 42})
    token_source.use_token(token.serialize())

    assert service.logout() is True
    assert service.check() is True
    assert len(store) == 0


# -------------------------------- Check ----------------------------------- #
def test_check_reports_revocation_before_expiry(make_service, token_source, frozen):
    service = make_service()
    token = service.issue({"uid": 42})
    token_source.use_token(token.serialize())
    service.logout()
    frozen.tick(3601)

    with pytest.raises(TokenRevoked):
        service.check()


def test_check_time_window_bounds(make_service, token_source, frozen):
    """``exp`` itself is still valid; one second later is not."""
    service = make_service()
    token_source.use_token(service.issue({"uid": 42}).serialize())

    frozen.tick(3600)
    assert service.check() is True

    frozen.tick(1)
    with pytest.raises(TokenValidationFailed) as excinfo:
        service.check()
    assert str(excinfo.value) == "Token is expired or not yet valid"

    assert service.check(validate_time_window=False) is True


def test_check_rejects_not_yet_valid_token(make_service, token_source, frozen):
    service = make_service()
    token_source.use_token(service.issue({"uid": 42}).serialize())

    frozen.move_to("2023-12-31 23:59:00")
    with pytest.raises(TokenValidationFailed):
        service.check()


def test_check_rejects_foreign_signature(make_service, token_source, frozen):
    service = make_service()
    forged = make_service(secret="another-secret-" * 4).issue({"uid": 42})
    token_source.use_token(forged.serialize())

    with pytest.raises(TokenValidationFailed) as excinfo:
        service.check()
    assert str(excinfo.value) == "Token signature verification failed"

    assert service.check(verify_signature=False) is True


def test_check_rejects_other_supported_algorithm(make_service, token_source, frozen):
    service = make_service()
    other = make_service(algorithm=Algorithm.HS512).issue({"uid": 42})
    token_source.use_token(other.serialize())

    with pytest.raises(TokenValidationFailed):
        service.check()


def test_check_rejects_unsupported_algorithm(make_service, token_source, frozen):
    service = make_service()
    raw = jwt.encode({"uid": 42, "nbf": NOW, "exp": NOW + 60}, None, algorithm="none")
    token_source.use_token(raw)

    with pytest.raises(UnsupportedAlgorithm):
        service.check()


def test_check_logs_rejection(make_service, token_source, frozen, caplog):
    service = make_service()
    token_source.use_token(service.issue({"uid": 42}).serialize())
    service.logout()

    with caplog.at_level(logging.WARNING, logger="jwtauth"):
        with pytest.raises(TokenRevoked):
            service.check()

    record = next(r for r in caplog.records if r.getMessage() == "token.rejected")
    assert record.reason == "revoked"


@pytest.mark.parametrize(
    "header",
    [None, "", "Basic dXNlcjpwYXNz", "Bearer", "Bearer   ", "Token abc"],
)
def test_check_without_bearer_token(make_service, token_source, header):
    token_source.header = header

    with pytest.raises(MissingToken):
        make_service().check()


def test_check_malformed_token(make_service, token_source):
    token_source.header = "Bearer not-a-jwt"

    with pytest.raises(InvalidToken):
        make_service().check()


def test_lowercase_bearer_scheme_is_accepted(make_service, token_source, frozen):
    service = make_service()
    token = service.issue({"uid": 42})
    token_source.header = f"bearer {token.serialize()}"

    assert service.header_token() == token.serialize()
    assert service.check() is True


# ------------------------------- Helpers ---------------------------------- #
def test_parsed_claims_and_remaining_ttl(make_service, token_source, frozen):
    service = make_service()
    token_source.use_token(service.issue({"uid": 42}).serialize())
    frozen.tick(100)

    claims = service.parsed_claims()
    assert claims["uid"] == 42
    assert claims["exp"] == NOW + 3600
    assert service.remaining_ttl() == 3500


@pytest.mark.parametrize("exp", [None, "soon", True])
def test_remaining_ttl_without_numeric_exp(make_service, token_source, exp, frozen):
    claims = {"jti": "a", "iat": NOW, "nbf": NOW}
    if exp is not None:
        claims["exp"] = exp
    token_source.use_token(jwt.encode(claims, FOREIGN_SECRET, algorithm="HS256"))

    assert make_service().remaining_ttl() == 0


def test_validate_token_with_explicit_now(make_service, frozen):
    service = make_service()
    token = service.issue({"uid": 42})

    assert service.validate_token(token, now=NOW) is True
    assert service.validate_token(token, now=NOW - 1) is False
    assert service.validate_token(token, now=NOW + 3601) is False
