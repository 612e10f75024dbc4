# tests/unit/core/test_errors.py
from __future__ import annotations

import pytest

from jwtauth.core.errors import APIError, Unauthorized, translate_token_error
from jwtauth.services._shared.errors import (
    BlacklistStorageError,
    InvalidToken,
    MissingSubjectClaim,
    MissingToken,
    TokenError,
    TokenRevoked,
    TokenValidationFailed,
    UnsupportedAlgorithm,
)


@pytest.mark.parametrize(
    ("exc", "status", "code"),
    [
        (MissingToken(), 401, "token_missing"),
        (InvalidToken(), 401, "token_invalid"),
        (TokenRevoked(), 401, "token_revoked"),
        (TokenValidationFailed(), 401, "token_validation_failed"),
        (UnsupportedAlgorithm("none"), 401, "unsupported_algorithm"),
        (MissingSubjectClaim("uid"), 400, "missing_subject_claim"),
        (BlacklistStorageError(), 503, "blacklist_unavailable"),
        (TokenError(), 401, "unauthorized"),
    ],
)
def test_translate_token_error(exc, status, code):
    api_error = translate_token_error(exc)

    assert isinstance(api_error, APIError)
    assert api_error.status_code == status
    assert api_error.code == code
    assert api_error.message == exc.reason
    assert isinstance(api_error, Unauthorized) is (status == 401)


def test_token_error_messages():
    assert str(MissingSubjectClaim("account_id")) == "There is no account_id key in the claims"
    assert str(TokenValidationFailed()) == "Token authentication does not pass"
    assert str(TokenValidationFailed("custom")) == "custom"
    assert UnsupportedAlgorithm("PS256").algorithm == "PS256"
