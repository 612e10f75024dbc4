"""Token lifecycle endpoints backed by the token service."""

from __future__ import annotations

from flask import Blueprint, request

from jwtauth.api.deps import json_response, require_token, timing
from jwtauth.core.extensions import get_token_service
from jwtauth.schemas import CheckQuerySchema, ClaimsResponseSchema, TokenResponseSchema

bp = Blueprint("auth", __name__)

check_query_schema = CheckQuerySchema()
token_schema = TokenResponseSchema()
claims_schema = ClaimsResponseSchema()


@bp.post("/refresh")
@require_token(validate=False)
@timing
def refresh():
    """Exchange the current token (expired allowed) for a fresh one."""

    service = get_token_service()
    token = service.refresh()
    body = {
        "data": token_schema.dump(
            {"access_token": token.serialize(), "token_type": "bearer", "expires_in": service.ttl}
        )
    }
    return json_response(body)


@bp.post("/logout")
@require_token(validate=False)
@timing
def logout():
    """Revoke the current token."""

    get_token_service().logout()
    return json_response({"data": {"logged_out": True}})


@bp.get("/check")
@timing
def check():
    """Validate the current token; flags ``validate``/``verify`` may disable checks."""

    flags = check_query_schema.load(request.args)
    get_token_service().check(
        validate_time_window=flags["validate"], verify_signature=flags["verify"]
    )
    return json_response({"data": {"valid": True}})


@bp.get("/claims")
@require_token
@timing
def claims():
    """Return the decoded claims of the current token."""

    service = get_token_service()
    body = {
        "data": claims_schema.dump(
            {"claims": service.parsed_claims(), "expires_in": service.remaining_ttl()}
        )
    }
    return json_response(body)
