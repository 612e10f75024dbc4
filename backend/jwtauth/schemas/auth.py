"""Token-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields


class CheckQuerySchema(Schema):
    """Query flags accepted by ``GET /auth/check``."""

    class Meta:
        unknown = EXCLUDE

    validate = fields.Boolean(load_default=True)
    verify = fields.Boolean(load_default=True)


class TokenResponseSchema(Schema):
    """Response payload containing a freshly issued token."""

    access_token = fields.String(required=True)
    token_type = fields.String(dump_default="bearer")
    expires_in = fields.Integer(required=True)


class ClaimsResponseSchema(Schema):
    """Response payload exposing the decoded claims of the current token."""

    claims = fields.Dict(keys=fields.String(), required=True)
    expires_in = fields.Integer(required=True)
