from __future__ import annotations

from flask import has_request_context, request

from jwtauth.services._shared.ports.token_source import TokenSource


class FlaskRequestTokenSource(TokenSource):
    """Read the ``Authorization`` header of the active Flask request."""

    header_name = "Authorization"

    def authorization(self) -> str | None:
        if not has_request_context():
            return None
        return request.headers.get(self.header_name)
