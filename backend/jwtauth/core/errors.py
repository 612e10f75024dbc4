"""Centralized JSON (RFC 7807) error handling for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from jwtauth.core.logger import ensure_request_id
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

log = logging.getLogger(__name__)


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        422: "unprocessable_entity",
        500: "internal_server_error",
        503: "service_unavailable",
    }
    return mapping.get(status_code, "error")


# TokenError subclass -> (HTTP status, stable code). First match wins.
TOKEN_ERROR_MAP: tuple[tuple[type[TokenError], int, str], ...] = (
    (MissingToken, HTTPStatus.UNAUTHORIZED, "token_missing"),
    (InvalidToken, HTTPStatus.UNAUTHORIZED, "token_invalid"),
    (TokenRevoked, HTTPStatus.UNAUTHORIZED, "token_revoked"),
    (TokenValidationFailed, HTTPStatus.UNAUTHORIZED, "token_validation_failed"),
    (UnsupportedAlgorithm, HTTPStatus.UNAUTHORIZED, "unsupported_algorithm"),
    (MissingSubjectClaim, HTTPStatus.BAD_REQUEST, "missing_subject_claim"),
    (BlacklistStorageError, HTTPStatus.SERVICE_UNAVAILABLE, "blacklist_unavailable"),
)


def _as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build an RFC 7807 Problem Details dict.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Problem+JSON dictionary.
    :rtype: dict
    """
    problem = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
    }
    if details:
        problem["details"] = details
    problem["request_id"] = ensure_request_id()
    return problem


def _problem_response(problem: dict[str, Any]) -> Response:
    """Return a Flask response with ``application/problem+json`` media type."""
    resp = jsonify(problem)
    resp.mimetype = "application/problem+json"
    return resp


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    code : str, optional
        Machine-readable identifier. Defaults to ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Optional structured payload included in the response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    def to_problem(self) -> dict[str, Any]:
        """Serialize error metadata into an RFC 7807 problem."""
        return _as_problem(
            status=self.status_code,
            code=self.code,
            message=self.message,
            details=self.details or None,
        )


class Unauthorized(APIError):
    """401 when authentication fails."""

    def __init__(self, message: str = "Unauthorized", code: str = "unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code=code)


def translate_token_error(exc: TokenError) -> APIError:
    """
    Map a token lifecycle error to its API error.

    :param exc: Error raised by the token services.
    :returns: API error carrying the status and stable code.
    """
    for error_type, status, code in TOKEN_ERROR_MAP:
        if isinstance(exc, error_type):
            if status == HTTPStatus.UNAUTHORIZED:
                return Unauthorized(exc.reason, code=code)
            return APIError(exc.reason, status_code=status, code=code)
    return Unauthorized(exc.reason)


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Guarantees RFC 7807 responses for all handled errors.
    - 5xx are logged with ``exc_info``; 4xx as warnings.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        problem = err.to_problem()
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: code=%s status=%s msg=%s request_id=%s",
            err.code,
            err.status_code,
            err.message,
            problem.get("request_id"),
        )
        return _problem_response(problem), err.status_code

    @app.errorhandler(TokenError)
    def handle_token_error(err: TokenError):
        api_err = translate_token_error(err)
        problem = api_err.to_problem()
        if api_err.status_code >= 500:
            log.error(
                "TokenError: code=%s request_id=%s",
                api_err.code,
                problem.get("request_id"),
                exc_info=err,
            )
        else:
            log.warning(
                "TokenError: code=%s msg=%s request_id=%s",
                api_err.code,
                api_err.message,
                problem.get("request_id"),
            )
        headers = {"WWW-Authenticate": "Bearer"} if api_err.status_code == 401 else {}
        return _problem_response(problem), api_err.status_code, headers

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        error_code = _http_status_to_code(status)
        message = (err.description or error_code.replace("_", " ").capitalize()).strip()
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        problem = _as_problem(status=status, code=error_code, message=message)
        level = log.error if status >= 500 else log.warning
        level(
            "HTTPException: code=%s status=%s detail=%s request_id=%s",
            error_code,
            status,
            message,
            problem.get("request_id"),
        )
        return _problem_response(problem), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        problem = _as_problem(
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            code="validation_error",
            message="Validation failed",
            details={"errors": err.messages},
        )
        log.warning("ValidationError: request_id=%s", problem.get("request_id"))
        return _problem_response(problem), HTTPStatus.UNPROCESSABLE_ENTITY

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # never leak internal details
        problem = _as_problem(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal_server_error",
            message="Unexpected error",
        )
        log.error(
            "Unhandled exception: request_id=%s",
            problem.get("request_id"),
            exc_info=err,
        )
        return _problem_response(problem), HTTPStatus.INTERNAL_SERVER_ERROR
