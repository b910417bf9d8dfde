"""Centralized JSON error handling for the API.

Every handled failure is rendered as the same envelope::

    {"message": "...", "statusCode": 401, "code": "not_logged_in", "request_id": "..."}

Service-layer exceptions are mapped to HTTP statuses through
:data:`SERVICE_ERROR_STATUS`, resolved along the exception's MRO so the most
specific entry wins.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from forum.core.logger import ensure_request_id
from forum.services._shared import errors as svc

log = logging.getLogger(__name__)


SERVICE_ERROR_STATUS: Mapping[type[svc.ServiceError], int] = {
    # 401 - not authenticated / resigned / no session
    svc.AuthenticationError: HTTPStatus.UNAUTHORIZED,
    # 400 - bad input / duplicate / invalid token
    svc.TokenError: HTTPStatus.BAD_REQUEST,
    svc.DuplicateAccount: HTTPStatus.BAD_REQUEST,
    svc.AlreadyLiked: HTTPStatus.BAD_REQUEST,
    svc.CannotLikeOwnContent: HTTPStatus.BAD_REQUEST,
    svc.InvalidParentComment: HTTPStatus.BAD_REQUEST,
    svc.PasswordReused: HTTPStatus.BAD_REQUEST,
    # 403 - insufficient role
    svc.AuthorizationError: HTTPStatus.FORBIDDEN,
    # 404 - entity not found
    svc.NotFoundError: HTTPStatus.NOT_FOUND,
    svc.ConflictError: HTTPStatus.CONFLICT,
    svc.ServiceError: HTTPStatus.BAD_REQUEST,
}


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "bad_request",
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        409: "conflict",
        413: "payload_too_large",
        415: "unsupported_media_type",
        429: "too_many_requests",
        500: "internal_server_error",
        503: "service_unavailable",
    }
    return mapping.get(status_code, "error")


def _envelope(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build the uniform error envelope.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Envelope dictionary.
    :rtype: dict
    """
    body: dict[str, Any] = {
        "message": message,
        "statusCode": int(status),
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details
    return body


def _envelope_response(body: dict[str, Any]) -> Response:
    resp = jsonify(body)
    resp.status_code = body["statusCode"]
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
        Machine-readable identifier, typically snake_case.
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

    def to_envelope(self) -> dict[str, Any]:
        """Serialize error metadata into the uniform envelope."""
        return _envelope(
            status=self.status_code,
            code=self.code,
            message=self.message,
            details=self.details or None,
        )


def status_for(exc: svc.ServiceError) -> int:
    """Return the HTTP status mapped to ``exc``'s closest registered ancestor."""
    for klass in type(exc).__mro__:
        status = SERVICE_ERROR_STATUS.get(klass)  # type: ignore[call-overload]
        if status is not None:
            return int(status)
    return int(HTTPStatus.BAD_REQUEST)


def translate_service_error(exc: svc.ServiceError) -> APIError:
    """Map a domain/service error to its API representation."""
    return APIError(message=exc.message, status_code=status_for(exc), code=exc.code)


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Guarantees the uniform envelope for all handled errors.
    - Emits 5xx with ``exc_info`` for traceability; 4xx as warnings.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        body = err.to_envelope()
        level = log.error if err.status_code >= 500 else log.warning
        level(
            "APIError: code=%s status=%s msg=%s",
            err.code,
            err.status_code,
            err.message,
            extra={"error_code": err.code, "status_code": err.status_code},
        )
        return _envelope_response(body)

    @app.errorhandler(svc.ServiceError)
    def handle_service_error(err: svc.ServiceError):
        return handle_api_error(translate_service_error(err))

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        error_code = _http_status_to_code(status)
        message = (err.description or error_code.replace("_", " ").capitalize()).strip()
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        body = _envelope(status=status, code=error_code, message=message)
        level = log.error if status >= 500 else log.warning
        level(
            "HTTPException: code=%s status=%s detail=%s",
            error_code,
            status,
            message,
            extra={"error_code": error_code, "status_code": status},
        )
        return _envelope_response(body)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        body = _envelope(
            status=HTTPStatus.BAD_REQUEST,
            code="validation_error",
            message="Validation failed",
            details={"errors": err.normalized_messages()},
        )
        log.warning("ValidationError", extra={"error_code": "validation_error"})
        return _envelope_response(body)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        body = _envelope(status=HTTPStatus.CONFLICT, code="conflict", message="Resource conflict")
        log.error("IntegrityError", exc_info=True, extra={"error_code": "conflict"})
        return _envelope_response(body)

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        body = _envelope(
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            code="service_unavailable",
            message="Service temporarily unavailable",
        )
        log.error("OperationalError", exc_info=True, extra={"error_code": "service_unavailable"})
        return _envelope_response(body)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Unexpected server-side error; never leak internal details
        body = _envelope(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            code="internal_server_error",
            message="Unexpected error",
        )
        log.error("Unhandled exception", exc_info=True)
        return _envelope_response(body)
