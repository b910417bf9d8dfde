"""Flask wiring for the session verifier.

A ``before_request`` hook reads the two session tokens (cookies first,
same-named headers as a fallback), runs the framework-agnostic
:class:`~forum.services.session.SessionVerifier`, and either records the
outcome on ``g`` or raises the categorized rejection, which the JSON error
handlers render. Nothing survives past the request: identity is re-derived
every time.
"""

from __future__ import annotations

import logging
from urllib.parse import unquote

from flask import Flask, current_app, g, request

from forum.api import api_path
from forum.infra.jwt.flask_jwt_token_codec import JWTTokenCodec
from forum.services.session import (
    PresentedTokens,
    SessionService,
    SessionTokenConfig,
    SessionVerifier,
    VerifierState,
    build_verifier,
)

log = logging.getLogger(__name__)

EXTENSION_KEY = "session_verifier"


def _read_token(name: str) -> str | None:
    raw = request.cookies.get(name)
    if raw is None:
        raw = request.headers.get(name)
    return unquote(raw) if raw else None


def _verifier() -> SessionVerifier:
    return current_app.extensions[EXTENSION_KEY]


def verify_request() -> None:
    """Authenticate the current request or raise its rejection."""
    if request.routing_exception is not None:
        # unknown route / method: let Flask answer 404/405
        g.identity = None
        return

    cfg = current_app.config
    outcome = _verifier().verify(
        PresentedTokens(
            path=request.path,
            method=request.method,
            access=_read_token(cfg["AUTH_ACCESS_COOKIE"]),
            refresh=_read_token(cfg["AUTH_REFRESH_COOKIE"]),
        )
    )
    g.session_outcome = outcome
    g.identity = outcome.identity

    if outcome.state is VerifierState.REJECTED:
        assert outcome.error is not None
        log.warning(
            "Session rejected",
            extra={
                "error_code": outcome.error.code,
                "verifier_state": outcome.state.value,
                "endpoint": request.endpoint,
            },
        )
        raise outcome.error


def init_app(app: Flask) -> None:
    """Build the verifier from config and register the gate."""
    sessions = SessionService(
        token_codec=JWTTokenCodec(),
        token_cfg=SessionTokenConfig.from_config(app.config),
    )
    app.extensions[EXTENSION_KEY] = build_verifier(
        sessions,
        public_paths=(api_path(app, "users", "signup"), api_path(app, "users", "login")),
        reissue_path=api_path(app, "users", "reissue"),
    )
    app.before_request(verify_request)


__all__ = ["init_app", "verify_request"]
