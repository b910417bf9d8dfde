"""Shared API helpers: identity injection, session cookies and responses."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import quote

from flask import Response, current_app, g, jsonify, request

from forum.infra.jwt.flask_jwt_token_codec import JWTTokenCodec
from forum.schemas.common import PaginationQuerySchema
from forum.services._shared.base import ServiceContext
from forum.services._shared.dto import PaginationIn
from forum.services._shared.errors import NotLoggedIn
from forum.services._shared.ports import with_scheme
from forum.services.session import Identity, SessionService, SessionTokenConfig

F = TypeVar("F", bound=Callable[..., Any])


# ------------------------------ Identity ------------------------------------


def authenticated(func: F) -> F:
    """
    Pass the identity established by the session gate as ``identity=``.

    :raises NotLoggedIn: If the gate did not authenticate this request.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        identity: Identity | None = getattr(g, "identity", None)
        if identity is None:
            raise NotLoggedIn()
        return func(*args, identity=identity, **kwargs)

    return wrapper  # type: ignore[return-value]


def context_for(identity: Identity) -> ServiceContext:
    """Build the service context for the authenticated caller."""
    return ServiceContext(
        actor_id=identity.principal_id,
        actor_role=identity.role,
        request_id=getattr(g, "request_id", None),
    )


# ------------------------------ Services ------------------------------------


def token_config() -> SessionTokenConfig:
    return SessionTokenConfig.from_config(current_app.config)


def session_service(ctx: ServiceContext | None = None) -> SessionService:
    """Session service wired to the JWT codec and configured lifetimes."""
    return SessionService(token_codec=JWTTokenCodec(), token_cfg=token_config(), ctx=ctx)


def parse_pagination(default_limit: int = 20, max_limit: int = 100) -> PaginationIn:
    """Parse pagination parameters from ``request.args`` using Marshmallow."""

    schema = PaginationQuerySchema(default_limit=default_limit, max_limit=max_limit)
    data = schema.load(request.args)
    return PaginationIn(page=data["page"], limit=data["limit"])


# ---------------------------- Session cookies --------------------------------


def set_token_cookie(response: Response, name: str, token: str) -> None:
    """
    Deliver a raw token as a ``Bearer``-prefixed, URL-encoded cookie.

    No ``Max-Age``/``Expires``: the cookie lives for the browser session and
    an expired token keeps reaching the gate. Expiry is the token's own.

    :param response: Outgoing response.
    :param name: Cookie name (``AccessToken`` / ``RefreshToken``).
    :param token: Raw token without scheme marker.
    """
    cfg = current_app.config
    response.set_cookie(
        name,
        quote(with_scheme(token)),
        httponly=True,
        secure=bool(cfg.get("AUTH_COOKIE_SECURE", False)),
        samesite=cfg.get("AUTH_COOKIE_SAMESITE", "Lax"),
        path="/",
    )


def set_session_cookies(response: Response, *, access: str, refresh: str | None = None) -> None:
    cfg = current_app.config
    set_token_cookie(response, cfg["AUTH_ACCESS_COOKIE"], access)
    if refresh is not None:
        set_token_cookie(response, cfg["AUTH_REFRESH_COOKIE"], refresh)


def clear_session_cookies(response: Response) -> None:
    """Expire both session cookies so the client stops presenting them."""
    cfg = current_app.config
    for name in (cfg["AUTH_ACCESS_COOKIE"], cfg["AUTH_REFRESH_COOKIE"]):
        response.delete_cookie(
            name,
            path="/",
            secure=bool(cfg.get("AUTH_COOKIE_SECURE", False)),
            httponly=True,
            samesite=cfg.get("AUTH_COOKIE_SAMESITE", "Lax"),
        )


# ------------------------------ Responses -----------------------------------


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
