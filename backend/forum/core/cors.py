"""Cross-origin policy for the browser client."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from forum.core.logger import REQUEST_ID_HEADER


def allowed_origins(raw: str | None) -> list[str]:
    """Split the comma-separated ``CORS_ORIGINS`` setting; ``[]`` means any origin."""
    origins = [o.strip() for o in (raw or "").split(",") if o.strip()]
    return [] if origins == ["*"] else origins


def init_app(app: Flask) -> None:
    """
    Apply the CORS policy to ``/api/*``.

    Sessions travel in cookies, so credentials are only allowed with an
    explicit origin list. With ``CORS_ORIGINS`` empty or ``"*"`` any origin
    may call the API but the browser will not attach the session cookies.
    The token header names are allowed too, for clients that cannot use
    cookies.
    """
    origins = allowed_origins(app.config.get("CORS_ORIGINS"))
    CORS(
        app,
        resources={r"/api/*": {"origins": origins or "*"}},
        supports_credentials=bool(origins),
        allow_headers=[
            "Content-Type",
            REQUEST_ID_HEADER,
            app.config["AUTH_ACCESS_COOKIE"],
            app.config["AUTH_REFRESH_COOKIE"],
        ],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
