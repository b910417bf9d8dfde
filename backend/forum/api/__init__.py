"""HTTP surface: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from flask import Flask

from forum.api.v1 import API_VERSION, REGISTRY


def versioned_prefix(app: Flask, version: str = API_VERSION) -> str:
    """``/api/v1`` by default; honours a custom ``API_BASE_PREFIX``."""
    base = str(app.config.get("API_BASE_PREFIX", "/api")).strip("/")
    return "/" + "/".join(part for part in (base, version) if part)


def api_path(app: Flask, *segments: str) -> str:
    """Absolute path of a v1 endpoint, e.g. ``api_path(app, "users", "login")``."""
    tail = "/".join(s.strip("/") for s in segments if s.strip("/"))
    prefix = versioned_prefix(app)
    return f"{prefix}/{tail}" if tail else prefix


def init_app(app: Flask) -> None:
    """Mount every v1 blueprint at ``<prefix>/<resource>``."""
    for blueprint, resource in REGISTRY:
        app.register_blueprint(blueprint, url_prefix=api_path(app, resource))


__all__ = ["api_path", "init_app", "versioned_prefix"]
