"""Version 1 of the forum API."""

from __future__ import annotations

from flask import Blueprint

from .comments import bp as comments_bp
from .posts import bp as posts_bp
from .users import bp as users_bp

API_VERSION = "v1"

# (blueprint, resource segment) -> /api/v1/<resource>
REGISTRY: list[tuple[Blueprint, str]] = [
    (users_bp, "users"),
    (posts_bp, "posts"),
    (comments_bp, "comments"),
]
