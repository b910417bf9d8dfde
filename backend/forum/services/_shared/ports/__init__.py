"""
forum.services._shared.ports
============================

*Ports* (hexagonal interfaces) the service layer depends on.

- :mod:`token_codec`:
    :class:`~.TokenCodec` issues and parses signed session tokens;
    :class:`~.StubTokenCodec` is its in-memory double. Also hosts the
    ``Bearer`` transport helpers.

Concrete adapters live under ``forum.infra``.
"""

from __future__ import annotations

from .token_codec import (
    BEARER_PREFIX,
    StubTokenCodec,
    TokenClaims,
    TokenCodec,
    TokenKind,
    strip_scheme,
    with_scheme,
)

__all__ = [
    "BEARER_PREFIX",
    "StubTokenCodec",
    "TokenClaims",
    "TokenCodec",
    "TokenKind",
    "strip_scheme",
    "with_scheme",
]
