# forum/services/session/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: Credential subject (normalized by the schema).
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with freshly issued raw tokens (no scheme marker).

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Authenticated caller established by the session verifier.

    :param principal_id: User primary key.
    :type principal_id: int
    :param subject: Credential subject carried by the token (email).
    :type subject: str
    :param role: ``"USER"`` or ``"ADMIN"``.
    :type role: str
    """

    principal_id: int
    subject: str
    role: str


# ------------------------------ Config ------------------------------------ #

DEFAULT_ACCESS_TTL = timedelta(minutes=30)
DEFAULT_REFRESH_TTL = timedelta(days=14)


@dataclass(frozen=True, slots=True)
class SessionTokenConfig:
    """
    Token lifetimes.

    :param access_ttl: Access token lifetime.
    :type access_ttl: timedelta
    :param refresh_ttl: Refresh token lifetime.
    :type refresh_ttl: timedelta
    """

    access_ttl: timedelta = DEFAULT_ACCESS_TTL
    refresh_ttl: timedelta = DEFAULT_REFRESH_TTL

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> SessionTokenConfig:
        """Build from a Flask config mapping (``ACCESS_TOKEN_TTL``/``REFRESH_TOKEN_TTL``)."""
        return cls(
            access_ttl=config.get("ACCESS_TOKEN_TTL", DEFAULT_ACCESS_TTL),
            refresh_ttl=config.get("REFRESH_TOKEN_TTL", DEFAULT_REFRESH_TTL),
        )
