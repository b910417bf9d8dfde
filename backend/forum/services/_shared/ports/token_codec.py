from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Protocol

from forum.services._shared.errors import ExpiredToken, MalformedToken, MissingToken

# Transport scheme marker prepended to tokens in cookies/headers
BEARER_PREFIX = "Bearer "


class TokenKind(str, Enum):
    """What a token may be used for."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified content of a session token.

    :param subject: Credential subject (principal email).
    :param kind: Access or refresh.
    :param issued_at: Issue instant (UTC).
    :param expires_at: Expiry instant (UTC).
    """

    subject: str
    kind: TokenKind
    issued_at: datetime
    expires_at: datetime


class TokenCodec(Protocol):
    """Port for issuing and parsing signed, expiring session tokens."""

    def issue(self, subject: str, kind: TokenKind, ttl: timedelta) -> str: ...

    def parse(self, token: str) -> TokenClaims:
        """
        Verify the signature, then return the claims.

        :raises MalformedToken: Signature or structure is invalid.
        :raises ExpiredToken: The token is past its expiry.
        """
        ...


def with_scheme(token: str) -> str:
    """Return the transport form ``"Bearer <token>"``."""
    return f"{BEARER_PREFIX}{token}"


def strip_scheme(value: str | None) -> str:
    """
    Remove the ``Bearer`` marker from a transport value.

    :raises MissingToken: When the value is empty or lacks the marker.
    """
    if not value or not value.startswith(BEARER_PREFIX):
        raise MissingToken()
    token = value[len(BEARER_PREFIX) :]
    if not token:
        raise MissingToken()
    return token


class StubTokenCodec(TokenCodec):
    """Deterministic in-memory codec used in unit tests.

    Tokens are opaque ``"<kind>.<subject>.<seq>"`` strings known only to this
    instance; anything it did not issue parses as malformed. ``clock`` lets a
    test move time forward to exercise expiry.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(tz=UTC))
        self._seq = 0
        self._issued: dict[str, TokenClaims] = {}

    def issue(self, subject: str, kind: TokenKind, ttl: timedelta) -> str:
        self._seq += 1
        now = self._clock()
        token = f"{kind.value}.{subject}.{self._seq}"
        self._issued[token] = TokenClaims(
            subject=subject, kind=kind, issued_at=now, expires_at=now + ttl
        )
        return token

    def parse(self, token: str) -> TokenClaims:
        claims = self._issued.get(token)
        if claims is None:
            raise MalformedToken()
        if claims.expires_at <= self._clock():
            raise ExpiredToken()
        return claims
