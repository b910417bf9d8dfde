# forum/infra/jwt/flask_jwt_token_codec.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from flask_jwt_extended import create_access_token, create_refresh_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import ExpiredSignatureError, InvalidTokenError

from forum.services._shared.errors import ExpiredToken, MalformedToken
from forum.services._shared.ports import TokenClaims, TokenCodec, TokenKind


@dataclass(slots=True)
class JWTTokenCodec(TokenCodec):
    """
    Adapter for Flask-JWT-Extended (HS256, key from ``JWT_SECRET_KEY``).

    Each token carries ``sub``, ``type`` (access/refresh), ``iat``, ``exp``
    and a random ``jti``, so two tokens issued in the same second still
    differ.

    .. note::
       Requires an active Flask app context with JWT settings.
    """

    def issue(self, subject: str, kind: TokenKind, ttl: timedelta) -> str:
        create = create_access_token if kind is TokenKind.ACCESS else create_refresh_token
        return cast(str, create(identity=subject, expires_delta=ttl))

    def parse(self, token: str) -> TokenClaims:
        # decode_token verifies the signature before any claim is read
        try:
            raw = cast(dict[str, Any], decode_token(token))
        except ExpiredSignatureError as exc:
            raise ExpiredToken() from exc
        except (InvalidTokenError, JWTExtendedException) as exc:
            raise MalformedToken() from exc

        try:
            kind = TokenKind(raw.get("type"))
            return TokenClaims(
                subject=str(raw["sub"]),
                kind=kind,
                issued_at=datetime.fromtimestamp(int(raw["iat"]), tz=UTC),
                expires_at=datetime.fromtimestamp(int(raw["exp"]), tz=UTC),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedToken() from exc
