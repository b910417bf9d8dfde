# forum/services/session/service.py
from __future__ import annotations

import logging

from forum.repositories.user import UserRepository
from forum.services._shared.base import BaseService, ServiceContext
from forum.services._shared.errors import (
    BadCredentials,
    ExpiredAccessToken,
    ExpiredRefreshToken,
    ExpiredToken,
    InvalidToken,
    MalformedToken,
    MissingToken,
    NotLoggedIn,
    ResignedAccount,
    UserNotFound,
)
from forum.services._shared.ports import TokenClaims, TokenCodec, TokenKind, strip_scheme, with_scheme
from forum.services.session.dto import Identity, LoginIn, SessionTokenConfig, TokenPairOut

logger = logging.getLogger(__name__)


class SessionService(BaseService):
    """
    Session lifecycle service (login / reissue / logout).

    Tokens are issued and parsed through a pluggable :class:`TokenCodec`.
    The only server-side session state is the refresh token mirrored on the
    principal row: a new login overwrites it, logout clears it, and reissue
    compares against it. There is no denylist, so an access token issued
    before logout stays usable until its own expiry.

    Concurrent login/reissue/logout for the same principal race on that
    column and the last write wins.
    """

    def __init__(
        self,
        *,
        token_codec: TokenCodec,
        token_cfg: SessionTokenConfig | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        :param token_codec: Adapter issuing/parsing signed tokens.
        :param token_cfg: Access/Refresh lifetimes.
        :param ctx: Request-scoped context (needed by :meth:`logout`).
        """
        super().__init__(ctx=ctx)
        self.tokens = token_codec
        self.cfg = token_cfg or SessionTokenConfig()

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> TokenPairOut:
        """
        Authenticate credentials and issue a fresh token pair.

        The refresh token is persisted in transport form on the principal,
        replacing any previous session.

        :param dto: Login input.
        :returns: Raw access/refresh token pair.
        :raises UserNotFound: No principal has this email.
        :raises BadCredentials: Password does not match.
        :raises ResignedAccount: The account was resigned.
        """
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_email(dto.email)
            if user is None:
                raise UserNotFound(dto.email)
            if not user.verify_password(dto.password):
                raise BadCredentials()
            if user.is_resigned:
                raise ResignedAccount()
            user_id, subject = user.id, user.email

        access = self.tokens.issue(subject, TokenKind.ACCESS, self.cfg.access_ttl)
        refresh = self.tokens.issue(subject, TokenKind.REFRESH, self.cfg.refresh_ttl)

        with self.rw_uow() as uow:
            uow.users.store_refresh_token(user_id, with_scheme(refresh))

        logger.info("Session opened", extra={"principal_id": user_id})
        return TokenPairOut(access_token=access, refresh_token=refresh)

    # ------------------------------------------------------------------ #
    # Reissue
    # ------------------------------------------------------------------ #

    def reissue(self, refresh_token: str) -> str | None:
        """
        Exchange a refresh token for a new access token.

        A refresh token that no longer matches the stored value (superseded
        by a newer login, or revoked by logout/resign) yields ``None``
        instead of an error.

        :param refresh_token: Raw refresh token (scheme marker stripped).
        :returns: New raw access token, or ``None`` for a stale session.
        :raises ExpiredRefreshToken: The refresh token has expired.
        :raises InvalidToken: The token is not a valid refresh token.
        :raises UserNotFound: The subject no longer exists.
        """
        claims = self.parse_refresh(refresh_token)

        with self.ro_uow() as uow:
            user = uow.users.get_by_email(claims.subject)
            if user is None:
                raise UserNotFound(claims.subject)
            user_id, stored = user.id, user.refresh_token

        if not self._matches_stored(stored, refresh_token):
            logger.info("Stale refresh token presented", extra={"principal_id": user_id})
            return None

        logger.info("Access token reissued", extra={"principal_id": user_id})
        return self.tokens.issue(claims.subject, TokenKind.ACCESS, self.cfg.access_ttl)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self) -> None:
        """
        Revoke the caller's refresh token.

        Clearing the transport (cookies) is the API layer's job.

        :raises NotLoggedIn: If the context carries no identity.
        """
        actor_id = self.require_actor()
        with self.rw_uow() as uow:
            uow.users.store_refresh_token(actor_id, None)
        logger.info("Session closed", extra={"principal_id": actor_id})

    # ------------------------------------------------------------------ #
    # Verification helpers (used by the session verifier)
    # ------------------------------------------------------------------ #

    def parse_refresh(self, token: str) -> TokenClaims:
        """Parse a raw refresh token, mapping codec failures to session errors."""
        try:
            claims = self.tokens.parse(token)
        except ExpiredToken as exc:
            raise ExpiredRefreshToken() from exc
        except MalformedToken as exc:
            raise InvalidToken() from exc
        if claims.kind is not TokenKind.REFRESH:
            raise InvalidToken()
        return claims

    def parse_access(self, token: str) -> TokenClaims:
        """Parse a raw access token, mapping codec failures to session errors."""
        try:
            claims = self.tokens.parse(token)
        except ExpiredToken as exc:
            raise ExpiredAccessToken() from exc
        except MalformedToken as exc:
            raise InvalidToken() from exc
        if claims.kind is not TokenKind.ACCESS:
            raise InvalidToken()
        return claims

    def identify(self, subject: str) -> Identity:
        """
        Resolve a token subject to the current principal.

        :raises NotLoggedIn: The principal no longer exists.
        :raises ResignedAccount: The principal has resigned.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(subject)
            if user is None:
                raise NotLoggedIn()
            if user.is_resigned:
                raise ResignedAccount()
            return Identity(principal_id=user.id, subject=user.email, role=user.role.value)

    @staticmethod
    def _matches_stored(stored: str | None, presented: str) -> bool:
        try:
            return strip_scheme(stored) == presented
        except MissingToken:
            return False
