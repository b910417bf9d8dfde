"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. The translation to the uniform JSON error envelope is handled by
``forum/core/errors.py``.

Taxonomy
--------
- Session: :class:`NotLoggedIn`, :class:`MalformedToken`,
  :class:`InvalidToken`, :class:`ExpiredAccessToken`,
  :class:`ExpiredRefreshToken`.
- Codec: :class:`MissingToken`, :class:`ExpiredToken` (plus
  :class:`MalformedToken`).
- Accounts: :class:`UserNotFound`, :class:`BadCredentials`,
  :class:`ResignedAccount`, :class:`DuplicateAccount`, :class:`PasswordReused`.
- Content: :class:`Forbidden`, :class:`PostNotFound`,
  :class:`CommentNotFound`, :class:`InvalidParentComment`,
  :class:`CannotLikeOwnContent`, :class:`AlreadyLiked`, :class:`LikeNotFound`.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    :param exc: The exception raised by SQLAlchemy during flush/commit.
    :param constraint_name: Constraint to match (e.g. ``uq_post_likes_user_post``).
    :returns: ``True`` if the error message names the constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Each subclass carries a stable machine ``code`` and a client-safe
    ``default_message``.
    """

    code: str = "service_error"
    default_message: str = "The request could not be processed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "Post").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    code = "not_found"

    def __str__(self) -> str:
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a uniqueness rule or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    code = "conflict"

    def __str__(self) -> str:
        return self.detail


class AuthenticationError(ServiceError):
    """The caller could not be authenticated."""

    code = "unauthenticated"
    default_message = "Authentication required."


class AuthorizationError(ServiceError):
    """The authenticated caller is not allowed to perform the action."""

    code = "forbidden"
    default_message = "You are not allowed to perform this action."


class TokenError(ServiceError):
    """Base for token structure and validity failures."""

    code = "token_error"
    default_message = "Token could not be processed."


# --------------------------------------------------------------------------- #
# Token codec
# --------------------------------------------------------------------------- #


class MalformedToken(TokenError):
    code = "malformed_token"
    default_message = "Token is malformed."


class MissingToken(MalformedToken):
    """The transport value lacks the ``Bearer`` scheme marker."""

    code = "malformed_token"
    default_message = "Token is missing its scheme prefix."


class ExpiredToken(TokenError):
    code = "expired_token"
    default_message = "Token has expired."


# --------------------------------------------------------------------------- #
# Session verification
# --------------------------------------------------------------------------- #


class InvalidToken(TokenError):
    code = "invalid_token"
    default_message = "Token is not valid."


class NotLoggedIn(AuthenticationError):
    code = "not_logged_in"
    default_message = "Sign in required."


class ExpiredAccessToken(AuthenticationError):
    code = "expired_access_token"
    default_message = "Access token has expired, reissue required."


class ExpiredRefreshToken(AuthenticationError):
    code = "expired_refresh_token"
    default_message = "Refresh token has expired, sign in again."


# --------------------------------------------------------------------------- #
# Accounts
# --------------------------------------------------------------------------- #


class UserNotFound(NotFoundError):
    code = "user_not_found"

    def __init__(self, key: str | int) -> None:
        NotFoundError.__init__(self, "User", key)

    def __str__(self) -> str:
        return "User is not registered."


class BadCredentials(AuthenticationError):
    code = "bad_credentials"
    default_message = "Check your password."


class ResignedAccount(AuthenticationError):
    code = "resigned_account"
    default_message = "This account has been resigned."


class DuplicateAccount(ConflictError):
    code = "duplicate_account"

    def __init__(self, email: str) -> None:
        ConflictError.__init__(
            self, "User", "An account with this email already exists or was resigned."
        )
        self.email = email


class PasswordReused(ServiceError):
    code = "password_reused"
    default_message = "The new password matches one of your recent passwords."


# --------------------------------------------------------------------------- #
# Content
# --------------------------------------------------------------------------- #


class Forbidden(AuthorizationError):
    code = "forbidden"


class PostNotFound(NotFoundError):
    code = "post_not_found"

    def __init__(self, key: int) -> None:
        NotFoundError.__init__(self, "Post", key)


class CommentNotFound(NotFoundError):
    code = "comment_not_found"

    def __init__(self, key: int) -> None:
        NotFoundError.__init__(self, "Comment", key)


class LikeNotFound(NotFoundError):
    code = "like_not_found"

    def __init__(self, target: str, key: int) -> None:
        NotFoundError.__init__(self, f"{target} like", key)


class InvalidParentComment(ServiceError):
    code = "invalid_parent_comment"
    default_message = "Parent comment does not exist on this post."


class CannotLikeOwnContent(ServiceError):
    code = "cannot_like_own_content"
    default_message = "You cannot like your own content."


class AlreadyLiked(ConflictError):
    code = "already_liked"

    def __init__(self, target: str, key: int) -> None:
        ConflictError.__init__(self, target, f"{target} {key} is already liked.")
