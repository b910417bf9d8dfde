"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`forum.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``forum.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Shared DTOs (from ``forum.services._shared.dto``)
    * :class:`PaginationIn`
    * :class:`PageMeta`

- Session lifecycle (from ``forum.services.session``)
    * :class:`SessionService`, :class:`SessionVerifier`
    * DTOs: :class:`LoginIn`, :class:`TokenPairOut`, :class:`Identity`,
      :class:`SessionTokenConfig`

- Accounts (from ``forum.services.accounts``)
    * :class:`AccountService`
    * DTOs: :class:`SignupIn`, :class:`ResignIn`, :class:`PrincipalOut`

- Content (from ``forum.services.content``)
    * :class:`PostService`, :class:`CommentService`, :class:`LikeService`,
      :class:`ContentTreeService`

- Profile (from ``forum.services.profile``)
    * :class:`ProfileService`
    * DTOs: :class:`ProfileUpdateIn`, :class:`ProfileOut`
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext

# Shared DTOs (compose these in endpoint-specific DTOs)
from ._shared.dto import PageMeta, PaginationIn

# Accounts
from .accounts import AccountService, PrincipalOut, ResignIn, SignupIn

# Content
from .content import (
    CommentIn,
    CommentService,
    ContentTreeService,
    LikeService,
    PostIn,
    PostService,
    PostUpdateIn,
)

# Profile
from .profile import ProfileOut, ProfileService, ProfileUpdateIn

# Session lifecycle
from .session import (
    Identity,
    LoginIn,
    SessionService,
    SessionTokenConfig,
    SessionVerifier,
    TokenPairOut,
)

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Shared DTOs
    "PaginationIn",
    "PageMeta",
    # Session
    "SessionService",
    "SessionVerifier",
    "SessionTokenConfig",
    "LoginIn",
    "TokenPairOut",
    "Identity",
    # Accounts
    "AccountService",
    "SignupIn",
    "ResignIn",
    "PrincipalOut",
    # Content
    "PostService",
    "CommentService",
    "LikeService",
    "ContentTreeService",
    "PostIn",
    "PostUpdateIn",
    "CommentIn",
    # Profile
    "ProfileService",
    "ProfileUpdateIn",
    "ProfileOut",
]
