"""
Unit of Work contract shared by the read-write and read-only scopes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from forum.repositories import (
        CommentLikeRepository,
        CommentRepository,
        PasswordHistoryRepository,
        PostLikeRepository,
        PostRepository,
        UserRepository,
    )


class UnitOfWork(ABC):
    """
    One transactional scope over the forum's repositories.

    Every repository handed out by a unit of work shares its session, so a
    tree deletion can remove likes and comments in the same transaction.
    Read-write scopes commit on a clean exit; read-only scopes always roll
    back.
    """

    users: UserRepository
    password_history: PasswordHistoryRepository
    posts: PostRepository
    post_likes: PostLikeRepository
    comments: CommentRepository
    comment_likes: CommentLikeRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...
