"""DTOs for ProfileService."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ProfileUpdateIn:
    """
    Input DTO for a profile change.

    :param password: Current password, always required.
    :type password: str
    :param name: New display name, or ``None`` to keep it.
    :type name: str | None
    :param new_password: New password, or ``None`` to keep it.
    :type new_password: str | None
    """

    password: str
    name: str | None = None
    new_password: str | None = None


@dataclass(frozen=True, slots=True)
class ProfileOut:
    id: int
    email: str
    name: str
    liked_posts: int
    liked_comments: int
