"""DTOs for AccountService."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class SignupIn:
    """
    Input DTO for registration.

    :param email: Credential subject (normalized to lowercase by the model).
    :type email: str
    :param password: Raw password to be hashed by the model.
    :type password: str
    :param name: Display name.
    :type name: str
    """

    email: str
    password: str
    name: str


@dataclass(frozen=True, slots=True)
class ResignIn:
    password: str


@dataclass(frozen=True, slots=True)
class PrincipalOut:
    """
    Output DTO for a principal (never carries hashes or tokens).

    :param id: User identifier.
    :param email: Email address.
    :param name: Display name.
    :param role: ``"USER"`` or ``"ADMIN"``.
    :param status: ``"NORMAL"`` or ``"RESIGNED"``.
    :param created_at: Registration time.
    """

    id: int
    email: str
    name: str
    role: str
    status: str
    created_at: datetime | None = None
