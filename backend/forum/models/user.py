"""Principal (user account) model for the forum."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import DateTime, Index, String, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, validates
from werkzeug.security import check_password_hash, generate_password_hash

from forum.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Role(str, Enum):
    """Authorization role granted to a principal."""

    USER = "USER"
    ADMIN = "ADMIN"


class UserStatus(str, Enum):
    """Account lifecycle status. ``RESIGNED`` is terminal."""

    NORMAL = "NORMAL"
    RESIGNED = "RESIGNED"


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Authenticated principal of the forum.

    Fields
    ------
    email : str
        Credential subject. Stored normalized (lowercase, trimmed).
    password_hash : str
        Hashed password (write-only setter via ``password``).
    name : str
        Display name.
    role : Role
        ``USER`` or ``ADMIN``.
    status : UserStatus
        ``NORMAL`` or ``RESIGNED``.
    refresh_token : str | None
        Currently valid refresh token in transport form (``Bearer <jwt>``).
        ``None`` once logged out or resigned. Only one value is kept, so a
        new login supersedes the previous session.
    status_changed_at : datetime | None
        When the status last changed (resignation time).
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(254), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    role: Mapped[Role] = mapped_column(
        SAEnum(Role, name="enum_user_role", native_enum=False, create_constraint=True),
        nullable=False,
        default=Role.USER,
    )
    status: Mapped[UserStatus] = mapped_column(
        SAEnum(UserStatus, name="enum_user_status", native_enum=False, create_constraint=True),
        nullable=False,
        default=UserStatus.NORMAL,
    )
    refresh_token: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    status_changed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("ix_users_email", "email"),
    )

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = generate_password_hash(raw)

    def verify_password(self, raw: str) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :type raw: str
        :returns: ``True`` if it matches; otherwise ``False``.
        :rtype: bool
        """
        if not self.password_hash:
            return False
        return bool(check_password_hash(self.password_hash, raw))

    # -------------------- Lifecycle --------------------
    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_resigned(self) -> bool:
        return self.status == UserStatus.RESIGNED

    def resign(self, when: datetime) -> None:
        """Move to ``RESIGNED`` and drop the live refresh token."""
        self.status = UserStatus.RESIGNED
        self.status_changed_at = when
        self.refresh_token = None

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        # Minimal sanity check; full validation happens at API layer.
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Email format looks invalid.")
        return v

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("Name is required.")
        return value.strip()

    @validates("status")
    def _guard_status(self, key: str, value: UserStatus) -> UserStatus:
        # RESIGNED is terminal
        if self.status == UserStatus.RESIGNED and value != UserStatus.RESIGNED:
            raise ValueError("A resigned account cannot be reactivated.")
        return value
