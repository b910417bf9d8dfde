"""
AccountService
==============

Registration and lifecycle of the principal record:

- signup (email uniqueness across all statuses, resigned included)
- self lookup
- resignation (terminal; revokes the stored refresh token)
- promotion to ``ADMIN`` (operator-only, exposed through the CLI)
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from forum.models.user import Role, User
from forum.repositories.user import UserRepository
from forum.services._shared.base import BaseService
from forum.services._shared.errors import (
    BadCredentials,
    DuplicateAccount,
    UserNotFound,
    violates,
)
from forum.services.accounts.dto import PrincipalOut, ResignIn, SignupIn

logger = logging.getLogger(__name__)


class AccountService(BaseService):
    """Application service for the principal aggregate."""

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def signup(self, dto: SignupIn) -> PrincipalOut:
        """
        Register a new principal with role ``USER`` and status ``NORMAL``.

        :raises DuplicateAccount: If any account (resigned included) uses the email.
        """
        with self.ro_uow() as uow:
            if uow.users.exists_by_email(dto.email):
                raise DuplicateAccount(dto.email)

        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                user = User(email=dto.email, password=dto.password, name=dto.name)
                repo.add(user)
                uow.password_history.record(user.id, user.password_hash)
                out = self._to_out(user)
        except IntegrityError as exc:
            # lost a race against a concurrent signup
            if violates(exc, "uq_users_email"):
                raise DuplicateAccount(dto.email) from exc
            raise

        logger.info("Principal registered", extra={"principal_id": out.id})
        return out

    # --------------------------------------------------------------------- #
    # Self-service
    # --------------------------------------------------------------------- #

    def get_principal(self) -> PrincipalOut:
        """Return the caller's own record."""
        actor_id = self.require_actor()
        with self.ro_uow() as uow:
            user = uow.users.get(actor_id)
            if user is None:
                raise UserNotFound(actor_id)
            return self._to_out(user)

    def resign(self, dto: ResignIn) -> PrincipalOut:
        """
        Resign the caller's account. This cannot be undone.

        :raises BadCredentials: If the password does not match.
        """
        actor_id = self.require_actor()
        with self.ro_uow() as uow:
            user = uow.users.get(actor_id)
            if user is None:
                raise UserNotFound(actor_id)
            if not user.verify_password(dto.password):
                raise BadCredentials()

        with self.rw_uow() as uow:
            user = uow.users.get(actor_id)
            user.resign(self.now_utc())
            uow.users.flush()
            out = self._to_out(user)

        logger.info("Principal resigned", extra={"principal_id": actor_id})
        return out

    # --------------------------------------------------------------------- #
    # Operator
    # --------------------------------------------------------------------- #

    def promote(self, email: str) -> PrincipalOut:
        """
        Grant the ``ADMIN`` role.

        :raises UserNotFound: If no account uses ``email``.
        """
        with self.ro_uow() as uow:
            if uow.users.get_by_email(email) is None:
                raise UserNotFound(email)

        with self.rw_uow() as uow:
            user = uow.users.get_by_email(email)
            user.role = Role.ADMIN
            uow.users.flush()
            out = self._to_out(user)

        logger.info("Principal promoted", extra={"principal_id": out.id, "actor_role": Role.ADMIN.value})
        return out

    @staticmethod
    def _to_out(user: User) -> PrincipalOut:
        return PrincipalOut(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role.value,
            status=user.status.value,
            created_at=user.created_at,
        )
