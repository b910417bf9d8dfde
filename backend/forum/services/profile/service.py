"""
ProfileService
==============

The caller's own profile: display name, password, and how much content
they have liked.

A password change requires the current password and may not reuse any of
the principal's last :data:`PASSWORD_HISTORY_SIZE` passwords. Each new
hash is recorded in ``password_history`` and older entries are pruned.
"""

from __future__ import annotations

import logging

from forum.models.user import User
from forum.services._shared.base import BaseService
from forum.services._shared.errors import BadCredentials, PasswordReused, UserNotFound
from forum.services.profile.dto import ProfileOut, ProfileUpdateIn

logger = logging.getLogger(__name__)

PASSWORD_HISTORY_SIZE = 3


class ProfileService(BaseService):
    """Read and change the authenticated principal's profile."""

    def get_profile(self) -> ProfileOut:
        """Return the caller's profile with liked-content counts."""
        actor_id = self.require_actor()
        with self.ro_uow() as uow:
            user = uow.users.get(actor_id)
            if user is None:
                raise UserNotFound(actor_id)
            return self._to_out(uow, user)

    def update_profile(self, dto: ProfileUpdateIn) -> ProfileOut:
        """
        Change the display name and/or the password.

        :raises BadCredentials: If ``dto.password`` is not the current password.
        :raises PasswordReused: If ``dto.new_password`` is one of the recent passwords.
        """
        actor_id = self.require_actor()
        with self.ro_uow() as uow:
            user = uow.users.get(actor_id)
            if user is None:
                raise UserNotFound(actor_id)
            if not user.verify_password(dto.password):
                raise BadCredentials()
            if dto.new_password is not None and self._recently_used(uow, user, dto.new_password):
                raise PasswordReused()

        with self.rw_uow() as uow:
            user = uow.users.get(actor_id)
            if dto.name is not None:
                uow.users.update(user, name=dto.name)
            if dto.new_password is not None:
                user.password = dto.new_password
                uow.password_history.record(actor_id, user.password_hash)
                uow.password_history.prune(actor_id, keep=PASSWORD_HISTORY_SIZE)
            uow.users.flush()
            out = self._to_out(uow, user)

        logger.info("Profile updated", extra={"principal_id": actor_id})
        return out

    # ------------------------------------------------------------------ #

    @staticmethod
    def _recently_used(uow, user: User, raw: str) -> bool:
        if user.verify_password(raw):
            return True
        recent = uow.password_history.recent_for_user(user.id, PASSWORD_HISTORY_SIZE)
        return any(entry.matches(raw) for entry in recent)

    @staticmethod
    def _to_out(uow, user: User) -> ProfileOut:
        return ProfileOut(
            id=user.id,
            email=user.email,
            name=user.name,
            liked_posts=uow.post_likes.count_by_user(user.id),
            liked_comments=uow.comment_likes.count_by_user(user.id),
        )
