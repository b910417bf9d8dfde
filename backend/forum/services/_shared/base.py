# forum/services/_shared/base.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from forum.repositories.base import Pagination
from forum.services._shared.errors import Forbidden, NotLoggedIn
from forum.services._shared.policies.common import is_admin, is_owner
from forum.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(frozen=True, slots=True)
class ServiceContext:
    """
    Carry request-scoped data (authenticated identity, request ids).

    Built from the identity the session gate establishes and passed to
    services explicitly; nothing is read from global state.

    :param actor_id: Authenticated principal identifier.
    :param actor_role: Role of the principal (``"USER"`` / ``"ADMIN"``).
    :param request_id: Correlation id for logging/tracing.
    """

    actor_id: int | None = None
    actor_role: str | None = None
    request_id: str | None = None


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Offer shared authorization helpers (author / admin checks).
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    Services never touch the global session directly; always use a Unit of Work.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        self.ctx = ctx or ServiceContext()

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """Create a read-write Unit of Work."""
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level (e.g. "READ COMMITTED").
        :param enforce_db_readonly: Apply ``SET TRANSACTION READ ONLY`` when supported.
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    @staticmethod
    def now_utc() -> datetime:
        return datetime.now(UTC)

    def ensure_pagination(self, *, page: int, limit: int, max_limit: int = 100) -> Pagination:
        """Build a Pagination value object, newest first (ties by id), with basic clamping."""
        page = max(1, int(page))
        limit = min(max(1, int(limit)), max_limit)
        return Pagination(page=page, limit=limit, sort=["-created_at", "-id"])

    # --------------------------- AuthZ --------------------------------

    def require_actor(self) -> int:
        """Return the authenticated actor id or raise :class:`NotLoggedIn`."""
        if self.ctx.actor_id is None:
            raise NotLoggedIn()
        return self.ctx.actor_id

    def ensure_owner(self, owner_id: int, *, msg: str | None = None) -> None:
        """
        Ensure the current actor authored the resource.

        :raises Forbidden: If the actor is not the owner.
        """
        if not is_owner(actor_id=self.require_actor(), owner_id=owner_id):
            raise Forbidden(msg or "Only the author can modify this content.")

    def ensure_owner_or_admin(self, owner_id: int, *, msg: str | None = None) -> None:
        """
        Ensure the current actor authored the resource or holds ``ADMIN``.

        :raises Forbidden: If neither condition holds.
        """
        actor_id = self.require_actor()
        if is_owner(actor_id=actor_id, owner_id=owner_id) or is_admin(role=self.ctx.actor_role):
            return
        raise Forbidden(msg or "Only the author or an administrator can do this.")
