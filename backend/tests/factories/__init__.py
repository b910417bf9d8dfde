"""Factory Boy base wired to the per-test transactional session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Holder for the session the ``session`` fixture yields for each test."""

    _session = None

    @classmethod
    def set(cls, session) -> None:
        cls._session = session

    @classmethod
    def get(cls):
        """
        Return the current test session.

        :raises RuntimeError: If a factory runs outside the ``session`` fixture.
        """
        if cls._session is None:
            raise RuntimeError("No test session registered; request the 'session' fixture.")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """
    Persist with ``flush`` so ids exist right away.

    Tests still call ``session.commit()`` before handing control to a
    service, because a service's read-only scope rolls back whatever is
    uncommitted.
    """

    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"
