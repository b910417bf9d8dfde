"""Shared fixtures: one app per run, one rolled-back transaction per test.

Services open their own units of work on ``db.session``. The ``session``
fixture swaps that scoped session for one bound to a single connection
inside an outer transaction, so service commits only release a SAVEPOINT
and everything is discarded when the test ends.
"""

from __future__ import annotations

import os

import pytest
from factory.random import reseed_random
from forum.core.config import TestingConfig
from forum.core.extensions import db as _db
from forum.factory import create_app
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker


class TestConfig(TestingConfig):
    """In-memory SQLite, a fixed HS256 key and no proxy or rate limiting."""

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "test-secret-key-with-at-least-thirty-two-bytes"
    CORS_ORIGINS = "*"
    USE_PROXYFIX = False


@pytest.fixture(scope="session")
def app():
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig, instance_config_filename=None)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create the schema once; drop it when the run ends."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Single DBAPI connection shared by every test's transaction."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """
    Scoped session inside ``BEGIN`` + ``SAVEPOINT``, installed as ``db.session``.

    When a unit of work commits or rolls back, the SAVEPOINT ends and a new
    one is opened, so later statements in the same test stay isolated.
    """
    outer = connection.begin()
    scoped = scoped_session(sessionmaker(bind=connection, future=True, autoflush=False))
    nested = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):
        nonlocal nested
        if trans.nested and not trans._parent.nested:
            nested = connection.begin_nested()

    original = db.session
    db.session.remove()
    db.session = scoped
    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original
        outer.rollback()


@pytest.fixture(scope="function")
def client(app, session):
    """Flask test client whose requests run on the transactional session."""
    return app.test_client()


@pytest.fixture(autouse=True)
def _factories_session(session):
    """Point Factory Boy at this test's session."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield
    SQLAlchemySession.set(None)


@pytest.fixture(scope="session", autouse=True)
def _seed_factories():
    """Deterministic Faker values in factory-built rows."""
    reseed_random(1337)
