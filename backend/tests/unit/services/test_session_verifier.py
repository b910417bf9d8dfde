"""Stage-by-stage behaviour of the session verifier."""

from __future__ import annotations

from datetime import timedelta

import pytest
from forum.models.user import User
from forum.services._shared.errors import (
    ExpiredAccessToken,
    ExpiredRefreshToken,
    InvalidToken,
    MalformedToken,
    NotLoggedIn,
    ResignedAccount,
)
from forum.services._shared.ports import StubTokenCodec, TokenKind, with_scheme
from forum.services.session import (
    LoginIn,
    PresentedTokens,
    SessionService,
    VerifierState,
    build_verifier,
)
from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tests.helpers.clock import FakeClock

LOGIN = "/api/v1/users/login"
SIGNUP = "/api/v1/users/signup"
REISSUE = "/api/v1/users/reissue"
PROTECTED = "/api/v1/posts"


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def sessions(clock) -> SessionService:
    return SessionService(token_codec=StubTokenCodec(clock=clock))


@pytest.fixture()
def verifier(sessions):
    return build_verifier(sessions, public_paths=[LOGIN, SIGNUP], reissue_path=REISSUE)


@pytest.fixture()
def user(session) -> User:
    u = UserFactory(email="dana@example.com")
    session.commit()
    return u


@pytest.fixture()
def pair(sessions, user):
    return sessions.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))


def _present(path=PROTECTED, *, access=None, refresh=None, method="GET", raw=False):
    wrap = (lambda t: t) if raw else (lambda t: with_scheme(t) if t is not None else None)
    return PresentedTokens(path=path, method=method, access=wrap(access), refresh=wrap(refresh))


# ----------------------------- Pass-through ------------------------------- #
@pytest.mark.parametrize("path", [LOGIN, SIGNUP, LOGIN + "/"])
def test_public_paths_pass_through_without_tokens(verifier, path):
    outcome = verifier.verify(PresentedTokens(path=path, method="POST"))
    assert outcome.state is VerifierState.PASS_THROUGH
    assert outcome.identity is None


def test_preflight_passes_through(verifier):
    outcome = verifier.verify(PresentedTokens(path=PROTECTED, method="OPTIONS"))
    assert outcome.state is VerifierState.PASS_THROUGH


def test_stage_order_is_explicit(verifier):
    assert verifier.stage_names() == [
        "preflight",
        "public",
        "presence",
        "scheme",
        "reissue",
        "validate",
        "identify",
    ]


# ------------------------------ Rejections -------------------------------- #
@pytest.mark.parametrize("which", ["access", "refresh", "both"])
def test_missing_token_is_not_logged_in(verifier, pair, which):
    access = None if which in ("access", "both") else pair.access_token
    refresh = None if which in ("refresh", "both") else pair.refresh_token

    outcome = verifier.verify(_present(access=access, refresh=refresh))

    assert outcome.state is VerifierState.REJECTED
    assert isinstance(outcome.error, NotLoggedIn)


def test_missing_scheme_marker_is_malformed(verifier, pair):
    outcome = verifier.verify(
        _present(access=pair.access_token, refresh=with_scheme(pair.refresh_token), raw=True)
    )
    assert isinstance(outcome.error, MalformedToken)


def test_expired_access_token_asks_for_reissue(verifier, clock, pair):
    clock.advance(timedelta(minutes=31))
    outcome = verifier.verify(_present(access=pair.access_token, refresh=pair.refresh_token))
    assert isinstance(outcome.error, ExpiredAccessToken)


def test_unknown_access_token_is_invalid(verifier, pair):
    outcome = verifier.verify(_present(access="forged", refresh=pair.refresh_token))
    assert isinstance(outcome.error, InvalidToken)


def test_swapped_token_kinds_are_invalid(verifier, pair):
    outcome = verifier.verify(_present(access=pair.refresh_token, refresh=pair.access_token))
    assert isinstance(outcome.error, InvalidToken)


def test_expired_refresh_token_on_protected_route(verifier, clock, pair):
    clock.advance(timedelta(days=15))
    outcome = verifier.verify(_present(access=pair.access_token, refresh=pair.refresh_token))
    assert isinstance(outcome.error, ExpiredRefreshToken)


def test_resigned_principal_is_rejected(verifier, pair, user, session):
    session.get(User, user.id).resign(FakeClock()())
    session.commit()

    outcome = verifier.verify(_present(access=pair.access_token, refresh=pair.refresh_token))
    assert isinstance(outcome.error, ResignedAccount)


# ---------------------------- Authentication ------------------------------ #
def test_valid_tokens_authenticate(verifier, pair, user):
    outcome = verifier.verify(_present(access=pair.access_token, refresh=pair.refresh_token))

    assert outcome.authenticated
    assert outcome.identity.principal_id == user.id
    assert outcome.identity.subject == user.email
    assert outcome.reissued_access is None


# -------------------------------- Reissue --------------------------------- #
def test_reissue_path_mints_access_token_even_if_current_one_expired(verifier, clock, pair, sessions):
    clock.advance(timedelta(hours=2))

    outcome = verifier.verify(
        _present(REISSUE, access=pair.access_token, refresh=pair.refresh_token)
    )

    assert outcome.authenticated
    assert outcome.reissued_access is not None
    assert sessions.tokens.parse(outcome.reissued_access).kind is TokenKind.ACCESS


def test_reissue_path_with_superseded_refresh_token(verifier, sessions, pair, user):
    sessions.login(LoginIn(email=user.email, password=DEFAULT_PASSWORD))

    outcome = verifier.verify(
        _present(REISSUE, access=pair.access_token, refresh=pair.refresh_token)
    )
    assert isinstance(outcome.error, NotLoggedIn)


def test_reissue_path_with_expired_refresh_token(verifier, clock, pair):
    clock.advance(timedelta(days=15))
    outcome = verifier.verify(
        _present(REISSUE, access=pair.access_token, refresh=pair.refresh_token)
    )
    assert isinstance(outcome.error, ExpiredRefreshToken)


def test_reissue_path_with_forged_refresh_token(verifier, pair):
    outcome = verifier.verify(_present(REISSUE, access=pair.access_token, refresh="forged"))
    assert isinstance(outcome.error, InvalidToken)
