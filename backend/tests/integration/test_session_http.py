"""End-to-end session lifecycle over HTTP: signup, login, reissue, logout."""

from __future__ import annotations

from datetime import timedelta
from urllib.parse import unquote

import pytest
from freezegun import freeze_time
from tests.factories.user import DEFAULT_PASSWORD, UserFactory

API = "/api/v1/users"


def _login(client, email, password=DEFAULT_PASSWORD):
    return client.post(f"{API}/login", json={"email": email, "password": password})


@pytest.fixture()
def member(session):
    u = UserFactory(email="member@example.com", name="Member")
    session.commit()
    return u


def test_signup_then_login_sets_prefixed_http_only_cookies(client):
    resp = client.post(
        f"{API}/signup",
        json={"email": "New@Example.com", "password": "longenough", "name": "Newbie"},
    )
    assert resp.status_code == 201
    assert resp.get_json()["data"]["email"] == "new@example.com"
    assert resp.get_json()["data"]["role"] == "USER"

    resp = _login(client, "new@example.com", "longenough")

    assert resp.status_code == 200
    assert resp.get_json()["data"]["token_type"] == "Bearer"
    assert resp.get_json()["data"]["access_expires_in"] == 30 * 60
    set_cookies = resp.headers.getlist("Set-Cookie")
    assert any(c.startswith("AccessToken=Bearer%20") for c in set_cookies)
    assert any(c.startswith("RefreshToken=Bearer%20") for c in set_cookies)
    assert all("HttpOnly" in c for c in set_cookies)
    assert unquote(client.get_cookie("AccessToken").value).startswith("Bearer ")


def test_signup_validation_error_envelope(client):
    resp = client.post(f"{API}/signup", json={"email": "not-an-email", "password": "x"})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["code"] == "validation_error"
    assert body["statusCode"] == 400
    assert set(body["details"]["errors"]) >= {"email", "password", "name"}


def test_duplicate_signup(client, member):
    resp = client.post(
        f"{API}/signup", json={"email": member.email, "password": "longenough", "name": "Dup"}
    )
    assert resp.status_code == 400
    assert resp.get_json()["code"] == "duplicate_account"


@pytest.mark.parametrize(
    ("email", "password", "status", "code"),
    [
        ("ghost@example.com", DEFAULT_PASSWORD, 404, "user_not_found"),
        ("member@example.com", "wrong-password", 401, "bad_credentials"),
    ],
)
def test_login_failures(client, member, email, password, status, code):
    resp = _login(client, email, password)
    assert resp.status_code == status
    assert resp.get_json()["code"] == code
    assert client.get_cookie("AccessToken") is None


def test_protected_route_without_cookies(client):
    resp = client.get(f"{API}/me")

    assert resp.status_code == 401
    body = resp.get_json()
    assert body["code"] == "not_logged_in"
    assert body["message"]
    assert body["request_id"]


def test_me_with_session(client, member):
    _login(client, member.email)

    resp = client.get(f"{API}/me")

    assert resp.status_code == 200
    assert resp.get_json()["data"]["email"] == member.email


def test_tokens_in_headers_are_accepted(app, client, member):
    _login(client, member.email)
    access = unquote(client.get_cookie("AccessToken").value)
    refresh = unquote(client.get_cookie("RefreshToken").value)

    bare = app.test_client(use_cookies=False)
    resp = bare.get(f"{API}/me", headers={"AccessToken": access, "RefreshToken": refresh})

    assert resp.status_code == 200


def test_token_without_scheme_marker_is_malformed(app, client, member):
    _login(client, member.email)
    access = unquote(client.get_cookie("AccessToken").value).removeprefix("Bearer ")
    refresh = unquote(client.get_cookie("RefreshToken").value)

    bare = app.test_client(use_cookies=False)
    resp = bare.get(f"{API}/me", headers={"AccessToken": access, "RefreshToken": refresh})

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "malformed_token"


def test_expired_access_token_then_reissue(client, member):
    """
    GIVEN a session opened at T
    WHEN a protected route is called at T+31min
    THEN it fails with expired_access_token, /reissue mints a new access
    token, and the protected route works again
    """
    with freeze_time("2026-05-01 09:00:00") as frozen:
        _login(client, member.email)
        old_access = client.get_cookie("AccessToken").value

        frozen.tick(timedelta(minutes=31))
        resp = client.get(f"{API}/me")
        assert resp.status_code == 401
        assert resp.get_json()["code"] == "expired_access_token"

        resp = client.get(f"{API}/reissue")
        assert resp.status_code == 200
        assert client.get_cookie("AccessToken").value != old_access

        assert client.get(f"{API}/me").status_code == 200


def test_session_cookies_have_no_lifetime(client, member):
    """
    GIVEN a login and a reissue
    WHEN their Set-Cookie headers are inspected
    THEN neither token cookie carries Max-Age or Expires, so a browser keeps
    presenting an expired token until the server classifies it
    """
    resp = _login(client, member.email)
    set_cookies = resp.headers.getlist("Set-Cookie")
    assert len(set_cookies) == 2

    resp = client.get(f"{API}/reissue")
    set_cookies += resp.headers.getlist("Set-Cookie")

    for header in set_cookies:
        attributes = {part.split("=", 1)[0].strip().lower() for part in header.split(";")[1:]}
        assert "max-age" not in attributes
        assert "expires" not in attributes


def _drop_expired_cookies(client, resp, elapsed):
    """Forget cookies whose Max-Age has run out after ``elapsed``, as a browser would."""
    for header in resp.headers.getlist("Set-Cookie"):
        name = header.split("=", 1)[0]
        for part in header.split(";")[1:]:
            key, _, value = part.strip().partition("=")
            if key.lower() == "max-age" and int(value) <= elapsed.total_seconds():
                client.delete_cookie(name)


def test_expired_access_token_is_still_presented_after_ttl(client, member):
    """
    GIVEN a session opened at T in a client that honours cookie lifetimes
    WHEN /me is called at T+31min
    THEN the access token still reaches the gate and is classified as expired,
    and /reissue recovers the session
    """
    with freeze_time("2026-05-01 09:00:00") as frozen:
        resp = _login(client, member.email)

        elapsed = timedelta(minutes=31)
        frozen.tick(elapsed)
        _drop_expired_cookies(client, resp, elapsed)
        assert client.get_cookie("AccessToken") is not None

        resp = client.get(f"{API}/me")
        assert resp.get_json()["code"] == "expired_access_token"
        assert client.get(f"{API}/reissue").status_code == 200


def test_expired_refresh_token_requires_new_login(client, member):
    with freeze_time("2026-05-01 09:00:00") as frozen:
        _login(client, member.email)
        frozen.tick(timedelta(days=15))

        for path in ("/me", "/reissue"):
            resp = client.get(f"{API}{path}")
            assert resp.status_code == 401
            assert resp.get_json()["code"] == "expired_refresh_token"


def test_logout_clears_cookies_and_revokes_refresh(app, client, member):
    _login(client, member.email)
    access = unquote(client.get_cookie("AccessToken").value)
    refresh = unquote(client.get_cookie("RefreshToken").value)

    resp = client.get(f"{API}/logout")
    assert resp.status_code == 200
    assert client.get_cookie("AccessToken") is None
    assert client.get_cookie("RefreshToken") is None

    replay = app.test_client(use_cookies=False)
    resp = replay.get(f"{API}/reissue", headers={"AccessToken": access, "RefreshToken": refresh})
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "not_logged_in"


def test_new_login_supersedes_previous_session(app, client, member):
    _login(client, member.email)
    first_refresh = unquote(client.get_cookie("RefreshToken").value)
    first_access = unquote(client.get_cookie("AccessToken").value)

    other_device = app.test_client()
    assert _login(other_device, member.email).status_code == 200

    stale = app.test_client(use_cookies=False)
    resp = stale.get(
        f"{API}/reissue", headers={"AccessToken": first_access, "RefreshToken": first_refresh}
    )
    assert resp.status_code == 401


def test_resign_ends_session_and_blocks_login(client, member):
    _login(client, member.email)

    resp = client.put(f"{API}/resign", json={"password": DEFAULT_PASSWORD})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "RESIGNED"
    assert client.get_cookie("AccessToken") is None

    resp = _login(client, member.email)
    assert resp.status_code == 401
    assert resp.get_json()["code"] == "resigned_account"


def test_unknown_route_is_404_not_401(client):
    resp = client.get("/api/v1/nowhere")
    assert resp.status_code == 404
    assert resp.get_json()["code"] == "not_found"


def test_preflight_passes_the_gate(client):
    resp = client.options("/api/v1/posts", headers={"Origin": "http://localhost:3000"})
    assert resp.status_code in (200, 204)
