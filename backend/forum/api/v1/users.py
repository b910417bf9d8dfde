"""Account and session endpoints."""

from __future__ import annotations

from flask import Blueprint, current_app, g, request

from forum.api.deps import (
    authenticated,
    clear_session_cookies,
    context_for,
    json_response,
    session_service,
    set_session_cookies,
    timing,
    token_config,
)
from forum.core.extensions import limiter
from forum.schemas import (
    LoginSchema,
    PrincipalSchema,
    ProfileSchema,
    ProfileUpdateSchema,
    ResignSchema,
    SignupSchema,
)
from forum.services.accounts import AccountService, ResignIn, SignupIn
from forum.services.profile import ProfileService, ProfileUpdateIn
from forum.services.session import Identity, LoginIn

bp = Blueprint("users", __name__)

signup_schema = SignupSchema()
login_schema = LoginSchema()
resign_schema = ResignSchema()
principal_schema = PrincipalSchema()
profile_schema = ProfileSchema()
profile_update_schema = ProfileUpdateSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "10 per minute"))


def _session_body() -> dict:
    ttl = token_config()
    return {
        "data": {
            "token_type": "Bearer",
            "access_expires_in": int(ttl.access_ttl.total_seconds()),
        }
    }


@bp.post("/signup")
@timing
def signup():
    """Register a new account (role USER)."""

    data = signup_schema.load(request.get_json(silent=True) or {})
    principal = AccountService().signup(SignupIn(**data))
    return json_response({"data": principal_schema.dump(principal)}, status=201)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Check credentials and deliver both session tokens as cookies."""

    data = login_schema.load(request.get_json(silent=True) or {})
    pair = session_service().login(LoginIn(email=data["email"], password=data["password"]))
    response = json_response(_session_body())
    set_session_cookies(response, access=pair.access_token, refresh=pair.refresh_token)
    return response


@bp.get("/reissue")
@authenticated
@timing
def reissue(identity: Identity):
    """Deliver the access token the gate minted from the refresh token."""

    response = json_response(_session_body())
    set_session_cookies(response, access=g.session_outcome.reissued_access)
    return response


@bp.get("/logout")
@authenticated
@timing
def logout(identity: Identity):
    """Revoke the stored refresh token and clear both cookies."""

    session_service(context_for(identity)).logout()
    response = json_response({"data": {"logged_out": True}})
    clear_session_cookies(response)
    return response


@bp.get("/me")
@authenticated
@timing
def me(identity: Identity):
    principal = AccountService(ctx=context_for(identity)).get_principal()
    return json_response({"data": principal_schema.dump(principal)})


@bp.put("/resign")
@authenticated
@timing
def resign(identity: Identity):
    """Resign the caller's account for good and end the session."""

    data = resign_schema.load(request.get_json(silent=True) or {})
    principal = AccountService(ctx=context_for(identity)).resign(ResignIn(**data))
    response = json_response({"data": principal_schema.dump(principal)})
    clear_session_cookies(response)
    return response


@bp.get("/profile")
@authenticated
@timing
def get_profile(identity: Identity):
    """Own profile with the number of liked posts and comments."""

    profile = ProfileService(ctx=context_for(identity)).get_profile()
    return json_response({"data": profile_schema.dump(profile)})


@bp.put("/profile")
@authenticated
@timing
def update_profile(identity: Identity):
    """Change name and/or password; the current password is required."""

    data = profile_update_schema.load(request.get_json(silent=True) or {})
    profile = ProfileService(ctx=context_for(identity)).update_profile(ProfileUpdateIn(**data))
    return json_response({"data": profile_schema.dump(profile)})
