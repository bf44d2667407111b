"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint

from plantbook.api.deps import (
    auth_service,
    json_body,
    json_response,
    require_auth,
    timing,
)
from plantbook.schemas import (
    AuthResponseSchema,
    LoginSchema,
    LogoutSchema,
    OAuthCallbackSchema,
    RefreshSchema,
    RegisterSchema,
    SessionSchema,
    TokenPairSchema,
)
from plantbook.services.auth.dto import AuthOut, Identity, LoginIn, RefreshIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
logout_schema = LogoutSchema()
oauth_schema = OAuthCallbackSchema()
auth_response_schema = AuthResponseSchema()
token_schema = TokenPairSchema()
session_list_schema = SessionSchema(many=True)


def _auth_body(result: AuthOut) -> dict:
    return auth_response_schema.dump(
        {
            "user": result.user,
            "access_token": result.tokens.access_token,
            "refresh_token": result.tokens.refresh_token,
        }
    )


@bp.post("/register")
@timing
def register():
    """Create an account and return the user with a fresh token pair."""

    data = register_schema.load(json_body())
    result = auth_service().register(RegisterIn(**data))
    return json_response(_auth_body(result), status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    data = login_schema.load(json_body())
    result = auth_service().login(LoginIn(**data))
    return json_response(_auth_body(result))


@bp.post("/refresh")
@timing
def refresh():
    """Rotate a refresh token: the old one stops working, a new pair is returned."""

    data = refresh_schema.load(json_body())
    pair = auth_service().refresh(RefreshIn(**data))
    return json_response(token_schema.dump(pair))


@bp.post("/logout")
@require_auth
@timing
def logout(identity: Identity):
    """Revoke the supplied refresh token's session. Idempotent."""

    data = logout_schema.load(json_body())
    auth_service().logout(identity.user_id, data.get("refresh_token"))
    return json_response({"message": "Logged out"})


@bp.post("/logout-all")
@require_auth
@timing
def logout_all(identity: Identity):
    """Revoke every refresh session of the caller."""

    revoked = auth_service().logout_all(identity.user_id)
    return json_response({"message": "Logged out from all devices", "revoked": revoked})


@bp.get("/sessions")
@require_auth
@timing
def sessions(identity: Identity):
    """List the caller's live refresh sessions."""

    items = auth_service().sessions(identity.user_id)
    return json_response({"data": session_list_schema.dump(items)})


@bp.post("/oauth/<string:provider>")
@timing
def oauth_login(provider: str):
    """Sign in with an external identity provider's one-time code."""

    data = oauth_schema.load(json_body())
    result = auth_service().login_with_provider(provider, data["code"])
    return json_response(_auth_body(result))
