"""Unit tests for AuthService against the transactional database."""

from __future__ import annotations

import pytest

from plantbook.models.user import User
from plantbook.services._shared.base import ServiceContext
from plantbook.services._shared.errors import (
    AccountDisabledError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationFailedError,
)
from plantbook.services._shared.ports import ExternalIdentity, StaticIdentityProvider
from plantbook.services.auth.dto import LoginIn, RefreshIn, RegisterIn
from plantbook.services.auth.service import INVALID_CREDENTIALS, INVALID_REFRESH, AuthService
from tests.factories.user import ExternalUserFactory, UserFactory


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def providers():
    return {
        "garden": StaticIdentityProvider(
            "garden",
            {
                "code-new": ExternalIdentity(
                    email="new.oauth@example.com", display_name="Oak", avatar_url="https://cdn/oak.png"
                ),
                "code-existing": ExternalIdentity(
                    email="existing@example.com", display_name="Ignored", avatar_url="https://cdn/e.png"
                ),
            },
        )
    }


@pytest.fixture()
def service(tokens, providers) -> AuthService:
    """AuthService wired to the stub token provider and in-memory session store."""
    return AuthService(tokens=tokens, providers=providers, ctx=ServiceContext(device="pytest"))


# ------------------------------ Register ---------------------------------- #
class TestRegister:
    def test_register_creates_user_and_session(self, service, refresh_store, db):
        out = service.register(
            RegisterIn(email="New@Example.com", password="secret123", display_name="Newbie")
        )

        assert out.user.email == "new@example.com"
        assert out.user.has_password is True
        stored = db.session.get(User, out.user.id)
        assert stored.verify_password("secret123")
        sessions = refresh_store.sessions(out.user.id)
        assert [s.device for s in sessions] == ["pytest"]

    def test_duplicate_email_conflicts(self, service, session):
        UserFactory(email="dup@example.com")
        session.commit()

        with pytest.raises(ConflictError):
            service.register(
                RegisterIn(email="DUP@example.com", password="secret123", display_name="Dup")
            )

    def test_weak_password_rejected(self, service):
        with pytest.raises(ValidationFailedError):
            service.register(RegisterIn(email="w@example.com", password="123", display_name="W"))


# -------------------------------- Login ----------------------------------- #
class TestLogin:
    def test_login_issues_pair(self, service, session, tokens):
        user = UserFactory(email="a@example.com")
        session.commit()

        out = service.login(LoginIn(email="a@example.com", password="Passw0rd!"))

        assert out.user.id == user.id
        assert tokens.verify_access(out.tokens.access_token).user_id == user.id

    @pytest.mark.parametrize(
        "email,password",
        [("a@example.com", "wrong-pass"), ("missing@example.com", "Passw0rd!")],
    )
    def test_bad_credentials_share_one_message(self, service, session, email, password):
        UserFactory(email="a@example.com")
        session.commit()

        with pytest.raises(AuthenticationError) as excinfo:
            service.login(LoginIn(email=email, password=password))
        assert str(excinfo.value) == INVALID_CREDENTIALS

    def test_passwordless_account_cannot_log_in(self, service, session):
        ExternalUserFactory(email="oauth@example.com")
        session.commit()

        with pytest.raises(AuthenticationError):
            service.login(LoginIn(email="oauth@example.com", password="anything"))

    def test_deactivated_account(self, service, session):
        UserFactory(email="off@example.com", is_active=False)
        session.commit()

        with pytest.raises(AccountDisabledError):
            service.login(LoginIn(email="off@example.com", password="Passw0rd!"))
        with pytest.raises(AuthenticationError):
            service.login(LoginIn(email="off@example.com", password="nope-nope"))


# ------------------------------- Refresh ---------------------------------- #
class TestRefresh:
    def test_refresh_rotates_and_blocks_reuse(self, service, session):
        UserFactory(email="r@example.com")
        session.commit()
        pair1 = service.login(LoginIn(email="r@example.com", password="Passw0rd!")).tokens

        pair2 = service.refresh(RefreshIn(refresh_token=pair1.refresh_token))
        assert pair2.refresh_token != pair1.refresh_token

        with pytest.raises(AuthenticationError) as excinfo:
            service.refresh(RefreshIn(refresh_token=pair1.refresh_token))
        assert str(excinfo.value) == INVALID_REFRESH

    def test_refresh_rejected_for_deactivated_user(self, service, session, db):
        user = UserFactory(email="gone@example.com")
        session.commit()
        pair = service.login(LoginIn(email="gone@example.com", password="Passw0rd!")).tokens

        user.is_active = False
        session.commit()

        with pytest.raises(AuthenticationError) as excinfo:
            service.refresh(RefreshIn(refresh_token=pair.refresh_token))
        assert str(excinfo.value) == INVALID_REFRESH

    def test_access_token_cannot_refresh(self, service, session):
        UserFactory(email="x@example.com")
        session.commit()
        pair = service.login(LoginIn(email="x@example.com", password="Passw0rd!")).tokens

        with pytest.raises(AuthenticationError):
            service.refresh(RefreshIn(refresh_token=pair.access_token))

    def test_garbage_token(self, service):
        with pytest.raises(AuthenticationError):
            service.refresh(RefreshIn(refresh_token="not-a-token"))


# ------------------------------- Logout ----------------------------------- #
class TestLogout:
    def test_logout_revokes_only_that_session(self, service, session, tokens):
        user = UserFactory(email="l@example.com")
        session.commit()
        first = service.login(LoginIn(email="l@example.com", password="Passw0rd!")).tokens
        second = service.login(LoginIn(email="l@example.com", password="Passw0rd!")).tokens

        assert service.logout(user.id, first.refresh_token) is True
        assert service.logout(user.id, first.refresh_token) is False
        assert service.logout(user.id) is False
        assert tokens.is_refresh_active(user.id, second.refresh_token)

    def test_logout_all_and_sessions(self, service, session):
        user = UserFactory(email="m@example.com")
        session.commit()
        for _ in range(2):
            service.login(LoginIn(email="m@example.com", password="Passw0rd!"))

        listed = service.sessions(user.id)
        assert len(listed) == 2
        assert all(s.device == "pytest" for s in listed)

        assert service.logout_all(user.id) == 2
        assert service.sessions(user.id) == []


# --------------------------- External identity ---------------------------- #
class TestExternalIdentity:
    def test_new_identity_creates_passwordless_user(self, service, db):
        out = service.login_with_provider("garden", "code-new")

        assert out.user.email == "new.oauth@example.com"
        assert out.user.display_name == "Oak"
        assert out.user.has_password is False
        assert out.user.avatar_url == "https://cdn/oak.png"

    def test_existing_account_is_linked_and_avatar_filled(self, service, session):
        user = UserFactory(email="existing@example.com", display_name="Elm")
        session.commit()

        out = service.login_with_provider("garden", "code-existing")

        assert out.user.id == user.id
        assert out.user.display_name == "Elm"
        assert out.user.avatar_url == "https://cdn/e.png"

    def test_unknown_provider_and_bad_code(self, service):
        with pytest.raises(NotFoundError):
            service.login_with_provider("nope", "code-new")
        with pytest.raises(AuthenticationError):
            service.login_with_provider("garden", "bad-code")

    def test_deactivated_account_refused(self, service, session):
        UserFactory(email="existing@example.com", is_active=False)
        session.commit()

        with pytest.raises(AccountDisabledError):
            service.login_with_provider("garden", "code-existing")
