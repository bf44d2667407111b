"""Unit tests for the User model."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from plantbook.models.user import User
from tests.factories.user import ExternalUserFactory, UserFactory


class TestUserModel:
    def test_email_is_normalized(self, session):
        user = UserFactory(email="  Fern@Example.COM ")
        assert user.email == "fern@example.com"

    @pytest.mark.parametrize("email", ["", "no-at-sign", "a@nodot"])
    def test_rejects_malformed_email(self, email):
        with pytest.raises(ValueError):
            User(email=email, display_name="X")

    def test_display_name_is_trimmed_and_required(self):
        assert User(email="a@b.co", display_name="  Ivy ").display_name == "Ivy"
        with pytest.raises(ValueError):
            User(email="a@b.co", display_name="   ")

    def test_password_is_hashed_and_write_only(self, session):
        user = UserFactory(password="s3cret-pw")
        assert user.password_hash and user.password_hash != "s3cret-pw"
        assert user.verify_password("s3cret-pw")
        assert not user.verify_password("wrong")
        with pytest.raises(AttributeError):
            _ = user.password

    def test_short_password_rejected(self):
        user = User(email="a@b.co", display_name="A")
        with pytest.raises(ValueError, match="at least"):
            user.password = "123"

    def test_external_account_has_no_password(self, session):
        user = ExternalUserFactory()
        assert user.has_password is False
        assert user.verify_password("anything") is False

    def test_email_unique_constraint(self, session):
        UserFactory(email="dup@example.com")
        with pytest.raises(IntegrityError):
            UserFactory(email="DUP@example.com")
        session.rollback()

    def test_defaults(self, session):
        user = UserFactory()
        assert user.is_active is True
        assert user.avatar_url is None
        assert user.created_at is not None
