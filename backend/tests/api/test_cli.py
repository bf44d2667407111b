"""Tests for the Flask CLI command groups."""

from __future__ import annotations

import pytest

from plantbook.models.post import Post
from tests.factories.post import CommentFactory, LikeFactory, PostFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


class TestRecount:
    def test_all_consistent(self, runner, session):
        PostFactory()
        session.commit()

        result = runner.invoke(args=["engagement", "recount"])

        assert result.exit_code == 0
        assert "All counters consistent." in result.output

    def test_repairs_drift(self, runner, session):
        post = PostFactory(likes_count=5)
        LikeFactory(post_id=post.id)
        CommentFactory(post_id=post.id)
        session.commit()

        result = runner.invoke(args=["engagement", "recount"])

        assert result.exit_code == 0
        assert f"post {post.id}: likes 5 -> 1, comments 0 -> 1" in result.output
        session.expire_all()
        stored = session.get(Post, post.id)
        assert (stored.likes_count, stored.comments_count) == (1, 1)

    def test_single_post(self, runner, session):
        post = PostFactory()
        session.commit()

        result = runner.invoke(args=["engagement", "recount", "--post-id", str(post.id)])

        assert result.exit_code == 0
        assert "already consistent" in result.output

    def test_unknown_post(self, runner):
        result = runner.invoke(args=["engagement", "recount", "--post-id", "999999"])
        assert result.exit_code != 0
        assert "999999" in result.output


class TestUsers:
    def test_sessions_and_deactivate(self, runner, client, register):
        user_id = register()["user"]["id"]

        listed = runner.invoke(args=["users", "sessions", str(user_id)])
        assert listed.exit_code == 0
        assert "issued=" in listed.output

        result = runner.invoke(args=["users", "deactivate", str(user_id)], input="y\n")
        assert result.exit_code == 0
        assert "1 session(s) revoked" in result.output

        empty = runner.invoke(args=["users", "sessions", str(user_id)])
        assert "(no sessions)" in empty.output

    def test_deactivate_aborts_without_confirmation(self, runner, session):
        user = UserFactory()
        session.commit()

        result = runner.invoke(args=["users", "deactivate", str(user.id)], input="n\n")
        assert result.exit_code != 0

    def test_deactivate_unknown(self, runner):
        result = runner.invoke(args=["users", "deactivate", "999999", "--yes"])
        assert result.exit_code != 0
