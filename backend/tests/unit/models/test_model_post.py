"""Unit tests for Post, Like and Comment models."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from plantbook.models.engagement import Like
from tests.factories.post import CommentFactory, LikeFactory, PostFactory
from tests.factories.user import UserFactory


class TestPostModel:
    def test_counters_start_at_zero(self, session):
        post = PostFactory()
        assert post.likes_count == 0
        assert post.comments_count == 0
        assert post.is_published is True

    def test_tags_round_trip_as_json(self, session):
        post = PostFactory(tags=["succulent", "sun"])
        session.expire(post)
        assert post.tags == ["succulent", "sun"]

    def test_author_relationship(self, session):
        author = UserFactory(display_name="Rose")
        post = PostFactory(author=author)
        assert post.author.display_name == "Rose"

    def test_negative_counter_rejected(self, session):
        post = PostFactory()
        post.likes_count = -1
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()


class TestEngagementModels:
    def test_like_is_unique_per_post_and_user(self, session):
        post = PostFactory()
        user = UserFactory()
        LikeFactory(post_id=post.id, user_id=user.id)
        with pytest.raises(IntegrityError) as excinfo:
            session.add(Like(post_id=post.id, user_id=user.id))
            session.flush()
        assert "likes" in str(excinfo.value.orig).lower()
        session.rollback()

    def test_comment_author(self, session):
        user = UserFactory(display_name="Basil")
        comment = CommentFactory(user_id=user.id)
        session.expire(comment)
        assert comment.author.display_name == "Basil"
