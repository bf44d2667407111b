"""Unit tests for LikeRepository and CommentRepository."""

from __future__ import annotations

from plantbook.repositories.base import Pagination
from plantbook.repositories.engagement import CommentRepository, LikeRepository
from tests.factories.post import CommentFactory, LikeFactory, PostFactory
from tests.factories.user import UserFactory


class TestLikeRepository:
    def test_liked_post_ids_subset(self, session):
        repo = LikeRepository(session=session)
        user = UserFactory()
        a, b, c = PostFactory(), PostFactory(), PostFactory()
        LikeFactory(post_id=a.id, user_id=user.id)
        LikeFactory(post_id=c.id, user_id=user.id)

        assert repo.liked_post_ids(user.id, [a.id, b.id, c.id]) == {a.id, c.id}
        assert repo.liked_post_ids(user.id, []) == set()

    def test_delete_where_reports_rows(self, session):
        repo = LikeRepository(session=session)
        like = LikeFactory()

        assert repo.delete_where(post_id=like.post_id, user_id=like.user_id) == 1
        assert repo.delete_where(post_id=like.post_id, user_id=like.user_id) == 0

    def test_liked_posts_pages(self, session):
        repo = LikeRepository(session=session)
        user = UserFactory()
        posts = [PostFactory() for _ in range(3)]
        for p in posts:
            LikeFactory(post_id=p.id, user_id=user.id)

        page = repo.liked_posts(user.id, Pagination(page=1, limit=2, sort=[]))
        assert page.total == 3
        assert len(page.items) == 2


class TestCommentRepository:
    def test_for_post_only_returns_that_post(self, session):
        repo = CommentRepository(session=session)
        post, other = PostFactory(), PostFactory()
        CommentFactory(post_id=post.id)
        CommentFactory(post_id=post.id)
        CommentFactory(post_id=other.id)

        page = repo.for_post(post.id, Pagination(page=1, limit=10, sort=[]))
        assert page.total == 2
        assert {c.post_id for c in page.items} == {post.id}
