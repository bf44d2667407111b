"""Factory Boy definitions for posts and their engagement rows."""

from __future__ import annotations

import factory

from plantbook.models.engagement import Comment, Like
from plantbook.models.post import Post
from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class PostFactory(BaseFactory):
    """Build persisted :class:`Post` rows with zeroed counters."""

    class Meta:
        model = Post

    id = None
    author = factory.SubFactory(UserFactory)
    author_id = factory.SelfAttribute("author.id")
    title = factory.Sequence(lambda n: f"Monstera update #{n}")
    content = factory.Faker("paragraph", nb_sentences=2)
    plant_name = "Monstera deliciosa"
    tags = factory.LazyFunction(lambda: ["aroid", "indoor"])
    image_url = None
    is_published = True
    likes_count = 0
    comments_count = 0


class LikeFactory(BaseFactory):
    """Build a raw :class:`Like` row.

    The post counter is NOT touched; tests use this to create drift.
    """

    class Meta:
        model = Like

    id = None
    post_id = factory.LazyFunction(lambda: PostFactory().id)
    user_id = factory.LazyFunction(lambda: UserFactory().id)


class CommentFactory(BaseFactory):
    """Build a raw :class:`Comment` row without touching counters."""

    class Meta:
        model = Comment

    id = None
    post_id = factory.LazyFunction(lambda: PostFactory().id)
    user_id = factory.LazyFunction(lambda: UserFactory().id)
    text = factory.Faker("sentence")
