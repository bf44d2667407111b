from plantbook.models.engagement import Comment, Like
from plantbook.models.post import Post
from plantbook.models.refresh_session import RefreshSession
from plantbook.models.user import User

__all__ = [
    "Comment",
    "Like",
    "Post",
    "RefreshSession",
    "User",
]
