from postboard.models.comment import Comment
from postboard.models.post import Post
from postboard.models.refresh_token import RefreshToken
from postboard.models.user import User

__all__ = [
    "Comment",
    "Post",
    "RefreshToken",
    "User",
]
