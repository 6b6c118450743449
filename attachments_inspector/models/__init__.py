from .post import Post, PostMeta, PostStatus
from .user import Role, User

__all__ = [
    "Post",
    "PostMeta",
    "PostStatus",
    "Role",
    "User",
]
