from forum.models.comment import Comment, CommentLike
from forum.models.password_history import PasswordHistory
from forum.models.post import Post, PostLike
from forum.models.user import Role, User, UserStatus

__all__ = [
    "Comment",
    "CommentLike",
    "PasswordHistory",
    "Post",
    "PostLike",
    "Role",
    "User",
    "UserStatus",
]
