# Models package init; importing it registers every table on Base.metadata
from blogapi.models.user import User
from blogapi.models.post import Post
from blogapi.models.comment import Comment
from blogapi.models.like import Like

__all__ = ["User", "Post", "Comment", "Like"]
