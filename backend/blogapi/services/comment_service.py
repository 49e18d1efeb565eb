"""
Blog API — Comment Service
===========================

What:  CRUD for comments on posts.
Rules: the target post must exist on create (NOT_FOUND otherwise); only the
       comment's author may edit or delete it.
"""

import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.models.comment import Comment
from blogapi.models.post import Post
from blogapi.models.user import User
from blogapi.results import Result
from blogapi.schemas.content import CommentResponse
from blogapi.services.repository import Repository

logger = logging.getLogger(__name__)


class CommentService:

    def __init__(self):
        self.comments: Repository[Comment] = Repository(Comment)
        self.posts: Repository[Post] = Repository(Post)
        self.users: Repository[User] = Repository(User)

    async def list_comments(
        self, db: AsyncSession, post_id: Optional[int] = None
    ) -> Result[List[CommentResponse]]:
        filters = {"post_id": post_id} if post_id is not None else {}
        comments = await self.comments.list(db, **filters)
        return Result.success([CommentResponse.model_validate(c) for c in comments])

    async def get_comment(self, db: AsyncSession, comment_id: int) -> Result[CommentResponse]:
        comment = await self.comments.get(db, comment_id)
        if comment is None:
            return Result.not_found("Comment")
        return Result.success(CommentResponse.model_validate(comment))

    async def create_comment(
        self, db: AsyncSession, author_id: int, post_id: int, content: str
    ) -> Result[CommentResponse]:
        if await self.users.get(db, author_id) is None:
            return Result.unauthorized()
        if await self.posts.get(db, post_id) is None:
            return Result.not_found("Post")

        comment = await self.comments.create(
            db, {"post_id": post_id, "user_id": author_id, "content": content}
        )
        logger.info("Comment created: id=%s on post id=%s", comment.id, post_id)
        return Result.success(CommentResponse.model_validate(comment))

    async def update_comment(
        self, db: AsyncSession, comment_id: int, content: str, acting_user_id: int
    ) -> Result[CommentResponse]:
        comment = await self.comments.get(db, comment_id)
        if comment is None or comment.user_id != acting_user_id:
            return Result.not_found("Comment")

        comment = await self.comments.update(db, comment_id, {"content": content})
        return Result.success(CommentResponse.model_validate(comment))

    async def delete_comment(
        self, db: AsyncSession, comment_id: int, acting_user_id: int
    ) -> Result[CommentResponse]:
        comment = await self.comments.get(db, comment_id)
        if comment is None or comment.user_id != acting_user_id:
            return Result.not_found("Comment")

        shaped = CommentResponse.model_validate(comment)
        await self.comments.delete(db, comment_id)
        return Result.success(shaped)


comment_service = CommentService()
