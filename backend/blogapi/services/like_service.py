"""
Blog API — Like Service
========================

What:  Likes on posts. A user likes a given post at most once; a second like
       is a CONFLICT. Likes have no content, so there is no update operation.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.models.like import Like
from blogapi.models.post import Post
from blogapi.models.user import User
from blogapi.results import Result
from blogapi.schemas.content import LikeResponse
from blogapi.services.repository import Repository

logger = logging.getLogger(__name__)

ALREADY_LIKED = "Post is already liked by this user"


class LikeService:

    def __init__(self):
        self.likes: Repository[Like] = Repository(Like)
        self.posts: Repository[Post] = Repository(Post)
        self.users: Repository[User] = Repository(User)

    async def list_likes(
        self, db: AsyncSession, post_id: Optional[int] = None
    ) -> Result[List[LikeResponse]]:
        filters = {"post_id": post_id} if post_id is not None else {}
        likes = await self.likes.list(db, **filters)
        return Result.success([LikeResponse.model_validate(like) for like in likes])

    async def get_like(self, db: AsyncSession, like_id: int) -> Result[LikeResponse]:
        like = await self.likes.get(db, like_id)
        if like is None:
            return Result.not_found("Like")
        return Result.success(LikeResponse.model_validate(like))

    async def create_like(
        self, db: AsyncSession, user_id: int, post_id: int
    ) -> Result[LikeResponse]:
        if await self.users.get(db, user_id) is None:
            return Result.unauthorized()
        if await self.posts.get(db, post_id) is None:
            return Result.not_found("Post")
        if await self.likes.find_one_by(db, post_id=post_id, user_id=user_id) is not None:
            return Result.conflict(ALREADY_LIKED)

        try:
            like = await self.likes.create(db, {"post_id": post_id, "user_id": user_id})
        except IntegrityError:
            # Only a concurrent duplicate is a conflict; any other violation propagates
            await db.rollback()
            if await self.likes.find_one_by(db, post_id=post_id, user_id=user_id) is None:
                raise
            return Result.conflict(ALREADY_LIKED)

        logger.info("Like created: id=%s on post id=%s", like.id, post_id)
        return Result.success(LikeResponse.model_validate(like))

    async def delete_like(
        self, db: AsyncSession, like_id: int, acting_user_id: int
    ) -> Result[LikeResponse]:
        like = await self.likes.get(db, like_id)
        if like is None or like.user_id != acting_user_id:
            return Result.not_found("Like")

        shaped = LikeResponse.model_validate(like)
        await self.likes.delete(db, like_id)
        return Result.success(shaped)


like_service = LikeService()
