"""
Blog API — Post Service
========================

What:  CRUD for posts. The author is always the authenticated user; a post
       can only be changed or removed by its author (others get NOT_FOUND).
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.models.post import Post
from blogapi.models.user import User
from blogapi.results import Result
from blogapi.schemas.content import PostResponse
from blogapi.services.repository import Repository

logger = logging.getLogger(__name__)


class PostService:

    def __init__(self):
        self.posts: Repository[Post] = Repository(Post)
        self.users: Repository[User] = Repository(User)

    async def list_posts(
        self, db: AsyncSession, user_id: Optional[int] = None
    ) -> Result[List[PostResponse]]:
        filters = {"user_id": user_id} if user_id is not None else {}
        posts = await self.posts.list(db, **filters)
        return Result.success([PostResponse.model_validate(p) for p in posts])

    async def get_post(self, db: AsyncSession, post_id: int) -> Result[PostResponse]:
        post = await self.posts.get(db, post_id)
        if post is None:
            return Result.not_found("Post")
        return Result.success(PostResponse.model_validate(post))

    async def create_post(
        self, db: AsyncSession, author_id: int, title: str, content: str
    ) -> Result[PostResponse]:
        # Tokens outlive deleted accounts
        if await self.users.get(db, author_id) is None:
            return Result.unauthorized()

        post = await self.posts.create(
            db, {"user_id": author_id, "title": title.strip(), "content": content}
        )
        logger.info("Post created: id=%s by user id=%s", post.id, author_id)
        return Result.success(PostResponse.model_validate(post))

    async def update_post(
        self, db: AsyncSession, post_id: int, changes: Mapping[str, Any], acting_user_id: int
    ) -> Result[PostResponse]:
        post = await self.posts.get(db, post_id)
        if post is None or post.user_id != acting_user_id:
            return Result.not_found("Post")

        values: Dict[str, Any] = {}
        if changes.get("title") is not None:
            values["title"] = changes["title"].strip()
        if changes.get("content") is not None:
            values["content"] = changes["content"]

        post = await self.posts.update(db, post_id, values)
        return Result.success(PostResponse.model_validate(post))

    async def delete_post(
        self, db: AsyncSession, post_id: int, acting_user_id: int
    ) -> Result[PostResponse]:
        post = await self.posts.get(db, post_id)
        if post is None or post.user_id != acting_user_id:
            return Result.not_found("Post")

        shaped = PostResponse.model_validate(post)
        await self.posts.delete(db, post_id)
        logger.info("Post deleted: id=%s", post_id)
        return Result.success(shaped)


post_service = PostService()
