"""
Blog API — Post Route Handlers
===============================

What:  /api/posts CRUD. Reads are public; writes need a token, and the author
       is always the token's user, never a field of the body.

    GET    /api/posts?user_id=   public
    GET    /api/posts/{id}       public
    POST   /api/posts            token
    PUT    /api/posts/{id}       token (author only)
    DELETE /api/posts/{id}       token (author only)
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request
from starlette.responses import Response

from blogapi.database import get_db_session
from blogapi.middleware.auth import AuthorizationStage
from blogapi.pipeline import RequestContext, dispatch, parse_json_body, validate_with
from blogapi.schemas.common import Envelope, ErrorResponse
from blogapi.services.post_service import post_service
from blogapi.services.token_service import TokenService, get_token_service
from blogapi.validation.rulesets import ID_PARAM, POST_CREATE, POST_LIST, POST_UPDATE

router = APIRouter(prefix="/api/posts", tags=["Posts"])

ID_DESCRIPTION = "Post ID (positive integer)"


@router.get(
    "",
    responses={
        200: {"description": "Posts, oldest first", "model": Envelope},
        422: {"description": "Invalid user_id filter", "model": ErrorResponse},
    },
    summary="List posts",
)
async def list_posts(
    request: Request,
    user_id: str | None = Query(default=None, description="Only posts by this author"),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    async def action(ctx: RequestContext):
        author = ctx.query.get("user_id")
        return await post_service.list_posts(db, user_id=int(author) if author else None)

    return await dispatch(request, [validate_with(POST_LIST)], action)


@router.get(
    "/{id}",
    responses={
        200: {"description": "Post detail", "model": Envelope},
        404: {"description": "Post not found", "model": ErrorResponse},
        422: {"description": "Invalid id", "model": ErrorResponse},
    },
    summary="Get a post",
)
async def get_post(
    request: Request,
    id: str = Path(description=ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    async def action(ctx: RequestContext):
        return await post_service.get_post(db, ctx.int_param())

    return await dispatch(request, [validate_with(ID_PARAM)], action)


@router.post(
    "",
    responses={
        200: {"description": "Post created", "model": Envelope},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        422: {"description": "Validation failed", "model": ErrorResponse},
    },
    summary="Create a post",
    description="Body: {title, content}.",
)
async def create_post(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Response:
    async def action(ctx: RequestContext):
        return await post_service.create_post(
            db, ctx.user_id, ctx.body["title"], ctx.body["content"]
        )

    stages = [parse_json_body, AuthorizationStage(tokens), validate_with(POST_CREATE)]
    return await dispatch(request, stages, action)


@router.put(
    "/{id}",
    responses={
        200: {"description": "Updated post", "model": Envelope},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        404: {"description": "Post not found or not yours", "model": ErrorResponse},
        422: {"description": "Validation failed", "model": ErrorResponse},
    },
    summary="Update a post",
    description="Body: any of {title, content}.",
)
async def update_post(
    request: Request,
    id: str = Path(description=ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Response:
    async def action(ctx: RequestContext):
        return await post_service.update_post(db, ctx.int_param(), ctx.body, ctx.user_id)

    stages = [parse_json_body, AuthorizationStage(tokens), validate_with(POST_UPDATE)]
    return await dispatch(request, stages, action)


@router.delete(
    "/{id}",
    responses={
        200: {"description": "Deleted post", "model": Envelope},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        404: {"description": "Post not found or not yours", "model": ErrorResponse},
        422: {"description": "Invalid id", "model": ErrorResponse},
    },
    summary="Delete a post",
    description="Comments and likes on the post are removed with it.",
)
async def delete_post(
    request: Request,
    id: str = Path(description=ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Response:
    async def action(ctx: RequestContext):
        return await post_service.delete_post(db, ctx.int_param(), ctx.user_id)

    return await dispatch(request, [AuthorizationStage(tokens), validate_with(ID_PARAM)], action)
