"""
Blog API — Like Route Handlers
===============================

What:  /api/likes: list, detail, like a post, remove your like.
       There is no update route; a like carries nothing to edit.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request
from starlette.responses import Response

from blogapi.database import get_db_session
from blogapi.middleware.auth import AuthorizationStage
from blogapi.pipeline import RequestContext, dispatch, parse_json_body, validate_with
from blogapi.schemas.common import Envelope, ErrorResponse
from blogapi.services.like_service import like_service
from blogapi.services.token_service import TokenService, get_token_service
from blogapi.validation.rulesets import ID_PARAM, LIKE_CREATE, LIKE_LIST

router = APIRouter(prefix="/api/likes", tags=["Likes"])

ID_DESCRIPTION = "Like ID (positive integer)"


@router.get(
    "",
    responses={
        200: {"description": "Likes, oldest first", "model": Envelope},
        422: {"description": "Invalid post_id filter", "model": ErrorResponse},
    },
    summary="List likes",
)
async def list_likes(
    request: Request,
    post_id: str | None = Query(default=None, description="Only likes of this post"),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    async def action(ctx: RequestContext):
        post = ctx.query.get("post_id")
        return await like_service.list_likes(db, post_id=int(post) if post else None)

    return await dispatch(request, [validate_with(LIKE_LIST)], action)


@router.get(
    "/{id}",
    responses={
        200: {"description": "Like detail", "model": Envelope},
        404: {"description": "Like not found", "model": ErrorResponse},
        422: {"description": "Invalid id", "model": ErrorResponse},
    },
    summary="Get a like",
)
async def get_like(
    request: Request,
    id: str = Path(description=ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    async def action(ctx: RequestContext):
        return await like_service.get_like(db, ctx.int_param())

    return await dispatch(request, [validate_with(ID_PARAM)], action)


@router.post(
    "",
    responses={
        200: {"description": "Post liked", "model": Envelope},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
        409: {"description": "Already liked", "model": ErrorResponse},
        422: {"description": "Validation failed", "model": ErrorResponse},
    },
    summary="Like a post",
    description="Body: {post_id}. Each user can like a post once.",
)
async def create_like(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Response:
    async def action(ctx: RequestContext):
        return await like_service.create_like(db, ctx.user_id, int(ctx.body["post_id"]))

    stages = [parse_json_body, AuthorizationStage(tokens), validate_with(LIKE_CREATE)]
    return await dispatch(request, stages, action)


@router.delete(
    "/{id}",
    responses={
        200: {"description": "Like removed", "model": Envelope},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        404: {"description": "Like not found or not yours", "model": ErrorResponse},
        422: {"description": "Invalid id", "model": ErrorResponse},
    },
    summary="Remove a like",
)
async def delete_like(
    request: Request,
    id: str = Path(description=ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Response:
    async def action(ctx: RequestContext):
        return await like_service.delete_like(db, ctx.int_param(), ctx.user_id)

    return await dispatch(request, [AuthorizationStage(tokens), validate_with(ID_PARAM)], action)
