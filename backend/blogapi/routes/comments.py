"""
Blog API — Comment Route Handlers
==================================

What:  /api/comments CRUD. Reads are public; creating, editing and deleting
       need a token. A comment can only target an existing post.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request
from starlette.responses import Response

from blogapi.database import get_db_session
from blogapi.middleware.auth import AuthorizationStage
from blogapi.pipeline import RequestContext, dispatch, parse_json_body, validate_with
from blogapi.schemas.common import Envelope, ErrorResponse
from blogapi.services.comment_service import comment_service
from blogapi.services.token_service import TokenService, get_token_service
from blogapi.validation.rulesets import COMMENT_CREATE, COMMENT_LIST, COMMENT_UPDATE, ID_PARAM

router = APIRouter(prefix="/api/comments", tags=["Comments"])

ID_DESCRIPTION = "Comment ID (positive integer)"


@router.get(
    "",
    responses={
        200: {"description": "Comments, oldest first", "model": Envelope},
        422: {"description": "Invalid post_id filter", "model": ErrorResponse},
    },
    summary="List comments",
)
async def list_comments(
    request: Request,
    post_id: str | None = Query(default=None, description="Only comments on this post"),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    async def action(ctx: RequestContext):
        post = ctx.query.get("post_id")
        return await comment_service.list_comments(db, post_id=int(post) if post else None)

    return await dispatch(request, [validate_with(COMMENT_LIST)], action)


@router.get(
    "/{id}",
    responses={
        200: {"description": "Comment detail", "model": Envelope},
        404: {"description": "Comment not found", "model": ErrorResponse},
        422: {"description": "Invalid id", "model": ErrorResponse},
    },
    summary="Get a comment",
)
async def get_comment(
    request: Request,
    id: str = Path(description=ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    async def action(ctx: RequestContext):
        return await comment_service.get_comment(db, ctx.int_param())

    return await dispatch(request, [validate_with(ID_PARAM)], action)


@router.post(
    "",
    responses={
        200: {"description": "Comment created", "model": Envelope},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        404: {"description": "Post not found", "model": ErrorResponse},
        422: {"description": "Validation failed", "model": ErrorResponse},
    },
    summary="Comment on a post",
    description="Body: {post_id, content}.",
)
async def create_comment(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Response:
    async def action(ctx: RequestContext):
        return await comment_service.create_comment(
            db, ctx.user_id, int(ctx.body["post_id"]), ctx.body["content"]
        )

    stages = [parse_json_body, AuthorizationStage(tokens), validate_with(COMMENT_CREATE)]
    return await dispatch(request, stages, action)


@router.put(
    "/{id}",
    responses={
        200: {"description": "Updated comment", "model": Envelope},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        404: {"description": "Comment not found or not yours", "model": ErrorResponse},
        422: {"description": "Validation failed", "model": ErrorResponse},
    },
    summary="Edit a comment",
    description="Body: {content}.",
)
async def update_comment(
    request: Request,
    id: str = Path(description=ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Response:
    async def action(ctx: RequestContext):
        return await comment_service.update_comment(
            db, ctx.int_param(), ctx.body["content"], ctx.user_id
        )

    stages = [parse_json_body, AuthorizationStage(tokens), validate_with(COMMENT_UPDATE)]
    return await dispatch(request, stages, action)


@router.delete(
    "/{id}",
    responses={
        200: {"description": "Deleted comment", "model": Envelope},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        404: {"description": "Comment not found or not yours", "model": ErrorResponse},
        422: {"description": "Invalid id", "model": ErrorResponse},
    },
    summary="Delete a comment",
)
async def delete_comment(
    request: Request,
    id: str = Path(description=ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Response:
    async def action(ctx: RequestContext):
        return await comment_service.delete_comment(db, ctx.int_param(), ctx.user_id)

    return await dispatch(request, [AuthorizationStage(tokens), validate_with(ID_PARAM)], action)
