"""
Blog API — User Route Handlers
===============================

What:  /api/users: registration, login, listing, detail, update and delete.
How:   Each handler lists its pipeline stages and hands a small action to
       `dispatch()`; the action calls UserService and returns its Result.

Endpoint Summary:
    POST   /api/users         public     register
    POST   /api/users/login   public     exchange email/password for a token
    GET    /api/users         token      list users
    GET    /api/users/{id}    public     user detail
    PUT    /api/users/{id}    token      update own account
    DELETE /api/users/{id}    token      delete own account
"""

import logging

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request
from starlette.responses import Response

from blogapi.database import get_db_session
from blogapi.middleware.auth import AuthorizationStage
from blogapi.pipeline import RequestContext, dispatch, parse_json_body, validate_with
from blogapi.schemas.common import Envelope, ErrorResponse
from blogapi.services.token_service import TokenService, get_token_service
from blogapi.services.user_service import user_service
from blogapi.validation.rulesets import ID_PARAM, USER_CREATE, USER_LOGIN, USER_UPDATE

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])

ID_DESCRIPTION = "User ID (positive integer)"


@router.post(
    "",
    responses={
        200: {"description": "User registered", "model": Envelope},
        400: {"description": "Malformed JSON body", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
        422: {"description": "Validation failed", "model": ErrorResponse},
    },
    summary="Register a user",
    description="Body: {name, email, password}. The password is stored as a bcrypt hash.",
)
async def create_user(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    async def action(ctx: RequestContext):
        return await user_service.register(
            db, ctx.body["name"], ctx.body["email"], ctx.body["password"]
        )

    return await dispatch(request, [parse_json_body, validate_with(USER_CREATE)], action)


# Declared before "/{id}" so "login" is never read as an id
@router.post(
    "/login",
    responses={
        200: {"description": "Token issued", "model": Envelope},
        404: {"description": "Invalid email or password", "model": ErrorResponse},
        422: {"description": "Validation failed", "model": ErrorResponse},
    },
    summary="Log in",
    description=(
        "Body: {email, password}. Returns {token, user}. An unknown email and a "
        "wrong password both answer 404 with the same message."
    ),
)
async def login(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Response:
    async def action(ctx: RequestContext):
        return await user_service.login(db, ctx.body["email"], ctx.body["password"], tokens)

    return await dispatch(request, [parse_json_body, validate_with(USER_LOGIN)], action)


@router.get(
    "",
    responses={
        200: {"description": "All users", "model": Envelope},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
    },
    summary="List users",
)
async def list_users(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Response:
    async def action(ctx: RequestContext):
        return await user_service.list_users(db)

    return await dispatch(request, [AuthorizationStage(tokens)], action)


@router.get(
    "/{id}",
    responses={
        200: {"description": "User detail", "model": Envelope},
        404: {"description": "User not found", "model": ErrorResponse},
        422: {"description": "Invalid id", "model": ErrorResponse},
    },
    summary="Get a user",
)
async def get_user(
    request: Request,
    id: str = Path(description=ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    async def action(ctx: RequestContext):
        return await user_service.get_user(db, ctx.int_param())

    return await dispatch(request, [validate_with(ID_PARAM)], action)


@router.put(
    "/{id}",
    responses={
        200: {"description": "Updated user", "model": Envelope},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        404: {"description": "User not found or not yours", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
        422: {"description": "Validation failed", "model": ErrorResponse},
    },
    summary="Update your account",
    description="Body: any of {name, email, password}. Fields left out are unchanged.",
)
async def update_user(
    request: Request,
    id: str = Path(description=ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Response:
    async def action(ctx: RequestContext):
        return await user_service.update_user(db, ctx.int_param(), ctx.body, ctx.user_id)

    stages = [parse_json_body, AuthorizationStage(tokens), validate_with(USER_UPDATE)]
    return await dispatch(request, stages, action)


@router.delete(
    "/{id}",
    responses={
        200: {"description": "Deleted user", "model": Envelope},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        404: {"description": "User not found or not yours", "model": ErrorResponse},
        422: {"description": "Invalid id", "model": ErrorResponse},
    },
    summary="Delete your account",
    description="Deletes the account together with its posts, comments and likes.",
)
async def delete_user(
    request: Request,
    id: str = Path(description=ID_DESCRIPTION),
    db: AsyncSession = Depends(get_db_session),
    tokens: TokenService = Depends(get_token_service),
) -> Response:
    async def action(ctx: RequestContext):
        return await user_service.delete_user(db, ctx.int_param(), ctx.user_id)

    stages = [AuthorizationStage(tokens), validate_with(ID_PARAM)]
    return await dispatch(request, stages, action)
