"""
Blog API — User Service (Accounts and Login)
=============================================

What:  Registration, profile CRUD and the login flow.
How:   Composes the users Repository, PasswordService and a TokenService.
Who:   Called by the /api/users route actions after validation (and, for
       mutating calls, authorization) have passed.

Login Flow:
    ┌──────────────┐    ┌──────────────────┐    ┌────────────────┐
    │ find by email│───▶│ bcrypt compare   │───▶│ issue token    │
    └──────────────┘    └──────────────────┘    └────────────────┘
          │ none               │ mismatch
          ▼                    ▼
       NOT_FOUND "Invalid email or password" (one shape for both)

Outcomes are returned as Result values. Only unexpected failures
(DatabaseError, PasswordHashError) are raised.
"""

import logging
from typing import Any, Dict, List, Mapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.models.user import User
from blogapi.results import ErrorKind, Failure, Result
from blogapi.schemas.user import LoginResponse, UserResponse
from blogapi.services.password_service import PasswordService, password_service
from blogapi.services.repository import Repository
from blogapi.services.token_service import TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
EMAIL_TAKEN = "Email is already registered"


class UserService:
    """
    Business logic for the users resource.

    Responsibilities:
        - register(): hash the password and store a new user (409 on duplicate email)
        - list_users() / get_user(): read access, shaped through UserResponse
        - update_user() / delete_user(): only the account holder may change the account
        - login(): verify credentials and issue an access token
    """

    def __init__(self, passwords: PasswordService = password_service):
        self.passwords = passwords
        self.users: Repository[User] = Repository(User)

    async def register(
        self, db: AsyncSession, name: str, email: str, password: str
    ) -> Result[UserResponse]:
        email = email.strip()
        if await self.users.find_one_by(db, email=email) is not None:
            return Result.conflict(EMAIL_TAKEN)

        password_hash = await self.passwords.hash(password)
        try:
            user = await self.users.create(
                db, {"name": name.strip(), "email": email, "password_hash": password_hash}
            )
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            await db.rollback()
            return Result.conflict(EMAIL_TAKEN)

        logger.info("User registered: id=%s", user.id)
        return Result.success(UserResponse.model_validate(user))

    async def list_users(self, db: AsyncSession) -> Result[List[UserResponse]]:
        users = await self.users.list(db)
        return Result.success([UserResponse.model_validate(u) for u in users])

    async def get_user(self, db: AsyncSession, user_id: int) -> Result[UserResponse]:
        user = await self.users.get(db, user_id)
        if user is None:
            return Result.not_found("User")
        return Result.success(UserResponse.model_validate(user))

    async def update_user(
        self,
        db: AsyncSession,
        user_id: int,
        changes: Mapping[str, Any],
        acting_user_id: int,
    ) -> Result[UserResponse]:
        """
        Applies the supplied subset of {name, email, password}.

        Another user's account is reported as NOT_FOUND. A new password is
        re-hashed; an email already held by someone else is a CONFLICT.
        """
        if user_id != acting_user_id:
            return Result.not_found("User")

        values: Dict[str, Any] = {}
        if changes.get("name") is not None:
            values["name"] = changes["name"].strip()
        if changes.get("email") is not None:
            email = changes["email"].strip()
            holder = await self.users.find_one_by(db, email=email)
            if holder is not None and holder.id != user_id:
                return Result.conflict(EMAIL_TAKEN)
            values["email"] = email
        if changes.get("password") is not None:
            values["password_hash"] = await self.passwords.hash(changes["password"])

        try:
            user = await self.users.update(db, user_id, values)
        except IntegrityError:
            await db.rollback()
            return Result.conflict(EMAIL_TAKEN)

        if user is None:
            return Result.not_found("User")
        return Result.success(UserResponse.model_validate(user))

    async def delete_user(
        self, db: AsyncSession, user_id: int, acting_user_id: int
    ) -> Result[UserResponse]:
        if user_id != acting_user_id:
            return Result.not_found("User")

        user = await self.users.get(db, user_id)
        if user is None:
            return Result.not_found("User")

        shaped = UserResponse.model_validate(user)
        await self.users.delete(db, user_id)
        logger.info("User deleted: id=%s", user_id)
        return Result.success(shaped)

    async def login(
        self, db: AsyncSession, email: str, password: str, tokens: TokenService
    ) -> Result[LoginResponse]:
        """
        Exchanges an email/password pair for an access token.

        Unknown email and wrong password produce the same NOT_FOUND failure,
        so the response does not reveal which of the two was wrong.
        """
        invalid = Result.fail(Failure.of(ErrorKind.NOT_FOUND, INVALID_CREDENTIALS))

        user = await self.users.find_one_by(db, email=email.strip())
        if user is None:
            logger.info("Login failed: unknown email")
            return invalid

        if not await self.passwords.compare(password, user.password_hash):
            logger.info("Login failed: wrong password for user id=%s", user.id)
            return invalid

        token = tokens.issue(user.id)
        logger.info("Login succeeded: user id=%s", user.id)
        return Result.success(
            LoginResponse(token=token, user=UserResponse.model_validate(user))
        )


user_service = UserService()
