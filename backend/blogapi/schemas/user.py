"""
Blog API — User Schemas
========================

What:  Outbound shapes for users and the login payload.

UserResponse has no password field of any kind; every user that leaves the
service goes through it, so the hash cannot leak into a response.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class UserResponse(BaseModel):
    id: int = Field(description="User identifier")
    name: str = Field(description="Display name")
    email: str = Field(description="Unique login email")
    created_at: datetime = Field(description="Registration time (UTC)")
    updated_at: datetime = Field(description="Last profile change (UTC)")

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    token: str = Field(description="Bearer token; send as 'Authorization: Bearer <token>'")
    user: UserResponse
