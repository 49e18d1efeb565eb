"""Blog API — Post, Comment and Like response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class PostResponse(BaseModel):
    id: int
    user_id: int = Field(description="Author")
    title: str
    content: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CommentResponse(BaseModel):
    id: int
    post_id: int
    user_id: int = Field(description="Author")
    content: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LikeResponse(BaseModel):
    id: int
    post_id: int
    user_id: int
    created_at: datetime

    model_config = {"from_attributes": True}
