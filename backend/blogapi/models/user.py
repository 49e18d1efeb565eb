"""
Blog API — User SQLAlchemy Model
=================================

What:  ORM model for the `users` table (the credential store).
Who:   UserService for CRUD and login; posts/comments/likes reference it.

Columns:
    - id: integer primary key, exposed in URLs (/api/users/{id})
    - email: unique; login looks users up by exact match
    - password_hash: bcrypt output only; never serialized (UserResponse has no such field)
    - created_at / updated_at: UTC, set in Python so they are populated after flush
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from blogapi.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Login identifier, unique across all users",
    )

    # bcrypt hashes are 60 characters
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
