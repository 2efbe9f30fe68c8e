"""
User Entity

Identity anchor for sessions and content.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Text
from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utc_now


class User(SQLModel, table=True):
    """
    User entity - identity anchor.

    Business Rules:
    - user_name is unique across all users
    - updated_at refreshes on every mutation (ORM onupdate + set_updated_at trigger)
    - Deleting a user cascades to sessions, posts and bookmarks

    Content tables keep their quoted camelCase column names ("userId",
    "userName", ...); attributes stay snake_case.
    """

    __tablename__ = "users"

    id: UUID = Field(
        default_factory=uuid4, primary_key=True, sa_column_kwargs={"name": "userId"}
    )
    user_name: str = Field(sa_column=Column("userName", Text, nullable=False, unique=True))
    image_url: Optional[str] = Field(
        default=None, max_length=256, sa_column_kwargs={"name": "imageUrl"}
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column("createdAt", DateTime, nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column("updatedAt", DateTime, nullable=False, onupdate=utc_now),
    )
