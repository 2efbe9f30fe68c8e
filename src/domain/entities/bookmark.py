"""
Bookmark Entity

A user's saved post. Schema only; no use cases operate on bookmarks.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import BigInteger, ForeignKey, Integer
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now


class Bookmark(SQLModel, table=True):
    """
    Bookmark entity.

    Note: post_id is NOT NULL yet its foreign key says ON DELETE SET NULL, so
    deleting a bookmarked post fails at the database. Kept as-is for schema
    compatibility.
    """

    __tablename__ = "bookmarks"

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            "bookmarkId",
            BigInteger().with_variant(Integer, "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
    )
    post_id: int = Field(
        sa_column=Column(
            "postId",
            BigInteger().with_variant(Integer, "sqlite"),
            ForeignKey("posts.postId", ondelete="SET NULL"),
            nullable=False,
        )
    )
    user_id: UUID = Field(
        foreign_key="users.userId",
        ondelete="CASCADE",
        nullable=False,
        sa_column_kwargs={"name": "userId"},
    )

    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column("createdAt", DateTime, nullable=False)
    )

    __table_args__ = (
        Index("idx_bookmarks_userId", "userId"),
        Index("idx_bookmarks_postId", "postId"),
    )
