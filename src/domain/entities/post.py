"""
Post Entity

Content authored by a user. Schema only; no use cases operate on posts.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import BigInteger, Integer, Text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now


class Post(SQLModel, table=True):
    __tablename__ = "posts"

    # BIGSERIAL on PostgreSQL, INTEGER PRIMARY KEY (rowid alias) on SQLite
    id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            "postId",
            BigInteger().with_variant(Integer, "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
    )
    title: str = Field(sa_column=Column("title", Text, nullable=False))
    content: str = Field(sa_column=Column("content", Text, nullable=False))
    author_id: UUID = Field(
        foreign_key="users.userId",
        ondelete="CASCADE",
        nullable=False,
        sa_column_kwargs={"name": "authorId"},
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column("createdAt", DateTime, nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column("updatedAt", DateTime, nullable=False, onupdate=utc_now),
    )

    __table_args__ = (Index("idx_posts_authorId", "authorId"),)
