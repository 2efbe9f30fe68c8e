"""Content schema: users, posts, bookmarks and updatedAt triggers

Revision ID: 20260130091243_init
Revises:
Create Date: 2026-01-30 09:12:43

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from src.adapter.schema import create_triggers, drop_triggers

# revision identifiers, used by Alembic.
revision: str = "20260130091243_init"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BIG_ID = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("userId", sa.Uuid(), nullable=False),
        sa.Column("userName", sa.Text(), nullable=False),
        sa.Column("imageUrl", sa.String(length=256), nullable=True),
        sa.Column("createdAt", sa.DateTime(), nullable=False),
        sa.Column("updatedAt", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("userId"),
        sa.UniqueConstraint("userName"),
    )

    op.create_table(
        "posts",
        sa.Column("postId", BIG_ID, autoincrement=True, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("authorId", sa.Uuid(), nullable=False),
        sa.Column("createdAt", sa.DateTime(), nullable=False),
        sa.Column("updatedAt", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["authorId"], ["users.userId"], name="posts_author_fk", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("postId"),
    )

    # postId is NOT NULL while its FK says SET NULL; deleting a bookmarked post fails
    op.create_table(
        "bookmarks",
        sa.Column("bookmarkId", BIG_ID, autoincrement=True, nullable=False),
        sa.Column("postId", BIG_ID, nullable=False),
        sa.Column("userId", sa.Uuid(), nullable=False),
        sa.Column("createdAt", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["postId"], ["posts.postId"], name="bookmarks_post_fk", ondelete="SET NULL"
        ),
        sa.ForeignKeyConstraint(
            ["userId"], ["users.userId"], name="bookmarks_user_fk", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("bookmarkId"),
    )

    op.create_index("idx_posts_authorId", "posts", ["authorId"])
    op.create_index("idx_bookmarks_userId", "bookmarks", ["userId"])
    op.create_index("idx_bookmarks_postId", "bookmarks", ["postId"])

    create_triggers(op.get_bind())


def downgrade() -> None:
    drop_triggers(op.get_bind())

    op.drop_index("idx_bookmarks_postId", table_name="bookmarks")
    op.drop_index("idx_bookmarks_userId", table_name="bookmarks")
    op.drop_index("idx_posts_authorId", table_name="posts")
    op.drop_table("bookmarks")
    op.drop_table("posts")
    op.drop_table("users")
