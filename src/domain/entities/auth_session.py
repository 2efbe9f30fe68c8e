"""
AuthSession Entity

One authenticated device/app/browser context for a user.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now


class AuthSession(SQLModel, table=True):
    """
    AuthSession entity - logical session owning a chain of refresh tokens.

    Business Rules:
    - dpop_jkt is bound at most once (null until the client completes key binding)
    - Only last_used_at, dpop_jkt and revoked_at are ever mutated
    - revoked_at set => permanently inactive, all its refresh tokens unusable
    - Never deleted explicitly; cascades away with the owning user
    """

    __tablename__ = "auth_sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(
        foreign_key="users.userId", ondelete="CASCADE", nullable=False
    )

    # Key-binding thumbprint (DPoP cnf.jkt)
    dpop_jkt: Optional[str] = Field(default=None)

    # Timestamps
    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )
    last_used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_auth_sessions_user_id", "user_id"),
        Index("idx_auth_sessions_revoked_at", "revoked_at"),
    )

    @property
    def is_active(self) -> bool:
        return self.revoked_at is None
