"""
RefreshToken Entity

One row per issued opaque refresh token, including every prior rotation.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, LargeBinary, Uuid, text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utc_now

from .enums import TokenState

CURRENT_TOKEN_PREDICATE = "revoked_at IS NULL AND replaced_by IS NULL"


class RefreshToken(SQLModel, table=True):
    """
    RefreshToken entity - append-only rotation chain per session.

    Business Rules:
    - Only the SHA-256 hash of the opaque token is stored
    - token_hash is globally unique
    - Current <=> revoked_at IS NULL AND replaced_by IS NULL (derived, never stored)
    - At most one current token per session (partial unique index)
    - Mutated exactly once: consumed (used_at + replaced_by) or revoked (revoked_at)
    - replaced_by is immutable once set; the FK is deferred so the old row can
      point at its successor before the successor is inserted
    """

    __tablename__ = "refresh_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    session_id: UUID = Field(
        foreign_key="auth_sessions.id", ondelete="CASCADE", nullable=False
    )

    token_hash: bytes = Field(sa_column=Column(LargeBinary, nullable=False))

    # Timestamps
    issued_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(DateTime, nullable=False)
    )
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))

    # Rotation / audit
    used_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    revoked_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    replaced_by: Optional[UUID] = Field(
        default=None,
        sa_column=Column(
            Uuid,
            ForeignKey("refresh_tokens.id", deferrable=True, initially="DEFERRED"),
            nullable=True,
        ),
    )

    __table_args__ = (
        Index("uq_refresh_tokens_token_hash", "token_hash", unique=True),
        Index("idx_refresh_tokens_session_id", "session_id"),
        Index("idx_refresh_tokens_expires_at", "expires_at"),
        Index(
            "uq_refresh_tokens_current_per_session",
            "session_id",
            unique=True,
            postgresql_where=text(CURRENT_TOKEN_PREDICATE),
            sqlite_where=text(CURRENT_TOKEN_PREDICATE),
        ),
    )

    @property
    def is_current(self) -> bool:
        return self.revoked_at is None and self.replaced_by is None

    @property
    def is_consumed(self) -> bool:
        """Used, revoked or replaced - presenting it again is a replay"""
        return (
            self.used_at is not None
            or self.revoked_at is not None
            or self.replaced_by is not None
        )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def state(self, now: datetime) -> TokenState:
        if self.revoked_at is not None:
            return TokenState.revoked
        if self.used_at is not None or self.replaced_by is not None:
            return TokenState.used
        if self.is_expired(now):
            return TokenState.expired
        return TokenState.current
