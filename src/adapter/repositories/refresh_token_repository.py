from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, or_
from sqlalchemy.orm import aliased
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.domain.entities import AuthSession, RefreshToken


class RefreshTokenRepository(IRefreshTokenRepository):
    """RefreshToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: RefreshToken) -> RefreshToken:
        """Insert a newly issued token"""
        self.session.add(token)
        await self.session.flush()
        await self.session.refresh(token)
        return token

    async def get_by_id(self, token_id: UUID) -> Optional[RefreshToken]:
        """Get token by ID"""
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.id == token_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_hash(self, token_hash: bytes) -> Optional[RefreshToken]:
        """Get token by hash regardless of its state"""
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.token_hash == token_hash)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_current_by_session_id(self, session_id: UUID) -> Optional[RefreshToken]:
        """Get the session's current token"""
        stmt = (
            select(RefreshToken)
            .where(
                RefreshToken.session_id == session_id,
                RefreshToken.revoked_at.is_(None),
                RefreshToken.replaced_by.is_(None),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_session_id(self, session_id: UUID) -> List[RefreshToken]:
        """Get every token of a session ordered by issued_at"""
        stmt = (
            select(RefreshToken)
            .where(RefreshToken.session_id == session_id)
            .order_by(RefreshToken.issued_at, RefreshToken.id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def find_valid_by_hash(
        self, token_hash: bytes, now: datetime
    ) -> Optional[RefreshToken]:
        """Token usability joins through session state, not just token state"""
        stmt = (
            select(RefreshToken)
            .join(AuthSession, AuthSession.id == RefreshToken.session_id)
            .where(
                RefreshToken.token_hash == token_hash,
                RefreshToken.used_at.is_(None),
                RefreshToken.revoked_at.is_(None),
                RefreshToken.replaced_by.is_(None),
                RefreshToken.expires_at > now,
                AuthSession.revoked_at.is_(None),
            )
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def consume(self, token_id: UUID, replaced_by: UUID, now: datetime) -> bool:
        """Compare-and-set: only one concurrent rotation can match the current predicate"""
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.id == token_id,
                RefreshToken.used_at.is_(None),
                RefreshToken.revoked_at.is_(None),
                RefreshToken.replaced_by.is_(None),
            )
            .values(used_at=now, replaced_by=replaced_by)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount == 1

    async def revoke(self, token_id: UUID, now: datetime) -> bool:
        """Revoke a token by ID"""
        stmt = (
            update(RefreshToken)
            .where(RefreshToken.id == token_id, RefreshToken.revoked_at.is_(None))
            .values(revoked_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def revoke_all_by_session_id(self, session_id: UUID, now: datetime) -> int:
        """Single statement mass revoke for one session"""
        stmt = (
            update(RefreshToken)
            .where(
                RefreshToken.session_id == session_id,
                RefreshToken.revoked_at.is_(None),
            )
            .values(revoked_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount

    async def purge_expired(self, cutoff: datetime) -> int:
        """
        Delete non-current tokens with expires_at < cutoff.

        A row goes only once no other row points at it through replaced_by,
        so every pass removes the oldest remaining link of each dead chain.
        Passes repeat until nothing matches; a chain stops at its first
        retained row and replaced_by never dangles.
        """
        predecessor = aliased(RefreshToken)
        has_predecessor = (
            select(predecessor.id)
            .where(predecessor.replaced_by == RefreshToken.id)
            .exists()
        )
        stmt = (
            delete(RefreshToken)
            .where(
                RefreshToken.expires_at < cutoff,
                or_(
                    RefreshToken.revoked_at.is_not(None),
                    RefreshToken.replaced_by.is_not(None),
                ),
                ~has_predecessor,
            )
            .execution_options(synchronize_session=False)
        )

        purged = 0
        while True:
            result = await self.session.execute(stmt)
            if not result.rowcount:
                break
            purged += result.rowcount
        await self.session.flush()
        return purged
