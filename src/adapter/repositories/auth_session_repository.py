from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlmodel import select, update
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.auth_session_repository import IAuthSessionRepository
from src.domain.entities import AuthSession


class AuthSessionRepository(IAuthSessionRepository):
    """AuthSession repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, session_id: UUID) -> Optional[AuthSession]:
        """Get session by ID"""
        stmt = (
            select(AuthSession)
            .where(AuthSession.id == session_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id_for_update(self, session_id: UUID) -> Optional[AuthSession]:
        """
        Get session by ID with SELECT ... FOR UPDATE.

        Serializes issuance/rotation/revocation on the same session. SQLite has
        no row locks; its single-writer lock gives the same ordering there.
        """
        stmt = (
            select(AuthSession)
            .where(AuthSession.id == session_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_user_id(
        self, user_id: UUID, active_only: bool = False
    ) -> List[AuthSession]:
        """Get sessions for a user, newest first"""
        stmt = select(AuthSession).where(AuthSession.user_id == user_id)
        if active_only:
            stmt = stmt.where(AuthSession.revoked_at.is_(None))
        stmt = stmt.order_by(AuthSession.created_at.desc())
        result = await self.session.exec(stmt)
        return list(result.all())

    async def create(self, session_obj: AuthSession) -> AuthSession:
        """Create a new session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def bind_dpop_jkt(self, session_id: UUID, dpop_jkt: str) -> bool:
        """Bind the thumbprint unless a different one is already bound"""
        stmt = (
            update(AuthSession)
            .where(
                AuthSession.id == session_id,
                AuthSession.revoked_at.is_(None),
                or_(AuthSession.dpop_jkt.is_(None), AuthSession.dpop_jkt == dpop_jkt),
            )
            .values(dpop_jkt=dpop_jkt)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def touch(self, session_id: UUID, now: datetime) -> bool:
        """Set last_used_at on an active session"""
        stmt = (
            update(AuthSession)
            .where(AuthSession.id == session_id, AuthSession.revoked_at.is_(None))
            .values(last_used_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def revoke(self, session_id: UUID, now: datetime) -> bool:
        """Revoke a specific session by ID"""
        stmt = (
            update(AuthSession)
            .where(AuthSession.id == session_id, AuthSession.revoked_at.is_(None))
            .values(revoked_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def revoke_all_by_user_id(self, user_id: UUID, now: datetime) -> int:
        """Revoke all active sessions for a user"""
        stmt = (
            update(AuthSession)
            .where(AuthSession.user_id == user_id, AuthSession.revoked_at.is_(None))
            .values(revoked_at=now)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
