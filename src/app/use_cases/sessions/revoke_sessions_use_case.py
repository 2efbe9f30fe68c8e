"""
Revoke Sessions Use Case

Handles session revocation for logout and security response.
"""

import logging
from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.adapter.services.clock import SystemClock
from src.app.services.clock import IClock
from src.app.services.unit_of_work import UnitOfWork
from .dtos import RevokeSessionResponse, RevokeUserSessionsResponse

logger = logging.getLogger(__name__)


class RevokeSessionsUseCase:
    """
    Use case for revoking sessions.

    Business Rules:
    - Revocation sets auth_sessions.revoked_at and nothing else; refresh token
      rows stay untouched and become unusable through the session join
    - Revoking an already revoked session is an idempotent success (revoked=False)
    - Two modes: one session, or every session of a user
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[IClock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    async def revoke_session(self, session_id: UUID) -> Result[RevokeSessionResponse]:
        """
        Revoke a specific session by ID.

        Returns:
            Result with revocation status, or Error(SESSION_NOT_FOUND)
        """
        async with self.uow:
            session = await self.uow.auth_sessions.get_by_id_for_update(session_id)
            if session is None:
                return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))

            revoked = await self.uow.auth_sessions.revoke(session_id, self.clock.now())

            await self.uow.commit()

            if revoked:
                logger.info("Revoked session %s", session_id)

            return Return.ok(
                RevokeSessionResponse(session_id=str(session_id), revoked=revoked)
            )

    async def revoke_all_for_user(
        self, user_id: UUID
    ) -> Result[RevokeUserSessionsResponse]:
        """
        Revoke all active sessions for a user ("log out everywhere").

        Returns:
            Result with count of revoked sessions, or Error(USER_NOT_FOUND)
        """
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            count = await self.uow.auth_sessions.revoke_all_by_user_id(
                user_id, self.clock.now()
            )

            await self.uow.commit()

            logger.info("Revoked %d session(s) of user %s", count, user_id)

            return Return.ok(
                RevokeUserSessionsResponse(user_id=str(user_id), revoked_count=count)
            )
