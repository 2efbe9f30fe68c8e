"""
Touch Session Use Case

Updates last_used_at of an active session.
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.adapter.services.clock import SystemClock
from src.app.services.clock import IClock
from src.app.services.unit_of_work import UnitOfWork
from .dtos import SessionResponse


class TouchSessionUseCase:
    """
    Use case for recording session activity.

    Business Rules:
    - Only active sessions are touched
    - Missing session => SESSION_NOT_FOUND, revoked session => SESSION_REVOKED
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[IClock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    async def execute(self, session_id: UUID) -> Result[SessionResponse]:
        async with self.uow:
            touched = await self.uow.auth_sessions.touch(session_id, self.clock.now())

            if not touched:
                session = await self.uow.auth_sessions.get_by_id(session_id)
                if session is None:
                    return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))
                return Return.err(Error("SESSION_REVOKED", "Session has been revoked"))

            await self.uow.commit()

            session = await self.uow.auth_sessions.get_by_id(session_id)
            return Return.ok(SessionResponse.from_entity(session))
