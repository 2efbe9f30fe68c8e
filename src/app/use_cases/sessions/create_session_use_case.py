"""
Create Session Use Case

Opens a logical session for one device/app/browser of a user.
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.adapter.services.clock import SystemClock
from src.app.services.clock import IClock
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuthSession
from .dtos import SessionResponse


class CreateSessionUseCase:
    """
    Use case for creating an auth session.

    Business Rules:
    - User must exist
    - dpop_jkt is optional (clients that have not completed key binding yet)
    - New sessions are active (revoked_at is null)
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[IClock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    async def execute(
        self, user_id: UUID, dpop_jkt: Optional[str] = None
    ) -> Result[SessionResponse]:
        """
        Execute create session use case.

        Args:
            user_id: Owning user
            dpop_jkt: Key-binding thumbprint, if already known

        Returns:
            Result with SessionResponse, or Error(USER_NOT_FOUND)
        """
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            session = AuthSession(
                user_id=user.id,
                dpop_jkt=dpop_jkt,
                created_at=self.clock.now(),
            )
            await self.uow.auth_sessions.create(session)

            await self.uow.commit()

            return Return.ok(SessionResponse.from_entity(session))
