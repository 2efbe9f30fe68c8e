"""
List Sessions Use Case

Device management view of a user's sessions.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from .dtos import SessionListResponse, SessionResponse


class ListSessionsUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, active_only: bool = True
    ) -> Result[SessionListResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            sessions = await self.uow.auth_sessions.get_by_user_id(
                user_id, active_only=active_only
            )

            return Return.ok(
                SessionListResponse(
                    user_id=str(user_id),
                    sessions=[SessionResponse.from_entity(s) for s in sessions],
                )
            )
