"""
Get Token Chain Use Case

Audit view of a session's rotation chain.
"""

from typing import Optional
from uuid import UUID

from libs.result import Error, Result, Return
from src.adapter.services.clock import SystemClock
from src.app.services.clock import IClock
from src.app.services.unit_of_work import UnitOfWork
from .dtos import TokenChainEntry, TokenChainResponse


class GetTokenChainUseCase:
    """
    Use case listing every refresh token a session has held, oldest first,
    each with its derived state at the time of the call.
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[IClock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    async def execute(self, session_id: UUID) -> Result[TokenChainResponse]:
        async with self.uow:
            session = await self.uow.auth_sessions.get_by_id(session_id)
            if session is None:
                return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))

            now = self.clock.now()
            tokens = await self.uow.refresh_tokens.get_by_session_id(session_id)

            return Return.ok(
                TokenChainResponse(
                    session_id=str(session_id),
                    session_revoked=session.revoked_at is not None,
                    tokens=[
                        TokenChainEntry(
                            token_id=str(t.id),
                            state=t.state(now),
                            issued_at=t.issued_at,
                            expires_at=t.expires_at,
                            used_at=t.used_at,
                            revoked_at=t.revoked_at,
                            replaced_by=str(t.replaced_by) if t.replaced_by else None,
                        )
                        for t in tokens
                    ],
                )
            )
