"""
Bind Key Thumbprint Use Case

Records the DPoP key thumbprint (cnf.jkt) of a session once the client has
completed the binding handshake. Proof verification happens upstream.
"""

from uuid import UUID

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from .dtos import SessionResponse


class BindKeyThumbprintUseCase:
    """
    Use case for binding a key thumbprint to a session.

    Business Rules:
    - A session is bound at most once; re-binding to a different key fails
    - Re-binding to the same key is an idempotent success
    - Revoked sessions cannot be bound
    - The check and the write are one conditional UPDATE, so two concurrent
      binds with different keys cannot both win
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, session_id: UUID, dpop_jkt: str) -> Result[SessionResponse]:
        """
        Execute bind key thumbprint use case.

        Returns:
            Result with SessionResponse, or Error
            (SESSION_NOT_FOUND, SESSION_REVOKED, ALREADY_BOUND)
        """
        async with self.uow:
            bound = await self.uow.auth_sessions.bind_dpop_jkt(session_id, dpop_jkt)

            if not bound:
                # Work out why the conditional update matched nothing
                session = await self.uow.auth_sessions.get_by_id(session_id)
                if session is None:
                    return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))
                if not session.is_active:
                    return Return.err(
                        Error("SESSION_REVOKED", "Session has been revoked")
                    )
                return Return.err(
                    Error(
                        "ALREADY_BOUND",
                        "Session is already bound to a different key",
                    )
                )

            await self.uow.commit()

            session = await self.uow.auth_sessions.get_by_id(session_id)
            return Return.ok(SessionResponse.from_entity(session))
