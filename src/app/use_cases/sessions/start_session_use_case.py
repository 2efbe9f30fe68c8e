"""
Start Session Use Case

Login-time flow: open a session and issue its first refresh token atomically.
"""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from libs.result import Error, Result, Return
from src.adapter.services.clock import SystemClock
from src.adapter.services.token_generator import SecureTokenGenerator
from src.app.services.clock import IClock
from src.app.services.token_generator import ITokenGenerator
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.tokens.dtos import IssuedTokenResponse
from src.app.use_cases.tokens.factory import default_refresh_ttl, mint_refresh_token
from src.domain.entities import AuthSession
from .dtos import SessionResponse

logger = logging.getLogger(__name__)


class StartSessionResponse(BaseModel):
    """Response for start session use case"""

    session: SessionResponse
    token: IssuedTokenResponse


class StartSessionUseCase:
    """
    Use case for starting an authenticated session.

    Business Rules:
    - User must exist (authentication itself happens upstream)
    - Session and first refresh token commit together or not at all
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_generator: Optional[ITokenGenerator] = None,
        clock: Optional[IClock] = None,
    ):
        self.uow = uow
        self.token_generator = token_generator or SecureTokenGenerator()
        self.clock = clock or SystemClock()

    async def execute(
        self,
        user_id: UUID,
        dpop_jkt: Optional[str] = None,
        ttl: Optional[timedelta] = None,
    ) -> Result[StartSessionResponse]:
        """
        Execute start session use case.

        Returns:
            Result with StartSessionResponse, or Error
            (USER_NOT_FOUND, CONSTRAINT_VIOLATION)
        """
        ttl = ttl or default_refresh_ttl()

        async with self.uow:
            now = self.clock.now()

            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            session = AuthSession(user_id=user.id, dpop_jkt=dpop_jkt, created_at=now)
            opaque_token, token = mint_refresh_token(
                self.token_generator, session.id, now, ttl
            )

            try:
                await self.uow.auth_sessions.create(session)
                await self.uow.refresh_tokens.create(token)
                await self.uow.commit()
            except IntegrityError:
                await self.uow.rollback()
                logger.warning("Session start for user %s rejected by constraint", user_id)
                return Return.err(
                    Error(
                        "CONSTRAINT_VIOLATION",
                        "Refresh token conflicts with an existing token",
                        reason="token hash collision",
                    )
                )

            logger.info("Started session %s for user %s", session.id, user_id)

            return Return.ok(
                StartSessionResponse(
                    session=SessionResponse.from_entity(session),
                    token=IssuedTokenResponse.from_entity(opaque_token, token),
                )
            )
