"""
Issue Token Use Case

Mints a refresh token for an existing session.
"""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from libs.result import Error, Result, Return
from src.adapter.services.clock import SystemClock
from src.adapter.services.token_generator import SecureTokenGenerator
from src.app.services.clock import IClock
from src.app.services.token_generator import ITokenGenerator
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import IssuePolicy
from .dtos import IssuedTokenResponse
from .factory import default_issue_policy, default_refresh_ttl, mint_refresh_token

logger = logging.getLogger(__name__)


class IssueTokenUseCase:
    """
    Use case for issuing a refresh token to a session.

    Business Rules:
    - Session must exist and not be revoked
    - At most one current token per session:
      - reject policy: fail with TOKEN_ALREADY_CURRENT
      - supersede policy: revoke the current token in the same transaction
    - An expired current token is dead weight and is revoked under either policy
    - The session row is locked for the whole transaction, same as rotation
    - Unique violations at insert (hash collision, lost race for the current
      slot) surface as CONSTRAINT_VIOLATION; the caller retries
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
        session_id: UUID,
        ttl: Optional[timedelta] = None,
        policy: Optional[IssuePolicy] = None,
    ) -> Result[IssuedTokenResponse]:
        """
        Execute issue token use case.

        Args:
            session_id: Session the token is bound to
            ttl: Token lifetime (defaults to REFRESH_TOKEN_TTL_SECONDS)
            policy: What to do with an existing current token
                (defaults to REFRESH_TOKEN_ISSUE_POLICY)

        Returns:
            Result with IssuedTokenResponse, or Error
            (SESSION_NOT_FOUND, SESSION_REVOKED, TOKEN_ALREADY_CURRENT,
            CONSTRAINT_VIOLATION)
        """
        ttl = ttl or default_refresh_ttl()
        policy = policy or default_issue_policy()

        async with self.uow:
            now = self.clock.now()

            session = await self.uow.auth_sessions.get_by_id_for_update(session_id)
            if session is None:
                return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))
            if not session.is_active:
                return Return.err(Error("SESSION_REVOKED", "Session has been revoked"))

            current = await self.uow.refresh_tokens.get_current_by_session_id(session_id)
            if current is not None:
                if policy == IssuePolicy.reject and not current.is_expired(now):
                    return Return.err(
                        Error(
                            "TOKEN_ALREADY_CURRENT",
                            "Session already has a current refresh token",
                        )
                    )
                await self.uow.refresh_tokens.revoke(current.id, now)

            opaque_token, token = mint_refresh_token(
                self.token_generator, session_id, now, ttl
            )

            try:
                await self.uow.refresh_tokens.create(token)
                await self.uow.commit()
            except IntegrityError:
                await self.uow.rollback()
                logger.warning(
                    "Refresh token insert rejected by constraint for session %s",
                    session_id,
                )
                return Return.err(
                    Error(
                        "CONSTRAINT_VIOLATION",
                        "Refresh token conflicts with an existing token",
                        reason="token hash collision or concurrent issuance",
                    )
                )

            logger.debug(
                "Issued refresh token %s for session %s (expires %s)",
                token.id,
                session_id,
                token.expires_at.isoformat(),
            )

            return Return.ok(IssuedTokenResponse.from_entity(opaque_token, token))
