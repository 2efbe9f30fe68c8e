"""
Rotate Token Use Case

Exchanges a current refresh token for a new one, with replay detection.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError

from libs.result import Error, Result, Return
from src.adapter.services.clock import SystemClock
from src.adapter.services.token_generator import SecureTokenGenerator
from src.app.services.clock import IClock
from src.app.services.token_generator import ITokenGenerator
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuthSession
from .dtos import IssuedTokenResponse
from .factory import default_refresh_ttl, mint_refresh_token

logger = logging.getLogger(__name__)


class RotateTokenUseCase:
    """
    Use case for refresh token rotation.

    Business Rules:
    - Single use: a token is consumed (used_at + replaced_by) exactly once
    - The owning session is locked and checked inside the rotation transaction,
      so a revocation that committed first always wins
    - Presenting a used, revoked or replaced token is a replay: the whole
      session and all its tokens are revoked and committed before failing
    - Expired tokens are rejected without rotating
    - Consume + insert successor + touch session commit together; the
      consume is a compare-and-set, so of two concurrent rotations exactly one
      succeeds and the other takes the replay path
    """

    def __init__(
        self,
        uow: UnitOfWork,
        token_generator: Optional[ITokenGenerator] = None,
        clock: Optional[IClock] = None,
        ttl: Optional[timedelta] = None,
    ):
        self.uow = uow
        self.token_generator = token_generator or SecureTokenGenerator()
        self.clock = clock or SystemClock()
        self.ttl = ttl or default_refresh_ttl()

    async def execute(self, refresh_token: str) -> Result[IssuedTokenResponse]:
        """
        Execute rotate token use case.

        Args:
            refresh_token: The opaque refresh token presented by the client

        Returns:
            Result with the new token, or Error
            (INVALID_TOKEN, SESSION_NOT_FOUND, SESSION_REVOKED, REPLAY_DETECTED,
            TOKEN_EXPIRED, CONSTRAINT_VIOLATION)
        """
        token_hash = self.token_generator.hash(refresh_token)

        async with self.uow:
            now = self.clock.now()

            token = await self.uow.refresh_tokens.get_by_hash(token_hash)
            if token is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid refresh token"))

            session = await self.uow.auth_sessions.get_by_id_for_update(
                token.session_id
            )
            if session is None:
                return Return.err(Error("SESSION_NOT_FOUND", "Session not found"))
            if not session.is_active:
                return Return.err(Error("SESSION_REVOKED", "Session has been revoked"))

            if token.is_consumed:
                return await self._contain_replay(session, now)

            if token.is_expired(now):
                return Return.err(Error("TOKEN_EXPIRED", "Refresh token has expired"))

            opaque_token, successor = mint_refresh_token(
                self.token_generator, session.id, now, self.ttl
            )

            token_id, session_id = token.id, session.id
            consumed = await self.uow.refresh_tokens.consume(token_id, successor.id, now)
            if not consumed:
                # Another rotation or a revocation got there first
                return await self._contain_replay(session, now)

            try:
                await self.uow.refresh_tokens.create(successor)
                await self.uow.auth_sessions.touch(session.id, now)
                await self.uow.commit()
            except IntegrityError:
                await self.uow.rollback()
                logger.warning(
                    "Rotation of token %s in session %s rejected by constraint",
                    token_id,
                    session_id,
                )
                return Return.err(
                    Error(
                        "CONSTRAINT_VIOLATION",
                        "Rotated token conflicts with an existing token",
                        reason="token hash collision",
                    )
                )

            logger.debug(
                "Rotated refresh token %s -> %s (session %s)",
                token.id,
                successor.id,
                session.id,
            )

            return Return.ok(
                IssuedTokenResponse.from_entity(
                    opaque_token, successor, replaces_token_id=str(token.id)
                )
            )

    async def _contain_replay(
        self, session: AuthSession, now: datetime
    ) -> Result[IssuedTokenResponse]:
        """Revoke the session and every token it owns, commit, then fail"""
        await self.uow.auth_sessions.revoke(session.id, now)
        revoked_tokens = await self.uow.refresh_tokens.revoke_all_by_session_id(
            session.id, now
        )
        await self.uow.commit()

        logger.warning(
            "Refresh token replay detected: revoked session %s (user %s) and %d token(s)",
            session.id,
            session.user_id,
            revoked_tokens,
        )

        return Return.err(
            Error(
                "REPLAY_DETECTED",
                "Refresh token reuse detected; session revoked",
            )
        )
