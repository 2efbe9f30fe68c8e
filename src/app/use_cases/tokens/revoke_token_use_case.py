"""
Revoke Token Use Case

Explicit logout of one token chain. No replacement is minted.
"""

from typing import Optional

from libs.result import Error, Result, Return
from src.adapter.services.clock import SystemClock
from src.adapter.services.token_generator import SecureTokenGenerator
from src.app.services.clock import IClock
from src.app.services.token_generator import ITokenGenerator
from src.app.services.unit_of_work import UnitOfWork
from .dtos import RevokeTokenResponse


class RevokeTokenUseCase:
    """
    Use case for revoking a single refresh token.

    Business Rules:
    - Sets revoked_at on the matching row only; the session stays active
    - Already revoked tokens are an idempotent success (revoked=False)
    - Presenting the revoked token for rotation later counts as a replay
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

    async def execute(self, refresh_token: str) -> Result[RevokeTokenResponse]:
        async with self.uow:
            token = await self.uow.refresh_tokens.get_by_hash(
                self.token_generator.hash(refresh_token)
            )
            if token is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid refresh token"))

            revoked = await self.uow.refresh_tokens.revoke(token.id, self.clock.now())

            await self.uow.commit()

            return Return.ok(
                RevokeTokenResponse(
                    token_id=str(token.id),
                    session_id=str(token.session_id),
                    revoked=revoked,
                )
            )
