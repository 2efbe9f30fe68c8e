"""
Validate Token Use Case

Read-only check whether a refresh token is usable right now.
"""

from typing import Optional

from libs.result import Result, Return
from src.adapter.services.clock import SystemClock
from src.adapter.services.token_generator import SecureTokenGenerator
from src.app.services.clock import IClock
from src.app.services.token_generator import ITokenGenerator
from src.app.services.unit_of_work import UnitOfWork


class ValidateTokenUseCase:
    """
    Use case answering "is this token current and valid?".

    True iff the hash matches a row that is unused, unrevoked, unreplaced and
    unexpired AND its session is not revoked. Evaluated as one joined query.
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

    async def execute(self, refresh_token: str) -> Result[bool]:
        async with self.uow:
            token = await self.uow.refresh_tokens.find_valid_by_hash(
                self.token_generator.hash(refresh_token), self.clock.now()
            )
            return Return.ok(token is not None)
