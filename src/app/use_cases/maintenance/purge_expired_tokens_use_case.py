"""
Use Case: Purge Expired Refresh Tokens

Retention cleanup for the append-only refresh token table. Intended to run
periodically from the maintenance CLI.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel

from config import ApplicationConfig
from libs.result import Error, Result, Return
from src.adapter.services.clock import SystemClock
from src.app.services.clock import IClock
from src.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class PurgeExpiredTokensResponse(BaseModel):
    """Response DTO for PurgeExpiredTokensUseCase"""

    purged_count: int
    cutoff: datetime


class PurgeExpiredTokensUseCase:
    """
    Delete refresh token rows that expired long ago.

    Business Logic:
    1. cutoff = now - retention
    2. Delete rows with expires_at < cutoff that are not current
       (used/replaced or revoked); current rows are never purged
    3. A row is deleted only after every row pointing at it is gone, so
       replaced_by never dangles; a kept row shields the rest of its chain
    4. Repeated DELETE passes served by idx_refresh_tokens_expires_at
    """

    def __init__(self, uow: UnitOfWork, clock: Optional[IClock] = None):
        self.uow = uow
        self.clock = clock or SystemClock()

    async def execute(
        self, retention: Optional[timedelta] = None
    ) -> Result[PurgeExpiredTokensResponse]:
        """
        Execute purge use case.

        Args:
            retention: How long expired rows are kept for audit
                (defaults to TOKEN_RETENTION_DAYS)

        Returns:
            Result with purge statistics, or Error(INVALID_RETENTION)
        """
        if retention is None:
            retention = timedelta(days=ApplicationConfig.TOKEN_RETENTION_DAYS)
        if retention < timedelta(0):
            return Return.err(
                Error("INVALID_RETENTION", "Retention period cannot be negative")
            )

        async with self.uow:
            cutoff = self.clock.now() - retention

            purged = await self.uow.refresh_tokens.purge_expired(cutoff)

            await self.uow.commit()

            logger.info(
                "Purged %d refresh token(s) expired before %s",
                purged,
                cutoff.isoformat(),
            )

            return Return.ok(
                PurgeExpiredTokensResponse(purged_count=purged, cutoff=cutoff)
            )
