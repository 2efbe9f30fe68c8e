from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import RefreshToken


class IRefreshTokenRepository(ABC):
    """RefreshToken repository interface - application layer"""

    @abstractmethod
    async def create(self, token: RefreshToken) -> RefreshToken:
        """Insert a newly issued token (unique constraints checked on flush)"""
        pass

    @abstractmethod
    async def get_by_id(self, token_id: UUID) -> Optional[RefreshToken]:
        """Get token by ID"""
        pass

    @abstractmethod
    async def get_by_hash(self, token_hash: bytes) -> Optional[RefreshToken]:
        """Get token by hash regardless of its state"""
        pass

    @abstractmethod
    async def get_current_by_session_id(self, session_id: UUID) -> Optional[RefreshToken]:
        """Get the session's current token (not revoked, not replaced), if any"""
        pass

    @abstractmethod
    async def get_by_session_id(self, session_id: UUID) -> List[RefreshToken]:
        """Get every token of a session ordered by issued_at"""
        pass

    @abstractmethod
    async def find_valid_by_hash(
        self, token_hash: bytes, now: datetime
    ) -> Optional[RefreshToken]:
        """
        Get token by hash only if it is usable right now:
        unused, unrevoked, unreplaced, unexpired, and its session is not revoked.
        """
        pass

    @abstractmethod
    async def consume(self, token_id: UUID, replaced_by: UUID, now: datetime) -> bool:
        """
        Mark a current token used and link it to its successor.

        Guarded by the current predicate; returns False if another transaction
        consumed or revoked it first.
        """
        pass

    @abstractmethod
    async def revoke(self, token_id: UUID, now: datetime) -> bool:
        """Revoke a token. Returns True if it was not already revoked."""
        pass

    @abstractmethod
    async def revoke_all_by_session_id(self, session_id: UUID, now: datetime) -> int:
        """Revoke every unrevoked token of a session. Returns count."""
        pass

    @abstractmethod
    async def purge_expired(self, cutoff: datetime) -> int:
        """Delete non-current tokens that expired before cutoff. Returns count."""
        pass
