from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from src.domain.entities import AuthSession


class IAuthSessionRepository(ABC):
    """AuthSession repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[AuthSession]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def get_by_id_for_update(self, session_id: UUID) -> Optional[AuthSession]:
        """Get session by ID, holding a row lock until the transaction ends"""
        pass

    @abstractmethod
    async def get_by_user_id(
        self, user_id: UUID, active_only: bool = False
    ) -> List[AuthSession]:
        """Get sessions for a user, newest first"""
        pass

    @abstractmethod
    async def create(self, session: AuthSession) -> AuthSession:
        """Create a new session"""
        pass

    @abstractmethod
    async def bind_dpop_jkt(self, session_id: UUID, dpop_jkt: str) -> bool:
        """
        Set dpop_jkt on an active session if it is unbound or already equal.

        Returns True if the row matched (bound now or already bound to the same value).
        """
        pass

    @abstractmethod
    async def touch(self, session_id: UUID, now: datetime) -> bool:
        """Set last_used_at on an active session. Returns True if updated."""
        pass

    @abstractmethod
    async def revoke(self, session_id: UUID, now: datetime) -> bool:
        """Revoke an active session. Returns True if it was active."""
        pass

    @abstractmethod
    async def revoke_all_by_user_id(self, user_id: UUID, now: datetime) -> int:
        """Revoke all active sessions of a user. Returns count of revoked sessions."""
        pass
