"""
Session Use Case DTOs (Data Transfer Objects)

Response classes for the session manager.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.domain.entities import AuthSession


class SessionResponse(BaseModel):
    """Snapshot of one auth session"""

    session_id: str
    user_id: str
    dpop_jkt: Optional[str] = None
    created_at: datetime
    last_used_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, session: AuthSession) -> "SessionResponse":
        return cls(
            session_id=str(session.id),
            user_id=str(session.user_id),
            dpop_jkt=session.dpop_jkt,
            created_at=session.created_at,
            last_used_at=session.last_used_at,
            revoked_at=session.revoked_at,
        )


class SessionListResponse(BaseModel):
    """Response for list user sessions use case"""

    user_id: str
    sessions: List[SessionResponse]


class RevokeSessionResponse(BaseModel):
    """Response for revoking one session"""

    session_id: str
    revoked: bool


class RevokeUserSessionsResponse(BaseModel):
    """Response for revoking every session of a user"""

    user_id: str
    revoked_count: int
