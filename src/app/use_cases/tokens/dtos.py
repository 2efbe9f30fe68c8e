"""
Token Use Case DTOs (Data Transfer Objects)

Response classes for the refresh token rotation engine.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.domain.entities import RefreshToken, TokenState


class IssuedTokenResponse(BaseModel):
    """
    A newly minted refresh token.

    refresh_token is the only copy of the opaque value; the store keeps its hash.
    """

    refresh_token: str
    token_id: str
    session_id: str
    issued_at: datetime
    expires_at: datetime
    replaces_token_id: Optional[str] = None

    @classmethod
    def from_entity(
        cls,
        opaque_token: str,
        token: RefreshToken,
        replaces_token_id: Optional[str] = None,
    ) -> "IssuedTokenResponse":
        return cls(
            refresh_token=opaque_token,
            token_id=str(token.id),
            session_id=str(token.session_id),
            issued_at=token.issued_at,
            expires_at=token.expires_at,
            replaces_token_id=replaces_token_id,
        )


class RevokeTokenResponse(BaseModel):
    """Response for revoking one refresh token"""

    token_id: str
    session_id: str
    revoked: bool


class TokenChainEntry(BaseModel):
    """One link of a session's rotation chain"""

    token_id: str
    state: TokenState
    issued_at: datetime
    expires_at: datetime
    used_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None
    replaced_by: Optional[str] = None


class TokenChainResponse(BaseModel):
    """Response for get token chain use case"""

    session_id: str
    session_revoked: bool
    tokens: List[TokenChainEntry]
