"""
Refresh token minting shared by login, issuance and rotation.
"""

from datetime import datetime, timedelta
from typing import Tuple
from uuid import UUID

from config import ApplicationConfig
from src.app.services.token_generator import ITokenGenerator
from src.domain.entities import IssuePolicy, RefreshToken


def default_refresh_ttl() -> timedelta:
    return timedelta(seconds=ApplicationConfig.REFRESH_TOKEN_TTL_SECONDS)


def default_issue_policy() -> IssuePolicy:
    return IssuePolicy(ApplicationConfig.REFRESH_TOKEN_ISSUE_POLICY)


def mint_refresh_token(
    generator: ITokenGenerator,
    session_id: UUID,
    now: datetime,
    ttl: timedelta,
) -> Tuple[str, RefreshToken]:
    """
    Create a fresh opaque token and its (unsaved) row.

    Returns:
        (opaque token for the client, RefreshToken holding only its hash)
    """
    opaque_token = generator.generate()
    token = RefreshToken(
        session_id=session_id,
        token_hash=generator.hash(opaque_token),
        issued_at=now,
        expires_at=now + ttl,
    )
    return opaque_token, token
