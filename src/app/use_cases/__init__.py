"""
Use Cases

Organized into domain folders:
- sessions/: Session manager
- tokens/: Refresh token rotation engine
- maintenance/: Retention cleanup

Import from subdirectories for better organization.
"""

from .sessions import (
    CreateSessionUseCase,
    StartSessionUseCase,
    BindKeyThumbprintUseCase,
    TouchSessionUseCase,
    RevokeSessionsUseCase,
    ListSessionsUseCase,
)
from .tokens import (
    IssueTokenUseCase,
    RotateTokenUseCase,
    RevokeTokenUseCase,
    ValidateTokenUseCase,
    GetTokenChainUseCase,
)
from .maintenance import PurgeExpiredTokensUseCase

__all__ = [
    # Sessions
    "CreateSessionUseCase",
    "StartSessionUseCase",
    "BindKeyThumbprintUseCase",
    "TouchSessionUseCase",
    "RevokeSessionsUseCase",
    "ListSessionsUseCase",
    # Tokens
    "IssueTokenUseCase",
    "RotateTokenUseCase",
    "RevokeTokenUseCase",
    "ValidateTokenUseCase",
    "GetTokenChainUseCase",
    # Maintenance
    "PurgeExpiredTokensUseCase",
]
