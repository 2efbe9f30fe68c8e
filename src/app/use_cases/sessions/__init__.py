"""
Session Manager Use Cases

Create, bind, touch, list and revoke logical sessions.
"""

from .create_session_use_case import CreateSessionUseCase
from .start_session_use_case import StartSessionUseCase, StartSessionResponse
from .bind_key_thumbprint_use_case import BindKeyThumbprintUseCase
from .touch_session_use_case import TouchSessionUseCase
from .revoke_sessions_use_case import RevokeSessionsUseCase
from .list_sessions_use_case import ListSessionsUseCase
from .dtos import (
    SessionResponse,
    SessionListResponse,
    RevokeSessionResponse,
    RevokeUserSessionsResponse,
)

__all__ = [
    # Use Cases
    "CreateSessionUseCase",
    "StartSessionUseCase",
    "BindKeyThumbprintUseCase",
    "TouchSessionUseCase",
    "RevokeSessionsUseCase",
    "ListSessionsUseCase",
    # DTOs
    "SessionResponse",
    "SessionListResponse",
    "StartSessionResponse",
    "RevokeSessionResponse",
    "RevokeUserSessionsResponse",
]
