"""
Maintenance Use Cases

Retention jobs run outside the request path.
"""

from .purge_expired_tokens_use_case import (
    PurgeExpiredTokensUseCase,
    PurgeExpiredTokensResponse,
)

__all__ = [
    "PurgeExpiredTokensUseCase",
    "PurgeExpiredTokensResponse",
]
