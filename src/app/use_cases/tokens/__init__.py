"""
Refresh Token Use Cases

Issuance, rotation with replay detection, revocation and validation.
"""

from .issue_token_use_case import IssueTokenUseCase
from .rotate_token_use_case import RotateTokenUseCase
from .revoke_token_use_case import RevokeTokenUseCase
from .validate_token_use_case import ValidateTokenUseCase
from .get_token_chain_use_case import GetTokenChainUseCase
from .dtos import (
    IssuedTokenResponse,
    RevokeTokenResponse,
    TokenChainEntry,
    TokenChainResponse,
)

__all__ = [
    # Use Cases
    "IssueTokenUseCase",
    "RotateTokenUseCase",
    "RevokeTokenUseCase",
    "ValidateTokenUseCase",
    "GetTokenChainUseCase",
    # DTOs
    "IssuedTokenResponse",
    "RevokeTokenResponse",
    "TokenChainEntry",
    "TokenChainResponse",
]
