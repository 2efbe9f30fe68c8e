"""
Auth Store Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import IssuePolicy, TokenState

# Export all entities
from .user import User
from .post import Post
from .bookmark import Bookmark
from .auth_session import AuthSession
from .refresh_token import RefreshToken

__all__ = [
    # Enums
    "IssuePolicy",
    "TokenState",
    # Entities
    "User",
    "Post",
    "Bookmark",
    "AuthSession",
    "RefreshToken",
]
