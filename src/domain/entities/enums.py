"""
Auth Store Domain Enums

All enumeration types used across domain entities and use cases.
"""

from enum import Enum


class TokenState(str, Enum):
    """Derived lifecycle state of a refresh token"""

    current = "current"
    used = "used"
    revoked = "revoked"
    expired = "expired"


class IssuePolicy(str, Enum):
    """What IssueToken does when the session already has a current token"""

    reject = "reject"
    supersede = "supersede"
