import hashlib
import secrets

from src.app.services.token_generator import ITokenGenerator

# 32 bytes of entropy -> 43 char URL-safe base64 string
TOKEN_ENTROPY_BYTES = 32


class SecureTokenGenerator(ITokenGenerator):
    """secrets-based opaque tokens, SHA-256 digests (raw 32 bytes)"""

    def generate(self) -> str:
        return secrets.token_urlsafe(TOKEN_ENTROPY_BYTES)

    def hash(self, token: str) -> bytes:
        return hashlib.sha256(token.encode()).digest()
