from abc import ABC, abstractmethod


class ITokenGenerator(ABC):
    """Opaque token source and one-way hash - application layer"""

    @abstractmethod
    def generate(self) -> str:
        """Fresh random opaque token value"""
        pass

    @abstractmethod
    def hash(self, token: str) -> bytes:
        """One-way digest of a token value, as stored in refresh_tokens.token_hash"""
        pass
