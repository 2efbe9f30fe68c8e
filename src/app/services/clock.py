from abc import ABC, abstractmethod
from datetime import datetime


class IClock(ABC):
    """Clock source for timestamps - application layer"""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as naive UTC"""
        pass
