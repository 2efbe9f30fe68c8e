from datetime import datetime, timedelta

import pytest

from src.adapter.services.token_generator import SecureTokenGenerator
from src.app.services.clock import IClock


class FixedClock(IClock):
    """Clock that only moves when told to"""

    def __init__(self, start: datetime):
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current = self.current + delta


class StaticTokenGenerator(SecureTokenGenerator):
    """Always hands out the same opaque value - forces hash collisions"""

    def __init__(self, value: str = "static-refresh-token"):
        self.value = value

    def generate(self) -> str:
        return self.value


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 1, 1, 12, 0, 0))


@pytest.fixture
def token_generator():
    return SecureTokenGenerator()


@pytest.fixture
def static_token_generator():
    return StaticTokenGenerator()
