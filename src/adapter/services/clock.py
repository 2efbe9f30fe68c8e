from datetime import datetime

from src.app.services.clock import IClock
from src.domain.base import utc_now


class SystemClock(IClock):
    """Wall clock, naive UTC"""

    def now(self) -> datetime:
        return utc_now()
