from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    def now_utc(self) -> datetime:
        ...


class SystemClock:
    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Test clock pinned to one instant; ``advance`` moves it forward."""

    def __init__(self, fixed_dt: datetime):
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self._fixed_dt = fixed_dt

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def advance(self, **delta) -> None:
        self._fixed_dt = self._fixed_dt + timedelta(**delta)
