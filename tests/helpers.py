"""Test helpers shared across unit, integration and adversarial suites."""

from datetime import datetime, timedelta, timezone

TOKEN_LIFETIME = timedelta(hours=24)
START = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock returning a fixed instant that tests move explicitly."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta
