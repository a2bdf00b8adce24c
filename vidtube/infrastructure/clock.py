from __future__ import annotations

from datetime import datetime, timezone

from vidtube.application.ports.clock_port import ClockPort


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SystemClock(ClockPort):
    def now(self) -> datetime:
        return utcnow()
