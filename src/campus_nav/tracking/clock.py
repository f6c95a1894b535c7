# tracking/clock.py
from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import UTC, datetime

SEC_MS = 1_000.0


def to_wall(t_ms: float) -> datetime:
    """epoch milliseconds -> aware UTC datetime"""
    return datetime.fromtimestamp(t_ms / SEC_MS, tz=UTC)


def to_ms(dt: datetime) -> float:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.timestamp() * SEC_MS


class WallClock:
    def now_ms(self) -> float:
        return time.time() * SEC_MS


@dataclass
class ManualClock:
    """Clock that only moves when told to; for replays and tests."""

    t_ms: float = 0.0

    @classmethod
    def at(cls, y: int, m: int, d: int, hh=0, mm=0, ss=0) -> ManualClock:
        return cls(to_ms(datetime(y, m, d, hh, mm, ss, tzinfo=UTC)))

    def now_ms(self) -> float:
        return self.t_ms

    def advance(self, ms: float) -> float:
        if ms < 0:
            raise ValueError(f"clock cannot go backwards: {ms}")
        self.t_ms += ms
        return self.t_ms

    def set(self, t_ms: float) -> None:
        self.t_ms = t_ms
