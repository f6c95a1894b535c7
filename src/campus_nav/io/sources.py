# io/sources.py
import json
from collections.abc import Iterable
from pathlib import Path

from campus_nav.app.protocols import PositionSource, SampleCallback
from campus_nav.domain.entities.geography import Coord
from campus_nav.domain.entities.position import PositionSample


class ManualPositionSource(PositionSource):
    """In-process source: every push() is delivered synchronously to subscribers."""

    def __init__(self):
        self._subs: list[SampleCallback] = []

    @property
    def subscribers(self) -> int:
        return len(self._subs)

    def subscribe(self, callback: SampleCallback) -> None:
        self._subs.append(callback)

    def unsubscribe(self, callback: SampleCallback) -> None:
        if callback in self._subs:
            self._subs.remove(callback)

    def push(self, sample: PositionSample) -> None:
        for cb in list(self._subs):
            cb(sample)


class ReplayPositionSource(ManualPositionSource):
    """Replays a recorded list of samples, optionally moving a ManualClock along with them."""

    def __init__(self, samples: Iterable[PositionSample], *, clock=None, lag_ms: float = 0.0):
        super().__init__()
        self.samples = list(samples)
        self.clock, self.lag_ms = clock, lag_ms

    def replay(self) -> int:
        n = 0
        for s in self.samples:
            if self.clock is not None:
                self.clock.set(s.t_ms + self.lag_ms)
            self.push(s)
            n += 1
        return n


def sample_from_dict(d: dict) -> PositionSample:
    acc = d.get("accuracy")
    return PositionSample(
        coord=Coord(float(d["lat"]), float(d["lng"])),
        t_ms=float(d["t_ms"]),
        accuracy_m=None if acc is None else float(acc),
    )


def load_samples_jsonl(file: str | Path) -> list[PositionSample]:
    """One JSON object per line: {"lat": .., "lng": .., "t_ms": .., "accuracy": ..}."""
    out = []
    with open(file, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                out.append(sample_from_dict(json.loads(line)))
    return out
