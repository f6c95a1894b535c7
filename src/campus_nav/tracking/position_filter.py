# tracking/position_filter.py
from campus_nav.app.protocols import Clock
from campus_nav.config.models import FilterModel
from campus_nav.domain.entities.geography import Coord
from campus_nav.domain.entities.position import (
    FilterState,
    PositionSample,
    RejectReason,
    TrackingState,
)
from campus_nav.domain.mechanics.mechanics_geomath import haversine_m
from campus_nav.tracking.clock import SEC_MS, WallClock
from campus_nav.tracking.hooks import NavHooks, NoopHooks


class PositionFilter:
    """
    Turns noisy position fixes into a smoothed stream, one sample at a time.

    Gates, in order: staleness, reported accuracy, implausible speed. Accepted
    fixes are blended into the running estimate with an EMA; the first accepted
    fix of a session is emitted unchanged. One instance per tracking session.
    """

    def __init__(
        self,
        cfg: FilterModel | None = None,
        *,
        clock: Clock | None = None,
        hooks: NavHooks | None = None,
    ):
        self.cfg = cfg or FilterModel()
        self.clock = clock or WallClock()
        self._hooks = hooks or NoopHooks()
        self._s = FilterState()
        self.accepted = 0
        self.rejected = 0

    @property
    def state(self) -> TrackingState:
        return self._s.state

    @property
    def smoothed(self) -> Coord | None:
        return self._s.smoothed

    @property
    def last_accuracy_m(self) -> float | None:
        return self._s.last_accuracy_m

    def reset(self) -> None:
        self._s = FilterState()
        self.accepted = self.rejected = 0

    def _reject(self, sample: PositionSample, reason: RejectReason, **measured) -> None:
        self.rejected += 1
        self._hooks.sample_rejected(sample, reason=reason, **measured)

    def process(self, sample: PositionSample) -> Coord | None:
        """Return the new smoothed coordinate, or None if the sample was discarded."""
        cfg, s = self.cfg, self._s

        age_ms = self.clock.now_ms() - sample.t_ms
        if age_ms > cfg.stale_threshold_ms:
            self._reject(sample, RejectReason.STALE, age_ms=age_ms)
            return None

        if sample.accuracy_m is not None and sample.accuracy_m > cfg.accuracy_max_m:
            self._reject(sample, RejectReason.LOW_ACCURACY, accuracy_m=sample.accuracy_m)
            return None

        prev = s.last_raw
        if prev is not None:
            dt_s = max(1.0, (sample.t_ms - prev.t_ms) / SEC_MS)
            d = haversine_m(prev.coord, sample.coord)
            allowed = cfg.jump_guard_speed_mps * dt_s + cfg.jump_slack_m
            if d > allowed:
                self._reject(
                    sample, RejectReason.IMPLAUSIBLE_JUMP, jump_m=d, allowed_m=allowed, dt_s=dt_s
                )
                return None

        first = s.smoothed is None
        if first:
            smoothed = sample.coord
        else:
            a, cur = cfg.alpha, s.smoothed
            smoothed = Coord(
                cur.lat + a * (sample.coord.lat - cur.lat),
                cur.lng + a * (sample.coord.lng - cur.lng),
            )

        s.smoothed = smoothed
        s.last_raw = sample
        s.last_accuracy_m = sample.accuracy_m
        self.accepted += 1
        self._hooks.sample_accepted(sample, smoothed=smoothed, first=first)
        return smoothed

    def age_ms(self, now_ms: float | None = None) -> float | None:
        """Time since the last accepted fix was taken."""
        if self._s.last_raw is None:
            return None
        now = self.clock.now_ms() if now_ms is None else now_ms
        return now - self._s.last_raw.t_ms

    def is_stale(self, now_ms: float | None = None) -> bool:
        """Display hint: keep showing the last position but mark it as possibly outdated."""
        age = self.age_ms(now_ms)
        return age is not None and age > 2 * self.cfg.stale_threshold_ms
