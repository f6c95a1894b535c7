# tracking/tracker.py
from campus_nav.app.protocols import Clock, PositionConsumer, PositionSource
from campus_nav.config.models import FilterModel
from campus_nav.domain.entities.geography import Coord
from campus_nav.domain.entities.position import PositionSample, TrackingState
from campus_nav.tracking.hooks import NavHooks, NoopHooks
from campus_nav.tracking.position_filter import PositionFilter


class PositionTracker:
    """
    One tracking session over a position source.

    start() subscribes and begins from a fresh filter state; stop() unsubscribes
    and drops that state. Smoothed fixes go to every registered consumer in
    registration order.
    """

    def __init__(
        self,
        source: PositionSource,
        cfg: FilterModel | None = None,
        *,
        clock: Clock | None = None,
        hooks: NavHooks | None = None,
    ):
        self.source = source
        self._hooks = hooks or NoopHooks()
        self.filter = PositionFilter(cfg, clock=clock, hooks=self._hooks)
        self._consumers: list[PositionConsumer] = []
        self._running = False
        self._session = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def state(self) -> TrackingState:
        return self.filter.state

    @property
    def position(self) -> Coord | None:
        return self.filter.smoothed

    def on_position(self, consumer: PositionConsumer) -> None:
        self._consumers.append(consumer)

    def start(self) -> None:
        if self._running:
            self.stop()
        self.filter.reset()
        self._session += 1
        self.source.subscribe(self._on_sample)
        self._running = True
        self._hooks.tracking_start(session=self._session)

    def stop(self) -> None:
        if not self._running:
            return
        self.source.unsubscribe(self._on_sample)
        self._running = False
        self._hooks.tracking_stop(
            session=self._session, accepted=self.filter.accepted, rejected=self.filter.rejected
        )
        self.filter.reset()

    def is_stale(self, now_ms: float | None = None) -> bool:
        return self.filter.is_stale(now_ms)

    def _on_sample(self, sample: PositionSample) -> None:
        smoothed = self.filter.process(sample)
        if smoothed is None:
            return
        for consumer in self._consumers:
            consumer(smoothed)
