# tracking/hooks.py
from typing import Protocol

from campus_nav.domain.entities.position import PositionSample, RejectReason
from campus_nav.domain.entities.route import RouteResult


class NavHooks(Protocol):
    def tracking_start(self, *, session: int): ...
    def tracking_stop(self, *, session: int, accepted: int, rejected: int): ...
    def sample_accepted(self, sample: PositionSample, *, smoothed, first: bool): ...
    def sample_rejected(self, sample: PositionSample, *, reason: RejectReason, **measured): ...
    def route_computed(self, res: RouteResult, *, destination: str): ...
    def route_failed(self, res: RouteResult, *, destination: str): ...
    def arrived(self, *, destination: str, t_ms: float | None = None): ...


class NoopHooks:
    def tracking_start(self, **_):
        pass

    def tracking_stop(self, **_):
        pass

    def sample_accepted(self, *_, **__):
        pass

    def sample_rejected(self, *_, **__):
        pass

    def route_computed(self, *_, **__):
        pass

    def route_failed(self, *_, **__):
        pass

    def arrived(self, **_):
        pass
