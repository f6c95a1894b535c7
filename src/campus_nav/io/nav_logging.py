# io/nav_logging.py
import json
import logging
import sys

from campus_nav.tracking.clock import to_wall
from campus_nav.tracking.hooks import NoopHooks


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; event fields travel in record.extra."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {"level": record.levelname, "msg": record.getMessage(), "logger": record.name}
        fields = getattr(record, "extra", None)
        if isinstance(fields, dict):
            payload.update(fields)
        return json.dumps(payload, default=str)


def _default_json_logger(name="campus_nav", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(JsonLineFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class NavLogging(NoopHooks):
    """
    One place to shape and emit structured logs for tracking and routing.
    """

    def __init__(
        self,
        name: str = "campus",
        clock=None,
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
    ):
        self.name, self.clock, self.debug = name, clock, debug
        self.log = logger or _default_json_logger(level=level)
        self._session = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"app": self.name, "session": self._session}
        if self.clock is not None:
            payload["wall"] = to_wall(self.clock.now_ms()).isoformat()
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    @staticmethod
    def _shape_route(res) -> dict:
        out = {
            "origin_kind": res.origin_kind.value if res.origin_kind else None,
            "start_building": res.start_building,
            "destination_node": res.destination_node,
        }
        if res.ok:
            out.update(distance_m=res.total_distance_m, hops=max(0, len(res.node_ids) - 1))
        else:
            out.update(error=res.error.kind.value, detail=res.error.message)
        return out

    # --------------------------------------------------------

    # session lifecycle

    def tracking_start(self, *, session: int):
        self._session = session
        self._emit("INFO", "tracking_start")

    def tracking_stop(self, *, session: int, accepted: int, rejected: int):
        self._emit("INFO", "tracking_stop", accepted=accepted, rejected=rejected)

    # filter

    def sample_accepted(self, sample, *, smoothed, first: bool):
        if self.debug:
            self._emit(
                "DEBUG",
                "sample_accepted",
                t_ms=sample.t_ms,
                raw=(sample.coord.lat, sample.coord.lng),
                smoothed=(smoothed.lat, smoothed.lng),
                first=first,
            )

    def sample_rejected(self, sample, *, reason, **measured):
        self._emit(
            "INFO",
            "sample_rejected",
            reason=reason.value,
            t_ms=sample.t_ms,
            **{k: round(v, 3) for k, v in measured.items()},
        )

    # routing

    def route_computed(self, res, *, destination: str):
        self._emit("INFO", "route_computed", destination=destination, **self._shape_route(res))

    def route_failed(self, res, *, destination: str):
        self._emit("WARNING", "route_failed", destination=destination, **self._shape_route(res))

    def arrived(self, *, destination: str, t_ms: float | None = None):
        self._emit("INFO", "arrived", destination=destination, t_ms=t_ms)
