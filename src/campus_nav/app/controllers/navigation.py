# campus_nav/app/controllers/navigation.py
from collections.abc import Callable

from campus_nav.config.models import NavigationModel
from campus_nav.domain.entities.geography import Coord, Pt, to_coord
from campus_nav.domain.entities.route import RouteProgress, RouteResult
from campus_nav.domain.mechanics.mechanics_geomath import haversine_m
from campus_nav.services.progress import route_progress
from campus_nav.services.routing import RouteService
from campus_nav.tracking.hooks import NavHooks, NoopHooks

RouteListener = Callable[[RouteResult], object]


class NavigationController:
    """
    Recomputes the route when a destination is picked and whenever the smoothed
    position has moved at least reroute_min_move_m from where the current route
    was computed. Everything runs synchronously inside the triggering call.
    """

    def __init__(
        self,
        routes: RouteService,
        cfg: NavigationModel | None = None,
        *,
        hooks: NavHooks | None = None,
    ):
        self.routes = routes
        self.cfg = cfg or NavigationModel()
        self._hooks = hooks or NoopHooks()
        self._listeners: list[RouteListener] = []
        self.destination: str | None = None
        self.position: Coord | None = None
        self.route: RouteResult | None = None
        self._routed_from: Coord | None = None
        self._arrived = False

    def on_route(self, listener: RouteListener) -> None:
        self._listeners.append(listener)

    # ------------ triggers --------------

    def select_destination(self, building: str) -> RouteResult | None:
        self.destination = building
        self._arrived = False
        return self._recompute() if self.position is not None else None

    def clear_destination(self) -> None:
        self.destination = None
        self.route = None
        self._routed_from = None
        self._arrived = False

    def on_position(self, p: Pt) -> RouteResult | None:
        self.position = to_coord(p)
        if self.destination is None:
            return None
        if self._routed_from is not None and self.route is not None:
            moved = haversine_m(self._routed_from, self.position)
            if moved < self.cfg.reroute_min_move_m:
                self._check_arrival()
                return None
        return self._recompute()

    # ------------ queries --------------

    def progress(self) -> RouteProgress | None:
        if self.route is None or self.position is None:
            return None
        return route_progress(
            self.route,
            self.position,
            walking_speed_mps=self.cfg.walking_speed_mps,
            arrival_radius_m=self.cfg.arrival_radius_m,
        )

    @property
    def arrived(self) -> bool:
        return self._arrived

    # ------------ internals --------------

    def _recompute(self) -> RouteResult:
        res = self.routes.compute_route(self.position, self.destination)
        self.route = res
        self._routed_from = self.position
        for listener in self._listeners:
            listener(res)
        self._check_arrival()
        return res

    def _check_arrival(self) -> None:
        if self._arrived:
            return
        prog = self.progress()
        if prog is not None and prog.arrived:
            self._arrived = True
            self._hooks.arrived(destination=self.destination)
