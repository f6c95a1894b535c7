# campus_nav/app/build.py
from collections.abc import Mapping
from dataclasses import dataclass

from campus_nav.app.controllers.navigation import NavigationController
from campus_nav.app.protocols import Clock, PositionSource
from campus_nav.config.models import NavigatorModel
from campus_nav.domain.graph import GraphModel
from campus_nav.domain.mechanics.mechanics_core import Mechanics
from campus_nav.domain.mechanics.mechanics_factory import build_mechanics
from campus_nav.io.nav_logging import NavLogging  # JSON logs
from campus_nav.io.sources import ManualPositionSource
from campus_nav.runtime.registries import resolve_graph
from campus_nav.services.routing import RouteService
from campus_nav.tracking.clock import WallClock
from campus_nav.tracking.hooks import NoopHooks
from campus_nav.tracking.tracker import PositionTracker


@dataclass
class App:
    config: NavigatorModel
    clock: Clock
    graph: GraphModel
    mechanics: Mechanics
    routes: RouteService
    tracker: PositionTracker
    navigation: NavigationController


def build(
    cfg: NavigatorModel | Mapping | None = None,
    *,
    source: PositionSource | None = None,
    clock: Clock | None = None,
    graphs: Mapping[str, GraphModel] | None = None,
    use_logging: bool = True,
) -> App:
    # 0) Validate config
    if cfg is None:
        model = NavigatorModel()
    else:
        model = cfg if isinstance(cfg, NavigatorModel) else NavigatorModel.model_validate(cfg)

    # 1) Clock & hooks
    clock = clock or WallClock()
    hooks = (
        NavLogging(name=model.name, clock=clock, level=model.log.level, debug=model.log.debug)
        if use_logging
        else NoopHooks()
    )

    # 2) Graph (read-only for the life of the app) & mechanics
    graph = resolve_graph(model.graph, deps={"graphs": dict(graphs or {})})
    mechanics = build_mechanics(model.mechanics)

    # 3) Services
    routes = RouteService(graph, mechanics, hooks=hooks)

    # 4) Controllers (inject deps explicitly)
    tracker = PositionTracker(
        source or ManualPositionSource(), model.tracking, clock=clock, hooks=hooks
    )
    navigation = NavigationController(routes, model.navigation, hooks=hooks)

    # 5) Wiring: smoothed fixes drive rerouting
    tracker.on_position(navigation.on_position)

    return App(model, clock, graph, mechanics, routes, tracker, navigation)
