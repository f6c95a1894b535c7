# campus_nav/services/routing.py
import math

from campus_nav.app.protocols import Mechanics, WeightedGraph
from campus_nav.domain.entities.geography import Attachment, Coord, Existing, OnEdge, Pt, to_coord
from campus_nav.domain.entities.route import OriginKind, RouteErrorKind, RouteResult
from campus_nav.domain.graph import GraphModel
from campus_nav.domain.mechanics.mechanics_core import Mechanics as DefaultMechanics
from campus_nav.domain.mechanics.mechanics_geomath import point_in_polygon
from campus_nav.domain.mechanics.mechanics_path_solvers import (
    AugmentedGraph,
    DijkstraSolver,
    NoPathFound,
)
from campus_nav.domain.mechanics.mechanics_snappers import NearestEdgeSnapper
from campus_nav.tracking.hooks import NavHooks, NoopHooks


def building_at(p: Coord, graph: GraphModel) -> str | None:
    """First building (in polygon table order) whose polygon contains p."""
    for building in graph.buildings_with_polygons():
        if any(point_in_polygon(p, ring) for ring in graph.polygons_of(building)):
            return building
    return None


def compute_route(
    user: Pt,
    destination: str,
    graph: GraphModel,
    *,
    mechanics: Mechanics | None = None,
) -> RouteResult:
    """
    Walking route from a live position to a building entrance.

    Origin: the exit of the building the user stands in, else the snap of the
    position onto the graph. Failures come back as RouteResult.error; nothing
    here raises for a missing entrance, exit or path.
    """
    m = mechanics or DefaultMechanics(NearestEdgeSnapper(), DijkstraSolver())
    p = to_coord(user)

    # 1) origin
    inside = building_at(p, graph)
    origin: Attachment
    if inside is not None:
        exit_node = graph.exit_of(inside)
        if exit_node is None:
            return RouteResult.failed(
                RouteErrorKind.NO_EXIT_DEFINED,
                f"No exit node for {inside}",
                origin_kind=OriginKind.INSIDE_BUILDING,
                start_building=inside,
            )
        origin, origin_kind = Existing(exit_node), OriginKind.INSIDE_BUILDING
    else:
        origin, origin_kind = m.snap(p, graph), OriginKind.SNAPPED

    # 2) destination
    dest_node = graph.entrance_of(destination)
    if dest_node is None:
        return RouteResult.failed(
            RouteErrorKind.NO_ENTRANCE_DEFINED,
            f"No entrance node for {destination}",
            origin_kind=origin_kind,
            start_building=inside,
            origin=origin,
        )

    # 3) per-query graph view
    search: WeightedGraph
    if isinstance(origin, OnEdge):
        search = AugmentedGraph(graph, origin)
        source = search.virtual
    else:
        search, source = graph, origin.node_id

    # 4) search
    try:
        solved = m.shortest_path(search, source, dest_node)
    except NoPathFound as exc:
        return RouteResult.failed(
            RouteErrorKind.NO_PATH_FOUND,
            str(exc),
            origin_kind=origin_kind,
            start_building=inside,
            origin=origin,
            destination_node=dest_node,
        )

    # 5) assembly
    return RouteResult(
        node_ids=solved.nodes,
        total_distance_m=math.floor(solved.total_length_m + 0.5),  # halves round up
        polyline=tuple(search.coord(n) for n in solved.nodes),
        origin_kind=origin_kind,
        start_building=inside,
        origin=origin,
        destination_node=dest_node,
        exact_distance_m=solved.total_length_m,
    )


class RouteService:
    """Binds one read-only graph to the routing mechanics and reports outcomes to hooks."""

    def __init__(self, graph: GraphModel, mechanics: Mechanics, hooks: NavHooks | None = None):
        self.graph = graph
        self.mechanics = mechanics
        self._hooks = hooks or NoopHooks()

    def destinations(self) -> tuple[str, ...]:
        return self.graph.destinations()

    def compute_route(self, user: Pt, destination: str) -> RouteResult:
        res = compute_route(user, destination, self.graph, mechanics=self.mechanics)
        if res.ok:
            self._hooks.route_computed(res, destination=destination)
        else:
            self._hooks.route_failed(res, destination=destination)
        return res
