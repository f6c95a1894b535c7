from collections.abc import Callable, Mapping
from typing import Protocol, runtime_checkable

from campus_nav.domain.entities.geography import Attachment, Coord, NodeKey
from campus_nav.domain.entities.position import PositionSample
from campus_nav.domain.entities.route import SolvedPath


# ------------- Mechanics --------------------
@runtime_checkable
class WeightedGraph(Protocol):
    """
    Read-only view a path solver searches over.
    Units: meters for weights; degrees for coordinates.
    """

    def neighbors(self, node: NodeKey) -> Mapping[NodeKey, float]: ...
    def coord(self, node: NodeKey) -> Coord: ...


@runtime_checkable
class Snapper(Protocol):
    """
    Responsibilities:
      • Attach a free coordinate to the walking graph, either at an existing node
        or at a point on an edge interior.
      • Never mutate the graph.
    """

    def snap(self, p: Coord, graph) -> Attachment: ...


@runtime_checkable
class PathSolver(Protocol):
    """
    Responsibilities:
      • Shortest path over non-negative weights between two graph keys.
      • Raise NoPathFound when the target is unreachable.
    """

    def shortest_path(self, graph: WeightedGraph, source: NodeKey, target: NodeKey) -> SolvedPath: ...


@runtime_checkable
class Mechanics(Protocol):
    """Convenience façade bundling the routing components."""

    snapper: Snapper
    path_solver: PathSolver

    def snap(self, p: Coord, graph) -> Attachment: ...
    def shortest_path(self, graph: WeightedGraph, source: NodeKey, target: NodeKey) -> SolvedPath: ...


# ------------- Tracking --------------------

SampleCallback = Callable[[PositionSample], None]
PositionConsumer = Callable[[Coord], object]


@runtime_checkable
class PositionSource(Protocol):
    """Pushes samples one at a time; a callback returns before the next sample is delivered."""

    def subscribe(self, callback: SampleCallback) -> None: ...
    def unsubscribe(self, callback: SampleCallback) -> None: ...


@runtime_checkable
class Clock(Protocol):
    def now_ms(self) -> float: ...
