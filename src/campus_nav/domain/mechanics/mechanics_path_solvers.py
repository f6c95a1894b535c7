import heapq
from collections.abc import Callable, Mapping

from campus_nav.app.protocols import PathSolver, WeightedGraph
from campus_nav.domain.entities.geography import Coord, NodeKey, OnEdge, VirtualNode
from campus_nav.domain.entities.route import SolvedPath
from campus_nav.domain.mechanics.mechanics_geomath import haversine_m


class NoPathFound(LookupError):
    def __init__(self, source: NodeKey, target: NodeKey):
        super().__init__(f"no path from {source!r} to {target!r}")
        self.source, self.target = source, target


class AugmentedGraph(WeightedGraph):
    """
    Overlay of a base graph plus one virtual node joined to both ends of the
    edge it was snapped onto. The base graph is never touched and the direct
    edge (a, b) stays in place next to the two new half-edges.
    """

    def __init__(self, base: WeightedGraph, att: OnEdge):
        self.base = base
        self.virtual = VirtualNode.of(att)
        a, b = att.edge
        self._links = {
            a: haversine_m(att.coord, base.coord(a)),
            b: haversine_m(att.coord, base.coord(b)),
        }

    def neighbors(self, node: NodeKey) -> Mapping[NodeKey, float]:
        if node == self.virtual:
            return self._links
        nbrs = self.base.neighbors(node)
        w = self._links.get(node)
        if w is None:
            return nbrs
        return {**nbrs, self.virtual: w}

    def coord(self, node: NodeKey) -> Coord:
        return self.virtual.coord if node == self.virtual else self.base.coord(node)


def _walk_back(prev: dict, source: NodeKey, target: NodeKey) -> tuple[NodeKey, ...]:
    path = [target]
    while path[-1] != source:
        path.append(prev[path[-1]])
    path.reverse()
    return tuple(path)


def _best_first(
    graph: WeightedGraph,
    source: NodeKey,
    target: NodeKey,
    h: Callable[[NodeKey], float],
) -> SolvedPath:
    # heap entries: (priority, seq, g, node); seq makes pops FIFO among equal priorities
    g: dict = {source: 0.0}
    prev: dict = {}
    done: set = set()
    seq = 0
    heap = [(h(source), seq, 0.0, source)]
    while heap:
        _, _, gu, u = heapq.heappop(heap)
        if u in done:
            continue
        if u == target:
            return SolvedPath(_walk_back(prev, source, target), gu)
        done.add(u)
        for v, w in graph.neighbors(u).items():
            if v in done:
                continue
            alt = gu + w
            if alt < g.get(v, float("inf")):
                g[v], prev[v] = alt, u
                seq += 1
                heapq.heappush(heap, (alt + h(v), seq, alt, v))
    raise NoPathFound(source, target)


class DijkstraSolver(PathSolver):
    """
    Dijkstra with a binary heap and early exit once the target is settled.
    Among equal-distance candidates the one discovered first is expanded first;
    with several shortest paths, which one is returned follows that order.
    """

    def shortest_path(self, graph, source, target) -> SolvedPath:
        return _best_first(graph, source, target, lambda _n: 0.0)


class AStarSolver(PathSolver):
    """A* with straight-line (haversine) distance to the target as heuristic."""

    def shortest_path(self, graph, source, target) -> SolvedPath:
        goal = graph.coord(target)
        return _best_first(graph, source, target, lambda n: haversine_m(graph.coord(n), goal))
