# campus_nav/domain/graph.py
from collections.abc import Iterable, Mapping
from functools import cached_property
from math import isfinite
from types import MappingProxyType

import numpy as np

from campus_nav.domain.entities.geography import Coord, NodeId, Pt, Ring, to_coord, to_ring
from campus_nav.domain.mechanics.mechanics_geomath import haversine_m


class GraphError(ValueError):
    pass


class InvalidGraphReference(GraphError):
    """A table or edge names a node id that is not in the node table."""


class InvalidEdge(GraphError):
    pass


class InvalidPolygon(GraphError):
    pass


class GraphModel:
    """
    Immutable campus walking graph.

    Holds node coordinates, a symmetric adjacency map (node -> neighbor -> meters)
    and the building entrance/exit/polygon tables. Everything is validated here,
    once, so lookups never have to re-check referential integrity.
    """

    def __init__(
        self,
        nodes: Mapping[NodeId, Pt],
        adjacency: Mapping[NodeId, Mapping[NodeId, float]],
        *,
        entrances: Mapping[str, NodeId] | None = None,
        exits: Mapping[str, NodeId] | None = None,
        polygons: Mapping[str, Iterable[Iterable[Pt]]] | None = None,
        rel_tol: float = 1e-9,
    ):
        if not nodes:
            raise GraphError("graph has no nodes")
        self._nodes: dict[NodeId, Coord] = {n: to_coord(p) for n, p in nodes.items()}

        adj: dict[NodeId, dict[NodeId, float]] = {n: {} for n in self._nodes}
        for a, nbrs in adjacency.items():
            self._require(a, "adjacency")
            for b, w in nbrs.items():
                self._require(b, f"adjacency of {a!r}")
                if a == b:
                    raise InvalidEdge(f"self-loop on {a!r}")
                w = float(w)
                if not isfinite(w) or w < 0:
                    raise InvalidEdge(f"edge {a!r}-{b!r} has invalid weight {w!r}")
                # a walking distance is never shorter than the straight line
                geo = haversine_m(self._nodes[a], self._nodes[b])
                if w < geo - rel_tol * max(1.0, geo):
                    raise InvalidEdge(
                        f"edge {a!r}-{b!r} weight {w!r} is below the "
                        f"straight-line distance {geo:.3f} m"
                    )
                adj[a][b] = w
        for a, nbrs in adj.items():
            for b, w in nbrs.items():
                back = adj[b].get(a)
                if back is None or abs(back - w) > rel_tol * max(1.0, w):
                    raise InvalidEdge(f"edge {a!r}-{b!r} is not symmetric ({w!r} vs {back!r})")
        self._adj = {n: MappingProxyType(nbrs) for n, nbrs in adj.items()}

        self._entrances = self._table(entrances, "entrance")
        self._exits = self._table(exits, "exit")

        self._polygons: dict[str, tuple[Ring, ...]] = {}
        for building, rings in (polygons or {}).items():
            rs = tuple(to_ring(r) for r in rings)
            for r in rs:
                if len(r) < 3:
                    raise InvalidPolygon(f"polygon of {building!r} has {len(r)} vertices")
            self._polygons[building] = rs

    # ---- construction helpers

    def _require(self, node_id: NodeId, where: str) -> None:
        if node_id not in self._nodes:
            raise InvalidGraphReference(f"unknown node {node_id!r} in {where}")

    def _table(self, table: Mapping[str, NodeId] | None, what: str) -> dict[str, NodeId]:
        out = dict(table or {})
        for building, node_id in out.items():
            self._require(node_id, f"{what} of {building!r}")
        return out

    @classmethod
    def from_links(
        cls,
        nodes: Mapping[NodeId, Pt],
        links: Iterable[tuple[NodeId, NodeId]] = (),
        *,
        chain: Iterable[NodeId] = (),
        edges: Iterable[tuple[NodeId, NodeId, float]] = (),
        **tables,
    ) -> "GraphModel":
        """
        Build from a walking chain (consecutive ids are joined), extra shortcut
        links and explicit weighted edges. Chain/link weights are the haversine
        distance between endpoints; repeated pairs collapse into one edge.
        """
        coords = {n: to_coord(p) for n, p in nodes.items()}
        adj: dict[NodeId, dict[NodeId, float]] = {}

        def add(a: NodeId, b: NodeId, w: float | None = None) -> None:
            for n in (a, b):
                if n not in coords:
                    raise InvalidGraphReference(f"unknown node {n!r} in edge {a!r}-{b!r}")
            if w is None:
                w = haversine_m(coords[a], coords[b])
            adj.setdefault(a, {})[b] = w
            adj.setdefault(b, {})[a] = w

        chain = list(chain)
        for a, b in zip(chain, chain[1:]):
            add(a, b)
        for a, b in links:
            add(a, b)
        for a, b, w in edges:
            add(a, b, float(w))
        return cls(coords, adj, **tables)

    # ---- read accessors

    def node(self, node_id: NodeId) -> Coord:
        return self._nodes[node_id]

    # WeightedGraph protocol
    coord = node

    @property
    def node_ids(self) -> tuple[NodeId, ...]:
        return tuple(self._nodes)

    def neighbors(self, node_id: NodeId) -> Mapping[NodeId, float]:
        return self._adj[node_id]

    def weight(self, a: NodeId, b: NodeId) -> float:
        return self._adj[a][b]

    def entrance_of(self, building: str) -> NodeId | None:
        return self._entrances.get(building)

    def exit_of(self, building: str) -> NodeId | None:
        return self._exits.get(building)

    def polygons_of(self, building: str) -> tuple[Ring, ...]:
        return self._polygons.get(building, ())

    def buildings_with_polygons(self) -> tuple[str, ...]:
        return tuple(self._polygons)  # table order; first match wins during origin resolution

    def destinations(self) -> tuple[str, ...]:
        return tuple(self._entrances)

    def edges(self) -> tuple[tuple[NodeId, NodeId, float], ...]:
        """Each undirected edge once, in first-seen adjacency order."""
        seen: set[frozenset] = set()
        out = []
        for a, nbrs in self._adj.items():
            for b, w in nbrs.items():
                key = frozenset((a, b))
                if key in seen:
                    continue
                seen.add(key)
                out.append((a, b, w))
        return tuple(out)

    def __len__(self) -> int:
        return len(self._nodes)

    # ---- array views for vectorised scans

    @cached_property
    def node_arrays(self) -> tuple[tuple[NodeId, ...], np.ndarray, np.ndarray]:
        ids = self.node_ids
        lats = np.array([self._nodes[n].lat for n in ids], dtype=float)
        lngs = np.array([self._nodes[n].lng for n in ids], dtype=float)
        return ids, lats, lngs

    @cached_property
    def edge_arrays(self) -> tuple[tuple[tuple[NodeId, NodeId], ...], np.ndarray, np.ndarray]:
        """Endpoint pairs plus (E, 2) lat and lng arrays for their a and b ends."""
        pairs = tuple((a, b) for a, b, _ in self.edges())
        lats = np.array(
            [(self._nodes[a].lat, self._nodes[b].lat) for a, b in pairs], dtype=float
        ).reshape(-1, 2)
        lngs = np.array(
            [(self._nodes[a].lng, self._nodes[b].lng) for a, b in pairs], dtype=float
        ).reshape(-1, 2)
        return pairs, lats, lngs
