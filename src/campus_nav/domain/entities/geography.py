from dataclasses import dataclass


# Core geographic types used by mechanics
@dataclass(frozen=True)
class Coord:
    lat: float  # degrees
    lng: float


Pt = Coord | tuple[float, float]
Ring = tuple[Coord, ...]  # closed vertex list, last vertex joins the first

NodeId = str


def to_coord(p: Pt) -> Coord:
    return p if isinstance(p, Coord) else Coord(float(p[0]), float(p[1]))


def to_ring(points) -> Ring:
    return tuple(to_coord(p) for p in points)


# ---- snap results


@dataclass(frozen=True)
class Existing:
    """Query point attaches to a node already in the graph."""

    node_id: NodeId
    distance_m: float = 0.0


@dataclass(frozen=True)
class OnEdge:
    """Query point attaches to the interior of edge (a, b) at parameter t."""

    coord: Coord
    edge: tuple[NodeId, NodeId]
    t: float = 0.0
    distance_m: float = 0.0


Attachment = Existing | OnEdge


@dataclass(frozen=True)
class VirtualNode:
    """Graph key for an OnEdge attachment; lives only inside one route query."""

    coord: Coord
    edge: tuple[NodeId, NodeId]

    @classmethod
    def of(cls, att: OnEdge) -> "VirtualNode":
        return cls(att.coord, att.edge)


NodeKey = NodeId | VirtualNode
