import numpy as np

from campus_nav.app.protocols import Snapper
from campus_nav.domain.entities.geography import Attachment, Coord, Existing, OnEdge
from campus_nav.domain.graph import GraphModel
from campus_nav.domain.mechanics.mechanics_geomath import (
    haversine_many,
    project_many,
    unproject_many,
)


class NodeSnapper(Snapper):
    """Always attaches to the nearest existing node."""

    def snap(self, p: Coord, graph: GraphModel) -> Existing:
        ids, lats, lngs = graph.node_arrays
        d = haversine_many(p, lats, lngs)
        i = int(np.argmin(d))  # first minimum in node order
        return Existing(ids[i], float(d[i]))


class NearestEdgeSnapper(NodeSnapper):
    """
    Attaches to the nearest edge interior when it is clearly closer than the
    nearest node (by more than margin_m), otherwise to the nearest node.

    Edges are projected in an equirectangular frame centred on the query
    latitude; the projection parameter is clamped to [0, 1] and the distance to
    the projected point is measured geodesically.
    """

    def __init__(self, margin_m: float = 0.1):
        self.margin_m = margin_m

    def snap(self, p: Coord, graph: GraphModel) -> Attachment:
        node = super().snap(p, graph)
        pairs, lats, lngs = graph.edge_arrays
        if not pairs:
            return node

        ref = p.lat
        (px,), (py,) = project_many(np.array([p.lat]), np.array([p.lng]), ref)
        xs, ys = project_many(lats, lngs, ref)
        ax, bx = xs[:, 0], xs[:, 1]
        ay, by = ys[:, 0], ys[:, 1]
        abx, aby = bx - ax, by - ay
        ab2 = abx * abx + aby * aby
        ab2 = np.where(ab2 == 0.0, 1e-9, ab2)
        t = np.clip(((px - ax) * abx + (py - ay) * aby) / ab2, 0.0, 1.0)
        qlat, qlng = unproject_many(ax + t * abx, ay + t * aby, ref)
        d = haversine_many(p, qlat, qlng)

        j = int(np.argmin(d))
        if float(d[j]) + self.margin_m < node.distance_m:
            return OnEdge(
                coord=Coord(float(qlat[j]), float(qlng[j])),
                edge=pairs[j],
                t=float(t[j]),
                distance_m=float(d[j]),
            )
        return node
