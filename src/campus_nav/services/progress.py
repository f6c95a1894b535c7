# campus_nav/services/progress.py
from campus_nav.domain.entities.geography import Pt, to_coord
from campus_nav.domain.entities.route import RouteProgress, RouteResult
from campus_nav.domain.mechanics.mechanics_geomath import haversine_m

WALKING_SPEED_MPS = 1.4


def route_progress(
    route: RouteResult,
    position: Pt,
    *,
    walking_speed_mps: float = WALKING_SPEED_MPS,
    arrival_radius_m: float = 10.0,
) -> RouteProgress | None:
    """
    Where along a computed route a position is.
    Uses the closest polyline vertex (first one on ties) and sums the polyline
    from there to the end.
    """
    line = route.polyline
    if not route.ok or not line:
        return None
    p = to_coord(position)

    step, best = 0, float("inf")
    for i, q in enumerate(line):
        d = haversine_m(p, q)
        if d < best:
            step, best = i, d

    remaining = sum(haversine_m(line[i], line[i + 1]) for i in range(step, len(line) - 1))
    return RouteProgress(
        step=step,
        off_route_m=best,
        remaining_m=remaining,
        eta_s=remaining / max(walking_speed_mps, 0.1),
        arrived=step == len(line) - 1 and best < arrival_radius_m,
    )
