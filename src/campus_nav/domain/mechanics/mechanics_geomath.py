import math

import numpy as np

from campus_nav.domain.entities.geography import Coord, Ring

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(p: Coord, q: Coord) -> float:
    """Great-circle distance in meters on a spherical Earth."""
    lat1, lat2 = math.radians(p.lat), math.radians(q.lat)
    dlat = lat2 - lat1
    dlng = math.radians(q.lng - p.lng)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(min(1.0, h)))


def haversine_many(p: Coord, lats: np.ndarray, lngs: np.ndarray) -> np.ndarray:
    """Distances from p to every (lats[i], lngs[i]); same formula as haversine_m."""
    lat1 = np.radians(p.lat)
    lat2 = np.radians(lats)
    dlat = lat2 - lat1
    dlng = np.radians(lngs - p.lng)
    h = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * np.arcsin(np.sqrt(np.minimum(1.0, h)))


# ---- local equirectangular frame (sub-kilometer spans only)


def local_project(p: Coord, ref_lat: float) -> tuple[float, float]:
    x = math.radians(p.lng) * EARTH_RADIUS_M * math.cos(math.radians(ref_lat))
    y = math.radians(p.lat) * EARTH_RADIUS_M
    return x, y


def unproject(x: float, y: float, ref_lat: float) -> Coord:
    lat = math.degrees(y / EARTH_RADIUS_M)
    lng = math.degrees(x / (EARTH_RADIUS_M * math.cos(math.radians(ref_lat))))
    return Coord(lat, lng)


def project_many(lats: np.ndarray, lngs: np.ndarray, ref_lat: float):
    k = EARTH_RADIUS_M * math.cos(math.radians(ref_lat))
    return np.radians(lngs) * k, np.radians(lats) * EARTH_RADIUS_M


def unproject_many(xs: np.ndarray, ys: np.ndarray, ref_lat: float):
    k = EARTH_RADIUS_M * math.cos(math.radians(ref_lat))
    return np.degrees(ys / EARTH_RADIUS_M), np.degrees(xs / k)


def point_in_polygon(p: Coord, ring: Ring) -> bool:
    """
    Even-odd ray casting along the latitude axis.
    Boundary points get whatever the crossing count says; the answer is a pure
    function of the inputs so it never flickers between calls.
    """
    inside = False
    n = len(ring)
    j = n - 1
    for i in range(n):
        vi, vj = ring[i], ring[j]
        if (vi.lng > p.lng) != (vj.lng > p.lng):
            cross = (vj.lat - vi.lat) * (p.lng - vi.lng) / (vj.lng - vi.lng + 1e-12) + vi.lat
            if p.lat < cross:
                inside = not inside
        j = i
    return inside
