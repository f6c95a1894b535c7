# tests/domain/test_geomath.py
import math

import numpy as np
import pytest

from campus_nav.domain.entities.geography import Coord, to_ring
from campus_nav.domain.mechanics.mechanics_geomath import (
    EARTH_RADIUS_M,
    haversine_m,
    haversine_many,
    local_project,
    point_in_polygon,
    unproject,
)

A = Coord(0.0, 0.0)
B = Coord(0.0, 0.001)
CAMPUS = Coord(7.2539, 80.5918)

SQUARE = to_ring([(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)])


def test_haversine_zero_symmetric_and_scaled():
    assert haversine_m(A, A) == 0.0
    assert haversine_m(CAMPUS, CAMPUS) == 0.0
    assert haversine_m(A, B) == haversine_m(B, A)
    # along the equator the arc is R * dlng
    assert haversine_m(A, B) == pytest.approx(EARTH_RADIUS_M * math.radians(0.001), rel=1e-9)
    assert haversine_m(A, B) == pytest.approx(111.19, abs=0.01)


def test_haversine_many_matches_scalar():
    pts = [Coord(7.2522506, 80.5933134), Coord(7.2546491, 80.5929842), CAMPUS]
    lats = np.array([p.lat for p in pts])
    lngs = np.array([p.lng for p in pts])
    got = haversine_many(CAMPUS, lats, lngs)
    for p, d in zip(pts, got):
        assert d == pytest.approx(haversine_m(CAMPUS, p), abs=1e-6)
    assert got[-1] == 0.0


def test_local_frame_inverts_and_is_metric_for_short_spans():
    p = Coord(7.2541129, 80.5918422)
    x, y = local_project(p, CAMPUS.lat)
    back = unproject(x, y, CAMPUS.lat)
    assert back.lat == pytest.approx(p.lat, abs=1e-12)
    assert back.lng == pytest.approx(p.lng, abs=1e-12)

    x0, y0 = local_project(CAMPUS, CAMPUS.lat)
    planar = math.hypot(x - x0, y - y0)
    assert planar == pytest.approx(haversine_m(CAMPUS, p), rel=1e-3)


def test_point_in_polygon_inside_outside():
    assert point_in_polygon(Coord(0.5, 0.5), SQUARE)
    assert not point_in_polygon(Coord(1.5, 0.5), SQUARE)
    assert not point_in_polygon(Coord(0.5, -0.1), SQUARE)


def test_point_in_polygon_closed_ring_with_repeated_vertex():
    closed = SQUARE + (SQUARE[0],)
    assert point_in_polygon(Coord(0.25, 0.75), closed)
    assert not point_in_polygon(Coord(-0.25, 0.75), closed)


def test_point_on_boundary_is_stable():
    edge_pt = Coord(0.0, 0.5)
    first = point_in_polygon(edge_pt, SQUARE)
    assert all(point_in_polygon(edge_pt, SQUARE) == first for _ in range(10))
