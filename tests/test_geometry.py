from __future__ import annotations

import math
import random

import pytest

from jyro_sim.geometry_utils import (
    Point,
    Segment,
    intersection_point,
    line_coefficients,
    rotate_around,
    segment_hit,
    segments_intersect,
)


def seg(x1: float, y1: float, x2: float, y2: float) -> Segment:
    return Segment.from_coords(x1, y1, x2, y2)


def test_crossing_segments_intersect() -> None:
    assert segments_intersect(seg(0, 0, 10, 10), seg(0, 10, 10, 0))


def test_parallel_segments_do_not_intersect() -> None:
    assert not segments_intersect(seg(0, 0, 10, 0), seg(0, 5, 10, 5))


def test_collinear_overlap_is_not_an_intersection() -> None:
    assert not segments_intersect(seg(0, 0, 10, 0), seg(5, 0, 15, 0))


def test_segments_intersect_is_symmetric() -> None:
    rng = random.Random(0)
    for _ in range(2000):
        a = seg(*(rng.randint(0, 20) for _ in range(2)), *(rng.randint(21, 40) for _ in range(2)))
        b = seg(*(rng.randint(0, 40) for _ in range(2)), *(rng.randint(41, 60) for _ in range(2)))
        assert segments_intersect(a, b) == segments_intersect(b, a)


def test_degenerate_segment_rejected() -> None:
    with pytest.raises(ValueError):
        Segment(Point(1.0, 1.0), Point(1.0, 1.0))


def test_line_coefficients_standard_form() -> None:
    a, b, c = line_coefficients(Point(0.0, 5.0), Point(10.0, 5.0))
    assert (a, b, c) == (0.0, 10.0, 50.0)
    # Both defining points satisfy Ax + By = C
    for p in (Point(2.0, 3.0), Point(-4.0, 7.5)):
        a, b, c = line_coefficients(p, Point(1.0, 1.0))
        assert math.isclose(a * p.x + b * p.y, c)


def test_intersection_point_parallel_is_none() -> None:
    l1 = line_coefficients(Point(0.0, 0.0), Point(10.0, 0.0))
    l2 = line_coefficients(Point(0.0, 5.0), Point(10.0, 5.0))
    assert intersection_point(l1, l2) is None


def test_segment_hit_crossing_point() -> None:
    p = segment_hit(seg(0, 0, 10, 10), seg(0, 10, 10, 0))
    assert p is not None
    assert math.isclose(p.x, 5.0)
    assert math.isclose(p.y, 5.0)


def test_segment_hit_accepts_near_miss_within_tolerance() -> None:
    ray = seg(0, 0, 10, 0)
    wall = seg(10.05, -5, 10.05, 5)
    # Strict test says no, the tolerant hit test says yes.
    assert not segments_intersect(ray, wall)
    p = segment_hit(ray, wall)
    assert p is not None
    assert math.isclose(p.x, 10.05)


def test_segment_hit_rejects_beyond_tolerance() -> None:
    assert segment_hit(seg(0, 0, 10, 0), seg(10.2, -5, 10.2, 5)) is None


def test_segment_hit_parallel_is_none() -> None:
    assert segment_hit(seg(0, 0, 10, 0), seg(0, 1, 10, 1)) is None


def test_rotate_around() -> None:
    x, y = rotate_around(0.0, 0.0, 10.0, 0.0)
    assert math.isclose(x, 10.0) and math.isclose(y, 0.0, abs_tol=1e-12)
    x, y = rotate_around(5.0, 5.0, 10.0, math.pi / 2)
    assert math.isclose(x, 5.0, abs_tol=1e-9) and math.isclose(y, 15.0)
