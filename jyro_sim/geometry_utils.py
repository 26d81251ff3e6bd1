"""
Geometry utilities for the jyro simulator.

Provides the point and segment types, orientation-based segment crossing,
line intersection by Cramer's rule, the tolerant segment hit test used by
ray casting, and the rotations that place robot parts in the world.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple
import math


# Slack added to each side of a segment's bounding box when accepting a hit.
HIT_TOLERANCE = 0.1


@dataclass(frozen=True)
class Point:
    """2D point or vector in world units."""

    x: float
    y: float


@dataclass(frozen=True)
class Segment:
    """Line segment from p1 to p2."""

    p1: Point
    p2: Point

    def __post_init__(self) -> None:
        if self.p1 == self.p2:
            raise ValueError(f"degenerate segment at ({self.p1.x}, {self.p1.y})")

    @classmethod
    def from_coords(cls, x1: float, y1: float, x2: float, y2: float) -> "Segment":
        return cls(Point(x1, y1), Point(x2, y2))


# ---------------------------------------------------------------------------
# Crossing test
# ---------------------------------------------------------------------------


def orientation(a: Point, b: Point, c: Point) -> bool:
    """True if a, b, c turn counter-clockwise."""
    return (c.y - a.y) * (b.x - a.x) > (b.y - a.y) * (c.x - a.x)


def segments_intersect(ab: Segment, cd: Segment) -> bool:
    """Return True if segments AB and CD cross.

    Collinear overlapping segments are reported as not intersecting.
    """
    a, b = ab.p1, ab.p2
    c, d = cd.p1, cd.p2
    return orientation(a, c, d) != orientation(b, c, d) and orientation(
        a, b, c
    ) != orientation(a, b, d)


# ---------------------------------------------------------------------------
# Line intersection
# ---------------------------------------------------------------------------


def line_coefficients(p1: Point, p2: Point) -> Tuple[float, float, float]:
    """Coefficients (A, B, C) of the line through p1 and p2 with Ax + By = C."""
    a = p1.y - p2.y
    b = p2.x - p1.x
    c = p1.x * p2.y - p2.x * p1.y
    return a, b, -c


def intersection_point(
    l1: Tuple[float, float, float],
    l2: Tuple[float, float, float],
) -> Optional[Point]:
    """Solve two lines in standard form; None when they are parallel."""
    d = l1[0] * l2[1] - l1[1] * l2[0]
    if d == 0:
        return None
    dx = l1[2] * l2[1] - l1[1] * l2[2]
    dy = l1[0] * l2[2] - l1[2] * l2[0]
    return Point(dx / d, dy / d)


def _within_bounds(p: Point, seg: Segment, tolerance: float) -> bool:
    low_x = min(seg.p1.x, seg.p2.x) - tolerance
    high_x = max(seg.p1.x, seg.p2.x) + tolerance
    low_y = min(seg.p1.y, seg.p2.y) - tolerance
    high_y = max(seg.p1.y, seg.p2.y) + tolerance
    return low_x <= p.x <= high_x and low_y <= p.y <= high_y


def segment_hit(
    ab: Segment,
    cd: Segment,
    tolerance: float = HIT_TOLERANCE,
) -> Optional[Point]:
    """
    Intersection point of segments AB and CD, or None.

    The point of the supporting lines is accepted when it lies inside both
    segments' bounding boxes grown by `tolerance` on every side, so a ray
    grazing a wall end still registers.
    """
    xy = intersection_point(
        line_coefficients(ab.p1, ab.p2),
        line_coefficients(cd.p1, cd.p2),
    )
    if xy is None:
        return None
    if _within_bounds(xy, ab, tolerance) and _within_bounds(xy, cd, tolerance):
        return xy
    return None


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------


def rotate_around(x: float, y: float, length: float, angle: float) -> Tuple[float, float]:
    """Point at `length` from (x, y) along heading `angle`."""
    return x + length * math.cos(-angle), y - length * math.sin(-angle)


def body_to_world(
    bx: float,
    by: float,
    ox: float,
    oy: float,
    yaw: float,
) -> Tuple[float, float]:
    """Transform body frame (bx, by) to world with origin (ox, oy) and heading yaw."""
    c = math.cos(yaw)
    s = math.sin(yaw)
    wx = ox + c * bx - s * by
    wy = oy + s * bx + c * by
    return wx, wy


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def clamp(value: float, vmin: float, vmax: float) -> float:
    """Clamp value to [vmin, vmax]."""
    return max(vmin, min(vmax, value))


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)
