from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple
import math

from .geometry_utils import Segment, Point, segment_hit, distance

if TYPE_CHECKING:
    from .world import Wall


Color = Tuple[int, int, int]


@dataclass(frozen=True)
class Hit:
    """Where a ray met a wall.

    Attributes
    ----------
    x, y : float
        Hit point in world coordinates.
    distance : float
        Euclidean distance from the ray origin to the hit point.
    color : tuple
        RGB colour of the wall (or robot body) that was hit.
    origin_x, origin_y : float
        Ray origin.
    """

    x: float
    y: float
    distance: float
    color: Color
    origin_x: float
    origin_y: float


def min_hit(hits: List[Hit]) -> Hit:
    """Nearest hit; requires at least one."""
    minimum = hits[0]
    for hit in hits:
        if hit.distance < minimum.distance:
            minimum = hit
    return minimum


def cast_ray(
    x: float,
    y: float,
    angle: float,
    max_range: float,
    walls: Iterable["Wall"],
) -> Optional[Hit]:
    """Cast a ray of length `max_range` from (x, y) along heading `angle`.

    Every segment of every wall is tested; the closest hit wins. Returns None
    when nothing is within range.
    """
    ray = Segment(
        Point(x, y),
        Point(x + math.cos(angle) * max_range, y + math.sin(angle) * max_range),
    )
    hits: List[Hit] = []
    for wall in walls:
        for seg in wall.segments:
            pos = segment_hit(ray, seg)
            if pos is not None:
                dist = distance(x, y, pos.x, pos.y)
                hits.append(Hit(pos.x, pos.y, dist, wall.color, x, y))
    if not hits:
        return None
    return min_hit(hits)
