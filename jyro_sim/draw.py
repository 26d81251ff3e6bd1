"""
Draw commands emitted by the simulator.

World and robot updates return lists of these immutable records instead of
painting on a surface. A renderer replays them in order; the transform
commands behave like a classic push/translate/rotate/pop matrix stack.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np


Color = Tuple[int, ...]
Vertex = Tuple[float, float]


@dataclass(frozen=True)
class Clear:
    color: Color


@dataclass(frozen=True)
class RectShape:
    x: float
    y: float
    w: float
    h: float
    fill: Optional[Color] = None
    stroke: Optional[Color] = None
    stroke_width: int = 1


@dataclass(frozen=True)
class PolygonShape:
    points: Tuple[Vertex, ...]
    fill: Optional[Color] = None
    stroke: Optional[Color] = None
    stroke_width: int = 1


@dataclass(frozen=True)
class LineShape:
    start: Vertex
    end: Vertex
    color: Color
    width: int = 1


@dataclass(frozen=True)
class ArcShape:
    """Pie slice of `radius` around `center` from angle `start` to `stop`."""

    center: Vertex
    radius: float
    start: float
    stop: float
    fill: Optional[Color] = None
    stroke: Optional[Color] = None


@dataclass(frozen=True)
class EllipseShape:
    center: Vertex
    w: float
    h: float
    fill: Optional[Color] = None


@dataclass(frozen=True)
class PushMatrix:
    pass


@dataclass(frozen=True)
class PopMatrix:
    pass


@dataclass(frozen=True)
class Translate:
    x: float
    y: float


@dataclass(frozen=True)
class Rotate:
    angle: float


DrawCommand = Union[
    Clear,
    RectShape,
    PolygonShape,
    LineShape,
    ArcShape,
    EllipseShape,
    PushMatrix,
    PopMatrix,
    Translate,
    Rotate,
]


class TransformStack:
    """2D affine transform stack (3x3 homogeneous matrices)."""

    def __init__(self) -> None:
        self._stack: List[np.ndarray] = [np.eye(3)]

    @property
    def matrix(self) -> np.ndarray:
        return self._stack[-1]

    def push(self) -> None:
        self._stack.append(self._stack[-1].copy())

    def pop(self) -> None:
        if len(self._stack) == 1:
            raise IndexError("pop from an empty transform stack")
        self._stack.pop()

    def translate(self, x: float, y: float) -> None:
        t = np.array([[1.0, 0.0, x], [0.0, 1.0, y], [0.0, 0.0, 1.0]])
        self._stack[-1] = self._stack[-1] @ t

    def rotate(self, angle: float) -> None:
        c = np.cos(angle)
        s = np.sin(angle)
        r = np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])
        self._stack[-1] = self._stack[-1] @ r

    def apply(self, command: DrawCommand) -> bool:
        """Apply a transform command; False if `command` is not one."""
        if isinstance(command, PushMatrix):
            self.push()
        elif isinstance(command, PopMatrix):
            self.pop()
        elif isinstance(command, Translate):
            self.translate(command.x, command.y)
        elif isinstance(command, Rotate):
            self.rotate(command.angle)
        else:
            return False
        return True

    def transform(self, points: Sequence[Vertex]) -> List[Vertex]:
        """Map local points through the current matrix."""
        if len(points) == 0:
            return []
        pts = np.asarray(points, dtype=np.float64)
        homo = np.hstack([pts, np.ones((pts.shape[0], 1))])
        out = homo @ self.matrix.T
        return [(float(p[0]), float(p[1])) for p in out]
