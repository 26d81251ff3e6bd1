from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple
import math

import numpy as np

from .config import ConfigError, RobotConfig
from .draw import (
    DrawCommand,
    EllipseShape,
    LineShape,
    PolygonShape,
    PopMatrix,
    PushMatrix,
    RectShape,
    Rotate,
    Translate,
)
from .geometry_utils import Point, Segment, body_to_world, rotate_around, segments_intersect
from .sensors import Camera, RangeSensor
from .world import Wall

if TYPE_CHECKING:
    from .world import World


Color = Tuple[int, int, int]

# Robot outline in body coordinates, +x forward.
DEFAULT_BODY: List[Tuple[float, float]] = [
    (4.17, 5.0), (4.17, 6.67), (5.83, 5.83), (5.83, 5.0), (7.5, 5.0), (7.5, -5.0),
    (5.83, -5.0), (5.83, -5.83), (4.17, -6.67), (4.17, -5.0), (-4.17, -5.0),
    (-4.17, -6.67), (-5.83, -5.83), (-6.67, -5.0), (-7.5, -4.17), (-7.5, 4.17),
    (-6.67, 5.0), (-5.83, 5.83), (-4.17, 6.67), (-4.17, 5.0),
]

STALLED_COLOR: Color = (128, 128, 128)


def default_range_sensors() -> List[RangeSensor]:
    """Front-right and front-left IR pair."""
    return [
        RangeSensor(8.3, math.pi / 8, max=20.0, width=1.0),
        RangeSensor(8.3, -math.pi / 8, max=20.0, width=1.0),
    ]


class Robot:
    """Wheeled robot driven by body-frame velocities.

    Each tick the commanded (vx, vy, va) proposes a new pose. The move is
    committed only if a square bounding box around the proposed pose crosses
    no wall; otherwise the robot is `stalled` and stays exactly where it was.

    The robot does not keep a reference to its world. `index` is its slot in
    `World.robots`, assigned by `World.add_robot`, and the world passes
    itself into `update`.
    """

    def __init__(
        self,
        x: float,
        y: float,
        direction: float = 0.0,
        name: str = "robot",
        color: Color = (255, 0, 0),
        body: Optional[Sequence[Tuple[float, float]]] = None,
        range_sensors: Optional[List[RangeSensor]] = None,
        cameras: Optional[List[Camera]] = None,
        bounding_radius: float = 10.0,
    ) -> None:
        self.name = name
        self.x = x
        self.y = y
        self.direction = direction
        self.vx = 0.0
        self.vy = 0.0
        self.va = 0.0
        self.stalled = False
        self.debug = False
        self.color = color
        self.bounding_radius = bounding_radius
        self.index: Optional[int] = None

        self.body: List[Tuple[float, float]] = list(body) if body is not None else list(DEFAULT_BODY)
        if len(self.body) < 3:
            raise ConfigError(f"robot '{name}': body polygon needs at least 3 vertices")
        try:
            self.outline()
        except ValueError as exc:
            raise ConfigError(f"robot '{name}': {exc}") from exc

        self.range_sensors = range_sensors if range_sensors is not None else default_range_sensors()
        self.cameras = cameras if cameras is not None else [Camera()]
        self.bounding_box = np.zeros((4, 2))

    @classmethod
    def from_config(cls, config: RobotConfig) -> "Robot":
        sensors = None
        if config.range_sensors is not None:
            sensors = [RangeSensor.from_config(s) for s in config.range_sensors]
        cameras = None
        if config.cameras is not None:
            cameras = [Camera.from_config(c) for c in config.cameras]
        robot = cls(
            x=config.x,
            y=config.y,
            direction=config.direction,
            name=config.name,
            color=config.color,
            body=config.body,
            range_sensors=sensors,
            cameras=cameras,
            bounding_radius=config.bounding_radius,
        )
        robot.vx = config.vx
        robot.vy = config.vy
        robot.va = config.va
        robot.debug = config.debug
        return robot

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------
    def forward(self, vx: float) -> None:
        self.vx = vx

    def backward(self, vx: float) -> None:
        self.vx = -vx

    def turn(self, va: float) -> None:
        self.va = va

    def stop(self) -> None:
        self.vx = 0.0
        self.vy = 0.0
        self.va = 0.0

    def get_ir(self, pos: int) -> float:
        """Reading of range sensor `pos` (0: front right, 1: front left by default)."""
        return self.range_sensors[pos].get_reading()

    def take_picture(self, camera: int = 0) -> np.ndarray:
        return self.cameras[camera].take_picture()

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    def bounding_points(self, x: float, y: float, direction: float) -> List[Tuple[float, float]]:
        """Corners of the collision square around a pose."""
        return [
            rotate_around(x, y, self.bounding_radius, direction + math.pi / 4 + k * math.pi / 2)
            for k in range(4)
        ]

    def outline(self) -> Wall:
        """Body polygon in world coordinates, as a wall other robots' cameras can see."""
        pts = [Point(*body_to_world(bx, by, self.x, self.y, self.direction)) for bx, by in self.body]
        segments = tuple(Segment(pts[i], pts[(i + 1) % len(pts)]) for i in range(len(pts)))
        return Wall(color=self.color, segments=segments)

    def collides(self, corners: Sequence[Tuple[float, float]], world: "World") -> bool:
        """True if any edge of the box `corners` crosses any wall segment."""
        edges = [
            Segment(Point(*corners[k]), Point(*corners[(k + 1) % 4])) for k in range(4)
        ]
        for wall in world.walls:
            for seg in wall.segments:
                for edge in edges:
                    if segments_intersect(edge, seg):
                        return True
        return False

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------
    def move(self, world: "World") -> None:
        """Propose a move from the current velocities and commit it unless blocked."""
        tvx = self.vx * math.sin(-self.direction + math.pi / 2) + self.vy * math.cos(
            -self.direction + math.pi / 2
        )
        tvy = self.vx * math.cos(-self.direction + math.pi / 2) - self.vy * math.sin(
            -self.direction + math.pi / 2
        )
        px = self.x + tvx
        py = self.y + tvy
        pdirection = self.direction - self.va

        corners = self.bounding_points(px, py, pdirection)
        self.bounding_box = np.asarray(corners)
        self.stalled = self.collides(corners, world)
        if not self.stalled:
            self.x = px
            self.y = py
            self.direction = pdirection

    def update(self, world: "World", time: float) -> List[DrawCommand]:
        """One tick: move, then range sensors, then cameras.

        Returns debug overlay commands (empty unless `debug` is set).
        """
        self.move(world)
        commands: List[DrawCommand] = []
        for sensor in self.range_sensors:
            commands.extend(sensor.update(self, world))
        for camera in self.cameras:
            camera.update(self, world)
        return commands

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------
    def draw(self) -> List[DrawCommand]:
        commands: List[DrawCommand] = []
        if self.debug:
            corners = self.bounding_points(self.x, self.y, self.direction)
            for k in range(4):
                commands.append(LineShape(corners[k], corners[(k + 1) % 4], (255, 255, 255)))

        commands.append(PushMatrix())
        commands.append(Translate(self.x, self.y))
        commands.append(Rotate(self.direction))
        if self.stalled:
            commands.append(PolygonShape(tuple(self.body), fill=STALLED_COLOR, stroke=(255, 255, 255)))
        else:
            commands.append(PolygonShape(tuple(self.body), fill=self.color))
        # wheels
        commands.append(RectShape(-3.33, -7.67, 6.33, 1.67, fill=(0, 0, 0)))
        commands.append(RectShape(-3.33, 6.0, 6.33, 1.67, fill=(0, 0, 0)))
        commands.append(EllipseShape((0.0, 0.0), 1.67, 1.67, fill=(0, 64, 0)))
        for camera in self.cameras:
            commands.extend(camera.draw())
        commands.append(PopMatrix())

        for sensor in self.range_sensors:
            commands.extend(sensor.draw(self))
        return commands

    # ------------------------------------------------------------------
    # Utility
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        """Serialize current robot state for telemetry."""
        return {
            "name": self.name,
            "x": self.x,
            "y": self.y,
            "direction": self.direction,
            "vx": self.vx,
            "vy": self.vy,
            "va": self.va,
            "stalled": self.stalled,
            "ir": [s.get_reading() for s in self.range_sensors],
        }
