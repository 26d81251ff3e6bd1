from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple
import math

import numpy as np

from .config import CameraConfig, ConfigError, RangeSensorConfig
from .draw import ArcShape, DrawCommand, EllipseShape, RectShape
from .geometry_utils import clamp, rotate_around
from .hit import Hit, cast_ray

if TYPE_CHECKING:
    from .robot import Robot
    from .world import World


Color = Tuple[int, int, int]

SKY_COLOR: Color = (0, 0, 128)
GROUND_COLOR: Color = (0, 128, 0)
# Height in pixels of a robot seen at zero distance.
ROBOT_BAND_HEIGHT = 30.0


class RangeSensor:
    """Sonar/IR style distance sensor mounted on a robot.

    `reading` is `distance / max`: 1.0 means nothing detected within range.

    Rays start at the mount point and follow the sensor's own boresight,
    `robot.direction + direction`, so a sensor mounted at an angle looks
    that way rather than straight ahead.

    The cone is sampled with at most three rays (-width/2, 0, +width/2), not
    swept continuously, so wide cones can miss thin obstacles.
    """

    def __init__(
        self,
        position: float,
        direction: float,
        max: float = 20.0,
        width: float = 0.0,
    ) -> None:
        if max <= 0:
            raise ConfigError(f"range sensor max must be positive, got {max}")
        if width < 0:
            raise ConfigError(f"range sensor width must be >= 0, got {width}")
        self.position = position
        self.direction = direction
        self.max = max
        self.width = width
        self.reading = 1.0
        self.distance = self.reading * self.max

    @classmethod
    def from_config(cls, config: RangeSensorConfig) -> "RangeSensor":
        return cls(config.position, config.direction, config.max, config.width)

    def get_distance(self) -> float:
        return self.distance

    def get_reading(self) -> float:
        return self.reading

    def set_distance(self, distance: float) -> None:
        self.distance = distance
        self.reading = distance / self.max

    def set_reading(self, reading: float) -> None:
        self.reading = reading
        self.distance = reading * self.max

    def sample_offsets(self) -> List[float]:
        """Angular offsets of the rays cast around the boresight."""
        if self.width == 0:
            return [0.0]
        half = self.width / 2.0
        return [-half, 0.0, half]

    def mount_point(self, robot: "Robot") -> Tuple[float, float]:
        return rotate_around(robot.x, robot.y, self.position, robot.direction + self.direction)

    def update(self, robot: "Robot", world: "World") -> List[DrawCommand]:
        """Re-measure from the robot's current pose.

        Returns debug markers when the robot is in debug mode.
        """
        x, y = self.mount_point(robot)
        boresight = robot.direction + self.direction
        self.set_reading(1.0)
        commands: List[DrawCommand] = []
        for incr in self.sample_offsets():
            hit = cast_ray(x, y, boresight + incr, self.max, world.walls)
            if hit is None:
                continue
            if robot.debug:
                commands.append(EllipseShape((x, y), 5, 5, fill=(0, 255, 0)))
                commands.append(EllipseShape((hit.x, hit.y), 5, 5, fill=(0, 255, 0)))
            if hit.distance < self.distance:
                self.set_distance(hit.distance)
        return commands

    def draw(self, robot: "Robot") -> List[DrawCommand]:
        """Translucent arc showing the measured distance."""
        stroke = (255, 255, 255) if self.reading < 1.0 else (0, 0, 0)
        half = max(self.width / 2.0, 0.05)
        heading = robot.direction + self.direction
        return [
            ArcShape(
                self.mount_point(robot),
                self.distance,
                heading - half,
                heading + half,
                fill=(128, 0, 128, 64),
                stroke=stroke,
            )
        ]


class CameraType(Enum):
    """How a camera turns ray hits into pixels."""

    COLOR = "color"
    DEPTH = "depth"


class Camera:
    """Column ray-casting camera.

    Each image column casts one ray. Walls give the column its sky/obstacle/
    ground bands; other robots in front of that wall are composited on top
    as vertical bands, nearest last.

    Parameters
    ----------
    camera_type : CameraType
        COLOR shades hit colours with distance, DEPTH encodes nearness as grey.
    width, height : int
        Image columns and rows.
    fov : float
        Horizontal field of view in degrees.
    colors_fade_with_distance : bool
        COLOR only: darken hit colours with distance.
    max_range : float
        Ray length.
    """

    def __init__(
        self,
        camera_type: CameraType = CameraType.COLOR,
        width: int = 256,
        height: int = 128,
        fov: float = 60.0,
        colors_fade_with_distance: bool = True,
        max_range: float = 1000.0,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ConfigError(f"camera resolution must be positive, got {width}x{height}")
        if fov <= 0:
            raise ConfigError(f"camera field of view must be positive, got {fov}")
        self.camera_type = camera_type
        self.width = width
        self.height = height
        self.fov = fov
        self.colors_fade_with_distance = colors_fade_with_distance
        self.max_range = max_range
        self.offsets = [
            math.radians(i / width * fov - fov / 2.0) for i in range(width)
        ]
        self.wall_hits: List[Optional[Hit]] = [None] * width
        self.robot_hits: List[List[Hit]] = [[] for _ in range(width)]
        self.world_size: Optional[float] = None

    @classmethod
    def from_config(cls, config: CameraConfig) -> "Camera":
        return cls(
            camera_type=CameraType(config.type),
            width=config.width,
            height=config.height,
            fov=config.angle,
            colors_fade_with_distance=config.colors_fade_with_distance,
            max_range=config.max_range,
        )

    def update(self, robot: "Robot", world: "World") -> None:
        """Cast every column against the walls and the other robots."""
        self.world_size = world.size()
        outlines = [other.outline() for other in world.other_robots(robot.index)]
        wall_hits: List[Optional[Hit]] = []
        robot_hits: List[List[Hit]] = []
        for offset in self.offsets:
            angle = robot.direction + offset
            wall_hit = cast_ray(robot.x, robot.y, angle, self.max_range, world.walls)
            wall_hits.append(wall_hit)
            column: List[Hit] = []
            for outline in outlines:
                hit = cast_ray(robot.x, robot.y, angle, self.max_range, [outline])
                if hit is None:
                    continue
                # hidden behind the wall this column already sees
                if wall_hit is not None and hit.distance >= wall_hit.distance:
                    continue
                column.append(hit)
            robot_hits.append(column)
        self.wall_hits = wall_hits
        self.robot_hits = robot_hits

    def shade(self, hit: Hit, column: int) -> float:
        """Brightness factor in [0, 1] for a hit seen in `column`.

        Distance is measured along the camera axis, so a flat wall facing
        the camera gets the same shade in every column.
        """
        size = self.world_size if self.world_size else 1.0
        depth = hit.distance * math.cos(self.offsets[column])
        return clamp(1.0 - depth / size, 0.0, 1.0)

    def encode(self, color: Color, s: float) -> Tuple[int, int, int]:
        if self.camera_type is CameraType.DEPTH:
            v = int(s * 255)
            return v, v, v
        if self.colors_fade_with_distance:
            return int(color[0] * s), int(color[1] * s), int(color[2] * s)
        return int(color[0]), int(color[1]), int(color[2])

    def take_picture(self) -> np.ndarray:
        """Render the last update as a (height, width, 3) uint8 RGB array."""
        rows = self.height
        pic = np.zeros((rows, self.width, 3), dtype=np.uint8)
        j = np.arange(rows)
        depth_only = self.camera_type is CameraType.DEPTH
        for i in range(self.width):
            hit = self.wall_hits[i]
            if hit is None:
                continue
            s = self.shade(hit, i)
            horizon = (1.0 - s) * rows / 2.0
            sky = j < horizon / 2.0
            ground = j >= rows - horizon / 2.0
            if not depth_only:
                pic[sky, i] = SKY_COLOR
                pic[ground, i] = GROUND_COLOR
            pic[~sky & ~ground, i] = self.encode(hit.color, s)

        # Farthest robot first so nearer ones paint over it.
        for i in range(self.width):
            for hit in sorted(self.robot_hits[i], key=lambda h: h.distance, reverse=True):
                s = self.shade(hit, i)
                bottom = rows - rows / 2.0 * (1.0 - s)
                top = bottom - ROBOT_BAND_HEIGHT * s
                band = (j >= top) & (j < bottom)
                pic[band, i] = self.encode(hit.color, s)
        return pic

    def draw(self) -> List[DrawCommand]:
        """Lens housing, in robot-local coordinates."""
        return [RectShape(5.0, -3.33, 1.33, 6.33, fill=(0, 64, 0))]
