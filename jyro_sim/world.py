from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Tuple, Dict, Any, Optional

from .config import ConfigError, WorldConfig, load_yaml
from .draw import Clear, DrawCommand, LineShape, PolygonShape, RectShape
from .geometry_utils import Point, Segment

if TYPE_CHECKING:
    from .robot import Robot


Color = Tuple[int, int, int]


@dataclass(frozen=True)
class Wall:
    """Coloured obstacle made of line segments.

    A wall is either a single open edge (the arena boundary) or a closed
    polygon loop whose last segment ends where the first begins.
    """

    color: Color
    segments: Tuple[Segment, ...]

    @property
    def is_edge(self) -> bool:
        return len(self.segments) == 1


class World:
    """2D arena with boundary walls, box obstacles and robots.

    Coordinates are absolute world units with the origin at the top-left
    corner; y grows downward as on screen.

    Parameters
    ----------
    width : float
        Arena width.
    height : float
        Arena height.
    boundary_color : tuple
        Colour of the four perimeter walls.
    ground_color : tuple
        Floor colour.
    """

    def __init__(
        self,
        width: float,
        height: float,
        boundary_color: Color = (128, 0, 128),
        ground_color: Color = (0, 128, 0),
    ) -> None:
        if width <= 0 or height <= 0:
            raise ConfigError(f"world dimensions must be positive, got {width}x{height}")
        self.width = float(width)
        self.height = float(height)
        self.time = 0.0
        self.boundary_color = boundary_color
        self.ground_color = ground_color
        self.walls: List[Wall] = []
        self.robots: List["Robot"] = []

        p1 = Point(0.0, 0.0)
        p2 = Point(0.0, self.height)
        p3 = Point(self.width, self.height)
        p4 = Point(self.width, 0.0)
        # Four separate edges rather than one box.
        self.add_wall(boundary_color, Segment(p1, p2))
        self.add_wall(boundary_color, Segment(p2, p3))
        self.add_wall(boundary_color, Segment(p3, p4))
        self.add_wall(boundary_color, Segment(p4, p1))

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_config(cls, config: WorldConfig) -> "World":
        world = cls(
            width=config.width,
            height=config.height,
            boundary_color=config.boundary_color,
            ground_color=config.ground_color,
        )
        for box in config.boxes:
            world.add_box(box.color, box.x1, box.y1, box.x2, box.y2)
        return world

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "World":
        return cls.from_config(WorldConfig.from_dict(data))

    @classmethod
    def from_file(cls, path: str) -> "World":
        """Create a world from a YAML/JSON file (either bare or under `world:`)."""
        data = load_yaml(path)
        return cls.from_dict(data.get("world", data))

    def add_box(self, color: Color, x1: float, y1: float, x2: float, y2: float) -> None:
        """Add a closed 4-segment box with opposite corners (x1, y1), (x2, y2)."""
        if x1 == x2 or y1 == y2:
            raise ConfigError(f"box ({x1}, {y1})-({x2}, {y2}) has no area")
        p1 = Point(x1, y1)
        p2 = Point(x2, y1)
        p3 = Point(x2, y2)
        p4 = Point(x1, y2)
        self.add_wall(
            color,
            Segment(p1, p2),
            Segment(p2, p3),
            Segment(p3, p4),
            Segment(p4, p1),
        )

    def add_wall(self, color: Color, *segments: Segment) -> None:
        if not segments:
            raise ConfigError("a wall needs at least one segment")
        self.walls.append(Wall(color=tuple(color), segments=tuple(segments)))

    def add_robot(self, robot: "Robot") -> None:
        """Append a robot to the roster and give it its slot index."""
        if robot.index is not None:
            raise ConfigError(f"robot '{robot.name}' already belongs to a world")
        robot.index = len(self.robots)
        self.robots.append(robot)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def robot(self, index: int) -> "Robot":
        return self.robots[index]

    def other_robots(self, index: Optional[int]) -> List["Robot"]:
        """Every robot except the one in slot `index`."""
        return [r for i, r in enumerate(self.robots) if i != index]

    def size(self) -> float:
        """Largest arena dimension; the camera's fade distance."""
        return max(self.width, self.height)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the box obstacles back to config form."""
        boxes = []
        for wall in self.walls[4:]:
            if len(wall.segments) != 4:
                continue
            xs = [s.p1.x for s in wall.segments]
            ys = [s.p1.y for s in wall.segments]
            boxes.append(
                {
                    "color": list(wall.color),
                    "p1": {"x": min(xs), "y": min(ys)},
                    "p2": {"x": max(xs), "y": max(ys)},
                }
            )
        return {"width": self.width, "height": self.height, "boxes": boxes}

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------
    def update(self, time: float) -> List[DrawCommand]:
        """Advance one tick and return the commands that draw it.

        Robots are updated in roster order (motion, sensors, cameras) and
        drawn right after their own update.
        """
        self.time = time
        commands: List[DrawCommand] = self.draw()
        for robot in self.robots:
            commands.extend(robot.update(self, time))
            commands.extend(robot.draw())
        return commands

    def draw(self) -> List[DrawCommand]:
        """Ground, obstacle fills, then boundary edges."""
        commands: List[DrawCommand] = [
            Clear((0, 0, 0)),
            RectShape(0.0, 0.0, self.width, self.height, fill=self.ground_color),
        ]
        for wall in self.walls:
            if not wall.is_edge:
                points = tuple((s.p1.x, s.p1.y) for s in wall.segments)
                commands.append(PolygonShape(points, fill=wall.color))
        for wall in self.walls:
            if wall.is_edge:
                seg = wall.segments[0]
                commands.append(
                    LineShape((seg.p1.x, seg.p1.y), (seg.p2.x, seg.p2.y), wall.color, 3)
                )
        return commands
