"""
Configuration records for worlds, robots and their devices.

Configs are plain dicts (usually from YAML) turned into dataclasses here.
All validation happens at this boundary so that nothing in the tick loop
has to deal with malformed input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml


Color = Tuple[int, int, int]


class ConfigError(ValueError):
    """Invalid world, robot or device configuration."""


def load_yaml(path: str) -> Dict[str, Any]:
    """Read a YAML (or JSON) file into a dict."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def parse_color(value: Any, where: str) -> Color:
    """Accept [r, g, b] (an alpha entry is ignored) with 0..255 channels."""
    if not isinstance(value, (list, tuple)) or len(value) not in (3, 4):
        raise ConfigError(f"{where}: color must be [r, g, b], got {value!r}")
    r, g, b = (int(c) for c in value[:3])
    if any(c < 0 or c > 255 for c in (r, g, b)):
        raise ConfigError(f"{where}: color channels must be in 0..255, got {value!r}")
    return r, g, b


def _require(data: Dict[str, Any], key: str, where: str) -> Any:
    if key not in data:
        raise ConfigError(f"{where}: missing required key '{key}'")
    return data[key]


# ---------------------------------------------------------------------------
# World
# ---------------------------------------------------------------------------


@dataclass
class BoxConfig:
    """Axis-aligned box obstacle given by two opposite corners."""

    color: Color
    x1: float
    y1: float
    x2: float
    y2: float

    def __post_init__(self) -> None:
        if self.x1 == self.x2 or self.y1 == self.y2:
            raise ConfigError(
                f"box ({self.x1}, {self.y1})-({self.x2}, {self.y2}) has no area"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoxConfig":
        p1 = _require(data, "p1", "box")
        p2 = _require(data, "p2", "box")
        return cls(
            color=parse_color(data.get("color", [0, 0, 0]), "box"),
            x1=float(p1["x"]),
            y1=float(p1["y"]),
            x2=float(p2["x"]),
            y2=float(p2["y"]),
        )


@dataclass
class WorldConfig:
    width: float
    height: float
    boxes: List[BoxConfig] = field(default_factory=list)
    boundary_color: Color = (128, 0, 128)
    ground_color: Color = (0, 128, 0)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(
                f"world dimensions must be positive, got {self.width}x{self.height}"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorldConfig":
        kwargs: Dict[str, Any] = {}
        if "boundaryColor" in data:
            kwargs["boundary_color"] = parse_color(data["boundaryColor"], "world")
        if "groundColor" in data:
            kwargs["ground_color"] = parse_color(data["groundColor"], "world")
        return cls(
            width=float(_require(data, "width", "world")),
            height=float(_require(data, "height", "world")),
            boxes=[BoxConfig.from_dict(b) for b in data.get("boxes", []) or []],
            **kwargs,
        )


# ---------------------------------------------------------------------------
# Devices
# ---------------------------------------------------------------------------


@dataclass
class RangeSensorConfig:
    """Range sensor mount and cone.

    Attributes
    ----------
    position : float
        Radial offset of the mount from the robot center.
    direction : float
        Mount angle relative to the robot heading (radians).
    max : float
        Maximum range, world units.
    width : float
        Full cone width (radians); 0 casts a single ray.
    """

    position: float
    direction: float
    max: float = 20.0
    width: float = 0.0

    def __post_init__(self) -> None:
        if self.max <= 0:
            raise ConfigError(f"range sensor max must be positive, got {self.max}")
        if self.width < 0:
            raise ConfigError(f"range sensor width must be >= 0, got {self.width}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RangeSensorConfig":
        return cls(
            position=float(data.get("position", 0.0)),
            direction=float(data.get("direction", 0.0)),
            max=float(data.get("max", 20.0)),
            width=float(data.get("width", 0.0)),
        )


CAMERA_TYPES = ("color", "depth")


@dataclass
class CameraConfig:
    type: str = "color"
    width: int = 256
    height: int = 128
    angle: float = 60.0
    colors_fade_with_distance: bool = True
    max_range: float = 1000.0

    def __post_init__(self) -> None:
        if self.type not in CAMERA_TYPES:
            raise ConfigError(
                f"unknown camera type '{self.type}', expected one of {CAMERA_TYPES}"
            )
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(
                f"camera resolution must be positive, got {self.width}x{self.height}"
            )
        if not 0 < self.angle < 360:
            raise ConfigError(f"camera field of view must be in (0, 360), got {self.angle}")
        if self.max_range <= 0:
            raise ConfigError(f"camera range must be positive, got {self.max_range}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CameraConfig":
        return cls(
            type=str(data.get("type", "color")),
            width=int(data.get("width", 256)),
            height=int(data.get("height", 128)),
            angle=float(data.get("angle", 60.0)),
            colors_fade_with_distance=bool(data.get("colorsFadeWithDistance", True)),
            max_range=float(data.get("maxRange", 1000.0)),
        )


# ---------------------------------------------------------------------------
# Robot
# ---------------------------------------------------------------------------


@dataclass
class RobotConfig:
    """Robot pose, looks and devices.

    `body`, `range_sensors` and `cameras` left as None mean "use the robot
    defaults"; an explicit empty list for a device means "none".
    """

    name: str
    x: float
    y: float
    direction: float = 0.0
    color: Color = (255, 0, 0)
    body: Optional[List[Tuple[float, float]]] = None
    range_sensors: Optional[List[RangeSensorConfig]] = None
    cameras: Optional[List[CameraConfig]] = None
    vx: float = 0.0
    vy: float = 0.0
    va: float = 0.0
    bounding_radius: float = 10.0
    debug: bool = False

    def __post_init__(self) -> None:
        if self.body is not None and len(self.body) < 3:
            raise ConfigError(
                f"robot '{self.name}': body polygon needs at least 3 vertices"
            )
        if self.bounding_radius <= 0:
            raise ConfigError(f"robot '{self.name}': bounding radius must be positive")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RobotConfig":
        name = str(_require(data, "name", "robot"))
        where = f"robot '{name}'"
        body = None
        if "body" in data:
            body = [_vertex(v, where) for v in data["body"] or []]
        sensors = None
        if "rangeSensors" in data:
            sensors = [RangeSensorConfig.from_dict(s) for s in data["rangeSensors"] or []]
        cameras = None
        if "cameras" in data:
            cameras = [CameraConfig.from_dict(c) for c in data["cameras"] or []]
        return cls(
            name=name,
            x=float(_require(data, "x", where)),
            y=float(_require(data, "y", where)),
            direction=float(data.get("direction", 0.0)),
            color=parse_color(data.get("color", [255, 0, 0]), where),
            body=body,
            range_sensors=sensors,
            cameras=cameras,
            vx=float(data.get("vx", 0.0)),
            vy=float(data.get("vy", 0.0)),
            va=float(data.get("va", 0.0)),
            bounding_radius=float(data.get("boundingRadius", 10.0)),
            debug=bool(data.get("debug", False)),
        )


def _vertex(value: Sequence[Any], where: str) -> Tuple[float, float]:
    if len(value) != 2:
        raise ConfigError(f"{where}: body vertex must be [x, y], got {value!r}")
    return float(value[0]), float(value[1])


# ---------------------------------------------------------------------------
# Whole simulation
# ---------------------------------------------------------------------------


@dataclass
class SimConfig:
    world: WorldConfig
    robots: List[RobotConfig] = field(default_factory=list)
    dt: float = 1.0
    seed: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimConfig":
        world = WorldConfig.from_dict(_require(data, "world", "config"))
        robots = [RobotConfig.from_dict(r) for r in data.get("robots", []) or []]

        by_name: Dict[str, RobotConfig] = {}
        for robot in robots:
            if robot.name in by_name:
                raise ConfigError(f"duplicate robot name '{robot.name}'")
            by_name[robot.name] = robot

        # Devices may also be declared apart from the robot they belong to.
        for attachment in data.get("attachments", []) or []:
            target = str(_require(attachment, "robot", "attachment"))
            if target not in by_name:
                raise ConfigError(f"attachment refers to unknown robot '{target}'")
            robot = by_name[target]
            for s in attachment.get("rangeSensors", []) or []:
                if robot.range_sensors is None:
                    robot.range_sensors = []
                robot.range_sensors.append(RangeSensorConfig.from_dict(s))
            for c in attachment.get("cameras", []) or []:
                if robot.cameras is None:
                    robot.cameras = []
                robot.cameras.append(CameraConfig.from_dict(c))

        sim = data.get("sim", {}) or {}
        dt = float(sim.get("dt", 1.0))
        if dt <= 0:
            raise ConfigError(f"sim.dt must be positive, got {dt}")
        return cls(world=world, robots=robots, dt=dt, seed=int(data.get("seed", 0)))

    @classmethod
    def from_file(cls, path: str) -> "SimConfig":
        return cls.from_dict(load_yaml(path))
