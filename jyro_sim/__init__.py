"""
Top-level package for the jyro 2D robot simulator.

Components:
- geometry_utils: points, segments, intersection tests, rotations
- hit: ray hit records and ray casting against walls
- world: arena, walls, robot roster
- robot: kinematics, collision rejection ("stall"), drawing
- sensors: range sensors and column ray-casting cameras
- simulation: fixed-step tick driver and velocity policies
- draw: draw-command values and the transform stack renderers use
- config: YAML/dict configuration and validation
- env: Gymnasium-compatible environment
- render: pygame-based visualization
"""

from .config import ConfigError, SimConfig, WorldConfig, RobotConfig
from .world import World, Wall
from .robot import Robot
from .sensors import RangeSensor, Camera, CameraType
from .hit import Hit, cast_ray
from .simulation import Simulation, WanderPolicy

__all__ = [
    "ConfigError",
    "SimConfig",
    "WorldConfig",
    "RobotConfig",
    "World",
    "Wall",
    "Robot",
    "RangeSensor",
    "Camera",
    "CameraType",
    "Hit",
    "cast_ray",
    "Simulation",
    "WanderPolicy",
]
