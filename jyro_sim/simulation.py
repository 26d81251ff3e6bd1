"""
Fixed-step simulation driver.

A Simulation owns a World and advances it one tick at a time: velocity
policies first, then the world update (robot motion, sensors, cameras in
roster order). Ticks never overlap, so anything read between two `step`
calls is a consistent snapshot.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import random

from telemetry.logger import TelemetryLogger

from .config import SimConfig
from .draw import DrawCommand
from .robot import Robot
from .world import World


class VelocityPolicy(ABC):
    """Adjusts a robot's commanded velocities between ticks."""

    @abstractmethod
    def apply(self, robot: Robot) -> None:
        """Mutate robot.vx / robot.vy / robot.va in place."""


@dataclass
class WanderPolicy(VelocityPolicy):
    """Random-walk velocity perturbation.

    A stalled robot backs off and turns by a random amount; a free robot
    occasionally gets a small random turn rate. All randomness comes from
    `rng`, so a seeded generator makes runs reproducible.
    """

    rng: random.Random
    jitter: float = 0.05
    jitter_probability: float = 0.01
    stall_turn: float = 0.1

    def apply(self, robot: Robot) -> None:
        if robot.stalled:
            robot.vx = -robot.vx
            robot.va = self.rng.uniform(-self.stall_turn, self.stall_turn)
        elif robot.vx != 0.0 and self.rng.random() < self.jitter_probability:
            robot.va = self.rng.uniform(-self.jitter, self.jitter)


class Simulation:
    """Tick driver for a World.

    Parameters
    ----------
    world : World
        The world to advance.
    dt : float
        Time added per tick.
    policies : dict
        Optional velocity policy per robot name, applied before each tick.
    telemetry : TelemetryLogger
        Optional JSONL sink; one record per tick.
    """

    def __init__(
        self,
        world: World,
        dt: float = 1.0,
        policies: Optional[Dict[str, VelocityPolicy]] = None,
        telemetry: Optional[TelemetryLogger] = None,
    ) -> None:
        self.world = world
        self.dt = dt
        self.policies: Dict[str, VelocityPolicy] = dict(policies or {})
        self.telemetry = telemetry
        self.steps = 0

    @classmethod
    def from_config(
        cls,
        config: SimConfig,
        telemetry: Optional[TelemetryLogger] = None,
    ) -> "Simulation":
        world = World.from_config(config.world)
        for robot_cfg in config.robots:
            world.add_robot(Robot.from_config(robot_cfg))
        return cls(world=world, dt=config.dt, telemetry=telemetry)

    @property
    def time(self) -> float:
        return self.world.time

    def step(self) -> List[DrawCommand]:
        """Advance one tick and return its draw commands."""
        for robot in self.world.robots:
            policy = self.policies.get(robot.name)
            if policy is not None:
                policy.apply(robot)
        self.steps += 1
        commands = self.world.update(self.world.time + self.dt)
        if self.telemetry is not None:
            self.telemetry.log_step(self.snapshot())
        return commands

    def run(self, steps: int) -> None:
        for _ in range(steps):
            self.step()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "step": self.steps,
            "time": self.world.time,
            "robots": [r.to_dict() for r in self.world.robots],
        }
