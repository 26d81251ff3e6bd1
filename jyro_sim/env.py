from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
import math
import random

import gymnasium as gym
from gymnasium import spaces
import numpy as np

from .config import ConfigError, SimConfig
from .robot import Robot
from .simulation import Simulation, WanderPolicy


@dataclass
class EnvConfig:
    max_steps: int = 500
    max_linear_speed: float = 5.0
    max_angular_speed: float = 0.2
    stall_penalty: float = 1.0
    controlled_robot: Optional[str] = None
    wander_others: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnvConfig":
        return cls(
            max_steps=int(data.get("max_steps", 500)),
            max_linear_speed=float(data.get("max_linear_speed", 5.0)),
            max_angular_speed=float(data.get("max_angular_speed", 0.2)),
            stall_penalty=float(data.get("stall_penalty", 1.0)),
            controlled_robot=data.get("controlled_robot"),
            wander_others=bool(data.get("wander_others", True)),
        )


class JyroEnv(gym.Env):
    """Gymnasium environment driving one robot of a jyro world.

    Action is (vx, va) in body units per tick. Observation is the controlled
    robot's range-sensor readings followed by its stalled flag. Reward is
    the distance actually covered in the tick, minus a penalty when the move
    was rejected. Other robots wander under a seeded random policy.
    """

    metadata = {"render_modes": ["none"], "render_fps": 10}

    def __init__(self, sim_config: SimConfig, config: EnvConfig, seed: int = 0) -> None:
        super().__init__()
        if not sim_config.robots:
            raise ConfigError("environment needs at least one robot")
        names = [r.name for r in sim_config.robots]
        if config.controlled_robot is not None and config.controlled_robot not in names:
            raise ConfigError(f"controlled robot '{config.controlled_robot}' is not in the world")

        self.sim_config = sim_config
        self.cfg = config
        self.controlled = config.controlled_robot or names[0]

        self.rng = random.Random(int(seed))
        self.sim = self._build_simulation()
        self._step_count = 0

        num_sensors = len(self.robot.range_sensors)
        self.observation_space = spaces.Box(
            low=0.0, high=1.0, shape=(num_sensors + 1,), dtype=np.float32
        )
        self.action_space = spaces.Box(
            low=np.array(
                [-self.cfg.max_linear_speed, -self.cfg.max_angular_speed],
                dtype=np.float32,
            ),
            high=np.array(
                [self.cfg.max_linear_speed, self.cfg.max_angular_speed],
                dtype=np.float32,
            ),
            dtype=np.float32,
        )
        self.action_space.seed(int(seed))

    @property
    def robot(self) -> Robot:
        for robot in self.sim.world.robots:
            if robot.name == self.controlled:
                return robot
        raise KeyError(self.controlled)

    def _build_simulation(self) -> Simulation:
        sim = Simulation.from_config(self.sim_config)
        if self.cfg.wander_others:
            for robot in sim.world.robots:
                if robot.name != self.controlled:
                    sim.policies[robot.name] = WanderPolicy(self.rng)
        return sim

    # ------------------------------------------------------------------
    # Gym API
    # ------------------------------------------------------------------
    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        if seed is not None:
            self.rng.seed(int(seed))
            self.action_space.seed(int(seed))

        self._step_count = 0
        self.sim = self._build_simulation()
        robot = self.robot
        robot.stop()
        # Fill the sensors before the first action.
        for sensor in robot.range_sensors:
            sensor.update(robot, self.sim.world)
        return self._get_obs(), {}

    def step(
        self, action: np.ndarray
    ) -> Tuple[np.ndarray, float, bool, bool, Dict[str, Any]]:
        self._step_count += 1
        action = np.asarray(action, dtype=np.float32)
        action = np.clip(action, self.action_space.low, self.action_space.high)

        robot = self.robot
        robot.vx = float(action[0])
        robot.va = float(action[1])
        x0, y0 = robot.x, robot.y

        self.sim.step()

        moved = math.hypot(robot.x - x0, robot.y - y0)
        reward = moved - (self.cfg.stall_penalty if robot.stalled else 0.0)
        truncated = self._step_count >= self.cfg.max_steps

        info: Dict[str, Any] = {
            "stalled": robot.stalled,
            "distance_moved": moved,
            "time": self.sim.time,
        }
        return self._get_obs(), float(reward), False, bool(truncated), info

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------
    def _get_obs(self) -> np.ndarray:
        robot = self.robot
        readings = [s.get_reading() for s in robot.range_sensors]
        obs = np.asarray(readings + [1.0 if robot.stalled else 0.0], dtype=np.float32)
        return np.clip(obs, 0.0, 1.0)
