from __future__ import annotations

import random
from pathlib import Path

from jyro_sim.config import SimConfig
from jyro_sim.draw import PopMatrix, PushMatrix
from jyro_sim.simulation import Simulation, WanderPolicy
from telemetry.logger import TelemetryLogger, iter_records, robot_track

SIM_YAML = Path(__file__).resolve().parents[1] / "configs" / "sim.yaml"


def build(seed: int = 0) -> Simulation:
    sim = Simulation.from_config(SimConfig.from_file(str(SIM_YAML)))
    rng = random.Random(seed)
    for robot in sim.world.robots:
        sim.policies[robot.name] = WanderPolicy(rng, jitter_probability=0.2)
    return sim


def test_step_advances_time() -> None:
    sim = Simulation.from_config(SimConfig.from_file(str(SIM_YAML)))
    commands = sim.step()
    sim.step()
    assert sim.steps == 2
    assert sim.time == 2.0
    assert commands
    assert sum(isinstance(c, PushMatrix) for c in commands) == sum(
        isinstance(c, PopMatrix) for c in commands
    )


def test_seeded_runs_are_reproducible() -> None:
    a = build(seed=7)
    b = build(seed=7)
    a.run(150)
    b.run(150)
    for ra, rb in zip(a.world.robots, b.world.robots):
        assert (ra.x, ra.y, ra.direction, ra.stalled) == (rb.x, rb.y, rb.direction, rb.stalled)


def test_wander_policy_reacts_to_stall() -> None:
    sim = build()
    robot = sim.world.robots[0]
    robot.vx = 3.0
    robot.stalled = True
    WanderPolicy(random.Random(0)).apply(robot)
    assert robot.vx == -3.0
    assert -0.1 <= robot.va <= 0.1


def test_telemetry_records_every_tick(tmp_path) -> None:
    path = tmp_path / "telemetry" / "run.jsonl"
    with TelemetryLogger(str(path)) as logger:
        sim = Simulation.from_config(SimConfig.from_file(str(SIM_YAML)), telemetry=logger)
        sim.run(5)

    records = list(iter_records(str(path)))
    assert [r["step"] for r in records] == [1, 2, 3, 4, 5]
    track = robot_track(str(path), "red")
    assert len(track) == 5
    assert track[-1]["time"] == 5.0
    assert set(track[0]) >= {"x", "y", "direction", "stalled", "ir"}
