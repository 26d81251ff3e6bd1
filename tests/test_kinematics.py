from __future__ import annotations

import math

from jyro_sim.robot import Robot
from jyro_sim.world import World

# Half side of the default collision square (radius 10 at 45 degrees).
HALF_SIDE = 10.0 * math.cos(math.pi / 4)


def make_robot(x: float, y: float, direction: float = 0.0) -> Robot:
    return Robot(x, y, direction, range_sensors=[], cameras=[])


def test_robot_forward_motion() -> None:
    world = World(width=500, height=250)
    robot = make_robot(100.0, 125.0)
    world.add_robot(robot)

    robot.forward(5.0)
    world.update(1.0)

    assert not robot.stalled
    assert math.isclose(robot.x, 105.0, rel_tol=1e-9)
    assert math.isclose(robot.y, 125.0, abs_tol=1e-9)


def test_robot_motion_follows_heading() -> None:
    world = World(width=500, height=250)
    robot = make_robot(250.0, 125.0, math.pi / 2)
    world.add_robot(robot)

    robot.forward(4.0)
    world.update(1.0)

    assert math.isclose(robot.x, 250.0, abs_tol=1e-9)
    assert math.isclose(robot.y, 129.0)


def test_turn_subtracts_angular_velocity() -> None:
    world = World(width=500, height=250)
    robot = make_robot(250.0, 125.0)
    world.add_robot(robot)

    robot.turn(0.1)
    world.update(1.0)
    world.update(2.0)

    assert math.isclose(robot.direction, -0.2)


def test_robot_at_rest_never_stalls() -> None:
    world = World(width=500, height=250)
    # Collision square 1 unit clear of a box and of the left boundary.
    world.add_box((0, 0, 0), 30.0 + HALF_SIDE + 1.0, 100.0, 60.0, 150.0)
    robot = make_robot(HALF_SIDE + 1.0 + 20.0, 125.0)
    robot_corner = make_robot(HALF_SIDE + 1.0, HALF_SIDE + 1.0)
    world.add_robot(robot)
    world.add_robot(robot_corner)

    for t in range(1, 20):
        world.update(float(t))
        assert not robot.stalled
        assert not robot_corner.stalled


def test_stall_against_flush_wall_keeps_pose() -> None:
    world = World(width=500, height=250)
    # Wall face 2 units ahead of the front of the collision square.
    face = 100.0 + HALF_SIDE + 2.0
    world.add_box((0, 0, 255), face, 20.0, face + 10.0, 230.0)
    robot = make_robot(100.0, 125.0)
    world.add_robot(robot)

    robot.forward(5.0)
    world.update(1.0)

    assert robot.stalled
    assert robot.x == 100.0
    assert robot.y == 125.0
    assert robot.direction == 0.0


def test_stall_discards_rotation_too() -> None:
    world = World(width=500, height=250)
    face = 100.0 + HALF_SIDE + 2.0
    world.add_box((0, 0, 255), face, 20.0, face + 10.0, 230.0)
    robot = make_robot(100.0, 125.0, 0.25)
    world.add_robot(robot)
    before = (robot.x, robot.y, robot.direction)

    robot.vx = 8.0
    robot.va = 0.3
    world.update(1.0)

    assert robot.stalled
    assert (robot.x, robot.y, robot.direction) == before


def test_backing_away_clears_stall() -> None:
    world = World(width=500, height=250)
    face = 100.0 + HALF_SIDE + 2.0
    world.add_box((0, 0, 255), face, 20.0, face + 10.0, 230.0)
    robot = make_robot(100.0, 125.0)
    world.add_robot(robot)

    robot.forward(5.0)
    world.update(1.0)
    assert robot.stalled

    robot.backward(5.0)
    world.update(2.0)
    assert not robot.stalled
    assert math.isclose(robot.x, 95.0)


def test_boundary_blocks_robot() -> None:
    world = World(width=500, height=250)
    robot = make_robot(500.0 - HALF_SIDE - 1.0, 125.0)
    world.add_robot(robot)

    robot.forward(3.0)
    world.update(1.0)

    assert robot.stalled
    assert robot.x == 500.0 - HALF_SIDE - 1.0
