from __future__ import annotations

import pytest

from jyro_sim.config import ConfigError
from jyro_sim.draw import Clear, LineShape, PolygonShape
from jyro_sim.robot import Robot
from jyro_sim.world import World


def test_boundary_walls_cover_perimeter() -> None:
    world = World(width=500, height=250)
    assert len(world.walls) == 4
    assert all(w.is_edge for w in world.walls)
    corners = {(s.p1.x, s.p1.y) for w in world.walls for s in w.segments}
    assert corners == {(0.0, 0.0), (0.0, 250.0), (500.0, 250.0), (500.0, 0.0)}


def test_add_box_is_closed_loop() -> None:
    world = World(width=500, height=250)
    world.add_box((255, 0, 255), 200, 95, 210, 170)
    box = world.walls[-1]
    assert len(box.segments) == 4
    assert box.segments[0].p1 == box.segments[-1].p2
    assert box.color == (255, 0, 255)


def test_from_dict_builds_boxes() -> None:
    world = World.from_dict(
        {
            "width": 500,
            "height": 250,
            "boxes": [
                {"color": [0, 0, 0], "p1": {"x": 100, "y": 0}, "p2": {"x": 110, "y": 110}},
                {"color": [255, 255, 0], "p1": {"x": 300, "y": 10}, "p2": {"x": 310, "y": 95}},
            ],
        }
    )
    assert len(world.walls) == 6
    assert world.to_dict()["boxes"][1]["p2"] == {"x": 310.0, "y": 95.0}


def test_non_positive_dimensions_rejected() -> None:
    with pytest.raises(ConfigError):
        World(width=-1, height=250)
    with pytest.raises(ConfigError):
        World(width=500, height=0)


def test_flat_box_rejected() -> None:
    world = World(width=500, height=250)
    with pytest.raises(ConfigError):
        world.add_box((0, 0, 0), 10, 10, 10, 50)


def test_add_robot_assigns_index_once() -> None:
    world = World(width=500, height=250)
    a = Robot(100, 100, cameras=[])
    b = Robot(300, 100, cameras=[])
    world.add_robot(a)
    world.add_robot(b)
    assert (a.index, b.index) == (0, 1)
    assert world.robot(1) is b
    assert world.other_robots(0) == [b]
    with pytest.raises(ConfigError):
        world.add_robot(a)


def test_update_sets_time_and_emits_commands() -> None:
    world = World(width=500, height=250)
    world.add_box((0, 0, 0), 100, 0, 110, 110)
    world.add_robot(Robot(300, 125, cameras=[]))
    commands = world.update(3.0)
    assert world.time == 3.0
    assert isinstance(commands[0], Clear)
    assert sum(isinstance(c, LineShape) for c in commands) >= 4
    assert any(isinstance(c, PolygonShape) and c.fill == (0, 0, 0) for c in commands)
