from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path
from typing import Optional

# Ensure project root is on path when running this script directly
_script_dir = Path(__file__).resolve().parent
_project_root = _script_dir.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import pygame

from jyro_sim.config import SimConfig, load_yaml
from jyro_sim.render import PygameRenderer
from jyro_sim.simulation import Simulation, WanderPolicy
from telemetry.logger import TelemetryLogger


def main() -> None:
    parser = argparse.ArgumentParser(description="Jyro simulator viewer with keyboard teleop.")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/sim.yaml",
        help="Path to sim YAML config.",
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=0,
        help="Stop after this many ticks (0 = run until closed).",
    )
    args = parser.parse_args()

    cfg = load_yaml(args.config)
    sim_config = SimConfig.from_dict(cfg)
    render_cfg = cfg.get("render", {})
    telemetry_cfg = cfg.get("telemetry", {})
    fps = int(cfg.get("sim", {}).get("fps", 10))

    telemetry: Optional[TelemetryLogger] = None
    if telemetry_cfg.get("enabled", False):
        telemetry = TelemetryLogger(telemetry_cfg["path"], append=bool(telemetry_cfg.get("append", True)))

    sim = Simulation.from_config(sim_config, telemetry=telemetry)
    if not sim.world.robots:
        print("Config has no robots; nothing to drive.", file=sys.stderr)
        sys.exit(1)
    driven = sim.world.robots[0]

    if render_cfg.get("wander", True):
        rng = random.Random(sim_config.seed)
        for robot in sim.world.robots[1:]:
            sim.policies[robot.name] = WanderPolicy(rng)

    camera_shape = (256, 128)
    if driven.cameras:
        camera_shape = (driven.cameras[0].width, driven.cameras[0].height)
    renderer = PygameRenderer(
        world_width=sim.world.width,
        world_height=sim.world.height,
        zoom=float(render_cfg.get("zoom", 2.0)),
        camera_shape=camera_shape,
        camera_scale=float(render_cfg.get("camera_scale", 2.0)),
        show_camera=bool(render_cfg.get("show_camera", True)) and bool(driven.cameras),
    )

    print(f"Driving '{driven.name}'. W/S faster/slower, A/D turn, SPACE stop, G debug, ESC quit.")

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    driven.stop()
                elif event.key == pygame.K_w:
                    driven.vx += 0.5
                elif event.key == pygame.K_s:
                    driven.vx -= 0.5
                elif event.key == pygame.K_a:
                    driven.va += 0.01
                elif event.key == pygame.K_d:
                    driven.va -= 0.01
                elif event.key == pygame.K_g:
                    driven.debug = not driven.debug

        commands = sim.step()
        picture = driven.take_picture() if driven.cameras else None
        hud = [f"t={sim.time:.0f}  stalled={driven.stalled}"]
        hud += [f"IR[{i}]: {s.get_reading():.3f}" for i, s in enumerate(driven.range_sensors)]
        renderer.tick(fps)
        renderer.draw(commands, picture=picture, hud_lines=hud)

        if args.steps and sim.steps >= args.steps:
            running = False

    renderer.close()
    if telemetry is not None:
        telemetry.close()
        print(f"Saved telemetry to {telemetry.path}")


if __name__ == "__main__":
    main()
