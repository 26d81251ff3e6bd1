from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple
import math

import numpy as np
import pygame

from .draw import (
    ArcShape,
    Clear,
    DrawCommand,
    EllipseShape,
    LineShape,
    PolygonShape,
    RectShape,
    TransformStack,
    Vertex,
)


THEME = {
    "bg": (18, 22, 32),
    "hud_bg": (28, 34, 48),
    "hud_border": (55, 65, 88),
    "hud_text": (200, 220, 255),
}

# Segments used to approximate a sensor arc.
ARC_STEPS = 16


class PygameRenderer:
    """Replays simulator draw commands into a pygame window.

    The world is drawn at the left, scaled by `zoom`; world y grows downward
    like screen y, so no flip is needed. The latest camera picture, if any,
    is shown to the right of the world with a small HUD below it.
    """

    def __init__(
        self,
        world_width: float,
        world_height: float,
        zoom: float = 2.0,
        camera_shape: Tuple[int, int] = (256, 128),
        camera_scale: float = 2.0,
        show_camera: bool = True,
    ) -> None:
        pygame.init()
        pygame.display.set_caption("Jyro Simulator")
        self.world_width = world_width
        self.world_height = world_height
        self.zoom = zoom
        self.camera_scale = camera_scale
        self.show_camera = show_camera
        self.camera_shape = camera_shape

        cam_w = int(camera_shape[0] * camera_scale) if show_camera else 0
        cam_h = int(camera_shape[1] * camera_scale) if show_camera else 0
        self.window_width = int(world_width * zoom) + cam_w
        self.window_height = max(int(world_height * zoom), cam_h + 80)
        self.screen = pygame.display.set_mode((self.window_width, self.window_height))
        self.overlay = pygame.Surface((self.window_width, self.window_height), pygame.SRCALPHA)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 13)

    # ------------------------------------------------------------------
    # Coordinate transforms
    # ------------------------------------------------------------------
    def _to_screen(self, points: Sequence[Vertex]) -> List[Tuple[int, int]]:
        return [(int(x * self.zoom), int(y * self.zoom)) for x, y in points]

    def _target(self, color: Sequence[int]) -> Tuple[pygame.Surface, Tuple[int, ...]]:
        """Translucent colours go to the overlay, opaque ones straight to the screen."""
        if len(color) == 4 and color[3] < 255:
            return self.overlay, tuple(color)
        return self.screen, tuple(color[:3])

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def draw(
        self,
        commands: Iterable[DrawCommand],
        picture: Optional[np.ndarray] = None,
        hud_lines: Sequence[str] = (),
    ) -> None:
        """Render one frame."""
        self.screen.fill(THEME["bg"])
        self.overlay.fill((0, 0, 0, 0))
        stack = TransformStack()
        for command in commands:
            if stack.apply(command):
                continue
            self._draw_command(command, stack)
        self.screen.blit(self.overlay, (0, 0))

        if self.show_camera and picture is not None:
            self._draw_picture(picture)
        self._draw_hud(hud_lines)
        pygame.display.flip()

    def _draw_command(self, command: DrawCommand, stack: TransformStack) -> None:
        if isinstance(command, Clear):
            self.screen.fill(command.color[:3])
        elif isinstance(command, RectShape):
            corners = [
                (command.x, command.y),
                (command.x + command.w, command.y),
                (command.x + command.w, command.y + command.h),
                (command.x, command.y + command.h),
            ]
            self._polygon(stack.transform(corners), command.fill, command.stroke, command.stroke_width)
        elif isinstance(command, PolygonShape):
            self._polygon(stack.transform(command.points), command.fill, command.stroke, command.stroke_width)
        elif isinstance(command, LineShape):
            start, end = self._to_screen(stack.transform([command.start, command.end]))
            surface, color = self._target(command.color)
            pygame.draw.line(surface, color, start, end, command.width)
        elif isinstance(command, ArcShape):
            cx, cy = command.center
            pts = [(cx, cy)]
            for k in range(ARC_STEPS + 1):
                a = command.start + (command.stop - command.start) * k / ARC_STEPS
                pts.append((cx + command.radius * math.cos(a), cy + command.radius * math.sin(a)))
            self._polygon(stack.transform(pts), command.fill, command.stroke, 1)
        elif isinstance(command, EllipseShape):
            (cx, cy), = self._to_screen(stack.transform([command.center]))
            w = max(1, int(command.w * self.zoom))
            h = max(1, int(command.h * self.zoom))
            if command.fill is not None:
                surface, color = self._target(command.fill)
                pygame.draw.ellipse(surface, color, pygame.Rect(cx - w // 2, cy - h // 2, w, h))

    def _polygon(
        self,
        points: Sequence[Vertex],
        fill: Optional[Sequence[int]],
        stroke: Optional[Sequence[int]],
        stroke_width: int,
    ) -> None:
        screen_pts = self._to_screen(points)
        if len(screen_pts) < 3:
            return
        if fill is not None:
            surface, color = self._target(fill)
            pygame.draw.polygon(surface, color, screen_pts)
        if stroke is not None:
            surface, color = self._target(stroke)
            pygame.draw.polygon(surface, color, screen_pts, stroke_width)

    def _draw_picture(self, picture: np.ndarray) -> None:
        # surfarray wants (width, height, 3)
        surf = pygame.surfarray.make_surface(np.ascontiguousarray(picture.swapaxes(0, 1)))
        w = int(picture.shape[1] * self.camera_scale)
        h = int(picture.shape[0] * self.camera_scale)
        surf = pygame.transform.scale(surf, (w, h))
        self.screen.blit(surf, (int(self.world_width * self.zoom), 0))

    def _draw_hud(self, lines: Sequence[str]) -> None:
        if not lines:
            return
        pad = 10
        if self.show_camera:
            x = int(self.world_width * self.zoom) + pad
            y = int(self.camera_shape[1] * self.camera_scale) + pad
        else:
            x, y = pad, pad
        for line in lines:
            surf = self.font.render(line, True, THEME["hud_text"])
            r = surf.get_rect(topleft=(x, y))
            panel = r.inflate(pad, 4)
            pygame.draw.rect(self.screen, THEME["hud_bg"], panel)
            pygame.draw.rect(self.screen, THEME["hud_border"], panel, 1)
            self.screen.blit(surf, r.topleft)
            y += r.height + 6

    def tick(self, target_fps: int) -> float:
        """Cap frame rate and return achieved FPS."""
        fps = self.clock.get_fps()
        self.clock.tick(target_fps)
        return fps

    def close(self) -> None:
        pygame.quit()
