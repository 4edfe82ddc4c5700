"""
Geometric mandala: background rings, per-layer polygons with radial dot
lines, a counter-rotating concentric polygon and a star at the center.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import pygame

from mandalaflow.algorithms.base import (
    Overlay,
    Transform,
    clamp_structure,
    palette,
    polygon_points,
    pulse_scale,
    rgba,
)

if TYPE_CHECKING:
    from mandalaflow.core.orchestrator import FrameContext
    from mandalaflow.core.registry import AlgorithmRegistry

ALGORITHM_ID = "geometric"
DISPLAY_NAME = "Geometric Algorithm"


class GeometricAlgorithm:
    def draw(self, surface: pygame.Surface, ctx: FrameContext) -> None:
        cfg = ctx.config
        s = clamp_structure(cfg)
        colors = palette(ctx)
        center = (ctx.center_x, ctx.center_y)

        surface.fill(cfg.background_color)
        overlay = Overlay(surface)

        # Background rings
        for i in range(1, 6):
            color = rgba(colors[i % len(colors)], s.opacity * 0.3)
            overlay.circle(color, center, ctx.radius * i * 0.2, s.line_width * 0.5)
        overlay.flush()

        for layer in range(s.layers):
            layer_radius = ctx.radius * (0.4 + layer * 0.2)
            sides = 3 + layer * 2
            color = rgba(colors[layer % len(colors)], s.opacity * (1 - layer * 0.1))
            width = max(0.1, s.line_width * (1 - layer * 0.1))
            scale = pulse_scale(ctx, layer)
            dot_count = int(5 + s.complexity * 10)

            for i in range(s.symmetry):
                t = Transform(center, 2 * math.pi * i / s.symmetry + ctx.angle, scale)
                overlay.lines(color, t.points(polygon_points(layer_radius * 0.6, sides)), width, closed=True)
                overlay.line(color, t.point(0, 0), t.point(layer_radius, 0), width)
                for j in range(1, dot_count):
                    dot = t.point(layer_radius * j / dot_count, 0)
                    overlay.circle(color, dot, 2 * scale, width, filled=(j % 3 == 0))

            # Concentric polygon turning at half speed
            t = Transform(center, ctx.angle * 0.5)
            ring_color = rgba(colors[(layer + 1) % len(colors)], s.opacity * 0.5)
            overlay.lines(ring_color, t.points(polygon_points(layer_radius * 0.8, s.symmetry)), s.line_width, closed=True)
            overlay.flush()

        self._draw_center(overlay, ctx, s, colors)
        overlay.flush()

    def _draw_center(self, overlay, ctx, s, colors):
        t = Transform((ctx.center_x, ctx.center_y))
        color = rgba(colors[0], s.opacity + 0.1)
        width = s.line_width * 1.5
        inner = ctx.radius * 0.1

        overlay.lines(color, t.points(polygon_points(inner, s.symmetry)), width, closed=True)
        for x, y in polygon_points(inner * 1.5, s.symmetry):
            overlay.line(color, t.point(0, 0), t.point(x, y), width)


def register(registry: AlgorithmRegistry):
    registry.register(ALGORITHM_ID, DISPLAY_NAME, GeometricAlgorithm())
