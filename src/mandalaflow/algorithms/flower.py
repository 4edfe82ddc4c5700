"""
Flower mandala: bezier petals in rings, veined on the inner layers,
over a soft radial glow, with a stamen ring at the center.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import pygame

from mandalaflow.algorithms.base import (
    Overlay,
    Transform,
    clamp_structure,
    cubic_bezier,
    palette,
    pulse_scale,
    quadratic_bezier,
    rgba,
)

if TYPE_CHECKING:
    from mandalaflow.core.orchestrator import FrameContext
    from mandalaflow.core.registry import AlgorithmRegistry

ALGORITHM_ID = "flower"
DISPLAY_NAME = "Flower Algorithm"

GRADIENT_STEPS = 20


class FlowerAlgorithm:
    def draw(self, surface: pygame.Surface, ctx: FrameContext) -> None:
        cfg = ctx.config
        s = clamp_structure(cfg)
        colors = palette(ctx)

        surface.fill(cfg.background_color)
        overlay = Overlay(surface)

        self._draw_background(surface, overlay, ctx, s, colors)
        for layer in range(s.layers):
            self._draw_petal_layer(overlay, ctx, s, colors, layer)
            overlay.flush()
        self._draw_center(overlay, ctx, s, colors)
        overlay.flush()

    def _draw_background(self, surface, overlay, ctx, s, colors):
        center = (int(ctx.center_x), int(ctx.center_y))
        bg = ctx.config.background_color
        tint = colors[0]

        # Radial gradient approximation: background, faint tint near the rim, background
        for i in range(GRADIENT_STEPS, 0, -1):
            ratio = i / GRADIENT_STEPS
            radius = int(ctx.radius * ratio)
            if radius < 1:
                continue
            if ratio <= 0.9:
                mix = 0.1 * max(0.0, (ratio - 0.1) / 0.8)
            else:
                mix = 0.1 * (1.0 - ratio) / 0.1
            step_color = tuple(int(b + (c - b) * mix) for b, c in zip(bg, tint))
            pygame.draw.circle(surface, step_color, center, radius)

        ring = rgba(colors[1 % len(colors)], 0.1)
        for i in range(1, 6):
            overlay.circle(ring, center, ctx.radius * i * 0.2, s.line_width * 0.3)
        overlay.flush()

    def _draw_petal_layer(self, overlay, ctx, s, colors, layer):
        petal_length = ctx.radius * (0.3 + layer * 0.2)
        petal_count = s.symmetry + layer * 2
        color = rgba(colors[layer % len(colors)], s.opacity * (1 - layer * 0.15))
        width = max(0.1, s.line_width * (1 - layer * 0.1))
        scale = pulse_scale(ctx, layer, amount=0.08)

        for i in range(petal_count):
            t = Transform((ctx.center_x, ctx.center_y), 2 * math.pi * i / petal_count + ctx.angle, scale)
            self._draw_petal(overlay, t, ctx, s, layer, petal_length, color, width)

    def _draw_petal(self, overlay, t, ctx, s, layer, length, color, width):
        noise = ctx.noise
        seed = ctx.config.random_seed + layer * 100
        petal_width = length * (0.2 + s.complexity * 0.2)

        c1 = (length * 0.3, petal_width * (0.7 + noise.noise2d(seed, layer) * 0.3))
        c2 = (length * 0.7, petal_width * (0.5 + noise.noise2d(seed + 1, layer) * 0.5))
        right = cubic_bezier((0, 0), c1, c2, (length, 0))
        left = cubic_bezier((length, 0), (c2[0], -c2[1]), (c1[0], -c1[1]), (0, 0))
        overlay.lines(color, t.points(right) + t.points(left[1:]), width)

        if layer < 2 and s.complexity > 0.4:
            self._draw_veins(overlay, t, s, length, color, width)

    def _draw_veins(self, overlay, t, s, length, color, width):
        overlay.line(color, t.point(0, 0), t.point(length, 0), width)

        vein_count = max(2, int(4 * s.complexity))
        for i in range(1, vein_count + 1):
            pos = length * i / (vein_count + 1)
            height = length * 0.15 * (1 - i / (vein_count + 2))
            for sign in (1, -1):
                curve = quadratic_bezier((pos, 0), (pos + height * 0.5, sign * height), (pos + height, 0))
                overlay.lines(color, t.points(curve), width)

    def _draw_center(self, overlay, ctx, s, colors):
        t = Transform((ctx.center_x, ctx.center_y))
        inner = ctx.radius * 0.15
        primary = rgba(colors[0], s.opacity + 0.1)
        secondary = rgba(colors[1 % len(colors)], s.opacity + 0.1)

        overlay.circle(primary, t.point(0, 0), inner, s.line_width * 1.2)

        dot_count = s.symmetry * 2
        for i in range(dot_count):
            a = i / dot_count * 2 * math.pi + ctx.angle
            dot = t.point(inner * 0.7 * math.cos(a), inner * 0.7 * math.sin(a))
            overlay.circle(secondary, dot, inner * 0.15, filled=True)

        overlay.circle(primary, t.point(0, 0), inner * 0.5, filled=True)


def register(registry: AlgorithmRegistry):
    registry.register(ALGORITHM_ID, DISPLAY_NAME, FlowerAlgorithm())
