"""
Simple mandala: noise-bent radial strokes, rings and dots per layer,
repeated around the circle, with a small polygon at the center.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import pygame

from mandalaflow.algorithms.base import (
    Overlay,
    Structure,
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

ALGORITHM_ID = "simple"
DISPLAY_NAME = "Simple Algorithm"


class SimpleAlgorithm:
    def draw(self, surface: pygame.Surface, ctx: FrameContext) -> None:
        cfg = ctx.config
        s = clamp_structure(cfg)
        colors = palette(ctx)
        center = (ctx.center_x, ctx.center_y)

        surface.fill(cfg.background_color)
        overlay = Overlay(surface)

        for layer in range(s.layers):
            layer_radius = ctx.radius * (0.5 + layer * 0.2)
            width = max(0.1, s.line_width * (1 - layer * 0.15))
            alpha = s.opacity * (1 - layer * 0.1)
            base = colors[layer % len(colors)] if cfg.use_gradient else cfg.color
            color = rgba(base, alpha)
            scale = pulse_scale(ctx, layer)

            for i in range(s.symmetry):
                rotation = 2 * math.pi * i / s.symmetry + ctx.angle
                t = Transform(center, rotation, scale)
                self._draw_pattern(overlay, t, ctx, s, layer, layer_radius, color, width)
            overlay.flush()

        self._draw_center(overlay, ctx, s, colors)
        overlay.flush()

    def _draw_pattern(self, overlay, t, ctx, s: Structure, layer, layer_radius, color, width):
        noise = ctx.noise
        seed = ctx.config.random_seed + layer * 100
        segments = int(10 + s.complexity * 20)

        # Radial stroke bent by noise
        amount = 40 + (layer * 10) * s.complexity
        points = []
        for i in range(segments):
            frac = i / segments
            nx = noise.noise2d(frac * 5 + seed, layer * 0.2) * amount
            ny = noise.noise2d(layer * 0.2, frac * 5 + seed) * amount
            points.append((layer_radius * frac + nx, ny))
        overlay.lines(color, t.points(points), width)

        # Concentric rings, some skipped by noise
        ring_count = max(3, int(5 * s.complexity))
        for i in range(ring_count):
            r = layer_radius * (0.2 + i * 0.15)
            if noise.noise2d(i * 0.5 + seed, i * 0.5 + seed) > 0:
                overlay.circle(color, t.point(0, 0), r * t.scale, width)

        # Detail dots with occasional spokes
        detail_count = int(s.complexity * 8)
        for i in range(detail_count):
            a = i / detail_count * 2 * math.pi
            r = layer_radius * (0.3 + 0.5 * noise.noise2d(i * 0.2 + seed, 0))
            x, y = r * math.cos(a), r * math.sin(a)
            overlay.circle(color, t.point(x, y), (2 + layer * 1.5) * t.scale, width)
            if noise.noise2d(i * 0.3 + seed, layer) > 0.2:
                overlay.line(color, t.point(0, 0), t.point(x, y), width)

    def _draw_center(self, overlay, ctx, s: Structure, colors):
        t = Transform((ctx.center_x, ctx.center_y))
        color = rgba(colors[0], s.opacity + 0.1)
        width = s.line_width * 1.5
        overlay.circle(color, t.point(0, 0), ctx.radius * 0.1, width)
        overlay.lines(color, t.points(polygon_points(ctx.radius * 0.15, s.symmetry)), width, closed=True)


def register(registry: AlgorithmRegistry):
    registry.register(ALGORITHM_ID, DISPLAY_NAME, SimpleAlgorithm())
