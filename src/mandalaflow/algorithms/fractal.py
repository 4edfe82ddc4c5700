"""
Fractal mandala.

A distance-field mandala evaluated with numpy: the plane is warped
through a Smith-chart transform and mirrored tiling, folded into
symmetry wedges, then carved by iterated box/circle distance fields
and shaded by contour bands.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
import pygame

from mandalaflow.algorithms.base import blit_rgb, clamp_structure, color_mode_index, pixel_grid
from mandalaflow.algorithms.fields import field_size, glsl_mod, mix, rotate, smoothstep

if TYPE_CHECKING:
    from mandalaflow.core.orchestrator import FrameContext
    from mandalaflow.core.registry import AlgorithmRegistry

ALGORITHM_ID = "fractal"
DISPLAY_NAME = "Fractal Mandala"

TAU = 2.0 * math.pi
TIME_OFFSET = 30.0
CONTOUR_SPACING = 0.065

# Per colour mode: (contour colour outside, contour colour inside)
CONTOUR_COLORS = {
    0: ((0.8, 0.8, 0.8), (0.3, 0.3, 0.3)),
    1: ((0.25, 0.65, 0.25), (0.65, 0.25, 0.65)),
    2: ((0.7, 0.3, 0.1), (0.1, 0.3, 0.7)),
    3: ((0.6, 0.4, 0.1), (0.3, 0.5, 0.2)),
    4: ((0.1, 0.5, 0.8), (0.0, 0.3, 0.6)),
}

# Per colour mode: (gamma near the center, optional (tint, amount))
GRADE = {
    0: ((0.5, 0.5, 0.5), None),
    1: ((0.5, 0.75, 1.5), None),
    2: ((1.5, 0.5, 0.75), None),
    3: ((0.7, 0.6, 0.4), ((0.6, 0.4, 0.2), 0.3)),
    4: ((0.5, 0.8, 1.2), ((0.0, 0.4, 0.8), 0.3)),
}


def _safe_div(num: np.ndarray, den: np.ndarray) -> np.ndarray:
    den = np.where(np.abs(den) < 1e-9, 1e-9, den)
    return num / den


def _to_smith(x, y):
    d = (1.0 - x) ** 2 + y ** 2
    return _safe_div((1.0 + x) * (1.0 - x) - y ** 2, d), _safe_div(2.0 * y, d)


def _from_smith(x, y):
    d = (x + 1.0) ** 2 + y ** 2
    return _safe_div((x + 1.0) * (x - 1.0) + y ** 2, d), _safe_div(2.0 * y, d)


def _mod_mirror(x, y, size: float):
    half = size * 0.5
    cx = np.floor((x + half) / size)
    cy = np.floor((y + half) / size)
    x = glsl_mod(x + half, size) - half
    y = glsl_mod(y + half, size) - half
    return x * (glsl_mod(cx, 2.0) * 2.0 - 1.0), y * (glsl_mod(cy, 2.0) * 2.0 - 1.0)


def _distort(x, y, time: float, complexity: float):
    lt = 0.1 * time
    sx, sy = _to_smith(x, y)
    sx = sx + complexity * math.cos(lt)
    sy = sy + complexity * math.sin(math.sqrt(2.0) * lt)
    x, y = _from_smith(sx, sy)
    return _mod_mirror(x, y, 2.0 + math.sin(lt))


def _box(x, y, b: float):
    dx, dy = np.abs(x) - b, np.abs(y) - b
    outside = np.sqrt(np.maximum(dx, 0.0) ** 2 + np.maximum(dy, 0.0) ** 2)
    return outside + np.minimum(np.maximum(dx, dy), 0.0)


def _distance(x, y, time: float, symmetry: float, complexity: float, rotation: float):
    r = np.sqrt(x ** 2 + y ** 2)
    theta = np.arctan2(y, x)

    wedge = TAU / max(8.0, symmetry)
    index = theta / wedge
    theta = glsl_mod(theta, wedge)
    theta = np.where(glsl_mod(index, 2.0) > 1.0, wedge - theta, theta)
    theta = theta + time / 40.0

    x = np.abs(r * np.cos(theta)) - 0.5
    y = np.abs(r * np.sin(theta)) - 0.5

    d = np.full_like(x, 10000.0)
    iterations = min(4, int(max(2.0, 4.0 * complexity)))
    offset = -0.2 * math.cos(time * 0.25)
    zoom = 1.5 + (0.5 + 0.5 * math.sin(0.5 * time))
    for _ in range(iterations):
        x = glsl_mod(x + 0.5, 1.0) - 0.5
        y = glsl_mod(y + 0.5, 1.0) - 0.5
        square = _box(x, y, 0.35) + offset
        hole = np.sqrt((x + 0.2) ** 2 + (y + 0.2) ** 2) - 0.25 + offset
        d = np.minimum(np.maximum(square, -hole), d)
        x, y = rotate(x * zoom, y * zoom, 1.0 + rotation * 0.1)
    return d


def _post_process(col, x, y, time: float, pulse: bool, mode: int):
    r = np.sqrt(x ** 2 + y ** 2)
    a = np.arctan2(y, x)
    blend = np.clip(r, 0.0, 1.0)[..., None]

    gamma, tint = GRADE[mode]
    col = np.clip(col, 0.0, 1.0)
    col = col ** mix(np.asarray(gamma), 0.45, blend)
    if tint is not None:
        col = mix(col, np.asarray(tint[0]), tint[1])

    col = col * 0.6 + 0.4 * col * col * (3.0 - 2.0 * col)
    gray = col.mean(axis=-1, keepdims=True) * 0.99
    col = mix(col, gray, -0.4)

    wave = (1.0 if pulse else 0.0) * np.sin(-time + (50.0 - 25.0 * np.sqrt(r)) * r)
    col = col * (np.sqrt(1.0 - 0.7 * wave) * (1.0 - np.sin(0.5 * r)))[..., None]
    col = np.clip(col, 0.0, 1.0)

    ff = (1.0 - 0.75 * np.sin(20.0 * (0.5 * a + r - 0.1 * time))) ** 0.75
    col = col ** np.stack([ff * 0.9, ff * 0.8, ff * 0.7], axis=-1)
    col = col * (0.5 * np.sqrt(np.maximum(4.0 - r * r, 0.0)))[..., None]
    return np.clip(col, 0.0, 1.0)


def shade(
    width: int,
    height: int,
    time: float,
    rotation: float,
    symmetry: float,
    complexity: float,
    pulse: bool,
    color_mode: int,
) -> np.ndarray:
    """
    Evaluate the fractal mandala over a ``width`` x ``height`` grid.

    Returns:
        (H, W, 3) float32 RGB array in [0, 1].
    """
    local_time = time + TIME_OFFSET
    lt = 0.1 * local_time

    fx, fy = pixel_grid(width, height)
    x = (fx / width - 0.5) * 2.0 * (width / height)
    y = (fy / height - 0.5) * 2.0
    x, y = rotate(x * 8.0, y * 8.0, lt + rotation)

    nx, ny = _distort(x, y, local_time, complexity)
    nx2, ny2 = _distort(x + 0.0001, y + 0.0001, local_time, complexity)
    edge = 1.0 - smoothstep(0.0, 0.002, np.sqrt((nx - nx2) ** 2 + (ny - ny2) ** 2))

    d = _distance(nx, ny, local_time, symmetry, complexity, rotation)

    outside, inside = (np.asarray(c, dtype=np.float32) for c in CONTOUR_COLORS[color_mode])
    band = np.abs(d / CONTOUR_SPACING)
    contour = np.abs(glsl_mod(d, CONTOUR_SPACING)) < 0.025
    col = np.zeros(d.shape + (3,), dtype=np.float32)
    picked = np.where((d > 0.0)[..., None], outside, inside) / np.maximum(band, 1e-3)[..., None]
    col = np.where(contour[..., None], picked, col)
    col = np.where((np.abs(d) < 0.0125)[..., None], 1.0, col)

    col = col + (1.0 - edge ** 5)[..., None]
    col = _post_process(col, nx, ny, local_time, pulse, color_mode)
    col = col + (1.0 - edge)[..., None]
    return np.clip(col, 0.0, 1.0).astype(np.float32)


class FractalAlgorithm:
    def __init__(self, max_field_width: int = 240):
        self.max_field_width = max_field_width

    def draw(self, surface: pygame.Surface, ctx: FrameContext) -> None:
        cfg = ctx.config
        s = clamp_structure(cfg)
        width, height = field_size(*surface.get_size(), self.max_field_width)

        surface.fill(cfg.background_color)
        with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
            rgb = shade(
                width,
                height,
                time=ctx.elapsed,
                rotation=ctx.angle,
                symmetry=s.symmetry,
                complexity=s.complexity,
                pulse=cfg.pulse_effect,
                color_mode=color_mode_index(cfg.color_mode),
            )
        blit_rgb(surface, np.nan_to_num(rgb, nan=0.0))


def register(registry: AlgorithmRegistry):
    registry.register(ALGORITHM_ID, DISPLAY_NAME, FractalAlgorithm())
