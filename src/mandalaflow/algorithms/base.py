"""
Shared drawing helpers for the mandala algorithms.

The configuration is not validated when it is edited, so every algorithm
reads its structural values through ``clamp_structure`` before drawing.
Vector algorithms draw translucent strokes on an alpha overlay and
composite it onto the target; field algorithms build an RGB array and
blit it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

import numpy as np
import pygame

from mandalaflow.core.palettes import RGB, ColorMode, palette_for

if TYPE_CHECKING:
    from mandalaflow.core.config import MandalaConfig
    from mandalaflow.core.orchestrator import FrameContext

Point = tuple[float, float]

COLOR_MODE_INDEX = {
    ColorMode.MONOCHROME: 0,
    ColorMode.RAINBOW: 1,
    ColorMode.COMPLEMENTARY: 2,
    ColorMode.EARTH: 3,
    ColorMode.OCEAN: 4,
}


def _finite(value, default: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) else default


def clamp(value, lo: float, hi: float, default: float | None = None) -> float:
    """Clamp ``value`` into ``[lo, hi]``; non-numbers become ``default`` (or ``lo``)."""
    value = _finite(value, lo if default is None else default)
    return min(max(value, lo), hi)


@dataclass(frozen=True)
class Structure:
    """Structural parameters clamped to drawable ranges."""

    symmetry: int
    layers: int
    complexity: float
    line_width: float
    opacity: float


def clamp_structure(cfg: MandalaConfig) -> Structure:
    return Structure(
        symmetry=int(round(clamp(cfg.symmetry, 2, 64, default=8))),
        layers=int(round(clamp(cfg.layers, 1, 8, default=3))),
        complexity=clamp(cfg.complexity, 0.0, 1.0, default=0.5),
        line_width=clamp(cfg.line_width, 0.1, 20.0, default=2.0),
        opacity=clamp(cfg.opacity, 0.0, 1.0, default=0.7),
    )


def color_mode_index(mode) -> int:
    try:
        return COLOR_MODE_INDEX[ColorMode(mode)]
    except ValueError:
        return 0


def palette(ctx: FrameContext) -> tuple[RGB, ...]:
    return palette_for(ctx.config.color_mode, ctx.palettes)


def pulse_scale(ctx: FrameContext, layer: int, amount: float = 0.05) -> float:
    if not ctx.config.pulse_effect:
        return 1.0
    return 1.0 + amount * math.sin(ctx.pulse_phase + layer * 0.5)


def rgba(color: Sequence[int], alpha: float) -> tuple[int, int, int, int]:
    a = int(round(clamp(alpha, 0.0, 1.0) * 255))
    return (int(color[0]), int(color[1]), int(color[2]), a)


def stroke_width(width: float) -> int:
    return max(1, int(round(width)))


class Transform:
    """Translate, rotate, then scale: local pattern space to screen space."""

    def __init__(self, origin: Point, rotation: float = 0.0, scale: float = 1.0):
        self.origin = origin
        self.scale = scale
        self._cos = math.cos(rotation) * scale
        self._sin = math.sin(rotation) * scale

    def point(self, x: float, y: float) -> Point:
        return (
            self.origin[0] + x * self._cos - y * self._sin,
            self.origin[1] + x * self._sin + y * self._cos,
        )

    def points(self, pts: Sequence[Point] | np.ndarray) -> list[Point]:
        arr = np.asarray(pts, dtype=np.float64).reshape(-1, 2)
        xs = self.origin[0] + arr[:, 0] * self._cos - arr[:, 1] * self._sin
        ys = self.origin[1] + arr[:, 0] * self._sin + arr[:, 1] * self._cos
        return list(zip(xs.tolist(), ys.tolist()))


class Overlay:
    """
    Transparent layer for translucent strokes.

    pygame's draw functions overwrite pixels rather than blending, so
    strokes go onto an SRCALPHA surface which is composited in ``flush``.
    """

    def __init__(self, target: pygame.Surface):
        self.target = target
        self.surface = pygame.Surface(target.get_size(), pygame.SRCALPHA)

    def circle(self, color, center: Point, radius: float, width: float = 1, filled: bool = False):
        r = int(round(radius))
        if r < 1:
            return
        w = 0 if filled else stroke_width(width)
        pygame.draw.circle(self.surface, color, (int(center[0]), int(center[1])), r, min(w, r) if w else 0)

    def lines(self, color, points: Sequence[Point], width: float = 1, closed: bool = False):
        if len(points) < 2:
            return
        pygame.draw.lines(self.surface, color, closed, points, stroke_width(width))

    def line(self, color, start: Point, end: Point, width: float = 1):
        pygame.draw.line(self.surface, color, start, end, stroke_width(width))

    def polygon(self, color, points: Sequence[Point], filled: bool = False, width: float = 1):
        if len(points) < 3:
            return
        pygame.draw.polygon(self.surface, color, points, 0 if filled else stroke_width(width))

    def flush(self):
        self.target.blit(self.surface, (0, 0))
        self.surface.fill((0, 0, 0, 0))


def polygon_points(radius: float, sides: int, x: float = 0.0, y: float = 0.0) -> list[Point]:
    """Vertices of a regular polygon, first vertex on the +x axis."""
    sides = max(3, int(sides))
    return [
        (x + radius * math.cos(2 * math.pi * i / sides), y + radius * math.sin(2 * math.pi * i / sides))
        for i in range(sides)
    ]


def cubic_bezier(p0: Point, p1: Point, p2: Point, p3: Point, steps: int = 24) -> np.ndarray:
    t = np.linspace(0.0, 1.0, steps)[:, None]
    a, b, c, d = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2, p3))
    return ((1 - t) ** 3) * a + 3 * ((1 - t) ** 2) * t * b + 3 * (1 - t) * (t ** 2) * c + (t ** 3) * d


def quadratic_bezier(p0: Point, p1: Point, p2: Point, steps: int = 16) -> np.ndarray:
    t = np.linspace(0.0, 1.0, steps)[:, None]
    a, b, c = (np.asarray(p, dtype=np.float64) for p in (p0, p1, p2))
    return ((1 - t) ** 2) * a + 2 * (1 - t) * t * b + (t ** 2) * c


def pixel_grid(width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """Fragment coordinates (x, y) with y growing upward, like gl_FragCoord."""
    xs = np.arange(width, dtype=np.float32) + 0.5
    ys = (np.arange(height, dtype=np.float32) + 0.5)[::-1]
    return np.meshgrid(xs, ys)


def blit_rgb(surface: pygame.Surface, rgb: np.ndarray):
    """
    Copy an (H, W, 3) float [0, 1] or uint8 array onto the surface.

    Fields may be computed at reduced resolution; they are upscaled to the
    surface size first.
    """
    if rgb.dtype != np.uint8:
        rgb = (np.clip(rgb, 0.0, 1.0) * 255).astype(np.uint8)
    field = pygame.surfarray.make_surface(np.ascontiguousarray(np.transpose(rgb, (1, 0, 2))))
    if field.get_size() != surface.get_size():
        field = pygame.transform.smoothscale(field, surface.get_size())
    surface.blit(field, (0, 0))


def surface_to_array(surface: pygame.Surface) -> np.ndarray:
    """Convert pygame surface to numpy array for export."""
    # pygame uses (width, height) but numpy expects (height, width)
    arr = pygame.surfarray.array3d(surface)
    return np.ascontiguousarray(np.transpose(arr, (1, 0, 2)))
