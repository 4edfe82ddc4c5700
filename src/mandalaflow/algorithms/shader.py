"""
Shader mandala.

A folded-angle kaleidoscope fragment program evaluated with numpy: each
pixel is folded into one symmetry wedge five times, then coloured by
lattice value noise and a per-mode two-colour blend.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np
import pygame

from mandalaflow.algorithms.base import blit_rgb, clamp_structure, color_mode_index, pixel_grid
from mandalaflow.algorithms.fields import field_size, fract, mix, usin, value_noise

if TYPE_CHECKING:
    from mandalaflow.core.orchestrator import FrameContext
    from mandalaflow.core.registry import AlgorithmRegistry

ALGORITHM_ID = "shader"
DISPLAY_NAME = "Shader Algorithm"

FOLD_ITERATIONS = 5

WHITE = np.array([1.0, 1.0, 1.0], dtype=np.float32)
BLACK = np.zeros(3, dtype=np.float32)
RED = np.array([1.0, 0.0, 0.0], dtype=np.float32)
BLUE = np.array([0.0, 0.0, 1.0], dtype=np.float32)
YELLOW = np.array([1.0, 1.0, 0.0], dtype=np.float32)
HANADA = np.array([39.0, 146.0, 195.0], dtype=np.float32) / 255.0


def _mode_colors(mode: int, time: float) -> tuple[np.ndarray, np.ndarray]:
    slow, fast = usin(time * 0.4), usin(time * 0.9)
    if mode == 1:
        return mix(RED, YELLOW, slow), mix(BLACK, BLUE, fast)
    if mode == 2:
        return mix(YELLOW, BLUE, slow), mix(BLACK, RED, fast)
    if mode == 3:
        return (
            mix(np.array([0.6, 0.4, 0.2]), np.array([0.8, 0.6, 0.3]), slow),
            mix(BLACK, np.array([0.2, 0.4, 0.1]), fast),
        )
    if mode == 4:
        return (
            mix(np.array([0.0, 0.2, 0.5]), np.array([0.0, 0.6, 0.8]), slow),
            mix(BLACK, HANADA, fast),
        )
    return mix(WHITE, WHITE * 0.7, slow), mix(BLACK, WHITE * 0.3, fast)


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
    Evaluate the kaleidoscope program over a ``width`` x ``height`` grid.

    Returns:
        (H, W, 3) float32 RGB array in [0, 1].
    """
    fx, fy = pixel_grid(width, height)
    scale = float(min(width, height))
    ux = (fx * 2.0 - width) / scale
    uy = (fy * 2.0 - height) / scale
    base_len = np.sqrt(ux ** 2 + uy ** 2)

    t = 0.2 * time + rotation
    pulse_amount = 0.2 + (1.0 if pulse else 0.0) * 0.1 * math.sin(time * 0.5)
    detail = complexity * 1.5 + 0.5
    sym = max(3.0, symmetry)
    shift = 0.2 + pulse_amount * usin(time * 0.3)

    x, y = ux, uy
    for _ in range(FOLD_ITERATIONS):
        a = np.arctan2(x, y)
        a = a * sym / (2.0 * math.pi)
        a = np.abs(fract(a * 0.5 - sym * 0.5) * 2.0 - 1.0)
        a = a * (2.0 * math.pi) / sym
        r = np.sqrt(x ** 2 + y ** 2)
        x = r * np.sin(a + t * 0.7) - shift
        y = r * np.cos(a + t * 0.8)
        x = fract(x) * 2.0 - 1.0
        y = fract(y) * 2.0 - 1.0

    v = value_noise(x * detail, y * detail)[..., None]
    col1, col2 = _mode_colors(color_mode, time)
    col = mix(col1, col2, v)

    col = col * np.clip(np.sqrt(x ** 2 + y ** 2), 0.0, 1.0)[..., None]
    col = col * np.exp(-0.8 * base_len)[..., None]
    col = col + (1.1 * usin(time * 0.4) * np.exp(-1.2 * base_len))[..., None]
    return np.clip(col, 0.0, 1.0).astype(np.float32)


class ShaderAlgorithm:
    """
    Args:
        max_field_width: Internal render width; the field is upscaled to
            the surface.
    """

    def __init__(self, max_field_width: int = 320):
        self.max_field_width = max_field_width

    def draw(self, surface: pygame.Surface, ctx: FrameContext) -> None:
        cfg = ctx.config
        s = clamp_structure(cfg)
        width, height = field_size(*surface.get_size(), self.max_field_width)

        surface.fill(cfg.background_color)
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
        blit_rgb(surface, rgb)


def register(registry: AlgorithmRegistry):
    registry.register(ALGORITHM_ID, DISPLAY_NAME, ShaderAlgorithm())
