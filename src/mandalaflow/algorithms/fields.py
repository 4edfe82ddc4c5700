"""
Vectorized fragment-shader helpers.

The shader-style algorithms evaluate their per-pixel programs over whole
numpy grids. These mirror the GLSL built-ins they are written against.
"""

import numpy as np


def fract(x: np.ndarray) -> np.ndarray:
    return x - np.floor(x)


def glsl_mod(x, y):
    """GLSL ``mod``: result takes the sign of ``y``."""
    return x - y * np.floor(x / y)


def mix(a, b, t):
    return a * (1.0 - t) + b * t


def smoothstep(edge0: float, edge1: float, x: np.ndarray) -> np.ndarray:
    t = np.clip((x - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def usin(x):
    """Sine remapped to [0, 1]."""
    return 0.5 + 0.5 * np.sin(x)


def rotate(x: np.ndarray, y: np.ndarray, angle: float) -> tuple[np.ndarray, np.ndarray]:
    c, s = np.cos(angle), np.sin(angle)
    return c * x + s * y, -s * x + c * y


def hash_rand(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """The classic ``fract(sin(dot(n, vec2(12.9898, 78.233))) * 43758.5453)`` hash."""
    return fract(np.sin(x * 12.9898 + y * 78.233) * 43758.5453)


def value_noise(x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Smoothly interpolated lattice value noise in [0, 1]."""
    ix, iy = np.floor(x), np.floor(y)
    fx, fy = x - ix, y - iy

    a = hash_rand(ix, iy)
    b = hash_rand(ix + 1.0, iy)
    c = hash_rand(ix, iy + 1.0)
    d = hash_rand(ix + 1.0, iy + 1.0)

    ux = fx * fx * (3.0 - 2.0 * fx)
    uy = fy * fy * (3.0 - 2.0 * fy)
    return mix(a, b, ux) + (c - a) * uy * (1.0 - ux) + (d - b) * ux * uy


def field_size(width: int, height: int, max_width: int) -> tuple[int, int]:
    """Internal field resolution, preserving aspect ratio, capped at ``max_width``."""
    if width <= max_width:
        return max(1, width), max(1, height)
    scale = max_width / width
    return max_width, max(1, int(round(height * scale)))
