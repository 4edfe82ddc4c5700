"""
Simplex noise source handed to the drawing algorithms.
"""

import random

import noise


class SimplexNoise:
    """
    2D simplex noise with a per-instance offset.

    ``noise.snoise2`` uses a fixed permutation table, so each instance
    shifts its sampling window instead of reshuffling the table.
    """

    def __init__(self, seed: float | None = None):
        rng = random.Random(seed)
        self.offset_x = rng.uniform(0, 256)
        self.offset_y = rng.uniform(0, 256)

    def noise2d(self, x: float, y: float) -> float:
        """Noise value in roughly [-1, 1]."""
        return noise.snoise2(x + self.offset_x, y + self.offset_y)
