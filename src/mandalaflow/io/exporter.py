"""
PNG sequence exporter.

Writes frames rendered by a session to numbered PNG files.
"""

from pathlib import Path
from typing import Callable, Iterable

import numpy as np
from PIL import Image


class FrameExporter:
    """
    Saves (H, W, 3) uint8 frames as ``<prefix>_00000.png`` files.

    Args:
        output_dir: Destination directory, created on demand.
        prefix: File name prefix.
    """

    def __init__(self, output_dir: Path, prefix: str = "mandala"):
        self.output_dir = Path(output_dir)
        self.prefix = prefix

    def path_for(self, index: int) -> Path:
        return self.output_dir / f"{self.prefix}_{index:05d}.png"

    def save(self, frame: np.ndarray, index: int) -> Path:
        path = self.path_for(index)
        Image.fromarray(np.ascontiguousarray(frame, dtype=np.uint8)).save(path)
        return path

    def export(
        self,
        frames: Iterable[np.ndarray],
        total_frames: int | None = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> list[Path]:
        """
        Write every frame in ``frames``.

        Returns:
            Paths of the written files, in order.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        written = []
        for i, frame in enumerate(frames):
            written.append(self.save(frame, i))
            if progress_callback and total_frames:
                progress_callback(i + 1, total_frames)
        return written
