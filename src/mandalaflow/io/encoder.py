"""
FFmpeg video encoder.

Pipes raw RGB frames to ffmpeg via stdin. No intermediate files: frames
go straight from numpy arrays to the encoder.
"""

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Callable, Iterator

import numpy as np

logger = logging.getLogger(__name__)

# Quality presets: (preset, crf, pix_fmt)
QUALITY_PRESETS = {
    "high": ("slow", "18", "yuv444p"),
    "medium": ("medium", "23", "yuv420p"),
    "fast": ("ultrafast", "28", "yuv420p"),
}


def ffmpeg_available() -> bool:
    return shutil.which("ffmpeg") is not None


def build_command(
    output_path: Path,
    width: int,
    height: int,
    fps: int,
    quality: str = "high",
) -> list[str]:
    preset, crf, pix_fmt = QUALITY_PRESETS.get(quality, QUALITY_PRESETS["high"])
    return [
        "ffmpeg", "-y",
        "-hide_banner", "-nostats", "-loglevel", "warning",
        # Raw video input from pipe
        "-f", "rawvideo",
        "-pix_fmt", "rgb24",
        "-s", f"{width}x{height}",
        "-r", str(fps),
        "-i", "pipe:0",
        # Video encoding
        "-c:v", "libx264",
        "-preset", preset,
        "-crf", crf,
        "-pix_fmt", pix_fmt,
        str(output_path),
    ]


def encode_video(
    frame_iterator: Iterator[np.ndarray],
    output_path: Path,
    width: int = 1280,
    height: int = 720,
    fps: int = 60,
    quality: str = "high",
    total_frames: int | None = None,
    progress_callback: Callable[[int, int], None] | None = None,
) -> Path:
    """
    Pipe RGB frames into ffmpeg and write an H.264 MP4.

    Frames are ``(height, width, 3)`` arrays and are cast to uint8.
    ``progress_callback(done, total)`` fires per frame when
    ``total_frames`` is known.

    Raises:
        RuntimeError: If ffmpeg exits non-zero. The message carries the
            tail of its log.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = build_command(output_path, width, height, fps, quality)
    logger.debug("Running %s", " ".join(cmd))

    # stderr goes to a file: an unread pipe fills up and stalls ffmpeg
    with tempfile.TemporaryFile() as log:
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.PIPE,
            stdout=subprocess.DEVNULL,
            stderr=log,
        )
        frame_count = _feed(proc, frame_iterator, total_frames, progress_callback)
        proc.wait()
        log.seek(0)
        stderr = log.read().decode("utf-8", errors="replace")

    logger.debug("ffmpeg consumed %d frames", frame_count)
    if proc.returncode != 0:
        raise RuntimeError(
            f"ffmpeg exited with code {proc.returncode}: {_tail(stderr)}"
        )
    return output_path


def _tail(stderr: str, lines: int = 5) -> str:
    """Last few non-empty lines of the encoder log."""
    kept = [line.strip() for line in stderr.splitlines() if line.strip()]
    return "\n".join(kept[-lines:]) or "no output"


def _feed(
    proc: subprocess.Popen,
    frame_iterator: Iterator[np.ndarray],
    total_frames: int | None,
    progress_callback: Callable[[int, int], None] | None,
) -> int:
    frame_count = 0
    try:
        for frame in frame_iterator:
            proc.stdin.write(np.ascontiguousarray(frame, dtype=np.uint8).tobytes())
            frame_count += 1

            if progress_callback and total_frames:
                progress_callback(frame_count, total_frames)

    except BrokenPipeError:
        logger.warning("ffmpeg closed its input after %d frames", frame_count)
    finally:
        if proc.stdin:
            try:
                proc.stdin.close()
            except BrokenPipeError:
                pass
    return frame_count
