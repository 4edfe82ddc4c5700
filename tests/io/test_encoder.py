"""Tests for the FFmpeg video encoder."""

import os
from pathlib import Path

import numpy as np
import pytest

from mandalaflow.io.encoder import build_command, encode_video, ffmpeg_available

needs_ffmpeg = pytest.mark.skipif(not ffmpeg_available(), reason="ffmpeg not installed")


def _solid_frames(n: int, width: int, height: int, color=(128, 64, 200)):
    """Generate N solid-color frames."""
    frame = np.full((height, width, 3), color, dtype=np.uint8)
    for _ in range(n):
        yield frame.copy()


class TestBuildCommand:
    def test_raw_rgb_input(self):
        cmd = build_command(Path("out.mp4"), 320, 240, 30, "fast")
        assert cmd[0] == "ffmpeg"
        assert cmd[cmd.index("-s") + 1] == "320x240"
        assert cmd[cmd.index("-r") + 1] == "30"
        assert "rgb24" in cmd
        assert "-nostats" in cmd
        assert cmd[-1] == "out.mp4"

    def test_quality_presets(self):
        fast = build_command(Path("a.mp4"), 8, 8, 60, "fast")
        high = build_command(Path("a.mp4"), 8, 8, 60, "high")
        assert fast[fast.index("-crf") + 1] == "28"
        assert high[high.index("-crf") + 1] == "18"

    def test_unknown_quality_uses_high(self):
        cmd = build_command(Path("a.mp4"), 8, 8, 60, "ultra")
        assert cmd[cmd.index("-preset") + 1] == "slow"


@needs_ffmpeg
class TestEncoder:
    def test_produces_mp4(self, tmp_path):
        output = tmp_path / "test_output.mp4"
        result = encode_video(
            frame_iterator=_solid_frames(30, 320, 240),
            output_path=output,
            width=320,
            height=240,
            fps=30,
            quality="fast",
        )
        assert result.exists()
        assert result.stat().st_size > 0

    def test_progress_callback(self, tmp_path):
        progress = []
        encode_video(
            frame_iterator=_solid_frames(15, 160, 120),
            output_path=tmp_path / "test_progress.mp4",
            width=160,
            height=120,
            fps=30,
            quality="fast",
            total_frames=15,
            progress_callback=lambda cur, total: progress.append((cur, total)),
        )
        assert len(progress) == 15
        assert progress[-1] == (15, 15)



def _fake_ffmpeg(directory, body: str):
    """Put an executable shell script named ffmpeg first on PATH."""
    script = directory / "ffmpeg"
    script.write_text("#!/bin/sh\n" + body)
    script.chmod(0o755)
    return script


@pytest.mark.skipif(os.name != "posix", reason="needs a POSIX shell")
class TestEncoderProcess:
    @pytest.fixture
    def fake_bin(self, tmp_path, monkeypatch):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
        return bin_dir

    def test_verbose_encoder_does_not_stall(self, tmp_path, fake_bin):
        # 1 MB of log output before reading any input
        _fake_ffmpeg(fake_bin, "head -c 1048576 /dev/zero | tr '\\0' 'x' >&2\ncat > /dev/null\n")
        progress = []
        encode_video(
            frame_iterator=_solid_frames(200, 96, 72),
            output_path=tmp_path / "out.mp4",
            width=96,
            height=72,
            total_frames=200,
            progress_callback=lambda cur, total: progress.append(cur),
        )
        assert progress[-1] == 200

    def test_failure_reports_stderr(self, tmp_path, fake_bin):
        _fake_ffmpeg(fake_bin, "cat > /dev/null\necho 'Error: encoder exploded' >&2\nexit 3\n")
        with pytest.raises(RuntimeError, match="encoder exploded"):
            encode_video(
                frame_iterator=_solid_frames(2, 16, 16),
                output_path=tmp_path / "out.mp4",
                width=16,
                height=16,
            )
