"""Tests for the command-line entry point."""

import json

import pytest

from mandalaflow.cli import build_config, build_parser, main
from mandalaflow.core.config import ConfigError
from mandalaflow.io.encoder import ffmpeg_available


def _render_args(output, *extra):
    return [
        "render", "-o", str(output), "-n", "2",
        "--width", "48", "--height", "36", "--seed", "3", *extra,
    ]


class TestList:
    def test_lists_algorithms_and_presets(self, capsys):
        main(["list"])
        out = capsys.readouterr().out
        assert "fractal" in out
        assert "Fractal Mandala" in out
        assert "Lotus Flow" in out


class TestRender:
    def test_png_sequence(self, tmp_path, capsys):
        out_dir = tmp_path / "frames"
        main(_render_args(out_dir, "-a", "geometric"))
        assert sorted(p.name for p in out_dir.iterdir()) == [
            "mandala_00000.png",
            "mandala_00001.png",
        ]
        assert "Done!" in capsys.readouterr().out

    def test_prefix(self, tmp_path):
        main(_render_args(tmp_path, "-a", "simple", "--prefix", "lotus"))
        assert (tmp_path / "lotus_00001.png").exists()

    @pytest.mark.skipif(not ffmpeg_available(), reason="ffmpeg not installed")
    def test_mp4(self, tmp_path):
        output = tmp_path / "clip.mp4"
        main(_render_args(output, "-a", "simple", "-q", "fast"))
        assert output.stat().st_size > 0

    def test_unknown_algorithm_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(_render_args(tmp_path, "-a", "spirograph"))
        assert exc.value.code == 1
        assert "Error: Unknown algorithm" in capsys.readouterr().err

    def test_unknown_preset_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(_render_args(tmp_path, "-p", "Disco"))
        assert exc.value.code == 1
        assert "Unknown preset" in capsys.readouterr().err

    def test_missing_config_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(_render_args(tmp_path, "-c", str(tmp_path / "missing.json")))
        assert exc.value.code == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_bad_config_exits(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"sparkle": True}))
        with pytest.raises(SystemExit) as exc:
            main(_render_args(tmp_path / "frames", "-c", str(path)))
        assert exc.value.code == 1
        assert "sparkle" in capsys.readouterr().err


class TestBuildConfig:
    def _parse(self, *argv):
        return build_parser().parse_args(["render", "-o", "out", *argv])

    def test_flags_override_file_and_preset(self, tmp_path, builtin_registry):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"symmetry": 5, "colorMode": "earth"}))
        args = self._parse("-c", str(path), "-p", "Lotus Flow", "-a", "fractal", "--static")

        cfg = build_config(args, builtin_registry)
        assert cfg.symmetry == 12  # preset wins over file
        assert cfg.algorithm == "fractal"  # flag wins over preset
        assert cfg.animate is False

    def test_seed(self, builtin_registry):
        cfg = build_config(self._parse("--seed", "12.5"), builtin_registry)
        assert cfg.random_seed == 12.5

    def test_unknown_algorithm(self, builtin_registry):
        with pytest.raises(ConfigError):
            build_config(self._parse("-a", "nope"), builtin_registry)

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
