"""
CLI entry point for the mandala renderer.

Usage:
    mandalaflow run [options]
    mandalaflow render -n 300 -o out.mp4 [options]
    mandalaflow list
    python -m mandalaflow <command> [options]
"""

import argparse
import logging
import sys
import time
from pathlib import Path

import pygame

from mandalaflow.core.config import PRESETS, ConfigError, MandalaConfig, load_config
from mandalaflow.core.orchestrator import MandalaSession
from mandalaflow.core.registry import AlgorithmRegistry, load_builtin_algorithms
from mandalaflow.io.encoder import QUALITY_PRESETS, encode_video, ffmpeg_available
from mandalaflow.io.exporter import FrameExporter


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  frame {current}/{total}", flush=True)


def _fail(message: str):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _add_common_options(parser: argparse.ArgumentParser):
    parser.add_argument(
        "-a", "--algorithm", type=str, default=None,
        help="Drawing algorithm id (see `mandalaflow list`)",
    )
    parser.add_argument(
        "-p", "--preset", type=str, default=None,
        help="Named preset applied on top of the config",
    )
    parser.add_argument(
        "-c", "--config", type=Path, default=None,
        help="JSON config file",
    )
    parser.add_argument("--width", type=int, default=1280, help="Width (default: 1280)")
    parser.add_argument("--height", type=int, default=720, help="Height (default: 720)")
    parser.add_argument("-f", "--fps", type=int, default=60, help="Frames per second (default: 60)")
    parser.add_argument("--seed", type=float, default=None, help="Fixed random seed")
    parser.add_argument(
        "--static", action="store_true",
        help="Start in single-shot mode (no continuous animation)",
    )


def build_config(args: argparse.Namespace, registry: AlgorithmRegistry) -> MandalaConfig:
    """
    Assemble the session config: JSON file, then preset, then flags.

    Raises:
        ConfigError: On a bad config file, preset or algorithm id.
    """
    config = load_config(args.config) if args.config else MandalaConfig()

    if args.preset is not None:
        if args.preset not in PRESETS:
            raise ConfigError(
                f"Unknown preset {args.preset!r} (choose from: {', '.join(PRESETS)})"
            )
        config.apply_preset(args.preset)

    if args.algorithm is not None:
        if not registry.has(args.algorithm):
            known = ", ".join(info.id for info in registry.list())
            raise ConfigError(f"Unknown algorithm {args.algorithm!r} (choose from: {known})")
        config.algorithm = args.algorithm

    if args.seed is not None:
        config.random_seed = args.seed
    if args.static:
        config.animate = False
    return config


def cmd_list(args: argparse.Namespace, registry: AlgorithmRegistry):
    print("Algorithms:")
    for info in registry.list():
        print(f"  {info.id:<12} {info.display_name}")
    print("\nPresets:")
    for name, values in PRESETS.items():
        print(f"  {name:<18} ({values.get('algorithm', 'simple')})")


def cmd_render(args: argparse.Namespace, registry: AlgorithmRegistry):
    config = build_config(args, registry)
    output: Path = args.output
    as_video = output.suffix.lower() == ".mp4"

    if as_video and not ffmpeg_available():
        _fail("ffmpeg not found on PATH (needed for .mp4 output)")
    if args.frames <= 0:
        _fail("--frames must be positive")

    surface = pygame.Surface((args.width, args.height))
    session = MandalaSession(surface, registry, config=config)
    entry = registry.resolve(config.algorithm)

    print(f"Rendering {args.frames} frames at {args.width}x{args.height} @ {args.fps}fps")
    print(f"  Algorithm: {entry.display_name}, Color mode: {config.color_mode.value}")

    t0 = time.time()
    frames = session.render(args.frames)
    if as_video:
        encode_video(
            frame_iterator=frames,
            output_path=output,
            width=args.width,
            height=args.height,
            fps=args.fps,
            quality=args.quality,
            total_frames=args.frames,
            progress_callback=_progress_bar,
        )
        size = f"{output.stat().st_size / 1024 / 1024:.1f} MB"
    else:
        written = FrameExporter(output, prefix=args.prefix).export(
            frames, total_frames=args.frames, progress_callback=_progress_bar,
        )
        size = f"{len(written)} files"

    elapsed = time.time() - t0
    print(f"\nDone! {size}")
    print(f"  Render took {elapsed:.1f}s ({args.frames / max(elapsed, 0.01):.1f} fps)")
    print(f"  Output: {output}")


def cmd_run(args: argparse.Namespace, registry: AlgorithmRegistry):
    # Imported here so `render` and `list` never open a window
    from mandalaflow.app import RenderSettings, create_app

    config = build_config(args, registry)
    settings = RenderSettings(width=args.width, height=args.height, fps=args.fps)
    app = create_app(config, settings, registry)
    print("Keys: space seed | r rotate | p pulse | +/- symmetry | 1-5 algorithm")
    print("      a continuous mode | n next preset | esc quit")
    app.run()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mandalaflow",
        description="Real-time mandala renderer",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Open the interactive window")
    _add_common_options(run)
    run.set_defaults(handler=cmd_run)

    render = sub.add_parser("render", help="Render frames headlessly")
    _add_common_options(render)
    render.add_argument(
        "-o", "--output", type=Path, required=True,
        help="Output .mp4 file or a directory for PNG frames",
    )
    render.add_argument(
        "-n", "--frames", type=int, default=300,
        help="Number of frames to render (default: 300)",
    )
    render.add_argument(
        "-q", "--quality", type=str, default="high",
        choices=list(QUALITY_PRESETS),
        help="Encoding quality for .mp4 output (default: high)",
    )
    render.add_argument(
        "--prefix", type=str, default="mandala",
        help="PNG file name prefix (default: mandala)",
    )
    render.set_defaults(handler=cmd_render)

    listing = sub.add_parser("list", help="List algorithms and presets")
    listing.set_defaults(handler=cmd_list)
    return parser


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config_path = getattr(args, "config", None)
    if config_path is not None and not config_path.exists():
        _fail(f"Config file not found: {config_path}")

    registry = load_builtin_algorithms(AlgorithmRegistry())
    try:
        args.handler(args, registry)
    except ConfigError as exc:
        _fail(str(exc))
    except RuntimeError as exc:
        _fail(str(exc))


if __name__ == "__main__":
    main()
