"""Pytest configuration and shared fixtures."""

import os

# Headless pygame: no window, no audio device
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame  # noqa: E402
import pytest  # noqa: E402

from mandalaflow.core.config import MandalaConfig  # noqa: E402
from mandalaflow.core.noisefield import SimplexNoise  # noqa: E402
from mandalaflow.core.orchestrator import MandalaSession  # noqa: E402
from mandalaflow.core.registry import AlgorithmRegistry, load_builtin_algorithms  # noqa: E402
from mandalaflow.core.scheduler import ManualScheduler  # noqa: E402

# Small canvas keeps the field algorithms fast
TEST_SIZE = (96, 72)


class RecordingAlgorithm:
    """Draw stub that remembers every frame context it was given."""

    def __init__(self, fill=(0, 0, 0)):
        self.fill = fill
        self.contexts = []

    def draw(self, surface, ctx):
        surface.fill(self.fill)
        self.contexts.append(ctx)


@pytest.fixture
def surface() -> pygame.Surface:
    return pygame.Surface(TEST_SIZE)


@pytest.fixture
def recorder() -> RecordingAlgorithm:
    return RecordingAlgorithm()


@pytest.fixture
def registry(recorder) -> AlgorithmRegistry:
    """Registry with one recording algorithm under the id "simple"."""
    reg = AlgorithmRegistry()
    reg.register("simple", "Recorder", recorder)
    return reg


@pytest.fixture
def builtin_registry() -> AlgorithmRegistry:
    return load_builtin_algorithms(AlgorithmRegistry())


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def config() -> MandalaConfig:
    """Defaults, pointed at the recording algorithm, seeded."""
    cfg = MandalaConfig(random_seed=42.0)
    cfg.algorithm = "simple"
    return cfg


@pytest.fixture
def session(surface, registry, config, scheduler) -> MandalaSession:
    return MandalaSession(
        surface, registry, config=config, scheduler=scheduler, noise_source=SimplexNoise(seed=1)
    )
