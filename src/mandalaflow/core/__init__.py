"""Parameter animation and frame orchestration."""

from mandalaflow.core.config import AnimationRange, AnimationSettings, ConfigError, MandalaConfig
from mandalaflow.core.oscillator import AnimatedParameter, advance, sample
from mandalaflow.core.registry import AlgorithmEntry, AlgorithmRegistry
from mandalaflow.core.scheduler import ManualScheduler, Scheduler

__all__ = [
    "AnimationRange",
    "AnimationSettings",
    "ConfigError",
    "MandalaConfig",
    "AnimatedParameter",
    "advance",
    "sample",
    "AlgorithmEntry",
    "AlgorithmRegistry",
    "ManualScheduler",
    "Scheduler",
]
