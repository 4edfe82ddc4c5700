"""Real-time generative mandala renderer with self-animating parameters."""

from mandalaflow.core.config import MandalaConfig, PRESETS
from mandalaflow.core.orchestrator import FrameContext, MandalaSession
from mandalaflow.core.registry import AlgorithmRegistry, load_builtin_algorithms

__version__ = "0.1.0"
__all__ = [
    "MandalaConfig",
    "PRESETS",
    "FrameContext",
    "MandalaSession",
    "AlgorithmRegistry",
    "load_builtin_algorithms",
]
