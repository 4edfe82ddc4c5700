"""
Drawing algorithm registry.

Maps algorithm ids to drawing capabilities. Plugins register themselves
once at load time; lookups never fail and degrade to a fallback entry.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Protocol, runtime_checkable

import pygame

if TYPE_CHECKING:
    from mandalaflow.core.orchestrator import FrameContext

logger = logging.getLogger(__name__)

BUILTIN_ALGORITHM_MODULES = (
    "mandalaflow.algorithms.simple",
    "mandalaflow.algorithms.geometric",
    "mandalaflow.algorithms.flower",
    "mandalaflow.algorithms.shader",
    "mandalaflow.algorithms.fractal",
)


@runtime_checkable
class DrawingAlgorithm(Protocol):
    """Capability every rendering plugin implements."""

    def draw(self, surface: pygame.Surface, ctx: FrameContext) -> None:
        """Fill the background of ``surface`` and paint one frame."""
        ...


@dataclass(frozen=True)
class AlgorithmEntry:
    id: str
    display_name: str
    algorithm: DrawingAlgorithm


@dataclass(frozen=True)
class AlgorithmInfo:
    id: str
    display_name: str


class _FunctionAlgorithm:
    """Adapts a bare ``draw(surface, ctx)`` function to the protocol."""

    def __init__(self, fn: Callable[[pygame.Surface, FrameContext], None]):
        self._fn = fn

    def draw(self, surface: pygame.Surface, ctx: FrameContext) -> None:
        self._fn(surface, ctx)


class FallbackAlgorithm:
    """Minimal stub: background plus one circle at half radius."""

    def draw(self, surface: pygame.Surface, ctx: FrameContext) -> None:
        # Deferred: the drawing helpers import the core package
        from mandalaflow.algorithms.base import clamp, stroke_width

        cfg = ctx.config
        surface.fill(cfg.background_color)
        width = stroke_width(clamp(cfg.line_width, 0.1, 20.0, default=2.0))
        radius = max(1, int(ctx.radius * 0.5))
        pygame.draw.circle(
            surface, cfg.color, (int(ctx.center_x), int(ctx.center_y)), radius, width
        )


FALLBACK_ENTRY = AlgorithmEntry("simple", "Fallback Algorithm", FallbackAlgorithm())


class AlgorithmRegistry:
    """Id-keyed store of drawing algorithms with lookup fallback."""

    def __init__(self):
        self._entries: dict[str, AlgorithmEntry] = {}
        self._fallback_id: str | None = None
        self._warned: set[str] = set()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, algorithm_id: str) -> bool:
        return self.has(algorithm_id)

    def register(
        self,
        algorithm_id: str,
        display_name: str,
        algorithm: DrawingAlgorithm | Callable[[pygame.Surface, FrameContext], None],
    ) -> AlgorithmEntry:
        """
        Register (or overwrite) an algorithm.

        The first registered algorithm becomes the fallback for unknown ids.

        Args:
            algorithm_id: Key stored in ``MandalaConfig.algorithm``.
            display_name: Human readable name for menus.
            algorithm: Object with a ``draw`` method, or a bare draw function.

        Returns:
            The stored entry.
        """
        if not isinstance(algorithm, DrawingAlgorithm):
            if not callable(algorithm):
                raise TypeError(f"{algorithm_id}: algorithm must define draw() or be callable")
            algorithm = _FunctionAlgorithm(algorithm)

        entry = AlgorithmEntry(algorithm_id, display_name, algorithm)
        self._entries[algorithm_id] = entry
        self._warned.discard(algorithm_id)
        if self._fallback_id is None:
            self._fallback_id = algorithm_id
        logger.debug("Registered algorithm %s (%s)", algorithm_id, display_name)
        return entry

    def has(self, algorithm_id: str) -> bool:
        return algorithm_id in self._entries

    @property
    def fallback(self) -> AlgorithmEntry:
        if self._fallback_id is None:
            return FALLBACK_ENTRY
        return self._entries[self._fallback_id]

    def resolve(self, algorithm_id: str) -> AlgorithmEntry:
        """Entry for ``algorithm_id``, or the fallback. Never raises."""
        entry = self._entries.get(algorithm_id)
        if entry is not None:
            return entry

        fallback = self.fallback
        if algorithm_id not in self._warned:
            self._warned.add(algorithm_id)
            logger.warning(
                "Unknown algorithm %r, falling back to %r", algorithm_id, fallback.id
            )
        return fallback

    def list(self) -> list[AlgorithmInfo]:
        return [AlgorithmInfo(e.id, e.display_name) for e in self._entries.values()]


def load_builtin_algorithms(registry: AlgorithmRegistry) -> AlgorithmRegistry:
    """Import each built-in plugin module and let it register itself."""
    for module_name in BUILTIN_ALGORITHM_MODULES:
        module = importlib.import_module(module_name)
        module.register(registry)
    return registry
