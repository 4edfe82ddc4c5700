"""
Frame orchestrator for the mandala renderer.

Owns the configuration and phase state for one session. Every tick it
advances rotation, pulse and animated parameters, resolves the active
drawing algorithm and hands it a read-only frame context. Ticks are
scheduled through an injected scheduler, so the same session runs inside
the pygame window or headless.
"""

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping

import numpy as np
import pygame

from mandalaflow.algorithms.base import surface_to_array
from mandalaflow.core.config import MandalaConfig
from mandalaflow.core.noisefield import SimplexNoise
from mandalaflow.core.oscillator import AnimatedParameter, ParameterOscillator, advance
from mandalaflow.core.palettes import COLOR_PALETTES, ColorMode, RGB
from mandalaflow.core.registry import AlgorithmEntry, AlgorithmInfo, AlgorithmRegistry
from mandalaflow.core.scheduler import ManualScheduler, Scheduler

logger = logging.getLogger(__name__)

# Pulse advances at a constant rate, independent of the animation speed
PULSE_INCREMENT = 0.03
# Simulated seconds per frame for time-based algorithms
FRAME_SECONDS = 1.0 / 60.0
# Radius of the mandala relative to the smaller canvas dimension
RADIUS_FRACTION = 0.4
# Pointer drags only count inside this many radii
POINTER_REACH = 1.5


@dataclass
class PhaseState:
    """Accumulators that live for the whole session."""

    angle: float = 0.0
    pulse_phase: float = 0.0
    animation_phase: float = 0.0
    parameters: dict[AnimatedParameter, ParameterOscillator] = field(
        default_factory=lambda: {p: ParameterOscillator(p) for p in AnimatedParameter}
    )

    def phase_of(self, parameter: AnimatedParameter) -> float:
        return self.parameters[parameter].phase


@dataclass(frozen=True)
class FrameContext:
    """Read-only snapshot handed to a drawing algorithm for one draw call."""

    center_x: float
    center_y: float
    radius: float
    config: MandalaConfig
    angle: float
    pulse_phase: float
    noise: SimplexNoise
    palettes: Mapping[ColorMode, tuple[RGB, ...]]
    frame_index: int = 0
    elapsed: float = 0.0


class MandalaSession:
    """
    Per-session driver: configuration, phases, registry and render target.

    Continuous mode (``config.animate``) reschedules a tick on every
    refresh. Single-shot mode only draws when asked to.
    """

    def __init__(
        self,
        surface: pygame.Surface,
        registry: AlgorithmRegistry,
        config: MandalaConfig | None = None,
        scheduler: Scheduler | None = None,
        noise_source: SimplexNoise | None = None,
    ):
        self.surface = surface
        self.registry = registry
        self.config = config or MandalaConfig()
        self.scheduler = scheduler or ManualScheduler()
        self.noise = noise_source or SimplexNoise()
        self.palettes = MappingProxyType(COLOR_PALETTES)

        self.phases = PhaseState()
        self.frame_index = 0
        self.draw_count = 0
        self.last_entry: AlgorithmEntry | None = None

        self._handle: int | None = None
        self._in_tick = False

        self.center_x = 0.0
        self.center_y = 0.0
        self.radius = 0.0
        self._update_geometry(*surface.get_size())

    # --- Geometry ---

    def _update_geometry(self, width: int, height: int):
        self.center_x = width / 2
        self.center_y = height / 2
        self.radius = min(width, height) * RADIUS_FRACTION

    def resize(self, width: int, height: int, surface: pygame.Surface | None = None):
        """Adopt a new render target size; redraws in single-shot mode."""
        self.surface = surface if surface is not None else pygame.Surface((width, height))
        self._update_geometry(width, height)
        self.request_redraw()

    # --- Continuous mode ---

    @property
    def running(self) -> bool:
        """True while a continuous tick stream is active."""
        return self._handle is not None or (self._in_tick and self.config.animate)

    def start(self):
        """Begin the session: tick continuously, or draw once in single-shot mode."""
        if self.config.animate:
            self._schedule_next()
        else:
            self.draw_frame()

    def stop(self):
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None

    def set_animate(self, enabled: bool):
        """
        Switch between continuous and single-shot mode.

        Turning continuous mode on never creates a second tick stream.
        Turning it off cancels the pending tick before returning and draws
        the current state once.
        """
        self.config.animate = enabled
        if enabled:
            logger.info("Continuous mode on")
            self._schedule_next()
        else:
            logger.info("Continuous mode off")
            self.stop()
            self.draw_frame()

    def toggle_continuous_mode(self) -> bool:
        self.set_animate(not self.config.animate)
        return self.config.animate

    def _schedule_next(self):
        # Inside a tick the stream reschedules itself on exit
        if self._handle is None and not self._in_tick:
            self._handle = self.scheduler.schedule(self.tick)

    def tick(self):
        """One continuous-mode frame: advance phases, draw, reschedule."""
        self._handle = None
        self._in_tick = True
        try:
            self.step()
        finally:
            self._in_tick = False
        if self.config.animate:
            self._schedule_next()

    # --- Frame steps ---

    def step(self) -> AlgorithmEntry:
        """Advance all phases by one frame, then draw."""
        self.advance_phases()
        entry = self.draw_frame()
        self.frame_index += 1
        return entry

    def advance_phases(self):
        """Rotation, pulse and parameter animation, in that order."""
        cfg = self.config
        phases = self.phases

        if cfg.auto_rotate:
            phases.angle = advance(phases.angle, cfg.rotation_speed, 1.0, wrap=False)

        if cfg.pulse_effect:
            phases.pulse_phase = advance(phases.pulse_phase, PULSE_INCREMENT)

        anim = cfg.animation
        if anim.enabled:
            phases.animation_phase = advance(phases.animation_phase, anim.speed)
            for parameter in anim.enabled_parameters():
                bounds = anim.ranges[parameter]
                value = phases.parameters[parameter].step(
                    anim.speed,
                    anim.speeds.get(parameter, 1.0),
                    bounds.minimum,
                    bounds.maximum,
                )
                setattr(cfg, parameter.value, value)

    def build_context(self) -> FrameContext:
        return FrameContext(
            center_x=self.center_x,
            center_y=self.center_y,
            radius=self.radius,
            config=self.config.snapshot(),
            angle=self.phases.angle,
            pulse_phase=self.phases.pulse_phase,
            noise=self.noise,
            palettes=self.palettes,
            frame_index=self.frame_index,
            elapsed=self.frame_index * FRAME_SECONDS,
        )

    def draw_frame(self) -> AlgorithmEntry:
        """Resolve the active algorithm and draw the current state once."""
        entry = self.registry.resolve(self.config.algorithm)
        entry.algorithm.draw(self.surface, self.build_context())
        self.last_entry = entry
        self.draw_count += 1
        return entry

    def request_redraw(self) -> bool:
        """Single-shot redraw; ignored while ticking continuously."""
        if self.config.animate:
            return False
        self.draw_frame()
        return True

    def render(self, n_frames: int) -> Iterator[np.ndarray]:
        """
        Step the session ``n_frames`` times without a scheduler.

        Yields:
            (H, W, 3) uint8 RGB arrays, one per frame.
        """
        for _ in range(n_frames):
            self.step()
            yield surface_to_array(self.surface)

    # --- Control surface ---

    def set_algorithm(self, algorithm_id: str) -> bool:
        """Select a registered algorithm; unknown ids are ignored."""
        if not self.registry.has(algorithm_id):
            logger.debug("Ignoring unknown algorithm %r", algorithm_id)
            return False
        self.config.algorithm = algorithm_id
        self.request_redraw()
        return True

    def set_parameter(self, name: str, value: Any):
        """Store a named value and redraw; ``animate`` switches the tick stream."""
        if self.config.canonical_name(name) == "animate":
            self.set_animate(bool(value))
            return
        self.config.set(name, value)
        self.request_redraw()

    def reseed(self) -> float:
        return self.config.reseed()

    def randomize(self) -> float:
        """New random seed, redrawn immediately in single-shot mode."""
        seed = self.config.reseed()
        self.request_redraw()
        return seed

    def apply_preset(self, name: str):
        self.config.apply_preset(name)
        self.request_redraw()

    def apply_pointer(self, x: float, y: float) -> bool:
        """Drag interaction: distance from the center drives complexity."""
        distance = math.hypot(x - self.center_x, y - self.center_y)
        reach = self.radius * POINTER_REACH
        if reach <= 0 or distance >= reach:
            return False
        self.config.complexity = max(0.1, min(1.0, distance / reach))
        return True

    # --- Presentation ---

    def list_algorithms(self) -> list[AlgorithmInfo]:
        return self.registry.list()

    def config_snapshot(self) -> dict[str, Any]:
        return self.config.to_dict()
