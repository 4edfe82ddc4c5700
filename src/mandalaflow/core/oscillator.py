"""
Sinusoidal oscillator engine.

Phase accumulators are advanced by a per-frame increment and mapped to a
bounded value through a sine wave. Each animatable parameter owns its own
phase so parameters drift independently of one another.
"""

import enum
import math
from dataclasses import dataclass

TAU = 2 * math.pi


class AnimatedParameter(str, enum.Enum):
    """The configuration fields that can animate themselves."""

    SYMMETRY = "symmetry"
    LINE_WIDTH = "line_width"
    OPACITY = "opacity"
    COMPLEXITY = "complexity"


# Parameters whose sampled value is rounded to the nearest integer
INTEGRAL_PARAMETERS = frozenset({"symmetry", "layers"})


def advance(
    phase: float,
    speed: float,
    global_speed: float = 1.0,
    wrap: bool = True,
) -> float:
    """
    Advance a phase accumulator by ``speed * global_speed``.

    Args:
        phase: Current phase in radians.
        speed: Per-step increment (relative speed).
        global_speed: Global multiplier applied to ``speed``.
        wrap: Reduce the result modulo 2π. Sine is periodic, so this only
            keeps precision over long sessions and never changes ``sample``.

    Returns:
        The new phase.
    """
    phase += speed * global_speed
    if wrap:
        phase = math.fmod(phase, TAU)
    return phase


def sample(
    phase: float,
    minimum: float,
    maximum: float,
    integral: bool = False,
) -> float:
    """
    Map a phase onto ``[minimum, maximum]`` with a sine wave.

    ``mid + amplitude * sin(phase)``, where mid and amplitude come from the
    range. Integral values are rounded after sampling, never before.

    Args:
        phase: Phase in radians.
        minimum: Lower bound of the range.
        maximum: Upper bound of the range.
        integral: Round the sampled value to the nearest integer.

    Returns:
        The sampled value, inside the range.
    """
    mid = (minimum + maximum) / 2
    amplitude = (maximum - minimum) / 2
    value = mid + amplitude * math.sin(phase)
    # Guard against floating drift past the bounds
    value = min(max(value, minimum), maximum)
    if integral:
        # Halves round up
        return int(min(max(math.floor(value + 0.5), math.ceil(minimum)), math.floor(maximum)))
    return value


@dataclass
class ParameterOscillator:
    """Independent phase accumulator for one animated parameter."""

    parameter: AnimatedParameter
    phase: float = 0.0

    @property
    def integral(self) -> bool:
        return self.parameter.value in INTEGRAL_PARAMETERS

    def step(
        self,
        global_speed: float,
        relative_speed: float,
        minimum: float,
        maximum: float,
    ) -> float:
        """Advance the phase one frame and return the sampled value."""
        self.phase = advance(self.phase, relative_speed, global_speed)
        return sample(self.phase, minimum, maximum, integral=self.integral)

    def reset(self):
        self.phase = 0.0
