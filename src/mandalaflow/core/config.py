"""
Mandala configuration store.

A single mutable record of named parameters read by every other component.
Values are not range-checked on assignment: control surfaces clamp to
``CONTROL_RANGES`` and the drawing algorithms clamp before use.
"""

import copy
import json
import random
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from mandalaflow.core.oscillator import AnimatedParameter
from mandalaflow.core.palettes import RGB, ColorMode, hex_to_rgb, rgb_to_hex


class ConfigError(ValueError):
    """Raised when a configuration source contains unknown or malformed values."""


@dataclass
class AnimationRange:
    minimum: float
    maximum: float


def _default_flags() -> dict[AnimatedParameter, bool]:
    return {
        AnimatedParameter.SYMMETRY: False,
        AnimatedParameter.LINE_WIDTH: False,
        AnimatedParameter.OPACITY: False,
        AnimatedParameter.COMPLEXITY: True,
    }


def _default_ranges() -> dict[AnimatedParameter, AnimationRange]:
    return {
        AnimatedParameter.SYMMETRY: AnimationRange(4, 16),
        AnimatedParameter.LINE_WIDTH: AnimationRange(0.5, 3),
        AnimatedParameter.OPACITY: AnimationRange(0.3, 1),
        AnimatedParameter.COMPLEXITY: AnimationRange(0.2, 0.8),
    }


def _default_speeds() -> dict[AnimatedParameter, float]:
    return {
        AnimatedParameter.SYMMETRY: 1.0,
        AnimatedParameter.LINE_WIDTH: 0.7,
        AnimatedParameter.OPACITY: 1.3,
        AnimatedParameter.COMPLEXITY: 1.0,
    }


@dataclass
class AnimationSettings:
    """Self-animation of the structural parameters."""

    enabled: bool = True
    speed: float = 0.001  # Global multiplier for every parameter phase
    parameters: dict[AnimatedParameter, bool] = field(default_factory=_default_flags)
    ranges: dict[AnimatedParameter, AnimationRange] = field(default_factory=_default_ranges)
    speeds: dict[AnimatedParameter, float] = field(default_factory=_default_speeds)

    def enabled_parameters(self) -> list[AnimatedParameter]:
        return [p for p in AnimatedParameter if self.parameters.get(p, False)]


# (min, max) used by the control surface; symmetry and layers step by 1
CONTROL_RANGES = {
    "symmetry": (2, 32),
    "layers": (1, 5),
    "line_width": (0.1, 5.0),
    "opacity": (0.0, 1.0),
    "complexity": (0.0, 1.0),
    "rotation_speed": (0.0, 0.02),
}

# camelCase names accepted from exported JSON configs
ALIASES = {
    "lineWidth": "line_width",
    "rotationSpeed": "rotation_speed",
    "backgroundColor": "background_color",
    "autoRotate": "auto_rotate",
    "randomSeed": "random_seed",
    "useGradient": "use_gradient",
    "colorMode": "color_mode",
    "pulseEffect": "pulse_effect",
    "parameterAnimation": "animation.enabled",
    "animationSpeed": "animation.speed",
}


def _new_seed(rng: random.Random | None = None) -> float:
    return (rng or random).random() * 1000


@dataclass
class MandalaConfig:
    """Live-editable mandala parameters."""

    # Structure
    symmetry: int = 32
    layers: int = 3
    complexity: float = 0.5
    line_width: float = 2.0
    opacity: float = 0.7

    # Colour
    color: RGB = (255, 255, 255)
    background_color: RGB = (18, 18, 18)
    color_mode: ColorMode = ColorMode.RAINBOW
    use_gradient: bool = True

    # Behaviour
    auto_rotate: bool = True
    rotation_speed: float = 0.001
    pulse_effect: bool = True
    animate: bool = True
    algorithm: str = "shader"
    random_seed: float = field(default_factory=_new_seed)

    animation: AnimationSettings = field(default_factory=AnimationSettings)

    # --- Name-based access ---

    @staticmethod
    def canonical_name(name: str) -> str:
        """Resolve aliases; raises KeyError for unknown names."""
        name = ALIASES.get(name, name)
        if name in ("animation.enabled", "animation.speed"):
            return name
        if name not in _FIELD_NAMES or name == "animation":
            raise KeyError(name)
        return name

    def get(self, name: str) -> Any:
        key = self.canonical_name(name)
        if key.startswith("animation."):
            return getattr(self.animation, key.split(".", 1)[1])
        return getattr(self, key)

    def set(self, name: str, value: Any):
        """Assign a named field. Colours and colour modes are coerced; ranges are not checked."""
        key = self.canonical_name(name)
        if key.startswith("animation."):
            setattr(self.animation, key.split(".", 1)[1], value)
            return
        setattr(self, key, _coerce(key, value))

    def reseed(self, rng: random.Random | None = None) -> float:
        self.random_seed = _new_seed(rng)
        return self.random_seed

    def snapshot(self) -> "MandalaConfig":
        """Deep copy handed to the drawing algorithms for one frame."""
        return copy.deepcopy(self)

    # --- Presets ---

    def apply_preset(self, name: str, rng: random.Random | None = None):
        """
        Copy a named preset's values onto this config and reseed.

        Raises:
            KeyError: If the preset does not exist.
        """
        preset = PRESETS[name]
        for key, value in preset.items():
            self.set(key, value)
        self.reseed(rng)

    # --- Serialization ---

    def to_dict(self) -> dict[str, Any]:
        anim = self.animation
        return {
            "symmetry": self.symmetry,
            "layers": self.layers,
            "complexity": self.complexity,
            "line_width": self.line_width,
            "opacity": self.opacity,
            "color": rgb_to_hex(self.color),
            "background_color": rgb_to_hex(self.background_color),
            "color_mode": ColorMode(self.color_mode).value,
            "use_gradient": self.use_gradient,
            "auto_rotate": self.auto_rotate,
            "rotation_speed": self.rotation_speed,
            "pulse_effect": self.pulse_effect,
            "animate": self.animate,
            "algorithm": self.algorithm,
            "random_seed": self.random_seed,
            "animation": {
                "enabled": anim.enabled,
                "speed": anim.speed,
                "parameters": {p.value: anim.parameters[p] for p in anim.parameters},
                "ranges": {
                    p.value: {"min": r.minimum, "max": r.maximum}
                    for p, r in anim.ranges.items()
                },
                "speeds": {p.value: s for p, s in anim.speeds.items()},
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MandalaConfig":
        """
        Build a config from a plain dict (e.g. parsed JSON).

        Keys may be snake_case or the camelCase names of exported configs.
        Animation settings live under ``animation`` (or the flat
        ``animationParameters`` / ``animationRanges`` / ``animationSpeeds``).

        Raises:
            ConfigError: On unknown keys or malformed values.
        """
        config = cls()
        data = dict(data)

        nested = data.pop("animation", None) or {}
        if not isinstance(nested, dict):
            raise ConfigError("'animation' must be an object")
        nested = dict(nested)
        for flat, key in (
            ("animationParameters", "parameters"),
            ("animationRanges", "ranges"),
            ("animationSpeeds", "speeds"),
        ):
            if flat in data:
                nested[key] = data.pop(flat)

        for key, value in data.items():
            try:
                config.set(key, value)
            except KeyError:
                raise ConfigError(f"Unknown config key: {key}") from None
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"Bad value for {key}: {exc}") from None

        try:
            _apply_animation(config.animation, nested)
        except ConfigError:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"Bad animation settings: {exc!r}") from None
        return config


_FIELD_NAMES = frozenset(f.name for f in fields(MandalaConfig))


def _coerce(key: str, value: Any) -> Any:
    if key in ("color", "background_color"):
        if isinstance(value, str):
            return hex_to_rgb(value)
        return tuple(int(c) for c in value)
    if key == "color_mode":
        return ColorMode(value)
    return value


def _parameter(name: str) -> AnimatedParameter:
    name = ALIASES.get(name, name)
    try:
        return AnimatedParameter(name)
    except ValueError:
        raise ConfigError(f"Not an animatable parameter: {name}") from None


def _apply_animation(settings: AnimationSettings, data: dict[str, Any]):
    for key, value in data.items():
        if key == "enabled":
            settings.enabled = bool(value)
        elif key == "speed":
            settings.speed = float(value)
        elif key == "parameters":
            for name, flag in value.items():
                settings.parameters[_parameter(name)] = bool(flag)
        elif key == "ranges":
            for name, bounds in value.items():
                settings.ranges[_parameter(name)] = AnimationRange(
                    float(bounds["min"]), float(bounds["max"])
                )
        elif key == "speeds":
            for name, speed in value.items():
                settings.speeds[_parameter(name)] = float(speed)
        else:
            raise ConfigError(f"Unknown animation key: {key}")


def load_config(path: Path) -> MandalaConfig:
    """Load a JSON config file."""
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{path}: {exc}") from None
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be an object")
    return MandalaConfig.from_dict(data)


PRESETS: dict[str, dict[str, Any]] = {
    "Classic": {
        "symmetry": 8, "line_width": 2, "opacity": 0.7, "use_gradient": False,
        "color": "#ffffff", "color_mode": "monochrome", "layers": 3,
        "complexity": 0.5, "algorithm": "simple",
    },
    "Floral": {
        "symmetry": 12, "line_width": 1.5, "opacity": 0.8, "use_gradient": True,
        "color_mode": "rainbow", "layers": 4, "complexity": 0.7,
        "pulse_effect": True, "algorithm": "simple",
    },
    "Minimalist": {
        "symmetry": 6, "line_width": 1, "opacity": 0.9, "use_gradient": False,
        "color": "#ffffff", "background_color": "#000000", "layers": 2,
        "complexity": 0.3, "pulse_effect": False, "algorithm": "simple",
    },
    "Ocean Waves": {
        "symmetry": 16, "line_width": 1.2, "opacity": 0.6, "use_gradient": True,
        "color_mode": "ocean", "background_color": "#001133", "layers": 4,
        "complexity": 0.8, "rotation_speed": 0.002, "algorithm": "simple",
    },
    "Sacred Geometry": {
        "symmetry": 7, "line_width": 1.5, "opacity": 0.85, "use_gradient": True,
        "color_mode": "earth", "background_color": "#110011", "layers": 3,
        "complexity": 0.6, "algorithm": "simple",
    },
    "Geometric Stars": {
        "symmetry": 8, "line_width": 1.8, "opacity": 0.8, "use_gradient": True,
        "color_mode": "complementary", "background_color": "#000022", "layers": 3,
        "complexity": 0.7, "algorithm": "geometric",
    },
    "Sacred Polygons": {
        "symmetry": 6, "line_width": 1.2, "opacity": 0.9, "use_gradient": True,
        "color_mode": "earth", "background_color": "#111111", "layers": 4,
        "complexity": 0.5, "algorithm": "geometric",
    },
    "Spring Bloom": {
        "symmetry": 10, "line_width": 1.4, "opacity": 0.85, "use_gradient": True,
        "color_mode": "rainbow", "background_color": "#001a00", "layers": 3,
        "complexity": 0.6, "pulse_effect": True, "algorithm": "flower",
    },
    "Lotus Flow": {
        "symmetry": 12, "line_width": 1.0, "opacity": 0.75, "use_gradient": True,
        "color_mode": "complementary", "background_color": "#000a1a", "layers": 4,
        "complexity": 0.8, "pulse_effect": True, "algorithm": "flower",
    },
}
