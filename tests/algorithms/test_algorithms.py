"""Tests for the built-in drawing algorithms."""

import math

import numpy as np
import pygame
import pytest

from mandalaflow.algorithms import fractal, shader
from mandalaflow.algorithms.base import (
    Transform,
    blit_rgb,
    clamp,
    clamp_structure,
    color_mode_index,
    pixel_grid,
    polygon_points,
    surface_to_array,
)
from mandalaflow.algorithms.fields import field_size, glsl_mod, value_noise
from mandalaflow.core.config import MandalaConfig
from mandalaflow.core.noisefield import SimplexNoise
from mandalaflow.core.orchestrator import MandalaSession
from mandalaflow.core.palettes import ColorMode

ALGORITHM_IDS = ["simple", "geometric", "flower", "shader", "fractal"]


@pytest.fixture
def builtin_session(surface, builtin_registry, scheduler):
    cfg = MandalaConfig(random_seed=7.0, symmetry=8, layers=3, background_color=(5, 5, 5))
    return MandalaSession(
        surface, builtin_registry, config=cfg, scheduler=scheduler, noise_source=SimplexNoise(seed=2)
    )


def _distinct_colors(surface: pygame.Surface) -> int:
    arr = surface_to_array(surface).reshape(-1, 3)
    return len(np.unique(arr, axis=0))


class TestBuiltinAlgorithms:
    @pytest.mark.parametrize("algorithm_id", ALGORITHM_IDS)
    def test_draws_something(self, builtin_session, algorithm_id):
        builtin_session.config.algorithm = algorithm_id
        entry = builtin_session.step()
        assert entry.id == algorithm_id
        assert _distinct_colors(builtin_session.surface) > 1

    @pytest.mark.parametrize("algorithm_id", ALGORITHM_IDS)
    def test_clears_previous_frame(self, builtin_session, algorithm_id):
        builtin_session.surface.fill((200, 0, 0))
        builtin_session.config.algorithm = algorithm_id
        builtin_session.step()
        arr = surface_to_array(builtin_session.surface).reshape(-1, 3)
        assert not np.any(np.all(arr == (200, 0, 0), axis=1))

    @pytest.mark.parametrize("algorithm_id", ALGORITHM_IDS)
    def test_survives_out_of_range_values(self, builtin_session, algorithm_id):
        cfg = builtin_session.config
        cfg.algorithm = algorithm_id
        cfg.symmetry = -4
        cfg.layers = 0
        cfg.complexity = 3.0
        cfg.line_width = float("nan")
        cfg.opacity = -1
        builtin_session.step()

    @pytest.mark.parametrize("mode", list(ColorMode))
    @pytest.mark.parametrize("algorithm_id", ["simple", "flower"])
    def test_every_color_mode(self, builtin_session, algorithm_id, mode):
        builtin_session.config.algorithm = algorithm_id
        builtin_session.config.color_mode = mode
        builtin_session.step()


class TestFieldPrograms:
    @pytest.mark.parametrize("module", [shader, fractal])
    def test_output_shape_and_range(self, module):
        with np.errstate(all="ignore"):
            rgb = module.shade(40, 30, time=1.5, rotation=0.2, symmetry=8,
                               complexity=0.5, pulse=True, color_mode=1)
        assert rgb.shape == (30, 40, 3)
        assert rgb.dtype == np.float32
        assert np.all(rgb >= 0.0) and np.all(rgb <= 1.0)

    def test_shader_changes_over_time(self):
        a = shader.shade(32, 32, 0.0, 0.0, 8, 0.5, True, 1)
        b = shader.shade(32, 32, 2.0, 0.0, 8, 0.5, True, 1)
        assert not np.allclose(a, b)

    def test_shader_color_modes_differ(self):
        mono = shader.shade(32, 32, 1.0, 0.0, 8, 0.5, False, 0)
        ocean = shader.shade(32, 32, 1.0, 0.0, 8, 0.5, False, 4)
        assert not np.allclose(mono, ocean)

    def test_field_size(self):
        assert field_size(96, 72, 320) == (96, 72)
        assert field_size(1280, 720, 320) == (320, 180)


class TestHelpers:
    def test_clamp(self):
        assert clamp(5, 0, 1) == 1
        assert clamp(-5, 0, 1) == 0
        assert clamp(float("nan"), 0, 1, default=0.5) == 0.5
        assert clamp("junk", 2, 9) == 2

    def test_clamp_structure(self):
        cfg = MandalaConfig(symmetry=500, layers=-1, complexity=2, line_width=0, opacity=9)
        s = clamp_structure(cfg)
        assert s.symmetry == 64
        assert s.layers == 1
        assert s.complexity == 1.0
        assert s.line_width == 0.1
        assert s.opacity == 1.0

    def test_color_mode_index(self):
        assert color_mode_index("monochrome") == 0
        assert color_mode_index(ColorMode.OCEAN) == 4
        assert color_mode_index("plaid") == 0

    def test_polygon_points(self):
        pts = polygon_points(10, 4)
        assert len(pts) == 4
        assert pts[0] == pytest.approx((10, 0))
        assert pts[1] == pytest.approx((0, 10), abs=1e-9)

    def test_transform_rotates_then_translates(self):
        t = Transform((100, 50), rotation=math.pi / 2, scale=2.0)
        assert t.point(1, 0) == pytest.approx((100, 52))
        assert t.points([(1, 0), (0, 1)]) == [pytest.approx((100, 52)), pytest.approx((98, 50))]

    def test_pixel_grid_flips_y(self):
        xs, ys = pixel_grid(4, 3)
        assert xs.shape == (3, 4)
        assert ys[0, 0] == 2.5
        assert ys[-1, 0] == 0.5

    def test_glsl_mod_sign_follows_divisor(self):
        assert glsl_mod(np.array(-0.5), 2.0) == pytest.approx(1.5)

    def test_value_noise_range(self):
        xs, ys = np.meshgrid(np.linspace(-3, 3, 20), np.linspace(-3, 3, 20))
        v = value_noise(xs, ys)
        assert v.min() >= 0.0 and v.max() <= 1.0

    def test_blit_rgb_upscales(self, surface):
        blit_rgb(surface, np.ones((10, 12, 3), dtype=np.float32))
        assert surface.get_at((50, 40))[:3] == (255, 255, 255)

    def test_surface_to_array_layout(self):
        surf = pygame.Surface((4, 2))
        surf.fill((0, 0, 0))
        surf.set_at((3, 1), (9, 8, 7))
        arr = surface_to_array(surf)
        assert arr.shape == (2, 4, 3)
        assert tuple(arr[1, 3]) == (9, 8, 7)
