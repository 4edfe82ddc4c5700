"""Tests for the interactive window bindings (no display needed)."""

import pygame
import pytest

from mandalaflow.app import MandalaApp, RenderSettings
from mandalaflow.core.config import PRESETS


@pytest.fixture
def app(session, registry, recorder):
    for algorithm_id in ("geometric", "flower", "shader", "fractal"):
        registry.register(algorithm_id, algorithm_id.title(), recorder)
    return MandalaApp(session, RenderSettings(width=96, height=72, fps=30))


def _key(key):
    return pygame.event.Event(pygame.KEYDOWN, key=key)


class TestKeyboard:
    def test_escape_quits(self, app):
        assert app.handle_key(pygame.K_ESCAPE) is False

    def test_space_reseeds(self, app):
        old = app.session.config.random_seed
        assert app.handle_key(pygame.K_SPACE)
        assert app.session.config.random_seed != old

    def test_toggles(self, app):
        cfg = app.session.config
        app.handle_key(pygame.K_r)
        app.handle_key(pygame.K_p)
        assert cfg.auto_rotate is False
        assert cfg.pulse_effect is False

    @pytest.mark.parametrize("key", [pygame.K_r, pygame.K_p])
    def test_toggles_redraw_when_paused(self, app, key):
        app.session.config.animate = False
        app.handle_key(key)
        assert app.session.draw_count == 1

    def test_continuous_mode(self, app, scheduler):
        app.session.start()
        app.handle_key(pygame.K_a)
        assert app.session.config.animate is False
        assert scheduler.pending == 0
        app.handle_key(pygame.K_a)
        assert scheduler.pending == 1

    def test_symmetry_keys_clamp(self, app):
        cfg = app.session.config
        cfg.symmetry = 31
        app.handle_key(pygame.K_EQUALS)
        app.handle_key(pygame.K_EQUALS)
        assert cfg.symmetry == 32

        cfg.symmetry = 3
        app.handle_key(pygame.K_MINUS)
        app.handle_key(pygame.K_KP_MINUS)
        assert cfg.symmetry == 2

    @pytest.mark.parametrize("key,algorithm_id", [
        (pygame.K_1, "simple"),
        (pygame.K_2, "geometric"),
        (pygame.K_3, "flower"),
        (pygame.K_4, "shader"),
        (pygame.K_5, "fractal"),
    ])
    def test_number_keys_select_algorithm(self, app, key, algorithm_id):
        app.handle_key(key)
        assert app.session.config.algorithm == algorithm_id

    def test_presets_cycle(self, app):
        names = list(PRESETS)
        app.handle_key(pygame.K_n)
        assert app.session.config.symmetry == PRESETS[names[0]]["symmetry"]
        app.handle_key(pygame.K_n)
        assert app.session.config.symmetry == PRESETS[names[1]]["symmetry"]

    def test_unbound_key_is_ignored(self, app):
        before = app.session.config.to_dict()
        assert app.handle_key(pygame.K_z)
        assert app.session.config.to_dict() == before


class TestEvents:
    def test_quit_event(self, app):
        assert app.handle_event(pygame.event.Event(pygame.QUIT)) is False

    def test_keydown_routes_to_keys(self, app):
        assert app.handle_event(_key(pygame.K_ESCAPE)) is False
        assert app.handle_event(_key(pygame.K_r)) is True

    def test_drag_sets_complexity(self, app):
        session = app.session
        event = pygame.event.Event(
            pygame.MOUSEMOTION,
            pos=(int(session.center_x), int(session.center_y)),
            rel=(0, 0),
            buttons=(1, 0, 0),
        )
        app.handle_event(event)
        assert session.config.complexity == 0.1

    def test_hover_without_button_is_ignored(self, app):
        session = app.session
        event = pygame.event.Event(
            pygame.MOUSEMOTION,
            pos=(int(session.center_x), int(session.center_y)),
            rel=(0, 0),
            buttons=(0, 0, 0),
        )
        app.handle_event(event)
        assert session.config.complexity == 0.5

    def test_resize(self, app):
        app.handle_event(pygame.event.Event(pygame.VIDEORESIZE, w=200, h=100, size=(200, 100)))
        assert app.session.radius == pytest.approx(40)

    def test_caption(self, app):
        assert "Recorder" in app.caption()
        assert "animating" in app.caption()
