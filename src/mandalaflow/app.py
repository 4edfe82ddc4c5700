"""
Interactive pygame window.

Drives a ``MandalaSession`` from the display loop: the session's scheduler
is advanced once per refresh, and keyboard and mouse input go through the
session's control surface.
"""

import logging
from dataclasses import dataclass

import pygame

from mandalaflow.core.config import CONTROL_RANGES, PRESETS, MandalaConfig
from mandalaflow.core.orchestrator import MandalaSession
from mandalaflow.core.registry import AlgorithmRegistry, load_builtin_algorithms
from mandalaflow.core.scheduler import ManualScheduler

logger = logging.getLogger(__name__)


@dataclass
class RenderSettings:
    """Window and loop settings."""

    width: int = 1280
    height: int = 720
    fps: int = 60
    resizable: bool = True


# Number keys select algorithms
ALGORITHM_KEYS = {
    pygame.K_1: "simple",
    pygame.K_2: "geometric",
    pygame.K_3: "flower",
    pygame.K_4: "shader",
    pygame.K_5: "fractal",
}

INCREASE_KEYS = (pygame.K_EQUALS, pygame.K_PLUS, pygame.K_KP_PLUS)
DECREASE_KEYS = (pygame.K_MINUS, pygame.K_KP_MINUS)


class MandalaApp:
    """Keyboard/mouse bindings and the refresh loop around a session."""

    def __init__(self, session: MandalaSession, settings: RenderSettings | None = None):
        self.session = session
        self.settings = settings or RenderSettings()
        self._preset_names = list(PRESETS)
        self._preset_index = -1
        self.running = False

    @property
    def scheduler(self) -> ManualScheduler:
        return self.session.scheduler

    def handle_key(self, key: int) -> bool:
        """Apply a key press. Returns False when the app should quit."""
        session = self.session
        cfg = session.config

        if key == pygame.K_ESCAPE:
            return False
        if key == pygame.K_SPACE:
            session.randomize()
        elif key == pygame.K_r:
            cfg.auto_rotate = not cfg.auto_rotate
            session.request_redraw()
        elif key == pygame.K_p:
            cfg.pulse_effect = not cfg.pulse_effect
            session.request_redraw()
        elif key == pygame.K_a:
            session.toggle_continuous_mode()
        elif key in INCREASE_KEYS or key in DECREASE_KEYS:
            lo, hi = CONTROL_RANGES["symmetry"]
            step = 1 if key in INCREASE_KEYS else -1
            session.set_parameter("symmetry", min(hi, max(lo, int(cfg.symmetry) + step)))
        elif key == pygame.K_n:
            self._preset_index = (self._preset_index + 1) % len(self._preset_names)
            name = self._preset_names[self._preset_index]
            logger.info("Preset: %s", name)
            session.apply_preset(name)
        elif key in ALGORITHM_KEYS:
            session.set_algorithm(ALGORITHM_KEYS[key])
        return True

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            return self.handle_key(event.key)
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.session.randomize()
        elif event.type == pygame.MOUSEMOTION and event.buttons[0]:
            self.session.apply_pointer(*event.pos)
        elif event.type == pygame.VIDEORESIZE:
            surface = pygame.display.get_surface()
            self.session.resize(event.w, event.h, surface)
        return True

    def caption(self) -> str:
        entry = self.session.registry.resolve(self.session.config.algorithm)
        mode = "animating" if self.session.config.animate else "paused"
        return f"Mandala Flow - {entry.display_name} ({mode})"

    def run(self):
        clock = pygame.time.Clock()
        self.session.start()
        self.running = True
        try:
            while self.running:
                for event in pygame.event.get():
                    if not self.handle_event(event):
                        self.running = False
                        break
                self.scheduler.advance()
                pygame.display.set_caption(self.caption())
                pygame.display.flip()
                clock.tick(self.settings.fps)
        finally:
            self.session.stop()
            pygame.quit()


def create_app(
    config: MandalaConfig | None = None,
    settings: RenderSettings | None = None,
    registry: AlgorithmRegistry | None = None,
) -> MandalaApp:
    """Open the window and build a session drawing into it."""
    settings = settings or RenderSettings()
    pygame.init()
    flags = pygame.RESIZABLE if settings.resizable else 0
    screen = pygame.display.set_mode((settings.width, settings.height), flags)

    registry = registry or load_builtin_algorithms(AlgorithmRegistry())
    session = MandalaSession(screen, registry, config=config, scheduler=ManualScheduler())
    logger.info(
        "Window %dx%d @ %dfps, %d algorithms",
        settings.width, settings.height, settings.fps, len(registry),
    )
    return MandalaApp(session, settings)
