"""
core/app.py — Pygame application shell

Handles the window, main loop, and scene stack.
You don't edit this file to build a puzzle.
You write Scenes and push/pop them.

    app = App(title="Backpack", width=960, height=700)
    app.push_scene(MyScene())
    app.run()

Everything is drawn to a fixed logical surface which is shown
letterboxed at ``scaler.scale`` (never above 1:1).  Pointer events are
passed to scenes in *screen* pixels; scenes map them with
``app.scaler.to_logical``.  Window resizes are debounced before scenes
hear about them.
"""

from __future__ import annotations
import pygame
from core import tuning
from core.constants import BACKGROUND_COLOR
from core.scaler import CanvasScaler, ResizeDebouncer
from core.scene import Scene


class App:
    def __init__(self, title: str = "Backpack", width: int = 960, height: int = 700):
        pygame.init()
        self._windowed_size = (width, height)
        # The logical (design) resolution — all rendering targets this.
        self._logical_size = (width, height)
        self._render_surface = pygame.Surface((width, height))
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()
        self.running = True
        self.fullscreen = False
        self.fps = tuning.get("app", "fps", 60)
        self.dt = 0.0

        self.scaler = CanvasScaler(width, height, *self.screen.get_size())
        self.resize_debounce = ResizeDebouncer(tuning.get("app", "resize_debounce_ms", 150))

        # Scene stack — only the top scene is active
        self._scenes: list[Scene] = []

        # Fixed-size fonts (the logical surface is always the same size)
        self.font = pygame.font.SysFont("monospace", 14)
        self.font_sm = pygame.font.SysFont("monospace", 11)
        self.font_lg = pygame.font.SysFont("monospace", 18)

    # -- Scene management --

    @property
    def scene(self) -> Scene | None:
        return self._scenes[-1] if self._scenes else None

    def push_scene(self, scene: Scene):
        if self._scenes:
            self._scenes[-1].on_exit(self)
        self._scenes.append(scene)
        scene.on_enter(self)

    def pop_scene(self):
        if self._scenes:
            self._scenes[-1].on_exit(self)
            self._scenes.pop()
        if self._scenes:
            self._scenes[-1].on_enter(self)
        else:
            self.running = False

    # -- Coordinate mapping --

    # -- Main loop --

    def run(self):
        while self.running:
            self.dt = self.clock.tick(self.fps) / 1000.0

            # Events
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_F11:
                    self.toggle_fullscreen()
                elif event.type == pygame.VIDEORESIZE:
                    if not self.fullscreen:
                        self._windowed_size = (event.w, event.h)
                        self.screen = pygame.display.set_mode(
                            (event.w, event.h), pygame.RESIZABLE)
                    self.resize_debounce.request((event.w, event.h),
                                                 pygame.time.get_ticks())
                elif self.scene:
                    self.scene.handle_event(event, self)

            settled = self.resize_debounce.poll(pygame.time.get_ticks())
            if settled is not None:
                self._apply_resize(*settled)

            # Update
            if self.scene:
                self.scene.update(self.dt, self)

            # Draw to the fixed-size logical surface, then letterbox it
            self._render_surface.fill(BACKGROUND_COLOR)
            if self.scene:
                self.scene.draw(self._render_surface, self)

            self.screen.fill((0, 0, 0))
            size = self.scaler.scaled_size()
            if size == self._logical_size:
                frame = self._render_surface
            else:
                frame = pygame.transform.smoothscale(self._render_surface, size)
            self.screen.blit(frame, (int(self.scaler.offset_x), int(self.scaler.offset_y)))
            pygame.display.flip()

        pygame.quit()

    def _apply_resize(self, width: int, height: int):
        self.scaler.resize(width, height)
        print(f"[APP] display {width}x{height} → scale {self.scaler.scale:.3f}")
        if self.scene:
            self.scene.on_resize(width, height, self)

    def toggle_fullscreen(self):
        """Switch between windowed and fullscreen (F11)."""
        self.fullscreen = not self.fullscreen
        if self.fullscreen:
            self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        else:
            self.screen = pygame.display.set_mode(
                self._windowed_size, pygame.RESIZABLE)
        # Mode switches are a single change; no need to wait.
        self.resize_debounce.cancel()
        self._apply_resize(*self.screen.get_size())

    # -- Convenience --

    def draw_text(self, surface: pygame.Surface, text: str, x: int, y: int,
                  color=(255, 255, 255), font=None):
        """Quick text draw. Returns the rect for layout chaining."""
        f = font or self.font
        img = f.render(text, True, color)
        rect = surface.blit(img, (x, y))
        return rect

    def draw_text_bg(self, surface: pygame.Surface, text: str, x: int, y: int,
                     color=(255, 255, 255), bg=(0, 0, 0, 160), font=None,
                     pad: int = 2):
        """Draw text with a semi-transparent background box."""
        f = font or self.font
        img = f.render(text, True, color)
        w, h = img.get_size()
        bg_surf = pygame.Surface((w + pad * 2, h + pad * 2), pygame.SRCALPHA)
        bg_surf.fill(bg)
        surface.blit(bg_surf, (x - pad, y - pad))
        return surface.blit(img, (x, y))
