"""ui.toast — One transient message line.

Placement failures, blocked rotations and similar feedback show up here
for a moment and then fade.  A new message replaces the old one.
"""

from __future__ import annotations
import pygame

from core import tuning


class Toast:
    def __init__(self):
        self.message = ""
        self.color = (255, 255, 255)
        self.timer = 0.0
        self.duration = 0.0

    @property
    def visible(self) -> bool:
        return bool(self.message) and self.timer > 0

    def show(self, message: str, color: tuple = (245, 101, 101),
             duration: float | None = None) -> None:
        self.message = message
        self.color = color
        self.duration = (tuning.get("ui.toast", "duration", 1.5)
                         if duration is None else duration)
        self.timer = self.duration

    def update(self, dt: float) -> None:
        if self.timer > 0:
            self.timer = max(0.0, self.timer - dt)
            if self.timer == 0:
                self.message = ""

    def draw(self, surface: pygame.Surface, app) -> None:
        if not self.visible:
            return
        # Fade over the last third.
        fade = min(1.0, self.timer / max(self.duration / 3, 1e-6))
        img = app.font_lg.render(self.message, True, self.color)
        img.set_alpha(int(255 * fade))
        sw, _sh = surface.get_size()
        y = tuning.get("ui.toast", "y", 24)
        bg = pygame.Surface((img.get_width() + 24, img.get_height() + 12), pygame.SRCALPHA)
        bg.fill((0, 0, 0, int(170 * fade)))
        x = (sw - bg.get_width()) // 2
        surface.blit(bg, (x, y))
        surface.blit(img, (x + 12, y + 6))
