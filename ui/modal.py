"""ui.modal — Modal overlays with a row of command buttons.

A ``Modal`` draws a centred panel over the packing scene and answers
input with ``UICommand``s; it never touches the engine.  Modals live
on the logical surface, so the scene maps the pointer to logical px
once and passes it in next to the raw event.

``ButtonModal`` handles the part every prompt shares: a row of
buttons at the bottom of the panel, picked by pointer or by the arrow
keys and Enter.  Subclasses draw the body and may claim extra keys.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

import pygame

from ui.helpers import draw_overlay, draw_title_bar

if TYPE_CHECKING:
    from ui.commands import UICommand

_PREV_KEYS = (pygame.K_LEFT, pygame.K_a, pygame.K_UP, pygame.K_w)
_NEXT_KEYS = (pygame.K_RIGHT, pygame.K_d, pygame.K_DOWN, pygame.K_s, pygame.K_TAB)
_CONFIRM_KEYS = (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE)

BUTTON_W, BUTTON_H, BUTTON_GAP = 128, 28, 10


class Modal:
    """Base overlay.  Override ``handle_event`` and ``draw``."""

    def update(self, dt: float) -> None:
        pass

    def handle_event(self, event: pygame.event.Event,
                     pointer: tuple[float, float] | None = None) -> list[UICommand]:
        return []

    def draw(self, surface: pygame.Surface, app) -> None:
        pass


class ButtonModal(Modal):
    """Panel with a title, a body and a button row.

    *buttons* is a list of ``(label, command)``; choosing a button
    returns ``[command]``.  ``on_key`` gets every key the button row did
    not use.
    """

    width = 440
    max_height = 520

    def __init__(self, title: str, buttons: list[tuple[str, UICommand]]):
        self.title = title
        self.buttons = buttons
        self.cursor = 0
        self._button_rects: list[pygame.Rect] = []

    # ── input ───────────────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event,
                     pointer: tuple[float, float] | None = None) -> list[UICommand]:
        if event.type == pygame.MOUSEMOTION and pointer is not None:
            hit = self._button_at(pointer)
            if hit is not None:
                self.cursor = hit
            return []

        if event.type == pygame.MOUSEBUTTONDOWN:
            if event.button != 1 or pointer is None:
                return []
            hit = self._button_at(pointer)
            return [self.buttons[hit][1]] if hit is not None else []

        if event.type != pygame.KEYDOWN:
            return []
        if event.key in _PREV_KEYS:
            self.cursor = (self.cursor - 1) % len(self.buttons)
        elif event.key in _NEXT_KEYS:
            self.cursor = (self.cursor + 1) % len(self.buttons)
        elif event.key in _CONFIRM_KEYS:
            return [self.buttons[self.cursor][1]]
        else:
            return self.on_key(event.key)
        return []

    def on_key(self, key: int) -> list[UICommand]:
        return []

    def _button_at(self, pointer) -> int | None:
        for idx, rect in enumerate(self._button_rects):
            if rect.collidepoint(pointer):
                return idx
        return None

    # ── drawing ─────────────────────────────────────────────────────

    def draw(self, surface: pygame.Surface, app) -> None:
        sw, sh = surface.get_size()
        w = self.width
        h = min(sh - 60, self.max_height)
        x = (sw - w) // 2
        y = (sh - h) // 2

        draw_overlay(surface, 170)
        pygame.draw.rect(surface, (35, 35, 55), (x, y, w, h))
        pygame.draw.rect(surface, (140, 140, 180), (x, y, w, h), 2)
        draw_title_bar(surface, app, x, y, w, self.title)

        # Body gets everything between the title bar and the buttons.
        self.draw_body(surface, app, pygame.Rect(x, y + 40, w, h - 40 - BUTTON_H - 28))
        self._draw_buttons(surface, app, x, y + h - BUTTON_H - 14, w)

    def draw_body(self, surface: pygame.Surface, app, area: pygame.Rect) -> None:
        pass

    def _draw_buttons(self, surface, app, x: int, y: int, panel_w: int) -> None:
        n = len(self.buttons)
        bx = x + (panel_w - (BUTTON_W * n + BUTTON_GAP * (n - 1))) // 2
        self._button_rects = []
        for idx, (label, _cmd) in enumerate(self.buttons):
            rect = pygame.Rect(bx + idx * (BUTTON_W + BUTTON_GAP), y, BUTTON_W, BUTTON_H)
            fill = (70, 70, 110) if idx == self.cursor else (50, 50, 75)
            pygame.draw.rect(surface, fill, rect)
            pygame.draw.rect(surface, (160, 160, 200), rect, 1)
            img = app.font.render(label, True, (255, 255, 255))
            surface.blit(img, img.get_rect(center=rect.center))
            self._button_rects.append(rect)


class ModalStack:
    """Overlays, bottom → top.  Only the top one gets input and ticks."""

    def __init__(self) -> None:
        self._stack: list[Modal] = []

    @property
    def is_open(self) -> bool:
        return bool(self._stack)

    def push(self, modal: Modal) -> None:
        self._stack.append(modal)

    def pop(self) -> Modal | None:
        return self._stack.pop() if self._stack else None

    def clear(self) -> None:
        self._stack.clear()

    def handle_event(self, event: pygame.event.Event,
                     pointer: tuple[float, float] | None = None) -> list:
        return self._stack[-1].handle_event(event, pointer) if self._stack else []

    def update(self, dt: float) -> None:
        if self._stack:
            self._stack[-1].update(dt)

    def draw(self, surface: pygame.Surface, app) -> None:
        for modal in self._stack:
            modal.draw(surface, app)
