"""
core/scene.py — Scene interface

The app keeps a stack of scenes and only talks to the top one.  All
hooks receive the app; the packing scene is the only real screen, but
anything pushed over it (a title card, a level picker) follows the
same contract:

    handle_event  raw pygame events, pointer positions in screen px
    on_resize     the window settled at a new size (already debounced)
    update        once per frame, dt in seconds
    draw          onto the fixed-size logical surface; the app scales it
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pygame
    from core.app import App


class Scene:
    def on_enter(self, app: App):
        """Became the top scene (pushed, or the one above was popped)."""

    def on_exit(self, app: App):
        """Popped, or covered by another scene."""

    def handle_event(self, event: pygame.event.Event, app: App):
        pass

    def on_resize(self, width: int, height: int, app: App):
        pass

    def update(self, dt: float, app: App):
        pass

    def draw(self, surface: pygame.Surface, app: App):
        pass
