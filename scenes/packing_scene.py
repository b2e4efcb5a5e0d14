"""
scenes/packing_scene.py — The backpack packing screen

Shows the container in the middle of the logical canvas and the
unpacked items staged on both sides of it.  Drag items in with the
mouse or a finger; R or the right button rotates; Enter hands the
backpack in.

The scene owns no puzzle state.  It feeds input into the engine's
interaction controller, drains the engine's event bus once per frame,
and draws.
"""

from __future__ import annotations
from typing import Callable

import pygame
from core import tuning
from core.app import App
from core.scene import Scene
from logic.audio_cues import AudioCues
from logic.engine import PackingEngine
from logic.input_manager import InputContext, InputManager
from scenes.packing_draw import (
    draw_background, draw_container, draw_ghost, draw_hover, draw_hud,
    draw_item_tooltip, draw_items, draw_log_overlay,
)
from ui import CloseModal, ModalStack, QuitPuzzle, ResetPuzzle, ResultsModal, Toast

_REASON_TEXT = {
    "out_of_bounds": "That doesn't fit there",
    "blocked": "That spot is blocked",
    "collision": "Something is in the way",
}


class PackingScene(Scene):
    def __init__(self, engine: PackingEngine,
                 on_save: Callable[[PackingEngine], None] | None = None):
        self.engine = engine
        self.on_save = on_save
        self.modals = ModalStack()
        self.input = InputManager()
        self.toast = Toast()
        self.audio: AudioCues | None = None
        self.show_log = False
        self.result = None

    def on_enter(self, app: App):
        bus = self.engine.bus
        if self.audio is None:
            sounds = self.engine.assets.sounds if self.engine.assets else {}
            self.audio = AudioCues(bus, sounds)
        for name, handler in self._toast_handlers():
            bus.subscribe(name, handler)
        # The app and the engine must agree on the letterbox.
        self.engine.on_display_resized(*app.screen.get_size())

    def on_exit(self, app: App):
        for name, handler in self._toast_handlers():
            self.engine.bus.unsubscribe(name, handler)

    # ── bus handlers ─────────────────────────────────────────────────

    def _toast_handlers(self):
        return (("PlacementRejected", self._on_rejected),
                ("RotationBlocked", self._on_rotation_blocked),
                ("StagingLayoutFailed", self._on_staging_failed))

    def _on_rejected(self, ev):
        self.toast.show(_REASON_TEXT.get(ev.reason, "Can't put that there"))

    def _on_rotation_blocked(self, ev):
        self.toast.show("No room to turn it")

    def _on_staging_failed(self, ev):
        self.toast.show("The table is full", color=(240, 200, 90))

    # ── event handler ────────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event, app: App):
        self.input.context = InputContext.UI if self.modals.is_open else InputContext.PUZZLE

        if self.modals.is_open and event.type in (
                pygame.KEYDOWN, pygame.MOUSEBUTTONDOWN, pygame.MOUSEMOTION):
            pointer = None
            if hasattr(event, "pos"):
                pointer = app.scaler.to_logical(*event.pos)
            self._route_ui_commands(self.modals.handle_event(event, pointer), app)
            return

        self.input.feed(event, app.screen.get_size())

    def on_resize(self, width: int, height: int, app: App):
        self.engine.on_display_resized(width, height)

    def _route_ui_commands(self, cmds, app: App):
        for cmd in cmds:
            if isinstance(cmd, CloseModal):
                self.modals.pop()
            elif isinstance(cmd, ResetPuzzle):
                self.modals.clear()
                self._reset()
            elif isinstance(cmd, QuitPuzzle):
                self._quit(app, save=cmd.save)

    # ── update ───────────────────────────────────────────────────────

    def update(self, dt: float, app: App):
        ctrl = self.engine.controller

        if not self.modals.is_open:
            for kind, (sx, sy) in self.input.pointer_events:
                if kind == "down":
                    ctrl.pointer_down(sx, sy)
                elif kind == "move":
                    ctrl.pointer_move(sx, sy)
                else:
                    ctrl.pointer_up(sx, sy)
            self._process_intents(app)
        elif self.input.just("reload_tuning"):
            self._reload_tuning()

        self.input.begin_frame()
        self.engine.bus.drain()
        self.modals.update(dt)
        self.toast.update(dt)

    def _process_intents(self, app: App):
        inp = self.input
        if inp.just("rotate"):
            self.engine.controller.rotate()
        if inp.just("reset"):
            self._reset()
        if inp.just("reload_tuning"):
            self._reload_tuning()
        if inp.just("toggle_log"):
            self.show_log = not self.show_log
        if inp.just("finish"):
            self._finish()
        if inp.just("quit"):
            self._quit(app)

    # ── actions ──────────────────────────────────────────────────────

    def _finish(self):
        if self.engine.controller.is_dragging:
            return
        result = self.engine.finish()
        if result is None:
            self.toast.show("Pack at least one item first", color=(240, 200, 90))
            return
        self.result = result
        self.modals.push(ResultsModal(result, self.engine.items))

    def _reset(self):
        self.engine.reset()
        self.result = None
        self.toast.show("Unpacked everything", color=(200, 200, 255))

    def _reload_tuning(self):
        tuning.reload()
        self.engine.allocator.spacing = tuning.get("staging", "spacing", 10)
        self.engine.allocator.scan_step = tuning.get("staging", "scan_step", 20)
        if self.audio is not None:
            self.audio.volume = tuning.get("audio", "volume", 0.7)
        self.toast.show("Tuning reloaded", color=(200, 200, 255))

    def _quit(self, app: App, save: bool = True):
        if save and self.on_save is not None:
            self.on_save(self.engine)
        app.pop_scene()

    # ── draw ─────────────────────────────────────────────────────────

    def draw(self, surface: pygame.Surface, app: App):
        draw_background(surface, self.engine)
        draw_container(surface, self.engine)
        draw_ghost(surface, self.engine)
        draw_items(surface, app, self.engine)
        draw_hover(surface, self.engine)
        draw_hud(surface, app, self.engine)
        draw_item_tooltip(surface, app, self.engine)
        self.toast.draw(surface, app)

        if self.show_log:
            draw_log_overlay(surface, app, self.engine)

        if self.modals.is_open:
            self.modals.draw(surface, app)
