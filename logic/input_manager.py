"""logic/input_manager.py — Intent-based input layer.

Sits between raw pygame events and puzzle actions.  The scene feeds in
raw events; the manager maps them to *intents* based on the current
**input context** (puzzle or ui), and turns mouse and touch events
into a single stream of pointer events.

Other systems read the intents — they never touch raw keycodes.

Usage (in packing_scene):

    self.input = InputManager()
    # each frame:
    self.input.begin_frame()
    for event in events:
        self.input.feed(event, display_size)

    if self.input.just("rotate"):   # discrete press
        ...
    for kind, (sx, sy) in self.input.pointer_events:
        ...                         # "down" / "move" / "up", screen px
"""

from __future__ import annotations
from enum import Enum, auto
import pygame


# ── Input contexts ──────────────────────────────────────────────────

class InputContext(Enum):
    """Determines which key-bindings are active."""
    PUZZLE = auto()     # dragging and packing
    UI     = auto()     # results / confirm modal open


# ── Intent names (strings for flexibility, not an enum) ─────────────
# Puzzle:  rotate  finish  reset  reload_tuning  toggle_log  quit
# UI:      ui_up  ui_down  ui_confirm  ui_close


# ── Default key bindings ────────────────────────────────────────────

# Each binding is  (pygame key constant, modifier mask or 0)
# For mouse buttons we use negative constants: -1 = LMB, -3 = RMB

_PUZZLE_BINDS: dict[str, list[tuple[int, int]]] = {
    "rotate":        [(pygame.K_r, 0), (-3, 0)],     # R or RMB
    "finish":        [(pygame.K_RETURN, 0), (pygame.K_KP_ENTER, 0)],
    "reset":         [(pygame.K_BACKSPACE, 0)],
    "reload_tuning": [(pygame.K_F5, 0)],
    "toggle_log":    [(pygame.K_TAB, 0)],
    "quit":          [(pygame.K_ESCAPE, 0)],
}

_UI_BINDS: dict[str, list[tuple[int, int]]] = {
    "ui_up":         [(pygame.K_w, 0), (pygame.K_UP, 0)],
    "ui_down":       [(pygame.K_s, 0), (pygame.K_DOWN, 0)],
    "ui_confirm":    [(pygame.K_RETURN, 0), (pygame.K_SPACE, 0)],
    "ui_close":      [(pygame.K_ESCAPE, 0)],
    "reload_tuning": [(pygame.K_F5, 0)],
}


# ── InputManager ────────────────────────────────────────────────────

class InputManager:
    """Context-aware input mapper.

    Call ``begin_frame()`` before processing events and
    ``feed(event, display_size)`` for each pygame event.

    Then use ``just(intent)`` for discrete presses and read
    ``pointer_events`` for drag input.  Touch and mouse both end up
    there, always in screen pixels.
    """

    def __init__(self):
        self.context: InputContext = InputContext.PUZZLE
        # Intents pressed *this frame* (rising edge)
        self._pressed: set[str] = set()
        # ("down" | "move" | "up", (sx, sy)) in arrival order
        self.pointer_events: list[tuple[str, tuple[float, float]]] = []
        self._pointer_held = False
        self._finger: int | None = None     # the one finger we follow

    # ── frame lifecycle ─────────────────────────────────────────

    def begin_frame(self):
        """Call at the start of each frame before feeding events."""
        self._pressed.clear()
        self.pointer_events.clear()

    def feed(self, event: pygame.event.Event,
             display_size: tuple[int, int] | None = None):
        """Feed a raw pygame event.  Maps it to intents based on context."""
        # SDL mirrors touches as mouse events; the FINGER* events win.
        if (event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP,
                           pygame.MOUSEMOTION)
                and getattr(event, "touch", False)):
            return

        # KEYDOWN → discrete intent
        if event.type == pygame.KEYDOWN:
            mods = getattr(event, "mod", 0)
            for intent, key_list in self._active_binds().items():
                for key, req_mod in key_list:
                    if key < 0:
                        continue  # mouse binding — handled in MOUSEBUTTONDOWN
                    if event.key == key and (req_mod == 0 or (mods & req_mod)):
                        self._pressed.add(intent)
                        break

        # MOUSEBUTTONDOWN → pointer for LMB, intent for the rest
        elif event.type == pygame.MOUSEBUTTONDOWN:
            if event.button == 1:
                self._pointer("down", event.pos)
            neg_button = -event.button  # -1 for LMB, -3 for RMB
            for intent, key_list in self._active_binds().items():
                for key, _mod in key_list:
                    if key == neg_button:
                        self._pressed.add(intent)
                        break

        elif event.type == pygame.MOUSEBUTTONUP:
            if event.button == 1:
                self._pointer("up", event.pos)

        elif event.type == pygame.MOUSEMOTION:
            self._pointer("move", event.pos)

        elif event.type in (pygame.FINGERDOWN, pygame.FINGERMOTION, pygame.FINGERUP):
            self._feed_finger(event, display_size)

        elif event.type == pygame.WINDOWLEAVE:
            # Pointer left the window mid-drag: treat it as a release
            # where it was last seen.
            if self._pointer_held and self.pointer_events:
                self._pointer("up", self.pointer_events[-1][1])
            elif self._pointer_held:
                self._pointer("up", pygame.mouse.get_pos())

    # ── queries ─────────────────────────────────────────────────

    def just(self, intent: str) -> bool:
        """True if the intent was triggered this frame (rising edge)."""
        return intent in self._pressed

    # ── internal ────────────────────────────────────────────────

    def _pointer(self, kind: str, pos) -> None:
        if kind == "down":
            self._pointer_held = True
        elif kind == "up":
            if not self._pointer_held:
                return
            self._pointer_held = False
        self.pointer_events.append((kind, (float(pos[0]), float(pos[1]))))

    def _feed_finger(self, event: pygame.event.Event,
                     display_size: tuple[int, int] | None) -> None:
        # Finger coordinates are normalised 0..1 over the window.
        if display_size is None:
            surf = pygame.display.get_surface()
            display_size = surf.get_size() if surf is not None else (1, 1)
        pos = (event.x * display_size[0], event.y * display_size[1])
        finger = getattr(event, "finger_id", 0)

        if event.type == pygame.FINGERDOWN:
            if self._finger is not None:
                return              # second finger: ignored
            self._finger = finger
            self._pointer("down", pos)
        elif finger != self._finger:
            return
        elif event.type == pygame.FINGERMOTION:
            self._pointer("move", pos)
        else:
            self._finger = None
            self._pointer("up", pos)

    def _active_binds(self) -> dict[str, list[tuple[int, int]]]:
        if self.context == InputContext.PUZZLE:
            return _PUZZLE_BINDS
        elif self.context == InputContext.UI:
            return _UI_BINDS
        return {}
