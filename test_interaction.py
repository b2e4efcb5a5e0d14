"""test_interaction.py — Pointer drag/drop, hover, scaling and input mapping.

Drives the interaction controller of a real PackingEngine with screen
coordinates, the way the packing scene does.  pygame is only used to
build event objects for the input manager; no display is opened.

Run:  python test_interaction.py
"""
from __future__ import annotations
import sys, traceback

import pygame

from core.config import ItemDef, PuzzleConfig
from core.scaler import CanvasScaler, ResizeDebouncer
from logic.engine import start_engine
from logic.input_manager import InputContext, InputManager
from logic.interaction import DragState


# ── Test harness ─────────────────────────────────────────────────────

_passed = 0
_failed = 0

def ok(label: str):
    global _passed
    _passed += 1
    print(f"  [PASS] {label}")


CELL = 50
# 5×6 grid on the 960×700 canvas → cell (0, 0) at (355, 200)
GRID_X, GRID_Y = 355, 200


def _engine(*item_defs):
    defs = list(item_defs) or [ItemDef("dice", "Dice"), ItemDef("cups", "Cups", 1, 3)]
    return start_engine(PuzzleConfig(name="test", width=5, height=6, items=defs))


def _cell_center(gx, gy):
    return GRID_X + gx * CELL + CELL / 2, GRID_Y + gy * CELL + CELL / 2


def _grab_point(item):
    return item.pixel_x + CELL / 2, item.pixel_y + CELL / 2


def _drag(engine, item, to):
    ctrl = engine.controller
    assert ctrl.pointer_down(*_grab_point(item))
    ctrl.pointer_move(*to)
    return ctrl.pointer_up(*to)


# ═══════════════════════════════════════════════════════════════════════
#  SCALER / DEBOUNCE
# ═══════════════════════════════════════════════════════════════════════

def test_scaler():
    print("\n=== Scaler: screen ↔ logical ===")
    s = CanvasScaler(960, 700, 480, 350)
    assert s.scale == 0.5
    assert s.to_logical(240, 175) == (480.0, 350.0)
    ok("Half-size window halves the scale")

    s.resize(1920, 1400)
    assert s.scale == 1.0
    assert (s.offset_x, s.offset_y) == (480.0, 350.0)
    assert s.to_logical(480, 350) == (0.0, 0.0)
    ok("Never scaled above 1:1; extra space letterboxed around the canvas")

    s.resize(960, 350)
    assert s.scale == 0.5 and s.offset_x == 240.0 and s.offset_y == 0.0
    assert s.scaled_size() == (480, 350)
    ok("Aspect mismatch → limited by the short side, centred")

    lx, ly = s.to_logical(*s.to_screen(123.0, 456.0))
    assert abs(lx - 123.0) < 1e-9 and abs(ly - 456.0) < 1e-9
    ok("to_screen and to_logical are inverses")


def test_debouncer():
    print("\n=== Resize debounce ===")
    d = ResizeDebouncer(150)
    d.request((800, 600), 0)
    d.request((700, 500), 100)
    assert d.poll(200) is None
    ok("Second request restarts the timer")
    assert d.poll(250) == (700, 500)
    assert d.poll(400) is None and not d.pending
    ok("Latest size delivered once after the quiet period")

    d.request((640, 480), 500)
    d.cancel()
    assert d.poll(10_000) is None
    ok("cancel drops the pending size")


# ═══════════════════════════════════════════════════════════════════════
#  DRAG & DROP
# ═══════════════════════════════════════════════════════════════════════

def test_drag_onto_grid():
    print("\n=== Drag: onto the grid ===")
    engine = _engine()
    dice = engine.item("dice")
    out = _drag(engine, dice, _cell_center(2, 3))
    assert out.placed and not out.rejected
    assert dice.is_placed and (dice.grid_x, dice.grid_y) == (2, 3)
    assert engine.grid.owner(2, 3) == "dice"
    ok("Dice snapped into cell (2, 3)")
    assert (dice.pixel_x, dice.pixel_y) == (GRID_X + 2 * CELL, GRID_Y + 3 * CELL)
    ok("Pixel position aligned to the cell")
    assert engine.controller.state is not DragState.DRAGGING
    ok("Controller left DRAGGING")


def test_snap_rounds_to_nearest():
    print("\n=== Drag: snapping ===")
    engine = _engine()
    dice = engine.item("dice")
    # Drop with the item's top-left 20px right of cell (1, 1): rounds down
    x, y = _cell_center(1, 1)
    _drag(engine, dice, (x + 20, y))
    assert (dice.grid_x, dice.grid_y) == (1, 1)
    ok("20px past a cell edge snaps back")

    engine.reset()
    dice = engine.item("dice")
    _drag(engine, dice, (x + 30, y))
    assert (dice.grid_x, dice.grid_y) == (2, 1)
    ok("30px past a cell edge snaps forward")

    engine.reset()
    cups = engine.item("cups")
    # Over the bottom edge: clamped so the 1x3 stays inside
    _drag(engine, cups, (GRID_X + 10, GRID_Y + 6 * CELL - 5))
    assert cups.is_placed and cups.grid_y == 6 - 3
    ok("Overhanging drop clamped inside the grid")


def test_rejected_drop_reverts():
    print("\n=== Drag: rejected drop ===")
    engine = _engine()
    rejected = []
    engine.bus.subscribe("PlacementRejected", lambda ev: rejected.append(ev.reason))
    assert engine.place_item("cups", 2, 2)
    dice = engine.item("dice")
    start = (dice.pixel_x, dice.pixel_y)

    out = _drag(engine, dice, _cell_center(2, 3))
    assert out.rejected and out.reason == "collision"
    assert not dice.is_placed
    assert (dice.pixel_x, dice.pixel_y) == start
    ok("Collision → back to the drag-start position, unplaced")

    engine.bus.drain()
    assert rejected == ["collision"]
    ok("PlacementRejected emitted")
    assert engine.log.for_cat("reject")
    ok("Rejection logged")


def test_drop_outside_container():
    print("\n=== Drag: dropped outside the container ===")
    engine = _engine()
    dice = engine.item("dice")
    out = _drag(engine, dice, (60, 60))
    assert not out.placed and not out.rejected
    assert not dice.is_placed
    assert (dice.pixel_x, dice.pixel_y) == (35, 35)
    ok("Item stays unplaced at the drop point, not the drag start")
    assert not engine.grid.cells_of("dice")
    ok("Grid untouched")


def test_pickup_placed_item():
    print("\n=== Drag: picking up a placed item ===")
    engine = _engine()
    engine.place_item("dice", 0, 0)
    ctrl = engine.controller
    assert ctrl.pointer_down(*_cell_center(0, 0))
    assert ctrl.dragged is engine.item("dice")
    assert not engine.grid.cells_of("dice")
    assert not engine.item("dice").is_placed
    ok("Pickup retracts the item from the grid first")

    ctrl.pointer_move(*_cell_center(4, 0))
    assert engine.grid.owner(4, 0) is None and not engine.grid.cells_of("dice")
    ok("Grid untouched while dragging")

    ctrl.pointer_up(*_cell_center(4, 0))
    assert engine.grid.cells_of("dice") == {(4, 0)}
    ok("Dropped in its new cell")


def test_rejected_pickup_goes_home():
    print("\n=== Drag: rejected move returns to its old cell ===")
    engine = _engine()
    engine.place_item("dice", 0, 0)
    engine.place_item("cups", 4, 3)
    engine.bus.drain()
    placed = []
    engine.bus.subscribe("ItemPlaced", lambda ev: placed.append(ev.item_id))
    place_logs = len(engine.log.for_cat("place"))

    dice = engine.item("dice")
    out = _drag(engine, dice, _cell_center(4, 4))
    assert out.rejected
    assert dice.is_placed and (dice.grid_x, dice.grid_y) == (0, 0)
    assert engine.grid.cells_of("dice") == {(0, 0)}
    assert (dice.pixel_x, dice.pixel_y) == (GRID_X, GRID_Y)
    ok("Dice back in cell (0, 0)")

    engine.bus.drain()
    assert placed == []
    assert len(engine.log.for_cat("place")) == place_logs
    ok("Going home is not a new placement (no ItemPlaced, no place log)")


def test_single_drag():
    print("\n=== Drag: one at a time ===")
    engine = _engine()
    ctrl = engine.controller
    dice, cups = engine.item("dice"), engine.item("cups")
    assert ctrl.pointer_down(*_grab_point(dice))
    assert not ctrl.pointer_down(*_grab_point(cups))
    assert ctrl.dragged is dice
    ok("Second pointer-down ignored while dragging")
    assert ctrl.pointer_up(0, 0) is not None
    assert ctrl.pointer_up(0, 0) is None
    ok("pointer_up without a drag does nothing")


def test_scaled_pointer():
    print("\n=== Drag: pointer in a half-size window ===")
    engine = _engine()
    engine.on_display_resized(480, 350)
    dice = engine.item("dice")
    gx, gy = _grab_point(dice)
    ctrl = engine.controller
    assert ctrl.pointer_down(gx / 2, gy / 2)
    cx, cy = _cell_center(1, 2)
    ctrl.pointer_up(cx / 2, cy / 2)
    assert (dice.grid_x, dice.grid_y) == (1, 2)
    ok("Screen coords halved, placement identical")


# ═══════════════════════════════════════════════════════════════════════
#  HOVER / PREVIEW / ROTATE
# ═══════════════════════════════════════════════════════════════════════

def test_hover():
    print("\n=== Hover ===")
    engine = _engine()
    ctrl = engine.controller
    dice = engine.item("dice")
    ctrl.pointer_move(*_grab_point(dice))
    assert ctrl.state is DragState.HOVERING and ctrl.hovered is dice
    ok("Pointer over dice → HOVERING")
    ctrl.pointer_move(GRID_X + 1, GRID_Y + 1)
    assert ctrl.state is DragState.IDLE and ctrl.hovered is None
    ok("Pointer over an empty cell → IDLE")


def test_topmost_hit():
    print("\n=== Hover: topmost item wins ===")
    engine = _engine()
    dice, cups = engine.item("dice"), engine.item("cups")
    dice.pixel_x, dice.pixel_y = 40, 40
    cups.pixel_x, cups.pixel_y = 40, 40
    assert engine.controller.item_at(50, 50) is cups
    ok("Later item in draw order is hit first")


def test_preview():
    print("\n=== Preview ghost ===")
    engine = _engine()
    engine.place_item("cups", 3, 0)
    ctrl = engine.controller
    dice = engine.item("dice")
    ctrl.pointer_down(*_grab_point(dice))
    assert ctrl.preview() is None
    ok("No ghost while over the staging area")

    ctrl.pointer_move(*_cell_center(1, 1))
    assert ctrl.preview() == (1, 1, True)
    ok("Valid ghost over a free cell")

    ctrl.pointer_move(*_cell_center(3, 1))
    assert ctrl.preview() == (3, 1, False)
    ok("Invalid ghost over the cups")


def test_rotate_hovered_and_dragged():
    print("\n=== Rotate ===")
    engine = _engine()
    ctrl = engine.controller
    assert ctrl.rotate() is None
    ok("Nothing under the pointer → nothing rotates")

    cups = engine.item("cups")
    ctrl.pointer_move(*_grab_point(cups))
    assert ctrl.rotate()
    assert (cups.width, cups.height, cups.rotation) == (3, 1, 90)
    ok("Hovered staged item rotates")

    ctrl.pointer_down(*_grab_point(cups))
    assert ctrl.rotate()
    assert (cups.width, cups.height) == (1, 3)
    lx, ly = ctrl.pointer
    assert cups.contains(lx, ly, CELL)
    ok("Dragged item rotates and stays under the pointer")


# ═══════════════════════════════════════════════════════════════════════
#  INPUT MANAGER
# ═══════════════════════════════════════════════════════════════════════

def _key(key, mod=0):
    return pygame.event.Event(pygame.KEYDOWN, key=key, mod=mod)


def test_input_intents():
    print("\n=== Input: key intents ===")
    im = InputManager()
    im.begin_frame()
    im.feed(_key(pygame.K_r))
    im.feed(_key(pygame.K_RETURN))
    im.feed(_key(pygame.K_BACKSPACE))
    im.feed(_key(pygame.K_F5))
    assert all(im.just(i) for i in ("rotate", "finish", "reset", "reload_tuning"))
    ok("R / Enter / Backspace / F5 map to puzzle intents")

    im.begin_frame()
    im.feed(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=(10, 10)))
    assert im.just("rotate") and not im.pointer_events
    ok("Right button rotates and is not a pointer press")

    im.begin_frame()
    im.context = InputContext.UI
    im.feed(_key(pygame.K_r))
    im.feed(_key(pygame.K_ESCAPE))
    assert im.just("ui_close") and not im.just("rotate")
    ok("UI context: R does nothing, Esc closes")


def test_input_pointer_events():
    print("\n=== Input: mouse pointer ===")
    im = InputManager()
    im.begin_frame()
    im.feed(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(10, 20)))
    im.feed(pygame.event.Event(pygame.MOUSEMOTION, pos=(15, 25), rel=(5, 5), buttons=(1, 0, 0)))
    im.feed(pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(30, 40)))
    assert im.pointer_events == [("down", (10.0, 20.0)), ("move", (15.0, 25.0)),
                                 ("up", (30.0, 40.0))]
    ok("LMB down / motion / up become pointer events in order")

    im.begin_frame()
    im.feed(pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(1, 1)))
    assert im.pointer_events == []
    ok("Stray release without a press is dropped")

    im.begin_frame()
    im.feed(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(5, 5), touch=True))
    assert im.pointer_events == []
    ok("Touch-synthesised mouse events are ignored")


def test_input_touch():
    print("\n=== Input: touch ===")
    im = InputManager()
    im.begin_frame()
    im.feed(pygame.event.Event(pygame.FINGERDOWN, x=0.5, y=0.5, finger_id=7,
                               touch_id=0, dx=0, dy=0), (960, 700))
    im.feed(pygame.event.Event(pygame.FINGERDOWN, x=0.1, y=0.1, finger_id=8,
                               touch_id=0, dx=0, dy=0), (960, 700))
    im.feed(pygame.event.Event(pygame.FINGERMOTION, x=0.25, y=0.5, finger_id=7,
                               touch_id=0, dx=0, dy=0), (960, 700))
    im.feed(pygame.event.Event(pygame.FINGERUP, x=0.25, y=0.5, finger_id=7,
                               touch_id=0, dx=0, dy=0), (960, 700))
    assert im.pointer_events == [("down", (480.0, 350.0)), ("move", (240.0, 350.0)),
                                 ("up", (240.0, 350.0))]
    ok("Normalised finger coords scaled to the window; second finger ignored")


def test_input_window_leave():
    print("\n=== Input: pointer leaves the window ===")
    im = InputManager()
    im.begin_frame()
    im.feed(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(10, 20)))
    im.feed(pygame.event.Event(pygame.WINDOWLEAVE))
    assert im.pointer_events[-1] == ("up", (10.0, 20.0))
    n = len(im.pointer_events)
    im.feed(pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(50, 50)))
    assert len(im.pointer_events) == n
    ok("Leaving mid-drag releases at the last position")


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    sections = [
        ("Scaler", test_scaler),
        ("Debouncer", test_debouncer),
        ("Drag onto grid", test_drag_onto_grid),
        ("Snap", test_snap_rounds_to_nearest),
        ("Rejected drop", test_rejected_drop_reverts),
        ("Drop outside", test_drop_outside_container),
        ("Pickup placed", test_pickup_placed_item),
        ("Rejected pickup", test_rejected_pickup_goes_home),
        ("Single drag", test_single_drag),
        ("Scaled pointer", test_scaled_pointer),
        ("Hover", test_hover),
        ("Topmost hit", test_topmost_hit),
        ("Preview", test_preview),
        ("Rotate", test_rotate_hovered_and_dragged),
        ("Input intents", test_input_intents),
        ("Input pointer", test_input_pointer_events),
        ("Input touch", test_input_touch),
        ("Input window leave", test_input_window_leave),
    ]

    for name, fn in sections:
        try:
            fn()
        except Exception:
            _failed += 1
            print(f"\n  [CRASH] {name} — unhandled exception:")
            traceback.print_exc()

    print(f"\n{'=' * 60}")
    print(f"  Interaction Tests: {_passed} passed, {_failed} failed")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
