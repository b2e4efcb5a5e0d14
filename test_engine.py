"""test_engine.py — Config loading, the packing session and its extras.

Covers config validation, the TOML loader on the shipped puzzle file,
finishing / scoring, reset, staging relayout, the random puzzle
generator and the event-driven audio cues.

Run:  python test_engine.py
"""
from __future__ import annotations
import sys, traceback
from pathlib import Path

from core.config import ConfigError, ItemDef, PuzzleConfig, parse_color, parse_size
from core.data import PuzzleLoader
from core.events import EventBus, ItemRetracted, PuzzleReset
from logic.audio_cues import AudioCues
from logic.engine import start_engine
from logic.grid import BLOCKED
from logic.puzzle_gen import FILL_RATIO, generate_random_config
from logic.shapes import coerce_shape, shape_cells, shape_size


# ── Test harness ─────────────────────────────────────────────────────

_passed = 0
_failed = 0

def ok(label: str):
    global _passed
    _passed += 1
    print(f"  [PASS] {label}")


PUZZLES = Path(__file__).resolve().parent / "data" / "puzzles.toml"


def _loader():
    loader = PuzzleLoader()
    loader.load(PUZZLES)
    return loader


def _expect(exc_type, fn, *args, **kwargs):
    try:
        fn(*args, **kwargs)
    except exc_type:
        return
    raise AssertionError(f"{exc_type.__name__} not raised")


class FakeSound:
    def __init__(self):
        self.plays = 0
        self.volume = None

    def play(self):
        self.plays += 1

    def set_volume(self, v):
        self.volume = v


# ═══════════════════════════════════════════════════════════════════════
#  CONFIG
# ═══════════════════════════════════════════════════════════════════════

def test_config_validation():
    print("\n=== Config: validation ===")
    _expect(ConfigError, PuzzleConfig, width=0, height=5)
    _expect(ConfigError, PuzzleConfig, cell_size=-1)
    ok("Non-positive sizes rejected")

    _expect(ConfigError, PuzzleConfig, items=[ItemDef("dice"), ItemDef("dice")])
    ok("Duplicate item ids rejected")

    _expect(ConfigError, ItemDef, "")
    _expect(ConfigError, ItemDef, "box", width=0)
    ok("Item without an id or with zero size rejected")

    cfg = PuzzleConfig(width=3, height=3, mask=["..."])
    assert cfg.mask is None
    ok("Mask of the wrong size falls back to all open")

    cfg = PuzzleConfig(width=2, height=2, mask=[".#", ".."],
                       items=[ItemDef("dice", required=True)], required_items=["cups"])
    assert cfg.mask == [[True, False], [True, True]]
    assert cfg.required_items == ["cups", "dice"]
    ok("Text mask parsed; per-item required flag merged")


def test_value_parsing():
    print("\n=== Config: colors and sizes ===")
    assert parse_color("hsl(120, 100%, 50%)") == (0, 255, 0)
    assert parse_color("#ff8000") == (255, 128, 0)
    assert parse_color([300, -5, 10]) == (255, 0, 10)
    assert parse_color("chartreuse", (1, 2, 3)) == (1, 2, 3)
    ok("hsl(), #rrggbb and tuples parse; junk gives the default")

    assert parse_size("4x5") == (4, 5) and parse_size(" 7 X 7 ") == (7, 7)
    _expect(ConfigError, parse_size, "4by5")
    ok("WxH size strings")


def test_loader():
    print("\n=== Loader: shipped puzzle file ===")
    loader = _loader()
    assert {"puzzle", "small", "medium", "large"} <= set(loader.names())
    assert len(loader.registry) == 26
    ok("Catalogue and puzzles loaded")

    small = loader.puzzle("small")
    assert (small.width, small.height) == (4, 5)
    assert [d.id for d in small.items] == ["bong", "cellphone", "dice", "jestervest",
                                         "cups", "baseball", "smokes"]
    assert small.required_items == ["bong"]
    assert small.mask[0][3] is False and small.mask[4][0] is False
    ok("small: 4x5, seven items, bong required, two corners blocked")

    bong = next(d for d in small.items if d.id == "bong")
    assert shape_size(coerce_shape(bong.shape)) == (2, 4)
    ok("Bong keeps its notched shape")

    everything = loader.puzzle("puzzle")
    assert len(everything.items) == 26
    ok("items = \"all\" takes the whole catalogue")

    memory = {"dice": {"isPlaced": False}}
    cfg = loader.puzzle("medium", memory=memory)
    assert cfg.memory is memory and cfg.required_items == ["trophy", "cash401"]
    ok("Extra kwargs reach the config")

    _expect(ConfigError, loader.puzzle, "nope")
    ok("Unknown puzzle name raises ConfigError")


# ═══════════════════════════════════════════════════════════════════════
#  SESSION
# ═══════════════════════════════════════════════════════════════════════

def test_start_blocks_masked_cells():
    print("\n=== Engine: start ===")
    engine = start_engine(_loader().puzzle("small"))
    assert engine.grid.occupancy[0][3] == BLOCKED
    assert engine.grid.occupancy[4][0] == BLOCKED
    assert engine.placed_ids == set() and engine.counts() == (0, 7)
    ok("Masked cells blocked, nothing placed")
    assert not engine.can_finish
    ok("Cannot finish with an empty container")


def test_finish_and_score():
    print("\n=== Engine: finish ===")
    calls = []
    cfg = _loader().puzzle("small", on_complete=lambda ids, mem: calls.append((ids, mem)))
    engine = start_engine(cfg)
    completed = []
    engine.bus.subscribe("PuzzleCompleted", lambda ev: completed.append(ev.placed_ids))

    assert engine.finish() is None and calls == []
    assert engine.log.for_cat("finish")
    ok("Finishing empty is refused and logged")

    assert engine.place_item("dice", 2, 2)
    res = engine.finish()
    assert res.total_packed == 1 and res.total_available == 7
    assert not res.success and res.missing_required == ["bong"] and res.score == 0
    ok("Missing the required bong → no score")

    assert engine.place_item("bong", 0, 0)
    assert engine.place_item("cups", 3, 1)
    res = engine.finish()
    assert res.success and res.score == 30
    assert res.placed_ids == {"dice", "bong", "cups"}
    assert res.packed_items == {"bong": True, "cups": True, "dice": True}
    assert res.memory["bong"]["isPlaced"] and not res.memory["smokes"]["isPlaced"]
    ok("Success: ten points per packed item, memory attached")

    assert len(calls) == 2 and calls[-1][0] == {"dice", "bong", "cups"}
    assert calls[-1][1] == res.memory
    ok("on_complete called with placed ids and memory")

    engine.bus.drain()
    assert completed[-1] == {"dice", "bong", "cups"}
    ok("PuzzleCompleted emitted")


def test_force_finish():
    print("\n=== Engine: forced finish ===")
    engine = start_engine(_loader().puzzle("small"))
    res = engine.finish(force=True)
    assert res is not None and res.total_packed == 0 and not res.success
    ok("force=True hands in an empty container")


def test_reset():
    print("\n=== Engine: reset ===")
    engine = start_engine(_loader().puzzle("small"))
    seen = []
    engine.bus.subscribe("PuzzleReset", lambda ev: seen.append(True))
    engine.place_item("bong", 0, 0)
    engine.rotate_item("jestervest")
    engine.reset()
    assert engine.placed_ids == set()
    assert all(it.rotation == 0 for it in engine.items)
    assert engine.item("jestervest").shape == [[1, 1, 1]]
    assert engine.grid.occupancy[0][3] == BLOCKED
    assert all(v is None for v in engine.grid.occupancy[1])
    ok("Grid emptied (mask kept), rotations undone")

    left, right = engine.staging_regions()
    cell = engine.config.cell_size
    for it in engine.items:
        x, y, w, h = it.rect(cell)
        assert any(r.x <= x and x + w <= r.right and r.y <= y and y + h <= r.bottom
                   for r in (left, right)), it.id
    ok("Every item back in a staging region")

    engine.bus.drain()
    assert seen == [True]
    ok("PuzzleReset emitted")


def test_relayout_skips_touched():
    print("\n=== Engine: staging relayout ===")
    engine = start_engine(_loader().puzzle("small"))
    dice, cups = engine.item("dice"), engine.item("cups")

    cups.pixel_x, cups.pixel_y = 5.0, 5.0
    engine.controller.touched.add("cups")
    dice.pixel_x, dice.pixel_y = 0.0, 0.0
    engine.on_display_resized(800, 600)

    assert (cups.pixel_x, cups.pixel_y) == (5.0, 5.0)
    ok("Item the player moved keeps its spot")
    left, right = engine.staging_regions()
    x, y, w, h = dice.rect(engine.config.cell_size)
    assert any(r.x <= x and x + w <= r.right and r.y <= y and y + h <= r.bottom
               for r in (left, right))
    ok("Untouched item laid out again")
    assert engine.scaler.display_w == 800
    ok("Scaler follows the new display size")


# ═══════════════════════════════════════════════════════════════════════
#  RANDOM PUZZLES
# ═══════════════════════════════════════════════════════════════════════

def test_random_puzzle():
    print("\n=== Random puzzle generator ===")
    registry = _loader().registry
    a = generate_random_config(1234, registry)
    b = generate_random_config(1234, registry)
    assert (a.width, a.height, a.mask) == (b.width, b.height, b.mask)
    assert [d.id for d in a.items] == [d.id for d in b.items]
    assert a.required_items == b.required_items and a.name == "random-1234"
    ok("Same seed → identical puzzle")

    for seed in range(20):
        cfg = generate_random_config(seed, registry)
        assert 4 <= cfg.width <= 7 and 4 <= cfg.height <= 7
        open_cells = sum(sum(r) for r in cfg.mask) if cfg.mask else cfg.width * cfg.height
        area = 0
        for d in cfg.items:
            w, h = shape_size(coerce_shape(d.shape)) if d.shape else (d.width, d.height)
            assert (w <= cfg.width and h <= cfg.height) or (h <= cfg.width and w <= cfg.height)
            area += len(shape_cells(coerce_shape(d.shape))) if d.shape else w * h
        assert area >= open_cells * FILL_RATIO, seed
        assert len(cfg.required_items) == 1
    ok("Twenty seeds: sizes in range, every item fits, enough item area")

    engine = start_engine(generate_random_config(7, registry))
    assert engine.counts()[0] == 0 and engine.counts()[1] > 0
    ok("Generated config starts an engine")


# ═══════════════════════════════════════════════════════════════════════
#  EVENT BUS
# ═══════════════════════════════════════════════════════════════════════

def test_event_bus():
    print("\n=== Event bus ===")
    bus = EventBus()
    seen = []

    def broken(ev):
        raise RuntimeError("boom")

    bus.subscribe("PuzzleReset", broken)
    bus.subscribe("PuzzleReset", lambda ev: seen.append("reset"))
    bus.emit(PuzzleReset())
    assert bus.drain() == 1 and seen == ["reset"]
    ok("A failing handler does not stop the others")

    bus.unsubscribe("PuzzleReset", broken)
    bus.subscribe("PuzzleReset", lambda ev: bus.emit(ItemRetracted("dice")))
    bus.subscribe("ItemRetracted", lambda ev: seen.append(ev.item_id))
    bus.emit(PuzzleReset())
    assert bus.drain() == 2 and seen == ["reset", "reset", "dice"]
    ok("Events emitted by handlers are delivered in the same drain")


# ═══════════════════════════════════════════════════════════════════════
#  AUDIO CUES
# ═══════════════════════════════════════════════════════════════════════

def test_audio_cues():
    print("\n=== Audio cues ===")
    engine = start_engine(PuzzleConfig(width=5, height=6, items=[
        ItemDef("dice"), ItemDef("cups", width=1, height=3)]))
    sounds = {k: FakeSound() for k in ("pickup", "place", "error", "drop", "rotate")}
    cues = AudioCues(engine.bus, sounds, volume=0.5)

    engine.place_item("cups", 2, 2)
    engine.bus.drain()
    assert cues.played == ["place"] and sounds["place"].volume == 0.5
    ok("ItemPlaced → place sound at the configured volume")

    ctrl = engine.controller
    dice = engine.item("dice")
    x, y = engine.placement.grid_to_pixel(2, 3)
    ctrl.pointer_down(dice.pixel_x + 10, dice.pixel_y + 10)
    ctrl.pointer_up(x + 10, y + 10)
    engine.bus.drain()
    assert cues.played[1:] == ["pickup", "error", "drop"]
    ok("Rejected drop → pickup, error, drop")

    cues.played.clear()
    engine.rotate_item("dice")
    engine.finish()
    engine.bus.drain()
    assert cues.played == ["rotate"]
    ok("Missing sound handles are skipped silently")

    cues.enabled = False
    assert not cues.play("place")
    ok("Disabled cues play nothing")


# ═══════════════════════════════════════════════════════════════════════
#  MAIN
# ═══════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    sections = [
        ("Config validation", test_config_validation),
        ("Value parsing", test_value_parsing),
        ("Loader", test_loader),
        ("Start", test_start_blocks_masked_cells),
        ("Finish and score", test_finish_and_score),
        ("Force finish", test_force_finish),
        ("Reset", test_reset),
        ("Relayout", test_relayout_skips_touched),
        ("Random puzzle", test_random_puzzle),
        ("Event bus", test_event_bus),
        ("Audio cues", test_audio_cues),
    ]

    for name, fn in sections:
        try:
            fn()
        except Exception:
            _failed += 1
            print(f"\n  [CRASH] {name} — unhandled exception:")
            traceback.print_exc()

    print(f"\n{'=' * 60}")
    print(f"  Engine Tests: {_passed} passed, {_failed} failed")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
