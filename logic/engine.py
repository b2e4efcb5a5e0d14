"""logic/engine.py — One packing session.

``PackingEngine`` owns the grid, the items, the placement engine, the
staging allocator and the interaction controller.  Callers hold the
engine instance; nothing lives in module globals.

Startup is two-phase: assets are loaded elsewhere (``core.assets``),
then the engine starts synchronously::

    assets = load_assets(sprite_paths, sound_paths)
    engine = start_engine(config, assets)

Order of operations at start: build grid → build items → restore the
memory snapshot (rebuilding occupancy) → stage whatever is left.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from components.item import Item
from core import tuning
from core.config import PuzzleConfig
from core.dev_log import PuzzleLog
from core.events import EventBus, PuzzleCompleted, PuzzleReset
from core.scaler import CanvasScaler
from logic import persistence
from logic.grid import MaskError, create_grid
from logic.interaction import InteractionController
from logic.placement import PlacementEngine, PlacementResult
from logic.staging import StagingLayoutAllocator, staging_regions

if TYPE_CHECKING:
    from core.assets import AssetHandles


@dataclass
class PuzzleResult:
    """What the player handed in."""
    placed_ids: set[str] = field(default_factory=set)
    memory: dict = field(default_factory=dict)
    packed_items: dict[str, bool] = field(default_factory=dict)
    total_packed: int = 0
    total_available: int = 0
    missing_required: list[str] = field(default_factory=list)
    success: bool = True
    score: int = 0
    timestamp: str = ""


class PackingEngine:
    def __init__(self, config: PuzzleConfig, assets: AssetHandles | None = None,
                 scaler: CanvasScaler | None = None,
                 bus: EventBus | None = None, log: PuzzleLog | None = None):
        self.config = config
        self.assets = assets
        self.bus = bus or EventBus()
        self.log = log or PuzzleLog()
        self.scaler = scaler or CanvasScaler(config.logical_width, config.logical_height)

        try:
            self.grid = create_grid(config.width, config.height, config.mask)
        except MaskError as exc:
            print(f"[ENGINE] {exc} — using an all-open mask")
            self.grid = create_grid(config.width, config.height)

        self.items: list[Item] = [Item.from_def(d) for d in config.items]
        self._by_id = {item.id: item for item in self.items}

        origin_x = (config.logical_width - config.pixel_width) // 2 + config.grid_offset_x
        origin_y = (config.logical_height - config.pixel_height) // 2 + config.grid_offset_y
        self.placement = PlacementEngine(
            self.grid, config.cell_size, origin_x, origin_y,
            config.logical_width, config.logical_height,
            bus=self.bus, log=self.log,
        )
        self.allocator = StagingLayoutAllocator(
            config.cell_size,
            spacing=tuning.get("staging", "spacing", 10),
            scan_step=tuning.get("staging", "scan_step", 20),
            bus=self.bus, log=self.log,
        )
        self.controller = InteractionController(
            self.items, self.placement, self.scaler, bus=self.bus, log=self.log)

        self._remembered = persistence.restore(self.items, config.memory,
                                               self.grid, self.log)
        for item in self.items:
            if item.is_placed:
                item.pixel_x, item.pixel_y = self.placement.grid_to_pixel(
                    item.grid_x, item.grid_y)
        self.layout_staging()

        print(f"[ENGINE] {config.name}: {config.width}x{config.height} grid, "
              f"{len(self.items)} items, {len(self.placed_ids)} restored in place")

    # ── queries ──────────────────────────────────────────────────────

    def item(self, item_id: str) -> Item | None:
        return self._by_id.get(item_id)

    @property
    def placed_items(self) -> list[Item]:
        return [it for it in self.items if it.is_placed]

    @property
    def unplaced_items(self) -> list[Item]:
        return [it for it in self.items if not it.is_placed]

    @property
    def placed_ids(self) -> set[str]:
        return {it.id for it in self.items if it.is_placed}

    @property
    def can_finish(self) -> bool:
        return any(it.is_placed for it in self.items)

    def counts(self) -> tuple[int, int]:
        """``(placed, total)`` for the HUD counter."""
        return len(self.placed_ids), len(self.items)

    def staging_regions(self):
        return staging_regions(self.placement.container_rect(),
                               self.config.logical_width, self.config.logical_height,
                               self.config.staging_padding)

    # ── layout ───────────────────────────────────────────────────────

    def layout_staging(self) -> dict[str, str]:
        """Arrange unplaced items that nobody has positioned yet.

        Skipped: items restored from memory, items the player moved by
        hand, and the item currently being dragged.  The skipped ones
        that sit still are obstacles the new layout packs around.
        """
        skip = self._remembered | self.controller.touched
        dragged = self.controller.dragged
        todo, fixed = [], []
        for it in self.items:
            if it.is_placed or it is dragged:
                continue
            (fixed if it.id in skip else todo).append(it)
        if not todo:
            return {}
        left, right = self.staging_regions()
        cell = self.config.cell_size
        return self.allocator.layout(todo, left, right,
                                     obstacles=[it.rect(cell) for it in fixed])

    def on_display_resized(self, width: int, height: int) -> None:
        """Apply a (debounced) window size change."""
        self.scaler.resize(width, height)
        self.layout_staging()

    # ── actions ──────────────────────────────────────────────────────

    def place_item(self, item_id: str, grid_x: int, grid_y: int) -> PlacementResult:
        """Place an item directly (scripts, tests, hints)."""
        item = self._by_id[item_id]
        res = self.placement.place(item, grid_x, grid_y)
        if res:
            self.controller.touched.add(item_id)
        return res

    def rotate_item(self, item_id: str) -> PlacementResult:
        return self.placement.rotate_in_place(self._by_id[item_id])

    def snapshot(self) -> dict:
        return persistence.snapshot(self.items)

    def finish(self, force: bool = False) -> PuzzleResult | None:
        """Hand in the current packing.

        Needs at least one placed item unless *force*.  Builds the
        memory snapshot, calls ``config.on_complete(placed_ids, memory)``
        and emits ``PuzzleCompleted``.
        """
        if not force and not self.can_finish:
            self.log.record("", "finish", "nothing placed yet")
            return None
        placed = self.placed_ids
        memory = self.snapshot()
        missing = [rid for rid in self.config.required_items if rid not in placed]
        success = not missing
        result = PuzzleResult(
            placed_ids=set(placed),
            memory=memory,
            packed_items={pid: True for pid in sorted(placed)},
            total_packed=len(placed),
            total_available=len(self.items),
            missing_required=missing,
            success=success,
            score=len(placed) * 10 if success else 0,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        print(f"[ENGINE] {self.config.name}: finished with "
              f"{result.total_packed}/{result.total_available} packed"
              + (f", missing {', '.join(missing)}" if missing else ""))
        if self.config.on_complete is not None:
            self.config.on_complete(set(placed), memory)
        self.bus.emit(PuzzleCompleted(set(placed), memory))
        return result

    def reset(self) -> None:
        """Empty the container, un-rotate everything and restage it all."""
        self.controller.reset()
        self.placement.clear(self.items)
        for item in self.items:
            item.set_rotation(0)
        self._remembered = set()
        self.layout_staging()
        self.bus.emit(PuzzleReset())
        self.log.record("", "reset", "puzzle reset")


def start_engine(config: PuzzleConfig, assets: AssetHandles | None = None,
                 **kwargs) -> PackingEngine:
    """Synchronous second phase of startup (assets already loaded)."""
    return PackingEngine(config, assets, **kwargs)
