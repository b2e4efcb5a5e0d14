"""logic/interaction.py — Pointer-driven drag / hover / rotate / drop.

States
------
IDLE        nothing under the pointer
HOVERING    pointer over an item (UI feedback only)
DRAGGING    one item follows the pointer; at most one at a time

Transitions
-----------
down  (idle/hover) over item → DRAGGING.  A placed item is retracted
                               first so the grid never holds a dragged
                               item.
move  while DRAGGING         → item.pixel = pointer − drag offset.  The
                               grid is not touched mid-drag.
move  otherwise              → recompute the hovered item.
up    while DRAGGING         → outside the container: stays where it
                               was dropped, unplaced.  Over it: snap,
                               validate, place or revert.  → IDLE/HOVER.

All pointer coordinates are *screen* pixels; the scaler turns them into
logical px before any hit-test.  The controller only needs a small
slice of the placement engine (see ``PlacementPort``), never the whole
engine object.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

from core.events import EventBus, ItemDropped, ItemPickedUp, PlacementRejected
from core.scaler import CanvasScaler


class DragState(Enum):
    IDLE = auto()
    HOVERING = auto()
    DRAGGING = auto()


class PlacementPort(Protocol):
    """The engine operations the controller relies on."""
    cell_size: int

    def check(self, item, origin_x: int, origin_y: int, shape=None): ...
    def place(self, item, origin_x: int, origin_y: int): ...
    def retract(self, item): ...
    def rotate_in_place(self, item): ...
    def snap(self, item) -> tuple[int, int]: ...
    def overlaps_container(self, item) -> bool: ...


@dataclass
class DropOutcome:
    """What a pointer-up did.  ``placed`` / ``rejected`` are exclusive."""
    item_id: str
    placed: bool = False
    rejected: bool = False
    reason: str = ""
    grid_x: int = -1
    grid_y: int = -1


class InteractionController:
    def __init__(self, items: list, placement: PlacementPort,
                 scaler: CanvasScaler | None = None,
                 bus: EventBus | None = None, log=None):
        self.items = items
        self.placement = placement
        self.scaler = scaler or CanvasScaler(1, 1)
        self.bus = bus or EventBus()
        self.log = log

        self.state = DragState.IDLE
        self.hovered = None
        self.dragged = None
        self.drag_offset = (0.0, 0.0)
        self.drag_start = (0.0, 0.0)          # pixel pos at pickup
        self._drag_origin_cell: tuple[int, int] | None = None
        self.pointer = (0.0, 0.0)             # last pointer, logical px
        # Items the player has moved by hand (staging relayout skips them).
        self.touched: set[str] = set()

    # ── queries ──────────────────────────────────────────────────────

    @property
    def is_dragging(self) -> bool:
        return self.state is DragState.DRAGGING

    def draw_order(self) -> list:
        """Bottom → top: placed items, then staged items, dragged last."""
        placed = [it for it in self.items if it.is_placed and it is not self.dragged]
        staged = [it for it in self.items if not it.is_placed and it is not self.dragged]
        order = placed + staged
        if self.dragged is not None:
            order.append(self.dragged)
        return order

    def item_at(self, lx: float, ly: float):
        """Topmost item whose bounding box contains the logical point."""
        cell = self.placement.cell_size
        for item in reversed(self.draw_order()):
            if item.contains(lx, ly, cell):
                return item
        return None

    def preview(self) -> tuple[int, int, bool] | None:
        """``(grid_x, grid_y, valid)`` for the ghost while dragging over the grid."""
        item = self.dragged
        if item is None or not self.placement.overlaps_container(item):
            return None
        gx, gy = self.placement.snap(item)
        return gx, gy, self.placement.check(item, gx, gy).ok

    # ── pointer events (screen px) ───────────────────────────────────

    def pointer_down(self, sx: float, sy: float) -> bool:
        """Start a drag if an item is under the pointer.  Returns True if so."""
        lx, ly = self._to_logical(sx, sy)
        if self.state is DragState.DRAGGING:
            return False
        item = self.item_at(lx, ly)
        if item is None:
            return False

        was_placed = item.is_placed
        self._drag_origin_cell = (item.grid_x, item.grid_y) if was_placed else None
        if was_placed:
            self.placement.retract(item)

        self.dragged = item
        self.hovered = item
        self.drag_offset = (lx - item.pixel_x, ly - item.pixel_y)
        self.drag_start = (item.pixel_x, item.pixel_y)
        self.state = DragState.DRAGGING
        self.touched.add(item.id)
        self.bus.emit(ItemPickedUp(item.id, was_placed))
        self._log(item.id, "pickup", "picked up from grid" if was_placed else "picked up")
        return True

    def pointer_move(self, sx: float, sy: float) -> None:
        lx, ly = self._to_logical(sx, sy)
        if self.state is DragState.DRAGGING:
            ox, oy = self.drag_offset
            self.dragged.pixel_x = lx - ox
            self.dragged.pixel_y = ly - oy
            return
        self.hovered = self.item_at(lx, ly)
        self.state = DragState.HOVERING if self.hovered is not None else DragState.IDLE

    def pointer_up(self, sx: float, sy: float) -> DropOutcome | None:
        """Finish the drag.  Returns ``None`` if nothing was being dragged."""
        if self.state is not DragState.DRAGGING:
            return None
        self.pointer_move(sx, sy)
        item = self.dragged
        outcome = self._drop(item)

        self.dragged = None
        self._drag_origin_cell = None
        self.drag_offset = (0.0, 0.0)
        lx, ly = self.pointer
        self.hovered = self.item_at(lx, ly)
        self.state = DragState.HOVERING if self.hovered is not None else DragState.IDLE
        return outcome

    def rotate(self):
        """Rotate the dragged item, else the hovered one.  Returns the result or None."""
        item = self.dragged if self.dragged is not None else self.hovered
        if item is None:
            return None
        res = self.placement.rotate_in_place(item)
        if res and item is self.dragged:
            # Keep the pointer inside the (possibly narrower) item.
            w, h = item.pixel_size(self.placement.cell_size)
            ox, oy = self.drag_offset
            self.drag_offset = (min(ox, w - 1), min(oy, h - 1))
            lx, ly = self.pointer
            item.pixel_x, item.pixel_y = lx - self.drag_offset[0], ly - self.drag_offset[1]
        return res

    def reset(self) -> None:
        """Forget any in-flight drag/hover (used by puzzle reset)."""
        self.state = DragState.IDLE
        self.hovered = None
        self.dragged = None
        self._drag_origin_cell = None
        self.drag_offset = (0.0, 0.0)
        self.touched.clear()

    # ── internal ─────────────────────────────────────────────────────

    def _drop(self, item) -> DropOutcome:
        if not self.placement.overlaps_container(item):
            self.bus.emit(ItemDropped(item.id, False, item.pixel_x, item.pixel_y))
            self._log(item.id, "drop", "dropped in staging")
            return DropOutcome(item.id)

        gx, gy = self.placement.snap(item)
        res = self.placement.place(item, gx, gy)
        if res:
            self.bus.emit(ItemDropped(item.id, True, item.pixel_x, item.pixel_y))
            return DropOutcome(item.id, placed=True, grid_x=gx, grid_y=gy)

        # Rejected: back to where the drag started.  An item that came
        # out of the grid goes back into its old cells, which nothing
        # could have taken while it was in the air.
        item.pixel_x, item.pixel_y = self.drag_start
        if self._drag_origin_cell is not None:
            self.placement.place(item, *self._drag_origin_cell, quiet=True)
        self.bus.emit(PlacementRejected(item.id, res.reason, gx, gy))
        self.bus.emit(ItemDropped(item.id, item.is_placed, item.pixel_x, item.pixel_y))
        self._log(item.id, "reject", f"can't place at ({gx}, {gy}): {res.reason}")
        return DropOutcome(item.id, rejected=True, reason=res.reason, grid_x=gx, grid_y=gy)

    def _to_logical(self, sx: float, sy: float) -> tuple[float, float]:
        self.pointer = self.scaler.to_logical(sx, sy)
        return self.pointer

    def _log(self, item_id: str, cat: str, msg: str) -> None:
        if self.log is not None:
            self.log.record(item_id, cat, msg)
