"""logic/placement.py — Validate, commit and retract item placements.

Every grid mutation in a session goes through ``PlacementEngine``:
``place``, ``retract`` and ``rotate_in_place`` all validate first and
only then touch the grid, so occupancy always equals the union of the
placed items' shapes at their origins.

Failures are ordinary return values (``PlacementResult`` with
``ok=False`` and a reason) plus an event on the bus.  Nothing in here
raises for a bad move.

Reasons
-------
``out_of_bounds``   shape's bounding box leaves the grid
``blocked``         a solid cell lands on a masked-out cell
``collision``       a solid cell lands on another item
``not_placed``      retract/rotate-in-grid on an item that isn't placed
"""

from __future__ import annotations
import math
from dataclasses import dataclass

from core.events import (
    EventBus, ItemPlaced, ItemRetracted, ItemRotated, RotationBlocked,
)
from logic.grid import Grid, mark_cells
from logic.shapes import rotate_clockwise, shape_cells, shape_size


@dataclass(frozen=True, slots=True)
class PlacementResult:
    ok: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.ok


OK = PlacementResult(True)


# ── Pure validation ─────────────────────────────────────────────────

def check_placement(grid: Grid, shape, origin_x: int, origin_y: int,
                    item_id: str | None = None) -> PlacementResult:
    """Why (or whether) *shape* can sit at ``(origin_x, origin_y)``.

    Cells owned by *item_id* itself don't count as collisions, which
    lets a placed item test a rotated shape before retracting.  Shape
    cells holding 0 are never checked.
    """
    w, h = shape_size(shape)
    if (origin_x < 0 or origin_y < 0
            or origin_x + w > grid.width or origin_y + h > grid.height):
        return PlacementResult(False, "out_of_bounds")
    collision = False
    for dx, dy in shape_cells(shape):
        x, y = origin_x + dx, origin_y + dy
        if not grid.mask[y][x]:
            return PlacementResult(False, "blocked")
        owner = grid.owner(x, y)
        if owner is not None and owner != item_id:
            collision = True
    if collision:
        return PlacementResult(False, "collision")
    return OK


def is_valid_placement(grid: Grid, shape, origin_x: int, origin_y: int,
                       item_id: str | None = None) -> bool:
    return check_placement(grid, shape, origin_x, origin_y, item_id).ok


# ── Engine ──────────────────────────────────────────────────────────

class PlacementEngine:
    """Grid mutations plus grid ↔ logical-pixel geometry.

    ``origin_x/origin_y`` is the logical-px position of cell (0, 0).
    ``canvas_w/canvas_h`` bound where unplaced items may sit.
    """

    def __init__(self, grid: Grid, cell_size: int,
                 origin_x: float = 0.0, origin_y: float = 0.0,
                 canvas_w: int = 0, canvas_h: int = 0,
                 bus: EventBus | None = None, log=None):
        self.grid = grid
        self.cell_size = cell_size
        self.origin_x = origin_x
        self.origin_y = origin_y
        self.canvas_w = canvas_w or (origin_x * 2 + grid.width * cell_size)
        self.canvas_h = canvas_h or (origin_y * 2 + grid.height * cell_size)
        self.bus = bus or EventBus()
        self.log = log

    # ── geometry ─────────────────────────────────────────────────────

    def grid_to_pixel(self, gx: int, gy: int) -> tuple[float, float]:
        return (self.origin_x + gx * self.cell_size,
                self.origin_y + gy * self.cell_size)

    def pixel_to_grid(self, px: float, py: float) -> tuple[int, int]:
        return (math.floor((px - self.origin_x) / self.cell_size),
                math.floor((py - self.origin_y) / self.cell_size))

    def container_rect(self) -> tuple[float, float, int, int]:
        return (self.origin_x, self.origin_y,
                self.grid.width * self.cell_size,
                self.grid.height * self.cell_size)

    def overlaps_container(self, item) -> bool:
        """True if the item's bounding box touches the container at all."""
        x, y, w, h = item.rect(self.cell_size)
        cx, cy, cw, ch = self.container_rect()
        return x < cx + cw and x + w > cx and y < cy + ch and y + h > cy

    def snap(self, item) -> tuple[int, int]:
        """Nearest grid origin for the item's current pixel position.

        The top-left is offset by half a cell before flooring (i.e. it
        rounds), then clamped so the bounding box stays inside the grid.
        Rounding the top-left rather than the pointer is intentional:
        the drop lands where the item is drawn, whatever the grab point.
        """
        half = self.cell_size / 2
        gx, gy = self.pixel_to_grid(item.pixel_x + half, item.pixel_y + half)
        gx = max(0, min(gx, self.grid.width - item.width))
        gy = max(0, min(gy, self.grid.height - item.height))
        return gx, gy

    # ── validation ───────────────────────────────────────────────────

    def check(self, item, origin_x: int, origin_y: int, shape=None) -> PlacementResult:
        return check_placement(self.grid, shape if shape is not None else item.shape,
                               origin_x, origin_y, item.id)

    # ── mutation ─────────────────────────────────────────────────────

    def place(self, item, origin_x: int, origin_y: int, quiet: bool = False) -> PlacementResult:
        """Commit *item* at a grid origin.  Re-placing a placed item moves it.

        *quiet* puts an item back without emitting ``ItemPlaced`` or
        logging, for undoing a lift the player never completed.
        """
        res = self.check(item, origin_x, origin_y)
        if not res:
            return res
        if item.is_placed:
            mark_cells(self.grid, item, item.grid_x, item.grid_y, False)
        mark_cells(self.grid, item, origin_x, origin_y, True)
        item.is_placed = True
        item.grid_x, item.grid_y = origin_x, origin_y
        item.pixel_x, item.pixel_y = self.grid_to_pixel(origin_x, origin_y)
        if not quiet:
            self.bus.emit(ItemPlaced(item.id, origin_x, origin_y))
            self._log(item.id, "place", f"placed at ({origin_x}, {origin_y})")
        return OK

    def retract(self, item) -> PlacementResult:
        if not item.is_placed:
            return PlacementResult(False, "not_placed")
        mark_cells(self.grid, item, item.grid_x, item.grid_y, False)
        item.unplace()
        self.bus.emit(ItemRetracted(item.id))
        self._log(item.id, "retract", "removed from grid")
        return OK

    def rotate_in_place(self, item) -> PlacementResult:
        """Turn *item* 90° clockwise.

        Placed: the rotated shape must fit at the same origin, otherwise
        nothing changes and ``RotationBlocked`` is emitted.  Unplaced:
        always succeeds; the item is pushed back inside the canvas if
        its new bounding box would stick out.
        """
        rotated = rotate_clockwise(item.shape)
        new_rotation = (item.rotation + 90) % 360

        if item.is_placed:
            res = self.check(item, item.grid_x, item.grid_y, shape=rotated)
            if not res:
                self.bus.emit(RotationBlocked(item.id, res.reason))
                self._log(item.id, "rotate", f"blocked ({res.reason})")
                return res
            gx, gy = item.grid_x, item.grid_y
            mark_cells(self.grid, item, gx, gy, False)
            self._apply_rotation(item, rotated, new_rotation)
            mark_cells(self.grid, item, gx, gy, True)
        else:
            self._apply_rotation(item, rotated, new_rotation)
            self.keep_on_canvas(item)

        self.bus.emit(ItemRotated(item.id, item.rotation, item.is_placed))
        self._log(item.id, "rotate", f"rotation → {item.rotation}")
        return OK

    def keep_on_canvas(self, item) -> None:
        w, h = item.pixel_size(self.cell_size)
        item.pixel_x = max(0, min(item.pixel_x, self.canvas_w - w))
        item.pixel_y = max(0, min(item.pixel_y, self.canvas_h - h))

    def clear(self, items) -> None:
        """Unplace every item and empty the grid."""
        self.grid.clear()
        for item in items:
            item.unplace()

    # ── internal ─────────────────────────────────────────────────────

    @staticmethod
    def _apply_rotation(item, shape, rotation: int) -> None:
        item.shape = shape
        item.rotation = rotation
        item.width, item.height = shape_size(shape)

    def _log(self, item_id: str, cat: str, msg: str) -> None:
        if self.log is not None:
            self.log.record(item_id, cat, msg)
