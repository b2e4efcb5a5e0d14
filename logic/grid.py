"""logic/grid.py — Container grid: fixed mask plus mutable occupancy.

``mask[y][x]`` is True for an open cell and False for a blocked one; it
never changes after ``create_grid``.  ``occupancy[y][x]`` holds one of

    EMPTY     open cell, nothing in it
    BLOCKED   masked-out cell
    "<id>"    the id of the item covering the cell

Only ``mark_cells`` writes item ids.  It does not validate; callers run
``placement.is_valid_placement`` first.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from logic.shapes import shape_cells

EMPTY = None
BLOCKED = -1


class MaskError(ValueError):
    """Mask rows/columns don't match the grid dimensions."""


@dataclass
class Grid:
    width: int
    height: int
    mask: list[list[bool]]
    occupancy: list[list] = field(default_factory=list)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_open(self, x: int, y: int) -> bool:
        return self.mask[y][x]

    def resting_value(self, x: int, y: int):
        """What a cell holds when no item covers it."""
        return EMPTY if self.mask[y][x] else BLOCKED

    def owner(self, x: int, y: int) -> str | None:
        v = self.occupancy[y][x]
        return v if isinstance(v, str) else None

    def cells_of(self, item_id: str) -> set[tuple[int, int]]:
        return {(x, y)
                for y, row in enumerate(self.occupancy)
                for x, v in enumerate(row) if v == item_id}

    def open_cell_count(self) -> int:
        return sum(1 for row in self.mask for v in row if v)

    def clear(self) -> None:
        """Drop every item; blocked cells stay blocked."""
        self.occupancy = [[self.resting_value(x, y) for x in range(self.width)]
                          for y in range(self.height)]


def create_grid(width: int, height: int, mask: list[list[bool]] | None = None) -> Grid:
    """Build a grid.  ``mask=None`` means every cell is open.

    Raises ``MaskError`` if *mask* has the wrong dimensions; the caller
    is expected to fall back to an all-open mask.
    """
    if mask is None:
        mask = [[True] * width for _ in range(height)]
    elif len(mask) != height or any(len(row) != width for row in mask):
        raise MaskError(f"mask is {len(mask)} rows, expected {height}x{width}")
    grid = Grid(width, height, [[bool(v) for v in row] for row in mask])
    grid.clear()
    return grid


def mark_cells(grid: Grid, item, origin_x: int, origin_y: int, mark: bool) -> None:
    """Write (``mark=True``) or clear ``item``'s solid cells at an origin.

    Clearing only touches cells the item actually owns, so a stale
    retract can never erase another item's cells.
    """
    for dx, dy in shape_cells(item.shape):
        x, y = origin_x + dx, origin_y + dy
        if mark:
            grid.occupancy[y][x] = item.id
        elif grid.occupancy[y][x] == item.id:
            grid.occupancy[y][x] = grid.resting_value(x, y)
