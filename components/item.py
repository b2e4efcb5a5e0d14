"""components.item — A packable item and its live placement state.

Positions: ``grid_x/grid_y`` are cells (valid only while ``is_placed``),
``pixel_x/pixel_y`` are logical-canvas px and always meaningful.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from core.config import ItemDef
from core.constants import DEFAULT_ITEM_COLOR
from logic import shapes


@dataclass
class Item:
    id: str
    name: str = ""
    width: int = 1             # cells, tracks the current shape
    height: int = 1
    shape: list[list[int]] | None = None
    base_shape: list[list[int]] = field(default_factory=list)
    original_width: int = 1    # cells at rotation 0, never changes
    original_height: int = 1
    rotation: int = 0          # 0 / 90 / 180 / 270
    is_placed: bool = False
    grid_x: int = -1
    grid_y: int = -1
    pixel_x: float = 0.0
    pixel_y: float = 0.0
    color: tuple = DEFAULT_ITEM_COLOR
    sprite_key: str | None = None
    description: str = ""
    required: bool = False

    @classmethod
    def from_def(cls, d: ItemDef) -> Item:
        item = cls(id=d.id, name=d.name, width=d.width, height=d.height,
                   shape=d.shape, color=d.color, sprite_key=d.sprite_key,
                   description=d.description, required=d.required)
        shapes.normalize(item)
        item.base_shape = [row[:] for row in item.shape]
        item.original_width, item.original_height = item.width, item.height
        return item

    # ── geometry ─────────────────────────────────────────────────────

    def cells(self) -> list[tuple[int, int]]:
        return shapes.shape_cells(self.shape)

    def pixel_size(self, cell_size: int) -> tuple[int, int]:
        return self.width * cell_size, self.height * cell_size

    def rect(self, cell_size: int) -> tuple[float, float, int, int]:
        """Bounding box ``(x, y, w, h)`` in logical px."""
        w, h = self.pixel_size(cell_size)
        return self.pixel_x, self.pixel_y, w, h

    def contains(self, x: float, y: float, cell_size: int) -> bool:
        """Hit-test against the bounding box (half-open on the far edges)."""
        w, h = self.pixel_size(cell_size)
        return (self.pixel_x <= x < self.pixel_x + w
                and self.pixel_y <= y < self.pixel_y + h)

    def set_rotation(self, rotation: int) -> None:
        """Re-derive ``shape`` and size from ``base_shape``."""
        self.rotation = shapes.normalize_rotation(rotation)
        self.shape = shapes.shape_for_rotation(self.base_shape, self.rotation)
        self.width, self.height = shapes.shape_size(self.shape)

    def unplace(self) -> None:
        self.is_placed = False
        self.grid_x = -1
        self.grid_y = -1
