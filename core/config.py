"""core/config.py — Typed puzzle configuration.

A ``PuzzleConfig`` is everything the engine needs to start a session:
container geometry, the open/blocked mask, item definitions, and an
optional memory snapshot from a previous session.  It is validated once
at construction so the engine never has to second-guess its inputs.

    cfg = PuzzleConfig(width=4, height=5, items=[ItemDef("dice", "Dice")])
    engine = start_engine(cfg)

Colors may be written as ``(r, g, b)``, ``"#rrggbb"`` or
``"hsl(h, s%, l%)"``; they are normalised to an RGB tuple.
"""

from __future__ import annotations
import colorsys
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from core.constants import (
    DEFAULT_CELL_SIZE, DEFAULT_GRID_HEIGHT, DEFAULT_GRID_WIDTH,
    DEFAULT_ITEM_COLOR, DEFAULT_STAGING_PADDING, LOGICAL_HEIGHT, LOGICAL_WIDTH,
)


class ConfigError(ValueError):
    """Raised when a puzzle configuration cannot be used."""


# ── Value coercion ──────────────────────────────────────────────────

_HSL_RE = re.compile(
    r"hsla?\(\s*([-\d.]+)\s*,\s*([\d.]+)%\s*,\s*([\d.]+)%\s*(?:,\s*[\d.]+\s*)?\)")


def parse_color(value: Any, default: tuple = DEFAULT_ITEM_COLOR) -> tuple[int, int, int]:
    """Return an ``(r, g, b)`` tuple for *value*, or *default* if unparseable."""
    if value is None:
        return default
    if isinstance(value, (tuple, list)) and len(value) >= 3:
        return tuple(max(0, min(255, int(c))) for c in value[:3])
    if not isinstance(value, str):
        return default
    text = value.strip().lower()
    if text.startswith("#") and len(text) == 7:
        try:
            return tuple(int(text[i:i + 2], 16) for i in (1, 3, 5))
        except ValueError:
            return default
    m = _HSL_RE.fullmatch(text)
    if m:
        h = (float(m.group(1)) % 360.0) / 360.0
        s = float(m.group(2)) / 100.0
        lum = float(m.group(3)) / 100.0
        r, g, b = colorsys.hls_to_rgb(h, lum, s)
        return int(round(r * 255)), int(round(g * 255)), int(round(b * 255))
    return default


def parse_size(text: str) -> tuple[int, int]:
    """Parse ``"4x5"`` into ``(width, height)``."""
    parts = str(text).lower().replace(" ", "").split("x")
    if len(parts) != 2:
        raise ConfigError(f"bad size string {text!r} (expected 'WxH')")
    try:
        w, h = int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise ConfigError(f"bad size string {text!r}") from exc
    return w, h


def coerce_mask(raw, width: int, height: int) -> list[list[bool]] | None:
    """Convert a user mask to ``height`` rows of ``width`` bools (True = open).

    Accepts rows of bools / ints (truthy = open) or strings where ``#``
    marks a blocked cell.  Returns ``None`` when *raw* is absent or its
    dimensions do not match the grid.
    """
    if raw is None:
        return None
    rows: list[list[bool]] = []
    for row in raw:
        if isinstance(row, str):
            rows.append([ch != "#" for ch in row])
        else:
            rows.append([bool(v) for v in row])
    if len(rows) != height or any(len(r) != width for r in rows):
        return None
    return rows


# ── Item definitions ────────────────────────────────────────────────

@dataclass
class ItemDef:
    """Static definition of one packable item."""
    id: str
    name: str = ""
    width: int = 1
    height: int = 1
    shape: list[list[int]] | None = None
    color: tuple = DEFAULT_ITEM_COLOR
    sprite_key: str | None = None
    description: str = ""
    required: bool = False

    def __post_init__(self):
        self.id = str(self.id)
        if not self.id:
            raise ConfigError("item definition without an id")
        self.name = self.name or self.id
        self.width = int(self.width)
        self.height = int(self.height)
        if self.shape is None and (self.width <= 0 or self.height <= 0):
            raise ConfigError(f"item {self.id!r} has non-positive size "
                              f"{self.width}x{self.height}")
        self.color = parse_color(self.color)

    @classmethod
    def from_dict(cls, item_id: str, data: dict) -> ItemDef:
        """Build from a loose mapping (TOML table, JSON object)."""
        return cls(
            id=data.get("id", item_id),
            name=data.get("name", ""),
            width=data.get("width", 1),
            height=data.get("height", 1),
            shape=data.get("shape"),
            color=data.get("color", DEFAULT_ITEM_COLOR),
            sprite_key=data.get("sprite_key", data.get("sprite")),
            description=data.get("description", ""),
            required=bool(data.get("required", False)),
        )


# ── Puzzle configuration ────────────────────────────────────────────

@dataclass
class PuzzleConfig:
    """Everything needed to start one packing session.

    Fields
    ------
    width, height
        Container size in cells.
    cell_size
        Logical pixels per cell.
    mask
        ``height`` rows × ``width`` columns, True = open.  ``None`` or a
        mask of the wrong shape means "all open".
    grid_offset_x, grid_offset_y
        Nudge the grid (logical px) to line up with a background image.
    logical_width, logical_height
        Size of the fixed design canvas.
    staging_padding
        Gap between canvas edges, staging regions and the container.
    memory
        MemorySnapshot from a previous session (item id → record).
    on_complete
        Called with ``(placed_ids, memory)`` when the player finishes.
    """
    name: str = "backpack"
    width: int = DEFAULT_GRID_WIDTH
    height: int = DEFAULT_GRID_HEIGHT
    cell_size: int = DEFAULT_CELL_SIZE
    mask: list | None = None
    grid_offset_x: int = 0
    grid_offset_y: int = 0
    logical_width: int = LOGICAL_WIDTH
    logical_height: int = LOGICAL_HEIGHT
    staging_padding: int = DEFAULT_STAGING_PADDING
    items: list[ItemDef] = field(default_factory=list)
    required_items: list[str] = field(default_factory=list)
    memory: dict | None = None
    background_key: str | None = "backpack"
    on_complete: Callable[[set, dict], None] | None = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Check dimensions and ids; normalise the mask in place."""
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f"container size must be positive, got "
                              f"{self.width}x{self.height}")
        if self.cell_size <= 0:
            raise ConfigError(f"cell_size must be positive, got {self.cell_size}")
        if self.logical_width <= 0 or self.logical_height <= 0:
            raise ConfigError("logical canvas size must be positive")

        self.items = [d if isinstance(d, ItemDef) else ItemDef.from_dict(str(d.get("id", "")), d)
                      for d in self.items]
        seen: set[str] = set()
        for d in self.items:
            if d.id in seen:
                raise ConfigError(f"duplicate item id {d.id!r}")
            seen.add(d.id)

        if self.mask is not None:
            mask = coerce_mask(self.mask, self.width, self.height)
            if mask is None:
                print(f"[PUZZLE] {self.name}: mask does not match "
                      f"{self.width}x{self.height} — using an all-open mask")
            self.mask = mask

        # Items flagged ``required`` count as required too.
        req = list(self.required_items)
        for d in self.items:
            if d.required and d.id not in req:
                req.append(d.id)
        self.required_items = req

    @property
    def pixel_width(self) -> int:
        return self.width * self.cell_size

    @property
    def pixel_height(self) -> int:
        return self.height * self.cell_size
