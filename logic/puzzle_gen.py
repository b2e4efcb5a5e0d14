"""logic/puzzle_gen.py — Random puzzle configurations.

Same seed, same puzzle: all randomness goes through one
``random.Random(seed)`` instance, and catalogue ids are sorted before
sampling so dict order never leaks in.

Usage:
    cfg = generate_random_config(42, loader.registry)
    engine = start_engine(cfg)
"""

from __future__ import annotations
import random

from components.item_registry import ItemRegistry
from core.config import ItemDef, PuzzleConfig
from logic.shapes import coerce_shape, shape_cells, shape_size

MIN_SIDE = 4
MAX_SIDE = 7
MAX_NOTCHES = 3
# Offer a bit more item area than there is room for.
FILL_RATIO = 1.25


def _fits(d: ItemDef, width: int, height: int) -> bool:
    shape = coerce_shape(d.shape) if d.shape is not None else None
    w, h = shape_size(shape) if shape else (d.width, d.height)
    return (w <= width and h <= height) or (h <= width and w <= height)


def _area(d: ItemDef) -> int:
    shape = coerce_shape(d.shape) if d.shape is not None else None
    return len(shape_cells(shape)) if shape else d.width * d.height


def _notched_mask(rng: random.Random, width: int, height: int) -> list[list[bool]] | None:
    """Block a few corner cells, or nothing at all."""
    notches = rng.randint(0, MAX_NOTCHES)
    if notches == 0:
        return None
    mask = [[True] * width for _ in range(height)]
    corners = [(0, 0), (width - 1, 0), (0, height - 1), (width - 1, height - 1)]
    for x, y in rng.sample(corners, notches):
        mask[y][x] = False
    return mask


def generate_random_config(seed: int, registry: ItemRegistry,
                           name: str | None = None, **extra) -> PuzzleConfig:
    """Build a reproducible ``PuzzleConfig`` from *registry*'s catalogue.

    Grid sides are drawn from ``MIN_SIDE..MAX_SIDE``; up to three corner
    cells are notched out; items are drawn (without replacement) until
    their combined area passes ``FILL_RATIO`` × open cells.  Only items
    that fit the grid in some orientation are eligible.  The largest
    drawn item is marked required.
    """
    rng = random.Random(seed)
    width = rng.randint(MIN_SIDE, MAX_SIDE)
    height = rng.randint(MIN_SIDE, MAX_SIDE)
    mask = _notched_mask(rng, width, height)
    open_cells = sum(sum(row) for row in mask) if mask else width * height

    pool = [registry.get_item(i) for i in sorted(registry.ids())]
    pool = [d for d in pool if d is not None and _fits(d, width, height)]
    rng.shuffle(pool)

    chosen: list[ItemDef] = []
    area = 0
    for d in pool:
        if area >= open_cells * FILL_RATIO:
            break
        chosen.append(d)
        area += _area(d)

    required = []
    if chosen:
        required = [max(chosen, key=lambda d: (_area(d), d.id)).id]

    picked = registry.defs([d.id for d in chosen])
    print(f"[PUZZLE] random #{seed}: {width}x{height}, "
          f"{len(picked)} items, {area}/{open_cells} cells")
    kwargs = {"required_items": required}
    kwargs.update(extra)
    return PuzzleConfig(name=name or f"random-{seed}", width=width, height=height,
                        mask=mask, items=picked, **kwargs)
