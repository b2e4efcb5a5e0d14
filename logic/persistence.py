"""logic/persistence.py — Memory snapshot of item positions.

A memory snapshot is a plain mapping, JSON-ready as is::

    {
      "dice": {"gridX": 2, "gridY": 0, "pixelX": 330.0, "pixelY": 150.0,
               "rotation": 90, "isPlaced": true},
      ...
    }

The keys are camelCase because the snapshot is handed to the outer
story/save layer, which shares it with other sessions.  Grid occupancy
is never stored: ``restore`` rebuilds it from the placed items.
"""

from __future__ import annotations
from typing import Any

from logic.grid import Grid, mark_cells
from logic.placement import check_placement
from logic.shapes import normalize_rotation, shape_for_rotation, shape_size

KEYS = ("gridX", "gridY", "pixelX", "pixelY", "rotation", "isPlaced")


def snapshot(items) -> dict[str, dict[str, Any]]:
    """Record every item's position, rotation and placed flag."""
    return {
        item.id: {
            "gridX": int(item.grid_x),
            "gridY": int(item.grid_y),
            "pixelX": float(item.pixel_x),
            "pixelY": float(item.pixel_y),
            "rotation": int(item.rotation),
            "isPlaced": bool(item.is_placed),
        }
        for item in items
    }


def _flag(value) -> bool:
    """Strict boolean: real bools, 0/1, or the strings "true"/"false"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ValueError(f"not a flag: {value!r}")


def coerce_record(raw) -> dict[str, Any] | None:
    """Validate one snapshot record loaded from outside.  None if unusable."""
    if not isinstance(raw, dict):
        return None
    try:
        return {
            "gridX": int(raw.get("gridX", -1)),
            "gridY": int(raw.get("gridY", -1)),
            "pixelX": float(raw.get("pixelX", 0.0)),
            "pixelY": float(raw.get("pixelY", 0.0)),
            "rotation": normalize_rotation(raw.get("rotation", 0)),
            "isPlaced": _flag(raw.get("isPlaced", False)),
        }
    except (TypeError, ValueError):
        return None


def restore(items, memory: dict | None, grid: Grid, log=None) -> set[str]:
    """Apply *memory* to *items* and rebuild *grid* occupancy.

    Returns the ids that had a usable record; everything else is left
    for the staging allocator.  A placed record that no longer fits the
    grid (config changed between sessions) keeps its rotation but is
    left out of the result so it gets staged again.
    """
    restored: set[str] = set()
    if not memory:
        return restored

    for item in items:
        rec = coerce_record(memory.get(item.id))
        if rec is None:
            continue
        item.rotation = rec["rotation"]
        item.shape = shape_for_rotation(item.base_shape, item.rotation)
        item.width, item.height = shape_size(item.shape)
        item.pixel_x, item.pixel_y = rec["pixelX"], rec["pixelY"]
        item.unplace()

        if rec["isPlaced"]:
            gx, gy = rec["gridX"], rec["gridY"]
            res = check_placement(grid, item.shape, gx, gy, item.id)
            if res:
                mark_cells(grid, item, gx, gy, True)
                item.is_placed = True
                item.grid_x, item.grid_y = gx, gy
            else:
                print(f"[PUZZLE] memory for {item.id} no longer fits "
                      f"({res.reason}) — sending it back to staging")
                if log is not None:
                    log.record(item.id, "restore", f"stale placement ({res.reason})")
                continue
        restored.add(item.id)

    return restored
