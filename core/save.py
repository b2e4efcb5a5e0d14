"""core/save.py — Persisted puzzle memory (the outer save store).

Save files (JSON) keep, per puzzle name:
- the memory snapshot (item positions, rotations, placed flags)
- the packed-items map handed to the story layer
- when it was last written

Puzzle definitions (TOML) are static and never written here.

When starting a puzzle:
1. Build the ``PuzzleConfig`` from TOML
2. ``load_memory(name)`` → snapshot or None
3. Pass it as ``memory=`` so the engine restores before staging
"""

from __future__ import annotations
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

SAVES_DIR = Path("saves")
FORMAT_VERSION = 1


def get_save_file(slot: int = 0, saves_dir: str | Path | None = None) -> Path:
    """Get the path for a save slot."""
    base = Path(saves_dir) if saves_dir is not None else SAVES_DIR
    base.mkdir(parents=True, exist_ok=True)
    return base / f"slot{slot}.json"


def _read(path: Path) -> dict[str, Any] | None:
    if not path.exists():
        return None
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as ex:
        print(f"[SAVE] Error loading save file {path}: {ex}")
        return None
    if not isinstance(data, dict):
        print(f"[SAVE] {path} is not a save file — ignoring")
        return None
    return data


def _puzzles(data: dict[str, Any] | None) -> dict[str, Any]:
    puzzles = data.get("puzzles") if data else None
    return puzzles if isinstance(puzzles, dict) else {}


def save_memory(puzzle: str, memory: dict, packed_items: dict | None = None,
                slot: int = 0, saves_dir: str | Path | None = None) -> Path:
    """Write *memory* for *puzzle*, keeping other puzzles in the slot.

    Returns path to save file.
    """
    path = get_save_file(slot, saves_dir)
    puzzles = _puzzles(_read(path))
    if packed_items is None:
        packed_items = {iid: True for iid, rec in memory.items() if rec.get("isPlaced")}
    puzzles[puzzle] = {
        "memory": memory,
        "packed_items": packed_items,
        "saved_at": datetime.now(timezone.utc).isoformat(),
    }
    save_data = {"format_version": FORMAT_VERSION, "puzzles": puzzles}
    with open(path, "w") as f:
        json.dump(save_data, f, indent=2)
    print(f"[SAVE] {puzzle}: {len(memory)} items → {path}")
    return path


def load_memory(puzzle: str, slot: int = 0,
                saves_dir: str | Path | None = None) -> dict | None:
    """Memory snapshot for *puzzle*, or None if there is none."""
    entry = _puzzles(_read(get_save_file(slot, saves_dir))).get(puzzle)
    if not isinstance(entry, dict) or not isinstance(entry.get("memory"), dict):
        return None
    return entry["memory"]


def load_packed_items(puzzle: str, slot: int = 0,
                      saves_dir: str | Path | None = None) -> dict[str, bool]:
    entry = _puzzles(_read(get_save_file(slot, saves_dir))).get(puzzle)
    packed = entry.get("packed_items") if isinstance(entry, dict) else None
    return dict(packed) if isinstance(packed, dict) else {}


def clear_memory(puzzle: str, slot: int = 0,
                 saves_dir: str | Path | None = None) -> bool:
    """Forget *puzzle*.  Returns True if there was something to forget."""
    path = get_save_file(slot, saves_dir)
    data = _read(path)
    puzzles = _puzzles(data)
    if puzzle not in puzzles:
        return False
    del puzzles[puzzle]
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    return True
