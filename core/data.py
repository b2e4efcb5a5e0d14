"""
core/data.py — TOML → PuzzleConfig loader

Reads puzzle data files.  A file has a shared item catalogue and any
number of puzzles that pick items out of it:

    [catalog.bong]
    name = "Bong"
    width = 2
    height = 4
    shape = ["XX", "XX", "XX", "X."]
    color = "hsl(20, 70%, 60%)"
    sprite = "bong"

    [puzzles.small]
    size = "4x5"              # or width = 4 / height = 5
    cell_size = 50
    items = ["bong", "dice"]
    required = ["bong"]
    mask = ["....", "#...", "....", "....", "...."]

Usage:
    loader = PuzzleLoader()
    loader.load("data/puzzles.toml")
    config = loader.puzzle("small", memory=saved, on_complete=cb)
"""

from __future__ import annotations
try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib
from pathlib import Path
from dataclasses import fields
from typing import Any

from components.item_registry import ItemRegistry
from core.config import ConfigError, ItemDef, PuzzleConfig, parse_size


# PuzzleConfig fields a TOML puzzle table may set directly.
_PASSTHROUGH = {f.name for f in fields(PuzzleConfig)} - {
    "items", "required_items", "memory", "on_complete", "name"}


class PuzzleLoader:
    def __init__(self, registry: ItemRegistry | None = None):
        self.registry = registry or ItemRegistry()
        self._puzzles: dict[str, dict[str, Any]] = {}

    def load(self, path: str | Path) -> list[str]:
        """Load a TOML file.  Returns the puzzle names it defined."""
        path = Path(path)
        with open(path, "rb") as f:
            data = tomllib.load(f)

        for item_id, section in data.get("catalog", {}).items():
            if not isinstance(section, dict):
                continue
            self.registry.register(ItemDef.from_dict(item_id, section))

        names: list[str] = []
        for name, section in data.get("puzzles", {}).items():
            if isinstance(section, dict):
                self._puzzles[name] = section
                names.append(name)

        print(f"[PUZZLE] Loaded {len(self.registry)} catalogue items, "
              f"{len(names)} puzzles from {path}")
        return names

    def names(self) -> list[str]:
        return list(self._puzzles)

    def puzzle(self, name: str, **extra) -> PuzzleConfig:
        """Build the ``PuzzleConfig`` for puzzle *name*.

        *extra* is passed straight to ``PuzzleConfig`` (typically
        ``memory=`` and ``on_complete=``) and wins over the file.
        """
        if name not in self._puzzles:
            raise ConfigError(f"unknown puzzle {name!r} "
                              f"(have: {', '.join(self._puzzles) or 'none'})")
        return build_config(name, self._puzzles[name], self.registry, **extra)


def build_config(name: str, section: dict, registry: ItemRegistry, **extra) -> PuzzleConfig:
    """Turn one raw puzzle table into a validated ``PuzzleConfig``."""
    kwargs: dict[str, Any] = {k: v for k, v in section.items() if k in _PASSTHROUGH}
    if "size" in section:
        kwargs["width"], kwargs["height"] = parse_size(section["size"])

    required = list(section.get("required", []))
    item_ids = section.get("items")
    if item_ids is None or item_ids == "all":
        item_ids = registry.ids()
    items = registry.defs(item_ids)
    # Inline item tables are allowed too.
    for raw in section.get("extra_items", []):
        items.append(ItemDef.from_dict(str(raw.get("id", "")), raw))

    kwargs.update(extra)
    kwargs.setdefault("required_items", required)
    return PuzzleConfig(name=name, items=items, **kwargs)
