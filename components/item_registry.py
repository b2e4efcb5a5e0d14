"""components.item_registry — Item catalogue lookup table.

Holds every ``ItemDef`` known to the game, whether or not the current
puzzle uses it.  Puzzles list item ids; the registry turns them into
definitions, and the random generator samples from it.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace

from core.config import ItemDef


@dataclass
class ItemRegistry:
    """Lookup table mapping item IDs → ``ItemDef``.

    Populated by ``PuzzleLoader`` from the ``[catalog]`` tables::

        registry = loader.registry
        defs = registry.defs(["dice", "bong"])
    """
    _entries: dict[str, ItemDef] = field(default_factory=dict)

    # ── core helpers ─────────────────────────────────────────────────

    def register(self, item_def: ItemDef) -> None:
        self._entries[item_def.id] = item_def

    def get_item(self, item_id: str) -> ItemDef | None:
        return self._entries.get(item_id)

    def ids(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def defs(self, item_ids, **overrides) -> list[ItemDef]:
        """Fresh copies of the named definitions, unknown ids skipped.

        *overrides* maps an item id to a dict of field replacements,
        e.g. ``{"bong": {"required": True}}``.
        """
        out: list[ItemDef] = []
        for item_id in item_ids:
            d = self._entries.get(item_id)
            if d is None:
                print(f"[PUZZLE] unknown item {item_id!r} — skipped")
                continue
            out.append(replace(d, **overrides.get(item_id, {})))
        return out
