"""core/dev_log.py — Structured engine event log.

A ring buffer that records what happened to which item and why:
pickups, drops, placements, rejections, rotations, staging layout
failures.  Useful for debugging a puzzle session and for tests that
need to know something was *logged* rather than raised.

Usage:
    log = engine.log
    log.record("dice", "place", "placed at (2, 0)", details={"x": 2, "y": 0})

Each entry is a dict:
    {"t": float, "item": str, "cat": str, "msg": str, "details": dict | None}

Tab toggles the on-screen overlay; ``echo_log`` under ``[debug]`` in
tuning.toml mirrors every entry to stdout.
"""

from __future__ import annotations
import time
from dataclasses import dataclass, field


@dataclass
class PuzzleLog:
    """Ring buffer of engine events."""

    entries: list[dict] = field(default_factory=list)
    max_entries: int = 500
    echo: bool = False          # also print each entry to stdout

    def record(self, item: str, cat: str, msg: str, *,
               t: float | None = None,
               details: dict | None = None) -> None:
        entry = {
            "t": time.monotonic() if t is None else t,
            "item": item,
            "cat": cat,
            "msg": msg,
            "details": details,
        }
        self.entries.append(entry)
        if len(self.entries) > self.max_entries:
            self.entries = self.entries[-self.max_entries:]
        if self.echo:
            print(f"[{cat.upper()}] {item}: {msg}")

    def recent(self, n: int = 50) -> list[dict]:
        """Return the *n* most recent entries (newest last)."""
        return self.entries[-n:]

    def for_cat(self, cat: str, n: int = 50) -> list[dict]:
        return [e for e in self.entries if e["cat"] == cat][-n:]
