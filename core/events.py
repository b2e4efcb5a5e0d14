"""core/events.py — Lightweight event bus.

Decouples the parts of the engine that *do* something (placement,
interaction) from the parts that *react* to it (audio cues, toasts,
persistence).  The engine owns one bus::

    bus = engine.bus
    bus.emit(ItemPlaced(item_id="dice", grid_x=2, grid_y=0))

Consumers subscribe with a callable::

    bus.subscribe("ItemPlaced", my_handler)

And the scene drains once per frame::

    bus.drain()          # calls all handlers for pending events

Design rules:
  - Events are plain dataclasses — no behaviour.
  - ``emit()`` is O(1) (just appends).
  - ``drain()`` processes all queued events in FIFO order.
  - Handlers may emit new events; those are processed in the same drain.
"""

from __future__ import annotations
import traceback
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable


# ═══════════════════════════════════════════════════════════════════
#  Event definitions
# ═══════════════════════════════════════════════════════════════════

@dataclass
class ItemPickedUp:
    """Pointer grabbed an item.  ``was_placed`` if it came out of the grid."""
    item_id: str
    was_placed: bool = False


@dataclass
class ItemDropped:
    """Pointer released a dragged item, whatever the outcome."""
    item_id: str
    placed: bool = False
    pixel_x: float = 0.0
    pixel_y: float = 0.0


@dataclass
class ItemPlaced:
    """Item committed to the grid."""
    item_id: str
    grid_x: int = 0
    grid_y: int = 0


@dataclass
class ItemRetracted:
    """Item's cells cleared from the grid."""
    item_id: str


@dataclass
class ItemRotated:
    item_id: str
    rotation: int = 0
    placed: bool = False


@dataclass
class PlacementRejected:
    """Drop over the container failed; the item went back where it was."""
    item_id: str
    reason: str = ""
    grid_x: int = 0
    grid_y: int = 0


@dataclass
class RotationBlocked:
    """Rotating a placed item would leave the grid or hit something."""
    item_id: str
    reason: str = ""


@dataclass
class StagingLayoutFailed:
    """No free staging space; the item was parked at a fallback origin."""
    item_id: str
    side: str = ""


@dataclass
class PuzzleReset:
    pass


@dataclass
class PuzzleCompleted:
    placed_ids: set[str] = field(default_factory=set)
    memory: dict = field(default_factory=dict)


# ═══════════════════════════════════════════════════════════════════
#  Event Bus
# ═══════════════════════════════════════════════════════════════════

class EventBus:
    """Fire-and-forget event bus owned by the engine."""

    def __init__(self):
        self._queue: list[Any] = []
        self._subs: dict[str, list[Callable]] = defaultdict(list)

    # ── Public API ───────────────────────────────────────────────────

    def emit(self, event) -> None:
        """Queue an event for processing on next ``drain()``."""
        self._queue.append(event)

    def subscribe(self, event_type: str, handler: Callable) -> None:
        """Register *handler* to receive events of *event_type*.

        *event_type* is the class name, e.g. ``"ItemPlaced"``.
        """
        self._subs[event_type].append(handler)

    def unsubscribe(self, event_type: str, handler: Callable) -> None:
        subs = self._subs.get(event_type)
        if subs and handler in subs:
            subs.remove(handler)

    def drain(self) -> int:
        """Process all queued events.  Returns number processed.

        Handlers may emit new events — those are processed in the
        same drain pass (breadth-first).
        """
        processed = 0
        safety = 1000  # prevent infinite loops
        while self._queue and safety > 0:
            batch = self._queue[:]
            self._queue.clear()
            for event in batch:
                name = type(event).__name__
                for handler in self._subs.get(name, []):
                    try:
                        handler(event)
                    except Exception as exc:
                        print(f"[EVENT] handler error for {name}: {exc}")
                        traceback.print_exc()
            processed += len(batch)
            safety -= 1
        return processed

    def __repr__(self) -> str:
        return f"EventBus(pending={len(self._queue)}, subs={len(self._subs)})"
