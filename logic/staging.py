"""logic/staging.py — Auto-arrange unplaced items beside the container.

Two regions flank the container, one on each side.  Items are packed
into them without their bounding boxes overlapping:

1. Sort by area, largest first (stable, so ties keep config order).
2. Send each item to whichever side has less cumulative area so far.
3. Shelf-pack within the side: first shelf with horizontal room wins,
   otherwise open a new shelf under the last one.
4. No shelf fits → scan the region on a fixed step for the first free
   spot.  Still nothing → try the other side, then park the item at the
   region origin and log a layout failure.

Only ``pixel_x/pixel_y`` are written.  The grid is never touched.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from core.events import EventBus, StagingLayoutFailed

LEFT = "left"
RIGHT = "right"


@dataclass
class StagingRegion:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass
class Shelf:
    y: float
    height: float
    cursor: float          # next free x


@dataclass
class _Side:
    name: str
    region: StagingRegion
    shelves: list[Shelf] = field(default_factory=list)
    rects: list[tuple[float, float, float, float]] = field(default_factory=list)
    area: float = 0.0


def staging_regions(container_rect, canvas_w: float, canvas_h: float,
                    padding: float) -> tuple[StagingRegion, StagingRegion]:
    """Left and right regions around ``container_rect = (x, y, w, h)``."""
    cx, _cy, cw, _ch = container_rect
    top = padding
    height = max(0.0, canvas_h - 2 * padding)
    left = StagingRegion(padding, top, max(0.0, cx - 2 * padding), height)
    rx = cx + cw + padding
    right = StagingRegion(rx, top, max(0.0, canvas_w - padding - rx), height)
    return left, right


def rects_overlap(a, b) -> bool:
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


class StagingLayoutAllocator:
    """Shelf packer for the two staging regions.

    ``spacing`` is the gap kept between neighbouring items,
    ``scan_step`` the stride of the brute-force fallback scan.
    """

    def __init__(self, cell_size: int, spacing: float = 10, scan_step: int = 20,
                 bus: EventBus | None = None, log=None):
        self.cell_size = cell_size
        self.spacing = spacing
        self.scan_step = max(1, int(scan_step))
        self.bus = bus
        self.log = log

    def layout(self, items, left: StagingRegion, right: StagingRegion,
               obstacles=()) -> dict[str, str]:
        """Position *items*.  Returns ``{item_id: "left" | "right"}``.

        *obstacles* are ``(x, y, w, h)`` boxes already sitting in the
        regions (items placed by hand or restored from memory); new
        items are packed around them.
        """
        sides = {LEFT: _Side(LEFT, left), RIGHT: _Side(RIGHT, right)}
        for rect in obstacles:
            for side in sides.values():
                r = side.region
                if rects_overlap(rect, (r.x, r.y, r.width, r.height)):
                    side.rects.append(tuple(rect))
                    side.area += rect[2] * rect[3]
        ordered = sorted(items, key=lambda it: -(it.width * it.height))
        assigned: dict[str, str] = {}

        for item in ordered:
            w, h = item.pixel_size(self.cell_size)
            first = sides[LEFT] if sides[LEFT].area <= sides[RIGHT].area else sides[RIGHT]
            second = sides[RIGHT] if first is sides[LEFT] else sides[LEFT]

            side, pos = first, self._fit(first, w, h)
            if pos is None:
                side, pos = second, self._fit(second, w, h)
            if pos is None:
                side = first
                pos = (first.region.x, first.region.y)
                print(f"[STAGING] no room for {item.id} ({w}x{h}px) — "
                      f"parking at {side.name} origin")
                if self.log is not None:
                    self.log.record(item.id, "layout", "staging layout failed",
                                    details={"side": side.name, "w": w, "h": h})
                if self.bus is not None:
                    self.bus.emit(StagingLayoutFailed(item.id, side.name))

            item.pixel_x, item.pixel_y = pos
            side.rects.append((pos[0], pos[1], w, h))
            side.area += w * h
            assigned[item.id] = side.name

        return assigned

    # ── packing ──────────────────────────────────────────────────────

    def _fit(self, side: _Side, w: float, h: float) -> tuple[float, float] | None:
        pos = self._fit_shelf(side, w, h)
        if pos is None:
            pos = self._scan(side, w, h)
        return pos

    def _fit_shelf(self, side: _Side, w: float, h: float) -> tuple[float, float] | None:
        region = side.region
        if w > region.width or h > region.height:
            return None
        gap = self.spacing

        for i, shelf in enumerate(side.shelves):
            if shelf.cursor + w > region.right:
                continue
            last = i == len(side.shelves) - 1
            # Only the bottom shelf can grow, and only into free space.
            if h > shelf.height and (not last or shelf.y + h > region.bottom):
                continue
            if self._collides(side, (shelf.cursor, shelf.y, w, h)):
                continue
            shelf.height = max(shelf.height, h)
            pos = (shelf.cursor, shelf.y)
            shelf.cursor += w + gap
            return pos

        if side.shelves:
            prev = side.shelves[-1]
            y = prev.y + prev.height + gap
        else:
            y = region.y
        if y + h > region.bottom or self._collides(side, (region.x, y, w, h)):
            return None
        side.shelves.append(Shelf(y=y, height=h, cursor=region.x + w + gap))
        return region.x, y

    def _scan(self, side: _Side, w: float, h: float) -> tuple[float, float] | None:
        region = side.region
        step = self.scan_step
        y = region.y
        while y + h <= region.bottom:
            x = region.x
            while x + w <= region.right:
                if not self._collides(side, (x, y, w, h)):
                    return x, y
                x += step
            y += step
        return None

    @staticmethod
    def _collides(side: _Side, rect) -> bool:
        return any(rects_overlap(rect, r) for r in side.rects)
