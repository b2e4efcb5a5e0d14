"""core/scaler.py — Screen ↔ logical canvas mapping and resize debouncing.

The game always draws into a fixed logical canvas.  On screen that
canvas is shown at ``scale = min(display_w / logical_w,
display_h / logical_h, 1)``, centred in the window (letterboxed).  It is
never blown up past 1:1.

Pointer events arrive in screen pixels; everything that hit-tests
items must call ``to_logical`` first.

    scaler = CanvasScaler(960, 700)
    scaler.resize(480, 350)
    scaler.to_logical(240, 175)    # → (480.0, 350.0)
"""

from __future__ import annotations


class CanvasScaler:
    def __init__(self, logical_w: int, logical_h: int,
                 display_w: int | None = None, display_h: int | None = None,
                 center: bool = True):
        self.logical_w = logical_w
        self.logical_h = logical_h
        self.center = center
        self.scale = 1.0
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.resize(display_w or logical_w, display_h or logical_h)

    def resize(self, display_w: int, display_h: int) -> None:
        self.display_w = max(1, int(display_w))
        self.display_h = max(1, int(display_h))
        self.scale = min(self.display_w / self.logical_w,
                         self.display_h / self.logical_h, 1.0)
        if self.center:
            self.offset_x = (self.display_w - self.logical_w * self.scale) / 2
            self.offset_y = (self.display_h - self.logical_h * self.scale) / 2
        else:
            self.offset_x = self.offset_y = 0.0

    def to_logical(self, sx: float, sy: float) -> tuple[float, float]:
        return (sx - self.offset_x) / self.scale, (sy - self.offset_y) / self.scale

    def to_screen(self, lx: float, ly: float) -> tuple[float, float]:
        return lx * self.scale + self.offset_x, ly * self.scale + self.offset_y

    def scaled_size(self) -> tuple[int, int]:
        """On-screen size of the logical canvas."""
        return (int(round(self.logical_w * self.scale)),
                int(round(self.logical_h * self.scale)))

    def __repr__(self) -> str:
        return (f"CanvasScaler({self.logical_w}x{self.logical_h} → "
                f"{self.display_w}x{self.display_h}, scale={self.scale:.3f})")


class ResizeDebouncer:
    """Coalesce bursts of resize events into one.

    Every ``request`` cancels the pending timer and restarts it; ``poll``
    returns the latest size once *delay_ms* has passed with no new
    request, and ``None`` otherwise.  Times are caller-supplied ms so
    this works with ``pygame.time.get_ticks()`` or a fake clock.
    """

    def __init__(self, delay_ms: int = 150):
        self.delay_ms = delay_ms
        self._pending: tuple[int, int] | None = None
        self._deadline = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def request(self, size: tuple[int, int], now_ms: int) -> None:
        self._pending = (int(size[0]), int(size[1]))
        self._deadline = now_ms + self.delay_ms

    def poll(self, now_ms: int) -> tuple[int, int] | None:
        if self._pending is None or now_ms < self._deadline:
            return None
        size, self._pending = self._pending, None
        return size

    def cancel(self) -> None:
        self._pending = None
