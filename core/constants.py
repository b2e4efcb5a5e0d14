"""core/constants.py — Shared constants used across the codebase.

Centralises magic numbers so there's exactly one place to change them.

Unit System
-----------
Two coordinate spaces exist and must never be mixed:

    Grid space      cells   integer (x, y), origin at the container's
                            top-left cell
    Logical space   px      the fixed-size design canvas every item
                            position is stored in

Screen pixels are a third, transient space.  They only ever appear in
pointer events and are converted to logical space by ``CanvasScaler``
before anything else looks at them.

Rotation is in degrees, always one of ``ROTATIONS``.
"""

# ── Logical canvas ──────────────────────────────────────────────────
LOGICAL_WIDTH = 960
LOGICAL_HEIGHT = 700

# ── Container defaults ──────────────────────────────────────────────
DEFAULT_GRID_WIDTH = 5
DEFAULT_GRID_HEIGHT = 6
DEFAULT_CELL_SIZE = 50
DEFAULT_STAGING_PADDING = 20

# ── Rotation ────────────────────────────────────────────────────────
ROTATIONS = (0, 90, 180, 270)

# ── Palette ─────────────────────────────────────────────────────────
DEFAULT_ITEM_COLOR = (159, 122, 234)     # #9f7aea
BACKGROUND_COLOR = (24, 26, 32)
CONTAINER_COLOR = (255, 255, 255)
CONTAINER_BORDER = (74, 85, 104)         # #4a5568
GRID_LINE_COLOR = (226, 232, 240)        # #e2e8f0
BLOCKED_CELL_COLOR = (60, 62, 70)
ITEM_BORDER_COLOR = (45, 55, 72)         # #2d3748
LABEL_COLOR = (255, 255, 255)
GHOST_VALID = (72, 187, 120)             # #48bb78
GHOST_INVALID = (245, 101, 101)          # #f56565
HOVER_OUTLINE = (255, 255, 140)
