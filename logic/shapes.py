"""logic/shapes.py — Polyomino shapes and rotation.

A shape is a list of rows, each a list of 0/1 ints::

    [[1, 1],
     [1, 1],
     [1, 0]]      # 2 wide, 3 tall, bottom-right cell empty

``shape[y][x]``; ``len(shape)`` is the height and ``len(shape[0])`` the
width.  Cells holding 0 are outside the item: two items' bounding
boxes may overlap as long as their 1-cells do not.

Public API
----------
``rectangular_shape``   — all-ones grid
``rotate_clockwise``    — one 90° clockwise turn
``rotate_steps``        — *k* turns
``shape_for_rotation``  — base shape turned to a rotation in degrees
``shape_cells``         — (dx, dy) offsets of every solid cell
``coerce_shape``        — tidy user input into a rectangular 0/1 grid
``normalize``           — keep an item's width/height/shape consistent
"""

from __future__ import annotations

Shape = list[list[int]]


def rectangular_shape(width: int, height: int) -> Shape:
    return [[1] * width for _ in range(height)]


def rotate_clockwise(shape: Shape) -> Shape:
    """Return a new grid turned 90° clockwise.  Width and height swap."""
    old_h = len(shape)
    old_w = len(shape[0]) if old_h else 0
    new = [[0] * old_h for _ in range(old_w)]
    for y in range(old_h):
        for x in range(old_w):
            new[x][old_h - 1 - y] = shape[y][x]
    return new


def rotate_steps(shape: Shape, steps: int) -> Shape:
    out = [row[:] for row in shape]
    for _ in range(steps % 4):
        out = rotate_clockwise(out)
    return out


def normalize_rotation(rotation) -> int:
    """Snap any angle to the nearest of 0/90/180/270."""
    return int(round(float(rotation) / 90.0)) % 4 * 90


def shape_for_rotation(base: Shape, rotation: int) -> Shape:
    return rotate_steps(base, normalize_rotation(rotation) // 90)


def shape_cells(shape: Shape) -> list[tuple[int, int]]:
    """Offsets ``(dx, dy)`` of every solid cell, row-major."""
    return [(dx, dy)
            for dy, row in enumerate(shape)
            for dx, v in enumerate(row) if v]


def shape_size(shape: Shape) -> tuple[int, int]:
    """``(width, height)`` of the shape's bounding box."""
    return (len(shape[0]) if shape else 0), len(shape)


def coerce_shape(raw) -> Shape | None:
    """Tidy a user-supplied shape.

    Rows may be lists of ints/bools or strings (``"X"``/``"1"``/``"#"``
    solid, anything else empty).  Ragged rows are right-padded with 0.
    Returns ``None`` for an empty or all-zero shape.
    """
    if not raw:
        return None
    rows: list[list[int]] = []
    for row in raw:
        if isinstance(row, str):
            rows.append([1 if ch in "X1#x" else 0 for ch in row])
        else:
            rows.append([1 if v else 0 for v in row])
    width = max((len(r) for r in rows), default=0)
    if width == 0:
        return None
    rows = [r + [0] * (width - len(r)) for r in rows]
    if not any(any(r) for r in rows):
        return None
    return rows


def normalize(item) -> None:
    """Make ``item.width/height`` agree with ``item.shape``.

    No shape → a rectangle is derived from width/height.  A shape whose
    size disagrees with the declared width/height wins: the declared
    values are overwritten.  Idempotent.
    """
    shape = coerce_shape(item.shape)
    if shape is None:
        shape = rectangular_shape(max(1, int(item.width)), max(1, int(item.height)))
    item.shape = shape
    item.width, item.height = shape_size(shape)
