"""scenes/packing_draw.py — Rendering helpers for the packing scene.

All pure-draw functions live here so that PackingScene.draw() stays thin.
Every function receives the data it needs as parameters — no implicit
coupling to the scene object beyond what is explicitly passed.

Everything is drawn in logical px; the app scales the finished frame.
"""

from __future__ import annotations
import pygame
from core.app import App
from core.constants import (
    BLOCKED_CELL_COLOR, CONTAINER_BORDER, CONTAINER_COLOR, GHOST_INVALID,
    GHOST_VALID, GRID_LINE_COLOR, HOVER_OUTLINE, ITEM_BORDER_COLOR, LABEL_COLOR,
)
from logic.engine import PackingEngine
from ui.helpers import draw_tooltip


# ── Background & container ─────────────────────────────────────────

def draw_background(surface: pygame.Surface, engine: PackingEngine):
    assets = engine.assets
    key = engine.config.background_key
    img = assets.sprite(key) if assets is not None else None
    if img is None:
        return
    if img.get_size() != surface.get_size():
        img = pygame.transform.smoothscale(img, surface.get_size())
    surface.blit(img, (0, 0))


def draw_container(surface: pygame.Surface, engine: PackingEngine):
    grid = engine.grid
    cell = engine.placement.cell_size
    ox, oy, w, h = engine.placement.container_rect()
    ox, oy = int(ox), int(oy)

    pygame.draw.rect(surface, CONTAINER_COLOR, (ox, oy, w, h))
    for y in range(grid.height):
        for x in range(grid.width):
            if not grid.is_open(x, y):
                pygame.draw.rect(surface, BLOCKED_CELL_COLOR,
                                 (ox + x * cell, oy + y * cell, cell, cell))

    for x in range(1, grid.width):
        pygame.draw.line(surface, GRID_LINE_COLOR,
                         (ox + x * cell, oy), (ox + x * cell, oy + h - 1))
    for y in range(1, grid.height):
        pygame.draw.line(surface, GRID_LINE_COLOR,
                         (ox, oy + y * cell), (ox + w - 1, oy + y * cell))
    pygame.draw.rect(surface, CONTAINER_BORDER, (ox - 2, oy - 2, w + 4, h + 4), 3)


# ── Items ───────────────────────────────────────────────────────────

def _item_sprite(engine: PackingEngine, item, cell: int):
    """Sprite scaled to the item's unrotated box, then turned clockwise."""
    assets = engine.assets
    img = assets.sprite(item.sprite_key) if assets is not None else None
    if img is None:
        return None
    size = (item.original_width * cell, item.original_height * cell)
    if img.get_size() != size:
        img = pygame.transform.smoothscale(img, size)
    if item.rotation:
        # pygame rotates counter-clockwise for positive angles
        img = pygame.transform.rotate(img, -item.rotation)
    return img


def draw_item(surface: pygame.Surface, app: App, engine: PackingEngine, item,
              lifted: bool = False):
    cell = engine.placement.cell_size
    px, py = int(item.pixel_x), int(item.pixel_y)

    if lifted:
        shadow = pygame.Surface((cell, cell), pygame.SRCALPHA)
        shadow.fill((0, 0, 0, 70))
        for dx, dy in item.cells():
            surface.blit(shadow, (px + dx * cell + 5, py + dy * cell + 5))

    img = _item_sprite(engine, item, cell)
    if img is not None:
        surface.blit(img, (px, py))
        return

    # Fallback: colored cells plus a name label
    for dx, dy in item.cells():
        rect = (px + dx * cell, py + dy * cell, cell, cell)
        pygame.draw.rect(surface, item.color, rect)
        pygame.draw.rect(surface, ITEM_BORDER_COLOR, rect, 2)
    label = app.font_sm.render(item.name, True, LABEL_COLOR)
    w, h = item.pixel_size(cell)
    if label.get_width() > w - 4 and item.height > item.width:
        label = pygame.transform.rotate(label, 90)
    surface.blit(label, label.get_rect(center=(px + w // 2, py + h // 2)))


def draw_items(surface: pygame.Surface, app: App, engine: PackingEngine):
    dragged = engine.controller.dragged
    for item in engine.controller.draw_order():
        draw_item(surface, app, engine, item, lifted=item is dragged)


# ── Drag feedback ───────────────────────────────────────────────────

def draw_ghost(surface: pygame.Surface, engine: PackingEngine):
    """Snapped landing cells of the dragged item, green or red."""
    preview = engine.controller.preview()
    item = engine.controller.dragged
    if preview is None or item is None:
        return
    gx, gy, valid = preview
    cell = engine.placement.cell_size
    color = GHOST_VALID if valid else GHOST_INVALID
    tile = pygame.Surface((cell, cell), pygame.SRCALPHA)
    tile.fill((*color, 90))
    for dx, dy in item.cells():
        x, y = engine.placement.grid_to_pixel(gx + dx, gy + dy)
        surface.blit(tile, (int(x), int(y)))
        pygame.draw.rect(surface, color, (int(x), int(y), cell, cell), 2)


def draw_hover(surface: pygame.Surface, engine: PackingEngine):
    ctrl = engine.controller
    item = ctrl.hovered
    if item is None or ctrl.is_dragging:
        return
    x, y, w, h = item.rect(engine.placement.cell_size)
    pygame.draw.rect(surface, HOVER_OUTLINE, (int(x) - 2, int(y) - 2, w + 4, h + 4), 2)


def draw_item_tooltip(surface: pygame.Surface, app: App, engine: PackingEngine):
    ctrl = engine.controller
    item = ctrl.hovered
    if item is None or ctrl.is_dragging:
        return
    lines = [item.name, f"{item.width}x{item.height}"
             + ("  (required)" if item.required else "")]
    if item.description:
        lines.append(item.description)
    lx, ly = ctrl.pointer
    draw_tooltip(surface, app, int(lx) + 16, int(ly) + 16, lines)


# ── HUD ─────────────────────────────────────────────────────────────

def draw_hud(surface: pygame.Surface, app: App, engine: PackingEngine):
    placed, total = engine.counts()
    sw, sh = surface.get_size()
    app.draw_text_bg(surface, f"Packed {placed} / {total}", 12, 10,
                     (255, 255, 255), font=app.font_lg)

    done_color = (120, 230, 140) if engine.can_finish else (110, 110, 120)
    app.draw_text_bg(surface, "[Enter] Done", sw - 130, 10, done_color)

    app.draw_text_bg(surface,
                     "Drag to pack   [R/RMB] Rotate   [Backspace] Reset   [F11] Fullscreen",
                     12, sh - 22, (170, 170, 190), font=app.font_sm)


def draw_log_overlay(surface: pygame.Surface, app: App, engine: PackingEngine,
                     n: int = 12):
    """Most recent PuzzleLog entries, newest at the bottom."""
    entries = engine.log.recent(n)
    if not entries:
        return
    sw, sh = surface.get_size()
    y = sh - 40 - len(entries) * 14
    for e in entries:
        app.draw_text_bg(surface, f"{e['cat']:>8} {e['item']:<14} {e['msg']}",
                         12, y, (200, 200, 150), font=app.font_sm)
        y += 14
