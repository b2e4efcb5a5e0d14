"""ui.helpers — Shared drawing utilities for panels and overlays."""

from __future__ import annotations
import pygame


def draw_overlay(surface: pygame.Surface, alpha: int = 200) -> None:
    """Full-screen semi-transparent dark overlay."""
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, alpha))
    surface.blit(overlay, (0, 0))


def draw_title_bar(
    surface: pygame.Surface, app,
    x: int, y: int, w: int, text: str,
) -> None:
    """Draw a 30 px title bar at the top of a panel."""
    pygame.draw.rect(surface, (50, 50, 75), (x, y, w, 30))
    app.draw_text(surface, text, x + 12, y + 7,
                  (200, 200, 255), font=app.font_lg)


def draw_tooltip(surface: pygame.Surface, app, x: int, y: int,
                 lines: list[str], width: int = 220) -> pygame.Rect:
    """Small boxed text block kept inside the surface."""
    line_h = 16
    h = line_h * len(lines) + 8
    sw, sh = surface.get_size()
    x = max(4, min(x, sw - width - 4))
    y = max(4, min(y, sh - h - 4))
    rect = pygame.Rect(x, y, width, h)
    box = pygame.Surface(rect.size, pygame.SRCALPHA)
    box.fill((20, 20, 30, 220))
    surface.blit(box, rect.topleft)
    pygame.draw.rect(surface, (140, 140, 180), rect, 1)
    for i, line in enumerate(lines):
        color = (255, 255, 200) if i == 0 else (200, 200, 210)
        app.draw_text(surface, line, x + 6, y + 4 + i * line_h,
                      color, font=app.font_sm)
    return rect


# ── item rows ──────────────────────────────────────────────────────

ROW_H = 24  # pixel height of one item row


def draw_item_row(
    surface: pygame.Surface,
    app,
    x: int, y: int, w: int,
    *,
    color: tuple,
    name: str,
    required: bool = False,
    packed: bool = True,
    selected: bool = False,
) -> pygame.Rect:
    """Draw a single item row.  Returns the row ``Rect`` for hit-testing."""
    row_rect = pygame.Rect(x, y - 1, w, ROW_H - 2)

    if selected:
        pygame.draw.rect(surface, (60, 60, 90), row_rect)

    pygame.draw.rect(surface, color, (x + 8, y + 3, 14, 14))
    pygame.draw.rect(surface, (20, 20, 20), (x + 8, y + 3, 14, 14), 1)

    tag = "  [required]" if required else ""
    text_color = (220, 220, 220) if packed else (230, 120, 120)
    app.draw_text(surface, f"{name}{tag}", x + 30, y + 2,
                  text_color, font=app.font_sm)

    return row_rect
