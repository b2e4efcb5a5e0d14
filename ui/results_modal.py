"""ui.results_modal — What got packed.

Shown after the player hands the backpack in.  Lists every item of the
puzzle (packed first), any missing required items, and the score.
Leaving, resetting and going back to packing are ``UICommand``s.
"""

from __future__ import annotations
import pygame

from ui.modal import ButtonModal
from ui.commands import CloseModal, QuitPuzzle, ResetPuzzle, UICommand
from ui.helpers import draw_item_row, ROW_H


class ResultsModal(ButtonModal):
    def __init__(self, result, items, title: str = "Packed!") -> None:
        super().__init__(
            title if result.success else "Something's missing",
            [("Done", QuitPuzzle()),
             ("Keep packing", CloseModal()),
             ("Start over", ResetPuzzle())],
        )
        self.result = result
        self.items = list(items)

    def rows(self) -> list:
        """Packed items first, each group by name."""
        packed = self.result.placed_ids
        return sorted(self.items, key=lambda it: (it.id not in packed, it.name.lower()))

    def on_key(self, key: int) -> list[UICommand]:
        if key == pygame.K_ESCAPE:
            return [CloseModal()]
        if key == pygame.K_BACKSPACE:
            return [ResetPuzzle()]
        return []

    def draw_body(self, surface: pygame.Surface, app, area: pygame.Rect) -> None:
        res = self.result
        x, y = area.x, area.y
        app.draw_text(surface,
                      f"Packed {res.total_packed} of {res.total_available}"
                      f"    Score: {res.score}",
                      x + 14, y, (180, 180, 220), font=app.font)
        y += 22
        if res.missing_required:
            names = {it.id: it.name for it in self.items}
            missing = ", ".join(names.get(i, i) for i in res.missing_required)
            app.draw_text(surface, f"Still need: {missing}", x + 14, y,
                          (245, 101, 101), font=app.font_sm)
            y += 18

        y += 4
        pygame.draw.line(surface, (80, 80, 100), (x + 10, y), (area.right - 10, y))
        y += 8

        for it in self.rows():
            if y + ROW_H > area.bottom:
                app.draw_text(surface, "  ...", x + 28, y, (150, 150, 150), font=app.font_sm)
                break
            draw_item_row(surface, app, x + 4, y, area.width - 8,
                          color=it.color, name=it.name, required=it.required,
                          packed=it.id in res.placed_ids)
            y += ROW_H
