"""ui.commands — Command objects emitted by modals.

Modals return these instead of directly mutating the engine.  The
scene reads the list and applies each effect.

Add new command types here whenever a modal needs to trigger a
cross-cutting side-effect.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class CloseModal:
    """Pop the top modal off the stack."""


@dataclass(frozen=True, slots=True)
class ResetPuzzle:
    """Empty the container and restage every item."""


@dataclass(frozen=True, slots=True)
class QuitPuzzle:
    """Leave the packing scene (memory is saved first)."""
    save: bool = True


# Union of every command type — extend as new commands are added.
UICommand = Union[CloseModal, ResetPuzzle, QuitPuzzle]
