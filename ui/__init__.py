"""ui — Modal UI framework.

Provides a ``ModalStack`` that manages layered modal overlays (results,
prompts, …).  Each modal is a self-contained ``Modal`` subclass with its
own update / input / draw.  ``Toast`` shows one transient message line.
"""

from ui.modal import ButtonModal, Modal, ModalStack
from ui.commands import CloseModal, QuitPuzzle, ResetPuzzle, UICommand
from ui.results_modal import ResultsModal
from ui.toast import Toast

__all__ = [
    "ButtonModal", "Modal", "ModalStack",
    "CloseModal", "QuitPuzzle", "ResetPuzzle", "UICommand",
    "ResultsModal", "Toast",
]
