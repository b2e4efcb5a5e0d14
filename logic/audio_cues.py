"""logic/audio_cues.py — Sound effects driven by engine events.

Subscribes to the event bus instead of hooking engine methods.  Sound
handles only need a ``play()`` method (``pygame.mixer.Sound`` or any
stand-in), so this module does not import pygame.

Which sound plays for which event comes from ``[audio]`` in
``data/tuning.toml``.
"""

from __future__ import annotations

from core import tuning
from core.events import EventBus

# event name → tuning key → default sound key
_CUES = {
    "ItemPickedUp":      ("pickup", "pickup"),
    "ItemPlaced":        ("place", "place"),
    "ItemRotated":       ("rotate", "rotate"),
    "PlacementRejected": ("reject", "error"),
    "RotationBlocked":   ("reject", "error"),
    "PuzzleCompleted":   ("complete", "complete"),
}


class AudioCues:
    def __init__(self, bus: EventBus, sounds: dict | None, volume: float | None = None):
        self.sounds = sounds or {}
        self.volume = tuning.get("audio", "volume", 0.7) if volume is None else volume
        self.enabled = True
        self.played: list[str] = []      # history, newest last
        for event_name in _CUES:
            bus.subscribe(event_name, self._on_event)
        bus.subscribe("ItemDropped", self._on_drop)

    def play(self, key: str) -> bool:
        handle = self.sounds.get(key)
        if handle is None or not self.enabled:
            return False
        if hasattr(handle, "set_volume"):
            handle.set_volume(self.volume)
        handle.play()
        self.played.append(key)
        return True

    def _on_event(self, event) -> None:
        tuning_key, default = _CUES[type(event).__name__]
        self.play(tuning.get("audio", tuning_key, default))

    def _on_drop(self, event) -> None:
        # Successful drops already got the "place" cue.
        if not event.placed:
            self.play(tuning.get("audio", "drop", "drop"))
