"""core/assets.py — First startup phase: load sprites and sounds.

The engine never decodes files itself.  It receives an ``AssetHandles``
bundle and looks handles up by key; a missing key just means "draw a
colored box" or "stay silent".

    assets = load_assets({"bong": "assets/sprites/bong.png"},
                         {"place": "assets/audio/place.wav"})
    engine = start_engine(config, assets)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path

import pygame


@dataclass
class AssetHandles:
    sprites: dict[str, object] = field(default_factory=dict)
    sounds: dict[str, object] = field(default_factory=dict)

    def sprite(self, key: str | None):
        if not key:
            return None
        return self.sprites.get(key)


def asset_paths(keys, directory: str, suffix: str) -> dict[str, str]:
    """``{key: "<directory>/<key><suffix>"}`` for every non-empty key."""
    return {k: f"{directory}/{k}{suffix}" for k in keys if k}


def load_assets(sprite_paths: dict[str, str] | None = None,
                sound_paths: dict[str, str] | None = None,
                base_dir: str | Path = ".") -> AssetHandles:
    """Load every file that exists; report and skip the rest.

    Sprites are converted for fast blitting once a display mode is set.
    Sounds need the mixer, which is skipped when no audio device is
    available.
    """
    base = Path(base_dir)
    handles = AssetHandles()
    missing: list[str] = []

    for key, rel in (sprite_paths or {}).items():
        path = base / rel
        if not path.exists():
            missing.append(key)
            continue
        try:
            img = pygame.image.load(str(path))
            if pygame.display.get_surface() is not None:
                img = img.convert_alpha()
            handles.sprites[key] = img
        except pygame.error as ex:
            print(f"[ASSETS] sprite {key!r} failed to load: {ex}")

    if sound_paths:
        if not pygame.mixer.get_init():
            try:
                pygame.mixer.init()
            except pygame.error as ex:
                print(f"[ASSETS] no audio device ({ex}) — sounds disabled")
                sound_paths = {}
        for key, rel in sound_paths.items():
            path = base / rel
            if not path.exists():
                missing.append(key)
                continue
            try:
                handles.sounds[key] = pygame.mixer.Sound(str(path))
            except pygame.error as ex:
                print(f"[ASSETS] sound {key!r} failed to load: {ex}")

    print(f"[ASSETS] {len(handles.sprites)} sprites, {len(handles.sounds)} sounds")
    if missing:
        print(f"[ASSETS] {len(missing)} missing, using fallbacks: {', '.join(missing)}")
    return handles
