"""
main.py — Bootstrap

1. Create the app
2. Load tuning and the puzzle catalogue
3. Build the puzzle config (remembered positions included)
4. Load sprites and sounds
5. Start the engine
6. Push the packing scene
7. Run

    python main.py                # the "puzzle" table in data/puzzles.toml
    python main.py small          # any other table
    python main.py random 42      # generated puzzle, seed 42
"""

import sys
from core import tuning
from core.app import App
from core.assets import asset_paths, load_assets
from core.constants import LOGICAL_HEIGHT, LOGICAL_WIDTH
from core.data import PuzzleLoader
from core.dev_log import PuzzleLog
from core.save import save_memory, load_memory
from logic.engine import start_engine
from logic.puzzle_gen import generate_random_config
from scenes.packing_scene import PackingScene

DEFAULT_PUZZLE = "puzzle"
SOUND_KEYS = ("pickup", "drop", "place", "rotate", "error", "complete")


def main(argv: list[str] | None = None):
    args = list(sys.argv[1:] if argv is None else argv)
    name = args[0] if args else DEFAULT_PUZZLE

    tuning.load()
    app = App(title="Backpack", width=LOGICAL_WIDTH, height=LOGICAL_HEIGHT)

    # -- Puzzle definition --
    loader = PuzzleLoader()
    loader.load("data/puzzles.toml")
    slot = tuning.get("save", "slot", 0)

    def on_complete(placed_ids, memory):
        save_memory(name, memory, {pid: True for pid in sorted(placed_ids)}, slot=slot)

    if name == "random":
        seed = int(args[1]) if len(args) > 1 else 0
        name = f"random-{seed}"
        config = generate_random_config(seed, loader.registry, name=name,
                                        memory=load_memory(name, slot),
                                        on_complete=on_complete)
    else:
        config = loader.puzzle(name, memory=load_memory(name, slot),
                               on_complete=on_complete)

    # -- Assets (phase 1) --
    sprite_keys = [d.sprite_key for d in config.items] + [config.background_key]
    sprites = asset_paths(sprite_keys, tuning.get("assets", "sprite_dir", "assets/sprites"), ".png")
    renamed = tuning.section("assets.sprites")
    sprites.update({k: v for k, v in renamed.items() if k in sprites})
    assets = load_assets(
        sprites,
        asset_paths(SOUND_KEYS, tuning.get("assets", "sound_dir", "assets/audio"), ".wav"),
    )

    # -- Engine (phase 2) --
    log = PuzzleLog(echo=tuning.get("debug", "echo_log", False))
    engine = start_engine(config, assets, scaler=app.scaler, log=log)

    def save_progress(eng):
        save_memory(name, eng.snapshot(), slot=slot)

    app.push_scene(PackingScene(engine, on_save=save_progress))
    app.run()


if __name__ == "__main__":
    main()
