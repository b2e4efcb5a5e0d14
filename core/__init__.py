"""core — app shell, configuration, events, logging and storage.

Nothing here knows about grids or shapes; ``logic`` builds the puzzle
on top of it.
"""

__all__ = ["app", "assets", "config", "constants", "data", "dev_log", "events",
           "save", "scaler", "scene", "tuning"]
