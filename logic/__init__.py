"""logic — Puzzle engine package.

Engine core (no pygame imports, runs headless)
-----------------------------------------------
grid         — container mask + occupancy, mark/clear item cells
shapes       — polyomino shapes, clockwise rotation, normalisation
placement    — validate / place / retract / rotate, grid ↔ pixel geometry
staging      — shelf layout of unplaced items beside the container
interaction  — pointer drag / hover / drop state machine
persistence  — memory snapshot and restore
engine       — PackingEngine: one session wiring all of the above
puzzle_gen   — seeded random puzzle configurations

Presentation side
-----------------
input_manager — raw pygame input → intents and pointer events
audio_cues    — event-bus subscriber that plays sound handles
"""
