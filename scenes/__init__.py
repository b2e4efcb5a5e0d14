"""scenes — Pygame screens (packing scene and its drawing helpers)."""
