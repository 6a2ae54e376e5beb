"""Retro 2D game engine pieces: INI settings, trig tables, data packs, input, palettes, players, objects and mods."""

__version__ = "0.1.0"