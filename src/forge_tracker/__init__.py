"""Forge Tracker: time invested per activity domain, turned into XP and levels."""

__version__ = "1.0.0"
