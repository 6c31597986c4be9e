"""Idol agency simulation: weekly charts, music shows and a talent agency economy."""

__version__ = "1.0.0"
