"""Playback session core for the Elite media player."""

__version__ = "0.1.0"
