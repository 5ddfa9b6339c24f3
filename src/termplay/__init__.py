"""Termplay - terminal playlist player with live keyboard controls."""

__version__ = "0.1.0"
