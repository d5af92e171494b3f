"""Judo - ordered to-do lists in the terminal."""

__version__ = "0.1.0"
__description__ = "Keyboard-driven to-do lists backed by SQLite"

from judo.cli import app, main

__all__ = ["app", "main", "__version__"]
