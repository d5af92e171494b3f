"""Textual user interface for judo."""
