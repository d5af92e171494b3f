"""Core logic: text editing, selection repair, ordered collections, storage and config."""
