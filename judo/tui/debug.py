"""Env-gated debug event trace for the TUI.

Set JUDO_TUI_DEBUG=1 to keep recent key/screen events in memory, and
JUDO_TUI_DEBUG_FILE=<path> to also stream them as NDJSON.
"""

import json
import os
import threading
import time
from typing import Optional, TextIO


class DebugLogger:
    """Thread-safe debug event logger with optional file streaming."""

    def __init__(self, app) -> None:
        """Initialize debug logger.

        Args:
            app: The JudoTuiApp instance (used to read the active screen)
        """
        self.app = app
        self._debug_events: list[dict[str, object]] = []
        self._debug_file_path: Optional[str] = None
        self._debug_file: Optional[TextIO] = None
        self._debug_file_lock = threading.Lock()

    def _current_screen(self) -> str:
        machine = getattr(self.app, "machine", None)
        screen = getattr(machine, "screen", None)
        return str(getattr(screen, "value", screen or ""))

    def log(self, *, event: str, data: Optional[dict[str, object]] = None) -> None:
        """Record one event. Does nothing unless JUDO_TUI_DEBUG is set."""
        if not os.getenv("JUDO_TUI_DEBUG"):
            return
        payload: dict[str, object] = {
            "t": float(time.time()),
            "event": str(event),
            "screen": self._current_screen(),
            "data": data or {},
        }
        self._debug_events.append(payload)
        # Prevent unbounded growth during long sessions/tests.
        if len(self._debug_events) > 500:
            self._debug_events = self._debug_events[-250:]

        debug_file_path = os.getenv("JUDO_TUI_DEBUG_FILE")
        if not debug_file_path:
            return
        with self._debug_file_lock:
            try:
                if self._debug_file is None or self._debug_file_path != debug_file_path:
                    self._close_locked()
                    self._debug_file_path = debug_file_path
                    self._debug_file = open(debug_file_path, "a", encoding="utf-8", buffering=1)
                line = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
                self._debug_file.write(line + "\n")
                self._debug_file.flush()
            except OSError:
                # A broken trace file must not take the UI down with it.
                self._close_locked()

    def _close_locked(self) -> None:
        if self._debug_file is not None:
            try:
                self._debug_file.close()
            except OSError:
                pass
        self._debug_file = None
        self._debug_file_path = None

    def close_debug_file(self) -> None:
        """Flush/close the debug file handle (if open)."""
        with self._debug_file_lock:
            self._close_locked()

    @property
    def debug_events(self) -> list[dict[str, object]]:
        """Get the list of debug events (read-only)."""
        return self._debug_events.copy()


__all__ = ["DebugLogger"]
