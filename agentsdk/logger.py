"""Diagnostic logging to stderr with an ``[SDK ...]`` prefix."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, TextIO


@dataclass
class Logger:
    """Writes SDK diagnostics to stderr.

    Debug and info messages appear only when ``verbose`` is true; warnings and
    errors are always written. ``stream`` overrides the destination.
    """

    verbose: bool = False
    stream: TextIO | None = None

    def _emit(self, level: str, fmt: str, args: tuple[Any, ...]) -> None:
        text = fmt % args if args else fmt
        out = self.stream if self.stream is not None else sys.stderr
        out.write(f"[SDK {level}] {text}\n")
        out.flush()

    def debug(self, fmt: str, *args: Any) -> None:
        """Log a debug message when verbose."""
        if self.verbose:
            self._emit("DEBUG", fmt, args)

    def info(self, fmt: str, *args: Any) -> None:
        """Log an informational message when verbose."""
        if self.verbose:
            self._emit("INFO", fmt, args)

    def warning(self, fmt: str, *args: Any) -> None:
        """Log a warning; always written."""
        self._emit("WARNING", fmt, args)

    def error(self, fmt: str, *args: Any) -> None:
        """Log an error; always written."""
        self._emit("ERROR", fmt, args)