from __future__ import annotations

import html
import re
from dataclasses import dataclass
from typing import List, Literal

import ipywidgets as w


Level = Literal["info", "warning", "error"]

_COLORS = {
    "error": "#b00020",
    "warning": "#b26a00",
    "info": "#222222",
}


@dataclass
class _Entry:
    level: Level
    message: str
    count: int = 1


class HtmlLog:
    """
    Log panel rendered into a single HTML widget.

    The instance is callable, so it can be handed directly to
    :class:`~fourier_epicycles.animation.engine.AnimationEngine` as its ``log``
    sink. Lines are classified by prefix (``WARNING:``, ``ERROR:`` ...).

    Features:
      - severity coloring: warnings in orange, errors in red
      - consecutive identical messages are coalesced (shows xN)
      - bounded history (oldest entries dropped beyond max_entries)
    """

    def __init__(self, *, title: str | None = None, height_px: int = 160, max_entries: int = 500) -> None:
        self._entries: List[_Entry] = []
        self._height_px = int(height_px)
        self._max_entries = int(max_entries)
        self.widget = w.HTML()
        if title:
            self.panel = w.VBox([w.HTML(f"<b>{html.escape(str(title))}</b>"), self.widget])
        else:
            self.panel = self.widget
        self.clear()

    @property
    def entries(self) -> List[tuple]:
        """``(level, message, count)`` tuples, oldest first."""
        return [(e.level, e.message, e.count) for e in self._entries]

    def clear(self) -> None:
        self._entries.clear()
        self._render()

    def info(self, message: str) -> None:
        self._add("info", message)

    def warning(self, message: str) -> None:
        self._add("warning", message)

    def error(self, message: str) -> None:
        self._add("error", message)

    def write(self, message: str) -> None:
        """Route each line of ``message`` (HTML tags stripped) by its prefix."""
        plain = re.sub(r"<[^>]+>", "", "" if message is None else str(message))
        for line in plain.splitlines() or [""]:
            self._add(self._classify(line), line)

    def __call__(self, message: str) -> None:
        self.write(message)

    # -------------------------
    # Internals
    # -------------------------
    @staticmethod
    def _classify(line: str) -> Level:
        s = (line or "").lstrip()
        if s.startswith(("ERROR:", "Error:", "Exception:", "Traceback")):
            return "error"
        if s.startswith(("WARNING:", "Warning:", "WARN")):
            return "warning"
        return "info"

    def _add(self, level: Level, message: str) -> None:
        msg = "" if message is None else str(message)

        last = self._entries[-1] if self._entries else None
        if last is not None and last.level == level and last.message == msg:
            last.count += 1
        else:
            self._entries.append(_Entry(level=level, message=msg))
            if len(self._entries) > self._max_entries:
                del self._entries[: len(self._entries) - self._max_entries]
        self._render()

    def _render(self) -> None:
        rows = []
        for e in self._entries:
            suffix = f" (x{e.count})" if e.count > 1 else ""
            rows.append(
                f"<div style='color:{_COLORS[e.level]}; white-space:pre-wrap; font-family:monospace;'>"
                f"{html.escape(e.message + suffix)}</div>"
            )
        inner = "".join(rows) if rows else "<div style='color:#666;'>Log is empty.</div>"
        self.widget.value = (
            f"<div style='border:1px solid #ddd; padding:6px; height:{self._height_px}px; "
            f"overflow-y:auto; background:#fff;'>{inner}</div>"
        )
