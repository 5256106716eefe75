"""Accumulates timed events into an asciicast v3 document.

Intervals are relative: each event records the seconds since the previous
*output* event. Markers are navigation points and do not move that anchor.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path

from .asciicast import THEMES, AsciicastDocument, AsciicastEvent, AsciicastHeader, AsciicastTheme

CLEAR_SCREEN = "\x1b[2J\x1b[H"


class EmptyCastError(ValueError):
    """Raised when parsing a cast file with no header line."""


@dataclass(frozen=True)
class BuilderConfig:
    cols: int = 100
    rows: int = 40
    term_type: str = "xterm-256color"
    theme: AsciicastTheme = field(default_factory=lambda: THEMES["tokyo-night"])
    title: str | None = "Claude Code Session"
    # Unix seconds; defaults to the time the header is built.
    timestamp: int | None = None


class AsciicastBuilder:
    """Stateful event accumulator owned by a single conversion."""

    def __init__(self, config: BuilderConfig | None = None) -> None:
        self._config = config or BuilderConfig()
        self._events: list[AsciicastEvent] = []
        self._current_time = 0.0
        self._last_event_time = 0.0

    @property
    def config(self) -> BuilderConfig:
        return self._config

    @property
    def time(self) -> float:
        return self._current_time

    @time.setter
    def time(self, value: float) -> None:
        self._current_time = value

    @property
    def event_count(self) -> int:
        return len(self._events)

    def add_time(self, seconds: float) -> AsciicastBuilder:
        self._current_time += seconds
        return self

    def _interval(self) -> float:
        # The clock may have been set backwards; never emit a negative gap.
        return max(0.0, self._current_time - self._last_event_time)

    def output(self, text: str) -> AsciicastBuilder:
        """Append an output event; empty text is ignored."""
        if text:
            self._events.append((self._interval(), "o", text))
            self._last_event_time = self._current_time
        return self

    def output_line(self, text: str) -> AsciicastBuilder:
        return self.output(text + "\n")

    def output_lines(self, lines: list[str]) -> AsciicastBuilder:
        for line in lines:
            self.output_line(line)
        return self

    def marker(self, label: str) -> AsciicastBuilder:
        self._events.append((self._interval(), "m", label))
        return self

    def output_with_marker(self, text: str, label: str) -> AsciicastBuilder:
        self.marker(label)
        return self.output(text)

    def resize(self, cols: int, rows: int) -> AsciicastBuilder:
        self._events.append((self._interval(), "r", f"{cols}x{rows}"))
        self._last_event_time = self._current_time
        return self

    def blank(self) -> AsciicastBuilder:
        return self.output("\n")

    def blanks(self, count: int) -> AsciicastBuilder:
        for _ in range(count):
            self.blank()
        return self

    def clear(self) -> AsciicastBuilder:
        return self.output(CLEAR_SCREEN)

    def build_header(self) -> AsciicastHeader:
        cfg = self._config
        return AsciicastHeader(
            cols=cfg.cols,
            rows=cfg.rows,
            term_type=cfg.term_type,
            theme=cfg.theme,
            timestamp=cfg.timestamp if cfg.timestamp is not None else int(time.time()),
            title=cfg.title,
        )

    def build(self) -> AsciicastDocument:
        return AsciicastDocument(header=self.build_header(), events=list(self._events))

    def reset(self) -> AsciicastBuilder:
        """Drop all events and rewind the clock; configuration is kept."""
        self._events = []
        self._current_time = 0.0
        self._last_event_time = 0.0
        return self


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def serialize_cast(doc: AsciicastDocument) -> str:
    """Render a document as NDJSON: header line, one line per event."""
    lines = [json.dumps(doc.header.to_dict(), ensure_ascii=False)]
    lines.extend(json.dumps(list(event), ensure_ascii=False) for event in doc.events)
    return "\n".join(lines) + "\n"


def parse_cast(content: str) -> AsciicastDocument:
    """Parse NDJSON cast content; blank lines between events are skipped.

    Raises:
        EmptyCastError: If the content has no header line.
        json.JSONDecodeError: If a line is not valid JSON.
    """
    lines = content.strip().split("\n")
    if not lines[0].strip():
        raise EmptyCastError("Empty cast file")

    header = AsciicastHeader.from_dict(json.loads(lines[0]))
    events: list[AsciicastEvent] = []
    for line in lines[1:]:
        line = line.strip()
        if line:
            interval, code, data = json.loads(line)
            events.append((interval, code, data))
    return AsciicastDocument(header=header, events=events)


def write_cast(doc: AsciicastDocument, path: Path) -> None:
    path.write_text(serialize_cast(doc), encoding="utf-8")


def read_cast(path: Path) -> AsciicastDocument:
    return parse_cast(path.read_text(encoding="utf-8"))
