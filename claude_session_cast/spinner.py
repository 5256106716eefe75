"""Status spinner with a shimmering verb, shown while Claude is working."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .ansi import RESET, erase_line, fg, move_to
from .timing import Segment
from .verbs import VERBS

# Ping-pong rotation: grows then shrinks.
SPINNER_CHARS: tuple[str, ...] = ("·", "✢", "✳", "✻", "✽", "✻", "✳", "✢")

SHIMMER_BASE_COLOR = "#d77757"
SHIMMER_HIGHLIGHT_COLOR = "#eb9f7f"
DEFAULT_FRAME_INTERVAL_MS = 200
DEFAULT_SHIMMER_WINDOW_SIZE = 3

_KNUTH_MULTIPLIER = 2654435761


@dataclass(frozen=True)
class SpinnerConfig:
    frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS
    shimmer_window_size: int = DEFAULT_SHIMMER_WINDOW_SIZE
    base_color: str = SHIMMER_BASE_COLOR
    highlight_color: str = SHIMMER_HIGHLIGHT_COLOR


DEFAULT_SPINNER_CONFIG = SpinnerConfig()


class SpinnerMode(Enum):
    """Where the spinner lives.

    INLINE spinners are drawn in the content flow and scroll away; FIXED
    spinners sit on a reserved row outside the scroll region.
    """

    OFF = "off"
    INLINE = "inline"
    FIXED = "fixed"


@dataclass
class SpinnerState:
    mode: SpinnerMode = SpinnerMode.OFF
    verb: str | None = None
    row: int | None = None

    @property
    def active(self) -> bool:
        return self.mode is not SpinnerMode.OFF

    def start(self, verb: str, row: int | None = None) -> None:
        self.mode = SpinnerMode.FIXED if row is not None else SpinnerMode.INLINE
        self.verb = verb
        self.row = row

    def stop(self) -> None:
        self.mode = SpinnerMode.OFF
        self.verb = None
        self.row = None


def to_int32(value: int) -> int:
    """Wrap an integer to a signed 32-bit value."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value >= 0x80000000 else value


def select_verb(verbs: Sequence[str] = VERBS, seed: int = 0) -> str:
    """Deterministically pick a verb for ``seed`` (Knuth multiplicative hash)."""
    if not verbs:
        return "Processing"
    # +1 keeps seed 0 away from index 0.
    index = abs(to_int32((seed + 1) * _KNUTH_MULTIPLIER)) % len(verbs)
    return verbs[index]


def get_shimmer_window(frame_index: int, text_length: int, window_size: int) -> tuple[int, int]:
    """Highlighted ``[start, end)`` range; the window slides fully off the end."""
    position = frame_index % (text_length + window_size)
    return max(0, position - window_size + 1), min(text_length, position + 1)


def apply_shimmer(text: str, frame_index: int, config: SpinnerConfig = DEFAULT_SPINNER_CONFIG) -> str:
    start, end = get_shimmer_window(frame_index, len(text), config.shimmer_window_size)
    painted = "".join(
        fg(config.highlight_color if start <= i < end else config.base_color) + char
        for i, char in enumerate(text)
    )
    return painted + RESET


def render_spinner_frame(verb: str, frame_index: int, config: SpinnerConfig = DEFAULT_SPINNER_CONFIG) -> str:
    char = SPINNER_CHARS[frame_index % len(SPINNER_CHARS)]
    return fg(config.base_color) + char + RESET + " " + apply_shimmer(verb + "…", frame_index, config)


def generate_status_spinner_segments(
    verb: str,
    start_time: float,
    duration: float,
    config: SpinnerConfig = DEFAULT_SPINNER_CONFIG,
    row: int | None = None,
) -> list[Segment]:
    """Frames covering ``duration`` seconds; always at least one frame.

    With ``row`` each frame is drawn at that fixed row, otherwise it
    overwrites the current line.
    """
    interval = config.frame_interval_ms / 1000
    total_frames = max(1, math.floor(duration / interval))

    segments = []
    for i in range(total_frames):
        frame = render_spinner_frame(verb, i, config)
        lead = move_to(row, 1) if row is not None else "\r"
        segments.append(Segment(text=lead + erase_line() + frame, time=start_time + i * interval))
    return segments


def generate_spinner_clear(row: int | None = None) -> str:
    if row is not None:
        return move_to(row, 1) + erase_line()
    return "\r" + erase_line()
