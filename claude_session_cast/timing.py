"""Virtual playback clock for a transcript.

Real gaps between entry timestamps are replayed but capped at the preset's
``max_wait`` (uncapped for the realtime preset). Entries without timestamps
advance the clock by a short per-type pause instead.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from .asciicast import TIMING_PRESETS, TimingConfig
from .parser import get_timestamp


@dataclass(frozen=True)
class Segment:
    """Text to emit at an absolute playback time (seconds)."""

    text: str
    time: float


def resolve_timing_config(
    preset: str | None = None,
    max_wait: float | None = None,
    thinking_pause: float | None = None,
    typing_effect: bool | None = None,
    typing_speed: float | None = None,
) -> TimingConfig:
    """Layer explicit overrides (None = keep) on a named preset.

    Without a known preset the ``default`` preset is the base.
    """
    base = TIMING_PRESETS.get(preset or "default", TIMING_PRESETS["default"])
    overrides = {
        "max_wait": max_wait,
        "thinking_pause": thinking_pause,
        "typing_effect": typing_effect,
        "typing_speed": typing_speed,
    }
    return replace(base, **{k: v for k, v in overrides.items() if v is not None})


class TimingCalculator:
    """Accumulates virtual time entry by entry."""

    def __init__(self, config: TimingConfig) -> None:
        self._config = config
        self._last_timestamp: datetime | None = None
        self._current_time = 0.0

    @property
    def time(self) -> float:
        return self._current_time

    @time.setter
    def time(self, value: float) -> None:
        # Lets the converter resync after splicing in animation segments.
        self._current_time = value

    @property
    def config(self) -> TimingConfig:
        return self._config

    @property
    def has_typing_effect(self) -> bool:
        return self._config.typing_effect and self._config.typing_speed > 0

    def reset(self) -> None:
        self._last_timestamp = None
        self._current_time = 0.0

    def next_entry(self, entry: dict) -> float:
        """Advance the clock for ``entry`` and return the new time."""
        timestamp = get_timestamp(entry)
        previous = self._last_timestamp

        if self._config.uncapped and timestamp and previous:
            self._last_timestamp = timestamp
            self._current_time += max(0.0, (timestamp - previous).total_seconds())
            return self._current_time

        if timestamp and previous:
            # Out-of-order timestamps must not run the clock backwards.
            delta = max(0.0, min((timestamp - previous).total_seconds(), self._config.max_wait))
        else:
            delta = self._default_pause(entry)

        if timestamp:
            self._last_timestamp = timestamp

        self._current_time += delta
        return self._current_time

    def add_thinking_pause(self) -> None:
        self._current_time += self._config.thinking_pause

    def add_pause(self, seconds: float) -> None:
        self._current_time += min(seconds, self._config.max_wait)

    def get_typing_duration(self, text: str) -> float:
        if not self.has_typing_effect:
            return 0.0
        return len(text) / self._config.typing_speed

    def _default_pause(self, entry: dict) -> float:
        entry_type = entry.get("type")
        if entry_type == "user":
            return 0.1 if entry.get("toolUseResult") else 0.3
        if entry_type == "assistant":
            return self._config.thinking_pause
        if entry_type == "system":
            return 0.2
        return 0.1


# ---------------------------------------------------------------------------
# Segment generators
# ---------------------------------------------------------------------------


def generate_typing_segments(
    text: str, start_time: float, chars_per_second: float, chunk_size: int = 3
) -> list[Segment]:
    """Split text into ``chunk_size`` character chunks typed at a fixed rate."""
    if chars_per_second <= 0:
        return [Segment(text=text, time=start_time)]

    per_char = 1 / chars_per_second
    segments: list[Segment] = []
    current_time = start_time
    for i in range(0, len(text), chunk_size):
        chunk = text[i : i + chunk_size]
        segments.append(Segment(text=chunk, time=current_time))
        current_time += len(chunk) * per_char
    return segments


def generate_line_segments(text: str, start_time: float, line_delay: float) -> list[Segment]:
    """One segment per line, ``line_delay`` apart; all but the last keep their newline."""
    lines = text.split("\n")
    return [
        Segment(text=line + "\n" if i < len(lines) - 1 else line, time=start_time + i * line_delay)
        for i, line in enumerate(lines)
    ]


@dataclass(frozen=True)
class TimingOptions:
    """User-facing timing choice: a preset name plus optional overrides."""

    preset: str | None = None
    max_wait: float | None = None
    thinking_pause: float | None = None
    typing_effect: bool | None = None
    typing_speed: float | None = None

    def resolve(self) -> TimingConfig:
        return resolve_timing_config(
            self.preset, self.max_wait, self.thinking_pause, self.typing_effect, self.typing_speed
        )
