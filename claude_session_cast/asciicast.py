"""asciicast v3 document types, terminal palettes and timing presets.

See https://docs.asciinema.org/manual/asciicast/v3/ for the file format.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Literal, Tuple

# ---------------------------------------------------------------------------
# Terminal theme
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AsciicastTheme:
    """Terminal colours embedded in the header (palette: 16 colours, ``:``-joined)."""

    fg: str
    bg: str
    palette: str

    def to_dict(self) -> dict:
        return {"fg": self.fg, "bg": self.bg, "palette": self.palette}

    @classmethod
    def from_dict(cls, data: dict) -> AsciicastTheme:
        return cls(fg=data["fg"], bg=data["bg"], palette=data["palette"])


THEMES: dict[str, AsciicastTheme] = {
    "tokyo-night": AsciicastTheme(
        fg="#a9b1d6",
        bg="#1a1b26",
        palette=(
            "#15161e:#f7768e:#9ece6a:#e0af68:#7aa2f7:#bb9af7:#7dcfff:#a9b1d6:"
            "#414868:#f7768e:#9ece6a:#e0af68:#7aa2f7:#bb9af7:#7dcfff:#c0caf5"
        ),
    ),
    "tokyo-storm": AsciicastTheme(
        fg="#a9b1d6",
        bg="#24283b",
        palette=(
            "#1d202f:#f7768e:#9ece6a:#e0af68:#7aa2f7:#bb9af7:#7dcfff:#a9b1d6:"
            "#414868:#f7768e:#9ece6a:#e0af68:#7aa2f7:#bb9af7:#7dcfff:#c0caf5"
        ),
    ),
    "dracula": AsciicastTheme(
        fg="#f8f8f2",
        bg="#282a36",
        palette=(
            "#21222c:#ff5555:#50fa7b:#f1fa8c:#bd93f9:#ff79c6:#8be9fd:#f8f8f2:"
            "#6272a4:#ff6e6e:#69ff94:#ffffa5:#d6acff:#ff92df:#a4ffff:#ffffff"
        ),
    ),
    "nord": AsciicastTheme(
        fg="#d8dee9",
        bg="#2e3440",
        palette=(
            "#3b4252:#bf616a:#a3be8c:#ebcb8b:#81a1c1:#b48ead:#88c0d0:#e5e9f0:"
            "#4c566a:#bf616a:#a3be8c:#ebcb8b:#81a1c1:#b48ead:#8fbcbb:#eceff4"
        ),
    ),
    "catppuccin-mocha": AsciicastTheme(
        fg="#cdd6f4",
        bg="#1e1e2e",
        palette=(
            "#45475a:#f38ba8:#a6e3a1:#f9e2af:#89b4fa:#f5c2e7:#94e2d5:#bac2de:"
            "#585b70:#f38ba8:#a6e3a1:#f9e2af:#89b4fa:#f5c2e7:#94e2d5:#a6adc8"
        ),
    ),
}


# ---------------------------------------------------------------------------
# Header, events and document
# ---------------------------------------------------------------------------

EventCode = Literal["o", "m", "r"]

# (interval since previous output event, code, payload)
AsciicastEvent = Tuple[float, str, str]


@dataclass
class AsciicastHeader:
    """First line of an asciicast v3 file."""

    cols: int
    rows: int
    term_type: str | None = None
    theme: AsciicastTheme | None = None
    timestamp: int | None = None
    title: str | None = None
    env: dict[str, str] | None = None
    version: int = 3

    def to_dict(self) -> dict:
        """Serialize to the JSON header shape, omitting unset fields."""
        term: dict = {"cols": self.cols, "rows": self.rows}
        if self.term_type is not None:
            term["type"] = self.term_type
        if self.theme is not None:
            term["theme"] = self.theme.to_dict()

        result: dict = {"version": self.version, "term": term}
        if self.timestamp is not None:
            result["timestamp"] = self.timestamp
        if self.title is not None:
            result["title"] = self.title
        if self.env is not None:
            result["env"] = dict(self.env)
        return result

    @classmethod
    def from_dict(cls, data: dict) -> AsciicastHeader:
        term = data.get("term", {})
        theme = term.get("theme")
        return cls(
            cols=term["cols"],
            rows=term["rows"],
            term_type=term.get("type"),
            theme=AsciicastTheme.from_dict(theme) if theme else None,
            timestamp=data.get("timestamp"),
            title=data.get("title"),
            env=data.get("env"),
            version=data.get("version", 3),
        )


@dataclass
class AsciicastDocument:
    header: AsciicastHeader
    events: list[AsciicastEvent] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Timing presets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimingConfig:
    """Pacing parameters.

    ``max_wait`` is the cap applied to real gaps between entries, in seconds.
    ``math.inf`` means gaps are replayed uncapped (real time).
    """

    max_wait: float = 3.0
    thinking_pause: float = 0.8
    typing_effect: bool = True
    typing_speed: float = 60.0

    @property
    def uncapped(self) -> bool:
        return math.isinf(self.max_wait)


TIMING_PRESETS: dict[str, TimingConfig] = {
    "speedrun": TimingConfig(max_wait=2, thinking_pause=0.3, typing_effect=False, typing_speed=80),
    "default": TimingConfig(max_wait=3, thinking_pause=0.8, typing_effect=True, typing_speed=60),
    "realtime": TimingConfig(max_wait=math.inf, thinking_pause=0, typing_effect=False, typing_speed=0),
}


# ---------------------------------------------------------------------------
# Markers
# ---------------------------------------------------------------------------

MarkerMode = Literal["all", "user", "tools", "none"]
MARKER_MODES: tuple[str, ...] = ("all", "user", "tools", "none")


@dataclass(frozen=True)
class MarkerOptions:
    mode: MarkerMode = "all"
    label_length: int = 30
