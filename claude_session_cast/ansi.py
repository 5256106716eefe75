"""ANSI escape sequences, 24-bit colour helpers and plain-text layout."""

from __future__ import annotations

import re
from dataclasses import dataclass

_ESC = "\x1b"
_CSI = f"{_ESC}["

_ANSI_SGR_RE = re.compile(r"\x1b\[[0-9;]*m")
_WHITESPACE_RE = re.compile(r"\s+")

# ---------------------------------------------------------------------------
# SGR styles
# ---------------------------------------------------------------------------

RESET = f"{_CSI}0m"

BOLD = f"{_CSI}1m"
DIM = f"{_CSI}2m"
ITALIC = f"{_CSI}3m"
UNDERLINE = f"{_CSI}4m"
STRIKETHROUGH = f"{_CSI}9m"

# Bold and dim share the "normal intensity" reset.
RESET_BOLD = f"{_CSI}22m"
RESET_DIM = f"{_CSI}22m"
RESET_ITALIC = f"{_CSI}23m"
RESET_UNDERLINE = f"{_CSI}24m"
RESET_STRIKETHROUGH = f"{_CSI}29m"


# ---------------------------------------------------------------------------
# Box drawing glyphs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BoxChars:
    """Glyphs used for rules, borders, bullets and result connectors."""

    horizontal: str = "─"
    vertical: str = "│"
    top_left: str = "┌"
    top_right: str = "┐"
    bottom_left: str = "└"
    bottom_right: str = "┘"
    tee_right: str = "├"
    tee_left: str = "┤"
    tee_down: str = "┬"
    tee_up: str = "┴"
    cross: str = "┼"

    round_top_left: str = "╭"
    round_top_right: str = "╮"
    round_bottom_left: str = "╰"
    round_bottom_right: str = "╯"

    double_horizontal: str = "═"
    double_vertical: str = "║"

    bullet: str = "●"
    bullet_hollow: str = "○"
    check: str = "✓"
    cross_mark: str = "✗"
    arrow: str = "→"
    arrow_down: str = "↓"
    arrow_subagent: str = "⤵"
    indent: str = "⎿"


BOX = BoxChars()


# ---------------------------------------------------------------------------
# Colour
# ---------------------------------------------------------------------------


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Parse ``#rrggbb`` (leading ``#`` optional) into an RGB tuple."""
    clean = hex_color.replace("#", "")
    return int(clean[0:2], 16), int(clean[2:4], 16), int(clean[4:6], 16)


def fg(hex_color: str) -> str:
    r, g, b = hex_to_rgb(hex_color)
    return f"{_CSI}38;2;{r};{g};{b}m"


def bg(hex_color: str) -> str:
    r, g, b = hex_to_rgb(hex_color)
    return f"{_CSI}48;2;{r};{g};{b}m"


def colorize(text: str, hex_color: str) -> str:
    """Wrap text in a foreground colour followed by a full reset."""
    return f"{fg(hex_color)}{text}{RESET}"


def style(
    text: str,
    *,
    fg: str | None = None,
    bg: str | None = None,
    bold: bool = False,
    dim: bool = False,
    italic: bool = False,
) -> str:
    """Apply attributes and colours to text, terminated by a full reset."""
    prefix = ""
    if bold:
        prefix += BOLD
    if dim:
        prefix += DIM
    if italic:
        prefix += ITALIC
    if fg:
        prefix += _fg(fg)
    if bg:
        prefix += _bg(bg)
    return f"{prefix}{text}{RESET}"


# style() shadows the colour helpers with its keyword names.
_fg = fg
_bg = bg


# ---------------------------------------------------------------------------
# Text layout
# ---------------------------------------------------------------------------


def word_wrap(text: str, width: int) -> list[str]:
    """Wrap text to ``width`` columns.

    Each ``\\n``-separated paragraph is wrapped independently. Paragraphs that
    already fit are kept verbatim; otherwise words are packed greedily and any
    word wider than ``width`` is hard-split into ``width``-sized chunks.
    A non-positive width disables wrapping.
    """
    if width <= 0:
        return [text]

    lines: list[str] = []
    for paragraph in text.split("\n"):
        if len(paragraph) <= width:
            lines.append(paragraph)
            continue

        current = ""
        for word in _WHITESPACE_RE.split(paragraph):
            if not word:
                continue
            if len(word) > width:
                if current:
                    lines.append(current)
                    current = ""
                for i in range(0, len(word), width):
                    lines.append(word[i : i + width])
                continue

            if not current:
                current = word
            elif len(current) + 1 + len(word) <= width:
                current += " " + word
            else:
                lines.append(current)
                current = word

        if current:
            lines.append(current)

    return lines


def truncate(text: str, max_length: int) -> str:
    """Shorten text to ``max_length`` characters, ending with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def indent(text: str, spaces: int) -> str:
    prefix = " " * spaces
    return "\n".join(prefix + line for line in text.split("\n"))


def strip_ansi(text: str) -> str:
    """Remove SGR escape sequences."""
    return _ANSI_SGR_RE.sub("", text)


def visible_length(text: str) -> int:
    return len(strip_ansi(text))


def horizontal_rule(width: int, color: str | None = None) -> str:
    line = BOX.horizontal * width
    return colorize(line, color) if color else line


# ---------------------------------------------------------------------------
# Cursor and scroll region control (1-indexed)
# ---------------------------------------------------------------------------


def save_cursor() -> str:
    return f"{_CSI}s"


def restore_cursor() -> str:
    return f"{_CSI}u"


def move_to(row: int, col: int = 1) -> str:
    return f"{_CSI}{row};{col}H"


def move_to_col(col: int) -> str:
    return f"{_CSI}{col}G"


def erase_to_end_of_line() -> str:
    return f"{_CSI}K"


def erase_line() -> str:
    return f"{_CSI}2K"


def set_scroll_region(top: int, bottom: int) -> str:
    return f"{_CSI}{top};{bottom}r"


def reset_scroll_region() -> str:
    return f"{_CSI}r"


# ---------------------------------------------------------------------------
# Boxes
# ---------------------------------------------------------------------------


def box(
    content: str,
    width: int = 80,
    border_color: str | None = None,
    rounded: bool = False,
) -> str:
    """Draw a bordered box around wrapped content.

    The inner text area is ``width - 4`` columns (two borders, two padding).
    """
    inner_width = width - 4

    if rounded:
        tl, tr = BOX.round_top_left, BOX.round_top_right
        bl, br = BOX.round_bottom_left, BOX.round_bottom_right
    else:
        tl, tr = BOX.top_left, BOX.top_right
        bl, br = BOX.bottom_left, BOX.bottom_right

    def paint(s: str) -> str:
        return colorize(s, border_color) if border_color else s

    top = paint(tl + BOX.horizontal * (width - 2) + tr)
    bottom = paint(bl + BOX.horizontal * (width - 2) + br)

    wrapped: list[str] = []
    for line in content.split("\n"):
        wrapped.extend(word_wrap(line, inner_width))

    middle = []
    for line in wrapped:
        padding = " " * max(0, inner_width - visible_length(line))
        middle.append(paint(BOX.vertical) + " " + line + padding + " " + paint(BOX.vertical))

    return "\n".join([top, *middle, bottom])
