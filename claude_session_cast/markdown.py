"""Markdown-to-ANSI rendering for assistant text.

Covers the subset that shows up in chat replies: fenced code, horizontal
rules, ATX headers, bullet and numbered lists, pipe tables and inline
code/bold/italic/links. Everything else is treated as prose and wrapped.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .ansi import (
    BOLD,
    ITALIC,
    RESET_BOLD,
    RESET_ITALIC,
    RESET_UNDERLINE,
    UNDERLINE,
    colorize,
    style,
    visible_length,
)

if TYPE_CHECKING:
    from .messages import RenderConfig

_LEADING_WS_RE = re.compile(r"^(\s*)")
_HR_RE = re.compile(r"^(\s*)[-*_]{3,}\s*$")
_HEADER_RE = re.compile(r"^(#{1,6})\s+(.+)$")
_UNORDERED_RE = re.compile(r"^(\s*)([-*+])\s+(.+)$")
_ORDERED_RE = re.compile(r"^(\s*)(\d+)\.\s+(.+)$")
_TABLE_SEPARATOR_RE = re.compile(r"^\|?[\s\-:|]+\|?$")

_CODE_SPAN_RE = re.compile(r"`([^`]+)`")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_BOLD_STAR_RE = re.compile(r"\*\*([^*]+)\*\*")
_BOLD_UNDERSCORE_RE = re.compile(r"__([^_]+)__")
_ITALIC_STAR_RE = re.compile(r"\*([^*]+)\*")
_ITALIC_UNDERSCORE_RE = re.compile(r"(?<![a-zA-Z0-9])_([^_]+)_(?![a-zA-Z0-9])")
_WS_SPLIT_RE = re.compile(r"(\s+)")

_ESC_STAR = "\x00ESCSTAR\x00"
_ESC_UNDER = "\x00ESCUNDER\x00"

# Rules never grow past this many columns.
_MAX_RULE_WIDTH = 40


def render_markdown(text: str, cfg: RenderConfig) -> str:
    """Render markdown ``text`` to ANSI lines joined with ``\\n``."""
    lines = text.split("\n")
    output: list[str] = []

    i = 0
    while i < len(lines):
        line = lines[i]

        if line.lstrip().startswith("```"):
            fence_indent = _LEADING_WS_RE.match(line).group(1)
            i += 1
            code: list[str] = []
            while i < len(lines) and not lines[i].lstrip().startswith("```"):
                code.append(lines[i])
                i += 1
            i += 1  # closing fence, if any
            output.extend(style(fence_indent + c, dim=True, fg=cfg.theme.muted) for c in code)
            continue

        if _HR_RE.match(line):
            output.append(colorize("─" * min(cfg.width, _MAX_RULE_WIDTH), cfg.theme.muted))
            i += 1
            continue

        header = _HEADER_RE.match(line)
        if header:
            output.append(f"{BOLD}{render_inline(header.group(2), cfg)}{RESET_BOLD}")
            i += 1
            continue

        bullet = _UNORDERED_RE.match(line)
        if bullet:
            output.append(f"{bullet.group(1)}• {render_inline(bullet.group(3), cfg)}")
            i += 1
            continue

        numbered = _ORDERED_RE.match(line)
        if numbered:
            indent_ws, num, body = numbered.groups()
            output.append(f"{indent_ws}{num}. {render_inline(body, cfg)}")
            i += 1
            continue

        if _is_table_row(line):
            table: list[str] = []
            while i < len(lines) and _is_table_row(lines[i]):
                table.append(lines[i])
                i += 1
            output.extend(_render_table(table, cfg))
            continue

        output.extend(wrap_ansi(render_inline(line, cfg), cfg.width))
        i += 1

    return "\n".join(output)


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def _is_table_row(line: str) -> bool:
    return "|" in line and bool(line.strip())


def _split_cells(line: str) -> list[str]:
    cells = [c.strip() for c in line.split("|")]
    last = len(cells) - 1
    return [c for idx, c in enumerate(cells) if not (c == "" and idx in (0, last))]


def _render_table(lines: list[str], cfg: RenderConfig) -> list[str]:
    # None marks a separator row.
    rows: list[list[str] | None] = []
    widths: list[int] = []

    for line in lines:
        if _TABLE_SEPARATOR_RE.match(line):
            rows.append(None)
            continue
        cells = [render_inline(cell, cfg) for cell in _split_cells(line)]
        rows.append(cells)
        for col, cell in enumerate(cells):
            cell_width = visible_length(cell)
            if col >= len(widths):
                widths.append(cell_width)
            elif cell_width > widths[col]:
                widths[col] = cell_width

    output: list[str] = []
    for row in rows:
        if row is None:
            output.append(colorize(" | ".join("-" * w for w in widths), cfg.theme.muted))
            continue
        padded = []
        for col, cell in enumerate(row):
            target = widths[col] if col < len(widths) and widths[col] else visible_length(cell)
            padded.append(cell + " " * max(0, target - visible_length(cell)))
        output.append(" | ".join(padded))
    return output


# ---------------------------------------------------------------------------
# Inline formatting
# ---------------------------------------------------------------------------


def render_inline(text: str, cfg: RenderConfig) -> str:
    """Apply inline code, links, bold and italic, then the base text colour.

    Code spans are swapped out for placeholders first so their contents are
    never reinterpreted; escaped ``\\*`` and ``\\_`` survive literally.
    """
    theme = cfg.theme
    code_spans: list[str] = []

    def protect_code(match: re.Match) -> str:
        code_spans.append(colorize(match.group(1), theme.agent))
        return f"\x00CODE{len(code_spans) - 1}\x00"

    result = _CODE_SPAN_RE.sub(protect_code, text)
    result = result.replace("\\*", _ESC_STAR).replace("\\_", _ESC_UNDER)

    result = _LINK_RE.sub(
        lambda m: f"{UNDERLINE}{m.group(1)}{RESET_UNDERLINE} ({colorize(m.group(2), theme.muted)})",
        result,
    )
    result = _BOLD_STAR_RE.sub(lambda m: f"{BOLD}{m.group(1)}{RESET_BOLD}", result)
    result = _BOLD_UNDERSCORE_RE.sub(lambda m: f"{BOLD}{m.group(1)}{RESET_BOLD}", result)
    result = _ITALIC_STAR_RE.sub(lambda m: f"{ITALIC}{m.group(1)}{RESET_ITALIC}", result)
    result = _ITALIC_UNDERSCORE_RE.sub(lambda m: f"{ITALIC}{m.group(1)}{RESET_ITALIC}", result)

    result = result.replace(_ESC_STAR, "*").replace(_ESC_UNDER, "_")
    for idx, rendered in enumerate(code_spans):
        result = result.replace(f"\x00CODE{idx}\x00", rendered, 1)

    return colorize(result, theme.assistant_text)


def wrap_ansi(text: str, width: int) -> list[str]:
    """Greedy word wrap that measures visible width, ignoring SGR sequences."""
    if width <= 0:
        return [text]

    lines: list[str] = []
    current = ""
    current_width = 0

    for word in _WS_SPLIT_RE.split(text):
        word_width = visible_length(word)
        if current_width == 0:
            current = word
            current_width = word_width
        elif current_width + word_width <= width:
            current += word
            current_width += word_width
        elif word.isspace():
            continue
        else:
            if current.strip():
                lines.append(current)
            current = word.lstrip()
            current_width = visible_length(current)

    if current.strip():
        lines.append(current)

    return lines or [""]
