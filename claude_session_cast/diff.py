"""Diff visualisation for Edit tool results.

Hunks from ``structuredPatch`` are drawn with old/new line numbers and
coloured line backgrounds. A removal immediately followed by an addition is
treated as a modification and gets word-level highlighting computed with a
longest-common-subsequence over whitespace-delimited tokens.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .ansi import RESET, colorize, indent, style, word_wrap
from .theme import RenderTheme

# Line number (5) + space (1) + " + " (3) precede the content.
LINE_PREFIX_WIDTH = 9

_DIFF_FG = "#ffffff"
_GUTTER_BLANK = "     "
_TOKEN_RE = re.compile(r"\s+|\S+")


@dataclass
class DiffSegment:
    text: str
    changed: bool


def is_edit_tool_result(result: object) -> bool:
    """True when ``result`` carries a file path and a non-empty structured patch."""
    if not isinstance(result, dict):
        return False
    patch = result.get("structuredPatch")
    return isinstance(result.get("filePath"), str) and isinstance(patch, list) and len(patch) > 0


def diff_stats(patch: list) -> tuple[int, int]:
    """Count ``+`` and ``-`` lines across all hunks."""
    additions = removals = 0
    for hunk in patch:
        for line in _hunk_lines(hunk):
            if line[:1] == "+":
                additions += 1
            elif line[:1] == "-":
                removals += 1
    return additions, removals


def _hunk_lines(hunk: object) -> list[str]:
    """String lines of a hunk; a missing or null list and non-string lines are dropped."""
    lines = hunk.get("lines") if isinstance(hunk, dict) else None
    if not isinstance(lines, list):
        return []
    return [line for line in lines if isinstance(line, str)]


def _line_start(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return 1
    return value


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" + ("" if count == 1 else "s")


def render_edit_diff(result: dict, theme: RenderTheme, indent_size: int = 2, width: int = 100) -> str:
    patch = [h for h in result.get("structuredPatch") or [] if isinstance(h, dict)]
    additions, removals = diff_stats(patch)

    stats = f"{_plural(additions, 'addition')} and {_plural(removals, 'removal')}"
    header = colorize(f"Updated {result['filePath']} with {stats}", theme.muted)
    output = [indent(header, indent_size)]

    content_width = width - indent_size - LINE_PREFIX_WIDTH
    for hunk in patch:
        for line in _render_hunk(hunk, theme, content_width):
            output.append(indent(line, indent_size))

    return "\n".join(output)


# ---------------------------------------------------------------------------
# Hunks
# ---------------------------------------------------------------------------


def _render_hunk(hunk: dict, theme: RenderTheme, content_width: int) -> list[str]:
    output: list[str] = []
    old_num = _line_start(hunk.get("oldStart"))
    new_num = _line_start(hunk.get("newStart"))
    lines = _hunk_lines(hunk)

    i = 0
    while i < len(lines):
        line = lines[i]
        marker, content = line[:1], line[1:]

        if marker == " ":
            output.extend(_render_context_line(new_num, content, theme, content_width))
            old_num += 1
            new_num += 1
            i += 1
        elif marker == "-":
            following = lines[i + 1] if i + 1 < len(lines) else ""
            if following[:1] == "+":
                old_segments, new_segments = diff_words(content, following[1:])
                output.extend(_render_highlighted_line(
                    old_num, " - ", old_segments,
                    theme.diff_remove_line_bg, theme.diff_remove_char_bg, theme, content_width,
                ))
                output.extend(_render_highlighted_line(
                    new_num, " + ", new_segments,
                    theme.diff_add_line_bg, theme.diff_add_char_bg, theme, content_width,
                ))
                old_num += 1
                new_num += 1
                i += 2
            else:
                output.extend(_render_change_line(
                    old_num, " - ", content, theme.diff_remove_line_bg, theme, content_width,
                ))
                old_num += 1
                i += 1
        elif marker == "+":
            output.extend(_render_change_line(
                new_num, " + ", content, theme.diff_add_line_bg, theme, content_width,
            ))
            new_num += 1
            i += 1
        else:
            # Unknown marker: show the raw line as context.
            output.extend(_render_context_line(new_num, line, theme, content_width))
            new_num += 1
            i += 1

    return output


# ---------------------------------------------------------------------------
# Word-level diff
# ---------------------------------------------------------------------------


def tokenize(line: str) -> list[str]:
    """Split into alternating runs of whitespace and non-whitespace."""
    return _TOKEN_RE.findall(line)


def _lcs_indices(old: list[str], new: list[str]) -> tuple[set[int], set[int]]:
    m, n = len(old), len(new)
    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if old[i - 1] == new[j - 1]:
                dp[i][j] = dp[i - 1][j - 1] + 1
            else:
                dp[i][j] = max(dp[i - 1][j], dp[i][j - 1])

    old_keep: set[int] = set()
    new_keep: set[int] = set()
    i, j = m, n
    while i > 0 and j > 0:
        if old[i - 1] == new[j - 1]:
            old_keep.add(i - 1)
            new_keep.add(j - 1)
            i -= 1
            j -= 1
        elif dp[i - 1][j] > dp[i][j - 1]:
            i -= 1
        else:
            j -= 1
    return old_keep, new_keep


def _build_segments(tokens: list[str], keep: set[int]) -> list[DiffSegment]:
    segments: list[DiffSegment] = []
    for i, token in enumerate(tokens):
        changed = i not in keep
        if segments and segments[-1].changed == changed:
            segments[-1].text += token
        else:
            segments.append(DiffSegment(text=token, changed=changed))
    return segments


def diff_words(old_line: str, new_line: str) -> tuple[list[DiffSegment], list[DiffSegment]]:
    old_tokens, new_tokens = tokenize(old_line), tokenize(new_line)
    old_keep, new_keep = _lcs_indices(old_tokens, new_tokens)
    return _build_segments(old_tokens, old_keep), _build_segments(new_tokens, new_keep)


# ---------------------------------------------------------------------------
# Line rendering
# ---------------------------------------------------------------------------


def _line_number(num: int, theme: RenderTheme) -> str:
    return colorize(str(num).rjust(5), theme.muted)


def _wrap_if_needed(content: str, content_width: int) -> list[str]:
    if content_width > 0 and len(content) > content_width:
        return word_wrap(content, content_width)
    return [content]


def _render_context_line(num: int, content: str, theme: RenderTheme, content_width: int) -> list[str]:
    number = _line_number(num, theme)
    return [
        f"{number if i == 0 else _GUTTER_BLANK}      {line}"
        for i, line in enumerate(_wrap_if_needed(content, content_width))
    ]


def _render_change_line(
    num: int, marker: str, content: str, line_bg: str, theme: RenderTheme, content_width: int
) -> list[str]:
    number = _line_number(num, theme)
    return [
        f"{number if i == 0 else _GUTTER_BLANK} {style(marker + line, fg=_DIFF_FG, bg=line_bg)}"
        for i, line in enumerate(_wrap_if_needed(content, content_width))
    ]


def _render_highlighted_line(
    num: int,
    marker: str,
    segments: list[DiffSegment],
    line_bg: str,
    char_bg: str,
    theme: RenderTheme,
    content_width: int,
) -> list[str]:
    number = _line_number(num, theme)
    total = sum(len(seg.text) for seg in segments)

    if content_width <= 0 or total <= content_width:
        body = "".join(
            style(seg.text, fg=_DIFF_FG, bg=char_bg if seg.changed else line_bg) for seg in segments
        )
        prefix = style(marker, fg=_DIFF_FG, bg=line_bg)
        return [f"{number} {prefix}{body}{RESET}"]

    return _wrap_segmented_line(number, marker, segments, line_bg, char_bg, content_width)


def _wrap_segmented_line(
    number: str,
    marker: str,
    segments: list[DiffSegment],
    line_bg: str,
    char_bg: str,
    content_width: int,
) -> list[str]:
    """Spread highlighted segments over several rows, keeping each segment's background."""
    rows: list[str] = []
    prefix = style(marker, fg=_DIFF_FG, bg=line_bg)
    current = ""
    current_width = 0

    def emit() -> None:
        gutter = number if not rows else _GUTTER_BLANK
        rows.append(f"{gutter} {prefix}{current}{RESET}")

    for seg in segments:
        seg_bg = char_bg if seg.changed else line_bg
        remaining = seg.text

        while remaining:
            space_left = content_width - current_width

            if len(remaining) <= space_left:
                current += style(remaining, fg=_DIFF_FG, bg=seg_bg)
                current_width += len(remaining)
                remaining = ""
                continue

            split_at = space_left
            last_space = remaining.rfind(" ", 0, space_left + 1)
            if last_space > 0:
                split_at = last_space + 1

            if split_at <= 0:
                # No room left on this row: flush it and force one character.
                if current:
                    emit()
                    current = ""
                    current_width = 0
                current += style(remaining[0], fg=_DIFF_FG, bg=seg_bg)
                current_width += 1
                remaining = remaining[1:]
                continue

            current += style(remaining[:split_at], fg=_DIFF_FG, bg=seg_bg)
            remaining = remaining[split_at:]
            emit()
            current = ""
            current_width = 0

    if current or not rows:
        emit()

    return rows
