"""Rendering of tool results attached to user entries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .ansi import BOX, colorize, indent, word_wrap
from .diff import is_edit_tool_result, render_edit_diff
from .todos import is_todo_write_tool_result

if TYPE_CHECKING:
    from .messages import RenderConfig

# "  ⎿  " before the first line; continuation lines align under it.
_TREE_PREFIX = "  "
_CONTENT_INDENT = 5


def extract_result_text(result: dict) -> str:
    """Pull displayable text out of a tool result, whatever tool produced it.

    Shapes are tried in a fixed order: content list, content string,
    WebFetch ``result``, WebSearch ``results``, Read ``file.content``,
    Bash stdout/stderr, Glob ``filenames`` and finally todo counts.
    """
    content = result.get("content")

    if isinstance(content, list):
        parts: list[str] = []
        has_image = False
        for item in content:
            if not isinstance(item, dict):
                continue
            if isinstance(item.get("text"), str):
                parts.append(item["text"])
            elif item.get("type") == "image":
                has_image = True
        if has_image:
            parts.append("[Screenshot captured]")
        return "\n".join(parts)

    if isinstance(content, str):
        return content

    if isinstance(result.get("result"), str):
        return result["result"]

    results = result.get("results")
    if isinstance(results, list):
        parts = []
        if result.get("query"):
            parts.append(f"Query: {result['query']}")
        for item in results:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict) and isinstance(item.get("title"), str):
                parts.append(f"• {item['title']}")
                if item.get("url"):
                    parts.append(f"  {item['url']}")
                if item.get("snippet"):
                    parts.append(f"  {item['snippet']}")
        return "\n".join(parts)

    file_info = result.get("file")
    if isinstance(file_info, dict) and isinstance(file_info.get("content"), str):
        return file_info["content"]

    stdout, stderr = result.get("stdout"), result.get("stderr")
    if stdout or stderr:
        return "\n".join(s for s in (stdout, stderr) if isinstance(s, str) and s)

    filenames = result.get("filenames")
    if isinstance(filenames, list):
        return "\n".join(str(f) for f in filenames) if filenames else "(no matches)"

    if result.get("oldTodos") or result.get("newTodos"):
        new_todos = result.get("newTodos")
        count = len(new_todos) if isinstance(new_todos, list) else 0
        return f"Updated {count} todos"

    return ""


def render_tool_result(result: dict, cfg: RenderConfig) -> str:
    """Render a tool result under its call with the ``⎿`` connector.

    Edit results become diffs, TodoWrite results render nothing (the todos
    are shown with the call) and empty results collapse to a status mark.
    Output beyond ``cfg.max_tool_output_lines`` wrapped lines is replaced by a
    ``… +N lines (ctrl+o to expand)`` note.
    """
    theme = cfg.theme

    if is_edit_tool_result(result):
        return render_edit_diff(result, theme, cfg.indent_size, cfg.width)

    if is_todo_write_tool_result(result):
        return ""

    is_error = bool(result.get("is_error"))
    mark = BOX.cross_mark if is_error else BOX.check
    mark_color = theme.tool_bullet_error if is_error else theme.tool_bullet_success

    text = extract_result_text(result)
    if not text:
        return colorize(f"  {BOX.indent} ", theme.muted) + colorize(mark, mark_color)

    lines: list[str] = []
    for raw in text.split("\n"):
        lines.extend(word_wrap(raw, cfg.width - _CONTENT_INDENT))

    shown = lines[: cfg.max_tool_output_lines]
    output: list[str] = []
    for i, line in enumerate(shown):
        if i == 0:
            output.append(_TREE_PREFIX + colorize(BOX.indent, theme.muted) + "  " + line)
        else:
            output.append(indent(line, _CONTENT_INDENT))

    hidden = len(lines) - len(shown)
    if hidden > 0:
        note = colorize(f"… +{hidden} lines (ctrl+o to expand)", theme.muted)
        output.append(indent(note, _CONTENT_INDENT))

    if not output:
        return _TREE_PREFIX + colorize(mark, mark_color)

    return "\n".join(output)
