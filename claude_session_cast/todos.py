"""Todo list rendering for TodoWrite calls."""

from __future__ import annotations

from .ansi import (
    BOLD,
    RESET,
    RESET_BOLD,
    RESET_STRIKETHROUGH,
    STRIKETHROUGH,
    fg,
    indent,
    word_wrap,
)
from .theme import RenderTheme

UNCHECKED = "☐"
CHECKED = "☒"
TREE_CONNECTOR = "⎿"

# "⎿  " or "   " before the checkbox, then "☐ ".
_PREFIX_WIDTH = 3
_CHECKBOX_WIDTH = 2


def is_todo_write_tool_result(result: object) -> bool:
    """True for a TodoWrite result carrying at least one new todo."""
    if not isinstance(result, dict):
        return False
    new_todos = result.get("newTodos")
    return isinstance(new_todos, list) and len(new_todos) > 0


def active_form(todos: list) -> str | None:
    """The ``activeForm`` of the first in-progress todo, if any."""
    for todo in todos:
        if isinstance(todo, dict) and todo.get("status") == "in_progress":
            form = todo.get("activeForm")
            if isinstance(form, str) and form:
                return form
    return None


def render_todo_list(result: dict, theme: RenderTheme, indent_size: int = 2, width: int = 100) -> str:
    return render_todos(result.get("newTodos") or [], theme, indent_size, width)


def render_todos_from_input(
    tool_input: dict, theme: RenderTheme, indent_size: int = 2, width: int = 100
) -> str | None:
    """Render ``input["todos"]`` of a TodoWrite call; None when there are none."""
    todos = tool_input.get("todos")
    if not isinstance(todos, list) or not todos:
        return None
    return render_todos(todos, theme, indent_size, width)


def render_todos(todos: list, theme: RenderTheme, indent_size: int = 2, width: int = 100) -> str:
    content_width = width - indent_size - _PREFIX_WIDTH - _CHECKBOX_WIDTH
    output: list[str] = []

    for todo in todos:
        if not isinstance(todo, dict):
            continue
        prefix = f"{TREE_CONNECTOR}  " if not output else "   "
        for j, line in enumerate(_render_item(todo, theme, content_width)):
            output.append(indent((prefix if j == 0 else "   ") + line, indent_size))

    return "\n".join(output)


def _render_item(todo: dict, theme: RenderTheme, content_width: int) -> list[str]:
    lines = word_wrap(str(todo.get("content", "")), content_width)
    status = todo.get("status")

    if status == "completed":
        gray = fg(theme.muted)
        return [
            f"{gray}{CHECKED} {STRIKETHROUGH}{line}{RESET_STRIKETHROUGH}{RESET}"
            if i == 0
            else f"{gray}  {STRIKETHROUGH}{line}{RESET_STRIKETHROUGH}{RESET}"
            for i, line in enumerate(lines)
        ]

    if status == "in_progress":
        return [
            f"{UNCHECKED} {BOLD}{line}{RESET_BOLD}" if i == 0 else f"  {BOLD}{line}{RESET_BOLD}"
            for i, line in enumerate(lines)
        ]

    # pending and unknown statuses
    return [f"{UNCHECKED} {line}" if i == 0 else f"  {line}" for i, line in enumerate(lines)]
