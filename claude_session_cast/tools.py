"""Tool-specific name and argument formatting."""

from __future__ import annotations

from dataclasses import dataclass

from .ansi import colorize, truncate
from .content import ToolUseItem
from .theme import RenderTheme

_MCP_PREFIX = "mcp__"


@dataclass(frozen=True)
class FormattedToolName:
    display_name: str
    is_mcp: bool


def format_tool_name(name: str) -> FormattedToolName:
    """Turn ``mcp__server__tool`` into ``"server - tool"``; other names pass through."""
    if name.startswith(_MCP_PREFIX):
        parts = name[len(_MCP_PREFIX):].split("__")
        if len(parts) >= 2:
            server, tool = parts[0], "__".join(parts[1:])
            return FormattedToolName(display_name=f"{server} - {tool}", is_mcp=True)
    return FormattedToolName(display_name=name, is_mcp=False)


def _basename(path: str) -> str:
    return path.rsplit("/", 1)[-1] if "/" in path else path


# ---------------------------------------------------------------------------
# Header arguments: tool name → [(input field, max length, theme colour attr)]
# The first field holding a string wins. A max length of 0 means no limit.
# ---------------------------------------------------------------------------

_FILE_ARG = [("file_path", 0, "file_path")]

_ARG_RULES: dict[str, list[tuple[str, int, str]]] = {
    "Read": _FILE_ARG,
    "Write": _FILE_ARG,
    "Edit": _FILE_ARG,
    "MultiEdit": _FILE_ARG,
    "Bash": [("command", 60, "muted")],
    "Glob": [("pattern", 0, "file_path")],
    "Grep": [("pattern", 40, "muted")],
    "Task": [("description", 50, "agent"), ("prompt", 50, "agent")],
    "WebFetch": [("url", 50, "file_path"), ("query", 50, "muted")],
    "WebSearch": [("url", 50, "file_path"), ("query", 50, "muted")],
}


def format_tool_args(tool: ToolUseItem, theme: RenderTheme, is_mcp: bool = False) -> str:
    """Coloured ``(argument)`` suffix shown after a tool name.

    MCP tools show their first input parameter as ``(key: "value")`` when it
    is a string. Unknown tools get no suffix.
    """
    tool_input = tool.input

    if is_mcp:
        if tool_input:
            key = next(iter(tool_input))
            value = tool_input[key]
            if isinstance(value, str):
                return f'({key}: "{colorize(truncate(value, 40), theme.muted)}")'
        return ""

    if tool.name == "TodoWrite":
        return colorize(" (updating todos)", theme.muted)

    for field_name, max_length, color_attr in _ARG_RULES.get(tool.name, []):
        value = tool_input.get(field_name)
        if isinstance(value, str):
            if max_length:
                value = truncate(value, max_length)
            return f"({colorize(value, getattr(theme, color_attr))})"

    return ""


def format_tool_for_marker(name: str, tool_input: dict) -> str:
    """Compact ``Name(arg)`` form used in navigation marker labels."""
    if name in ("Read", "Write", "Edit", "MultiEdit"):
        path = tool_input.get("file_path")
        return f"{name}({_basename(path)})" if isinstance(path, str) else name

    if name == "Bash":
        command = tool_input.get("command")
        if isinstance(command, str):
            short = command[:19] + "…" if len(command) > 20 else command
            return f"Bash({short})"
        return "Bash"

    if name == "Glob":
        pattern = tool_input.get("pattern")
        return f"Glob({pattern})" if isinstance(pattern, str) else "Glob"

    if name == "Grep":
        pattern = tool_input.get("pattern")
        if isinstance(pattern, str):
            short = pattern[:14] + "…" if len(pattern) > 15 else pattern
            return f"Grep({short})"
        return "Grep"

    if name == "Task":
        description = tool_input.get("description")
        return f"⤵ Task({description})" if isinstance(description, str) else "⤵ Task"

    return name
