"""Navigation marker selection and labels."""

from __future__ import annotations

import re

from .asciicast import MarkerMode, MarkerOptions
from .commands import TAG_PARSER
from .content import extract_text, extract_tool_use
from .tools import format_tool_for_marker

DEFAULT_MARKER_OPTIONS = MarkerOptions()

_WS_RE = re.compile(r"\s+")


def _content(entry: dict) -> object:
    message = entry.get("message")
    return message.get("content", "") if isinstance(message, dict) else ""


def _has_tool_calls(entry: dict) -> bool:
    content = _content(entry)
    return isinstance(content, list) and bool(extract_tool_use(content))


def should_have_marker(entry: dict, mode: MarkerMode) -> bool:
    """Whether ``entry`` gets a marker under ``mode``.

    ``user`` covers prompts, ``tools`` covers tool calls and their results,
    ``all`` additionally covers plain assistant replies.
    """
    if mode == "none":
        return False

    entry_type = entry.get("type")
    if entry_type == "user":
        if entry.get("toolUseResult"):
            return mode in ("all", "tools")
        return mode in ("all", "user")
    if entry_type == "assistant":
        if _has_tool_calls(entry):
            return mode in ("all", "tools")
        return mode == "all"
    return False


def generate_marker_label(entry: dict, max_length: int = 30) -> str | None:
    entry_type = entry.get("type")
    if entry_type == "user":
        return _user_label(entry, max_length)
    if entry_type == "assistant":
        return _assistant_label(entry, max_length)
    return None


def _first_line(text: str) -> str:
    return _WS_RE.sub(" ", text.split("\n", 1)[0]).strip()


def _user_label(entry: dict, max_length: int) -> str:
    result = entry.get("toolUseResult")
    if result:
        is_error = isinstance(result, str) or (isinstance(result, dict) and result.get("is_error"))
        return "✗ Tool error" if is_error else "✓ Tool result"

    content = _content(entry)
    text = extract_text(content if isinstance(content, (str, list)) else "").strip()
    if not text:
        return "> (empty prompt)"

    if TAG_PARSER.is_command(text):
        command = TAG_PARSER.parse_command(text)
        if command is not None:
            # The name already carries its slash, e.g. "/status".
            label = f"> {command.name}"
            if command.args.strip():
                label += f" ({command.args})"
            return label
        stdout = TAG_PARSER.parse_local_stdout(text)
        if stdout is not None:
            return "> (command output)" if stdout else "> (command)"

    line = _first_line(text)
    if len(line) <= max_length - 2:
        return f"> {line}"
    return f"> {line[: max_length - 3]}…"


def _assistant_label(entry: dict, max_length: int) -> str:
    content = _content(entry)
    tools = extract_tool_use(content) if isinstance(content, list) else []

    if tools:
        info = format_tool_for_marker(tools[0].name, tools[0].input)
        label = f"● {info}" if len(tools) == 1 else f"● {info} (+{len(tools) - 1})"
        return label if len(label) <= max_length else label[: max_length - 1] + "…"

    text = extract_text(content if isinstance(content, (str, list)) else "").strip()
    if not text:
        return "Claude: (empty)"

    line = _first_line(text)
    if len(line) <= max_length - 8:
        return f"Claude: {line}"
    return f"Claude: {line[: max_length - 9]}…"
