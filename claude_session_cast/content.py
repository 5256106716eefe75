"""Message content items and helpers for extracting and summarising them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

# ---------------------------------------------------------------------------
# Content item dataclasses
# ---------------------------------------------------------------------------


@dataclass
class TextItem:
    """Plain assistant or user text."""

    text: str

    def to_dict(self) -> dict:
        return {"type": "text", "text": self.text}

    @classmethod
    def from_dict(cls, data: dict) -> TextItem:
        return cls(text=str(data.get("text", "")))


@dataclass
class ThinkingItem:
    """Extended thinking block."""

    thinking: str

    def to_dict(self) -> dict:
        return {"type": "thinking", "thinking": self.thinking}

    @classmethod
    def from_dict(cls, data: dict) -> ThinkingItem:
        return cls(thinking=str(data.get("thinking", "")))


@dataclass
class ToolUseItem:
    """A tool invocation with its free-form input mapping."""

    id: str
    name: str
    input: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"type": "tool_use", "id": self.id, "name": self.name, "input": self.input}

    @classmethod
    def from_dict(cls, data: dict) -> ToolUseItem:
        tool_input = data.get("input")
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            input=tool_input if isinstance(tool_input, dict) else {},
        )


@dataclass
class ToolResultItem:
    """Tool output echoed back inside a user message."""

    tool_use_id: str
    content: object = None
    is_error: bool = False

    def to_dict(self) -> dict:
        return {
            "type": "tool_result",
            "tool_use_id": self.tool_use_id,
            "content": self.content,
            "is_error": self.is_error,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ToolResultItem:
        return cls(
            tool_use_id=str(data.get("tool_use_id", "")),
            content=data.get("content"),
            is_error=bool(data.get("is_error", False)),
        )


@dataclass
class ImageItem:
    """Inline image; only its presence matters for rendering."""

    media_type: str = ""

    def to_dict(self) -> dict:
        return {"type": "image", "source": {"media_type": self.media_type}}

    @classmethod
    def from_dict(cls, data: dict) -> ImageItem:
        source = data.get("source")
        media_type = source.get("media_type", "") if isinstance(source, dict) else ""
        return cls(media_type=media_type)


@dataclass
class UnknownItem:
    """Any content item type not modelled above, kept verbatim."""

    type: str
    raw: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return dict(self.raw)

    @classmethod
    def from_dict(cls, data: dict) -> UnknownItem:
        return cls(type=str(data.get("type", "")), raw=dict(data))


ContentItem = Union[TextItem, ThinkingItem, ToolUseItem, ToolResultItem, ImageItem, UnknownItem]

_ITEM_TYPES: dict[str, type] = {
    "text": TextItem,
    "thinking": ThinkingItem,
    "tool_use": ToolUseItem,
    "tool_result": ToolResultItem,
    "image": ImageItem,
}


def content_item_from_dict(data: dict) -> ContentItem:
    """Deserialize a content item dict, dispatching on its ``type``."""
    item_cls = _ITEM_TYPES.get(data.get("type", ""), UnknownItem)
    return item_cls.from_dict(data)


def parse_content(content: object) -> list[ContentItem]:
    """Normalise ``message.content`` into a list of content items.

    A bare string becomes a single :class:`TextItem`; non-dict list members
    and unexpected shapes are dropped.
    """
    if isinstance(content, str):
        return [TextItem(text=content)]
    if not isinstance(content, list):
        return []
    return [content_item_from_dict(item) for item in content if isinstance(item, dict)]


def _item_type(item: ContentItem) -> str:
    if isinstance(item, UnknownItem):
        return item.type
    return item.to_dict()["type"]


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extract_text(content: str | list) -> str:
    """Join the text items of ``content`` with newlines (strings pass through)."""
    if isinstance(content, str):
        return content
    return "\n".join(item.text for item in _as_items(content) if isinstance(item, TextItem))


def extract_thinking(content: list) -> list[str]:
    return [item.thinking for item in _as_items(content) if isinstance(item, ThinkingItem)]


def extract_tool_use(content: list) -> list[ToolUseItem]:
    return [item for item in _as_items(content) if isinstance(item, ToolUseItem)]


def has_tool_use(content: list) -> bool:
    return any(isinstance(item, ToolUseItem) for item in _as_items(content))


def has_thinking(content: list) -> bool:
    return any(isinstance(item, ThinkingItem) for item in _as_items(content))


def _as_items(content: object) -> list[ContentItem]:
    if isinstance(content, list) and all(not isinstance(c, dict) for c in content):
        return list(content)
    return parse_content(content)


ContentCategory = Literal["text", "thinking", "tool-call", "mixed"]


def classify_content(content: list) -> ContentCategory:
    """Describe what kinds of items a content list holds."""
    types = {_item_type(item) for item in _as_items(content)}
    if not types:
        return "text"
    if len(types) == 1:
        only = next(iter(types))
        if only == "text":
            return "text"
        if only == "thinking":
            return "thinking"
        if only == "tool_use":
            return "tool-call"
    return "mixed"


# ---------------------------------------------------------------------------
# Short labels
# ---------------------------------------------------------------------------


def _clip_label(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text.replace("\n", " ")
    return text[: max_length - 1].replace("\n", " ") + "…"


def get_user_message_label(entry: dict, max_length: int = 30) -> str:
    """One-line label for a user entry (tool result status or prompt text)."""
    result = entry.get("toolUseResult")
    if result:
        if isinstance(result, str):
            return "Tool error"
        if isinstance(result, dict) and result.get("is_error"):
            return "Tool error"
        return "Tool result"

    message = entry.get("message") or {}
    return _clip_label(extract_text(message.get("content", "")), max_length)


def get_assistant_message_label(entry: dict, max_length: int = 30) -> str:
    """One-line label for an assistant entry (first tool name, else text)."""
    message = entry.get("message") or {}
    content = message.get("content", [])

    tools = extract_tool_use(content) if isinstance(content, list) else []
    if tools:
        if len(tools) == 1:
            return tools[0].name
        return f"{tools[0].name} (+{len(tools) - 1} more)"

    return _clip_label(extract_text(content), max_length)


# ---------------------------------------------------------------------------
# Tool input summary
# ---------------------------------------------------------------------------


def _str_field(tool_input: dict, key: str) -> str | None:
    value = tool_input.get(key)
    return value if isinstance(value, str) else None


def _shorten(text: str, limit: int) -> str:
    return text[: limit - 1] + "…" if len(text) > limit else text


def format_tool_input_summary(tool: ToolUseItem) -> str:
    """Plain-text summary of a tool's most telling input, or ``""``."""
    name, tool_input = tool.name, tool.input

    if name in ("Read", "Write", "Edit", "MultiEdit"):
        return _str_field(tool_input, "file_path") or ""

    if name == "Bash":
        command = _str_field(tool_input, "command")
        return _shorten(command, 50) if command is not None else ""

    if name == "Glob":
        return _str_field(tool_input, "pattern") or ""

    if name == "Grep":
        pattern = _str_field(tool_input, "pattern")
        return f"/{pattern}/" if pattern is not None else ""

    if name == "Task":
        description = _str_field(tool_input, "description")
        if description is not None:
            return description
        prompt = _str_field(tool_input, "prompt")
        return _shorten(prompt, 50) if prompt is not None else ""

    if name == "WebFetch":
        return _str_field(tool_input, "url") or ""

    if name == "WebSearch":
        return _str_field(tool_input, "query") or ""

    if name == "TodoWrite":
        todos = tool_input.get("todos")
        return f"{len(todos)} items" if isinstance(todos, list) else ""

    return ""


# ---------------------------------------------------------------------------
# Output truncation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TruncatedOutput:
    text: str
    truncated: bool
    hidden_lines: int


def truncate_output(text: str, max_lines: int, max_line_length: int = 200) -> TruncatedOutput:
    """Cap each line at ``max_line_length`` and the text at ``max_lines`` lines."""
    lines = [
        line[: max_line_length - 1] + "…" if len(line) > max_line_length else line
        for line in text.split("\n")
    ]
    if len(lines) <= max_lines:
        return TruncatedOutput(text="\n".join(lines), truncated=False, hidden_lines=0)
    return TruncatedOutput(
        text="\n".join(lines[:max_lines]),
        truncated=True,
        hidden_lines=len(lines) - max_lines,
    )
