"""Per-entry rendering: one transcript entry in, one ANSI string out."""

from __future__ import annotations

from dataclasses import dataclass

from .ansi import BOX, colorize, style, word_wrap
from .commands import (
    TAG_PARSER,
    render_bash_input,
    render_bash_output,
    render_local_stdout,
    render_slash_command,
)
from .content import (
    ImageItem,
    TextItem,
    ThinkingItem,
    ToolUseItem,
    extract_text,
    parse_content,
)
from .markdown import render_markdown
from .theme import TOKYO_NIGHT, RenderTheme
from .todos import render_todos_from_input
from .tool_results import render_tool_result
from .tools import format_tool_args, format_tool_name

INTERRUPT_TEXT = "[Request interrupted by user]"


@dataclass(frozen=True)
class RenderConfig:
    """Layout and colour settings shared by all renderers."""

    theme: RenderTheme = TOKYO_NIGHT
    width: int = 100
    max_tool_output_lines: int = 5
    show_thinking: bool = True
    indent_size: int = 2


DEFAULT_RENDER_CONFIG = RenderConfig()


def render_message(entry: dict, cfg: RenderConfig = DEFAULT_RENDER_CONFIG) -> str:
    """Render a transcript entry; returns ``""`` for entries with nothing to show."""
    entry_type = entry.get("type")

    if entry_type == "user":
        if entry.get("isMeta"):
            return ""
        return _render_user(entry, cfg)
    if entry_type == "assistant":
        return _render_assistant(entry, cfg)
    if entry_type == "system":
        return _render_system(entry, cfg)
    if entry_type == "queue-operation" and entry.get("operation") == "remove":
        return _render_queue_remove(entry.get("content"), cfg)
    # summary, file-history-snapshot and unknown types
    return ""


def extract_text_content(content: object) -> str:
    """Plain text of ``message.content`` (string or item list)."""
    if isinstance(content, (str, list)):
        return extract_text(content)
    return ""


def _message_content(entry: dict) -> object:
    message = entry.get("message")
    return message.get("content", "") if isinstance(message, dict) else ""


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


def _render_user(entry: dict, cfg: RenderConfig) -> str:
    theme = cfg.theme

    result = entry.get("toolUseResult")
    if result:
        if isinstance(result, str):
            return render_tool_result({"content": result, "is_error": True}, cfg)
        if isinstance(result, list):
            return render_tool_result({"content": result}, cfg)
        if isinstance(result, dict):
            return render_tool_result(result, cfg)
        return ""

    content = extract_text_content(_message_content(entry))
    if not content.strip():
        return ""

    if INTERRUPT_TEXT in content:
        return render_interrupt(theme)

    if TAG_PARSER.is_command(content):
        command = TAG_PARSER.parse_command(content)
        if command is not None:
            return render_slash_command(command, theme)
        stdout = TAG_PARSER.parse_local_stdout(content)
        if stdout is not None:
            return render_local_stdout(stdout, theme)

    if TAG_PARSER.is_bash(content):
        bash_input = TAG_PARSER.parse_bash_input(content)
        bash_output = TAG_PARSER.parse_bash_output(content)
        if bash_input is not None and bash_output is not None:
            return render_bash_input(bash_input) + "\n" + render_bash_output(bash_output, theme)
        if bash_input is not None:
            return render_bash_input(bash_input)
        if bash_output is not None:
            return render_bash_output(bash_output, theme)

    return render_prompt(content, cfg)


def render_prompt(text: str, cfg: RenderConfig) -> str:
    """User prompt band: ``→`` on the first line, two-space hang afterwards."""
    theme = cfg.theme
    lines = word_wrap(text, cfg.width - 4)
    return "\n".join(
        style(f"{BOX.arrow} {line}" if i == 0 else f"  {line}", fg=theme.user_prompt, bg=theme.user_prompt_bg)
        for i, line in enumerate(lines)
    )


def render_interrupt(theme: RenderTheme) -> str:
    """``⎿ Interrupted · What should Claude do instead?``"""
    return " ".join([
        colorize(BOX.indent, theme.muted),
        colorize("Interrupted", theme.tool_bullet_error),
        colorize("· What should Claude do instead?", theme.muted),
    ])


# ---------------------------------------------------------------------------
# Assistant
# ---------------------------------------------------------------------------


def _render_assistant(entry: dict, cfg: RenderConfig) -> str:
    rendered = (_render_item(item, cfg) for item in parse_content(_message_content(entry)))
    return "\n\n".join(r for r in rendered if r)


def _render_item(item: object, cfg: RenderConfig) -> str:
    if isinstance(item, TextItem):
        return render_markdown(item.text, cfg)
    if isinstance(item, ThinkingItem):
        return render_thinking(item.thinking, cfg) if cfg.show_thinking else ""
    if isinstance(item, ToolUseItem):
        return render_tool_use(item, cfg)
    if isinstance(item, ImageItem):
        return colorize("[Image]", cfg.theme.muted)
    return ""


def render_thinking(thinking: str, cfg: RenderConfig) -> str:
    theme = cfg.theme
    header = colorize("∴ Thinking…", theme.thinking)
    body = "\n".join(
        "  " + style(line, fg=theme.thinking, italic=True)
        for line in word_wrap(thinking, cfg.width - 2)
    )
    return f"{header}\n\n{body}"


def render_tool_use(tool: ToolUseItem, cfg: RenderConfig) -> str:
    """``● Name(args)`` header; TodoWrite calls also list their todos."""
    theme = cfg.theme
    formatted = format_tool_name(tool.name)

    bullet = colorize(BOX.bullet, theme.tool_bullet_success)
    name = style(formatted.display_name, bold=True)
    mcp_suffix = colorize(" (MCP)", theme.muted) if formatted.is_mcp else ""
    args = format_tool_args(tool, theme, formatted.is_mcp)
    header = f"{bullet} {name}{mcp_suffix}{args}"

    if tool.name == "TodoWrite":
        todos = render_todos_from_input(tool.input, theme, cfg.indent_size, cfg.width)
        if todos:
            return f"{header}\n{todos}"

    return header


# ---------------------------------------------------------------------------
# System and queue operations
# ---------------------------------------------------------------------------


def _render_system(entry: dict, cfg: RenderConfig) -> str:
    content = entry.get("content")
    if not content:
        return ""

    theme = cfg.theme
    level = entry.get("level")
    level_colors = {
        "info": theme.muted,
        "warning": theme.tool_name,
        "error": theme.tool_bullet_error,
    }
    color = level_colors.get(level or "info", theme.muted)
    return colorize(f"[{level or 'system'}] {content}", color)


def _render_queue_remove(content: object, cfg: RenderConfig) -> str:
    text = extract_text_content(content if content is not None else [])
    if not text.strip():
        return ""
    theme = cfg.theme
    return style(f"{BOX.arrow} {text}", fg=theme.user_prompt, bg=theme.user_prompt_bg)
