"""Slash-command and bash-mode messages.

User prompts typed in the CLI can arrive wrapped in pseudo-XML tags:
``<command-name>/clear</command-name>`` for slash commands and
``<bash-input>ls</bash-input>`` / ``<bash-stdout>...</bash-stdout>`` for
shell-mode commands. All tag matching lives in :class:`CommandTagParser`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .ansi import BOX, colorize, style
from .theme import RenderTheme

# ---------------------------------------------------------------------------
# Parsed forms
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedCommand:
    """A slash command; ``name`` includes the leading slash."""

    name: str
    message: str = ""
    args: str = ""
    stdout: str = ""


@dataclass(frozen=True)
class BashOutput:
    stdout: str = ""
    stderr: str = ""


# ---------------------------------------------------------------------------
# Tag parser
# ---------------------------------------------------------------------------


class CommandTagParser:
    """Regex extraction for the small fixed vocabulary of command tags."""

    _COMMAND_NAME_RE = re.compile(r"<command-name>([^<]*)</command-name>")
    _COMMAND_MESSAGE_RE = re.compile(r"<command-message>([^<]*)</command-message>")
    _COMMAND_ARGS_RE = re.compile(r"<command-args>([^<]*)</command-args>")
    _LOCAL_STDOUT_RE = re.compile(r"<local-command-stdout>([^<]*)</local-command-stdout>")
    _BASH_INPUT_RE = re.compile(r"<bash-input>([\s\S]*?)</bash-input>")
    _BASH_STDOUT_RE = re.compile(r"<bash-stdout>([\s\S]*?)</bash-stdout>")
    _BASH_STDERR_RE = re.compile(r"<bash-stderr>([\s\S]*?)</bash-stderr>")

    _BASH_TAGS = ("<bash-input>", "<bash-stdout>", "<bash-stderr>")

    def parse_command(self, content: str) -> ParsedCommand | None:
        name = self._COMMAND_NAME_RE.search(content)
        if name is None:
            return None
        return ParsedCommand(
            name=name.group(1),
            message=self._group(self._COMMAND_MESSAGE_RE, content),
            args=self._group(self._COMMAND_ARGS_RE, content),
            stdout=self._group(self._LOCAL_STDOUT_RE, content),
        )

    def parse_local_stdout(self, content: str) -> str | None:
        match = self._LOCAL_STDOUT_RE.search(content)
        return match.group(1) if match else None

    def is_command(self, content: str) -> bool:
        """True when the message *starts* with a command tag."""
        stripped = content.strip()
        return stripped.startswith("<command-name>") or stripped.startswith("<local-command-stdout>")

    def is_bash(self, content: str) -> bool:
        # Tags may follow a "Caveat:" preamble, so match anywhere.
        return any(tag in content for tag in self._BASH_TAGS)

    def is_bash_input(self, content: str) -> bool:
        return "<bash-input>" in content

    def is_bash_output(self, content: str) -> bool:
        return "<bash-stdout>" in content or "<bash-stderr>" in content

    def parse_bash_input(self, content: str) -> str | None:
        match = self._BASH_INPUT_RE.search(content)
        return match.group(1).strip() if match else None

    def parse_bash_output(self, content: str) -> BashOutput | None:
        stdout = self._BASH_STDOUT_RE.search(content)
        stderr = self._BASH_STDERR_RE.search(content)
        if stdout is None and stderr is None:
            return None
        return BashOutput(
            stdout=stdout.group(1).strip() if stdout else "",
            stderr=stderr.group(1).strip() if stderr else "",
        )

    @staticmethod
    def _group(pattern: re.Pattern, content: str) -> str:
        match = pattern.search(content)
        return match.group(1) if match else ""


TAG_PARSER = CommandTagParser()

parse_command_tags = TAG_PARSER.parse_command
parse_local_command_stdout = TAG_PARSER.parse_local_stdout
is_command_message = TAG_PARSER.is_command
is_bash_message = TAG_PARSER.is_bash
is_bash_input_message = TAG_PARSER.is_bash_input
is_bash_output_message = TAG_PARSER.is_bash_output
parse_bash_input = TAG_PARSER.parse_bash_input
parse_bash_output = TAG_PARSER.parse_bash_output


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

COMMAND_FG = "#ffffff"
COMMAND_BG = "#373737"
BASH_MODE_PINK = "#fd5db1"
BASH_COMMAND_BG = "#413c41"
BASH_COMMAND_FG = "#ffffff"
BASH_STDERR_COLOR = "#ff6b80"


def render_slash_command(command: ParsedCommand, theme: RenderTheme) -> str:
    """``→ /name (args) `` on a grey band, plus any captured stdout below."""
    line = f"{BOX.arrow} {command.name}"
    if command.args.strip():
        line += f" ({command.args})"
    line += " "

    result = style(line, fg=COMMAND_FG, bg=COMMAND_BG)
    if command.stdout.strip():
        return f"{result}\n{colorize('  ' + command.stdout, theme.muted)}"
    return result


def render_local_stdout(stdout: str, theme: RenderTheme) -> str:
    if not stdout.strip() or stdout == "...":
        return ""
    return colorize(f"  {stdout}", theme.muted)


def render_bash_input(command: str) -> str:
    prefix = style("!", fg=BASH_MODE_PINK, bg=BASH_COMMAND_BG)
    return prefix + style(f" {command} ", fg=BASH_COMMAND_FG, bg=BASH_COMMAND_BG)


def render_bash_output(output: BashOutput, theme: RenderTheme, max_output_lines: int = 5) -> str:
    """Render stderr (red) then stdout, each capped at ``max_output_lines``.

    Only the very first rendered line carries the ``⎿`` connector.
    """
    lines: list[str] = []

    def add_block(raw_lines: list[str], color: str | None, connector: bool) -> None:
        shown = raw_lines[:max_output_lines]
        for i, line in enumerate(shown):
            prefix = f"  {BOX.indent}  " if i == 0 and connector else "     "
            formatted = prefix + line
            lines.append(colorize(formatted, color) if color else formatted)
        hidden = len(raw_lines) - len(shown)
        if hidden > 0:
            lines.append(colorize(f"     … +{hidden} lines (ctrl+o to expand)", theme.muted))

    if output.stderr.strip():
        add_block(output.stderr.split("\n"), BASH_STDERR_COLOR, True)

    if output.stdout.strip():
        add_block(output.stdout.split("\n"), None, not lines)

    return "\n".join(lines)
