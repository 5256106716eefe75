"""Transcript → asciicast conversion.

:func:`convert_to_asciicast` walks the entries once, advancing a virtual
clock, emitting markers and rendered output, and optionally animating user
prompts in a fixed input box and a status spinner between turns. All
mutable state for one call lives in a private :class:`_ConversionSession`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone

from .ansi import move_to
from .asciicast import AsciicastDocument, MarkerOptions
from .builder import AsciicastBuilder, BuilderConfig
from .commands import TAG_PARSER, render_bash_input
from .content import TextItem, ThinkingItem, ToolUseItem, parse_content
from .input_area import (
    DEFAULT_BURST_TYPING_CONFIG,
    BurstTypingConfig,
    InputUIConfig,
    generate_input_animation,
    generate_input_area_setup,
    get_input_area_rows,
    redraw_input_frame,
)
from .markers import generate_marker_label, should_have_marker
from .messages import INTERRUPT_TEXT, DEFAULT_RENDER_CONFIG, RenderConfig, extract_text_content, render_message
from .parser import get_timestamp, is_renderable_message
from .spinner import (
    DEFAULT_SPINNER_CONFIG,
    SpinnerMode,
    SpinnerState,
    generate_spinner_clear,
    generate_status_spinner_segments,
    select_verb,
    to_int32,
)
from .theme import RenderTheme, to_asciicast_theme
from .timing import TimingCalculator, TimingOptions
from .todos import active_form, is_todo_write_tool_result
from .verbs import VERBS

logger = logging.getLogger(__name__)

# Minimum playback seconds between spinner verb changes.
MIN_VERB_INTERVAL = 2.0

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MILLISECOND = timedelta(milliseconds=1)


# ---------------------------------------------------------------------------
# Options and results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConvertOptions:
    """Everything that shapes a conversion.

    ``builder.theme`` is always replaced by the palette derived from
    ``render.theme`` so the recording matches the rendered colours.
    ``spinner_duration`` is accepted for profile compatibility; spinner
    frames always span the real gap between entries.
    """

    builder: BuilderConfig = field(default_factory=BuilderConfig)
    timing: TimingOptions = field(default_factory=TimingOptions)
    markers: MarkerOptions = field(default_factory=MarkerOptions)
    render: RenderConfig = DEFAULT_RENDER_CONFIG
    input_animation: bool = False
    input_animation_config: BurstTypingConfig = DEFAULT_BURST_TYPING_CONFIG
    status_spinner: bool = False
    spinner_duration: float | None = None


@dataclass
class ConvertStats:
    entries_processed: int = 0
    entries_rendered: int = 0
    events_generated: int = 0
    markers_generated: int = 0
    duration: float = 0.0


@dataclass
class ConvertResult:
    document: AsciicastDocument
    stats: ConvertStats


# ---------------------------------------------------------------------------
# Entry classification
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _EntryTraits:
    is_bash_output: bool
    is_interrupt: bool
    is_system_info: bool
    is_meta: bool
    is_user_prompt: bool
    is_assistant_with_text: bool
    is_simple_tool_call: bool
    is_agentic: bool


def _classify(entry: dict) -> _EntryTraits:
    entry_type = entry.get("type")
    message = entry.get("message") if isinstance(entry.get("message"), dict) else {}
    raw = message.get("content")
    items = parse_content(raw) if isinstance(raw, list) else []
    has_result = bool(entry.get("toolUseResult"))
    is_user = entry_type == "user"
    is_assistant = entry_type == "assistant"

    is_bash_output = is_user and isinstance(raw, str) and TAG_PARSER.is_bash_output(raw)
    is_interrupt = is_user and not has_result and (
        (isinstance(raw, str) and INTERRUPT_TEXT in raw)
        or any(isinstance(i, TextItem) and INTERRUPT_TEXT in i.text for i in items)
    )
    is_meta = is_user and bool(entry.get("isMeta"))
    tool_uses = [i for i in items if isinstance(i, ToolUseItem)] if is_assistant else []

    return _EntryTraits(
        is_bash_output=is_bash_output,
        is_interrupt=is_interrupt,
        is_system_info=entry_type == "system" and entry.get("level") == "info",
        is_meta=is_meta,
        is_user_prompt=is_user and not has_result and not is_meta and not is_bash_output and not is_interrupt,
        is_assistant_with_text=is_assistant and any(isinstance(i, TextItem) and i.text.strip() for i in items),
        is_simple_tool_call=bool(tool_uses) and not any(t.name == "TodoWrite" for t in tool_uses),
        is_agentic=(
            is_assistant and any(isinstance(i, (ThinkingItem, ToolUseItem)) for i in items)
        ) or (is_user and has_result),
    )


def _verb_seed(entries: list[dict]) -> int:
    """Per-session starting index for verb selection (0-999)."""
    first = get_timestamp(entries[0]) if entries else None
    if first is None:
        return 0
    millis = (first - _EPOCH) // _MILLISECOND
    return abs(to_int32(millis)) % 1000


# ---------------------------------------------------------------------------
# Conversion session
# ---------------------------------------------------------------------------


class _ConversionSession:
    """Builder, clock and spinner state for exactly one conversion."""

    def __init__(self, entries: list[dict], options: ConvertOptions) -> None:
        self.options = options
        self.render = options.render
        self.builder = AsciicastBuilder(replace(options.builder, theme=to_asciicast_theme(options.render.theme)))
        self.timing = TimingCalculator(options.timing.resolve())

        self.input_config = InputUIConfig(
            theme=options.render.theme,
            width=options.builder.cols,
            height=options.builder.rows,
            text_column=2,
        )
        self.rows = get_input_area_rows(options.builder.rows)
        self.spinner_row = self.rows.spinner_row if options.input_animation else None

        self.spinner = SpinnerState()
        self.active_form: str | None = None
        self.message_index = _verb_seed(entries)
        self.last_verb: str | None = None
        self.last_verb_change = 0.0

        self.entries_rendered = 0
        self.markers_generated = 0

    # -- spinner ------------------------------------------------------------

    def start_spinner(self, verb: str) -> None:
        """Show the first frame of a new spinner, replacing any running one."""
        if self.spinner.active:
            self.builder.output(generate_spinner_clear(self.spinner.row))
        first = generate_status_spinner_segments(
            verb, self.builder.time, 0.2, DEFAULT_SPINNER_CONFIG, self.spinner_row
        )
        if first:
            self.builder.output(first[0].text)
        self.spinner.start(verb, self.spinner_row)

    def continue_spinner(self, duration: float) -> None:
        """Fill ``duration`` seconds with spinner frames from the current time."""
        if not self.spinner.active or not self.spinner.verb or duration <= 0:
            return
        for segment in generate_status_spinner_segments(
            self.spinner.verb, self.builder.time, duration, DEFAULT_SPINNER_CONFIG, self.spinner.row
        ):
            self.builder.time = segment.time
            self.builder.output(segment.text)

    def clear_spinner(self) -> None:
        if not self.spinner.active:
            return
        self.builder.output(generate_spinner_clear(self.spinner.row))
        if self.spinner.row is None:
            self.builder.output("\r\n")
        self.spinner.stop()

    def throttled_verb(self) -> str:
        """Next spinner verb, reusing the last one if it changed too recently."""
        elapsed = self.builder.time - self.last_verb_change
        if self.last_verb is not None and elapsed < MIN_VERB_INTERVAL:
            self.message_index += 1
            return self.last_verb

        verb = self.active_form or select_verb(VERBS, self.message_index)
        self.message_index += 1
        self.last_verb_change = self.builder.time
        self.last_verb = verb
        return verb

    # -- main loop ----------------------------------------------------------

    def run(self, entries: list[dict]) -> ConvertResult:
        if self.options.input_animation:
            self.builder.output(generate_input_area_setup(self.input_config))

        for entry in entries:
            if is_renderable_message(entry):
                self._process(entry)

        document = self.builder.build()
        stats = ConvertStats(
            entries_processed=len(entries),
            entries_rendered=self.entries_rendered,
            events_generated=len(document.events),
            markers_generated=self.markers_generated,
            duration=self.builder.time,
        )
        logger.debug(
            "conversion_complete",
            extra={
                "entries_processed": stats.entries_processed,
                "entries_rendered": stats.entries_rendered,
                "events_generated": stats.events_generated,
                "markers_generated": stats.markers_generated,
                "duration": stats.duration,
            },
        )
        return ConvertResult(document=document, stats=stats)

    def _process(self, entry: dict) -> None:
        opts = self.options
        spinner_on = opts.status_spinner

        result = entry.get("toolUseResult")
        if spinner_on and entry.get("type") == "user" and result and is_todo_write_tool_result(result):
            self.active_form = active_form(result["newTodos"])

        traits = _classify(entry)
        animate = opts.input_animation and traits.is_user_prompt

        # Animated prompts keep their own pace unless a spinner must fill the gap.
        if not animate or (spinner_on and self.spinner.active):
            previous = self.builder.time
            entry_time = self.timing.next_entry(entry)
            if spinner_on and self.spinner.active and entry_time - previous > 0:
                self.continue_spinner(entry_time - previous)
            self.builder.time = entry_time

        if spinner_on and self.spinner.active and (traits.is_meta or traits.is_system_info or traits.is_interrupt):
            self.clear_spinner()

        # An inline spinner has already scrolled away under the reply text.
        if spinner_on and self.spinner.mode is SpinnerMode.INLINE and traits.is_assistant_with_text:
            self.spinner.stop()

        if should_have_marker(entry, opts.markers.mode):
            label = generate_marker_label(entry, opts.markers.label_length)
            if label:
                self.builder.marker(label)
                self.markers_generated += 1

        message = entry.get("message") if isinstance(entry.get("message"), dict) else None
        entry_text = extract_text_content(message.get("content")) if message else ""
        is_command = TAG_PARSER.is_command(entry_text)

        if animate and not is_command:
            if not self._animate_prompt(message.get("content") if message else "", entry_text):
                return
        elif not self._render_static(entry, traits):
            return

        self.entries_rendered += 1

    def _animate_prompt(self, raw: object, entry_text: str) -> bool:
        bash_command = TAG_PARSER.parse_bash_input(raw) if isinstance(raw, str) else None
        text = f"! {bash_command}" if bash_command is not None else entry_text
        if not text.strip():
            return False

        animation = generate_input_animation(
            text, self.builder.time, self.input_config, self.options.input_animation_config
        )
        for segment in animation.segments:
            self.builder.time = segment.time
            self.builder.output(segment.text)

        if bash_command is not None:
            self.builder.output(render_bash_input(bash_command).replace("\n", "\r\n") + "\r\n")
        else:
            self.builder.output(animation.scroll_output)

        self.builder.output(redraw_input_frame(self.input_config))
        self.timing.time = self.builder.time

        if self.options.status_spinner:
            self.start_spinner(self.throttled_verb())
        return True

    def _render_static(self, entry: dict, traits: _EntryTraits) -> bool:
        rendered = render_message(entry, self.render)
        if not rendered:
            return False

        message = entry.get("message") if isinstance(entry.get("message"), dict) else {}
        raw = message.get("content")
        is_bash_input = entry.get("type") == "user" and isinstance(raw, str) and TAG_PARSER.is_bash_input(raw)

        # Tool calls and bash fragments sit directly above their results.
        tight = traits.is_simple_tool_call or is_bash_input or traits.is_bash_output
        output = rendered.replace("\n", "\r\n") + ("\r\n" if tight else "\r\n\r\n")

        if self.options.input_animation:
            # One row above the region bottom, so the newline scrolls instead of overwriting.
            self.builder.output(move_to(self.rows.scroll_end - 1, 1) + "\r\n")
        self.builder.output(output)
        if self.options.input_animation:
            self.builder.output(redraw_input_frame(self.input_config))

        if self.options.status_spinner:
            if traits.is_user_prompt:
                self.start_spinner(self.throttled_verb())
            elif traits.is_agentic and not self.spinner.active:
                self.start_spinner(self.throttled_verb())
        return True


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def convert_to_asciicast(entries: list[dict], options: ConvertOptions | None = None) -> ConvertResult:
    """Convert transcript entries into an asciicast document plus statistics."""
    options = options or ConvertOptions()
    return _ConversionSession(entries, options).run(entries)


def convert_with_preset(entries: list[dict], preset: str, theme: RenderTheme | None = None) -> ConvertResult:
    render = replace(DEFAULT_RENDER_CONFIG, theme=theme) if theme else DEFAULT_RENDER_CONFIG
    return convert_to_asciicast(entries, ConvertOptions(timing=TimingOptions(preset=preset), render=render))


def quick_convert(entries: list[dict]) -> AsciicastDocument:
    """Default preset, all markers."""
    return convert_to_asciicast(entries).document


# ---------------------------------------------------------------------------
# Session info
# ---------------------------------------------------------------------------


@dataclass
class SessionInfo:
    start_time: datetime | None = None
    end_time: datetime | None = None
    user_messages: int = 0
    assistant_messages: int = 0
    tool_calls: int = 0
    has_agents: bool = False


def get_session_info(entries: list[dict]) -> SessionInfo:
    info = SessionInfo()
    for entry in entries:
        ts = get_timestamp(entry)
        if ts is not None:
            if info.start_time is None or ts < info.start_time:
                info.start_time = ts
            if info.end_time is None or ts > info.end_time:
                info.end_time = ts

        if entry.get("isSidechain"):
            info.has_agents = True

        entry_type = entry.get("type")
        if entry_type == "user":
            if not entry.get("toolUseResult"):
                info.user_messages += 1
        elif entry_type == "assistant":
            info.assistant_messages += 1
            content = (entry.get("message") or {}).get("content")
            info.tool_calls += sum(isinstance(i, ToolUseItem) for i in parse_content(content))
    return info


def generate_title(info: SessionInfo) -> str:
    if info.tool_calls > 0:
        return f"Claude Code Session ({info.tool_calls} tool calls)"
    return "Claude Code Session"
