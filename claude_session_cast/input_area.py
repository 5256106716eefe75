"""Fixed-position input box and burst-typing animation.

The bottom of the terminal is reserved for a three-line input frame with a
spinner row above it; everything above that is a scroll region. Layout for
a 40-row terminal::

    rows 1-36  scroll region (transcript content)
    row 37     spinner
    row 38     top rule
    row 39     "→ " prompt line
    row 40     bottom rule
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .ansi import BOX, colorize, erase_line, horizontal_rule, move_to, set_scroll_region, word_wrap
from .theme import TOKYO_NIGHT, RenderTheme
from .timing import Segment


@dataclass(frozen=True)
class InputUIConfig:
    theme: RenderTheme = TOKYO_NIGHT
    width: int = 100
    height: int = 40
    # 0-indexed column where typed text starts, just after "→ ".
    text_column: int = 2

    @property
    def cursor_column(self) -> int:
        """1-indexed ANSI column of the input cursor."""
        return self.text_column + 1


@dataclass(frozen=True)
class InputAreaRows:
    scroll_end: int
    spinner_row: int
    top_line: int
    input: int
    bottom_line: int


def get_input_area_rows(height: int) -> InputAreaRows:
    return InputAreaRows(
        scroll_end=height - 4,
        spinner_row=height - 3,
        top_line=height - 2,
        input=height - 1,
        bottom_line=height,
    )


@dataclass(frozen=True)
class BurstTypingConfig:
    """Word-burst typing: gaps start at ``initial_gap_ms`` and decay per word."""

    initial_gap_ms: float = 200
    min_gap_ms: float = 30
    decay_factor: float = 0.75


DEFAULT_BURST_TYPING_CONFIG = BurstTypingConfig()


@dataclass
class InputAnimationResult:
    segments: list[Segment] = field(default_factory=list)
    scroll_output: str = ""
    duration: float = 0.0


@dataclass(frozen=True)
class InputFrame:
    top_line: str
    prompt_prefix: str
    bottom_line: str


def render_input_frame(config: InputUIConfig) -> InputFrame:
    rule = horizontal_rule(config.width, config.theme.muted)
    return InputFrame(
        top_line=rule,
        prompt_prefix=colorize(f"{BOX.arrow} ", config.theme.user_prompt),
        bottom_line=rule,
    )


def wrap_input_text(text: str, config: InputUIConfig) -> list[str]:
    """Wrap prompt text for the scroll area, one right-margin column spare."""
    text_width = config.width - config.text_column - 1
    lines: list[str] = []
    for paragraph in text.split("\n"):
        lines.extend(word_wrap(paragraph, text_width) or [""])
    return lines


def split_into_words(text: str) -> list[str]:
    """Tokenise into words, with every space and newline as its own token."""
    tokens: list[str] = []
    current = ""
    for char in text:
        if char in (" ", "\n"):
            if current:
                tokens.append(current)
                current = ""
            tokens.append(char)
        else:
            current += char
    if current:
        tokens.append(current)
    return tokens


def generate_burst_typing_segments(
    text: str,
    start_time: float,
    config: BurstTypingConfig = DEFAULT_BURST_TYPING_CONFIG,
) -> list[Segment]:
    """One segment per token; time only advances after non-blank tokens."""
    segments: list[Segment] = []
    current_time = start_time
    gap = config.initial_gap_ms / 1000

    for word in split_into_words(text):
        segments.append(Segment(text=word, time=current_time))
        if word.strip():
            current_time += gap
            gap = max(config.min_gap_ms / 1000, gap * config.decay_factor)

    return segments


def generate_input_area_setup(config: InputUIConfig) -> str:
    """Install the scroll region and draw the input frame."""
    rows = get_input_area_rows(config.height)
    frame = render_input_frame(config)
    return (
        set_scroll_region(1, rows.scroll_end)
        + move_to(rows.top_line)
        + frame.top_line
        + move_to(rows.input)
        + frame.prompt_prefix
        + move_to(rows.bottom_line)
        + frame.bottom_line
        + move_to(rows.input, config.cursor_column)
    )


def redraw_input_frame(config: InputUIConfig) -> str:
    """Erase and redraw the three frame lines after content may have hit them."""
    rows = get_input_area_rows(config.height)
    frame = render_input_frame(config)
    return (
        move_to(rows.top_line)
        + erase_line()
        + frame.top_line
        + move_to(rows.input)
        + erase_line()
        + frame.prompt_prefix
        + move_to(rows.bottom_line)
        + erase_line()
        + frame.bottom_line
        + move_to(rows.input, config.cursor_column)
    )


def generate_input_animation(
    text: str,
    start_time: float,
    ui_config: InputUIConfig,
    typing_config: BurstTypingConfig = DEFAULT_BURST_TYPING_CONFIG,
) -> InputAnimationResult:
    """Type ``text`` into the input row, submit it and prepare scroll output.

    Text too long for the input row is shown truncated with ``…`` and the
    submit is delayed slightly, as if the user kept typing. The full prompt
    is returned separately as ``scroll_output`` for the scroll region.
    """
    rows = get_input_area_rows(ui_config.height)
    frame = render_input_frame(ui_config)
    cursor_col = ui_config.cursor_column

    segments = [Segment(text=move_to(rows.input, cursor_col), time=start_time)]
    current_time = start_time + 0.05

    max_display = ui_config.width - ui_config.text_column - 1
    display_text = text.replace("\n", " ")
    extra_delay = 0.0
    if len(display_text) > max_display:
        display_text = display_text[: max_display - 1] + "…"
        extra_delay = 0.4

    typed = generate_burst_typing_segments(display_text, current_time, typing_config)
    segments.extend(typed)
    if typed:
        current_time = typed[-1].time + 0.2 + extra_delay

    # Submit: clear the input row back to the bare prompt.
    segments.append(Segment(
        text=move_to(rows.input) + erase_line() + frame.prompt_prefix + move_to(rows.input, cursor_col),
        time=current_time,
    ))
    current_time += 0.1

    segments.append(Segment(text=move_to(rows.scroll_end) + "\r\n", time=current_time))

    hang = " " * cursor_col
    scroll_lines = [
        (frame.prompt_prefix if i == 0 else hang) + colorize(line, ui_config.theme.user_prompt)
        for i, line in enumerate(wrap_input_text(text, ui_config))
    ]

    return InputAnimationResult(
        segments=segments,
        scroll_output="\r\n".join(scroll_lines) + "\r\n",
        duration=current_time - start_time,
    )
