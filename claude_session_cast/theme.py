"""Semantic colour themes for rendering transcript entries."""

from __future__ import annotations

from dataclasses import dataclass

from .asciicast import THEMES, AsciicastTheme


@dataclass(frozen=True)
class RenderTheme:
    """Hex colours keyed by their role in the rendered output."""

    fg: str
    bg: str
    user_prompt: str
    user_prompt_bg: str
    assistant_text: str
    tool_name: str
    tool_bullet_success: str
    tool_bullet_error: str
    thinking: str
    box_drawing: str
    file_path: str
    muted: str
    agent: str
    diff_add_line_bg: str
    diff_add_char_bg: str
    diff_remove_line_bg: str
    diff_remove_char_bg: str


TOKYO_NIGHT = RenderTheme(
    fg="#a9b1d6",
    bg="#1a1b26",
    user_prompt="#7aa2f7",
    user_prompt_bg="#373737",
    assistant_text="#a9b1d6",
    tool_name="#e0af68",
    tool_bullet_success="#9ece6a",
    tool_bullet_error="#f7768e",
    thinking="#565f89",
    box_drawing="#414868",
    file_path="#7dcfff",
    muted="#565f89",
    agent="#bb9af7",
    diff_add_line_bg="#225c2b",
    diff_add_char_bg="#38a660",
    diff_remove_line_bg="#5c2b2b",
    diff_remove_char_bg="#a63838",
)

TOKYO_STORM = RenderTheme(
    fg="#a9b1d6",
    bg="#24283b",
    user_prompt="#7aa2f7",
    user_prompt_bg="#373737",
    assistant_text="#a9b1d6",
    tool_name="#e0af68",
    tool_bullet_success="#9ece6a",
    tool_bullet_error="#f7768e",
    thinking="#565f89",
    box_drawing="#414868",
    file_path="#7dcfff",
    muted="#565f89",
    agent="#bb9af7",
    diff_add_line_bg="#225c2b",
    diff_add_char_bg="#38a660",
    diff_remove_line_bg="#5c2b2b",
    diff_remove_char_bg="#a63838",
)

DRACULA = RenderTheme(
    fg="#f8f8f2",
    bg="#282a36",
    user_prompt="#8be9fd",
    user_prompt_bg="#373737",
    assistant_text="#f8f8f2",
    tool_name="#f1fa8c",
    tool_bullet_success="#50fa7b",
    tool_bullet_error="#ff5555",
    thinking="#6272a4",
    box_drawing="#44475a",
    file_path="#ff79c6",
    muted="#6272a4",
    agent="#bd93f9",
    diff_add_line_bg="#1e4620",
    diff_add_char_bg="#2e7d32",
    diff_remove_line_bg="#4a1e1e",
    diff_remove_char_bg="#8b2e2e",
)

NORD = RenderTheme(
    fg="#d8dee9",
    bg="#2e3440",
    user_prompt="#81a1c1",
    user_prompt_bg="#373737",
    assistant_text="#d8dee9",
    tool_name="#ebcb8b",
    tool_bullet_success="#a3be8c",
    tool_bullet_error="#bf616a",
    thinking="#4c566a",
    box_drawing="#3b4252",
    file_path="#88c0d0",
    muted="#4c566a",
    agent="#b48ead",
    diff_add_line_bg="#2e4a3a",
    diff_add_char_bg="#4a7a5c",
    diff_remove_line_bg="#4a2e2e",
    diff_remove_char_bg="#7a4a4a",
)

CATPPUCCIN_MOCHA = RenderTheme(
    fg="#cdd6f4",
    bg="#1e1e2e",
    user_prompt="#89b4fa",
    user_prompt_bg="#373737",
    assistant_text="#cdd6f4",
    tool_name="#f9e2af",
    tool_bullet_success="#a6e3a1",
    tool_bullet_error="#f38ba8",
    thinking="#585b70",
    box_drawing="#45475a",
    file_path="#94e2d5",
    muted="#585b70",
    agent="#f5c2e7",
    diff_add_line_bg="#264a35",
    diff_add_char_bg="#40a060",
    diff_remove_line_bg="#4a2635",
    diff_remove_char_bg="#a04050",
)

RENDER_THEMES: dict[str, RenderTheme] = {
    "tokyo-night": TOKYO_NIGHT,
    "tokyo-storm": TOKYO_STORM,
    "dracula": DRACULA,
    "nord": NORD,
    "catppuccin-mocha": CATPPUCCIN_MOCHA,
}

THEME_NAMES: tuple[str, ...] = tuple(RENDER_THEMES)


def get_theme(name: str) -> RenderTheme:
    """Look up a preset by name, falling back to tokyo-night."""
    return RENDER_THEMES.get(name, TOKYO_NIGHT)


def to_asciicast_theme(theme: RenderTheme) -> AsciicastTheme:
    """Terminal palette for the recording header.

    Preset instances use their hand-tuned palette. Any other theme gets a
    palette derived from its semantic colours (ANSI 0-7 then bright 8-15).
    """
    for name, preset in RENDER_THEMES.items():
        if preset is theme and name in THEMES:
            return THEMES[name]

    palette = [
        theme.bg,
        theme.tool_bullet_error,
        theme.tool_bullet_success,
        theme.tool_name,
        theme.user_prompt,
        theme.agent,
        theme.file_path,
        theme.fg,
        theme.muted,
        theme.tool_bullet_error,
        theme.tool_bullet_success,
        theme.tool_name,
        theme.user_prompt,
        theme.agent,
        theme.file_path,
        theme.assistant_text,
    ]
    return AsciicastTheme(fg=theme.fg, bg=theme.bg, palette=":".join(palette))
