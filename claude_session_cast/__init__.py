"""Claude Session Cast: turn Claude Code sessions into asciicast recordings."""

__version__ = "0.1.0"

from claude_session_cast.asciicast import (
    THEMES,
    TIMING_PRESETS,
    AsciicastDocument,
    AsciicastHeader,
    AsciicastTheme,
    MarkerOptions,
    TimingConfig,
)
from claude_session_cast.builder import (
    AsciicastBuilder,
    BuilderConfig,
    EmptyCastError,
    parse_cast,
    read_cast,
    serialize_cast,
    write_cast,
)
from claude_session_cast.clip import ClipOptions, extract_clip, get_clip_summary
from claude_session_cast.convert import (
    ConvertOptions,
    ConvertResult,
    ConvertStats,
    SessionInfo,
    convert_to_asciicast,
    convert_with_preset,
    generate_title,
    get_session_info,
    quick_convert,
)
from claude_session_cast.messages import RenderConfig, render_message
from claude_session_cast.parser import load_transcript, read_session
from claude_session_cast.theme import RENDER_THEMES, RenderTheme, get_theme
from claude_session_cast.timing import TimingOptions

__all__ = [
    # Format
    "AsciicastDocument",
    "AsciicastHeader",
    "AsciicastTheme",
    "THEMES",
    "TimingConfig",
    "TIMING_PRESETS",
    "MarkerOptions",
    # Builder
    "AsciicastBuilder",
    "BuilderConfig",
    "EmptyCastError",
    "serialize_cast",
    "parse_cast",
    "write_cast",
    "read_cast",
    # Conversion
    "ConvertOptions",
    "ConvertResult",
    "ConvertStats",
    "TimingOptions",
    "convert_to_asciicast",
    "convert_with_preset",
    "quick_convert",
    "SessionInfo",
    "get_session_info",
    "generate_title",
    # Rendering
    "RenderConfig",
    "RenderTheme",
    "RENDER_THEMES",
    "get_theme",
    "render_message",
    # Loading
    "read_session",
    "load_transcript",
    "ClipOptions",
    "extract_clip",
    "get_clip_summary",
]
