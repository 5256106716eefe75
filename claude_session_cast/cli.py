#!/usr/bin/env python3
"""CLI entry point for Claude Session Cast.

Convert Claude Code session transcripts into asciicast v3 recordings, list
the messages of a session, and find the sessions of the current project.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import tempfile
from dataclasses import fields, replace
from datetime import timezone
from pathlib import Path

from . import __version__
from .asciicast import MARKER_MODES, TIMING_PRESETS, MarkerOptions
from .builder import BuilderConfig, serialize_cast
from .clip import ClipOptions, extract_clip, get_clip_summary
from .config import CastProfile, ProfileManager, PROFILE_FILENAME
from .content import TextItem, ToolUseItem, parse_content
from .convert import ConvertOptions, ConvertStats, convert_to_asciicast, generate_title, get_session_info
from .messages import DEFAULT_RENDER_CONFIG
from .parser import get_timestamp, get_uuid, is_renderable_message, load_transcript
from .sessions import format_age, format_size, get_claude_project_path, get_latest_session, list_sessions
from .theme import THEME_NAMES, get_theme
from .timing import TimingOptions
from .upload import upload_to_asciinema

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

# Built-in values used when neither a flag nor the profile sets an option.
CAST_DEFAULTS = CastProfile(
    upload=False,
    theme="tokyo-night",
    cols=100,
    rows=40,
    preset="default",
    status_spinner=True,
    markers="all",
)


class CLIError(Exception):
    """A user-facing failure; the message is printed as ``Error: ...``."""


# ---------------------------------------------------------------------------
# Helper Functions
# ---------------------------------------------------------------------------


def setup_logging(level: str) -> None:
    """Configure logging to stderr."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _merge_profile(args: argparse.Namespace, profile: CastProfile | None) -> CastProfile:
    """Flags override the profile, which overrides :data:`CAST_DEFAULTS`."""
    merged = CAST_DEFAULTS.to_dict()
    if profile is not None:
        merged.update(profile.to_dict())
    for field in fields(CastProfile):
        value = getattr(args, field.name, None)
        if value is not None:
            merged[field.name] = value
    return CastProfile.from_dict(merged)


def _resolve_session_path(args: argparse.Namespace) -> Path:
    if args.latest:
        latest = get_latest_session(Path.cwd())
        if latest is None:
            raise CLIError(
                "No sessions found for current project\n"
                f"  Looked in: {get_claude_project_path(Path.cwd())}"
            )
        if not args.quiet:
            print(f"Using: {latest}", file=sys.stderr)
        return latest
    if args.session:
        return Path(args.session).resolve()
    raise CLIError("Provide a session path or use --latest")


def _print_stats(stats: ConvertStats, preset: str) -> None:
    print(
        f"  Messages: {stats.entries_rendered}/{stats.entries_processed} | "
        f"Events: {stats.events_generated} | "
        f"Markers: {stats.markers_generated} | "
        f"Duration: {stats.duration:.1f}s | "
        f"Preset: {preset}",
        file=sys.stderr,
    )


def _handle_upload(path: Path, quiet: bool) -> int:
    if not quiet:
        print("  Uploading to asciinema.org...", file=sys.stderr)

    result = upload_to_asciinema(path)
    if result.success and result.url:
        print(f"✓ Uploaded: {result.url}")
        return 0

    print(f"✗ Upload failed: {result.error}", file=sys.stderr)
    if result.error and "auth" in result.error:
        print("  Run 'asciinema auth' to authenticate first", file=sys.stderr)
    return 1


# ---------------------------------------------------------------------------
# Command Implementations
# ---------------------------------------------------------------------------


def _cast(args: argparse.Namespace) -> int:
    """Generate an asciicast from a session file."""
    path = _resolve_session_path(args)

    profile_manager = ProfileManager(args.profile) if args.profile else ProfileManager.for_directory(Path.cwd())
    settings = _merge_profile(args, profile_manager.load())

    # A finished recording can only be shared.
    if path.suffix == ".cast":
        if settings.upload:
            print("  Uploading existing cast file...", file=sys.stderr)
            return _handle_upload(path, quiet=True)
        raise CLIError(
            "Input is already a .cast file\n"
            "  Use --upload to share it on asciinema.org\n"
            "  Or provide a .jsonl session file to convert"
        )

    entries = load_transcript(path, load_agents=args.agents)
    if not entries:
        raise CLIError("No messages found in session file")

    clip = extract_clip(entries, ClipOptions(
        start_uuid=args.start_uuid,
        end_uuid=args.end_uuid,
        start_time=args.start_time,
        end_time=args.end_time,
        last=args.last,
    ))
    if not clip:
        raise CLIError("No messages match the specified criteria")

    if args.save_profile:
        profile_manager.save(settings)
        if not args.quiet:
            print(f"Saved profile: {profile_manager.profile_path}", file=sys.stderr)

    theme = get_theme(settings.theme)
    title = settings.title or generate_title(get_session_info(clip))

    result = convert_to_asciicast(clip, ConvertOptions(
        builder=BuilderConfig(cols=settings.cols, rows=settings.rows, title=title),
        timing=TimingOptions(
            preset=settings.preset,
            max_wait=settings.max_wait,
            thinking_pause=settings.thinking_pause,
            typing_effect=settings.typing_effect,
        ),
        markers=MarkerOptions(mode=settings.markers),
        render=replace(DEFAULT_RENDER_CONFIG, theme=theme, width=settings.cols),
        input_animation=True,
        status_spinner=settings.status_spinner,
        spinner_duration=settings.spinner_duration,
    ))
    cast_content = serialize_cast(result.document)

    if settings.output:
        output_path = Path(settings.output).resolve()
        output_path.write_text(cast_content, encoding="utf-8")
        if not args.quiet:
            print(f"✓ Generated {output_path}", file=sys.stderr)
            _print_stats(result.stats, settings.preset)
        if settings.upload:
            return _handle_upload(output_path, args.quiet)
        return 0

    if settings.upload:
        fd, temp_path = tempfile.mkstemp(prefix="claude-session-cast-", suffix=".cast")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(cast_content)
        return _handle_upload(Path(temp_path), args.quiet)

    sys.stdout.write(cast_content)
    return 0


def _preview(entry: dict) -> tuple[str, str]:
    """Type column and a short content preview for ``list``."""
    entry_type = str(entry.get("type", ""))
    message = entry.get("message") if isinstance(entry.get("message"), dict) else {}
    content = message.get("content")

    if entry_type == "user":
        result = entry.get("toolUseResult")
        if result:
            is_error = isinstance(result, str) or (isinstance(result, dict) and result.get("is_error"))
            return "tool-result", "(error)" if is_error else "(success)"
        text = content if isinstance(content, str) else ""
        return entry_type, text[:40].replace("\n", " ")

    if entry_type == "assistant":
        items = parse_content(content) if isinstance(content, list) else []
        tools = [i.name for i in items if isinstance(i, ToolUseItem)]
        if tools:
            return entry_type, f"[{', '.join(tools)}]"
        text = next((i.text for i in items if isinstance(i, TextItem)), "")
        return entry_type, text[:40].replace("\n", " ")

    if entry_type == "system" and entry.get("content"):
        return entry_type, str(entry["content"])[:40]
    return entry_type, ""


def _list(args: argparse.Namespace) -> int:
    """List messages with UUIDs and timestamps."""
    entries = load_transcript(Path(args.session).resolve(), load_agents=args.agents)
    if not entries:
        print("No messages found in session file")
        return 0

    print(f"{'UUID':<12}{'TIME':<10}{'TYPE':<12}CONTENT")
    print("─" * 80)

    for entry in entries:
        if not args.all and not is_renderable_message(entry):
            continue
        uuid = get_uuid(entry)
        timestamp = get_timestamp(entry)
        uuid_short = uuid[:10] + ".." if uuid else " " * 12
        time_str = timestamp.astimezone(timezone.utc).strftime("%H:%M:%S") if timestamp else " " * 8
        type_str, preview = _preview(entry)
        print(f"{uuid_short}{time_str:<10}{type_str:<12}{preview}")

    summary = get_clip_summary(entries)
    print("─" * 80)
    print(
        f"Total: {summary.total} messages | "
        f"User: {summary.user} | "
        f"Assistant: {summary.assistant} | "
        f"Tools: {summary.tools}"
    )
    return 0


def _sessions(args: argparse.Namespace) -> int:
    """List available sessions for the current project."""
    cwd = Path.cwd()
    project_path = get_claude_project_path(cwd)
    sessions = list_sessions(project_path)

    if not sessions:
        print("No sessions found")
        print(f"  Project path: {project_path}")
        return 0

    print(f"Sessions for {cwd}")
    print(project_path)
    print()
    for session in sessions:
        print(f"{session.name[:8]}  {format_age(session.modified):<12}{format_size(session.size)}")
    print()
    print("Use: claude-session-cast cast --latest")
    return 0


# ---------------------------------------------------------------------------
# CLI Argument Parsing
# ---------------------------------------------------------------------------


def _create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="claude-session-cast",
        description="Convert Claude Code session JSONL files to asciicast v3.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Options left at None fall back to the profile, then to CAST_DEFAULTS.
    cast_parser = subparsers.add_parser("cast", help="Generate asciicast from a session file")
    cast_parser.add_argument("session", nargs="?", help="Path to session JSONL file (or use --latest)")
    cast_parser.add_argument("--latest", action="store_true", help="Use most recent session from current project")
    cast_parser.add_argument("--start-uuid", help="Start from message UUID")
    cast_parser.add_argument("--end-uuid", help="End at message UUID")
    cast_parser.add_argument("--last", type=int, help="Last N messages")
    cast_parser.add_argument("--start-time", help="Start from timestamp (ISO 8601)")
    cast_parser.add_argument("--end-time", help="End at timestamp (ISO 8601)")
    cast_parser.add_argument("-o", "--output", help="Output file path (default: stdout)")
    cast_parser.add_argument("--theme", choices=THEME_NAMES, help="Theme name (default: tokyo-night)")
    cast_parser.add_argument("--preset", choices=tuple(TIMING_PRESETS), help="Timing preset (default: default)")
    cast_parser.add_argument("--max-wait", type=float, help="Maximum pause between events (seconds)")
    cast_parser.add_argument("--thinking-pause", type=float, help="Pause before assistant response (seconds)")
    cast_parser.add_argument(
        "--typing-effect", action="store_const", const=True, default=None,
        help="Enable typing effect for user input",
    )
    cast_parser.add_argument(
        "--no-status-spinner", dest="status_spinner", action="store_const", const=False, default=None,
        help="Disable status spinner animation",
    )
    cast_parser.add_argument("--spinner-duration", type=float, help="Duration of spinner animation (seconds)")
    cast_parser.add_argument("--cols", type=int, help="Terminal width (default: 100)")
    cast_parser.add_argument("--rows", type=int, help="Terminal height (default: 40)")
    cast_parser.add_argument("--markers", choices=MARKER_MODES, help="Marker mode (default: all)")
    cast_parser.add_argument("--title", help="Recording title")
    cast_parser.add_argument(
        "--upload", action="store_const", const=True, default=None,
        help="Upload to asciinema.org after generation",
    )
    cast_parser.add_argument(
        "--no-agents", dest="agents", action="store_false",
        help="Exclude agent/sub-assistant messages",
    )
    cast_parser.add_argument("-q", "--quiet", action="store_true", help="Suppress stats output")
    cast_parser.add_argument(
        "--profile", type=Path, default=None,
        help=f"Profile file (default: ./{PROFILE_FILENAME})",
    )
    cast_parser.add_argument(
        "--save-profile", action="store_true",
        help="Save the effective cast options to the profile file",
    )

    list_parser = subparsers.add_parser("list", help="List messages with UUIDs and timestamps")
    list_parser.add_argument("session", help="Path to session JSONL file")
    list_parser.add_argument(
        "--no-agents", dest="agents", action="store_false",
        help="Exclude agent/sub-assistant messages",
    )
    list_parser.add_argument("--all", action="store_true", help="Show all messages including non-renderable")

    subparsers.add_parser("sessions", help="List available sessions for current project")

    return parser


_COMMANDS = {
    "cast": _cast,
    "list": _list,
    "sessions": _sessions,
}


# ---------------------------------------------------------------------------
# Main Entry Point
# ---------------------------------------------------------------------------


def main(args: list[str] | None = None) -> int:
    """Run the Claude Session Cast CLI.

    Usage:
        claude-session-cast cast <session.jsonl> -o out.cast
        claude-session-cast cast --latest --upload
        claude-session-cast list <session.jsonl>
        claude-session-cast sessions

    Returns:
        Exit code (0 for success, 1 for error).
    """
    parser = _create_parser()
    parsed = parser.parse_args(args)
    setup_logging(parsed.log_level)

    if parsed.command is None:
        parser.print_help()
        return 0

    try:
        return _COMMANDS[parsed.command](parsed)
    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.debug("command_failed", exc_info=True, extra={"command": parsed.command})
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
