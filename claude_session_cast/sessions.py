"""Discovery of Claude Code session files for a working directory."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

CLAUDE_PROJECTS_DIR = Path("~/.claude/projects").expanduser()


@dataclass
class SessionFile:
    path: Path
    name: str
    modified: datetime
    size: int


def get_claude_project_path(cwd: str | Path) -> Path:
    """Claude stores a project's sessions under its path with ``/`` → ``-``."""
    return CLAUDE_PROJECTS_DIR / str(cwd).replace("/", "-")


def list_sessions(project_path: str | Path) -> list[SessionFile]:
    """Session files in ``project_path``, newest first.

    Sub-agent transcripts (``agent-*.jsonl``) are not sessions of their own.
    A missing directory yields an empty list.
    """
    project_path = Path(project_path)
    if not project_path.is_dir():
        return []

    sessions = []
    for file_path in project_path.glob("*.jsonl"):
        if file_path.name.startswith("agent-"):
            continue
        stat = file_path.stat()
        sessions.append(SessionFile(
            path=file_path,
            name=file_path.stem,
            modified=datetime.fromtimestamp(stat.st_mtime),
            size=stat.st_size,
        ))
    return sorted(sessions, key=lambda s: s.modified, reverse=True)


def get_latest_session(cwd: str | Path) -> Path | None:
    sessions = list_sessions(get_claude_project_path(cwd))
    return sessions[0].path if sessions else None


def format_size(size_bytes: int) -> str:
    """Format byte size as human-readable string."""
    if size_bytes < 1024:
        return f"{size_bytes}B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f}KB"
    return f"{size_bytes / 1024 / 1024:.1f}MB"


def format_age(modified: datetime, now: float | None = None) -> str:
    """Coarse relative age: ``just now``, ``5m ago``, ``3h ago``, ``2d ago``."""
    now = time.time() if now is None else now
    seconds = int(now - modified.timestamp())
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"
