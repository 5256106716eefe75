"""Sharing recordings via the ``asciinema upload`` command."""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_URL_RE = re.compile(r"https?://asciinema\.org/a/[a-zA-Z0-9]+")
_AUTH_HINTS = ("auth", "token", "API")

MISSING_CLI_ERROR = "asciinema CLI not found. Install with: pip install asciinema"
AUTH_ERROR = "Authentication required. Run 'asciinema auth' first."


@dataclass(frozen=True)
class UploadResult:
    success: bool
    url: str | None = None
    error: str | None = None


def extract_url(text: str) -> str | None:
    match = _URL_RE.search(text)
    return match.group(0) if match else None


def upload_to_asciinema(path: str | Path, executable: str = "asciinema") -> UploadResult:
    """Run ``asciinema upload`` and report the recording URL.

    Never raises for upload failures; the reason is in ``UploadResult.error``.
    """
    try:
        proc = subprocess.run(
            [executable, "upload", str(path)],
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        return UploadResult(success=False, error=MISSING_CLI_ERROR)
    except OSError as exc:
        return UploadResult(success=False, error=str(exc))

    logger.debug("upload_finished", extra={"path": str(path), "returncode": proc.returncode})

    if proc.returncode == 0:
        url = extract_url(proc.stdout) or extract_url(proc.stderr)
        return UploadResult(
            success=True,
            url=url or proc.stdout.strip() or "Upload successful (URL not found in output)",
        )

    output = proc.stdout + proc.stderr
    if any(hint in output for hint in _AUTH_HINTS):
        return UploadResult(success=False, error=AUTH_ERROR)
    return UploadResult(
        success=False,
        error=proc.stderr.strip() or proc.stdout.strip() or f"Exit code: {proc.returncode}",
    )


def check_asciinema(executable: str = "asciinema") -> bool:
    try:
        proc = subprocess.run([executable, "--version"], capture_output=True, check=False)
    except OSError:
        return False
    return proc.returncode == 0
