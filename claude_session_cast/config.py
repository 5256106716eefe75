"""Per-project cast profile stored in ``claude-session-cast.yaml``."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import asdict, dataclass, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

PROFILE_FILENAME = "claude-session-cast.yaml"


@dataclass
class CastProfile:
    """Saved defaults for ``cast``; None means "not set, use the built-in default"."""

    output: str | None = None
    upload: bool | None = None
    theme: str | None = None
    cols: int | None = None
    rows: int | None = None
    title: str | None = None
    preset: str | None = None
    max_wait: float | None = None
    thinking_pause: float | None = None
    typing_effect: bool | None = None
    status_spinner: bool | None = None
    spinner_duration: float | None = None
    markers: str | None = None

    def to_dict(self) -> dict:
        """Serialize to dict for YAML storage, omitting unset keys."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict) -> CastProfile:
        """Deserialize from dict; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


class ProfileManager:
    """Loads and saves the cast profile with atomic writes."""

    def __init__(self, profile_path: Path) -> None:
        self._profile_path = profile_path

    @classmethod
    def for_directory(cls, directory: str | Path) -> ProfileManager:
        return cls(Path(directory) / PROFILE_FILENAME)

    @property
    def profile_path(self) -> Path:
        return self._profile_path

    def exists(self) -> bool:
        return self._profile_path.is_file()

    def load(self) -> CastProfile | None:
        """Return the stored profile, or None if it is missing or unreadable."""
        if not self.exists():
            return None

        try:
            with open(self._profile_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            logger.warning("Ignoring invalid profile %s: %s", self._profile_path, exc)
            return None

        if data is None:
            return CastProfile()
        if not isinstance(data, dict):
            logger.warning("Ignoring profile %s: expected a mapping", self._profile_path)
            return None
        return CastProfile.from_dict(data)

    def save(self, profile: CastProfile) -> None:
        """Write the profile (temp file + rename)."""
        self._profile_path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_path = tempfile.mkstemp(
            dir=self._profile_path.parent,
            prefix=".config_",
            suffix=".yaml.tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(profile.to_dict(), f, default_flow_style=False)
            os.replace(temp_path, self._profile_path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise
