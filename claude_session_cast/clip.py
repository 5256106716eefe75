"""Clip extraction: keep the last N messages, a UUID range or a time range."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .parser import get_timestamp, get_uuid, parse_timestamp, sort_by_timestamp


@dataclass(frozen=True)
class ClipOptions:
    """Filters for :func:`extract_clip`.

    ``last`` wins over everything else; otherwise the UUID range is applied
    first and the time range after it. Both ranges are inclusive. Entries
    keep their input order unless a time range is given, which sorts them.
    """

    start_uuid: str | None = None
    end_uuid: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    last: int | None = None


@dataclass
class ClipSummary:
    total: int = 0
    user: int = 0
    assistant: int = 0
    tools: int = 0
    start_time: datetime | None = None
    end_time: datetime | None = None


def is_renderable_for_clip(entry: dict) -> bool:
    """Entries counted by ``last``; queue removals are user steering."""
    entry_type = entry.get("type")
    if entry_type in ("user", "assistant"):
        return True
    if entry_type == "system":
        return entry.get("content") is not None
    if entry_type == "queue-operation":
        return entry.get("operation") == "remove"
    return False


def extract_clip(entries: list[dict], options: ClipOptions | None = None) -> list[dict]:
    options = options or ClipOptions()
    selected = list(entries)

    if options.last is not None:
        if options.last <= 0:
            return []
        renderable = [e for e in selected if is_renderable_for_clip(e)]
        return renderable[-options.last:]

    if options.start_uuid or options.end_uuid:
        selected = _filter_by_uuid_range(selected, options.start_uuid, options.end_uuid)

    if options.start_time or options.end_time:
        selected = _filter_by_time_range(sort_by_timestamp(selected), options.start_time, options.end_time)

    return selected


def _filter_by_uuid_range(entries: list[dict], start_uuid: str | None, end_uuid: str | None) -> list[dict]:
    """Slice between two UUIDs; an id that is not present leaves that side open."""
    uuids = [get_uuid(e) for e in entries]
    start = uuids.index(start_uuid) if start_uuid in uuids else 0
    end = uuids.index(end_uuid) + 1 if end_uuid in uuids else len(entries)
    return entries[start:end]


def _parse_bound(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError(f"Invalid timestamp: {value}")
    return parsed


def _filter_by_time_range(entries: list[dict], start_time: str | None, end_time: str | None) -> list[dict]:
    start = _parse_bound(start_time)
    end = _parse_bound(end_time)

    def keep(entry: dict) -> bool:
        ts = get_timestamp(entry)
        if ts is None:
            return True
        if start is not None and ts < start:
            return False
        if end is not None and ts > end:
            return False
        return True

    return [e for e in entries if keep(e)]


def get_clip_summary(entries: list[dict]) -> ClipSummary:
    summary = ClipSummary(total=len(entries))
    for entry in entries:
        ts = get_timestamp(entry)
        if ts is not None:
            if summary.start_time is None or ts < summary.start_time:
                summary.start_time = ts
            if summary.end_time is None or ts > summary.end_time:
                summary.end_time = ts

        entry_type = entry.get("type")
        if entry_type == "user":
            if entry.get("toolUseResult"):
                summary.tools += 1
            else:
                summary.user += 1
        elif entry_type == "assistant":
            summary.assistant += 1
    return summary
