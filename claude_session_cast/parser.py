"""JSONL transcript loading and entry field helpers."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Line parsing
# ---------------------------------------------------------------------------


def parse_line(line: str) -> dict | None:
    """Parse one JSONL line; blank, malformed or non-object lines give None."""
    stripped = line.strip()
    if not stripped:
        return None
    try:
        obj = json.loads(stripped)
    except json.JSONDecodeError:
        return None
    return obj if isinstance(obj, dict) else None


def read_session(path: str | Path) -> list[dict]:
    """Read a JSONL file and return list of parsed dicts.

    Skips empty lines and lines that fail JSON parsing (logs a warning).
    """
    path = Path(path)
    results: list[dict] = []
    with path.open("r", encoding="utf-8") as f:
        for line_num, raw_line in enumerate(f, start=1):
            stripped = raw_line.strip()
            if not stripped:
                continue
            try:
                obj = json.loads(stripped)
            except json.JSONDecodeError as exc:
                logger.warning("Line %d: failed to parse JSON: %s", line_num, exc)
                continue
            if isinstance(obj, dict):
                results.append(obj)
            else:
                logger.warning("Line %d: expected dict, got %s", line_num, type(obj).__name__)
    return results


# ---------------------------------------------------------------------------
# Transcript loading with sub-agent stitching
# ---------------------------------------------------------------------------


def _agent_id(entry: dict) -> str | None:
    if entry.get("type") != "user":
        return None
    result = entry.get("toolUseResult")
    if isinstance(result, dict) and isinstance(result.get("agentId"), str) and result["agentId"]:
        return result["agentId"]
    return None


def load_transcript(
    path: str | Path,
    load_agents: bool = True,
    agent_cache: dict[str, list[dict]] | None = None,
) -> list[dict]:
    """Load a session transcript ready for conversion.

    A tool result that references a sub-agent (``toolUseResult.agentId``) is
    followed by the entries of the sibling ``agent-<id>.jsonl`` file, each
    marked ``isSidechain``. Agent files are loaded recursively and cached per
    id; a missing agent file contributes nothing. Parallel tool calls are
    then paired with their results.

    Raises:
        OSError: If the main transcript cannot be read.
    """
    path = Path(path)
    cache = agent_cache if agent_cache is not None else {}
    entries: list[dict] = []

    for entry in read_session(path):
        entries.append(entry)
        agent_id = _agent_id(entry) if load_agents else None
        if agent_id is None:
            continue

        if agent_id not in cache:
            agent_path = path.parent / f"agent-{agent_id}.jsonl"
            # Reserve the slot first so self-referencing agents terminate.
            cache[agent_id] = []
            try:
                cache[agent_id] = load_transcript(agent_path, True, cache)
            except OSError as exc:
                logger.debug(
                    "agent_transcript_unavailable",
                    extra={"agent_id": agent_id, "path": str(agent_path), "error": str(exc)},
                )

        for agent_entry in cache[agent_id]:
            agent_entry["isSidechain"] = True
            entries.append(agent_entry)

    return interleave_tool_calls_and_results(entries)


def is_tool_call_message(entry: dict) -> bool:
    if entry.get("type") != "assistant":
        return False
    content = (entry.get("message") or {}).get("content")
    if not isinstance(content, list):
        return False
    return any(isinstance(item, dict) and item.get("type") == "tool_use" for item in content)


def is_tool_result_message(entry: dict) -> bool:
    # A present-but-null toolUseResult still marks a result line.
    return entry.get("type") == "user" and "toolUseResult" in entry


def interleave_tool_calls_and_results(entries: list[dict]) -> list[dict]:
    """Reorder parallel tool calls so each is followed by its result.

    The transcript stores ``[call1, call2, result1, result2]``; results are
    matched to calls by position, giving ``[call1, result1, call2, result2]``.
    Unmatched calls or results keep their relative order after the pairs.
    """
    result: list[dict] = []
    i = 0
    while i < len(entries):
        calls: list[dict] = []
        while i < len(entries) and is_tool_call_message(entries[i]):
            calls.append(entries[i])
            i += 1

        results: list[dict] = []
        while i < len(entries) and is_tool_result_message(entries[i]):
            results.append(entries[i])
            i += 1

        if calls and results:
            pairs = min(len(calls), len(results))
            for call, res in zip(calls, results):
                result.extend((call, res))
            result.extend(calls[pairs:])
            result.extend(results[pairs:])
        else:
            result.extend(calls)
            result.extend(results)

        if not calls and not results and i < len(entries):
            result.append(entries[i])
            i += 1

    return result


# ---------------------------------------------------------------------------
# Field extraction helpers
# ---------------------------------------------------------------------------


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def get_timestamp(entry: dict) -> datetime | None:
    value = entry.get("timestamp")
    if isinstance(value, str) and value:
        return parse_timestamp(value)
    return None


def get_uuid(entry: dict) -> str | None:
    value = entry.get("uuid")
    return value if isinstance(value, str) and value else None


def sort_by_timestamp(entries: list[dict]) -> list[dict]:
    """Stable chronological sort; entries without a timestamp sort as the epoch."""

    def key(entry: dict) -> float:
        ts = get_timestamp(entry)
        return ts.timestamp() if ts else 0.0

    return sorted(entries, key=key)


def is_renderable_message(entry: dict) -> bool:
    """User, assistant and non-null system entries are rendered."""
    entry_type = entry.get("type")
    if entry_type in ("user", "assistant"):
        return True
    return entry_type == "system" and entry.get("content") is not None
