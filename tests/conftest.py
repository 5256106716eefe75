"""Shared test fixtures for Claude Session Cast."""

import json
from pathlib import Path
from typing import Callable

import pytest


# ---------------------------------------------------------------------------
# Transcript entry dicts for each message type
# ---------------------------------------------------------------------------


@pytest.fixture
def user_prompt_entry() -> dict:
    return {
        "type": "user",
        "uuid": "user-0001-aaaa",
        "timestamp": "2025-01-15T10:00:00.000Z",
        "sessionId": "sess-001",
        "message": {"role": "user", "content": "list the files please"},
    }


@pytest.fixture
def assistant_text_entry() -> dict:
    return {
        "type": "assistant",
        "uuid": "asst-0001-bbbb",
        "timestamp": "2025-01-15T10:00:02.000Z",
        "message": {
            "role": "assistant",
            "content": [{"type": "text", "text": "Sure, here they are."}],
        },
    }


@pytest.fixture
def tool_use_entry() -> dict:
    return {
        "type": "assistant",
        "uuid": "asst-0002-cccc",
        "timestamp": "2025-01-15T10:00:03.000Z",
        "message": {
            "role": "assistant",
            "content": [
                {
                    "type": "tool_use",
                    "id": "toolu_001",
                    "name": "Bash",
                    "input": {"command": "ls -la"},
                }
            ],
        },
    }


@pytest.fixture
def tool_result_entry() -> dict:
    return {
        "type": "user",
        "uuid": "user-0002-dddd",
        "timestamp": "2025-01-15T10:00:04.000Z",
        "message": {
            "role": "user",
            "content": [
                {
                    "type": "tool_result",
                    "tool_use_id": "toolu_001",
                    "content": "file1.py\nfile2.py",
                    "is_error": False,
                }
            ],
        },
        "toolUseResult": {"stdout": "file1.py\nfile2.py", "stderr": ""},
    }


@pytest.fixture
def thinking_entry() -> dict:
    return {
        "type": "assistant",
        "uuid": "asst-0003-eeee",
        "timestamp": "2025-01-15T10:00:05.000Z",
        "message": {
            "role": "assistant",
            "content": [{"type": "thinking", "thinking": "Let me consider this."}],
        },
    }


@pytest.fixture
def todo_write_entry() -> dict:
    return {
        "type": "assistant",
        "uuid": "asst-0004-ffff",
        "timestamp": "2025-01-15T10:00:06.000Z",
        "message": {
            "role": "assistant",
            "content": [
                {
                    "type": "tool_use",
                    "id": "toolu_002",
                    "name": "TodoWrite",
                    "input": {
                        "todos": [
                            {"content": "Write tests", "status": "pending", "activeForm": "Writing tests"}
                        ]
                    },
                }
            ],
        },
    }


@pytest.fixture
def todo_result_entry() -> dict:
    return {
        "type": "user",
        "uuid": "user-0003-gggg",
        "timestamp": "2025-01-15T10:00:07.000Z",
        "message": {
            "role": "user",
            "content": [{"type": "tool_result", "tool_use_id": "toolu_002", "content": "ok"}],
        },
        "toolUseResult": {
            "oldTodos": [],
            "newTodos": [
                {"content": "Write tests", "status": "in_progress", "activeForm": "Writing tests"}
            ],
        },
    }


@pytest.fixture
def edit_result_entry() -> dict:
    return {
        "type": "user",
        "uuid": "user-0004-hhhh",
        "timestamp": "2025-01-15T10:00:08.000Z",
        "message": {
            "role": "user",
            "content": [{"type": "tool_result", "tool_use_id": "toolu_003", "content": "ok"}],
        },
        "toolUseResult": {
            "filePath": "/repo/app.py",
            "structuredPatch": [
                {
                    "oldStart": 10,
                    "oldLines": 2,
                    "newStart": 10,
                    "newLines": 3,
                    "lines": [" context", "-old value", "+new value", "+extra line"],
                }
            ],
        },
    }


@pytest.fixture
def bash_input_entry() -> dict:
    return {
        "type": "user",
        "uuid": "user-0005-iiii",
        "timestamp": "2025-01-15T10:00:09.000Z",
        "message": {"role": "user", "content": "<bash-input>ls -la</bash-input>"},
    }


@pytest.fixture
def bash_output_entry() -> dict:
    return {
        "type": "user",
        "uuid": "user-0006-jjjj",
        "timestamp": "2025-01-15T10:00:10.000Z",
        "message": {
            "role": "user",
            "content": "<bash-stdout>total 0\ndrwxr-xr-x  2 me  staff  64 .</bash-stdout><bash-stderr></bash-stderr>",
        },
    }


@pytest.fixture
def slash_command_entry() -> dict:
    return {
        "type": "user",
        "uuid": "user-0007-kkkk",
        "timestamp": "2025-01-15T10:00:11.000Z",
        "message": {
            "role": "user",
            "content": (
                "<command-name>/model</command-name>\n"
                "<command-message>model</command-message>\n"
                "<command-args>opus</command-args>"
            ),
        },
    }


@pytest.fixture
def system_info_entry() -> dict:
    return {
        "type": "system",
        "uuid": "sys-0001-llll",
        "timestamp": "2025-01-15T10:00:12.000Z",
        "level": "info",
        "content": "Conversation compacted",
    }


@pytest.fixture
def meta_entry() -> dict:
    return {
        "type": "user",
        "isMeta": True,
        "uuid": "user-0008-mmmm",
        "timestamp": "2025-01-15T10:00:13.000Z",
        "message": {"role": "user", "content": "skill expansion text"},
    }


@pytest.fixture
def interrupt_entry() -> dict:
    return {
        "type": "user",
        "uuid": "user-0009-nnnn",
        "timestamp": "2025-01-15T10:00:14.000Z",
        "message": {
            "role": "user",
            "content": [{"type": "text", "text": "[Request interrupted by user]"}],
        },
    }


@pytest.fixture
def sample_session(
    user_prompt_entry: dict,
    assistant_text_entry: dict,
    tool_use_entry: dict,
    tool_result_entry: dict,
) -> list[dict]:
    """A minimal prompt → reply → tool call → result exchange."""
    return [user_prompt_entry, assistant_text_entry, tool_use_entry, tool_result_entry]


# ---------------------------------------------------------------------------
# JSONL files
# ---------------------------------------------------------------------------


@pytest.fixture
def write_jsonl(tmp_path: Path) -> Callable[..., Path]:
    """Write entries (dicts or raw strings) to ``tmp_path/name`` as JSONL."""

    def _write(name: str, entries: list) -> Path:
        path = tmp_path / name
        lines = [e if isinstance(e, str) else json.dumps(e) for e in entries]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
