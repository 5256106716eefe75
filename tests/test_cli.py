"""Tests for the claude-session-cast command line."""

import json
from pathlib import Path
from typing import Callable

import pytest

from claude_session_cast import cli, sessions
from claude_session_cast.builder import read_cast
from claude_session_cast.config import PROFILE_FILENAME, CastProfile, ProfileManager
from claude_session_cast.upload import UploadResult


@pytest.fixture
def session_file(write_jsonl: Callable[..., Path], sample_session: list[dict]) -> Path:
    return write_jsonl("session.jsonl", sample_session)


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep profile lookups and session discovery inside tmp_path."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sessions, "CLAUDE_PROJECTS_DIR", tmp_path / "projects")
    return tmp_path


class TestMain:
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main([]) == 0
        assert "claude-session-cast" in capsys.readouterr().out

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit):
            cli.main(["--version"])
        assert "0.1.0" in capsys.readouterr().out


class TestCast:
    def test_writes_output_file(self, session_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        out = tmp_path / "demo.cast"
        assert cli.main(["cast", str(session_file), "-o", str(out)]) == 0

        doc = read_cast(out)
        assert doc.header.version == 3
        assert (doc.header.cols, doc.header.rows) == (100, 40)
        assert doc.header.title == "Claude Code Session (1 tool calls)"
        assert sum(1 for _, code, _ in doc.events if code == "m") == 4

        err = capsys.readouterr().err
        assert f"✓ Generated {out.resolve()}" in err
        assert "Messages: 4/4" in err
        assert "Preset: default" in err

    def test_quiet_suppresses_stats(self, session_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["cast", str(session_file), "-o", str(tmp_path / "a.cast"), "-q"]) == 0
        assert capsys.readouterr().err == ""

    def test_stdout_output(self, session_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["cast", str(session_file), "--markers", "none", "--title", "Demo"]) == 0
        lines = capsys.readouterr().out.splitlines()
        header = json.loads(lines[0])
        assert header["title"] == "Demo"
        assert all(json.loads(line)[1] == "o" for line in lines[1:])

    def test_flags_override_profile(self, session_file: Path, tmp_path: Path) -> None:
        (tmp_path / PROFILE_FILENAME).write_text("cols: 80\ntheme: nord\n")
        out = tmp_path / "demo.cast"

        assert cli.main(["cast", str(session_file), "-o", str(out), "-q"]) == 0
        assert read_cast(out).header.cols == 80

        assert cli.main(["cast", str(session_file), "-o", str(out), "-q", "--cols", "120"]) == 0
        assert read_cast(out).header.cols == 120

    def test_save_profile(self, session_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "demo.cast"
        argv = ["cast", str(session_file), "-o", str(out), "-q", "--preset", "speedrun", "--save-profile"]
        assert cli.main(argv) == 0

        saved = ProfileManager.for_directory(tmp_path).load()
        assert saved.preset == "speedrun"
        assert saved.cols == 100
        assert saved.status_spinner is True

    def test_missing_session_argument(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["cast"]) == 1
        assert "Error: Provide a session path or use --latest" in capsys.readouterr().err

    def test_latest_without_sessions(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["cast", "--latest"]) == 1
        assert "No sessions found for current project" in capsys.readouterr().err

    def test_latest_uses_newest_session(
        self, tmp_path: Path, sample_session: list[dict], capsys: pytest.CaptureFixture[str]
    ) -> None:
        project = sessions.get_claude_project_path(Path.cwd())
        project.mkdir(parents=True)
        newest = project / "abc.jsonl"
        newest.write_text("\n".join(json.dumps(e) for e in sample_session) + "\n")

        assert cli.main(["cast", "--latest", "-o", str(tmp_path / "out.cast")]) == 0
        assert f"Using: {newest}" in capsys.readouterr().err

    def test_empty_session(self, write_jsonl: Callable[..., Path], capsys: pytest.CaptureFixture[str]) -> None:
        path = write_jsonl("empty.jsonl", ["not json"])
        assert cli.main(["cast", str(path)]) == 1
        assert "Error: No messages found in session file" in capsys.readouterr().err

    def test_clip_without_matches(self, session_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["cast", str(session_file), "--last", "0"]) == 1
        assert "No messages match the specified criteria" in capsys.readouterr().err

    def test_invalid_time_bound(self, session_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["cast", str(session_file), "--start-time", "soon"]) == 1
        assert "Error: Invalid timestamp: soon" in capsys.readouterr().err

    def test_cast_input_needs_upload(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        existing = tmp_path / "old.cast"
        existing.write_text('{"version": 3, "term": {"cols": 80, "rows": 24}}\n')
        assert cli.main(["cast", str(existing)]) == 1
        assert "Input is already a .cast file" in capsys.readouterr().err

    def test_upload(
        self,
        session_file: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        uploaded = []

        def fake_upload(path: Path) -> UploadResult:
            uploaded.append(path)
            return UploadResult(success=True, url="https://asciinema.org/a/abc123")

        monkeypatch.setattr(cli, "upload_to_asciinema", fake_upload)
        out = tmp_path / "demo.cast"

        assert cli.main(["cast", str(session_file), "-o", str(out), "--upload", "-q"]) == 0
        assert uploaded == [out.resolve()]
        assert "✓ Uploaded: https://asciinema.org/a/abc123" in capsys.readouterr().out

    def test_upload_failure(
        self, session_file: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setattr(cli, "upload_to_asciinema", lambda path: UploadResult(success=False, error="boom"))
        assert cli.main(["cast", str(session_file), "--upload", "-q"]) == 1
        assert "✗ Upload failed: boom" in capsys.readouterr().err


class TestList:
    def test_lists_renderable_messages(self, session_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["list", str(session_file)]) == 0
        out = capsys.readouterr().out.splitlines()

        assert out[0] == "UUID        TIME      TYPE        CONTENT"
        assert out[2] == "user-0001-..10:00:00  user        list the files please"
        assert "[Bash]" in out[4]
        assert out[5].endswith("tool-result (success)")
        assert out[-1] == "Total: 4 messages | User: 1 | Assistant: 2 | Tools: 1"

    def test_all_includes_snapshots(
        self, write_jsonl: Callable[..., Path], sample_session: list[dict], capsys: pytest.CaptureFixture[str]
    ) -> None:
        path = write_jsonl("s.jsonl", sample_session + [{"type": "file-history-snapshot"}])

        cli.main(["list", str(path)])
        assert "file-history" not in capsys.readouterr().out

        cli.main(["list", str(path), "--all"])
        assert "file-history" in capsys.readouterr().out


class TestSessions:
    def test_no_sessions(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["sessions"]) == 0
        assert capsys.readouterr().out.startswith("No sessions found")

    def test_lists_sessions(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        project = sessions.get_claude_project_path(Path.cwd())
        project.mkdir(parents=True)
        (project / "0123456789abcdef.jsonl").write_text("{}\n")

        assert cli.main(["sessions"]) == 0
        out = capsys.readouterr().out
        assert "01234567  just now" in out
        assert "3B" in out
        assert out.rstrip().endswith("Use: claude-session-cast cast --latest")


class TestMergeProfile:
    def test_precedence(self) -> None:
        args = cli._create_parser().parse_args(["cast", "x.jsonl", "--preset", "realtime"])
        merged = cli._merge_profile(args, CastProfile(preset="speedrun", theme="dracula"))
        assert merged.preset == "realtime"
        assert merged.theme == "dracula"
        assert merged.markers == "all"
        assert merged.typing_effect is None
