"""Tests for Edit result diffs."""

from claude_session_cast.ansi import strip_ansi
from claude_session_cast.diff import DiffSegment, diff_stats, diff_words, is_edit_tool_result, render_edit_diff, tokenize
from claude_session_cast.messages import render_message
from claude_session_cast.theme import TOKYO_NIGHT


def _result(lines: list[str]) -> dict:
    return {
        "filePath": "/repo/app.py",
        "structuredPatch": [{"oldStart": 1, "oldLines": 1, "newStart": 1, "newLines": 1, "lines": lines}],
    }


class TestDetection:
    def test_is_edit_tool_result(self) -> None:
        assert is_edit_tool_result(_result(["+a"]))
        assert not is_edit_tool_result({"filePath": "/x", "structuredPatch": []})
        assert not is_edit_tool_result({"structuredPatch": [{"lines": []}]})


class TestStats:
    def test_counts(self) -> None:
        assert diff_stats(_result(["+a", "+b", "-c", " d"])["structuredPatch"]) == (2, 1)

    def test_header_pluralisation(self) -> None:
        header = strip_ansi(render_edit_diff(_result(["+a", "-b"]), TOKYO_NIGHT)).split("\n")[0]
        assert header == "  Updated /repo/app.py with 1 addition and 1 removal"

    def test_header_plural_and_zero(self) -> None:
        header = strip_ansi(render_edit_diff(_result(["+a", "+b"]), TOKYO_NIGHT)).split("\n")[0]
        assert header == "  Updated /repo/app.py with 2 additions and 0 removals"


class TestWordDiff:
    def test_tokenize(self) -> None:
        assert tokenize("a  b") == ["a", "  ", "b"]

    def test_diff_words(self) -> None:
        old, new = diff_words("old value", "new value")
        assert old == [DiffSegment("old", True), DiffSegment(" value", False)]
        assert new == [DiffSegment("new", True), DiffSegment(" value", False)]


class TestRenderDiff:
    def test_lines_and_numbers(self, edit_result_entry: dict) -> None:
        lines = strip_ansi(render_message(edit_result_entry)).split("\n")
        assert lines == [
            "  Updated /repo/app.py with 2 additions and 1 removal",
            "     10      context",
            "     11  - old value",
            "     11  + new value",
            "     12  + extra line",
        ]

    def test_modified_pair_highlights_changed_words(self) -> None:
        rendered = render_edit_diff(_result(["-old value", "+new value"]), TOKYO_NIGHT)
        # Changed word on the character background, unchanged text on the line background.
        assert "\x1b[48;2;56;166;96mnew" in rendered
        assert "\x1b[48;2;34;92;43m value" in rendered

    def test_long_lines_wrap(self) -> None:
        rendered = strip_ansi(render_edit_diff(_result(["+" + "word " * 30]), TOKYO_NIGHT, width=40))
        assert len(rendered.split("\n")) > 2


class TestMalformedPatch:
    def test_junk_lines_skipped(self) -> None:
        entry = {"type": "user", "toolUseResult": {"filePath": "a.py", "structuredPatch": [{"lines": [None, "+x", 7]}]}}
        lines = strip_ansi(render_message(entry)).split("\n")
        assert lines[0] == "  Updated a.py with 1 addition and 0 removals"
        assert len(lines) == 2
        assert lines[1].endswith("1  + x")

    def test_null_lines_and_starts(self) -> None:
        patch = [{"oldStart": None, "newStart": "ten", "lines": None}]
        assert diff_stats(patch) == (0, 0)
        rendered = strip_ansi(render_edit_diff({"filePath": "a.py", "structuredPatch": patch}, TOKYO_NIGHT))
        assert rendered == "  Updated a.py with 0 additions and 0 removals"

    def test_non_dict_hunks_ignored(self) -> None:
        assert diff_stats(["junk", {"lines": ["-a"]}]) == (0, 1)
