"""Tests for marker selection and labels."""

import pytest

from claude_session_cast.markers import generate_marker_label, should_have_marker


class TestShouldHaveMarker:
    @pytest.mark.parametrize("mode,expected", [("all", True), ("user", True), ("tools", False), ("none", False)])
    def test_user_prompt(self, user_prompt_entry: dict, mode: str, expected: bool) -> None:
        assert should_have_marker(user_prompt_entry, mode) is expected

    @pytest.mark.parametrize("mode,expected", [("all", True), ("user", False), ("tools", True), ("none", False)])
    def test_tool_result(self, tool_result_entry: dict, mode: str, expected: bool) -> None:
        assert should_have_marker(tool_result_entry, mode) is expected

    @pytest.mark.parametrize("mode,expected", [("all", True), ("user", False), ("tools", True)])
    def test_tool_call(self, tool_use_entry: dict, mode: str, expected: bool) -> None:
        assert should_have_marker(tool_use_entry, mode) is expected

    @pytest.mark.parametrize("mode,expected", [("all", True), ("user", False), ("tools", False)])
    def test_assistant_text(self, assistant_text_entry: dict, mode: str, expected: bool) -> None:
        assert should_have_marker(assistant_text_entry, mode) is expected

    def test_system_never(self, system_info_entry: dict) -> None:
        assert should_have_marker(system_info_entry, "all") is False


class TestMarkerLabels:
    def test_user_prompt(self, user_prompt_entry: dict) -> None:
        assert generate_marker_label(user_prompt_entry) == "> list the files please"

    def test_long_prompt_truncated(self, user_prompt_entry: dict) -> None:
        user_prompt_entry["message"]["content"] = "a" * 100
        label = generate_marker_label(user_prompt_entry)
        assert label == "> " + "a" * 27 + "…"
        assert len(label) == 30

    def test_only_first_line(self, user_prompt_entry: dict) -> None:
        user_prompt_entry["message"]["content"] = "fix   it\nplease now"
        assert generate_marker_label(user_prompt_entry) == "> fix it"

    def test_empty_prompt(self, user_prompt_entry: dict) -> None:
        user_prompt_entry["message"]["content"] = "   "
        assert generate_marker_label(user_prompt_entry) == "> (empty prompt)"

    def test_tool_result(self, tool_result_entry: dict) -> None:
        assert generate_marker_label(tool_result_entry) == "✓ Tool result"

    def test_tool_error(self, tool_result_entry: dict) -> None:
        tool_result_entry["toolUseResult"] = "Error: command failed"
        assert generate_marker_label(tool_result_entry) == "✗ Tool error"

    def test_slash_command(self, slash_command_entry: dict) -> None:
        assert generate_marker_label(slash_command_entry) == "> /model (opus)"

    def test_tool_call(self, tool_use_entry: dict) -> None:
        assert generate_marker_label(tool_use_entry) == "● Bash(ls -la)"

    def test_multiple_tool_calls(self, tool_use_entry: dict) -> None:
        content = tool_use_entry["message"]["content"]
        content.append({"type": "tool_use", "id": "toolu_009", "name": "Glob", "input": {"pattern": "*.py"}})
        assert generate_marker_label(tool_use_entry) == "● Bash(ls -la) (+1)"

    def test_assistant_text(self, assistant_text_entry: dict) -> None:
        assert generate_marker_label(assistant_text_entry) == "Claude: Sure, here they are."

    def test_assistant_empty(self, assistant_text_entry: dict) -> None:
        assistant_text_entry["message"]["content"] = []
        assert generate_marker_label(assistant_text_entry) == "Claude: (empty)"

    def test_system_has_no_label(self, system_info_entry: dict) -> None:
        assert generate_marker_label(system_info_entry) is None
