"""Tests for content items, extraction helpers and labels."""

from claude_session_cast.content import (
    ImageItem,
    TextItem,
    ThinkingItem,
    ToolResultItem,
    ToolUseItem,
    UnknownItem,
    classify_content,
    extract_text,
    extract_thinking,
    extract_tool_use,
    format_tool_input_summary,
    get_assistant_message_label,
    get_user_message_label,
    has_thinking,
    has_tool_use,
    parse_content,
    truncate_output,
)


class TestParseContent:
    def test_string_becomes_text_item(self) -> None:
        assert parse_content("hi") == [TextItem(text="hi")]

    def test_dispatches_on_type(self) -> None:
        items = parse_content([
            {"type": "text", "text": "a"},
            {"type": "thinking", "thinking": "b"},
            {"type": "tool_use", "id": "t1", "name": "Read", "input": {"file_path": "/x"}},
            {"type": "tool_result", "tool_use_id": "t1", "content": "ok", "is_error": True},
            {"type": "image", "source": {"media_type": "image/png"}},
            {"type": "document", "x": 1},
        ])
        assert items == [
            TextItem(text="a"),
            ThinkingItem(thinking="b"),
            ToolUseItem(id="t1", name="Read", input={"file_path": "/x"}),
            ToolResultItem(tool_use_id="t1", content="ok", is_error=True),
            ImageItem(media_type="image/png"),
            UnknownItem(type="document", raw={"type": "document", "x": 1}),
        ]

    def test_non_dict_members_dropped(self) -> None:
        assert parse_content(["junk", 3, {"type": "text", "text": "a"}]) == [TextItem(text="a")]

    def test_unexpected_shape(self) -> None:
        assert parse_content(None) == []

    def test_tool_use_non_dict_input(self) -> None:
        assert ToolUseItem.from_dict({"type": "tool_use", "id": "1", "name": "X", "input": "bad"}).input == {}


class TestExtraction:
    def test_extract_text_joins_text_items(self) -> None:
        content = [{"type": "text", "text": "a"}, {"type": "thinking", "thinking": "x"}, {"type": "text", "text": "b"}]
        assert extract_text(content) == "a\nb"

    def test_extract_text_accepts_items(self) -> None:
        assert extract_text([TextItem(text="a"), TextItem(text="b")]) == "a\nb"

    def test_extract_thinking_and_tools(self) -> None:
        content = [
            {"type": "thinking", "thinking": "hmm"},
            {"type": "tool_use", "id": "1", "name": "Bash", "input": {}},
        ]
        assert extract_thinking(content) == ["hmm"]
        assert [t.name for t in extract_tool_use(content)] == ["Bash"]
        assert has_thinking(content)
        assert has_tool_use(content)

    def test_classify_content(self) -> None:
        assert classify_content([]) == "text"
        assert classify_content([{"type": "text", "text": "a"}]) == "text"
        assert classify_content([{"type": "thinking", "thinking": "a"}]) == "thinking"
        assert classify_content([{"type": "tool_use", "id": "1", "name": "X"}]) == "tool-call"
        assert classify_content([{"type": "text", "text": "a"}, {"type": "tool_use", "id": "1", "name": "X"}]) == "mixed"


class TestLabels:
    def test_user_tool_result_labels(self) -> None:
        assert get_user_message_label({"type": "user", "toolUseResult": "Error: boom"}) == "Tool error"
        assert get_user_message_label({"type": "user", "toolUseResult": {"is_error": True}}) == "Tool error"
        assert get_user_message_label({"type": "user", "toolUseResult": {"stdout": "x"}}) == "Tool result"

    def test_user_text_label_clipped(self) -> None:
        entry = {"type": "user", "message": {"content": "a" * 40}}
        assert get_user_message_label(entry, 10) == "a" * 9 + "…"

    def test_assistant_tool_label(self) -> None:
        entry = {
            "type": "assistant",
            "message": {"content": [
                {"type": "tool_use", "id": "1", "name": "Read", "input": {}},
                {"type": "tool_use", "id": "2", "name": "Grep", "input": {}},
            ]},
        }
        assert get_assistant_message_label(entry) == "Read (+1 more)"


class TestToolInputSummary:
    def test_file_tools(self) -> None:
        assert format_tool_input_summary(ToolUseItem("1", "Edit", {"file_path": "/a/b.py"})) == "/a/b.py"

    def test_bash_shortened(self) -> None:
        summary = format_tool_input_summary(ToolUseItem("1", "Bash", {"command": "x" * 80}))
        assert len(summary) == 50
        assert summary.endswith("…")

    def test_grep_slashes(self) -> None:
        assert format_tool_input_summary(ToolUseItem("1", "Grep", {"pattern": "foo"})) == "/foo/"

    def test_todo_count(self) -> None:
        assert format_tool_input_summary(ToolUseItem("1", "TodoWrite", {"todos": [{}, {}]})) == "2 items"

    def test_unknown_tool(self) -> None:
        assert format_tool_input_summary(ToolUseItem("1", "Mystery", {"a": "b"})) == ""


class TestTruncateOutput:
    def test_within_limit(self) -> None:
        result = truncate_output("a\nb", 5)
        assert result.text == "a\nb"
        assert not result.truncated
        assert result.hidden_lines == 0

    def test_hides_extra_lines(self) -> None:
        result = truncate_output("\n".join(str(i) for i in range(8)), 3)
        assert result.text == "0\n1\n2"
        assert result.truncated
        assert result.hidden_lines == 5

    def test_caps_line_length(self) -> None:
        result = truncate_output("x" * 300, 5, max_line_length=10)
        assert result.text == "x" * 9 + "…"
