"""Tests for transcript → asciicast conversion."""

import re

import pytest

from claude_session_cast.ansi import erase_line, move_to, set_scroll_region, strip_ansi
from claude_session_cast.asciicast import THEMES, AsciicastDocument, MarkerOptions
from claude_session_cast.convert import (
    ConvertOptions,
    SessionInfo,
    _verb_seed,
    convert_to_asciicast,
    convert_with_preset,
    generate_title,
    get_session_info,
    quick_convert,
)
from claude_session_cast.spinner import select_verb
from claude_session_cast.theme import RENDER_THEMES
from claude_session_cast.timing import TimingOptions
from claude_session_cast.verbs import VERBS


_FRAME_RE = re.compile(r"\x1b\[2K\S (.+)…$")


def _raw_outputs(result) -> list[str]:
    return [data for _, code, data in result.document.events if code == "o"]


def _frame_verbs(outputs: list[str]) -> list[str]:
    return [m.group(1) for m in (_FRAME_RE.search(text) for text in outputs) if m]


def _outputs(result) -> list[str]:
    return [strip_ansi(data) for _, code, data in result.document.events if code == "o"]


def _two_entries_a_minute_apart(user_prompt_entry: dict, assistant_text_entry: dict) -> list[dict]:
    assistant_text_entry["timestamp"] = "2025-01-15T10:01:00.000Z"
    return [user_prompt_entry, assistant_text_entry]


class TestConvertBasics:
    def test_stats(self, sample_session: list[dict]) -> None:
        result = convert_to_asciicast(sample_session)
        stats = result.stats
        assert stats.entries_processed == 4
        assert stats.entries_rendered == 4
        assert stats.markers_generated == 4
        assert stats.events_generated == len(result.document.events)
        # 0.3s opening pause, then real gaps of 2s, 1s and 1s.
        assert stats.duration == pytest.approx(4.3)

    def test_intervals_non_negative(self, sample_session: list[dict]) -> None:
        options = ConvertOptions(input_animation=True, status_spinner=True)
        result = convert_to_asciicast(sample_session, options)
        assert all(interval >= 0 for interval, _, _ in result.document.events)

    def test_no_markers(self, sample_session: list[dict]) -> None:
        result = convert_to_asciicast(sample_session, ConvertOptions(markers=MarkerOptions(mode="none")))
        assert result.stats.markers_generated == 0
        assert result.stats.entries_rendered == 4
        assert all(code == "o" for _, code, _ in result.document.events)

    def test_user_markers_only(self, sample_session: list[dict]) -> None:
        result = convert_to_asciicast(sample_session, ConvertOptions(markers=MarkerOptions(mode="user")))
        markers = [data for _, code, data in result.document.events if code == "m"]
        assert markers == ["> list the files please"]

    def test_silent_entries_not_counted(self, sample_session: list[dict], meta_entry: dict) -> None:
        entries = sample_session + [meta_entry, {"type": "file-history-snapshot"}]
        result = convert_to_asciicast(entries)
        assert result.stats.entries_processed == 6
        assert result.stats.entries_rendered == 4

    def test_static_output_uses_crlf(self, user_prompt_entry: dict) -> None:
        result = convert_to_asciicast([user_prompt_entry])
        text = "".join(_outputs(result))
        assert "list the files please" in text
        assert text.endswith("\r\n\r\n")

    def test_header_theme_follows_render_theme(self, sample_session: list[dict]) -> None:
        assert convert_to_asciicast(sample_session).document.header.theme == THEMES["tokyo-night"]
        dracula = convert_with_preset(sample_session, "default", RENDER_THEMES["dracula"])
        assert dracula.document.header.theme == THEMES["dracula"]

    def test_empty_entries(self) -> None:
        result = convert_to_asciicast([])
        assert result.document.events == []
        assert result.stats.duration == 0.0


class TestTimingPresets:
    def test_default_caps_gaps(self, user_prompt_entry: dict, assistant_text_entry: dict) -> None:
        entries = _two_entries_a_minute_apart(user_prompt_entry, assistant_text_entry)
        assert convert_with_preset(entries, "default").stats.duration == pytest.approx(3.3)

    def test_speedrun(self, user_prompt_entry: dict, assistant_text_entry: dict) -> None:
        entries = _two_entries_a_minute_apart(user_prompt_entry, assistant_text_entry)
        assert convert_with_preset(entries, "speedrun").stats.duration == pytest.approx(2.3)

    def test_realtime_is_uncapped(self, user_prompt_entry: dict, assistant_text_entry: dict) -> None:
        entries = _two_entries_a_minute_apart(user_prompt_entry, assistant_text_entry)
        assert convert_with_preset(entries, "realtime").stats.duration == pytest.approx(60.3)

    def test_override_max_wait(self, user_prompt_entry: dict, assistant_text_entry: dict) -> None:
        entries = _two_entries_a_minute_apart(user_prompt_entry, assistant_text_entry)
        options = ConvertOptions(timing=TimingOptions(preset="default", max_wait=10))
        assert convert_to_asciicast(entries, options).stats.duration == pytest.approx(10.3)


class TestInputAnimation:
    def test_setup_comes_first(self, sample_session: list[dict]) -> None:
        result = convert_to_asciicast(sample_session, ConvertOptions(input_animation=True))
        first = result.document.events[0]
        assert first[1] == "o"
        assert first[2].startswith(set_scroll_region(1, 36))

    def test_prompt_is_typed_then_scrolled(self, sample_session: list[dict]) -> None:
        result = convert_to_asciicast(sample_session, ConvertOptions(input_animation=True))
        outputs = _outputs(result)
        assert "list" in outputs
        assert any(text.startswith("→ list the files please") for text in outputs)


class TestStatusSpinner:
    def test_spinner_follows_prompt(self, user_prompt_entry: dict, assistant_text_entry: dict) -> None:
        result = convert_to_asciicast(
            [user_prompt_entry, assistant_text_entry], ConvertOptions(status_spinner=True)
        )
        outputs = _outputs(result)
        assert any(f"{verb}…" in text for text in outputs for verb in VERBS)

    def test_todo_active_form_becomes_verb(
        self,
        user_prompt_entry: dict,
        todo_write_entry: dict,
        todo_result_entry: dict,
    ) -> None:
        follow_up = dict(user_prompt_entry, uuid="user-0010", timestamp="2025-01-15T10:00:20.000Z")
        entries = [user_prompt_entry, todo_write_entry, todo_result_entry, follow_up]
        result = convert_to_asciicast(entries, ConvertOptions(status_spinner=True))
        assert any("Writing tests…" in text for text in _outputs(result))

    def test_verb_choice_is_deterministic(self, sample_session: list[dict]) -> None:
        options = ConvertOptions(status_spinner=True, input_animation=True)
        first = convert_to_asciicast(sample_session, options)
        second = convert_to_asciicast(sample_session, options)
        assert first.document.events == second.document.events


class TestSessionInfo:
    def test_counts(self, sample_session: list[dict]) -> None:
        info = get_session_info(sample_session)
        assert info.user_messages == 1
        assert info.assistant_messages == 2
        assert info.tool_calls == 1
        assert info.has_agents is False
        assert info.start_time.isoformat() == "2025-01-15T10:00:00+00:00"
        assert info.end_time.isoformat() == "2025-01-15T10:00:04+00:00"

    def test_sidechain_means_agents(self, user_prompt_entry: dict) -> None:
        user_prompt_entry["isSidechain"] = True
        assert get_session_info([user_prompt_entry]).has_agents is True

    def test_generate_title(self) -> None:
        assert generate_title(SessionInfo()) == "Claude Code Session"
        assert generate_title(SessionInfo(tool_calls=3)) == "Claude Code Session (3 tool calls)"


class TestQuickConvert:
    def test_returns_document(self, sample_session: list[dict]) -> None:
        doc = quick_convert(sample_session)
        assert isinstance(doc, AsciicastDocument)
        assert sum(1 for _, code, _ in doc.events if code == "m") == 4


class TestOutOfOrderTimestamps:
    def test_interleaved_parallel_calls_keep_gaps(
        self, user_prompt_entry: dict, tool_use_entry: dict, tool_result_entry: dict
    ) -> None:
        entries = [
            user_prompt_entry,
            dict(tool_use_entry, uuid="call-1", timestamp="2025-01-15T10:00:01.000Z"),
            dict(tool_result_entry, uuid="result-1", timestamp="2025-01-15T10:00:05.000Z"),
            dict(tool_use_entry, uuid="call-2", timestamp="2025-01-15T10:00:02.000Z"),
            dict(tool_result_entry, uuid="result-2", timestamp="2025-01-15T10:00:06.000Z"),
        ]
        result = convert_to_asciicast(entries)
        # 0.3 + 1 + 3 (capped), no step back for call-2, then 3 (capped).
        assert result.stats.duration == pytest.approx(7.3)
        assert all(interval >= 0 for interval, _, _ in result.document.events)


class TestSpinnerLifecycle:
    def test_verb_reused_within_throttle_window(self, user_prompt_entry: dict) -> None:
        second = dict(user_prompt_entry, uuid="user-0011", timestamp="2025-01-15T10:00:01.000Z")
        third = dict(
            user_prompt_entry,
            uuid="user-0012",
            timestamp="2025-01-15T10:00:05.000Z",
            message={"role": "user", "content": "third prompt"},
        )
        entries = [user_prompt_entry, second, third]
        seed = _verb_seed(entries)

        outputs = _outputs(convert_to_asciicast(entries, ConvertOptions(status_spinner=True)))
        third_at = next(i for i, text in enumerate(outputs) if "third prompt" in text)

        before = _frame_verbs(outputs[:third_at])
        assert before
        # The second prompt came 1s after the first, so its spinner keeps the verb.
        assert set(before) == {select_verb(VERBS, seed)}
        # The skipped pick still advanced the index.
        assert _frame_verbs(outputs[third_at:]) == [select_verb(VERBS, seed + 2)]

    @pytest.mark.parametrize("fixture_name", ["interrupt_entry", "meta_entry", "system_info_entry"])
    def test_inline_spinner_cleared(
        self, user_prompt_entry: dict, fixture_name: str, request: pytest.FixtureRequest
    ) -> None:
        entries = [user_prompt_entry, request.getfixturevalue(fixture_name)]
        outputs = _raw_outputs(convert_to_asciicast(entries, ConvertOptions(status_spinner=True)))

        clear_at = next(
            i for i in range(len(outputs) - 1) if outputs[i] == "\r" + erase_line() and outputs[i + 1] == "\r\n"
        )
        assert _frame_verbs([strip_ansi(text) for text in outputs[clear_at:]]) == []

    def test_fixed_spinner_row_erased_on_interrupt(self, user_prompt_entry: dict, interrupt_entry: dict) -> None:
        options = ConvertOptions(status_spinner=True, input_animation=True)
        outputs = _raw_outputs(convert_to_asciicast([user_prompt_entry, interrupt_entry], options))

        clear = move_to(37, 1) + erase_line()
        assert clear in outputs
        clear_at = outputs.index(clear)
        assert outputs[clear_at + 1] != "\r\n"
        assert _frame_verbs([strip_ansi(text) for text in outputs[clear_at:]]) == []

    def test_assistant_text_ends_inline_spinner(self, user_prompt_entry: dict, assistant_text_entry: dict) -> None:
        follow_up = {
            "type": "assistant",
            "uuid": "asst-0010",
            "timestamp": "2025-01-15T10:00:04.000Z",
            "message": {"role": "assistant", "content": [{"type": "text", "text": "Done."}]},
        }
        result = convert_to_asciicast(
            [user_prompt_entry, assistant_text_entry, follow_up], ConvertOptions(status_spinner=True)
        )
        outputs = _outputs(result)
        reply_at = next(i for i, text in enumerate(outputs) if "Sure, here they are." in text)

        assert _frame_verbs(outputs[:reply_at])
        assert _frame_verbs(outputs[reply_at:]) == []
        # The spinner scrolled away with the text, so it is not erased.
        assert "\r" + erase_line() not in _raw_outputs(result)


class TestBashPromptAnimation:
    def test_bash_command_typed_with_bang(self, bash_input_entry: dict) -> None:
        result = convert_to_asciicast([bash_input_entry], ConvertOptions(input_animation=True))
        outputs = _outputs(result)

        assert "!" in outputs
        assert "-la" in outputs
        assert "! ls -la \r\n" in outputs
        assert not any(text.startswith("→ ") for text in outputs)
        assert all("<bash-input>" not in text for text in outputs)
        assert result.stats.entries_rendered == 1
