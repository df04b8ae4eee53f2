"""Tests for the DatePrompt component."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from date_prompt.errors import ConfigError, ValidationFailure
from date_prompt.keys import KeyPress, parse_keypress
from date_prompt.prompt import CLEAR_HINT, DEFAULT_VALIDATION_MESSAGE, DatePrompt
from date_prompt.question import DateQuestion
from date_prompt.theme import default_theme

from .conftest import (
    KEY_BACKSPACE,
    KEY_DELETE,
    KEY_DOWN,
    KEY_LEFT,
    KEY_RIGHT,
    KEY_SHIFT_ALT_UP,
    KEY_SHIFT_DOWN,
    KEY_SHIFT_UP,
    KEY_UP,
    NEW_YEAR,
)
from .virtual_terminal import VirtualTerminal


def press(prompt: DatePrompt, *sequences: str) -> None:
    for sequence in sequences:
        key = parse_keypress(sequence)
        assert key is not None
        prompt.handle_keypress(key)


def date_text(prompt: DatePrompt) -> str:
    return "".join(part.value for part in prompt.date_parts())


class TestConstruction:
    def test_string_default_raises(self, terminal: VirtualTerminal, make_prompt) -> None:
        with pytest.raises(ConfigError, match="datetime"):
            make_prompt(default="2023-01-01")
        assert terminal.output == ""

    def test_date_default_raises(self, make_prompt) -> None:
        with pytest.raises(ConfigError):
            make_prompt(default=date(2023, 1, 1))

    def test_unknown_locale_raises(self, terminal: VirtualTerminal, make_prompt) -> None:
        with pytest.raises(ConfigError):
            make_prompt(locale="xx_YY")
        assert terminal.output == ""

    def test_format_without_editable_field_raises(self, make_prompt) -> None:
        options = {"year": None, "month": None, "day": None, "hour": None, "minute": None, "weekday": "long"}
        with pytest.raises(ConfigError, match="no editable field"):
            make_prompt(format=options)

    def test_missing_default_uses_now(self, make_prompt) -> None:
        before = datetime.now().replace(second=0, microsecond=0)
        prompt = make_prompt(default=None)
        assert prompt.date >= before

    def test_initial_state(self, make_prompt) -> None:
        prompt = make_prompt()
        assert prompt.status == "pending"
        assert not prompt.is_dirty
        assert not prompt.is_cleared
        assert prompt.cursor_index == prompt.first_editable_index
        assert prompt.current_date_part().type == "month"

    def test_run_hides_cursor_and_renders(self, terminal: VirtualTerminal, make_prompt) -> None:
        prompt = make_prompt()
        prompt.run(lambda value: None)
        assert not terminal.cursor_visible
        assert prompt.screen.content == "? When? " + date_text(prompt)


class TestCursor:
    """Left/right walk the editable segments and stop at the ends."""

    def test_left_at_start_stays(self, make_prompt) -> None:
        prompt = make_prompt()
        press(prompt, KEY_LEFT, KEY_LEFT)
        assert prompt.cursor_index == prompt.first_editable_index

    def test_right_skips_literals(self, make_prompt) -> None:
        prompt = make_prompt()
        visited = [prompt.current_date_part().type]
        for _ in range(4):
            press(prompt, KEY_RIGHT)
            visited.append(prompt.current_date_part().type)
        assert visited == ["month", "day", "year", "hour", "minute"]

    def test_right_at_end_stays(self, make_prompt) -> None:
        prompt = make_prompt()
        press(prompt, *([KEY_RIGHT] * 10))
        assert prompt.cursor_index == prompt.last_editable_index
        assert prompt.current_date_part().type == "minute"

    def test_cursor_always_on_editable_segment(self, make_prompt) -> None:
        prompt = make_prompt(format={"weekday": "long", "second": "numeric"})
        for sequence in [KEY_RIGHT] * 8 + [KEY_LEFT] * 8 + [KEY_RIGHT] * 3:
            press(prompt, sequence)
            assert prompt.current_date_part().editable
            assert prompt.first_editable_index <= prompt.cursor_index <= prompt.last_editable_index

    def test_moving_the_cursor_does_not_dirty(self, make_prompt) -> None:
        prompt = make_prompt()
        press(prompt, KEY_RIGHT, KEY_LEFT)
        assert not prompt.is_dirty


class TestEditing:
    def test_up_increments_field_under_cursor(self, make_prompt) -> None:
        prompt = make_prompt()
        press(prompt, KEY_UP)
        assert prompt.date == datetime(2023, 2, 1)
        assert prompt.is_dirty

    def test_down_rolls_into_previous_year(self, make_prompt) -> None:
        prompt = make_prompt()
        press(prompt, KEY_DOWN)
        assert prompt.date == datetime(2022, 12, 1)

    def test_shift_changes_by_ten(self, make_prompt) -> None:
        prompt = make_prompt()
        press(prompt, KEY_RIGHT, KEY_SHIFT_UP)
        assert prompt.date == datetime(2023, 1, 11)
        press(prompt, KEY_SHIFT_DOWN)
        assert prompt.date == NEW_YEAR

    def test_shift_alt_changes_by_hundred(self, make_prompt) -> None:
        prompt = make_prompt()
        press(prompt, KEY_RIGHT, KEY_RIGHT, KEY_SHIFT_ALT_UP)
        assert prompt.date == datetime(2123, 1, 1)

    def test_ja_jp_year_first_minutes_by_ten(self, make_prompt) -> None:
        prompt = make_prompt(locale="ja_JP", default=datetime(2024, 3, 10, 9, 30))
        assert prompt.current_date_part().type == "year"
        assert prompt.current_date_part().value == "2024"
        press(prompt, KEY_RIGHT, KEY_RIGHT, KEY_RIGHT, KEY_RIGHT)
        assert prompt.current_date_part().type == "minute"
        press(prompt, KEY_SHIFT_UP)
        assert prompt.date == datetime(2024, 3, 10, 9, 40)

    def test_ja_jp_new_year_up_on_year_then_minutes_by_ten(self, make_prompt) -> None:
        prompt = make_prompt(locale="ja_JP")
        assert prompt.current_date_part().type == "year"
        press(prompt, KEY_UP)
        assert prompt.date == datetime(2024, 1, 1, 0, 0)
        press(prompt, KEY_RIGHT, KEY_RIGHT, KEY_RIGHT, KEY_RIGHT)
        assert prompt.current_date_part().type == "minute"
        press(prompt, KEY_SHIFT_UP)
        assert prompt.date == datetime(2024, 1, 1, 0, 10)

    def test_month_up_from_january_31st_spills_into_march(self, make_prompt) -> None:
        prompt = make_prompt(default=datetime(2023, 1, 31, 12, 0))
        assert prompt.current_date_part().type == "month"
        press(prompt, KEY_UP)
        assert prompt.date == datetime(2023, 3, 3, 12, 0)
        assert "3/3/2023" in date_text(prompt)

    def test_render_follows_value(self, make_prompt) -> None:
        prompt = make_prompt()
        prompt.run(lambda value: None)
        press(prompt, KEY_UP)
        assert "2/1/2023" in prompt.screen.content

    def test_unhandled_key_only_rerenders(self, make_prompt) -> None:
        prompt = make_prompt()
        prompt.run(lambda value: None)
        before = prompt.screen.render_count
        press(prompt, "x")
        assert prompt.date == NEW_YEAR
        assert prompt.screen.render_count == before + 1


class TestClearing:
    def test_delete_clears_when_clearable(self, make_prompt) -> None:
        prompt = make_prompt(clearable=True)
        prompt.run(lambda value: None)
        press(prompt, KEY_DELETE)
        assert prompt.is_cleared
        assert prompt.screen.content == "? When? " + CLEAR_HINT

    def test_backspace_clears_too(self, make_prompt) -> None:
        prompt = make_prompt(clearable=True)
        press(prompt, KEY_BACKSPACE)
        assert prompt.is_cleared

    def test_hint_shown_while_pending(self, make_prompt) -> None:
        prompt = make_prompt(clearable=True)
        prompt.run(lambda value: None)
        assert prompt.screen.content.endswith(CLEAR_HINT)

    def test_next_key_restores_value(self, make_prompt) -> None:
        prompt = make_prompt(clearable=True)
        prompt.run(lambda value: None)
        press(prompt, KEY_DELETE, KEY_RIGHT)
        assert not prompt.is_cleared
        assert date_text(prompt) in prompt.screen.content
        assert prompt.date == NEW_YEAR

    def test_delete_ignored_when_not_clearable(self, make_prompt) -> None:
        prompt = make_prompt()
        prompt.run(lambda value: None)
        before = prompt.screen.content
        press(prompt, KEY_DELETE)
        assert not prompt.is_cleared
        assert prompt.screen.content == before

    @pytest.mark.asyncio
    async def test_submit_after_clear_answers_none(self, make_prompt) -> None:
        results: list[object] = []
        prompt = make_prompt(clearable=True)
        prompt.run(results.append)
        press(prompt, KEY_DELETE)
        assert await prompt.handle_submit()
        assert results == [None]
        assert CLEAR_HINT not in prompt.screen.content


class TestStyling:
    """Segments are dim until edited, selected under the cursor and final once answered."""

    def _prompt(self, terminal: VirtualTerminal) -> DatePrompt:
        question = DateQuestion(message="When?", default=NEW_YEAR, locale="en_US")
        return DatePrompt(question, terminal, theme=default_theme())

    def test_pristine_segments_are_dim(self, terminal: VirtualTerminal) -> None:
        prompt = self._prompt(terminal)
        prompt.run(lambda value: None)
        content = prompt.screen.content
        assert content.startswith("\x1b[32m?\x1b[39m \x1b[1mWhen?\x1b[22m ")
        assert "\x1b[7m1\x1b[27m" in content
        assert "\x1b[2m/\x1b[22m" in content
        assert "\x1b[2m2023\x1b[22m" in content

    def test_dirty_segments_are_plain(self, terminal: VirtualTerminal) -> None:
        prompt = self._prompt(terminal)
        prompt.run(lambda value: None)
        press(prompt, KEY_UP)
        content = prompt.screen.content
        assert "\x1b[7m2\x1b[27m" in content
        assert "\x1b[2m" not in content
        assert "/2023" in content

    @pytest.mark.asyncio
    async def test_final_segments(self, terminal: VirtualTerminal) -> None:
        prompt = self._prompt(terminal)
        prompt.run(lambda value: None)
        await prompt.handle_submit()
        content = prompt.screen.content
        assert "\x1b[36m2023\x1b[39m" in content
        assert "\x1b[7m" not in content

    def test_custom_prefix_and_suffix(self, make_prompt) -> None:
        prompt = make_prompt(prefix="!", suffix=":")
        assert prompt.get_question() == "! When?: "

    def test_callable_message_sees_answers(self, make_prompt) -> None:
        prompt = make_prompt(message=lambda answers: f"Return for {answers['trip']}?", answers={"trip": "Oslo"})
        assert prompt.get_question() == "? Return for Oslo? "


class TestTransformer:
    def test_receives_text_answers_and_flags(self, make_prompt) -> None:
        calls: list[tuple[str, dict, dict]] = []

        def transformer(text: str, answers: dict, flags: dict) -> str:
            calls.append((text, answers, flags))
            return f"<{text}>"

        prompt = make_prompt(transformer=transformer, answers={"a": 1})
        prompt.run(lambda value: None)
        text, answers, flags = calls[-1]
        assert text == date_text(prompt)
        assert answers == {"a": 1}
        assert flags == {"is_dirty": False, "is_cleared": False, "is_final": False}
        assert prompt.screen.content == f"? When? <{text}>"

    @pytest.mark.asyncio
    async def test_flags_track_state(self, make_prompt) -> None:
        seen: list[dict] = []
        prompt = make_prompt(transformer=lambda text, answers, flags: seen.append(dict(flags)) or text)
        prompt.run(lambda value: None)
        press(prompt, KEY_UP)
        assert seen[-1]["is_dirty"]
        await prompt.handle_submit()
        assert seen[-1]["is_final"]

    def test_not_called_while_cleared(self, make_prompt) -> None:
        seen: list[str] = []
        prompt = make_prompt(clearable=True, transformer=lambda text, answers, flags: seen.append(text) or text)
        prompt.run(lambda value: None)
        count = len(seen)
        press(prompt, KEY_DELETE)
        assert len(seen) == count


class TestSubmit:
    @pytest.mark.asyncio
    async def test_accepts_without_validator(self, terminal: VirtualTerminal, make_prompt) -> None:
        results: list[object] = []
        prompt = make_prompt()
        prompt.run(results.append)
        press(prompt, KEY_UP)
        assert await prompt.handle_submit()
        assert results == [datetime(2023, 2, 1)]
        assert prompt.status == "answered"
        assert prompt.answer == datetime(2023, 2, 1)
        assert terminal.cursor_visible
        assert terminal.output.endswith("\r\n\x1b[?25h")

    @pytest.mark.asyncio
    async def test_validator_false_shows_default_message(self, make_prompt) -> None:
        results: list[object] = []
        prompt = make_prompt(validate=lambda value, answers: False)
        prompt.run(results.append)
        assert not await prompt.handle_submit()
        assert prompt.status == "pending"
        assert results == []
        assert prompt.screen.bottom_content == ">> " + DEFAULT_VALIDATION_MESSAGE

    @pytest.mark.asyncio
    async def test_validator_string_is_the_error(self, make_prompt) -> None:
        prompt = make_prompt(validate=lambda value, answers: "Pick a later date")
        prompt.run(lambda value: None)
        await prompt.handle_submit()
        assert prompt.screen.bottom_content == ">> Pick a later date"

    @pytest.mark.asyncio
    async def test_validator_may_raise(self, make_prompt) -> None:
        def validate(value, answers):
            raise ValidationFailure("No weekends")

        prompt = make_prompt(validate=validate)
        prompt.run(lambda value: None)
        await prompt.handle_submit()
        assert prompt.screen.bottom_content == ">> No weekends"

    @pytest.mark.asyncio
    async def test_async_validator(self, make_prompt) -> None:
        async def validate(value, answers):
            return value.year >= 2023

        results: list[object] = []
        prompt = make_prompt(validate=validate)
        prompt.run(results.append)
        assert await prompt.handle_submit()
        assert results == [NEW_YEAR]

    @pytest.mark.asyncio
    async def test_error_cleared_by_next_key(self, make_prompt) -> None:
        prompt = make_prompt(validate=lambda value, answers: value.month > 1 or "Not January")
        prompt.run(lambda value: None)
        await prompt.handle_submit()
        assert prompt.screen.bottom_content
        press(prompt, KEY_UP)
        assert prompt.screen.bottom_content == ""
        assert await prompt.handle_submit()

    @pytest.mark.asyncio
    async def test_validator_sees_answers(self, make_prompt) -> None:
        seen: list[dict] = []
        prompt = make_prompt(validate=lambda value, answers: seen.append(answers) or True, answers={"x": 1})
        prompt.run(lambda value: None)
        await prompt.handle_submit()
        assert seen == [{"x": 1}]

    @pytest.mark.asyncio
    async def test_filter_runs_before_validation(self, make_prompt) -> None:
        validated: list[object] = []
        results: list[object] = []
        prompt = make_prompt(
            filter=lambda value, answers: value.date(),
            validate=lambda value, answers: validated.append(value) or True,
        )
        prompt.run(results.append)
        await prompt.handle_submit()
        assert validated == [date(2023, 1, 1)]
        assert results == [date(2023, 1, 1)]

    @pytest.mark.asyncio
    async def test_async_filter(self, make_prompt) -> None:
        async def to_iso(value, answers):
            return value.isoformat()

        results: list[object] = []
        prompt = make_prompt(filter=to_iso)
        prompt.run(results.append)
        await prompt.handle_submit()
        assert results == ["2023-01-01T00:00:00"]

    @pytest.mark.asyncio
    async def test_keys_ignored_after_answer(self, make_prompt) -> None:
        prompt = make_prompt()
        prompt.run(lambda value: None)
        await prompt.handle_submit()
        content = prompt.screen.content
        count = prompt.screen.render_count
        prompt.handle_keypress(KeyPress("up"))
        assert prompt.date == NEW_YEAR
        assert prompt.screen.content == content
        assert prompt.screen.render_count == count

    @pytest.mark.asyncio
    async def test_second_submit_is_a_noop(self, make_prompt) -> None:
        results: list[object] = []
        prompt = make_prompt()
        prompt.run(results.append)
        assert await prompt.handle_submit()
        assert await prompt.handle_submit()
        assert results == [NEW_YEAR]
