"""Tests for terminal text measurement helpers."""

from __future__ import annotations

from date_prompt.utils import count_rows, strip_ansi, visible_width


class TestStripAnsi:
    def test_sgr(self) -> None:
        assert strip_ansi("\x1b[7m2023\x1b[27m") == "2023"

    def test_cursor_movement(self) -> None:
        assert strip_ansi("\x1b[2A\x1b[0Jx") == "x"

    def test_hyperlink(self) -> None:
        assert strip_ansi("\x1b]8;;https://example.com\x07link\x1b]8;;\x07") == "link"


class TestVisibleWidth:
    def test_ascii(self) -> None:
        assert visible_width("1/1/2023, 12:00") == 15

    def test_styled_text(self) -> None:
        assert visible_width("\x1b[2m/\x1b[22m") == 1

    def test_wide_characters(self) -> None:
        assert visible_width("2024年") == 6

    def test_narrow_no_break_space(self) -> None:
        assert visible_width("12:00\u202fAM") == 8

    def test_emoji_presentation(self) -> None:
        assert visible_width("❤️") == 2


class TestCountRows:
    def test_fits(self) -> None:
        assert count_rows("abc", 10) == 1

    def test_empty_line_is_one_row(self) -> None:
        assert count_rows("", 10) == 1

    def test_exact_width(self) -> None:
        assert count_rows("x" * 10, 10) == 1

    def test_wraps(self) -> None:
        assert count_rows("x" * 21, 10) == 3

    def test_unknown_width(self) -> None:
        assert count_rows("x" * 200, 0) == 1
