"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime

import pytest

from date_prompt.prompt import DatePrompt
from date_prompt.question import DateQuestion
from date_prompt.theme import plain_theme

from .virtual_terminal import VirtualTerminal

# Raw escape codes for key sequences
KEY_UP = "\x1b[A"
KEY_DOWN = "\x1b[B"
KEY_RIGHT = "\x1b[C"
KEY_LEFT = "\x1b[D"
KEY_SHIFT_UP = "\x1b[1;2A"
KEY_SHIFT_DOWN = "\x1b[1;2B"
KEY_SHIFT_ALT_UP = "\x1b[1;4A"
KEY_ENTER = "\r"
KEY_BACKSPACE = "\x7f"
KEY_DELETE = "\x1b[3~"
KEY_CTRL_C = "\x03"

NEW_YEAR = datetime(2023, 1, 1, 0, 0)


@pytest.fixture
def terminal() -> VirtualTerminal:
    return VirtualTerminal()


@pytest.fixture
def make_prompt(terminal: VirtualTerminal):
    """Factory for a plain-themed DatePrompt drawing on the virtual terminal."""

    def factory(**kwargs) -> DatePrompt:
        kwargs.setdefault("message", "When?")
        kwargs.setdefault("default", NEW_YEAR)
        kwargs.setdefault("locale", "en_US")
        answers = kwargs.pop("answers", None)
        return DatePrompt(DateQuestion(**kwargs), terminal, answers, theme=plain_theme())

    return factory
