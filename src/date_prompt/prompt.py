"""DatePrompt component - edit a date segment by segment.

The formatted date is split into segments (see
:func:`date_prompt.formatter.derive_segments`).  Left/right move a cursor
across the editable segments, up/down change the field under the cursor
(by 10 with shift, by 100 with shift+alt), and delete/backspace clear the
answer when the question is clearable.  Enter submits.

The prompt owns no event source: a runner feeds it decoded keypresses via
:meth:`DatePrompt.handle_keypress` and submissions via
:meth:`DatePrompt.handle_submit`.
"""

from __future__ import annotations

import inspect
import logging
from datetime import datetime
from typing import Any, Callable, Literal

from date_prompt.errors import ConfigError, ValidationFailure
from date_prompt.fields import shift_field
from date_prompt.formatter import Segment, build_format_config, derive_segments, editable_bounds
from date_prompt.keys import KeyPress, magnitude
from date_prompt.question import Answers, DateQuestion
from date_prompt.screen import ScreenManager
from date_prompt.terminal import Terminal
from date_prompt.theme import DatePromptTheme, default_theme

logger = logging.getLogger(__name__)

CLEAR_HINT = " (<delete> to clear) "
DEFAULT_VALIDATION_MESSAGE = "Please enter a valid value"

Status = Literal["pending", "answered"]


async def run_validator(question: DateQuestion, value: Any, answers: Answers) -> tuple[Any, str | None]:
    """Filter and validate *value*.

    Returns ``(filtered_value, error)`` where ``error`` is ``None`` when the
    value was accepted.  Both ``filter`` and ``validate`` may be coroutine
    functions.
    """
    if question.filter is not None:
        value = question.filter(value, answers)
        if inspect.isawaitable(value):
            value = await value

    if question.validate is None:
        return value, None

    try:
        result = question.validate(value, answers)
        if inspect.isawaitable(result):
            result = await result
    except ValidationFailure as exc:
        return value, exc.message

    if result is True:
        return value, None
    if isinstance(result, str) and result:
        return value, result
    return value, DEFAULT_VALIDATION_MESSAGE


class DatePrompt:
    """Interactive date editor.

    Parameters
    ----------
    question:
        The question configuration.
    rl:
        The terminal the prompt draws on.
    answers:
        Answers collected by earlier questions; passed to the transformer,
        the validator and a callable ``message``.
    theme:
        Styling callables; defaults to the ANSI theme.
    """

    def __init__(
        self,
        question: DateQuestion,
        rl: Terminal,
        answers: Answers | None = None,
        theme: DatePromptTheme | None = None,
    ) -> None:
        if question.default is not None and not isinstance(question.default, datetime):
            raise ConfigError("The `default` parameter should be a datetime instance")

        self.question = question
        self.rl = rl
        self.answers: Answers = answers if answers is not None else {}
        self.theme = theme or default_theme()
        self.screen = ScreenManager(rl)

        self.format = build_format_config(question.locale, question.format)
        self.date: datetime = question.default if question.default is not None else datetime.now()

        self.is_dirty: bool = False
        self.is_cleared: bool = False
        self.status: Status = "pending"
        self.answer: datetime | None = None
        self._done: Callable[[Any], None] | None = None

        self.first_editable_index, self.last_editable_index = editable_bounds(self.date_parts())
        if self.first_editable_index < 0:
            raise ConfigError(f"Date format {self.format.pattern!r} has no editable field")
        self.cursor_index: int = self.first_editable_index

    # ------------------------------------------------------------------
    # Segments
    # ------------------------------------------------------------------

    def date_parts(self) -> list[Segment]:
        """The current value split into segments."""
        return derive_segments(self.date, self.format)

    def current_date_part(self) -> Segment:
        return self.date_parts()[self.cursor_index]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self, done: Callable[[Any], None]) -> DatePrompt:
        """Start the prompt; *done* receives the final value."""
        self._done = done
        self.rl.hide_cursor()
        self.render()
        return self

    def get_question(self) -> str:
        """The question line: prefix, bold message and suffix."""
        message = self.question.message
        if callable(message):
            message = message(self.answers)
        prefix = self.question.prefix if self.question.prefix is not None else self.theme.prefix("?")
        return f"{prefix} {self.theme.message(message)}{self.question.suffix} "

    def render(self, error: str | None = None) -> None:
        message = self.get_question()
        is_final = self.status == "answered"

        if not self.is_cleared:
            date_string = "".join(
                self._style_part(index, part, is_final)
                for index, part in enumerate(self.date_parts())
            )
            if self.question.transformer is not None:
                flags = {"is_dirty": self.is_dirty, "is_cleared": self.is_cleared, "is_final": is_final}
                message += self.question.transformer(date_string, self.answers, flags)
            else:
                message += date_string

        if self.question.clearable and not is_final:
            message += self.theme.hint(CLEAR_HINT)

        bottom_content = self.theme.error_prefix(">> ") + error if error else ""
        self.screen.render(message, bottom_content)

    def _style_part(self, index: int, part: Segment, is_final: bool) -> str:
        if is_final:
            return self.theme.final(part.value)
        if index == self.cursor_index:
            return self.theme.selected(part.value)
        if not self.is_dirty:
            return self.theme.dim(part.value)
        return part.value

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def handle_submit(self) -> bool:
        """Resolve, filter and validate the answer.

        Returns ``True`` when the prompt reached the answered state.
        """
        if self.status == "answered":
            return True

        candidate = None if self.is_cleared else self.date
        value, error = await run_validator(self.question, candidate, self.answers)
        if error is not None:
            logger.debug("Answer for %r rejected: %s", self.question.name, error)
            self.on_error(error)
            return False
        self.on_end(value)
        return True

    def on_end(self, value: Any) -> None:
        self.answer = value
        self.status = "answered"

        self.render()

        self.screen.done()
        self.rl.show_cursor()
        if self._done is not None:
            self._done(value)

    def on_error(self, error: str) -> None:
        self.render(error)

    # ------------------------------------------------------------------
    # Cursor and value editing
    # ------------------------------------------------------------------

    def _move_cursor(self, step: int) -> None:
        parts = self.date_parts()
        index = self.cursor_index
        while self.first_editable_index <= index + step <= self.last_editable_index:
            index += step
            if parts[index].editable:
                break
        self.cursor_index = index

    def increment_cursor_index(self) -> None:
        """Move the cursor to the next editable segment, if any."""
        self._move_cursor(1)

    def decrement_cursor_index(self) -> None:
        """Move the cursor to the previous editable segment, if any."""
        self._move_cursor(-1)

    def shift_date_part_value(self, offset: int) -> None:
        self.is_dirty = True
        self.date = shift_field(self.date, self.current_date_part().type, offset)

    def handle_keypress(self, key: KeyPress) -> None:
        """Apply one keypress and re-render."""
        if self.status == "answered":
            return

        if self.is_cleared:
            self.is_cleared = False

        amount = magnitude(key)

        if key.name == "right":
            self.increment_cursor_index()
        elif key.name == "left":
            self.decrement_cursor_index()
        elif key.name == "up":
            self.shift_date_part_value(amount)
        elif key.name == "down":
            self.shift_date_part_value(-amount)
        elif key.name in ("delete", "backspace"):
            if self.question.clearable:
                self.is_cleared = True

        self.render()
