"""Event-dispatch loop that drives a :class:`DatePrompt`.

The runner owns the terminal session: it starts raw input, decodes every
input sequence into a :class:`KeyPress`, queues it, and dispatches queued
events one at a time.  ``enter`` is a line submission; everything else is a
keypress.  A submission is awaited to completion (validators may be
asynchronous) before the next queued event is looked at, and once a
submission succeeds the remaining queue is dropped.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any, Iterable, Mapping

from date_prompt.errors import PromptAborted
from date_prompt.keys import KeyPress, parse_keypress
from date_prompt.prompt import DatePrompt
from date_prompt.question import Answers, DateQuestion
from date_prompt.settings import PromptSettings
from date_prompt.stdin_buffer import split_sequences
from date_prompt.terminal import ProcessTerminal, Terminal
from date_prompt.theme import DatePromptTheme

logger = logging.getLogger(__name__)


class PromptRunner:
    """Runs date questions against a terminal."""

    def __init__(
        self,
        terminal: Terminal | None = None,
        settings: PromptSettings | None = None,
        theme: DatePromptTheme | None = None,
    ) -> None:
        self.settings = settings if settings is not None else PromptSettings.from_env()
        self.terminal: Terminal = (
            terminal if terminal is not None else ProcessTerminal(write_log=self.settings.write_log)
        )
        self.theme = theme if theme is not None else self.settings.theme()
        self._events: asyncio.Queue[KeyPress] | None = None
        self._prompt: DatePrompt | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def ask(self, question: DateQuestion, answers: Answers | None = None) -> Any:
        """Ask one question and return its answer (a datetime or ``None``).

        Raises :class:`ConfigError` before touching the terminal when the
        question is invalid, and :class:`PromptAborted` on ctrl+c.
        """
        if question.locale is None and self.settings.locale:
            question = dataclasses.replace(question, locale=self.settings.locale)

        prompt = DatePrompt(question, self.terminal, answers, theme=self.theme)
        loop = asyncio.get_running_loop()
        finished: asyncio.Future[Any] = loop.create_future()

        def done(value: Any) -> None:
            if not finished.done():
                finished.set_result(value)

        self._events = asyncio.Queue()
        self._prompt = prompt
        self.terminal.start(self._on_input, self._on_resize)
        try:
            prompt.run(done)
            await self._dispatch(prompt, finished)
        except PromptAborted:
            prompt.screen.done()
            raise
        finally:
            self.terminal.show_cursor()
            self.terminal.stop()
            self._events = None
            self._prompt = None

        logger.debug("Question %r answered with %r", question.name, finished.result())
        return finished.result()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def _dispatch(self, prompt: DatePrompt, finished: asyncio.Future[Any]) -> None:
        assert self._events is not None
        while not finished.done():
            key = await self._events.get()
            if key.ctrl and key.name == "c":
                logger.debug("Prompt %r aborted", prompt.question.name)
                raise PromptAborted("Prompt was interrupted")
            if key.name == "enter":
                await prompt.handle_submit()
            else:
                prompt.handle_keypress(key)

    def _on_input(self, data: str) -> None:
        if self._events is None:
            return
        sequences, rest = split_sequences(data)
        if rest:
            sequences.append(rest)
        for sequence in sequences:
            key = parse_keypress(sequence)
            if key is None:
                logger.debug("Ignoring unrecognised input %r", sequence)
                continue
            self._events.put_nowait(key)

    def _on_resize(self) -> None:
        if self._prompt is not None:
            self._prompt.screen.refresh()


async def prompt_all(
    questions: Iterable[DateQuestion | Mapping[str, Any]],
    answers: Answers | None = None,
    runner: PromptRunner | None = None,
) -> Answers:
    """Ask *questions* in order and return the answers keyed by name.

    Questions may be :class:`DateQuestion` objects or inquirer-style
    mappings.  Each question sees the answers collected before it.
    """
    runner = runner if runner is not None else PromptRunner()
    collected: Answers = dict(answers or {})
    for question in questions:
        if not isinstance(question, DateQuestion):
            question = DateQuestion.from_dict(question)
        collected[question.name] = await runner.ask(question, collected)
    return collected
