"""Exceptions raised by the date prompt."""

from __future__ import annotations


class DatePromptError(Exception):
    """Base class for all date prompt errors."""


class ConfigError(DatePromptError):
    """The question configuration cannot produce a usable prompt."""


class ValidationFailure(DatePromptError):
    """A submitted value was rejected by the question's validator.

    Validators may raise this instead of returning an error string.  The
    prompt stays interactive and shows ``message`` under the input line.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PromptAborted(DatePromptError):
    """The user interrupted the prompt (ctrl+c)."""
