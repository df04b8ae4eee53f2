"""Question record for the ``date`` prompt type."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Awaitable, Callable, Literal, Mapping, Sequence, Union

from date_prompt.errors import ConfigError

Answers = dict[str, Any]

Transformer = Callable[[str, Answers, dict[str, bool]], str]
Validator = Callable[[Any, Answers], Union[bool, str, None, Awaitable[Union[bool, str, None]]]]
Filter = Callable[[Any, Answers], Any]


@dataclass
class DateQuestion:
    """Configuration of one date question.

    ``format`` takes ``Intl.DateTimeFormat``-style options and is merged
    over numeric year/month/day/hour/minute.  ``transformer`` receives the
    joined (already styled) date text, the answers so far and the flags
    ``is_dirty``/``is_cleared``/``is_final``, and returns the text to show.
    """

    name: str = "date"
    message: str | Callable[[Answers], str] = ""
    default: Any = None
    locale: str | Sequence[str] | None = None
    format: Mapping[str, Any] = field(default_factory=dict)
    clearable: bool = False
    transformer: Transformer | None = None
    validate: Validator | None = None
    filter: Filter | None = None
    prefix: str | None = None
    suffix: str = ""
    type: Literal["date"] = "date"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DateQuestion:
        """Build a question from an inquirer-style mapping."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown question key(s): {', '.join(sorted(unknown))}")
        if data.get("type", "date") != "date":
            raise ConfigError(f"Unsupported question type: {data['type']!r}")
        return cls(**data)
