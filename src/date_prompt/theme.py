"""Styling for the date prompt.

A theme is a set of plain ``str -> str`` callables, so tests can swap in
an identity theme and assert against unstyled text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

StyleFn = Callable[[str], str]


def _sgr(open_code: int, close_code: int) -> StyleFn:
    def style(text: str) -> str:
        return f"\x1b[{open_code}m{text}\x1b[{close_code}m"

    return style


def _identity(text: str) -> str:
    return text


_bold = _sgr(1, 22)
_dim = _sgr(2, 22)
_inverse = _sgr(7, 27)
_red = _sgr(31, 39)
_green = _sgr(32, 39)
_cyan = _sgr(36, 39)


@dataclass
class DatePromptTheme:
    """Styling callables used when rendering a :class:`DatePrompt`.

    ``final`` styles every segment once the prompt is answered,
    ``selected`` the segment under the cursor and ``dim`` the segments of a
    value the user has not touched yet.
    """

    prefix: StyleFn = _green
    message: StyleFn = _bold
    final: StyleFn = _cyan
    selected: StyleFn = _inverse
    dim: StyleFn = _dim
    hint: StyleFn = _dim
    error_prefix: StyleFn = _red


def default_theme() -> DatePromptTheme:
    return DatePromptTheme()


def plain_theme() -> DatePromptTheme:
    """A theme that applies no styling at all."""
    return DatePromptTheme(
        prefix=_identity,
        message=_identity,
        final=_identity,
        selected=_identity,
        dim=_identity,
        hint=_identity,
        error_prefix=_identity,
    )
