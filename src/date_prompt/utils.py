"""Terminal text measurement: ANSI stripping and display width."""

from __future__ import annotations

import re

import grapheme
import wcwidth as _wcwidth

# CSI sequences (SGR and cursor movement) and OSC 8 hyperlinks
_STRIP_RE = re.compile(
    r"\x1b\[[0-9;?]*[A-Za-z]"
    r"|\x1b\]8;;[^\x07]*\x07"
)

_VS16 = "\ufe0f"


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from *text*."""
    return _STRIP_RE.sub("", text)


def _grapheme_width(g: str) -> int:
    """Terminal columns taken by one grapheme cluster.

    Clusters carrying an emoji presentation selector are two columns wide;
    everything else is measured on its base codepoint.
    """
    if _VS16 in g:
        return 2
    w = _wcwidth.wcwidth(g[0])
    return max(w, 0)


def visible_width(text: str) -> int:
    """Return the number of terminal columns *text* occupies."""
    stripped = strip_ansi(text)
    if stripped.isascii():
        return sum(1 for ch in stripped if ch.isprintable())
    return sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))


def count_rows(line: str, columns: int) -> int:
    """Number of terminal rows a single logical *line* wraps onto."""
    if columns <= 0:
        return 1
    width = visible_width(line)
    return max(1, -(-width // columns))
