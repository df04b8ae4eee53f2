"""Split raw stdin chunks into complete input sequences.

Escape sequences can arrive split across reads; a bare ``ESC`` followed by
``[`` in the next chunk must not be decoded as an escape keypress.  The
buffer holds incomplete sequences back until more data arrives or a short
timeout expires.
"""

from __future__ import annotations

import asyncio
from typing import Callable

ESC = "\x1b"

# rxvt terminates shifted insert/delete with "$" instead of a CSI final byte
_RXVT_FINAL = "$"


def _is_csi_final(ch: str) -> bool:
    return "\x40" <= ch <= "\x7e" or ch == _RXVT_FINAL


def _escape_length(data: str, start: int) -> int | None:
    """Length of the escape sequence beginning at ``data[start]``.

    Returns ``None`` when the sequence is cut off by the end of *data*.
    """
    i = start + 1
    if i >= len(data):
        return None

    introducer = data[i]
    if introducer == ESC:
        # ESC ESC <seq> is the meta-prefixed form of <seq>
        inner = _escape_length(data, i)
        return None if inner is None else inner + 1

    if introducer == "[":
        for j in range(i + 1, len(data)):
            if _is_csi_final(data[j]):
                return j - start + 1
        return None

    if introducer == "O":
        return 3 if i + 1 < len(data) else None

    # ESC <char> is an alt/meta keypress
    return 2


def split_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences.

    Returns ``(sequences, remainder)`` where ``remainder`` is a trailing
    escape sequence that is not complete yet.
    """
    sequences: list[str] = []
    pos = 0
    while pos < len(buffer):
        if buffer[pos] != ESC:
            sequences.append(buffer[pos])
            pos += 1
            continue
        length = _escape_length(buffer, pos)
        if length is None:
            return sequences, buffer[pos:]
        sequences.append(buffer[pos : pos + length])
        pos += length
    return sequences, ""


class StdinBuffer:
    """Buffers stdin input and emits complete sequences to a callback."""

    def __init__(self, *, timeout: float = 0.01) -> None:
        self._buffer: str = ""
        self._timeout: float = timeout
        self._timeout_handle: asyncio.TimerHandle | None = None
        self._on_data: Callable[[str], None] | None = None

    def on_data(self, callback: Callable[[str], None]) -> None:
        """Set callback for complete sequences."""
        self._on_data = callback

    def _emit(self, data: str) -> None:
        if self._on_data:
            self._on_data(data)

    def process(self, data: str) -> None:
        """Feed input data into the buffer."""
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None

        self._buffer += data
        sequences, self._buffer = split_sequences(self._buffer)
        for sequence in sequences:
            self._emit(sequence)

        if self._buffer:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                self._flush_pending()
            else:
                self._timeout_handle = loop.call_later(self._timeout, self._flush_pending)

    def _flush_pending(self) -> None:
        self._timeout_handle = None
        for sequence in self.flush():
            self._emit(sequence)

    def flush(self) -> list[str]:
        """Return whatever is buffered as a single sequence and reset."""
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None
        if not self._buffer:
            return []
        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    def get_buffer(self) -> str:
        return self._buffer

    def destroy(self) -> None:
        if self._timeout_handle is not None:
            self._timeout_handle.cancel()
            self._timeout_handle = None
        self._buffer = ""
