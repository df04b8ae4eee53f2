"""Terminal I/O for the prompt runner.

``Terminal`` is the small surface a prompt needs: a raw-mode input session,
text output and the handful of cursor controls used to redraw a block in
place.  ``ProcessTerminal`` implements it on the controlling tty; tests use
an in-memory implementation.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import signal
import sys
import termios
import tty
from typing import Callable, Protocol

from date_prompt.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

CSI = "\x1b["
HIDE_CURSOR = f"{CSI}?25l"
SHOW_CURSOR = f"{CSI}?25h"
ERASE_BELOW = f"{CSI}0J"

DEFAULT_COLUMNS = 80
READ_SIZE = 4096


class Terminal(Protocol):
    """What a prompt needs from the terminal it draws on."""

    @property
    def columns(self) -> int: ...

    def start(self, on_input: Callable[[str], None], on_resize: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...

    def write(self, data: str) -> None: ...

    def move_by(self, lines: int) -> None: ...

    def hide_cursor(self) -> None: ...

    def show_cursor(self) -> None: ...

    def clear_from_cursor(self) -> None: ...


class ProcessTerminal:
    """The process's own tty.

    ``start`` puts stdin in raw mode and registers it with the running event
    loop, so it must be called from a coroutine.  Decoded input is passed
    through a :class:`StdinBuffer` and delivered one complete sequence at a
    time.  When *write_log* names a file, every chunk of output is appended
    to it as well.
    """

    def __init__(self, write_log: str = "") -> None:
        self.write_log = write_log
        self._fd: int | None = None
        self._saved_attrs: list | None = None
        self._previous_winch: signal.Handlers | Callable | int | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._buffer: StdinBuffer | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._on_input: Callable[[str], None] | None = None
        self._on_resize: Callable[[], None] | None = None

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (ValueError, OSError):
            return DEFAULT_COLUMNS

    # -- session ------------------------------------------------------------

    def start(self, on_input: Callable[[str], None], on_resize: Callable[[], None]) -> None:
        self._on_input = on_input
        self._on_resize = on_resize
        self._fd = sys.stdin.fileno()

        self._saved_attrs = termios.tcgetattr(self._fd)
        tty.setraw(self._fd)

        self._previous_winch = signal.signal(signal.SIGWINCH, self._handle_winch)

        self._decoder.reset()
        self._buffer = StdinBuffer()
        self._buffer.on_data(self._deliver)

        self._loop = asyncio.get_running_loop()
        self._loop.add_reader(self._fd, self._read_stdin)
        logger.debug("Raw input session started on fd %d", self._fd)

    def stop(self) -> None:
        """End the input session and put the tty back the way it was."""
        if self._loop is not None and self._fd is not None:
            self._loop.remove_reader(self._fd)
        self._loop = None

        if self._buffer is not None:
            self._buffer.destroy()
            self._buffer = None

        if self._previous_winch is not None:
            signal.signal(signal.SIGWINCH, self._previous_winch)
            self._previous_winch = None

        if self._saved_attrs is not None and self._fd is not None:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None
            logger.debug("Raw input session ended")

        self._on_input = None
        self._on_resize = None

    def _read_stdin(self) -> None:
        try:
            chunk = os.read(self._fd, READ_SIZE)
        except OSError as exc:
            logger.debug("Reading stdin failed: %s", exc)
            return
        if chunk and self._buffer is not None:
            text = self._decoder.decode(chunk)
            if text:
                self._buffer.process(text)

    def _deliver(self, sequence: str) -> None:
        if self._on_input is not None:
            self._on_input(sequence)

    def _handle_winch(self, signum: int, frame: object) -> None:
        if self._on_resize is not None:
            self._on_resize()

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        try:
            sys.stdout.write(data)
            sys.stdout.flush()
        except OSError as exc:
            logger.debug("Writing stdout failed: %s", exc)

        if not self.write_log:
            return
        try:
            with open(self.write_log, "a", encoding="utf-8") as log:
                log.write(data)
        except OSError as exc:
            logger.warning("Disabling write log %s: %s", self.write_log, exc)
            self.write_log = ""

    def move_by(self, lines: int) -> None:
        """Move the cursor *lines* rows down, or up when negative."""
        if lines:
            self.write(f"{CSI}{abs(lines)}{'B' if lines > 0 else 'A'}")

    def hide_cursor(self) -> None:
        self.write(HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(SHOW_CURSOR)

    def clear_from_cursor(self) -> None:
        self.write(ERASE_BELOW)
