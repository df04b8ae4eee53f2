"""Keyboard input parsing for the date prompt.

Turns one complete terminal input sequence into a :class:`KeyPress`.
Handles legacy xterm/rxvt escape sequences (including the ``CSI 1;<mod>``
modifier parameter), kitty ``CSI u`` sequences, ESC-prefixed alt/meta keys,
control bytes and plain printable characters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# ---------------------------------------------------------------------------
# KeyPress
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyPress:
    """A decoded keypress.

    ``meta`` covers both the alt and meta modifiers; terminals do not
    distinguish them.
    """

    name: str
    shift: bool = False
    meta: bool = False
    ctrl: bool = False
    sequence: str = ""

    @property
    def id(self) -> str:
        """Key identifier in ``ctrl+shift+alt+name`` form."""
        prefix = ""
        if self.ctrl:
            prefix += "ctrl+"
        if self.shift:
            prefix += "shift+"
        if self.meta:
            prefix += "alt+"
        return prefix + self.name


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ESC = "\x1b"

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

LOCK_MASK = 64 + 128

# Unmodified legacy sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[4~": "end",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[E": "clear",
}

# rxvt reports shifted arrows with lowercase final bytes
RXVT_SHIFT_SEQUENCES: dict[str, str] = {
    "\x1b[a": "up",
    "\x1b[b": "down",
    "\x1b[c": "right",
    "\x1b[d": "left",
    "\x1b[2$": "insert",
    "\x1b[3$": "delete",
}

_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "E": "clear",
}

_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
}

CODEPOINTS: dict[int, str] = {
    9: "tab",
    13: "enter",
    27: "escape",
    32: "space",
    127: "backspace",
    57414: "enter",  # keypad enter
}

# CSI 1;<modifier>(:<event>)?<letter>
_MODIFIED_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)(?::(\d+))?([ABCDHFE])$")
# CSI <number>;<modifier>(:<event>)?~
_MODIFIED_TILDE_RE = re.compile(r"^\x1b\[(\d+);(\d+)(?::(\d+))?~$")
# CSI <codepoint>(:<shifted>(:<base>))?(;<modifier>(:<event>))?u
_KITTY_CSI_U_RE = re.compile(r"^\x1b\[(\d+)(?::\d*)?(?::\d+)?(?:;(\d+)(?::(\d+))?)?u$")

_KEY_RELEASE = 3


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _decode_modifier(raw: int, name: str, sequence: str) -> KeyPress:
    mod = (raw - 1) & ~LOCK_MASK
    return KeyPress(
        name=name,
        shift=bool(mod & MODIFIERS["shift"]),
        meta=bool(mod & MODIFIERS["alt"]),
        ctrl=bool(mod & MODIFIERS["ctrl"]),
        sequence=sequence,
    )


def _with_meta(key: KeyPress, sequence: str) -> KeyPress:
    return KeyPress(name=key.name, shift=key.shift, meta=True, ctrl=key.ctrl, sequence=sequence)


def _parse_single(ch: str, sequence: str) -> KeyPress | None:
    if ch in ("\r", "\n"):
        return KeyPress("enter", sequence=sequence)
    if ch == "\t":
        return KeyPress("tab", sequence=sequence)
    if ch in ("\x7f", "\x08"):
        return KeyPress("backspace", sequence=sequence)
    if ch == ESC:
        return KeyPress("escape", sequence=sequence)
    if ch == " ":
        return KeyPress("space", sequence=sequence)
    if ch == "\x00":
        return KeyPress("space", ctrl=True, sequence=sequence)
    if 1 <= ord(ch) <= 26:
        return KeyPress(chr(ord(ch) + ord("a") - 1), ctrl=True, sequence=sequence)
    if ch.isupper():
        return KeyPress(ch.lower(), shift=True, sequence=sequence)
    if ch.isprintable():
        return KeyPress(ch, sequence=sequence)
    return None


# ---------------------------------------------------------------------------
# parse_keypress
# ---------------------------------------------------------------------------


def parse_keypress(data: str) -> KeyPress | None:
    """Decode one complete input sequence, or return ``None``.

    ``None`` is returned for empty input, key-release events and sequences
    that do not describe a key.
    """
    if not data:
        return None

    if data in LEGACY_KEY_SEQUENCES:
        return KeyPress(LEGACY_KEY_SEQUENCES[data], sequence=data)

    if data in RXVT_SHIFT_SEQUENCES:
        return KeyPress(RXVT_SHIFT_SEQUENCES[data], shift=True, sequence=data)

    if data == "\x1b[Z":
        return KeyPress("tab", shift=True, sequence=data)

    m = _MODIFIED_LETTER_RE.match(data)
    if m:
        if m.group(2) and int(m.group(2)) == _KEY_RELEASE:
            return None
        return _decode_modifier(int(m.group(1)), _LETTER_KEYS[m.group(3)], data)

    m = _MODIFIED_TILDE_RE.match(data)
    if m:
        name = _TILDE_KEYS.get(int(m.group(1)))
        if name is None or (m.group(3) and int(m.group(3)) == _KEY_RELEASE):
            return None
        return _decode_modifier(int(m.group(2)), name, data)

    m = _KITTY_CSI_U_RE.match(data)
    if m:
        if m.group(3) and int(m.group(3)) == _KEY_RELEASE:
            return None
        codepoint = int(m.group(1))
        name = CODEPOINTS.get(codepoint)
        if name is None:
            ch = chr(codepoint)
            if not ch.isprintable():
                return None
            name = ch.lower()
        return _decode_modifier(int(m.group(2) or 1), name, data)

    # Some terminals send ESC ESC [A for alt+arrow
    if data.startswith(ESC + ESC) and len(data) > 2:
        inner = parse_keypress(data[1:])
        return _with_meta(inner, data) if inner is not None else None

    if len(data) == 2 and data[0] == ESC:
        inner = _parse_single(data[1], data)
        return _with_meta(inner, data) if inner is not None else None

    if len(data) == 1:
        return _parse_single(data, data)

    return None


def magnitude(key: KeyPress) -> int:
    """Step size for up/down: 1, 10 with shift, 100 with shift+alt."""
    if key.shift:
        return 100 if key.meta else 10
    return 1
