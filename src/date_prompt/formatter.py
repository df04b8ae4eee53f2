"""Locale-aware date segmentation.

Turns a ``datetime`` plus a :class:`FormatConfig` into an ordered list of
:class:`Segment` objects: literal separators and the locale-formatted text
of each calendar field.  Format options follow the ``Intl.DateTimeFormat``
vocabulary (``year="numeric"``, ``month="long"``, ``hour12=True`` ...) and
are resolved to a CLDR pattern through Babel's skeleton data.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Sequence, Union

from babel import Locale, UnknownLocaleError, default_locale
from babel.dates import DateTimeFormat, match_skeleton, tokenize_pattern, untokenize_pattern

from date_prompt.errors import ConfigError
from date_prompt.fields import is_editable

logger = logging.getLogger(__name__)

LocaleSpec = Union[str, Locale, Sequence[str], None]

FALLBACK_LOCALE = "en_US"

DEFAULT_FORMAT_OPTIONS: dict[str, Any] = {
    "year": "numeric",
    "month": "numeric",
    "day": "numeric",
    "hour": "numeric",
    "minute": "numeric",
}

# option -> (skeleton character, {style: width}), in CLDR skeleton order
_DATE_OPTIONS: tuple[tuple[str, str, dict[str, int]], ...] = (
    ("era", "G", {"short": 1, "long": 4, "narrow": 5}),
    ("year", "y", {"numeric": 1, "2-digit": 2}),
    ("month", "M", {"numeric": 1, "2-digit": 2, "short": 3, "long": 4, "narrow": 5}),
    ("weekday", "E", {"short": 3, "long": 4, "narrow": 5}),
    ("day", "d", {"numeric": 1, "2-digit": 2}),
)
_TIME_OPTIONS: tuple[tuple[str, str, dict[str, int]], ...] = (
    ("hour", "h", {"numeric": 1, "2-digit": 2}),
    ("minute", "m", {"numeric": 1, "2-digit": 2}),
    ("second", "s", {"numeric": 1, "2-digit": 2}),
    ("timeZoneName", "z", {"short": 1, "long": 4}),
)
_KNOWN_OPTIONS = {name for name, _, _ in _DATE_OPTIONS + _TIME_OPTIONS} | {"hour12"}

# CLDR pattern character -> segment type
FIELD_TYPES: dict[str, str] = {
    "G": "era",
    "y": "year",
    "Y": "year",
    "u": "year",
    "M": "month",
    "L": "month",
    "d": "day",
    "E": "weekday",
    "e": "weekday",
    "c": "weekday",
    "a": "dayPeriod",
    "b": "dayPeriod",
    "B": "dayPeriod",
    "h": "hour",
    "H": "hour",
    "K": "hour",
    "k": "hour",
    "m": "minute",
    "s": "second",
    "S": "fractionalSecond",
    "z": "timeZoneName",
    "Z": "timeZoneName",
    "v": "timeZoneName",
    "V": "timeZoneName",
    "O": "timeZoneName",
    "X": "timeZoneName",
    "x": "timeZoneName",
}

LITERAL = "literal"


@dataclass(frozen=True)
class Segment:
    """One formatted piece of a date: a separator or a field's text."""

    type: str
    value: str

    @property
    def editable(self) -> bool:
        return is_editable(self.type)


@dataclass(frozen=True)
class FormatConfig:
    """Resolved locale and display options.

    ``pattern`` is the CLDR pattern the options resolve to for ``locale``;
    it is computed once and reused for every render.
    """

    locale: Locale
    options: Mapping[str, Any]
    pattern: str


# ---------------------------------------------------------------------------
# Locale resolution
# ---------------------------------------------------------------------------


def _parse_locale(identifier: str) -> Locale | None:
    try:
        return Locale.parse(identifier.replace("-", "_"))
    except (UnknownLocaleError, ValueError, TypeError):
        return None


def resolve_locale(locale: LocaleSpec = None) -> Locale:
    """Resolve a locale identifier (or a preference list of them).

    ``None`` falls back to the process locale and then to ``en_US``.  An
    explicit identifier that Babel does not know raises :class:`ConfigError`.
    """
    if isinstance(locale, Locale):
        return locale

    if locale is None:
        system = default_locale("LC_TIME")
        resolved = _parse_locale(system) if system else None
        return resolved or Locale.parse(FALLBACK_LOCALE)

    candidates = [locale] if isinstance(locale, str) else list(locale)
    for candidate in candidates:
        resolved = _parse_locale(candidate)
        if resolved is not None:
            return resolved
        logger.debug("Skipping unknown locale %r", candidate)
    raise ConfigError(f"Unknown locale: {locale!r}")


# ---------------------------------------------------------------------------
# Pattern resolution
# ---------------------------------------------------------------------------


def _merge_options(options: Mapping[str, Any] | None) -> dict[str, Any]:
    merged = dict(DEFAULT_FORMAT_OPTIONS)
    merged.update(options or {})
    merged = {key: value for key, value in merged.items() if value is not None}

    unknown = set(merged) - _KNOWN_OPTIONS
    if unknown:
        raise ConfigError(f"Unsupported format option(s): {', '.join(sorted(unknown))}")

    for name, _, widths in _DATE_OPTIONS + _TIME_OPTIONS:
        style = merged.get(name)
        if style is not None and style not in widths:
            allowed = ", ".join(widths)
            raise ConfigError(f"Invalid value {style!r} for format option {name!r} (expected {allowed})")
    return merged


def _hour_char(locale: Locale, options: Mapping[str, Any]) -> str:
    hour12 = options.get("hour12")
    if hour12 is None:
        short_time = getattr(locale.time_formats["short"], "pattern", "")
        return "h" if ("h" in short_time or "K" in short_time) else "H"
    return "h" if hour12 else "H"


def _build_skeletons(locale: Locale, options: Mapping[str, Any]) -> tuple[str, str]:
    date_skeleton = "".join(
        char * widths[options[name]]
        for name, char, widths in _DATE_OPTIONS
        if name in options
    )
    time_skeleton = ""
    for name, char, widths in _TIME_OPTIONS:
        if name not in options:
            continue
        if name == "hour":
            char = _hour_char(locale, options)
        time_skeleton += char * widths[options[name]]
    return date_skeleton, time_skeleton


def _field_class(char: str) -> str | None:
    return FIELD_TYPES.get(char)


def _adjust_widths(pattern: str, skeleton: str) -> str:
    """Bend the field widths of a matched CLDR pattern toward the request.

    Skeleton matching picks the closest available pattern, which may use a
    different width than asked for (``MM`` vs ``M``, ``MMM`` vs ``MMMM``).
    """
    requested: dict[str, int] = {}
    for kind, token in tokenize_pattern(skeleton):
        if kind == "field":
            char, width = token
            requested[_field_class(char) or char] = width

    adjusted = []
    for kind, token in tokenize_pattern(pattern):
        if kind != "field":
            adjusted.append((kind, token))
            continue
        char, width = token
        field_class = _field_class(char)
        want = requested.get(field_class or char)
        if want is not None:
            if field_class in ("weekday", "era", "timeZoneName"):
                width = want
            elif field_class == "month" and (want >= 3 or width >= 3):
                width = want
            elif field_class == "year":
                width = 2 if want == 2 else (1 if width == 2 else width)
            elif want == 2:
                width = 2
        adjusted.append((kind, (char, width)))
    return untokenize_pattern(adjusted)


def _match_pattern(locale: Locale, skeleton: str, fallback_width: str, fallback_kind: str) -> str:
    skeletons = locale.datetime_skeletons
    key = skeleton if skeleton in skeletons else match_skeleton(skeleton, skeletons)
    if key is None:
        key = match_skeleton(skeleton, skeletons, allow_different_fields=True)
    if key is None:
        formats = locale.date_formats if fallback_kind == "date" else locale.time_formats
        logger.debug("No skeleton match for %r in %s, using %s %s format", skeleton, locale, fallback_width, fallback_kind)
        return getattr(formats[fallback_width], "pattern", str(formats[fallback_width]))
    return _adjust_widths(skeletons[key].pattern, skeleton)


def _glue_width(options: Mapping[str, Any]) -> str:
    month = options.get("month")
    if month == "long":
        return "long"
    if month in ("short", "narrow"):
        return "medium"
    return "short"


def resolve_pattern(locale: Locale, options: Mapping[str, Any]) -> str:
    """Resolve ``Intl``-style options to a CLDR pattern for *locale*."""
    date_skeleton, time_skeleton = _build_skeletons(locale, options)
    date_pattern = _match_pattern(locale, date_skeleton, "short", "date") if date_skeleton else ""
    time_pattern = _match_pattern(locale, time_skeleton, "short", "time") if time_skeleton else ""

    if date_pattern and time_pattern:
        glue = str(locale.datetime_formats.get(_glue_width(options), "{1} {0}"))
        return glue.replace("{1}", date_pattern).replace("{0}", time_pattern)
    return date_pattern or time_pattern


def build_format_config(
    locale: LocaleSpec = None,
    options: Mapping[str, Any] | None = None,
) -> FormatConfig:
    """Build a :class:`FormatConfig`, merging *options* over the defaults.

    An option set to ``None`` removes the corresponding default field.
    """
    merged = _merge_options(options)
    resolved = resolve_locale(locale)
    pattern = resolve_pattern(resolved, merged)
    logger.debug("Resolved date pattern %r for locale %s", pattern, resolved)
    return FormatConfig(locale=resolved, options=MappingProxyType(merged), pattern=pattern)


# ---------------------------------------------------------------------------
# Segmentation
# ---------------------------------------------------------------------------


def derive_segments(value: datetime, config: FormatConfig) -> list[Segment]:
    """Format *value* into typed segments according to *config*.

    Adjacent literal text is merged into a single segment.  Each pattern
    field maps to a fixed segment type through ``FIELD_TYPES`` and a field
    never formats to empty text, so the number and types of segments depend
    only on ``config``, never on ``value``.  ``DatePrompt`` computes its
    cursor bounds once and relies on this.
    """
    fmt = DateTimeFormat(value, config.locale)
    segments: list[Segment] = []

    def add_literal(text: str) -> None:
        if not text:
            return
        if segments and segments[-1].type == LITERAL:
            segments[-1] = Segment(LITERAL, segments[-1].value + text)
        else:
            segments.append(Segment(LITERAL, text))

    for kind, token in tokenize_pattern(config.pattern):
        if kind == "chars":
            add_literal(token)
            continue
        char, width = token
        segment_type = FIELD_TYPES.get(char)
        text = fmt[char * width]
        if segment_type is None:
            add_literal(text)
        else:
            segments.append(Segment(segment_type, text))
    return segments


def editable_bounds(segments: Sequence[Segment]) -> tuple[int, int]:
    """Return the indices of the first and last editable segments.

    Returns ``(-1, -1)`` when no segment is editable.
    """
    indices = [index for index, segment in enumerate(segments) if segment.editable]
    if not indices:
        return -1, -1
    return indices[0], indices[-1]
