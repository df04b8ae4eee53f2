"""date-prompt: interactive terminal date prompt with locale-aware segments."""

from date_prompt.errors import (
    ConfigError,
    DatePromptError,
    PromptAborted,
    ValidationFailure,
)
from date_prompt.fields import EDITABLE_TYPES, FIELD_ACCESSORS, FieldAccessor, shift_field
from date_prompt.formatter import (
    DEFAULT_FORMAT_OPTIONS,
    FormatConfig,
    Segment,
    build_format_config,
    derive_segments,
    editable_bounds,
    resolve_locale,
)
from date_prompt.keys import KeyPress, parse_keypress
from date_prompt.prompt import CLEAR_HINT, DatePrompt
from date_prompt.question import DateQuestion
from date_prompt.runner import PromptRunner, prompt_all
from date_prompt.screen import ScreenManager
from date_prompt.settings import PromptSettings
from date_prompt.terminal import ProcessTerminal, Terminal
from date_prompt.theme import DatePromptTheme, default_theme, plain_theme

__all__ = [
    "CLEAR_HINT",
    "ConfigError",
    "DEFAULT_FORMAT_OPTIONS",
    "DatePrompt",
    "DatePromptError",
    "DatePromptTheme",
    "DateQuestion",
    "EDITABLE_TYPES",
    "FIELD_ACCESSORS",
    "FieldAccessor",
    "FormatConfig",
    "KeyPress",
    "ProcessTerminal",
    "PromptAborted",
    "PromptRunner",
    "PromptSettings",
    "ScreenManager",
    "Segment",
    "Terminal",
    "ValidationFailure",
    "build_format_config",
    "default_theme",
    "derive_segments",
    "editable_bounds",
    "parse_keypress",
    "plain_theme",
    "prompt_all",
    "resolve_locale",
    "shift_field",
]
