"""Environment-driven settings for the prompt runner and CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from date_prompt.theme import DatePromptTheme, default_theme, plain_theme

ENV_PREFIX = "DATE_PROMPT_"

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(value: str | None) -> bool:
    return value is not None and value.strip().lower() in _TRUTHY


@dataclass
class PromptSettings:
    """Process-wide prompt settings.

    ``locale`` is used for questions that do not name one, ``no_color``
    switches to the unstyled theme and ``write_log`` names a file that
    receives a copy of every byte written to the terminal.
    """

    locale: str | None = None
    no_color: bool = False
    write_log: str = ""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> PromptSettings:
        env = os.environ if environ is None else environ
        return cls(
            locale=env.get(f"{ENV_PREFIX}LOCALE") or None,
            no_color=_flag(env.get(f"{ENV_PREFIX}NO_COLOR")) or "NO_COLOR" in env,
            write_log=env.get(f"{ENV_PREFIX}WRITE_LOG", ""),
        )

    def theme(self) -> DatePromptTheme:
        return plain_theme() if self.no_color else default_theme()
