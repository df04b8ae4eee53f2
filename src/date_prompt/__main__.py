"""CLI entry point for date-prompt. Uses Click for argument parsing."""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime

import click

from date_prompt.errors import ConfigError, PromptAborted
from date_prompt.question import DateQuestion
from date_prompt.runner import PromptRunner


def _parse_format_option(value: str) -> tuple[str, object]:
    key, sep, raw = value.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected KEY=VALUE, got {value!r}", param_hint="--format")
    if key == "hour12":
        return key, raw.lower() in ("1", "true", "yes", "on")
    if raw.lower() in ("", "none"):
        return key, None
    return key, raw


def _parse_default(value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--default") from exc


@click.command()
@click.option("--message", "-m", default="Pick a date", show_default=True, help="Question text")
@click.option("--name", default="date", show_default=True, help="Answer name")
@click.option("--locale", "-l", default=None, help="Locale identifier, e.g. en-US or de_DE")
@click.option(
    "--format",
    "-f",
    "format_options",
    multiple=True,
    metavar="KEY=VALUE",
    help="Intl-style format option, e.g. month=long or second=numeric (repeatable)",
)
@click.option("--default", "default", default=None, help="Initial value as ISO-8601")
@click.option("--clearable", is_flag=True, help="Allow <delete> to clear the answer")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    show_default=True,
)
@click.option("--log-file", default=None, help="Write log records to this file")
def main(message, name, locale, format_options, default, clearable, log_level, log_file):
    """Ask for a date interactively and print it as ISO-8601."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=log_file,
    )

    question = DateQuestion(
        name=name,
        message=message,
        default=_parse_default(default),
        locale=locale,
        format=dict(_parse_format_option(option) for option in format_options),
        clearable=clearable,
    )

    try:
        answer = asyncio.run(PromptRunner().ask(question))
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    except PromptAborted:
        sys.exit(130)

    click.echo(answer.isoformat() if answer is not None else "")


if __name__ == "__main__":
    main()
