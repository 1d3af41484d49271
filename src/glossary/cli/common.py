"""State, settings resolution and output helpers shared by the CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Sequence

import typer
import yaml
from rich.console import Console
from rich.markup import escape

from glossary.config.settings import Settings, deep_merge
from glossary.utils.logging import configure_logging, get_logger

console = Console()
_LOGGER = get_logger(module=__name__)


class CLIError(RuntimeError):
    """A user-facing failure rendered without a traceback."""


@dataclass(slots=True)
class CLIState:
    """Resolved settings shared with every subcommand through ``ctx.obj``."""

    settings: Settings
    overrides: Dict[str, Any]
    environment: str
    verbose: bool


def parse_override(argument: str) -> Dict[str, Any]:
    """Turn ``export.pretty=true`` into ``{"export": {"pretty": True}}``.

    Values are read as YAML scalars, the same way the config files are.
    """

    key, sep, raw_value = argument.partition("=")
    parts = [part.strip() for part in key.split(".")]
    if not sep or not all(parts):
        raise typer.BadParameter(f"Expected dotted.key=value, got '{argument}'")
    try:
        value: Any = yaml.safe_load(raw_value) if raw_value.strip() else raw_value
    except yaml.YAMLError:
        value = raw_value
    for part in reversed(parts):
        value = {part: value}
    return value


def merge_overrides(overrides: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    for override in overrides:
        merged = deep_merge(merged, override)
    return merged


def configure_state(
    ctx: typer.Context,
    *,
    environment: str | None,
    overrides: Iterable[Dict[str, Any]],
    verbose: bool,
) -> None:
    """Build :class:`Settings`, set up logging and attach a :class:`CLIState`."""

    merged = merge_overrides(overrides)
    kwargs = dict(merged)
    if environment:
        kwargs["environment"] = environment
    try:
        settings = Settings(**kwargs)
    except ValueError as exc:
        raise CLIError(f"Invalid configuration: {exc}") from exc

    configure_logging(
        settings,
        level="DEBUG" if verbose else "WARNING",
        log_to_file=settings.create_dirs,
    )
    _LOGGER.debug(
        "Resolved CLI settings",
        environment=settings.environment,
        overrides=sorted(merged),
    )
    ctx.obj = CLIState(settings, merged, settings.environment, verbose)


def get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise CLIError("Glossary CLI state is missing; run through the 'glossary' entry point")
    return state


def report_violations(headline: str, violations: Sequence[Any]) -> None:
    """Print a failure headline followed by every violation, in order."""

    console.print(f"[bold red]❌ {escape(headline)}[/bold red]")
    for violation in violations:
        console.print(f"  - {escape(str(violation))}", soft_wrap=True)


__all__ = [
    "console",
    "CLIError",
    "CLIState",
    "parse_override",
    "merge_overrides",
    "configure_state",
    "get_state",
    "report_violations",
]
