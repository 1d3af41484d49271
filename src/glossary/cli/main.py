"""Primary Typer application wiring the glossary CLI."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type

import typer
from rich.markup import escape
from rich.table import Table

from glossary.pipeline.export import (
    ExportError,
    ExportMetadata,
    ExportOptions,
    export_glossary,
    sort_glossary_file,
)
from glossary.pipeline.validation import GlossaryLoadError, load_glossary, validate_glossary, validate_schema
from glossary.scoring import score_breakdown, score_term

from .common import CLIError, configure_state, console, get_state, parse_override, report_violations


ErrorHandler = Callable[[Exception], int]


class GlossaryTyper(typer.Typer):
    """Typer app that maps escaping exceptions to exit codes.

    Handlers are looked up along the exception's MRO, so a handler for a base
    class also covers its subclasses unless a closer one is registered.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.error_handlers: Dict[Type[Exception], ErrorHandler] = {}

    def on_error(self, exc_type: Type[Exception]) -> Callable[[ErrorHandler], ErrorHandler]:
        def register(handler: ErrorHandler) -> ErrorHandler:
            self.error_handlers[exc_type] = handler
            return handler

        return register

    def handler_for(self, exc: Exception) -> ErrorHandler | None:
        for klass in type(exc).__mro__:
            if klass in self.error_handlers:
                return self.error_handlers[klass]
        return None

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        try:
            return super().__call__(*args, **kwargs)
        except Exception as exc:
            handler = self.handler_for(exc)
            if handler is None:
                raise
            raise SystemExit(handler(exc)) from exc


app = GlossaryTyper(
    add_completion=False,
    help="Validate, score, sort and export the glossary.",
    no_args_is_help=True,
)


@app.on_error(CLIError)
def handle_cli_error(exc: Exception) -> int:
    console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    return 2


@app.callback()
def main(
    ctx: typer.Context,
    environment: Optional[str] = typer.Option(
        None,
        "--environment",
        "-e",
        help="Active configuration environment (development, testing, production).",
        show_default=False,
    ),
    override: List[str] = typer.Option(  # noqa: B008 - Typer callback signature
        [],
        "--override",
        "-o",
        metavar="KEY=VALUE",
        help="Configuration override in dotted.key=value notation (repeatable).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Emit debug logging for CLI operations.",
    ),
) -> None:
    """Configure shared CLI state prior to executing subcommands."""

    overrides = [parse_override(item) for item in override]
    configure_state(ctx, environment=environment, overrides=overrides, verbose=verbose)


def _load_or_exit(path: Path) -> Any:
    try:
        return load_glossary(path)
    except GlossaryLoadError as exc:
        console.print(f"[bold red]❌ {escape(str(exc))}[/bold red]", soft_wrap=True)
        raise typer.Exit(code=1) from exc


@app.command("validate")
def validate_command(
    ctx: typer.Context,
    terms: Optional[Path] = typer.Argument(None, help="Glossary file (defaults to paths.terms_file)."),
    base: Optional[Path] = typer.Option(
        None,
        "--base",
        help="Previously published glossary used to detect slug changes.",
    ),
) -> None:
    """Check the schema, duplicates, slug immutability and redirects."""

    state = get_state(ctx)
    try:
        outcome = validate_glossary(terms, base_path=base, settings=state.settings)
    except GlossaryLoadError as exc:
        console.print(f"[bold red]❌ {escape(str(exc))}[/bold red]", soft_wrap=True)
        raise typer.Exit(code=1) from exc

    if not outcome.schema.passed:
        report_violations("Schema validation failed", outcome.messages)
        raise typer.Exit(code=1)
    if not outcome.passed:
        report_violations("Validation failed", outcome.messages)
        raise typer.Exit(code=1)

    count = len(outcome.snapshot.terms) if outcome.snapshot else 0
    console.print(f"[green]✅ Validation passed! {count} terms are valid.[/green]")


@app.command("export")
def export_command(
    ctx: typer.Context,
    terms: Optional[Path] = typer.Argument(None, help="Glossary file (defaults to paths.terms_file)."),
    out: Optional[Path] = typer.Option(None, "--out", help="Output path for the JSON artifact."),
    pretty: bool = typer.Option(False, "--pretty", help="Indent the JSON output."),
    check: bool = typer.Option(False, "--check", help="Validate the export without writing it."),
    only_if_new: bool = typer.Option(
        False,
        "--only-if-new",
        help="Skip the export unless a new slug appeared since --previous.",
    ),
    previous: Optional[Path] = typer.Option(
        None,
        "--previous",
        help="Previous revision of the glossary used by --only-if-new.",
    ),
    release: Optional[str] = typer.Option(
        None,
        "--release",
        help="Version recorded in the artifact (build or commit identifier).",
    ),
) -> None:
    """Publish the glossary as a sorted, versioned JSON document."""

    state = get_state(ctx)
    policy = state.settings.policies.export
    options = ExportOptions.from_policy(
        policy,
        pretty=True if pretty else None,
        only_if_new=True if only_if_new else None,
    )
    metadata = ExportMetadata(
        version=release or policy.version_label,
        generated_at=datetime.now(timezone.utc),
    )

    try:
        outcome = export_glossary(
            terms,
            out,
            metadata=metadata,
            options=options,
            previous_path=previous,
            check=check,
            settings=state.settings,
        )
    except (GlossaryLoadError, ExportError) as exc:
        console.print(f"[bold red]❌ {escape(str(exc))}[/bold red]", soft_wrap=True)
        raise typer.Exit(code=1) from exc

    if outcome.skipped:
        console.print("ℹ️ No new terms detected; skipping export")
        return
    if outcome.oversized:
        console.print(
            f"[yellow]⚠️ Export size {outcome.size_bytes} bytes exceeds "
            f"{options.size_threshold_bytes} byte limit[/yellow]"
        )
    count = outcome.document.terms_count if outcome.document else 0
    if check:
        console.print(f"[green]✅ Export validation passed ({count} terms)[/green]")
        return
    console.print(f"[green]✅ Wrote {escape(str(outcome.path))} ({count} terms)[/green]", soft_wrap=True)


@app.command("score")
def score_command(
    ctx: typer.Context,
    terms: Optional[Path] = typer.Argument(None, help="Glossary file (defaults to paths.terms_file)."),
    slug: Optional[str] = typer.Option(None, "--slug", help="Term to score; defaults to the last one."),
    plain: bool = typer.Option(False, "--plain", help="Print SCORE:/BADGE: lines for scripts."),
) -> None:
    """Show the quality score, breakdown and badges of one term."""

    state = get_state(ctx)
    raw = _load_or_exit(terms or state.settings.paths.terms_file)
    schema = validate_schema(raw)
    if not schema.passed or schema.snapshot is None:
        report_violations("Schema validation failed", schema.messages)
        raise typer.Exit(code=1)

    snapshot = schema.snapshot
    if slug is not None:
        term = snapshot.get(slug)
        if term is None:
            raise CLIError(f"No term with slug '{slug}'")
    elif snapshot.terms:
        term = snapshot.terms[-1]
    else:
        raise CLIError("The glossary has no terms to score")

    result = score_term(term)
    if plain:
        console.print(f"SCORE:{result.score}", markup=False)
        for badge in result.badges:
            console.print(f"BADGE:{badge.value}", markup=False)
        return

    breakdown = score_breakdown(term)
    table = Table(title=f"Score for '{escape(term.term)}' ({term.slug})")
    table.add_column("Component")
    table.add_column("Points", justify="right")
    table.add_column("Max", justify="right")
    for component, maximum in breakdown.max_scores.items():
        table.add_row(component.replace("_", " "), str(getattr(breakdown, component)), str(maximum))
    table.add_row("[bold]total[/bold]", f"[bold]{result.score}[/bold]", "100")
    console.print(table)
    for badge in result.badges:
        console.print(f"{badge.icon} {badge.value}")


@app.command("sort")
def sort_command(
    ctx: typer.Context,
    terms: Optional[Path] = typer.Argument(None, help="Glossary file (defaults to paths.terms_file)."),
    check: bool = typer.Option(False, "--check", help="Fail if the file is not sorted; never write."),
) -> None:
    """Sort terms by slug and keys into canonical order."""

    state = get_state(ctx)
    path = terms or state.settings.paths.terms_file
    try:
        already_sorted = sort_glossary_file(path, check=check)
    except GlossaryLoadError as exc:
        console.print(f"[bold red]❌ {escape(str(exc))}[/bold red]", soft_wrap=True)
        raise typer.Exit(code=1) from exc
    except ValueError as exc:
        raise CLIError(str(exc)) from exc

    if already_sorted:
        console.print(f"[green]✅ {escape(str(path))} is sorted[/green]", soft_wrap=True)
    elif check:
        console.print(
            f"[bold red]❌ {escape(str(path))} is not sorted; run 'glossary sort'[/bold red]",
            soft_wrap=True,
        )
        raise typer.Exit(code=1)
    else:
        console.print(f"[green]✅ Sorted {escape(str(path))}[/green]", soft_wrap=True)
