"""CLI commands for the Substantial Presence Test calculator."""

import logging
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from spt_calc import __version__
from spt_calc.calculator import (
    calculate_from_day_counts,
    calculate_from_periods,
    import_travel_history,
)
from spt_calc.config import get_config
from spt_calc.models.results import CalculationEmpty, ImportFailure, SPTResult
from spt_calc.models.travel import TravelPeriod
from spt_calc.validation import (
    DayCountValidationError,
    PeriodValidationError,
    add_period,
    parse_date,
    validate_day_counts,
    validate_new_period,
)

OPEN_END_MARKERS = ("", "-", "open")

app = typer.Typer(
    name="spt-calc",
    help="Determine U.S. tax residency under the Substantial Presence Test.",
    invoke_without_command=True,
)
config_app = typer.Typer(help="Manage configuration")
app.add_typer(config_app, name="config")
console = Console()


TaxYearOption = Annotated[
    Optional[int], typer.Option("--tax-year", "-y", help="Tax year (default: from config)")
]
ExportOption = Annotated[
    Optional[Path], typer.Option("--export", "-e", help="Write the report to this file")
]
FormatOption = Annotated[
    Optional[str], typer.Option("--format", "-f", help="Export format: md or pdf")
]


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[bool, typer.Option("--version", "-v", help="Show version")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Show debug logging")] = False,
) -> None:
    """
    SPT Calculator - count days of U.S. presence and apply the
    Substantial Presence Test.
    """
    if version:
        rprint(f"spt-calc version {__version__}")
        raise typer.Exit()

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _resolve_tax_year(tax_year: int | None) -> int:
    return tax_year if tax_year is not None else get_config().tax_year


def _parse_period_spec(spec: str) -> tuple[str, str]:
    """Split an ARRIVAL:DEPARTURE spec into its two sides."""
    if ":" not in spec:
        raise PeriodValidationError(
            f"Invalid period '{spec}'. Use ARRIVAL:DEPARTURE, leaving a side empty for an open end."
        )
    arrival, _, departure = spec.partition(":")
    return arrival.strip(), departure.strip()


def build_periods(specs: list[str]) -> list[TravelPeriod]:
    """
    Validate period specs one by one, as if entered in that order.

    Args:
        specs: ARRIVAL:DEPARTURE strings; an empty side or '-' is an open end

    Returns:
        Accepted periods, newest first

    Raises:
        PeriodValidationError: On the first rejected period
    """
    periods: list[TravelPeriod] = []
    for spec in specs:
        raw_arrival, raw_departure = _parse_period_spec(spec)
        no_arrival = raw_arrival.lower() in OPEN_END_MARKERS
        no_departure = raw_departure.lower() in OPEN_END_MARKERS

        period = validate_new_period(
            arrival=None if no_arrival else parse_date(raw_arrival),
            departure=None if no_departure else parse_date(raw_departure),
            existing=periods,
            no_arrival=no_arrival,
            no_departure=no_departure,
        )
        periods = add_period(periods, period)
    return periods


def show_result(result: SPTResult) -> None:
    """Render a test result to the console."""
    from spt_calc.reports import (
        DISCLAIMER,
        breakdown_rows,
        period_rows,
        requirement_rows,
        verdict_detail,
        verdict_headline,
    )

    color = "green" if result.passes_test else "red"
    rprint(Panel.fit(
        f"[bold {color}]{verdict_headline(result)}[/bold {color}]\n\n{verdict_detail(result)}",
        title="Result",
    ))

    table = Table(title="Calculation Breakdown")
    table.add_column("Year", style="cyan")
    table.add_column("Days", style="green", justify="right")
    for label, value in breakdown_rows(result):
        table.add_row(label, value)
    console.print(table)

    rprint("\n[bold]Requirements to meet the test:[/bold]")
    for label, passed in requirement_rows(result):
        mark = "[green]✓[/green]" if passed else "[red]✗[/red]"
        rprint(f"  {label}: {mark}")

    if result.from_date_ranges:
        periods_table = Table(title="Travel Periods Used")
        periods_table.add_column("Arrival", style="cyan")
        periods_table.add_column("Departure", style="cyan")
        periods_table.add_column("Days", justify="right")
        for row in period_rows(result):
            periods_table.add_row(*row)
        console.print(periods_table)

    rprint(f"\n[dim]{DISCLAIMER}[/dim]")


def _maybe_export(result: SPTResult, export: Path | None, fmt: str | None) -> None:
    if export is None:
        return

    from spt_calc.exporters import export_to_file
    from spt_calc.reports import generate_spt_report

    fmt = (fmt or get_config().export_format).lower()
    if fmt not in ("md", "pdf"):
        rprint(f"[red]Unknown export format: {fmt}[/red]")
        raise typer.Exit(1)

    try:
        path = export_to_file(generate_spt_report(result), export, fmt)
    except OSError as e:
        rprint(f"[red]Export failed: {e}[/red]")
        raise typer.Exit(1)
    rprint(f"[green]Exported to: {path}[/green]")


@app.command()
def manual(
    current: Annotated[int, typer.Option("--current", "-c", help="Days present in the tax year")],
    first_prior: Annotated[int, typer.Option("--first-prior", help="Days present in the year before")] = 0,
    second_prior: Annotated[int, typer.Option("--second-prior", help="Days present two years before")] = 0,
    tax_year: TaxYearOption = None,
    export: ExportOption = None,
    format: FormatOption = None,
) -> None:
    """Evaluate the test from day counts you already know."""
    year = _resolve_tax_year(tax_year)

    try:
        counts = validate_day_counts(year, current, first_prior, second_prior)
    except DayCountValidationError as e:
        for field, message in e.errors.items():
            rprint(f"[red]{field.replace('_', ' ')}: {message}[/red]")
        raise typer.Exit(1)

    outcome = calculate_from_day_counts(year, counts)
    show_result(outcome.result)
    _maybe_export(outcome.result, export, format)


@app.command()
def ranges(
    period: Annotated[
        list[str],
        typer.Option(
            "--period", "-p",
            help="ARRIVAL:DEPARTURE (YYYY-MM-DD). Leave a side empty or use '-' for an open end.",
        ),
    ],
    tax_year: TaxYearOption = None,
    export: ExportOption = None,
    format: FormatOption = None,
) -> None:
    """Evaluate the test from arrival/departure date ranges."""
    year = _resolve_tax_year(tax_year)

    try:
        periods = build_periods(period)
    except PeriodValidationError as e:
        rprint(f"[red]{e}[/red]")
        raise typer.Exit(1)

    _calculate_and_show(year, periods, export, format)


@app.command(name="import")
def import_history(
    source: Annotated[str, typer.Argument(help="I-94 travel history file, or '-' for stdin")],
    yes: Annotated[bool, typer.Option("--yes", help="Accept periods even if warnings were found")] = False,
    tax_year: TaxYearOption = None,
    export: ExportOption = None,
    format: FormatOption = None,
) -> None:
    """Import an I-94 travel history export and evaluate the test."""
    year = _resolve_tax_year(tax_year)

    from_stdin = source == "-"
    if from_stdin:
        raw_text = sys.stdin.read()
    else:
        path = Path(source).expanduser()
        if not path.exists():
            rprint(f"[red]File not found: {path}[/red]")
            raise typer.Exit(1)
        try:
            raw_text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            rprint(f"[red]Not a UTF-8 text file: {path}[/red]")
            raise typer.Exit(1)
        except OSError as e:
            rprint(f"[red]Could not read {path}: {e}[/red]")
            raise typer.Exit(1)

    outcome = import_travel_history(raw_text)
    if isinstance(outcome, ImportFailure):
        rprint(f"[red]{outcome.message}[/red]")
        raise typer.Exit(1)

    rprint(f"[cyan]Imported {len(outcome.periods)} travel period(s).[/cyan]")

    if outcome.requires_confirmation:
        rprint("\n[yellow]Potential issues found in your travel data:[/yellow]")
        for warning in outcome.warnings:
            rprint(f"  [yellow]- {warning}[/yellow]")

        # stdin is already consumed by the data, so there is no one to ask
        if from_stdin and not yes:
            rprint("[red]Re-run with --yes to accept these periods when reading from stdin.[/red]")
            raise typer.Exit(1)

        if not yes and not Confirm.ask("\nUse these periods anyway?", default=False):
            rprint("[dim]Import cancelled.[/dim]")
            raise typer.Exit()

    _calculate_and_show(year, outcome.periods, export, format)


def _calculate_and_show(
    tax_year: int,
    periods: list[TravelPeriod],
    export: Path | None,
    fmt: str | None,
) -> None:
    outcome = calculate_from_periods(tax_year, periods, today=get_config().today())
    if isinstance(outcome, CalculationEmpty):
        rprint(f"[red]{outcome.message}[/red]")
        raise typer.Exit(1)

    show_result(outcome.result)
    _maybe_export(outcome.result, export, fmt)


@config_app.command("show")
def config_show() -> None:
    """Show current configuration."""
    config = get_config()

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Config File", str(config.config_file))
    table.add_row("Tax Year", str(config.tax_year))
    reference = config.reference_date
    table.add_row(
        "Reference Date",
        reference.isoformat() if reference else "[dim]today[/dim]",
    )
    table.add_row("Export Format", config.export_format)

    console.print(table)


@config_app.command("set")
def config_set(
    key: Annotated[str, typer.Argument(help="tax_year, reference_date, or export_format")],
    value: Annotated[str, typer.Argument(help="New value ('today' clears reference_date)")],
) -> None:
    """Set a configuration value."""
    config = get_config()
    try:
        config.update(key, value)
    except ValueError as e:
        rprint(f"[red]{e}[/red]")
        raise typer.Exit(1)
    rprint(f"[green]Set {key} = {config.get(key)}[/green]")


if __name__ == "__main__":
    app()
