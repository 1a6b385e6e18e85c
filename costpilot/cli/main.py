"""
CLI interface for CostPilot.

Provides command-line access to the deterministic budget calculator.
"""

import json
import logging
import sys
from decimal import Decimal
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from costpilot.config.loader import load_project_file, load_rate_table
from costpilot.core.aggregator import DeterministicResult
from costpilot.core.calculator import DeterministicCalculator
from costpilot.core.comparison import compare_results
from costpilot.core.parameters import ValidationError, validate_parameters
from costpilot.core.rates import DEFAULT_RATE_TABLE, RateTable

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

RATES_OPTION_HELP = "YAML rate table to use instead of the built-in defaults"


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """CostPilot deterministic budget CLI."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )
    if ctx.invoked_subcommand is None:
        console.print("CostPilot - Use --help to see available commands")


def _load_rates(path: Optional[str]) -> RateTable:
    if path is None:
        return DEFAULT_RATE_TABLE
    return load_rate_table(path)


def _print_validation_errors(error: ValidationError) -> None:
    console.print(f"[red]Invalid project parameters ({len(error.errors)} problem(s)):[/]")
    for field_error in error.errors:
        console.print(f"  [red]-[/] {escape(str(field_error))}")


@app.command()
def estimate(
    params_file: str = typer.Argument(..., help="YAML or JSON file with project parameters"),
    rates: Optional[str] = typer.Option(None, "--rates", "-r", help=RATES_OPTION_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    exact: bool = typer.Option(False, "--exact", help="With --json, print amounts as exact decimal strings"),
):
    """Calculate an itemized budget for a project."""
    try:
        calculator = DeterministicCalculator(_load_rates(rates))
        result = calculator.calculate(load_project_file(params_file))

        if as_json:
            typer.echo(json.dumps(result.as_dict(exact=exact), indent=2))
        else:
            _display_result(result)
        sys.exit(EXIT_CODE_PASS)

    except ValidationError as e:
        _print_validation_errors(e)
        sys.exit(EXIT_CODE_FAIL)
    except Exception as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)


@app.command()
def validate(
    params_file: str = typer.Argument(..., help="YAML or JSON file with project parameters"),
):
    """Check project parameters without calculating."""
    try:
        validate_parameters(load_project_file(params_file))
        console.print("[green]✓[/] Project parameters are valid")
        sys.exit(EXIT_CODE_PASS)
    except ValidationError as e:
        _print_validation_errors(e)
        sys.exit(EXIT_CODE_FAIL)
    except Exception as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)


@app.command(name="rates")
def show_rates(
    rates: Optional[str] = typer.Option(None, "--rates", "-r", help=RATES_OPTION_HELP),
):
    """Show the active rate table."""
    try:
        table = _load_rates(rates)
    except Exception as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)

    console.print(f"\n[bold]Rate table:[/bold] {escape(table.name)}")
    view = Table(show_header=True)
    view.add_column("Rate")
    view.add_column("Key")
    view.add_column("Value", justify="right", no_wrap=True)

    for key, months in table.duration_months.items():
        view.add_row("duration_months", key.value, str(months))
    for key, rate in table.token_rate.items():
        view.add_row("token_rate", key.value, str(rate))
    view.add_row("storage_rate_per_gb_month", "-", str(table.storage_rate_per_gb_month))
    for key, rate in table.per_label_rate.items():
        view.add_row("per_label_rate", key.value, str(rate))
    for key, fraction in table.overhead_fraction.items():
        view.add_row("overhead_fraction", key.value, str(fraction))

    console.print(view)
    sys.exit(EXIT_CODE_PASS)


@app.command()
def compare(
    baseline_file: str = typer.Argument(..., help="Project parameters for the baseline"),
    scenario_file: str = typer.Argument(..., help="Project parameters for the what-if scenario"),
    rates: Optional[str] = typer.Option(None, "--rates", "-r", help=RATES_OPTION_HELP),
):
    """Compare the budgets of two parameter sets category by category."""
    try:
        calculator = DeterministicCalculator(_load_rates(rates))
        baseline = calculator.calculate(load_project_file(baseline_file))
        scenario = calculator.calculate(load_project_file(scenario_file))
    except ValidationError as e:
        _print_validation_errors(e)
        sys.exit(EXIT_CODE_FAIL)
    except Exception as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(EXIT_CODE_FAIL)

    comparison = compare_results(baseline, scenario)

    console.print("\n[bold]Budget Comparison[/bold]")
    console.print("-" * 40)
    for delta in comparison.categories:
        console.print(
            f"{delta.category.value}: {_format_currency(delta.baseline)} -> "
            f"{_format_currency(delta.scenario)} "
            f"({_format_percent_change(delta.percent_change)})"
        )
    console.print(
        f"\n[bold]Total:[/bold] {_format_currency(comparison.baseline_total)} -> "
        f"{_format_currency(comparison.scenario_total)} "
        f"({_format_percent_change(comparison.total_percent_change)})"
    )
    sys.exit(EXIT_CODE_PASS)


def _format_currency(amount: Decimal) -> str:
    """Format currency with proper symbols and formatting."""
    return f"${abs(amount):,.2f}"


def _format_percent_change(percent: Optional[Decimal]) -> str:
    """Format percentage change with sign."""
    if percent is None:
        return "N/A"
    return f"{'+' if percent >= 0 else ''}{percent:,.1f}%"


def _display_result(result: DeterministicResult) -> None:
    """Display a budget in a clean, financial format."""
    console.print("\n[bold]Deterministic Budget[/bold]")
    console.print("-" * 40)

    if not result.line_items:
        console.print("\n[dim]No billable costs for these parameters.[/]")
    else:
        table = Table(show_header=True)
        table.add_column("Category", no_wrap=True)
        table.add_column("Description")
        table.add_column("Quantity", justify="right", no_wrap=True)
        table.add_column("Unit cost", justify="right", no_wrap=True)
        table.add_column("Total", justify="right", no_wrap=True)
        for item in result.line_items:
            table.add_row(
                item.category.value,
                escape(item.description),
                f"{item.quantity:,} {item.unit_type}",
                str(item.unit_cost),
                _format_currency(item.total_cost),
            )
        console.print(table)

    console.print(f"\n[bold]Total:[/bold] {_format_currency(result.total_cost)}")
    console.print(f"[dim]Input hash: {result.metadata.get('input_hash', '')}[/]")


if __name__ == "__main__":
    app()
