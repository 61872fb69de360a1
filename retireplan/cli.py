"""
Command-Line Interface for retireplan.

Purpose
-------
Runs retirement calculations from profile files, manages profile files,
and serves the HTTP API, without writing Python code.

Commands
--------
- calculate: Run the full calculation for a profile file
- profile: Validate, display and create profile files
- serve: Start the HTTP API
- info: Show version and dependency information

Example Usage
-------------
    # Run a calculation
    $ retireplan calculate --profile profile.json --seed 42 --output result.json

    # Validate a profile
    $ retireplan profile validate profile.json

    # Start the API
    $ retireplan serve --port 5000

    # Show version
    $ retireplan --version
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__


def _get_console():
    """Rich console for formatted output."""
    from rich.console import Console
    return Console()


SAMPLE_PROFILE = {
    "currentAge": 30,
    "retirementAge": 65,
    "lifeExpectancy": 90,
    "currentSavings": 50000,
    "monthlyContribution": 1000,
    "contributionIncreaseRate": 0.02,
    "expectedAnnualReturn": 0.07,
    "riskTolerance": 2,
    "volatility": 0.15,
    "riskFreeRate": 0.03,
    "downSideDeviation": 0.10,
    "inflationRate": 0.025,
    "healthcareCosts": 5000,
    "healthcareInflation": 0.05,
    "withdrawalRate": 0.04,
    "taxRate": 0.22,
    "compoundingFrequency": 12,
    "socialSecurityIncome": 24000,
    "pensionIncome": 0,
    "currentAnnualIncome": 85000,
    "incomeReplacementGoal": 0.8,
    "emergencyFund": 15000,
    "otherRetirementAccounts": 0,
    "partTimeIncomeYears": 0,
    "partTimeIncome": 0,
}


@click.group()
@click.version_option(version=__version__, prog_name="retireplan")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def main(ctx: click.Context, quiet: bool) -> None:
    """
    retireplan - Retirement projection and risk analytics.

    Projects savings to retirement, simulates outcome distributions,
    and reports risk metrics and guidance for a financial profile.

    Use 'retireplan COMMAND --help' for command-specific help.
    """
    from .config import AppSettings
    from .logging_setup import configure_logging

    settings = AppSettings()
    # stdout carries the report
    configure_logging(settings.log_level, stream=sys.stderr)

    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["console"] = _get_console()
    ctx.obj["settings"] = settings


@main.command()
@click.option(
    "--profile", "-p",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to financial profile file (JSON)"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the full response payload to this file (JSON)"
)
@click.option(
    "--simulations", "-n",
    type=int,
    default=None,
    help="Number of Monte Carlo trials (default: 1000)"
)
@click.option(
    "--seed", "-s",
    type=int,
    default=None,
    help="Random seed for reproducibility (default: RETIREPLAN_SEED or 42)"
)
@click.pass_context
def calculate(
    ctx: click.Context,
    profile: Path,
    output: Optional[Path],
    simulations: Optional[int],
    seed: Optional[int],
) -> None:
    """
    Run the retirement calculation.

    Example:
        retireplan calculate -p profile.json -n 5000 --seed 42
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    # Import here to avoid slow startup
    import pydantic
    from .config import SimulationConfig
    from .constants import DEFAULT_SEED
    from .engine import calculate_retirement
    from .exceptions import RetirePlanError, ValidationError
    from .serialization import build_response, load_profile, save_response
    from .utils import format_currency, format_percent

    try:
        loaded = load_profile(profile)
    except ValidationError as e:
        click.echo(f"Invalid profile: {e.message}", err=True)
        for detail in e.details if isinstance(e.details, list) else [e.details]:
            click.echo(f"  {detail}", err=True)
        sys.exit(1)

    settings = ctx.obj["settings"]
    try:
        config = SimulationConfig(
            n_sims=simulations if simulations is not None else settings.n_sims,
            seed=next(s for s in (seed, settings.seed, DEFAULT_SEED) if s is not None),
        )
    except pydantic.ValidationError as e:
        click.echo(f"Invalid simulation settings: {e.errors()[0]['msg']}", err=True)
        sys.exit(1)

    if not quiet:
        console.print(f"[bold]Running {config.n_sims:,} simulations...[/bold]")

    try:
        analysis = calculate_retirement(loaded, config)
    except RetirePlanError as e:
        click.echo(f"Error during calculation: {e.message} ({e.details})", err=True)
        sys.exit(1)

    mc = analysis.monte_carlo
    if not quiet:
        from rich.table import Table

        table = Table(title="Retirement Projection", show_header=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green", justify="right")

        table.add_row("Years to Retirement", f"{loaded.years_to_retirement}")
        table.add_row("Adjusted Return", format_percent(analysis.adjusted_return))
        table.add_row("Total at Retirement", format_currency(analysis.total_at_retirement))
        table.add_row("Monthly Income", format_currency(analysis.income.monthly_income))
        table.add_row("Income Replacement", format_percent(analysis.income.income_replacement_ratio / 100))
        table.add_row("Portfolio Longevity", f"{analysis.portfolio_longevity} years")
        table.add_row("", "")
        table.add_row("Success Rate", format_percent(mc.success_rate / 100))
        table.add_row("Median Outcome", format_currency(mc.median))
        table.add_row("5th Percentile", format_currency(mc.percentiles[0].value))
        table.add_row("95th Percentile", format_currency(mc.percentiles[-1].value))
        console.print(table)

        metrics = Table(title="Risk Metrics", show_header=True)
        metrics.add_column("Metric", style="cyan")
        metrics.add_column("Value", justify="right")
        metrics.add_column("Interpretation")
        for row in analysis.advanced_metrics:
            metrics.add_row(row.name, row.value, row.interpretation)
        console.print(metrics)

        for insight in analysis.insights:
            style = {"success": "green", "info": "blue", "warning": "yellow"}[insight.severity]
            console.print(f"[{style}]- {insight.message}[/{style}]")
    else:
        click.echo(f"Total at Retirement: {format_currency(analysis.total_at_retirement)}")
        click.echo(f"Success Rate: {format_percent(mc.success_rate / 100)}")

    if output:
        save_response(build_response(analysis), output)
        if not quiet:
            click.echo(f"Results saved to {output}")


@main.group("profile")
def profile_group() -> None:
    """
    Profile file commands.

    Validate, display, and create financial profile files.
    """
    pass


@profile_group.command("validate")
@click.argument("profile_file", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def profile_validate(ctx: click.Context, profile_file: Path) -> None:
    """
    Validate a profile file.

    Example:
        retireplan profile validate profile.json
    """
    console = ctx.obj.get("console")
    quiet = ctx.obj.get("quiet", False)

    from .exceptions import ValidationError
    from .serialization import load_profile

    try:
        loaded = load_profile(profile_file)
    except ValidationError as e:
        click.echo(f"Profile validation failed: {e.message}", err=True)
        for detail in e.details if isinstance(e.details, list) else [e.details]:
            click.echo(f"  {detail}", err=True)
        sys.exit(1)

    if quiet:
        click.echo("Profile is valid")
        return

    from rich.panel import Panel

    info = (
        "[bold]Profile Valid[/bold]\n\n"
        f"[cyan]Ages:[/cyan] {loaded.current_age} -> {loaded.retirement_age} "
        f"(life expectancy {loaded.life_expectancy})\n"
        f"[cyan]Savings:[/cyan] ${loaded.current_savings:,.0f} + "
        f"${loaded.monthly_contribution:,.0f}/month\n"
        f"[cyan]Return:[/cyan] {loaded.expected_annual_return * 100:.1f}% "
        f"+/- {loaded.volatility * 100:.1f}% (risk tier {loaded.risk_tolerance})\n"
    )
    console.print(Panel(info, title="Profile Summary", border_style="green"))


@profile_group.command("show")
@click.argument("profile_file", type=click.Path(exists=True, path_type=Path))
@click.option("--format", "-f", type=click.Choice(["json", "table"]), default="table")
@click.pass_context
def profile_show(ctx: click.Context, profile_file: Path, format: str) -> None:
    """
    Display a profile file.

    Example:
        retireplan profile show profile.json --format table
    """
    console = ctx.obj.get("console")

    try:
        with open(profile_file, "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        click.echo(f"Cannot read profile: {profile_file} is not valid JSON ({e.msg})", err=True)
        sys.exit(1)

    if format == "json":
        click.echo(json.dumps(data, indent=2))
        return

    from rich.table import Table

    table = Table(title="Financial Profile")
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in data.items():
        table.add_row(key, f"{value:,}" if isinstance(value, (int, float)) else str(value))
    console.print(table)


@profile_group.command("create")
@click.argument("output_file", type=click.Path(path_type=Path))
@click.pass_context
def profile_create(ctx: click.Context, output_file: Path) -> None:
    """
    Create a sample profile file to start from.

    Example:
        retireplan profile create my_profile.json
    """
    quiet = ctx.obj.get("quiet", False)

    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, "w") as f:
        json.dump(SAMPLE_PROFILE, f, indent=2)

    if not quiet:
        click.echo(f"Created profile file: {output_file}")


@main.command()
@click.option("--host", type=str, default=None, help="Bind host (default: settings)")
@click.option("--port", type=int, default=None, help="Bind port (default: settings)")
def serve(host: Optional[str], port: Optional[int]) -> None:
    """
    Start the HTTP API (development server).

    Example:
        retireplan serve --port 8000
    """
    from .api import create_app
    from .config import AppSettings

    settings = AppSettings()
    app = create_app(settings)
    app.run(host=host or settings.host, port=port or settings.port, debug=settings.debug)


@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """
    Display package and dependency information.
    """
    console = ctx.obj.get("console")

    info_lines = [
        f"retireplan Version: {__version__}",
        f"Python: {sys.version.split()[0]}",
    ]

    dependencies = {
        "numpy": "numpy",
        "pandas": "pandas",
        "pydantic": "pydantic",
        "flask": "flask",
        "structlog": "structlog",
        "rich": "rich",
        "click": "click",
    }

    for name, module in dependencies.items():
        try:
            mod = __import__(module)
            version = getattr(mod, "__version__", "installed")
            info_lines.append(f"{name}: {version}")
        except ImportError:
            info_lines.append(f"{name}: not installed")

    from rich.panel import Panel
    console.print(Panel("\n".join(info_lines), title="System Information"))


if __name__ == "__main__":
    main()
