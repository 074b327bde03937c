"""
Command-Line Interface for firecalc.

Purpose
-------
Runs the projection engine from the terminal: deterministic projection,
scenario comparison, achievements, Monte Carlo bands, charts, and profile
file management.

Commands
--------
- project: Year-by-year trajectory and years to FIRE
- scenarios: Conservative / moderate / aggressive comparison
- achievements: Milestone badges
- montecarlo: Percentile bands from randomized paths
- plot: Save a chart (projection, montecarlo, scenarios)
- config: Create, validate and display profile files
- info: Version and dependency information

Example Usage
-------------
    # Project the default profile
    $ firecalc project

    # Project a saved profile with a higher savings rate
    $ firecalc project --config profile.json --monthly-savings 3000

    # Reproducible Monte Carlo bands written to JSON
    $ firecalc montecarlo -c profile.json -n 2000 --seed 42 -o bands.json

    # Create a starter profile
    $ firecalc config create profile.json
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import click

# Version
__version__ = "0.1.0"


def _get_console():
    """Lazy import Rich for better startup time."""
    from rich.console import Console
    return Console()


_OVERRIDES = [
    ("age", "current_age", int, "Current age"),
    ("income", "current_income", float, "Annual income"),
    ("savings", "current_savings", float, "Current savings"),
    ("expenses", "monthly_expenses", float, "Monthly expenses"),
    ("monthly_savings", "monthly_savings", float, "Monthly savings"),
    ("return_pct", "investment_return", float, "Annual return in percent"),
    ("inflation", "inflation_rate", float, "Inflation in percent"),
    ("retire_age", "target_retirement_age", int, "Target retirement age"),
    ("swr", "safe_withdrawal_rate", float, "Safe withdrawal rate in percent"),
]

_OPTION_NAMES = {
    "age": "--age",
    "income": "--income",
    "savings": "--savings",
    "expenses": "--expenses",
    "monthly_savings": "--monthly-savings",
    "return_pct": "--return",
    "inflation": "--inflation",
    "retire_age": "--retire-age",
    "swr": "--swr",
}


def profile_options(func):
    """Add --config plus one override option per profile field."""
    for param, _field, type_, help_text in reversed(_OVERRIDES):
        func = click.option(
            _OPTION_NAMES[param], param, type=type_, default=None, help=help_text
        )(func)
    func = click.option(
        "--config", "-c",
        type=click.Path(exists=True, path_type=Path),
        default=None,
        help="Path to profile file (JSON). Defaults are used when omitted."
    )(func)
    return func


def _build_profile(ctx: click.Context, config: Optional[Path], overrides: dict):
    """Load (or default) a profile and apply command-line overrides."""
    from .config import FireProfile
    from .exceptions import FireCalcError
    from .serialization import load_profile

    try:
        profile = load_profile(config) if config else FireProfile()
        changes = {
            field: overrides[param]
            for param, field, _type, _help in _OVERRIDES
            if overrides.get(param) is not None
        }
        if changes:
            profile = profile.with_changes(**changes)
    except FireCalcError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    outside = profile.out_of_ui_range()
    if outside and not ctx.obj.get("quiet", False):
        click.echo(
            f"Warning: outside the usual input ranges: {', '.join(outside)}",
            err=True,
        )
    return profile


def _run(ctx: click.Context, profile, **kwargs):
    """Run the engine and exit with an error message if it failed."""
    report = ctx.obj["engine"].run(profile, **kwargs)
    if not report.ok:
        click.echo(f"Error: {report.error}", err=True)
        sys.exit(1)
    return report


@click.group()
@click.version_option(version=__version__, prog_name="firecalc")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def main(ctx: click.Context, quiet: bool) -> None:
    """
    firecalc - Financial Independence (FIRE) projection engine.

    Projects wealth year by year, finds when the FIRE number is reached,
    compares savings scenarios and simulates uncertainty.

    Use 'firecalc COMMAND --help' for command-specific help.
    """
    from .config import AppSettings
    from .engine import FireEngine
    from .utils import configure_logging

    settings = AppSettings()
    configure_logging(settings)

    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["settings"] = settings
    ctx.obj["engine"] = ctx.with_resource(FireEngine(settings))


@main.command()
@profile_options
@click.option("--horizon", "-H", type=int, default=40, help="Projected years (default: 40)")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of tables")
@click.option("--rounded", is_flag=True, help="Round currency values to whole units")
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Export the full report as JSON to this file"
)
@click.pass_context
def project(
    ctx: click.Context,
    config: Optional[Path],
    horizon: int,
    as_json: bool,
    rounded: bool,
    output: Optional[Path],
    **overrides,
) -> None:
    """
    Project the wealth trajectory and years to FIRE.

    Example:
        firecalc project --age 35 --monthly-savings 3000
    """
    from .engine import FireEngine
    from .serialization import save_report, summary_to_dict
    from .utils import format_currency, format_percentage

    quiet = ctx.obj.get("quiet", False)
    profile = _build_profile(ctx, config, overrides)

    if horizon != 40:
        engine = ctx.with_resource(FireEngine(ctx.obj["settings"], horizon=horizon))
        ctx.obj["engine"] = engine
    report = _run(ctx, profile)
    summary = report.summary

    if as_json:
        click.echo(json.dumps(summary_to_dict(summary, rounded), indent=2, allow_nan=False))
    else:
        from rich.table import Table

        console = _get_console()
        table = Table(title="FIRE Summary", show_header=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="green", justify="right")

        table.add_row("FIRE Number", format_currency(summary.fire_number))
        table.add_row("Amount Needed", format_currency(summary.amount_needed))
        table.add_row("Savings Rate", format_percentage(summary.savings_rate))
        table.add_row("Years to FIRE", summary.fire_status.describe()
                      if summary.reached_within_horizon
                      else f"{summary.years_to_fire}+ ({summary.fire_status.describe()})")
        table.add_row("Retirement Age",
                      str(summary.retirement_age) if summary.retirement_age is not None else "n/a")
        table.add_row("Monthly Income at FIRE",
                      format_currency(summary.monthly_income_at_retirement))
        console.print(table)

        if not quiet:
            years = Table(title="Projection", show_header=True)
            years.add_column("Year", justify="right")
            years.add_column("Age", justify="right")
            years.add_column("Balance", justify="right", style="green")
            years.add_column("FIRE Number", justify="right")
            years.add_column("Progress", justify="right")
            years.add_column("Monthly Income", justify="right")
            for p in summary.chart_window():
                years.add_row(
                    str(p.year),
                    str(p.age),
                    format_currency(p.balance),
                    format_currency(p.fire_number),
                    f"{p.fire_progress:.0f}%" + (" ✓" if p.can_retire else ""),
                    format_currency(p.monthly_income),
                )
            console.print(years)

    if output:
        save_report(report, output, rounded=rounded)
        if not quiet:
            click.echo(f"Report saved to {output}", err=as_json)


@main.command()
@profile_options
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
@click.pass_context
def scenarios(ctx: click.Context, config: Optional[Path], as_json: bool, **overrides) -> None:
    """
    Compare years to FIRE across savings/return scenarios.

    Example:
        firecalc scenarios -c profile.json
    """
    from .serialization import scenario_to_dict
    from .utils import format_currency

    profile = _build_profile(ctx, config, overrides)
    report = _run(ctx, profile)

    if as_json:
        click.echo(json.dumps([scenario_to_dict(s) for s in report.scenarios], indent=2))
        return

    from rich.table import Table

    table = Table(title="Scenario Analysis", show_header=True)
    table.add_column("Scenario", style="cyan")
    table.add_column("Return", justify="right")
    table.add_column("Savings / Year", justify="right")
    table.add_column("Years to FIRE", justify="right", style="green")
    for s in report.scenarios:
        years = "∞" if s.solved_years is None else str(s.solved_years)
        table.add_row(
            s.name,
            f"{s.annual_return_percent:g}%",
            format_currency(s.annual_savings),
            years,
        )
    _get_console().print(table)


@main.command()
@profile_options
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a list")
@click.pass_context
def achievements(ctx: click.Context, config: Optional[Path], as_json: bool, **overrides) -> None:
    """
    Show which milestone achievements are unlocked.

    Example:
        firecalc achievements --savings 150000
    """
    from .serialization import achievement_to_dict

    profile = _build_profile(ctx, config, overrides)
    report = _run(ctx, profile)

    if as_json:
        click.echo(json.dumps(
            [achievement_to_dict(a) for a in report.achievements],
            indent=2,
            ensure_ascii=False,
        ))
        return

    for a in report.achievements:
        mark = "[x]" if a.achieved else "[ ]"
        click.echo(f"{mark} {a.icon} {a.name} - {a.description}")


@main.command()
@profile_options
@click.option(
    "--trials", "-n",
    type=int,
    default=None,
    help="Simulated paths per year (default: 1000)"
)
@click.option("--years", "-y", type=int, default=None, help="Last simulated year")
@click.option("--seed", "-s", type=int, default=None, help="Random seed for reproducibility")
@click.option(
    "--method",
    type=click.Choice(["independent", "cumulative"]),
    default="independent",
    help="Path sampling strategy (default: independent)"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Export the percentile bands as JSON to this file"
)
@click.pass_context
def montecarlo(
    ctx: click.Context,
    config: Optional[Path],
    trials: Optional[int],
    years: Optional[int],
    seed: Optional[int],
    method: str,
    output: Optional[Path],
    **overrides,
) -> None:
    """
    Run the Monte Carlo simulation and show percentile bands.

    Example:
        firecalc montecarlo -n 2000 --seed 42
    """
    import pydantic

    from .config import MonteCarloConfig
    from .serialization import monte_carlo_to_dict
    from .utils import format_currency

    quiet = ctx.obj.get("quiet", False)
    profile = _build_profile(ctx, config, overrides)

    try:
        mc_config = MonteCarloConfig(
            trials=trials if trials is not None else ctx.obj["settings"].default_trials,
            seed=seed,
            years_to_show=years,
            method=method,
        )
    except pydantic.ValidationError as e:
        click.echo(f"Error: invalid Monte Carlo settings: {e}", err=True)
        sys.exit(1)

    report = _run(ctx, profile, monte_carlo=True, mc_config=mc_config)

    from rich.table import Table

    table = Table(title=f"Monte Carlo ({mc_config.trials:,} trials)", show_header=True)
    table.add_column("Age", justify="right", style="cyan")
    for label in ("10th", "25th", "Median", "75th", "90th", "Expected"):
        table.add_column(label, justify="right")
    for p in report.monte_carlo:
        table.add_row(
            str(p.age),
            *(format_currency(v) for v in (p.p10, p.p25, p.p50, p.p75, p.p90, p.expected)),
        )
    _get_console().print(table)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8") as f:
            json.dump(monte_carlo_to_dict(report.monte_carlo), f, indent=2, allow_nan=False)
        if not quiet:
            click.echo(f"Results saved to {output}")


@main.command()
@profile_options
@click.option(
    "--kind", "-k",
    type=click.Choice(["projection", "montecarlo", "scenarios"]),
    default="projection",
    help="Chart to draw (default: projection)"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    required=True,
    help="Image file to write (e.g. chart.png)"
)
@click.option("--trials", "-n", type=int, default=1000, help="Monte Carlo trials")
@click.option("--seed", "-s", type=int, default=None, help="Monte Carlo random seed")
@click.pass_context
def plot(
    ctx: click.Context,
    config: Optional[Path],
    kind: str,
    output: Path,
    trials: int,
    seed: Optional[int],
    **overrides,
) -> None:
    """
    Save a chart of the projection, Monte Carlo bands or scenarios.

    Example:
        firecalc plot --kind montecarlo -o bands.png --seed 1
    """
    import matplotlib
    matplotlib.use("Agg")

    from .config import MonteCarloConfig
    from .plotting import plot as draw

    profile = _build_profile(ctx, config, overrides)
    if kind == "montecarlo":
        if trials < 1:
            click.echo("Error: --trials must be >= 1", err=True)
            sys.exit(1)
        report = _run(ctx, profile, monte_carlo=True,
                      mc_config=MonteCarloConfig(trials=trials, seed=seed))
        data = report.monte_carlo
    else:
        report = _run(ctx, profile)
        data = report.summary if kind == "projection" else report.scenarios

    output.parent.mkdir(parents=True, exist_ok=True)
    draw(kind, data, save_path=str(output))
    if not ctx.obj.get("quiet", False):
        click.echo(f"Chart saved to {output}")


@main.group()
def config() -> None:
    """
    Profile file management commands.

    Create, validate, and display profile files.
    """
    pass


@config.command("create")
@click.argument("output_file", type=click.Path(path_type=Path))
@click.pass_context
def config_create(ctx: click.Context, output_file: Path) -> None:
    """
    Create a profile file with the default values.

    Example:
        firecalc config create profile.json
    """
    from .config import FireProfile
    from .serialization import save_profile

    save_profile(FireProfile(), output_file)
    if not ctx.obj.get("quiet", False):
        click.echo(f"Created profile file: {output_file}")


@config.command("validate")
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def config_validate(ctx: click.Context, config_file: Path) -> None:
    """
    Validate a profile file.

    Example:
        firecalc config validate profile.json
    """
    from .exceptions import FireCalcError
    from .serialization import load_profile

    try:
        profile = load_profile(config_file)
    except FireCalcError as e:
        click.echo(f"Profile validation failed: {e}", err=True)
        sys.exit(1)

    click.echo("Profile is valid")
    outside = profile.out_of_ui_range()
    if outside and not ctx.obj.get("quiet", False):
        click.echo(f"Note: outside the usual input ranges: {', '.join(outside)}")


@config.command("show")
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
@click.option("--format", "-f", "fmt", type=click.Choice(["json", "table"]), default="table")
@click.pass_context
def config_show(ctx: click.Context, config_file: Path, fmt: str) -> None:
    """
    Display a profile file.

    Example:
        firecalc config show profile.json --format json
    """
    from .exceptions import FireCalcError
    from .serialization import load_profile, profile_to_dict

    try:
        profile = load_profile(config_file)
    except FireCalcError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    data = profile_to_dict(profile)
    if fmt == "json":
        click.echo(json.dumps(data, indent=2))
        return

    from rich.table import Table

    table = Table(title="Profile", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in data.items():
        table.add_row(key, f"{value:,}" if isinstance(value, (int, float)) else str(value))
    _get_console().print(table)


@main.command()
def info() -> None:
    """
    Display version and dependency information.
    """
    info_lines = [
        f"firecalc Version: {__version__}",
        f"Python: {sys.version.split()[0]}",
    ]

    dependencies = ["numpy", "pandas", "pydantic", "pydantic_settings", "matplotlib", "click", "rich"]
    for module in dependencies:
        try:
            mod = __import__(module)
            version = getattr(mod, "__version__", "installed")
            info_lines.append(f"{module}: {version}")
        except ImportError:
            info_lines.append(f"{module}: not installed")

    from rich.panel import Panel
    _get_console().print(Panel("\n".join(info_lines), title="System Information"))


if __name__ == "__main__":
    main()
