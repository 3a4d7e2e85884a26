import json
import logging
from dataclasses import replace

import click
import pandas as pd

from nestegg.config import Settings
from nestegg.logging_config import setup_logging

logger = logging.getLogger(__name__)


def simulation_options(func):
    """Shared parameter options; defaults come from Settings at call time."""
    options = [
        click.option("--simulations", "-n", "simulation_count", type=click.IntRange(min=1),
                     default=None, help="Number of simulated paths"),
        click.option("--years", "-y", type=click.IntRange(min=1), default=None,
                     help="Horizon in years"),
        click.option("--initial", "initial_investment", type=click.FloatRange(min=0), default=None,
                     help="Initial investment"),
        click.option("--monthly", "monthly_contribution", type=float, default=None,
                     help="Monthly contribution"),
        click.option("--inflation", "inflation_rate", type=float, default=None,
                     help="Annual inflation applied to the contribution (e.g. 0.02)"),
        click.option("--annual-return", type=click.FloatRange(min=-1, min_open=True), default=None,
                     help="Expected annual return (e.g. 0.075)"),
        click.option("--volatility", type=click.FloatRange(min=0), default=None,
                     help="Annualised volatility (e.g. 0.15)"),
        click.option("--seed", type=click.IntRange(min=0), default=None,
                     help="Seed for a reproducible run"),
        click.option("--anchor", type=click.Choice(["prior_close", "year_start"]), default=None,
                     help="Start point of each annual return"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _run_from_options(settings: Settings, seed, anchor, **overrides):
    from nestegg.analysis.simulation import run_monte_carlo

    params = replace(
        settings.default_parameters(),
        **{k: v for k, v in overrides.items() if v is not None},
    )
    return run_monte_carlo(
        params,
        seed=seed,
        histogram_bins=settings.histogram_bins,
        anchor=anchor or settings.annual_anchor,
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """nestegg - Monte Carlo portfolio projection"""
    settings = Settings()
    setup_logging(settings.log_dir, "DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


@cli.command()
@simulation_options
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False, writable=True), default=None,
              help="Also write the raw paths to this CSV file")
@click.pass_obj
def run(settings: Settings, seed, anchor, as_json: bool, csv_path: str | None, **overrides):
    """Run a simulation and print its summary."""
    result = _run_from_options(settings, seed, anchor, **overrides)

    if csv_path:
        with open(csv_path, "w", encoding="utf-8", newline="") as f:
            f.write(result.to_csv())

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        params = result.parameters
        stats = result.final_stats
        click.echo(
            f"{params.simulation_count} paths over {params.years} years "
            f"({params.months} months)"
        )
        click.echo(f"  Avg final: {stats['mean']:,.0f}")
        click.echo(f"  P10:       {stats['p10']:,.0f}")
        click.echo(f"  Median:    {stats['p50']:,.0f}")
        click.echo(f"  P90:       {stats['p90']:,.0f}")

        if result.annual_returns:
            monthly = pd.DataFrame(result.monthly).set_index("month")
            annual = pd.DataFrame(result.annual_returns).set_index("year")
            # Year-end median band next to the median annual return
            year_end = monthly.iloc[11::12].reset_index(drop=True)
            year_end.index = annual.index
            table = annual.join(year_end).rename(columns={"return_pct": "return %"})
            click.echo("")
            click.echo(table.to_string(float_format=lambda v: f"{v:,.2f}"))

    if csv_path:
        click.echo(f"Paths written to {csv_path}", err=as_json)


@cli.command()
@simulation_options
@click.option("--output", "-o", type=click.Path(dir_okay=False, writable=True), default=None,
              help="Destination file (default: configured export filename)")
@click.pass_obj
def export(settings: Settings, seed, anchor, output: str | None, **overrides):
    """Run a simulation and write the raw paths as CSV."""
    result = _run_from_options(settings, seed, anchor, **overrides)
    output = output or settings.export_filename

    with open(output, "w", encoding="utf-8", newline="") as f:
        f.write(result.to_csv())

    click.echo(
        f"Wrote {result.paths.shape[0]} paths x {result.paths.shape[1]} months to {output}"
    )


@cli.command()
@click.option("--host", default=None, help="Bind address (default: configured api_host)")
@click.option("--port", type=int, default=None, help="Port (default: configured api_port)")
@click.pass_obj
def serve(settings: Settings, host: str | None, port: int | None):
    """Start the HTTP API."""
    import uvicorn

    from nestegg.web.app import create_app

    host = host or settings.api_host
    port = port or settings.api_port
    click.echo(f"Serving nestegg API on http://{host}:{port}")
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


if __name__ == "__main__":
    cli()
