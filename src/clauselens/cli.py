"""
Command-line interface for ClauseLens.
"""

import json
from pathlib import Path
from typing import Any, Optional

import click
import structlog
from pydantic import ValidationError

from clauselens.config import get_settings
from clauselens.exceptions import ClauseLensError
from clauselens.logging_config import configure_logging
from clauselens.models.analytics import TimePeriod
from clauselens.models.contract import Contract
from clauselens.services.analytics import AnalyticsAggregator
from clauselens.services.comparison import ComparisonEngine
from clauselens.services.normalizer import AnalysisNormalizer

logger = structlog.get_logger(__name__)


def _read_json(path: str) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path} is not valid JSON: {e}")


def _load_contracts(paths: tuple[str, ...]) -> list[Contract]:
    """Load contract records; a file may hold one record or a list of them."""
    contracts = []
    for path in paths:
        data = _read_json(path)
        records = data if isinstance(data, list) else [data]
        for record in records:
            try:
                contracts.append(Contract.model_validate(record))
            except ValidationError as e:
                raise click.ClickException(f"Invalid contract record in {path}: {e}")
    logger.debug("contracts_loaded", files=len(paths), contracts=len(contracts))
    return contracts


def _emit(payload: dict, output: Optional[str]) -> None:
    text = json.dumps(payload, indent=2)
    if output:
        Path(output).write_text(text, encoding="utf-8")
        click.echo(f"Results written to: {output}", err=True)
    else:
        click.echo(text)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """ClauseLens: structured contract analysis, comparison and analytics."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug

    settings = get_settings()
    configure_logging("DEBUG" if debug or settings.debug else settings.log_level)


# =========================================================================
# Analysis Commands
# =========================================================================


@cli.command()
@click.argument("raw_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(), help="Output file for the analysis")
def normalize(raw_path: str, output: Optional[str]) -> None:
    """Normalize a raw AI analysis payload into the canonical shape."""
    raw = Path(raw_path).read_text(encoding="utf-8")

    try:
        analysis = AnalysisNormalizer().normalize(raw)
    except ClauseLensError as e:
        raise click.ClickException(str(e))

    _emit(analysis.to_dict(), output)


@cli.command()
@click.argument("contract_paths", nargs=-1, type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(), help="Output file for the comparison")
def compare(contract_paths: tuple[str, ...], output: Optional[str]) -> None:
    """Compare two or more analyzed contracts side by side."""
    contracts = _load_contracts(contract_paths)

    try:
        result = ComparisonEngine().compare(contracts)
    except ClauseLensError as e:
        raise click.ClickException(str(e))

    _emit(result.to_dict(), output)


@cli.command()
@click.argument("contract_paths", nargs=-1, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--period",
    type=click.Choice([p.value for p in TimePeriod]),
    default=TimePeriod.ALL.value,
    show_default=True,
    help="Time window for monthly metrics",
)
@click.option("--output", "-o", type=click.Path(), help="Output file for the analytics")
def analytics(contract_paths: tuple[str, ...], period: str, output: Optional[str]) -> None:
    """Compute portfolio analytics over a contract collection."""
    contracts = _load_contracts(contract_paths)

    aggregator = AnalyticsAggregator()
    portfolio = aggregator.aggregate(contracts)
    metrics = aggregator.compute_metrics(portfolio, TimePeriod(period))

    _emit({"analytics": portfolio.to_dict(), "metrics": metrics.to_dict()}, output)


# =========================================================================
# Config Commands
# =========================================================================


@cli.command()
def config() -> None:
    """Show current configuration."""
    settings = get_settings()

    click.echo("\n=== ClauseLens Configuration ===\n")
    click.echo(f"Environment: {settings.environment}")
    click.echo(f"Debug: {settings.debug}")
    click.echo(f"Log Level: {settings.log_level}")
    click.echo(f"\nAnalysis Model: {settings.analysis_model}")
    click.echo(f"Risk ID Prefix: {settings.risk_id_prefix}")


def main() -> None:
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
