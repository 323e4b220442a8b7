"""Click CLI entry point for the spend-insights command.

Handles argument parsing, config loading, and error display. All business
logic is delegated to ``pipeline``, ``interchange``, ``config``, and
``export`` modules.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from spend_insights import __version__
from spend_insights.errors import SpendInsightsError
from spend_insights.models import AppConfig
from spend_insights.readers import READERS

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool, debug: bool) -> None:
    """Set up logging based on verbosity flags."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        force=True,
    )


def _load_config(root: Path) -> AppConfig:
    """Load ``config.toml`` from *root*, or defaults when there is none.

    Exits with status 1 if the file exists but cannot be read.
    """
    from spend_insights.config import load_config

    try:
        return load_config(root)
    except FileNotFoundError:
        logger.info("No config.toml in %s, using defaults", root)
        return AppConfig()
    except Exception as exc:
        click.echo(f"Error loading configuration: {exc}", err=True)
        sys.exit(1)


def _session_path(name: str, config: AppConfig, root: Path) -> Path:
    """Resolve a session name; bare file names go in the session directory."""
    path = Path(name)
    if path.parent == Path(".") and not path.is_absolute():
        return root / config.session_dir / path
    return path


@click.group()
@click.version_option(version=__version__, prog_name="spend-insights")
def cli() -> None:
    """Summarize spending from CSV, Excel, or JSON transaction exports."""


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(sorted(READERS)),
    default=None,
    help="Input format. Inferred from the file extension when omitted.",
)
@click.option("--sheet", default=None, help="Worksheet name for Excel input.")
@click.option("--delimiter", default=None, help="Field delimiter for delimited text input.")
@click.option("--save", "save_as", default=None, help="Save the session to this file.")
@click.option(
    "--export",
    "export_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the cleaned transactions to this CSV file.",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the session as JSON.")
@click.option("--verbose", is_flag=True, default=False, help="Detailed progress output.")
@click.option("--debug", is_flag=True, default=False, help="Developer-level diagnostics.")
def analyze(
    source: Path,
    fmt: str | None,
    sheet: str | None,
    delimiter: str | None,
    save_as: str | None,
    export_path: Path | None,
    as_json: bool,
    verbose: bool,
    debug: bool,
) -> None:
    """Normalize SOURCE and print spending insights."""
    _configure_logging(verbose, debug)
    root = Path.cwd()
    config = _load_config(root)
    if sheet:
        config.sheet_name = sheet
    if delimiter:
        config.delimiter = delimiter

    from spend_insights.pipeline import analyze_file

    try:
        result = analyze_file(source, config=config, fmt=fmt)
    except SpendInsightsError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    from spend_insights import interchange
    from spend_insights.export import export_transactions, print_summary

    if export_path is not None:
        try:
            written = export_transactions(result.transactions, export_path)
        except OSError as exc:
            click.echo(f"Error writing output: {exc}", err=True)
            sys.exit(1)
        if verbose:
            click.echo(f"Wrote {len(result.transactions)} transactions to {written}")

    if save_as:
        try:
            session = interchange.save_session(
                _session_path(save_as, config, root), result.transactions, result.insights
            )
        except OSError as exc:
            click.echo(f"Error saving session: {exc}", err=True)
            sys.exit(1)
        if verbose:
            click.echo(f"Saved session to {session}")

    if as_json:
        click.echo(interchange.dumps(result.transactions, result.insights))
    else:
        print_summary(result.insights, source=source.name, currency=config.currency_symbol)


@cli.command()
@click.argument("session")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the session as JSON.")
def show(session: str, as_json: bool) -> None:
    """Print the insights stored in a saved SESSION."""
    from spend_insights import interchange
    from spend_insights.export import print_summary

    root = Path.cwd()
    config = _load_config(root)

    path = Path(session)
    if not path.exists():
        path = _session_path(session, config, root)

    try:
        transactions, insights = interchange.load_session(path)
    except FileNotFoundError:
        click.echo(f"Error: session not found: {session}", err=True)
        sys.exit(1)
    except SpendInsightsError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(interchange.dumps(transactions, insights))
    else:
        print_summary(insights, source=path.name, currency=config.currency_symbol)


@cli.command()
@click.option(
    "--dir", "target_dir", default=".", type=click.Path(), help="Directory to initialize."
)
def init(target_dir: str) -> None:
    """Write a default config.toml."""
    from spend_insights.config import initialize

    target = Path(target_dir).resolve()

    try:
        initialize(target)
    except Exception as exc:
        click.echo(f"Error initializing project: {exc}", err=True)
        sys.exit(1)

    click.echo(f"Initialized spend-insights config in {target}")
