"""Command-line interface for marcimport.

Provides CLI commands for loading MARC files into a working database.
"""

import dataclasses
import importlib.metadata
import json
import sys
from pathlib import Path

import click

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("marcimport")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.4.0"  # Fallback for development


@click.group()
@click.version_option(version=__version__, prog_name="marcimport")
def cli() -> None:
    """Load MARC catalog records into a relational working database.

    Use 'marcimport COMMAND --help' for command-specific help.
    """


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--institution",
    "-i",
    required=True,
    help="MARC institution code of the organization that created the file",
)
@click.option(
    "--db",
    type=click.Path(dir_okay=False),
    default=None,
    help="SQLite database path (default: marcimport.sqlite3)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON loader configuration file",
)
@click.option(
    "--log",
    "log_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSONL audit log path",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARN", "ERROR"]),
    default=None,
    help="Lowest level written to the audit log (default: INFO)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
def load(
    input_path: str,
    institution: str,
    db: str | None,
    config_path: str | None,
    log_path: str | None,
    log_level: str | None,
    verbose: bool,
) -> None:
    """Load the MARC file INPUT_PATH into the working database.

    Records are matched against those already stored for the same
    institution: older or equal copies are skipped, newer ones replace the
    stored rows. Files loaded under the originating catalog's code also
    produce one holding record per institution listed in their 852 fields.

    Examples
    --------
        marcimport load estc_2016.mrc --institution estc
        marcimport load bl.mrc -i uk-BL --db work.sqlite3 --log load.jsonl
    """
    from marcimport import LoadError, load_file
    from marcimport.engine import LoaderConfig, load_config

    try:
        config = load_config(config_path) if config_path else LoaderConfig()

        overrides: dict[str, object] = {}
        if db is not None:
            overrides["database_path"] = Path(db)
        if log_path is not None:
            overrides["log_path"] = Path(log_path)
        if log_level is not None:
            overrides["log_level"] = log_level
        if overrides:
            config = dataclasses.replace(config, **overrides)

        if verbose:
            click.echo(f"Loading: {input_path}", err=True)
            click.echo(f"  Institution: {institution}", err=True)
            click.echo(f"  Database: {config.database_path}", err=True)
            click.echo(f"  Origin catalog: {config.origin_catalog_code}", err=True)
            click.echo(f"  852 markers: {config.holding_marker_strategy}", err=True)
            if config.log_path:
                click.echo(f"  Audit log: {config.log_path}", err=True)

        result = load_file(input_path, institution, config=config)

    except LoadError as e:
        click.secho(f"✗ Load failed: {e}", fg="red", err=True)
        sys.exit(1)
    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        if verbose:
            import traceback

            click.echo(traceback.format_exc(), err=True)
        sys.exit(1)

    if verbose:
        click.echo("\nResults:", err=True)
        for name, value in result.counters().items():
            click.echo(f"  {name}: {value}", err=True)

    click.secho(
        f"✓ Loaded {result.records_read} records "
        f"({result.records_inserted} inserted, {result.records_updated} updated, "
        f"{result.records_skipped} skipped, {result.holdings_synthesized} holdings)",
        fg="green",
    )
    if result.records_rejected or result.records_unreadable:
        click.secho(
            f"! {result.records_rejected} rejected, {result.records_unreadable} unreadable",
            fg="yellow",
            err=True,
        )


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Output JSONL file path (default: stdout)",
)
def classify(input_path: str, output: str | None) -> None:
    """Classify the records of INPUT_PATH without storing anything.

    Writes one JSON object per readable record with its control key,
    record type and modification date.

    Examples
    --------
        marcimport classify estc_2016.mrc
        marcimport classify bl.mrc -o classified.jsonl
    """
    from marcimport import classify_file

    try:
        records = classify_file(input_path)
    except Exception as e:
        click.secho(f"✗ Error: {e}", fg="red", err=True)
        sys.exit(1)

    lines = [json.dumps(r.to_dict(), ensure_ascii=False) for r in records]

    if output is None:
        for line in lines:
            click.echo(line)
        return

    with open(output, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")
    click.secho(f"✓ Classified {len(lines)} records to {output}", fg="green")


if __name__ == "__main__":
    cli()
