"""
Main CLI entry point for fee-ledger using Click.

Usage:
    fee-ledger inspect EVENTS
    fee-ledger index --events FILE --registry FILE --output DIR [--format parquet|json]
    fee-ledger validate --events FILE --registry FILE
    fee-ledger format-amount RAW DECIMALS
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from feeledger import __version__
from feeledger.parsers import EventLogData, EventParser, RegistryData, RegistryParser
from feeledger.tools import format_amount
from feeledger.validation import DataValidator, ValidationResult
from feeledger.workflow import IndexingResult, TreasuryIndexer
from feeledger.writers import write_result_to_json, write_result_to_parquet


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


class Config:
    """Shared configuration for CLI commands."""

    def __init__(self) -> None:
        self.verbose = False
        self.debug = False


pass_config = click.make_pass_decorator(Config, ensure=True)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug output")
@click.version_option(version=__version__, prog_name="fee-ledger")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """Fee splitter treasury ledger built from decoded chain events."""
    ctx.ensure_object(Config)
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug
    setup_logging(verbose=verbose, debug=debug)


@cli.command()
@click.argument("events", type=click.Path(exists=True))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_config
def inspect(config: Config, events: str, as_json: bool) -> None:
    """Summarize an event log without indexing it.

    Counts the decoded events per type and reports entries that
    could not be parsed.

    Example:
        fee-ledger inspect events.jsonl
    """
    event_data = _parse_events(events)
    counts = event_data.count_by_type()

    if as_json:
        output = {
            "path": event_data.file_path,
            "num_events": event_data.num_events,
            "events_by_type": counts,
            "warnings": event_data.warnings,
        }
        click.echo(json.dumps(output, indent=2))
    else:
        click.echo(f"File: {Path(event_data.file_path).name}")
        click.echo(f"Events: {event_data.num_events}")
        for event_type, count in counts.items():
            click.echo(f"  {event_type}: {count}")
        if event_data.warnings:
            click.echo(click.style(f"Skipped entries ({len(event_data.warnings)}):", fg="yellow"))
            for warning in event_data.warnings:
                click.echo(f"  - {warning}")


@cli.command()
@click.option(
    "--events",
    "-e",
    required=True,
    type=click.Path(exists=True),
    help="Path to decoded event log (.json or .jsonl)",
)
@click.option(
    "--registry",
    "-r",
    required=True,
    type=click.Path(exists=True),
    help="Path to market and token registry (.json)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@pass_config
def validate(config: Config, events: str, registry: str, as_json: bool) -> None:
    """Index and validate events without writing.

    Reports schema errors, dangling references and treasury totals
    that do not match their ledger rows.

    Example:
        fee-ledger validate --events events.jsonl --registry registry.json
    """
    result = _index(events, registry)

    logging.getLogger("validate").info("Validating...")
    validation = DataValidator().validate(result)

    if as_json:
        output = {
            "is_valid": validation.is_valid,
            "errors": [
                {"field": i.field, "message": i.message, "severity": i.severity}
                for i in validation.errors
            ],
            "warnings": [
                {"field": i.field, "message": i.message, "severity": i.severity}
                for i in validation.warnings
            ],
            "indexing": {
                "treasuries": len(result.treasuries),
                "receipts": len(result.receipts),
                "payments": len(result.payments),
                "tokens": len(result.tokens),
                "events_processed": result.events_processed,
                "events_skipped": result.events_skipped,
            },
        }
        click.echo(json.dumps(output, indent=2))
    else:
        status = (
            click.style("PASSED", fg="green")
            if validation.is_valid
            else click.style("FAILED", fg="red")
        )
        click.echo(f"Validation: {status}")
        click.echo()
        _print_issues(validation)
        click.echo(result.summary())

    if not validation.is_valid:
        sys.exit(1)


@cli.command()
@click.option(
    "--events",
    "-e",
    required=True,
    type=click.Path(exists=True),
    help="Path to decoded event log (.json or .jsonl)",
)
@click.option(
    "--registry",
    "-r",
    required=True,
    type=click.Path(exists=True),
    help="Path to market and token registry (.json)",
)
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(),
    help="Output directory for ledger tables",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["parquet", "json"]),
    default="parquet",
    show_default=True,
    help="Output file format",
)
@click.option("--no-partition", is_flag=True, help="Do not partition parquet output by market")
@click.option("--skip-validation", is_flag=True, help="Skip validation step")
@click.option("--dry-run", is_flag=True, help="Index and validate but don't write output")
@click.option("--json", "as_json", is_flag=True, help="Output result as JSON")
@pass_config
def index(
    config: Config,
    events: str,
    registry: str,
    output: str,
    output_format: str,
    no_partition: bool,
    skip_validation: bool,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Index events and write the ledger tables.

    Parse, index, validate, and write treasury, receipt, payment and
    token tables.

    Example:
        fee-ledger index --events events.jsonl --registry registry.json --output ./ledger/
    """
    logger = logging.getLogger("index")

    result = _index(events, registry)

    if result.has_errors:
        click.echo(click.style("Indexing errors:", fg="red"), err=True)
        for error in result.errors:
            click.echo(f"  - {error}", err=True)
        sys.exit(1)

    # Validate
    if not skip_validation:
        logger.info("Validating ledger...")
        validation = DataValidator().validate(result)

        if not validation.is_valid:
            click.echo(click.style("Validation failed:", fg="red"), err=True)
            for issue in validation.errors:
                click.echo(f"  [{issue.severity}] {issue.field}: {issue.message}", err=True)
            sys.exit(1)

        for issue in validation.warnings:
            click.echo(
                click.style(f"Warning: {issue.field}: {issue.message}", fg="yellow"),
                err=True,
            )

    # Report indexing result
    if as_json:
        _print_result_json(result)
    else:
        click.echo(result.summary())

    if dry_run:
        logger.info("Dry run - skipping output")
        click.echo(click.style("\nDry run - no files written", fg="cyan"))
        return

    logger.info(f"Writing {output_format} to: {output}")
    output_path = Path(output)
    output_path.mkdir(parents=True, exist_ok=True)

    try:
        if output_format == "json":
            paths = {name: [path] for name, path in write_result_to_json(result, output_path).items()}
        else:
            paths = write_result_to_parquet(
                result, output_path, partition_by_market=not no_partition
            )
    except OSError as e:
        raise click.ClickException(f"Error writing output: {e}")

    click.echo(click.style("\nOutput files:", fg="green"))
    for table_name, table_paths in paths.items():
        for path in table_paths:
            click.echo(f"  {table_name}: {path}")


@cli.command("format-amount", context_settings={"ignore_unknown_options": True})
@click.argument("raw", type=int)
@click.argument("decimals", type=click.IntRange(min=0))
def format_amount_command(raw: int, decimals: int) -> None:
    """Render a raw token amount with the given decimals.

    Example:
        fee-ledger format-amount 9900000 6
    """
    click.echo(format_amount(raw, decimals).formatted)


def _parse_events(events: str) -> EventLogData:
    """Parse an event log, converting failures to CLI errors."""
    logging.getLogger("parse").info(f"Parsing event log: {events}")
    try:
        return EventParser().parse(events)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Error parsing event log: {e}")


def _parse_registry(registry: str) -> RegistryData:
    """Parse a registry file, converting failures to CLI errors."""
    logging.getLogger("parse").info(f"Parsing registry: {registry}")
    try:
        return RegistryParser().parse(registry)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Error parsing registry: {e}")


def _index(events: str, registry: str) -> IndexingResult:
    """Parse both inputs and index the events."""
    event_data = _parse_events(events)
    registry_data = _parse_registry(registry)

    logging.getLogger("index").info(f"Indexing {event_data.num_events} events...")
    result = IndexingResult(source_file=event_data.file_path)
    result.warnings.extend(event_data.warnings)
    return TreasuryIndexer().index(event_data.events, registry_data, result=result)


def _print_issues(validation: ValidationResult) -> None:
    """Print validation errors and warnings."""
    if validation.errors:
        click.echo(click.style("Errors:", fg="red"))
        for issue in validation.errors:
            click.echo(f"  ✗ {issue.field}: {issue.message}")

    if validation.warnings:
        click.echo(click.style("Warnings:", fg="yellow"))
        for issue in validation.warnings:
            click.echo(f"  ⚠ {issue.field}: {issue.message}")

    if validation.issues:
        click.echo()


def _print_result_json(result: IndexingResult) -> None:
    """Print indexing summary as JSON."""
    output: dict = {
        "events_processed": result.events_processed,
        "events_skipped": result.events_skipped,
        "informational_events": result.informational_events,
        "treasuries": [
            {
                "id": t["id"],
                "market_id": t["market_id"],
                # Raw totals as strings so JSON consumers keep full precision
                "totalFeesReceivedRaw": str(t["totalFeesReceivedRaw"]),
                "totalFeesReceivedFormatted": t["totalFeesReceivedFormatted"],
                "totalFeesDistributedRaw": str(t["totalFeesDistributedRaw"]),
                "totalFeesDistributedFormatted": t["totalFeesDistributedFormatted"],
            }
            for t in result.treasuries.values()
        ],
        "receipts": len(result.receipts),
        "payments": len(result.payments),
        "tokens": len(result.tokens),
        "warnings": result.warnings,
    }
    click.echo(json.dumps(output, indent=2))


def app(args: Optional[list[str]] = None) -> int:
    """
    Main application entry point (for testing).

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success)
    """
    try:
        cli(args, standalone_mode=False)
        return 0
    except click.ClickException as e:
        e.show()
        return 1
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


def main() -> None:
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
