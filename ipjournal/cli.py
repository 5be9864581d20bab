from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from ipjournal.config import DEFAULT_CONFIG_FILE, load_settings
from ipjournal.errors import IpJournalError, IoFailureError
from ipjournal.export import OutputFormat, write_counts
from ipjournal.filters import build_filter_params
from ipjournal.processor import run
from ipjournal.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Count IPv4 addresses in an access log, filtered by subnet and time window.")

log = get_logger(__name__)


def _fail(error: Exception, code: int = 1) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=code)


@app.callback()
def callback(
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-V",
            help="Log per-line filtering decisions (DEBUG level).",
        ),
):
    """ipjournal: per-address occurrence counts for plain-text logs."""
    configure_logging(verbose)


@app.command()
def count(
        file_log: Optional[str] = typer.Option(
            None,
            "--file-log",
            help="Path to the input log file (required here or in the config file).",
        ),
        file_output: Optional[str] = typer.Option(
            None,
            "--file-output",
            help="Path to the output file (required here or in the config file).",
        ),
        address_start: Optional[str] = typer.Option(
            None,
            "--address-start",
            help="Subnet start address, e.g. 192.168.1.0. Needs --address-mask.",
        ),
        address_mask: Optional[str] = typer.Option(
            None,
            "--address-mask",
            help="Subnet mask length, 1..32.",
        ),
        time_start: Optional[str] = typer.Option(
            None,
            "--time-start",
            help='Window start, "dd.MM.yyyy" or "dd.MM.yyyy HH:mm:ss" (inclusive).',
        ),
        time_end: Optional[str] = typer.Option(
            None,
            "--time-end",
            help='Window end, "dd.MM.yyyy" or "dd.MM.yyyy HH:mm:ss" (inclusive).',
        ),
        config: Optional[Path] = typer.Option(
            None,
            "--config",
            "-c",
            help=f"JSON settings file (default: ./{DEFAULT_CONFIG_FILE} if present).",
        ),
        output_format: OutputFormat = typer.Option(
            OutputFormat.text,
            "--output-format",
            "-f",
            help='Output format: text ("<address>: <count>" lines) | csv',
        ),
):
    """
    Count address occurrences in a log file and write them out.

    Example:

        ipjournal count --file-log access.log --file-output counts.txt
        ipjournal count --file-log access.log --file-output counts.txt \\
            --address-start 192.168.1.0 --address-mask 24 \\
            --time-start 01.01.2020 --time-end "31.12.2020 23:59:59"
    """
    # 1) configuration
    try:
        settings = load_settings(
            {
                "file-log": file_log,
                "file-output": file_output,
                "address-start": address_start,
                "address-mask": address_mask,
                "time-start": time_start,
                "time-end": time_end,
            },
            config_file=config,
        )
        params = build_filter_params(
            settings.address_start,
            settings.address_mask,
            settings.time_start,
            settings.time_end,
        )
    except IpJournalError as e:
        _fail(e)
    log.debug("Filters: %s", params)

    # 2) read + filter
    # errors are logged by run(); partial counts are still written
    result = run(settings.file_log, params)

    # 3) write
    try:
        out_path = write_counts(result.counts, settings.file_output, output_format)
    except OSError as e:
        _fail(IoFailureError(f"Failed to write output file: {e}", param="file-output"))

    typer.echo(f"Wrote {len(result.counts)} addresses to {out_path}")
    if not result.ok:
        raise typer.Exit(code=1)


def main() -> None:
    """Entry point for console_scripts."""
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Interrupted by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
