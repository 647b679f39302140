"""
scansync CLI.

Usage:
    scansync poll --host 10.0.0.5 --serial I2J5678
    scansync wake --host 10.0.0.5 --serial I2J5678
    scansync fleet instruments.json
"""

from __future__ import annotations

import functools
from typing import Callable

import click
from rich.console import Console
from rich.table import Table

from scansync import __version__
from scansync.client import ScannerClient
from scansync.config import get_settings
from scansync.exceptions import ScanSyncError
from scansync.fleet import InstrumentConfig, build_clients, load_fleet, poll_round_robin
from scansync.logging import setup_logging
from scansync.models.inventory import BoxVersion
from scansync.services.download import PollStatus

console = Console()
err_console = Console(stderr=True)


def instrument_options(func: Callable) -> Callable:
    """Options describing a single instrument."""

    @click.option("--host", "-H", required=True, help="Instrument IP address or hostname")
    @click.option("--serial", "-s", required=True, help="Spectrometer serial number")
    @click.option("--user", "-u", default="anonymous", envvar="SCANSYNC_FTP_USER", help="FTP user")
    @click.option("--password", "-p", default="", envvar="SCANSYNC_FTP_PASSWORD", help="FTP password")
    @click.option("--admin-user", default=None, help="Admin FTP user (defaults to --user)")
    @click.option("--admin-password", default=None, help="Admin FTP password")
    @click.option(
        "--box",
        type=click.Choice([b.value for b in BoxVersion]),
        default=BoxVersion.V1.value,
        help="Electronics box generation",
    )
    @click.option("--port", default=21, help="FTP port")
    @click.option("--node", "node_index", default=0, help="Node index shown in messages")
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    return wrapper


def _client_from_options(options: dict) -> ScannerClient:
    settings = get_settings()
    instrument = InstrumentConfig(**options)
    try:
        return build_clients([instrument], settings)[0]
    except ScanSyncError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default=None,
    help="Override SCANSYNC_LOG_LEVEL",
)
@click.option("--json-logs/--no-json-logs", default=None, help="Override SCANSYNC_LOG_JSON")
@click.version_option(version=__version__, prog_name="scansync")
def main(log_level: str | None, json_logs: bool | None) -> None:
    """scansync: download data files from scanning instruments."""
    setup_logging(level=log_level, json_output=json_logs)


# =============================================================================
# Download
# =============================================================================


@main.command()
@instrument_options
def poll(**options) -> None:
    """Download pending data files from one instrument.

    Spends at most SCANSYNC_QUERY_PERIOD seconds on the instrument.
    """
    client = _client_from_options(options)
    result = client.poll_once()

    style = "green" if result.success else "red"
    console.print(f"[{style}]{result.summary()}[/{style}]")
    raise SystemExit(0 if result.success else 1)


@main.command()
@click.argument("fleet_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--workers", "-w", default=None, type=int, help="Parallel instruments")
def fleet(fleet_file: str, workers: int | None) -> None:
    """Poll every instrument listed in FLEET_FILE (JSON) once."""
    try:
        instruments = load_fleet(fleet_file)
    except ValueError as e:
        err_console.print(f"[red]Invalid fleet file:[/red] {e}")
        raise SystemExit(1)

    if not instruments:
        console.print("[yellow]No instruments in fleet file[/yellow]")
        return

    results = poll_round_robin(build_clients(instruments), max_workers=workers)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Serial", width=12)
    table.add_column("Status", width=18)
    table.add_column("Files", justify="right", width=6)
    table.add_column("Failed", justify="right", width=6)
    table.add_column("Folders", justify="right", width=8)
    table.add_column("Time", justify="right", width=8)

    for result in results:
        colour = "green" if result.success else "red"
        if result.status is PollStatus.NOTHING_TO_DO:
            colour = "dim"
        table.add_row(
            result.serial,
            f"[{colour}]{result.status.value}[/{colour}]",
            str(len(result.downloaded)),
            str(len(result.failed)),
            str(len(result.folders_removed)),
            f"{result.elapsed:.1f}s",
        )

    console.print(table)
    raise SystemExit(0 if all(r.success for r in results) else 1)


# =============================================================================
# Power commands
# =============================================================================


@main.command()
@instrument_options
def sleep(**options) -> None:
    """Power the instrument down and fetch leftover files."""
    client = _client_from_options(options)
    ok = client.sleep()
    _report(ok, "Sleep command sent", "Could not send sleep command")


@main.command()
@instrument_options
def wake(**options) -> None:
    """Power the instrument up and re-read its configuration."""
    client = _client_from_options(options)
    ok = client.wake()
    _report(ok, "Instrument woken up", "Failed to wake instrument up")


@main.command()
@instrument_options
def reboot(**options) -> None:
    """Reboot the instrument."""
    client = _client_from_options(options)
    ok = client.reboot()
    _report(ok, "Reboot command sent", "Could not send reboot command")


# =============================================================================
# Configuration
# =============================================================================


@main.command("sync-config")
@instrument_options
def sync_config(**options) -> None:
    """Download and check the instrument's cfg.txt."""
    client = _client_from_options(options)
    result = client.sync_config()
    if not result.success:
        err_console.print(f"[red]Error:[/red] {result.error}")
        raise SystemExit(1)

    console.print(f"[green]Configuration saved to[/green] {result.local_path}")
    if result.archived:
        console.print(f"[dim]Archived:[/dim] {result.archive_path}")
    if result.forwarded:
        console.print(f"[dim]Forwarded to site[/dim] {result.site_index}")


def _report(ok: bool, success: str, failure: str) -> None:
    if ok:
        console.print(f"[green]{success}[/green]")
        return
    err_console.print(f"[red]{failure}[/red]")
    raise SystemExit(1)
