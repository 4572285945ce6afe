"""CLI entry point for SSN Sweeper."""

from __future__ import annotations

from datetime import datetime, timezone

import click
from googleapiclient.errors import HttpError

from . import __version__
from .auth import check_auth, get_session
from .constants import CONTEXT_WINDOW, DELETE_DELAY, FETCH_DELAY, PAGE_SIZE
from .deleter import AuditLog, PreconditionError, load_reviewed_rows, run_deletion
from .display import (
    confirm_delete,
    console,
    display_deletion_summary,
    display_reviewed_rows,
    display_scan_results,
)
from .export import export_results
from .gmail_client import GmailClient
from .models import ScanSettings
from .scanner import scan_mailboxes


def _stamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _connect(admin: str | None):
    try:
        return get_session(admin)
    except FileNotFoundError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=__version__, prog_name="ssn-sweeper")
def cli() -> None:
    """SSN Sweeper - find and remove Social Security Numbers in mailboxes."""


@cli.command()
@click.option("-o", "--output", default=None, help="Report path (default: ssn_scan_<timestamp>.<format>).")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["csv", "json"]),
    default="csv",
    help="Report format.",
)
@click.option("--page-size", default=PAGE_SIZE, type=int, help="Messages to scan per mailbox.")
@click.option("--delay", default=FETCH_DELAY, type=float, help="Seconds to wait after each message fetch.")
@click.option("--window", default=CONTEXT_WINDOW, type=int, help="Characters of context either side of a match.")
@click.option("-u", "--user", "users", multiple=True, help="Only scan this mailbox (repeatable).")
@click.option("--admin", default=None, help="Admin address for domain-wide scans.")
def scan(
    output: str | None,
    fmt: str,
    page_size: int,
    delay: float,
    window: int,
    users: tuple[str, ...],
    admin: str | None,
) -> None:
    """Scan mailboxes for Social Security Numbers and write a review report."""
    session = _connect(admin)
    settings = ScanSettings(
        page_size=page_size,
        fetch_delay=delay,
        context_window=window,
        only_mailboxes=list(users),
    )

    try:
        report = scan_mailboxes(GmailClient(session), settings)
    except HttpError as e:
        raise click.ClickException(f"Could not list mailboxes: {e}") from e
    display_scan_results(report)

    if not report.results:
        console.print("[green]No messages flagged.[/green]")
        return

    output = output or f"ssn_scan_{_stamp()}.{fmt}"
    export_results(report.results, format=fmt, output_path=output)


@cli.command()
@click.argument("reviewed", type=click.Path(dir_okay=False))
@click.option("--log", "log_path", default=None, help="Audit log path (default: ssn_deletion_<timestamp>.log).")
@click.option("--delay", default=DELETE_DELAY, type=float, help="Seconds to wait after each deletion.")
@click.option("--execute", is_flag=True, help="Actually delete messages (default is dry-run).")
@click.option("-y", "--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.option("--admin", default=None, help="Admin address for domain-wide sessions.")
def delete(
    reviewed: str,
    log_path: str | None,
    delay: float,
    execute: bool,
    yes: bool,
    admin: str | None,
) -> None:
    """Delete the messages listed in a reviewed scan report."""
    try:
        rows = load_reviewed_rows(reviewed)
    except PreconditionError as e:
        raise click.ClickException(str(e)) from e

    if not execute:
        display_reviewed_rows(rows)
        console.print(
            "\n[yellow][DRY RUN] No messages were deleted. "
            "Use --execute to actually delete messages.[/yellow]"
        )
        return

    session = _connect(admin)

    if not yes and not confirm_delete(rows):
        console.print("[dim]Cancelled.[/dim]")
        return

    audit_log = AuditLog(log_path or f"ssn_deletion_{_stamp()}.log")
    try:
        summary = run_deletion(GmailClient(session), session, reviewed, audit_log, delay=delay)
    except PreconditionError as e:
        raise click.ClickException(str(e)) from e

    display_deletion_summary(summary)


@cli.command()
@click.option("--admin", default=None, help="Admin address for domain-wide sessions.")
def auth(admin: str | None) -> None:
    """Test Google Workspace authentication."""
    if not check_auth(admin):
        raise SystemExit(1)
