"""Reviewed deletion workflow - delete approved messages and keep an audit log."""

from __future__ import annotations

import csv
import time
from datetime import datetime, timezone
from pathlib import Path

from rich.markup import escape

from .constants import DELETE_DELAY, REVIEWED_REQUIRED_COLUMNS
from .display import console, create_progress
from .models import DeletionLogEntry, DeletionSummary, ReviewedRow


class PreconditionError(Exception):
    """A deletion run cannot start; nothing has been deleted or logged."""


class AuditLog:
    """Append-only text log, one line per processed row."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def append(self, entry: DeletionLogEntry) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(entry.format_line() + "\n")
            f.flush()


def load_reviewed_rows(path: Path | str) -> list[ReviewedRow]:
    """Read the reviewed CSV. Columns beyond the required ones are ignored."""
    path = Path(path)
    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            columns = reader.fieldnames or []
            missing = [c for c in REVIEWED_REQUIRED_COLUMNS if c not in columns]
            if missing:
                raise PreconditionError(
                    f"{path} is missing required column(s): {', '.join(missing)}"
                )
            rows = [
                ReviewedRow(
                    user_id=record["UserId"] or "",
                    message_id=record["MessageId"] or "",
                    subject=record["Subject"] or "",
                    mailbox=record["Mailbox"] or "",
                )
                for record in reader
            ]
    except OSError as exc:
        raise PreconditionError(f"Cannot read reviewed file {path}: {exc}") from exc
    except (UnicodeDecodeError, csv.Error) as exc:
        raise PreconditionError(f"Cannot parse reviewed file {path}: {exc}") from exc

    if not rows:
        raise PreconditionError(f"{path} contains no rows to delete.")
    return rows


def _process_row(client, row: ReviewedRow) -> DeletionLogEntry:
    try:
        client.delete_message(row.user_id, row.message_id)
    except Exception as exc:  # noqa: BLE001
        console.print(
            f"  [red]FAILED: '{escape(row.subject)}' from {row.mailbox} - {escape(str(exc))}[/red]"
        )
        return DeletionLogEntry(
            timestamp=datetime.now(timezone.utc),
            deleted=False,
            subject=row.subject,
            mailbox=row.mailbox,
            message_id=row.message_id,
            error=str(exc),
        )

    console.print(f"  [green]Deleted:[/green] '{escape(row.subject)}' from {row.mailbox}")
    return DeletionLogEntry(
        timestamp=datetime.now(timezone.utc),
        deleted=True,
        subject=row.subject,
        mailbox=row.mailbox,
        message_id=row.message_id,
    )


def run_deletion(
    client,
    session,
    reviewed_path: Path | str,
    audit_log: AuditLog,
    delay: float = DELETE_DELAY,
) -> DeletionSummary:
    """Delete every reviewed message in file order.

    Fails fast with PreconditionError when there is no authenticated
    session or the reviewed file is unreadable or empty.  After that, a
    failed delete is logged and the run moves on; each outcome is appended
    to the audit log before the next row starts.
    """
    if session is None or not session.is_authenticated:
        raise PreconditionError("No authenticated session. Run 'ssn-sweeper auth' first.")

    rows = load_reviewed_rows(reviewed_path)
    summary = DeletionSummary(log_path=audit_log.path)

    console.print(f"[bold]Deleting {len(rows)} reviewed messages...[/bold]")
    with create_progress("Deleting messages") as progress:
        task = progress.add_task("deleting", total=len(rows))

        for row in rows:
            entry = _process_row(client, row)
            audit_log.append(entry)
            summary.entries.append(entry)
            progress.advance(task)
            time.sleep(delay)

    return summary
