"""Scan orchestration - lists mailboxes, fetches bodies, classifies."""

from __future__ import annotations

import time

from rich.markup import escape

from .classifier import classify
from .context import extract_context
from .display import console, create_progress
from .models import ConfidenceTier, MailUser, MessageSummary, ScanReport, ScanResult, ScanSettings
from .sanitizer import sanitize


def inspect_message(user: MailUser, summary: MessageSummary, body: str, window: int) -> ScanResult | None:
    """Classify one message body; return a row when it is flagged."""
    text = sanitize(body)
    tier = classify(text)
    if tier is ConfidenceTier.NONE:
        return None
    return ScanResult(
        mailbox=user.mail,
        user_id=user.id,
        subject=summary.subject,
        confidence=tier,
        from_address=summary.from_address,
        sent_at=summary.sent_at,
        message_id=summary.id,
        match_preview=extract_context(text, window),
    )


def _select_users(users: list[MailUser], only: list[str]) -> list[MailUser]:
    if not only:
        return users
    wanted = {address.lower() for address in only}
    return [u for u in users if u.mail.lower() in wanted]


def scan_mailboxes(client, settings: ScanSettings | None = None) -> ScanReport:
    """Run a full scan over every mail-enabled user.

    ``client`` provides list_mail_enabled_users, list_messages and
    get_full_message.  A mailbox whose listing fails is skipped, as is a
    message whose body cannot be fetched; the scan calls each once and
    never retries.  GmailClient.list_messages retries its batched header
    fetch on HTTP 429/500/503 (up to five attempts, backoff capped at
    60 s) before such a failure reaches here, so a throttled mailbox can
    take minutes before it is skipped.  The configured delay follows
    every body fetch.
    """
    settings = settings or ScanSettings()
    report = ScanReport()

    console.print("[bold]Step 1/2:[/bold] Listing mailboxes...")
    users = _select_users(client.list_mail_enabled_users(), settings.only_mailboxes)
    console.print(f"  Found [bold]{len(users)}[/bold] mailboxes")

    console.print("[bold]Step 2/2:[/bold] Scanning messages...")
    with create_progress("Scanning mailboxes") as progress:
        task = progress.add_task("scanning", total=len(users))

        for user in users:
            try:
                summaries = client.list_messages(user.id, settings.page_size)
            except Exception as exc:  # noqa: BLE001
                report.mailboxes_skipped += 1
                console.print(f"  [yellow]Skipping {user.mail}: {escape(str(exc))}[/yellow]")
                progress.advance(task)
                continue

            report.mailboxes_scanned += 1
            for summary in summaries:
                try:
                    message = client.get_full_message(user.id, summary.id)
                except Exception as exc:  # noqa: BLE001
                    report.messages_skipped += 1
                    console.print(
                        f"  [yellow]Skipping message {summary.id} in {user.mail}: "
                        f"{escape(str(exc))}[/yellow]"
                    )
                    continue
                finally:
                    time.sleep(settings.fetch_delay)

                report.messages_scanned += 1
                result = inspect_message(user, summary, message.body, settings.context_window)
                if result is not None:
                    report.results.append(result)
                    console.print(
                        f"  [dim]{result.confidence.label} match in {user.mail}: "
                        f"{escape(result.subject)}[/dim]"
                    )

            progress.advance(task)

    console.print(f"  Flagged [bold]{len(report.results)}[/bold] messages")
    return report
