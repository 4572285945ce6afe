"""Rich-based display functions for SSN Sweeper."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.prompt import Prompt
from rich.table import Table

from .models import ConfidenceTier, DeletionSummary, ReviewedRow, ScanReport

console = Console()

_TIER_COLORS = {
    ConfidenceTier.HIGH: "red",
    ConfidenceTier.MEDIUM: "yellow",
    ConfidenceTier.LOW: "white",
    ConfidenceTier.NONE: "green",
}


def _tier_color(tier: ConfidenceTier) -> str:
    """Return a Rich color name for a confidence tier."""
    return _TIER_COLORS[tier]


def create_progress(description: str) -> Progress:
    """Create a configured Rich Progress bar."""
    return Progress(
        SpinnerColumn(),
        TextColumn(f"[bold blue]{description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
    )


def display_scan_results(report: ScanReport) -> None:
    """Display flagged messages, highest confidence first."""
    results = sorted(report.results, key=lambda r: (-r.confidence, r.mailbox))

    table = Table(title="Messages With Possible SSNs")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Mailbox")
    table.add_column("Subject")
    table.add_column("From")
    table.add_column("Sent")
    table.add_column("Confidence")

    for idx, result in enumerate(results, start=1):
        color = _tier_color(result.confidence)
        table.add_row(
            str(idx),
            result.mailbox,
            escape(result.subject),
            result.from_address,
            result.sent_at,
            f"[{color}]{result.confidence.label}[/{color}]",
        )

    console.print(table)

    counts = report.tier_counts()
    tiers = "  |  ".join(
        f"[{_tier_color(tier)}]{tier.label}: {count}[/{_tier_color(tier)}]"
        for tier, count in counts.items()
    )
    console.print(
        Panel(
            f"Mailboxes scanned: {report.mailboxes_scanned} "
            f"(skipped {report.mailboxes_skipped})  |  "
            f"Messages scanned: {report.messages_scanned} "
            f"(skipped {report.messages_skipped})\n"
            f"Flagged: {len(report.results)}  |  {tiers}",
            title="Summary",
        )
    )


def display_reviewed_rows(rows: list[ReviewedRow]) -> None:
    """Display the rows a reviewed file asks to delete."""
    table = Table(title="Reviewed Messages")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Mailbox")
    table.add_column("Subject")
    table.add_column("MessageId", style="dim")

    for idx, row in enumerate(rows, start=1):
        table.add_row(str(idx), row.mailbox, escape(row.subject), row.message_id)

    console.print(table)


def confirm_delete(rows: list[ReviewedRow]) -> bool:
    """Prompt the user to confirm deleting the reviewed messages."""
    mailboxes = sorted({row.mailbox for row in rows})

    lines = ["[bold]Messages in the following mailboxes will be deleted:[/bold]", ""]
    for mailbox in mailboxes:
        count = sum(1 for row in rows if row.mailbox == mailbox)
        lines.append(f"  - {mailbox} ({count} messages)")
    lines.append("")
    lines.append(f"[bold]Total messages to delete: {len(rows)}[/bold]")

    console.print(Panel("\n".join(lines), title="Confirm Delete"))

    answer = Prompt.ask('[bold red]Type "DELETE" to confirm[/bold red]', console=console)
    return answer == "DELETE"


def display_deletion_summary(summary: DeletionSummary) -> None:
    """Display where the audit log went and how many rows were processed."""
    console.print(
        Panel(
            f"[bold green]Processed {summary.processed} reviewed rows.[/bold green]\n"
            f"Audit log: {summary.log_path}",
            title="Done",
        )
    )
