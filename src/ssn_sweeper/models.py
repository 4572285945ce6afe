"""Data models for SSN Sweeper."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from pathlib import Path

from .constants import (
    CONTEXT_WINDOW,
    FETCH_DELAY,
    LOG_DELETED_LINE,
    LOG_FAILED_LINE,
    LOG_TIMESTAMP_FORMAT,
    PAGE_SIZE,
)


class ConfidenceTier(IntEnum):
    """How strongly a message looks like it carries an SSN."""

    NONE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_label(cls, value: str) -> ConfidenceTier:
        return cls[value.strip().upper()]


@dataclass(frozen=True)
class MailUser:
    """A mailbox-bearing user from the directory."""

    id: str
    mail: str


@dataclass(frozen=True)
class MessageSummary:
    """Listing-level fields of a single message."""

    id: str
    subject: str = ""
    sent_at: str = ""  # ISO-8601 UTC
    from_address: str = ""


@dataclass(frozen=True)
class FullMessage:
    """Body of a message as delivered, markup included."""

    id: str
    body: str = ""


@dataclass(frozen=True)
class ScanResult:
    """One flagged message, the unit exported for review."""

    mailbox: str
    user_id: str
    subject: str
    confidence: ConfidenceTier
    from_address: str
    sent_at: str
    message_id: str
    match_preview: str = ""

    def to_row(self) -> dict[str, str]:
        return {
            "Mailbox": self.mailbox,
            "UserId": self.user_id,
            "Subject": self.subject,
            "Confidence": self.confidence.label,
            "From": self.from_address,
            "SentDateTime": self.sent_at,
            "MessageId": self.message_id,
            "MatchPreview": self.match_preview,
        }


@dataclass
class ScanReport:
    """Result of a scan run across mailboxes."""

    results: list[ScanResult] = field(default_factory=list)
    mailboxes_scanned: int = 0
    mailboxes_skipped: int = 0
    messages_scanned: int = 0
    messages_skipped: int = 0
    scan_date: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def tier_counts(self) -> dict[ConfidenceTier, int]:
        counts = {tier: 0 for tier in (ConfidenceTier.HIGH, ConfidenceTier.MEDIUM, ConfidenceTier.LOW)}
        for result in self.results:
            counts[result.confidence] += 1
        return counts


@dataclass
class ScanSettings:
    """Tunables for a scan run."""

    page_size: int = PAGE_SIZE
    fetch_delay: float = FETCH_DELAY
    context_window: int = CONTEXT_WINDOW
    only_mailboxes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ReviewedRow:
    """A scan row the reviewer kept for deletion."""

    user_id: str
    message_id: str
    subject: str
    mailbox: str


@dataclass(frozen=True)
class DeletionLogEntry:
    """Outcome of processing one reviewed row."""

    timestamp: datetime
    deleted: bool
    subject: str
    mailbox: str
    message_id: str
    error: str = ""

    @property
    def outcome(self) -> str:
        return "Deleted" if self.deleted else "Failed"

    def format_line(self) -> str:
        template = LOG_DELETED_LINE if self.deleted else LOG_FAILED_LINE
        return template.format(
            timestamp=self.timestamp.astimezone(timezone.utc).strftime(LOG_TIMESTAMP_FORMAT),
            subject=self.subject,
            mailbox=self.mailbox,
            message_id=self.message_id,
            error=self.error,
        )


@dataclass
class DeletionSummary:
    """What a deletion run produced."""

    log_path: Path
    entries: list[DeletionLogEntry] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return len(self.entries)
