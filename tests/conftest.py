"""Shared fixtures for tests."""

from __future__ import annotations

import csv

import pytest

from ssn_sweeper.models import FullMessage, MailUser, MessageSummary


class FakeSession:
    def __init__(self, authenticated: bool = True) -> None:
        self.is_authenticated = authenticated
        self.domain_wide = True


class FakeMailClient:
    """In-memory stand-in for GmailClient."""

    def __init__(self, mailboxes=None, failing_listings=(), failing_messages=(), failing_deletes=()):
        # mailboxes: {MailUser: [(MessageSummary, body), ...]}
        self.mailboxes = mailboxes or {}
        self.failing_listings = set(failing_listings)
        self.failing_messages = set(failing_messages)
        self.failing_deletes = set(failing_deletes)
        self.fetched: list[tuple[str, str]] = []
        self.deleted: list[tuple[str, str]] = []
        self.listed: list[str] = []

    def list_mail_enabled_users(self) -> list[MailUser]:
        return list(self.mailboxes)

    def list_messages(self, user_id: str, page_size: int) -> list[MessageSummary]:
        self.listed.append(user_id)
        if user_id in self.failing_listings:
            raise RuntimeError(f"mailbox {user_id} unavailable")
        for user, messages in self.mailboxes.items():
            if user.id == user_id:
                return [summary for summary, _ in messages][:page_size]
        return []

    def get_full_message(self, user_id: str, message_id: str) -> FullMessage:
        self.fetched.append((user_id, message_id))
        if message_id in self.failing_messages:
            raise RuntimeError(f"message {message_id} not found")
        for user, messages in self.mailboxes.items():
            if user.id != user_id:
                continue
            for summary, body in messages:
                if summary.id == message_id:
                    return FullMessage(id=message_id, body=body)
        raise KeyError(message_id)

    def delete_message(self, user_id: str, message_id: str) -> None:
        if message_id in self.failing_deletes:
            raise RuntimeError("Message not found")
        self.deleted.append((user_id, message_id))


@pytest.fixture
def alice() -> MailUser:
    return MailUser(id="1001", mail="alice@example.com")


@pytest.fixture
def bob() -> MailUser:
    return MailUser(id="1002", mail="bob@example.com")


@pytest.fixture
def mailboxes(alice: MailUser, bob: MailUser) -> dict:
    return {
        alice: [
            (
                MessageSummary(
                    id="a1",
                    subject="New hire paperwork",
                    sent_at="2024-03-01T09:00:00Z",
                    from_address="hr@example.com",
                ),
                "<p>Employee SSN:</p><b>123-45-6789</b>",
            ),
            (
                MessageSummary(id="a2", subject="Lunch?", from_address="carol@example.com"),
                "<div>Pizza at noon, room 123</div>",
            ),
        ],
        bob: [
            (
                MessageSummary(id="b1", subject="Benefits form", from_address="benefits@example.com"),
                "Please confirm your social security number\r\n987 65 4321 thanks",
            ),
        ],
    }


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def write_reviewed(tmp_path):
    """Write a reviewed CSV with the given rows and return its path."""

    def _write(rows, fieldnames=("Mailbox", "UserId", "Subject", "Confidence", "MessageId")):
        path = tmp_path / "reviewed.csv"
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=list(fieldnames))
            writer.writeheader()
            for row in rows:
                writer.writerow({k: row.get(k, "") for k in fieldnames})
        return path

    return _write


@pytest.fixture
def make_client():
    """Build a FakeMailClient."""
    return FakeMailClient


@pytest.fixture
def unauthenticated_session() -> FakeSession:
    return FakeSession(authenticated=False)
