"""Gmail and Directory API calls behind the mail collaborator interface."""

from __future__ import annotations

import base64
import re
from datetime import datetime, timezone

from googleapiclient.errors import HttpError
from googleapiclient.http import BatchHttpRequest
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from ssn_sweeper.auth import Session
from ssn_sweeper.constants import BATCH_SIZE, DIRECTORY_PAGE_SIZE, METADATA_HEADERS
from ssn_sweeper.display import console
from ssn_sweeper.models import FullMessage, MailUser, MessageSummary

_FROM_RE = re.compile(r"^(.*?)\s*<([^>]+)>$")


def _is_retryable_http_error(exc: BaseException) -> bool:
    return isinstance(exc, HttpError) and exc.resp.status in (429, 500, 503)


def _parse_from_header(from_value: str) -> tuple[str, str]:
    """Parse a From header into (display name, email address).

    Handles formats like:
      "John Doe <john@example.com>" -> ("John Doe", "john@example.com")
      "<john@example.com>"          -> ("", "john@example.com")
      "john@example.com"            -> ("", "john@example.com")
    """
    if not from_value:
        return ("", "")
    m = _FROM_RE.match(from_value.strip())
    if m:
        name = m.group(1).strip().strip('"').strip("'")
        return (name, m.group(2).strip())
    email = from_value.strip().strip("<>")
    return ("", email)


def _internal_date_to_iso(internal_date: str | int | None) -> str:
    """Render Gmail's millisecond epoch ``internalDate`` as ISO-8601 UTC."""
    if not internal_date:
        return ""
    moment = datetime.fromtimestamp(int(internal_date) / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def _decode_part(data: str) -> str:
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")


def _find_part(payload: dict, mime_type: str) -> str | None:
    if payload.get("mimeType") == mime_type and payload.get("body", {}).get("data"):
        return _decode_part(payload["body"]["data"])
    for part in payload.get("parts", []):
        found = _find_part(part, mime_type)
        if found is not None:
            return found
    return None


def extract_body(payload: dict) -> str:
    """Return the message body, preferring the HTML part over plain text."""
    for mime_type in ("text/html", "text/plain"):
        body = _find_part(payload, mime_type)
        if body is not None:
            return body
    data = payload.get("body", {}).get("data")
    return _decode_part(data) if data else ""


@retry(
    retry=retry_if_exception(_is_retryable_http_error),
    wait=wait_exponential(multiplier=1, min=1, max=60),
    stop=stop_after_attempt(5),
    reraise=True,
)
def _execute_batch(batch: BatchHttpRequest) -> None:
    batch.execute()


class GmailClient:
    """Mail and directory operations for one authenticated session."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self._addresses: dict[str, str] = {}

    def _mailbox(self, user_id: str) -> str:
        """Resolve a user id to the address Gmail calls are made as."""
        if not self.session.domain_wide or "@" in user_id:
            return user_id
        if user_id not in self._addresses:
            user = self.session.directory().users().get(userKey=user_id).execute()
            self._addresses[user_id] = user["primaryEmail"]
        return self._addresses[user_id]

    def _gmail(self, user_id: str):
        return self.session.gmail(self._mailbox(user_id))

    # --- collaborator interface ---

    def list_mail_enabled_users(self) -> list[MailUser]:
        """List every active user with a mailbox."""
        if not self.session.domain_wide:
            profile = self.session.gmail().users().getProfile(userId="me").execute()
            address = profile["emailAddress"]
            return [MailUser(id=address, mail=address)]

        users: list[MailUser] = []
        page_token: str | None = None

        while True:
            kwargs: dict = {
                "customer": "my_customer",
                "maxResults": DIRECTORY_PAGE_SIZE,
                "orderBy": "email",
            }
            if page_token:
                kwargs["pageToken"] = page_token

            resp = self.session.directory().users().list(**kwargs).execute()
            for user in resp.get("users", []):
                if user.get("suspended") or not user.get("isMailboxSetup"):
                    continue
                users.append(MailUser(id=user["id"], mail=user["primaryEmail"]))
                self._addresses[user["id"]] = user["primaryEmail"]

            page_token = resp.get("nextPageToken")
            if not page_token:
                break

        return users

    def list_messages(self, user_id: str, page_size: int) -> list[MessageSummary]:
        """List up to ``page_size`` of the newest messages with their headers."""
        service = self._gmail(user_id)
        mailbox = self._mailbox(user_id)
        resp = (
            service.users()
            .messages()
            .list(userId=mailbox, maxResults=page_size, fields="messages/id")
            .execute()
        )
        ids = [msg["id"] for msg in resp.get("messages", [])][:page_size]
        if not ids:
            return []

        found: dict[str, MessageSummary] = {}

        def _make_callback(msg_id: str):
            def _cb(request_id, response, exception):
                if exception is not None:
                    console.print(f"  [yellow]Could not read headers of {msg_id}: {exception}[/yellow]")
                    return
                headers = {}
                for h in response.get("payload", {}).get("headers", []):
                    headers[h["name"]] = h["value"]

                _, email = _parse_from_header(headers.get("From", ""))
                found[msg_id] = MessageSummary(
                    id=msg_id,
                    subject=headers.get("Subject", ""),
                    sent_at=_internal_date_to_iso(response.get("internalDate")),
                    from_address=email.lower(),
                )

            return _cb

        for start in range(0, len(ids), BATCH_SIZE):
            batch = service.new_batch_http_request()
            for msg_id in ids[start : start + BATCH_SIZE]:
                batch.add(
                    service.users().messages().get(
                        userId=mailbox,
                        id=msg_id,
                        format="metadata",
                        metadataHeaders=METADATA_HEADERS,
                    ),
                    callback=_make_callback(msg_id),
                )
            _execute_batch(batch)

        return [found[msg_id] for msg_id in ids if msg_id in found]

    def get_full_message(self, user_id: str, message_id: str) -> FullMessage:
        """Fetch a message with its full body."""
        msg = (
            self._gmail(user_id)
            .users()
            .messages()
            .get(userId=self._mailbox(user_id), id=message_id, format="full")
            .execute()
        )
        return FullMessage(id=message_id, body=extract_body(msg.get("payload", {})))

    def delete_message(self, user_id: str, message_id: str) -> None:
        """Move a message to the mailbox's trash. Raises on failure."""
        (
            self._gmail(user_id)
            .users()
            .messages()
            .trash(userId=self._mailbox(user_id), id=message_id)
            .execute()
        )
