"""Constants for SSN Sweeper."""

from pathlib import Path

# --- Config paths ---
CONFIG_DIR = Path.home() / ".ssn-sweeper"
CREDENTIALS_PATH = CONFIG_DIR / "credentials.json"
TOKEN_PATH = CONFIG_DIR / "token.json"
SERVICE_ACCOUNT_PATH = CONFIG_DIR / "service_account.json"
ADMIN_ENV_VAR = "SSN_SWEEPER_ADMIN"

# --- Google APIs ---
GMAIL_SCOPES = ["https://www.googleapis.com/auth/gmail.modify"]
DIRECTORY_SCOPES = ["https://www.googleapis.com/auth/admin.directory.user.readonly"]
PAGE_SIZE = 100  # messages listed per mailbox
BATCH_SIZE = 50  # requests per BatchHttpRequest
DIRECTORY_PAGE_SIZE = 500  # users per directory page
METADATA_HEADERS = ["From", "Subject", "Date"]

# --- Rate limiting (seconds) ---
FETCH_DELAY = 0.1  # after each full-message fetch
DELETE_DELAY = 0.1  # after each reviewed row

# --- Detection ---
CONTEXT_WINDOW = 150  # characters either side of a match
CONTEXT_SEPARATOR = "\n---\n"

# Checked in this order; the first one found in a message decides its tier.
SSN_KEYWORDS = [
    "social security number",
    "social security no",
    "social security #",
    "social security",
    "social sec",
    "soc sec",
    "ssn",
    "ss#",
    "ss #",
    "ss no",
    "ss number",
    "ssid",
]

# --- Report / audit log ---
REPORT_COLUMNS = [
    "Mailbox",
    "UserId",
    "Subject",
    "Confidence",
    "From",
    "SentDateTime",
    "MessageId",
    "MatchPreview",
]
REVIEWED_REQUIRED_COLUMNS = ["UserId", "MessageId", "Subject", "Mailbox"]
LOG_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
LOG_DELETED_LINE = "[{timestamp}] Deleted: '{subject}' from {mailbox} (MessageId: {message_id})"
LOG_FAILED_LINE = "[{timestamp}] FAILED: '{subject}' from {mailbox} - {error}"
