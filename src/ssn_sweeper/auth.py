"""Authentication helpers for the Gmail and Directory APIs."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import Resource, build

from ssn_sweeper.constants import (
    ADMIN_ENV_VAR,
    CONFIG_DIR,
    CREDENTIALS_PATH,
    DIRECTORY_SCOPES,
    GMAIL_SCOPES,
    SERVICE_ACCOUNT_PATH,
    TOKEN_PATH,
)


@dataclass
class Session:
    """An authenticated connection to Google Workspace.

    ``domain_wide`` sessions hold service-account credentials with
    domain-wide delegation and can act on every mailbox in the domain;
    otherwise the session is a single user's OAuth token and only that
    mailbox is reachable.
    """

    credentials: object
    domain_wide: bool = False
    admin: str | None = None
    _services: dict[str, Resource] = field(default_factory=dict, repr=False)

    @property
    def is_authenticated(self) -> bool:
        return self.credentials is not None

    def gmail(self, mailbox: str | None = None) -> Resource:
        """Return a Gmail service acting as ``mailbox`` (or the token owner)."""
        key = mailbox if self.domain_wide else "me"
        if key not in self._services:
            creds = self.credentials
            if self.domain_wide:
                creds = creds.with_subject(mailbox)
            self._services[key] = build("gmail", "v1", credentials=creds, cache_discovery=False)
        return self._services[key]

    def directory(self) -> Resource:
        """Return an Admin SDK Directory service acting as the admin."""
        if not self.domain_wide:
            raise RuntimeError("The directory is only available to domain-wide sessions.")
        if "directory" not in self._services:
            creds = self.credentials.with_subject(self.admin)
            self._services["directory"] = build(
                "admin", "directory_v1", credentials=creds, cache_discovery=False
            )
        return self._services["directory"]


def _domain_wide_session(admin: str) -> Session:
    creds = service_account.Credentials.from_service_account_file(
        str(SERVICE_ACCOUNT_PATH), scopes=GMAIL_SCOPES + DIRECTORY_SCOPES
    )
    return Session(credentials=creds, domain_wide=True, admin=admin)


def _user_session() -> Session:
    creds: Credentials | None = None

    if TOKEN_PATH.exists():
        creds = Credentials.from_authorized_user_file(str(TOKEN_PATH), GMAIL_SCOPES)

    if creds and creds.expired and creds.refresh_token:
        creds.refresh(Request())
    elif not creds or not creds.valid:
        if not CREDENTIALS_PATH.exists():
            raise FileNotFoundError(
                f"Credentials file not found at {CREDENTIALS_PATH}.\n"
                "Download your OAuth client credentials from the Google Cloud Console "
                "and save them as:\n"
                f"  {CREDENTIALS_PATH}\n"
                "or, to scan a whole domain, save a service-account key with "
                "domain-wide delegation as:\n"
                f"  {SERVICE_ACCOUNT_PATH}"
            )
        flow = InstalledAppFlow.from_client_secrets_file(str(CREDENTIALS_PATH), GMAIL_SCOPES)
        creds = flow.run_local_server(port=0)

    TOKEN_PATH.write_text(creds.to_json())

    return Session(credentials=creds)


def get_session(admin: str | None = None) -> Session:
    """Establish the session used for the rest of the run.

    A service-account key at SERVICE_ACCOUNT_PATH together with an admin
    address (argument or the SSN_SWEEPER_ADMIN environment variable) gives
    a domain-wide session.  Otherwise the cached OAuth token is loaded,
    refreshed, or obtained through the browser flow.
    """
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    admin = admin or os.environ.get(ADMIN_ENV_VAR)
    if SERVICE_ACCOUNT_PATH.exists():
        if not admin:
            raise FileNotFoundError(
                f"A service-account key was found at {SERVICE_ACCOUNT_PATH} but no admin "
                f"address was given. Pass --admin or set {ADMIN_ENV_VAR}."
            )
        return _domain_wide_session(admin)

    return _user_session()


def check_auth(admin: str | None = None) -> bool:
    """Test whether authentication is working.

    Returns True when the APIs can be reached, False otherwise.
    Prints human-readable status messages.
    """
    try:
        session = get_session(admin)
        if session.domain_wide:
            session.directory().users().get(userKey=session.admin).execute()
            print(f"Authenticated for the domain of {session.admin}")
        else:
            profile = session.gmail().users().getProfile(userId="me").execute()
            print(f"Authenticated as {profile['emailAddress']}")
        return True
    except Exception as exc:  # noqa: BLE001
        print(f"Authentication failed: {exc}")
        return False
