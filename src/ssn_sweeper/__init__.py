"""Find and remove U.S. Social Security Numbers in mailboxes."""

__version__ = "0.1.0"
