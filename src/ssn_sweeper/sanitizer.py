"""Markup stripping for message bodies."""

import re

_TAG_RE = re.compile(r"<[^>]+>")


def sanitize(raw: str) -> str:
    """Replace every ``<...>`` tag with a single space, leaving the rest untouched."""
    if not raw:
        return ""
    return _TAG_RE.sub(" ", raw)
