"""Readable context around SSN-shaped numbers."""

from __future__ import annotations

import re

from .constants import CONTEXT_SEPARATOR, CONTEXT_WINDOW
from .patterns import RANDOMIZED_RE

_NEWLINES_RE = re.compile(r"[\r\n]+")


def extract_context(text: str, window: int = CONTEXT_WINDOW) -> str:
    """Return the text around every loosely formatted SSN-shaped number.

    Each snippet runs from ``window`` characters before the match to
    ``window`` characters after it, clipped to the text.  Line breaks become
    single spaces and snippets are joined by a ``---`` line.  Only the
    loose pattern is searched, whatever pattern set the tier, so the
    result can be empty for a classified message.
    """
    snippets: list[str] = []
    for match in RANDOMIZED_RE.finditer(text):
        start = max(0, match.start() - window)
        end = min(len(text), match.start() - window + window * 2 + len(match.group()))
        snippets.append(_NEWLINES_RE.sub(" ", text[start:end]))
    return CONTEXT_SEPARATOR.join(snippets)
