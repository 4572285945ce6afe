"""SSN-shaped patterns and keyword matchers.

Patterns are listed most specific first; that order is the tier order used
by the classifier.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .constants import SSN_KEYWORDS
from .models import ConfidenceTier

# 123-45-6789
FORMATTED_RE = re.compile(r"\b\d{3}-\d{2}-\d{4}\b")

# 123456789
UNFORMATTED_RE = re.compile(r"\b\d{9}\b")

# 123 45 6789, 123.45.6789, 123-456789, ...
RANDOMIZED_RE = re.compile(r"\b\d{3}[ .\-]?\d{2}[ .\-]?\d{4}\b")


@dataclass(frozen=True)
class TierRule:
    """A pattern and the tier it earns when it matches."""

    name: str
    pattern: re.Pattern
    tier: ConfidenceTier


TIER_RULES: tuple[TierRule, ...] = (
    TierRule("formatted", FORMATTED_RE, ConfidenceTier.HIGH),
    TierRule("unformatted", UNFORMATTED_RE, ConfidenceTier.MEDIUM),
    TierRule("randomized", RANDOMIZED_RE, ConfidenceTier.LOW),
)


def _keyword_re(keyword: str) -> re.Pattern:
    # Only word-character ends need a boundary; "SS#123-45-6789" must match.
    head = r"(?<!\w)" if keyword[0].isalnum() else ""
    tail = r"(?!\w)" if keyword[-1].isalnum() else ""
    return re.compile(head + re.escape(keyword) + tail, re.IGNORECASE)


KEYWORD_MATCHERS: tuple[tuple[str, re.Pattern], ...] = tuple(
    (keyword, _keyword_re(keyword)) for keyword in SSN_KEYWORDS
)
