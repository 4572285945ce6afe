"""Confidence classification of sanitized message text."""

from __future__ import annotations

from dataclasses import dataclass

from .models import ConfidenceTier
from .patterns import KEYWORD_MATCHERS, TIER_RULES


@dataclass(frozen=True)
class Classification:
    """Tier plus the keyword and pattern that produced it."""

    tier: ConfidenceTier
    keyword: str | None = None
    pattern: str | None = None


NO_MATCH = Classification(ConfidenceTier.NONE)


def classify_text(text: str) -> Classification:
    """Classify text by keyword co-occurrence with an SSN-shaped number.

    The first keyword (in ``SSN_KEYWORDS`` order) present anywhere in the
    text is authoritative: the patterns are tried most specific first
    against the whole text and the first hit gives the tier.  When that
    keyword's text holds no pattern at all, the result is ``NONE`` and no
    further keywords are tried.  Keyword and number may be any distance
    apart.
    """
    if not text:
        return NO_MATCH

    for keyword, matcher in KEYWORD_MATCHERS:
        if not matcher.search(text):
            continue
        for rule in TIER_RULES:
            if rule.pattern.search(text):
                return Classification(rule.tier, keyword=keyword, pattern=rule.name)
        return Classification(ConfidenceTier.NONE, keyword=keyword)

    return NO_MATCH


def classify(text: str) -> ConfidenceTier:
    """Return the confidence tier for sanitized text."""
    return classify_text(text).tier
