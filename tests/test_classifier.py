"""Tests for the patterns and confidence classifier."""

import pytest

from ssn_sweeper.classifier import classify, classify_text
from ssn_sweeper.models import ConfidenceTier
from ssn_sweeper.patterns import FORMATTED_RE, RANDOMIZED_RE, TIER_RULES, UNFORMATTED_RE


def test_formatted_with_keyword_is_high():
    assert classify("Your SSN is 123-45-6789.") == ConfidenceTier.HIGH


def test_unformatted_with_keyword_is_medium():
    text = "Please send your social security number: 123456789"
    assert classify(text) == ConfidenceTier.MEDIUM


def test_space_separated_with_keyword_is_low():
    assert classify("SS# 123 45 6789") == ConfidenceTier.LOW


@pytest.mark.parametrize(
    "text",
    [
        "",
        "Invoice 123-45-6789 is attached.",
        "Tracking number 123456789",
        "Call 123 45 6789 tomorrow",
        "Nothing to see here",
    ],
)
def test_no_keyword_is_none(text):
    """Without a keyword, digits alone never flag a message."""
    assert classify(text) == ConfidenceTier.NONE


def test_keyword_without_number_is_none():
    assert classify("We never email your SSN.") == ConfidenceTier.NONE


def test_keyword_is_case_insensitive():
    assert classify("ssn 123-45-6789") == ConfidenceTier.HIGH
    assert classify("Social Security Number 123-45-6789") == ConfidenceTier.HIGH


def test_keyword_must_be_whole_word():
    """'ssn' inside another word does not count."""
    assert classify("Lessness 123-45-6789") == ConfidenceTier.NONE
    assert classify("classnote 123-45-6789") == ConfidenceTier.NONE
    assert classify("ssnumber 123-45-6789") == ConfidenceTier.NONE


def test_hash_keyword_directly_before_number():
    assert classify("Employee SS#123-45-6789") == ConfidenceTier.HIGH
    assert classify("Employee SS#123456789") == ConfidenceTier.MEDIUM
    assert classify("SS#987 65 4321") == ConfidenceTier.LOW


def test_keyword_and_number_may_be_far_apart():
    text = "SSN" + " filler" * 1000 + " 123-45-6789"
    assert classify(text) == ConfidenceTier.HIGH


def test_most_specific_pattern_wins():
    text = "SSN 123 45 6789 and also 123-45-6789 and 987654321"
    assert classify(text) == ConfidenceTier.HIGH


def test_first_keyword_is_authoritative():
    """The first keyword found decides; later keywords are not consulted."""
    result = classify_text("SSN and social security number: 123456789")
    assert result.keyword == "social security number"
    assert result.pattern == "unformatted"
    assert result.tier == ConfidenceTier.MEDIUM


def test_first_keyword_without_pattern_stops_search():
    result = classify_text("SSID: wifi-guest, no numbers here")
    assert result.tier == ConfidenceTier.NONE
    assert result.keyword == "ssid"
    assert result.pattern is None


def test_tier_rules_order():
    assert [rule.tier for rule in TIER_RULES] == [
        ConfidenceTier.HIGH,
        ConfidenceTier.MEDIUM,
        ConfidenceTier.LOW,
    ]


def test_patterns_respect_word_boundaries():
    assert not UNFORMATTED_RE.search("1234567890")
    assert not FORMATTED_RE.search("x123-45-6789")
    assert RANDOMIZED_RE.search("123.45.6789")
    assert RANDOMIZED_RE.search("123-456789")
    assert not RANDOMIZED_RE.search("123--45-6789")


def test_tiers_are_ordered():
    assert ConfidenceTier.NONE < ConfidenceTier.LOW < ConfidenceTier.MEDIUM < ConfidenceTier.HIGH
    assert ConfidenceTier.from_label("Medium") == ConfidenceTier.MEDIUM
    assert ConfidenceTier.HIGH.label == "High"
