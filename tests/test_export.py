"""Tests for the report export."""

import csv
import json

import pytest

from ssn_sweeper.constants import REPORT_COLUMNS
from ssn_sweeper.deleter import load_reviewed_rows
from ssn_sweeper.export import export_results
from ssn_sweeper.models import ConfidenceTier, ScanResult


@pytest.fixture
def results():
    return [
        ScanResult(
            mailbox="alice@example.com",
            user_id="1001",
            subject="New hire, paperwork",
            confidence=ConfidenceTier.HIGH,
            from_address="hr@example.com",
            sent_at="2024-03-01T09:00:00Z",
            message_id="a1",
            match_preview="SSN: 123-45-6789\n---\nSSN 987-65-4321",
        ),
        ScanResult(
            mailbox="bob@example.com",
            user_id="1002",
            subject="Benefits",
            confidence=ConfidenceTier.LOW,
            from_address="benefits@example.com",
            sent_at="2024-03-02T10:00:00Z",
            message_id="b1",
        ),
    ]


def test_csv_columns_and_rows(results, tmp_path):
    out = tmp_path / "report.csv"
    export_results(results, format="csv", output_path=str(out))

    with open(out, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        assert reader.fieldnames == REPORT_COLUMNS
        rows = list(reader)

    assert len(rows) == 2
    assert rows[0]["Confidence"] == "High"
    assert rows[0]["Subject"] == "New hire, paperwork"
    assert rows[0]["MatchPreview"] == "SSN: 123-45-6789\n---\nSSN 987-65-4321"
    assert rows[1]["Confidence"] == "Low"


def test_exported_csv_is_valid_reviewed_input(results, tmp_path):
    out = tmp_path / "report.csv"
    export_results(results, format="csv", output_path=str(out))
    reviewed = load_reviewed_rows(out)
    assert [(r.user_id, r.message_id) for r in reviewed] == [("1001", "a1"), ("1002", "b1")]


def test_json_export(results, tmp_path):
    out = tmp_path / "report.json"
    export_results(results, format="json", output_path=str(out))
    data = json.loads(out.read_text())
    assert data[1]["Mailbox"] == "bob@example.com"
    assert set(data[0]) == set(REPORT_COLUMNS)


def test_unknown_format(results, tmp_path):
    with pytest.raises(ValueError):
        export_results(results, format="xml", output_path=str(tmp_path / "x"))
