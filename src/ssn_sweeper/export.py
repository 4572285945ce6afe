"""Export scan results to CSV or JSON."""

import csv
import json

from .constants import REPORT_COLUMNS
from .models import ScanResult


def export_results(results: list[ScanResult], format: str, output_path: str) -> None:
    """Write flagged messages to a file for review.

    Args:
        results: Flagged messages, in scan order.
        format: Output format, either 'csv' or 'json'.
        output_path: Path to write the output file.
    """
    rows = [result.to_row() for result in results]

    if format == "csv":
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=REPORT_COLUMNS)
            writer.writeheader()
            writer.writerows(rows)
    elif format == "json":
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(rows, f, indent=2)
    else:
        raise ValueError(f"Unsupported export format: {format}")

    print(f"Results saved to {output_path}")
