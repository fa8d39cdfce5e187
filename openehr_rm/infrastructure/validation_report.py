"""Validation Report Generator.

This module turns a list of violations into a report for review and
archiving: summary counts by owning type and by top-level field, plus the
full violation list. Reports can be saved as JSON or loaded into a pandas
DataFrame for analysis alongside other batch results.
"""

import json
import re
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from openehr_rm.domain.base import Violation
from openehr_rm.domain.ports import Result

REPORT_COLUMNS = ["model", "path", "message", "recommendation"]

_INDEX_SUFFIX = re.compile(r"\[\d+\]$")


def top_level_segment(path: str) -> str:
    """Return the first field of a ``$``-rooted path (``$`` for the root itself)."""
    rest = path[1:] if path.startswith("$") else path
    rest = rest.lstrip(".")
    if not rest:
        return "$"
    return _INDEX_SUFFIX.sub("", rest.split(".", 1)[0])


def generate_validation_report(
    violations: Iterable[Violation],
    output_path: Optional[str] = None,
    source: Optional[str] = None
) -> Result[dict]:
    """Generate a validation report from a list of violations.

    Parameters:
        violations: Violations returned by the validator
        output_path: Optional path to save report as JSON file
        source: Optional label of the validated document (file name, id)

    Returns:
        Result[dict]: Report dictionary or error
    """
    items = list(violations)
    report = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "source": source,
        "valid": not items,
        "summary": {
            "total_violations": len(items),
            "violations_by_model": dict(Counter(v.model for v in items)),
            "violations_by_field": dict(Counter(top_level_segment(v.path) for v in items)),
        },
        "violations": [v.to_dict() for v in items],
    }

    if output_path:
        try:
            output_file = Path(output_path)
            output_file.parent.mkdir(parents=True, exist_ok=True)

            with open(output_file, 'w', encoding='utf-8') as f:
                json.dump(report, f, indent=2, default=str)

            return Result.success_result({
                **report,
                "saved_to": str(output_file)
            })
        except OSError as e:
            return Result.failure_result(
                ValueError(f"Failed to save report to {output_path}: {str(e)}"),
                error_type="ValueError"
            )

    return Result.success_result(report)


def violations_to_dataframe(violations: Iterable[Violation]) -> pd.DataFrame:
    """Return violations as a DataFrame with the four report columns."""
    return pd.DataFrame([v.to_dict() for v in violations], columns=REPORT_COLUMNS)


def print_validation_report_summary(report: dict) -> None:
    """Print a human-readable summary of the validation report.

    Parameters:
        report: Validation report dictionary
    """
    print("=" * 70)
    print("VALIDATION REPORT - Reference Model Constraints")
    print("=" * 70)

    summary = report.get('summary', {})
    print(f"\nTotal Violations: {summary.get('total_violations', 0)}")

    if report.get('source'):
        print(f"Source: {report['source']}")

    if summary.get('total_violations', 0) == 0:
        print("\nNo violations found.")
    else:
        print("\nViolations by Model:")
        for model, count in sorted(summary.get('violations_by_model', {}).items()):
            print(f"  {model}: {count}")

        print("\nViolations by Field:")
        for field, count in sorted(summary.get('violations_by_field', {}).items()):
            print(f"  {field}: {count}")

        print("\nDetails:")
        for violation in report.get('violations', []):
            print(f"  {violation['path']}: {violation['message']}")
            if violation.get('recommendation'):
                print(f"    -> {violation['recommendation']}")

    print("\n" + "=" * 70)
