"""
Result export

CSV rendering of a result list (Domain,Status,Timestamp) plus a plain
newline-separated list of domains with one status.
"""

import csv
import io
from datetime import datetime
from pathlib import Path
from typing import Iterable, Union

from .models import DomainResult, DomainStatus

CSV_HEADER = ["Domain", "Status", "Timestamp"]


def export_csv(results: Iterable[DomainResult]) -> str:
    """
    Render results as CSV with an ISO-8601 timestamp column.

    Every row, header included, ends with a newline.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for result in results:
        writer.writerow([result.domain, result.status.value, result.timestamp.isoformat()])
    return buffer.getvalue()


def parse_csv(text: str) -> list[tuple[str, DomainStatus, datetime]]:
    """
    Read back CSV produced by export_csv.

    Returns:
        List of (domain, status, timestamp) in file order

    Raises:
        ValueError: If the header or a row is not in the expected format
    """
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header != CSV_HEADER:
        raise ValueError(f"Unexpected CSV header: {header!r}")

    rows = []
    for line_num, row in enumerate(reader, start=2):
        if not row:
            continue
        if len(row) != 3:
            raise ValueError(f"Line {line_num}: expected 3 columns, got {len(row)}")
        domain, status, timestamp = row
        rows.append((domain, DomainStatus(status), datetime.fromisoformat(timestamp)))
    return rows


def write_csv(results: Iterable[DomainResult], path: Union[str, Path]) -> Path:
    """Write the CSV export to a file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        f.write(export_csv(results))
    return path


def export_domains(results: Iterable[DomainResult], status: Union[str, DomainStatus]) -> str:
    """
    List the domains that ended up with one status, one per line.

    Args:
        results: Result list
        status: "available" or "registered"
    """
    status = DomainStatus(status)
    return "\n".join(r.domain for r in results if r.status == status)
