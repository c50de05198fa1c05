"""
Export (CSV / JSON)
===================

CSV export walks the report through the same column list the tables use, so
the header, column order and money formatting stay in one place
(`columns.py`).

- No breakdown: one line per primary row.
- With a breakdown: one line per breakdown entry. The primary key column comes
  from the primary row; every other column comes from the breakdown entry.

JSON export writes the whole ReportData (all three views and every
breakdown), which is handy for programs rather than spreadsheets.
"""

from __future__ import annotations

import csv
import io
import json
import os
import re
from datetime import date
from typing import Any, Dict, List, Optional

from .columns import get_columns_for_view
from .config import CSV_ENCODING
from .logger import log
from .models import BREAKDOWN_ATTRS, DIMENSIONS, FEE_FIELDS, AggregateBucket, ReportData

_UNSAFE_FILENAME_CHARS = re.compile(r'[/\\:*?"<>|\x00-\x1f]')


def to_csv(report: ReportData, primary: str, breakdown: Optional[str] = None) -> str:
    """Serialize one view of the report as CSV text (lines joined by '\\n')."""
    has_breakdown = breakdown is not None
    columns = get_columns_for_view(primary, has_breakdown, breakdown)

    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerow([c.label for c in columns])
    key_col, rest = columns[0], columns[1:]

    for row in report.rows_for(primary):
        entries = row.breakdown(breakdown) if has_breakdown else None
        if entries:
            for entry in entries:
                w.writerow([key_col.csv_value(row)] + [c.csv_value(entry) for c in rest])
        elif has_breakdown:
            # Only reachable when no record carried the breakdown dimension.
            w.writerow([key_col.csv_value(row), ""] + [c.csv_value(row) for c in rest[1:]])
        else:
            w.writerow([c.csv_value(row) for c in columns])

    return buf.getvalue().rstrip("\n")


def export_filename(event_name: str, on: Optional[date] = None) -> str:
    """Download name for a CSV export: '{event_name}_{YYYY-MM-DD}.csv'.

    Path separators and characters not allowed in file names become '_',
    so the result is always a single flat file name.
    """
    on = on or date.today()
    safe_name = _UNSAFE_FILENAME_CHARS.sub("_", event_name)
    return f"{safe_name}_{on.isoformat()}.csv"


def write_csv(report: ReportData, path: str, primary: str, breakdown: Optional[str] = None) -> str:
    """Write `to_csv` output to a file and return the path."""
    text = to_csv(report, primary, breakdown)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", newline="", encoding=CSV_ENCODING) as f:
        f.write(text)
    log.info("Exported CSV (%s view%s) to %s", primary,
             f", by {breakdown}" if breakdown else "", path)
    return path


# -----------------------------
# JSON
# -----------------------------

def bucket_to_dict(bucket: AggregateBucket) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        bucket.dimension: bucket.key,
        "total_paid": bucket.total_paid,
        "valid_count": bucket.valid_count,
        "cancelled_count": bucket.cancelled_count,
    }
    for name in FEE_FIELDS:
        out[name] = getattr(bucket.fees, name)
    for d in DIMENSIONS:
        entries = getattr(bucket, BREAKDOWN_ATTRS[d], None)
        if entries is not None:
            out[BREAKDOWN_ATTRS[d]] = [bucket_to_dict(e) for e in entries]
    return out


def report_to_dict(report: ReportData) -> Dict[str, Any]:
    def _rows(rows) -> List[Dict[str, Any]]:
        return [bucket_to_dict(r) for r in rows]

    return {
        "event_name": report.event_name,
        "rows": _rows(report.rows),
        "gateway_rows": _rows(report.gateway_rows),
        "sales_channel_rows": _rows(report.sales_channel_rows),
    }


def write_json(report: ReportData, path: str) -> str:
    """Export the full report (all views, all breakdowns) to a JSON file."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(report_to_dict(report), f, ensure_ascii=False, indent=2)
    log.info("Exported JSON to %s", path)
    return path
