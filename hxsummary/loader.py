"""
Attendee export loader (CSV/XLSX -> AttendeeRecord list)
========================================================

This module reads the ticketing platform's attendee export and converts each
row into an `AttendeeRecord`. Valid and cancelled tickets come as two
separate exports; the caller says which one a file is.

Key ideas:
- Columns are matched by exact header first, then by a normalized header
  (lowercase letters and digits only), because exports are not always
  consistent about spacing and case.
- Money cells may hold currency text ("$1,234.50", "AUD 12"); everything
  except digits, '.' and '-' is stripped, and anything unreadable becomes 0.
- Rows without an event name or a ticket type are dropped.
"""

from __future__ import annotations

import os
import re
from typing import List, Optional, Tuple

import pandas as pd

from .config import (
    EVENT_DATE_COLUMN,
    EVENT_NAME_COLUMN,
    EVENT_TIME_COLUMN,
    FEE_COLUMNS,
    GATEWAY_COLUMN,
    PAID_COLUMN,
    SALES_CHANNEL_COLUMN,
    TICKET_TYPE_COLUMN,
)
from .logger import log
from .models import STATUS_CANCELLED, STATUS_VALID, AttendeeRecord, FeeTotals

_NUMBER_RE = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def parse_numeric(x) -> float:
    """Convert a money/number cell to float, returning 0.0 if missing/invalid."""
    if x is None:
        return 0.0
    if not isinstance(x, str) and pd.isna(x):
        return 0.0
    cleaned = re.sub(r"[^0-9.\-]", "", str(x))
    m = _NUMBER_RE.match(cleaned)
    return float(m.group(0)) if m else 0.0


def _to_str(x) -> str:
    if x is None: return ""
    if not isinstance(x, str) and pd.isna(x): return ""
    return str(x).strip()


def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())


def _find_col(df: pd.DataFrame, name: str) -> Optional[str]:
    cols = list(df.columns)
    if name in cols:
        return name
    norm_map = {_norm(c): c for c in cols}
    return norm_map.get(_norm(name))


def _col(df: pd.DataFrame, name: str) -> str:
    found = _find_col(df, name)
    if found is None:
        raise KeyError(f"Missing required column {name!r}. Available={list(df.columns)}")
    return found


def read_table(path: str) -> pd.DataFrame:
    """Read a .csv or .xlsx export with every cell as text."""
    ext = os.path.splitext(path)[1].lower()
    if ext == ".csv":
        df = pd.read_csv(path, dtype=str, keep_default_na=False, skip_blank_lines=True)
    elif ext in (".xlsx", ".xlsm"):
        df = pd.read_excel(path, dtype=str, engine="openpyxl").fillna("")
    else:
        raise ValueError(f"Unsupported file type {ext!r}: expected .csv or .xlsx")
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)
    return df


def records_from_frame(df: pd.DataFrame, status: str) -> List[AttendeeRecord]:
    """Convert an export DataFrame into AttendeeRecords with the given status."""
    if status not in (STATUS_VALID, STATUS_CANCELLED):
        raise ValueError(f"status must be {STATUS_VALID!r} or {STATUS_CANCELLED!r}")

    event_col = _col(df, EVENT_NAME_COLUMN)
    ticket_col = _col(df, TICKET_TYPE_COLUMN)
    paid_col = _find_col(df, PAID_COLUMN)
    date_col = _find_col(df, EVENT_DATE_COLUMN)
    time_col = _find_col(df, EVENT_TIME_COLUMN)
    gateway_col = _find_col(df, GATEWAY_COLUMN)
    channel_col = _find_col(df, SALES_CHANNEL_COLUMN)
    fee_cols = {name: _find_col(df, header) for name, header in FEE_COLUMNS.items()}

    def _cell(row, col):
        return row[col] if col else None

    records: List[AttendeeRecord] = []
    dropped = 0
    for _, row in df.iterrows():
        event_name = _to_str(row[event_col])
        ticket_type = _to_str(row[ticket_col])
        if not event_name or not ticket_type:
            dropped += 1
            continue

        when = f"{_to_str(_cell(row, date_col))} {_to_str(_cell(row, time_col))}".strip()
        fees = FeeTotals(**{name: parse_numeric(_cell(row, col)) for name, col in fee_cols.items()})

        records.append(AttendeeRecord(
            event_name=event_name,
            ticket_type=ticket_type,
            paid=parse_numeric(_cell(row, paid_col)),
            status=status,
            event_date_time=when or None,
            gateway=_to_str(_cell(row, gateway_col)) or None,
            sales_channel=_to_str(_cell(row, channel_col)) or None,
            fees=fees,
        ))

    if dropped:
        log.info("Dropped %d %s row(s) without event name or ticket type.", dropped, status.lower())
    return records


def load_attendees(path: str, status: str) -> List[AttendeeRecord]:
    """Load one attendee export (valid or cancelled)."""
    records = records_from_frame(read_table(path), status)
    log.info("Loaded %d %s attendee(s) from %s", len(records), status.lower(), os.path.basename(path))
    return records


def load_exports(valid_path: str, cancelled_path: Optional[str] = None) -> Tuple[List[AttendeeRecord], List[AttendeeRecord]]:
    """Load the valid export and (optionally) the cancelled export."""
    valid = load_attendees(valid_path, STATUS_VALID)
    cancelled = load_attendees(cancelled_path, STATUS_CANCELLED) if cancelled_path else []
    return valid, cancelled
