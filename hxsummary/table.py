"""
Text table (terminal view of a report)
=====================================

Renders one view of a ReportData as a fixed-width table, the terminal
equivalent of a drillable summary table:

- one line per primary row (ticket type, gateway or sales channel)
- when a breakdown is selected, expanded rows are followed by one indented
  line per breakdown entry, labelled with the breakdown key
- a TOTAL line over the primary rows

Columns come from `get_columns_for_table`, so the table and the CSV export
always agree on labels, order and formatting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

from .columns import get_columns_for_table
from .models import TICKET_TYPE, AggregateBucket, ReportData, zero_bucket

SUB_ROW_PREFIX = "    "
EXPANDED_MARK = "[-] "
COLLAPSED_MARK = "[+] "


@dataclass
class ViewState:
    """What the user is looking at: which view, which breakdown, which rows are open."""
    primary: str = TICKET_TYPE
    breakdown: Optional[str] = None
    expanded: Set[str] = field(default_factory=set)

    def expand(self, key: str) -> None:
        self.expanded.add(key)

    def collapse(self, key: str) -> None:
        self.expanded.discard(key)

    def expand_all(self, report: ReportData) -> None:
        self.expanded = {r.key for r in report.rows_for(self.primary)}

    def collapse_all(self) -> None:
        self.expanded.clear()

    def set_primary(self, primary: str) -> None:
        """Switch view. Expanded keys belong to the old view, so they are dropped."""
        self.primary = primary
        if self.breakdown == primary:
            self.breakdown = None
        self.expanded.clear()


def totals_row(rows: Sequence[AggregateBucket], primary: str) -> AggregateBucket:
    """Sum of all primary rows of a view, keyed 'TOTAL'."""
    out = zero_bucket(primary, "TOTAL")
    for r in rows:
        out = out.merged(r)
    return out


def render_table(report: ReportData, state: ViewState) -> str:
    has_breakdown = state.breakdown is not None
    columns = get_columns_for_table(state.primary, has_breakdown, state.breakdown)
    rows = report.rows_for(state.primary)
    if not rows:
        return "(no rows)"

    body: List[List[str]] = []
    for row in rows:
        cells = [c.display(row) for c in columns]
        if has_breakdown:
            is_open = row.key in state.expanded
            cells[0] = (EXPANDED_MARK if is_open else COLLAPSED_MARK) + cells[0]
            if is_open:
                body.append(cells)
                # Breakdown key replaces the primary key column on sub-rows
                for entry in row.breakdown(state.breakdown) or ():
                    body.append([SUB_ROW_PREFIX + entry.key] + [c.display(entry) for c in columns[1:]])
                continue
        body.append(cells)

    header = [c.label for c in columns]
    footer = [c.display(totals_row(rows, state.primary)) for c in columns]
    widths = [max(len(cell) for cell in col) for col in zip(header, footer, *body)]

    def _fmt(cells: List[str]) -> str:
        parts = [cells[0].ljust(widths[0])]
        parts += [cell.rjust(w) for cell, w in zip(cells[1:], widths[1:])]
        return " | ".join(parts)

    rule = "-+-".join("-" * w for w in widths)
    out = [_fmt(header), rule]
    out += [_fmt(cells) for cells in body]
    out += [rule, _fmt(footer)]
    return "\n".join(out)
