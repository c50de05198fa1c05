from __future__ import annotations

"""
DOCX summary report
-------------------
This module writes one view of a ReportData to a DOCX file: a title block,
the summary table and a chart of Paid per primary key.

Design goals:
- Keep the package usable without the report dependencies (lazy imports).
- Use the same columns as the text table (`get_columns_for_table`), so the
  document, the terminal and the CSV export never disagree.
- When a breakdown is selected, breakdown entries appear as indented
  sub-rows and the chart stacks each bar by breakdown key.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence
import os
import tempfile

from .columns import get_columns_for_table
from .logger import log
from .models import DIMENSION_LABELS, AggregateBucket, ReportData
from .table import totals_row


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Event Sales Summary"
    subtitle: str = "Ticket sales, fees and cancellations"

    include_chart: bool = True
    # Inches
    chart_width: float = 6.5
    # Bars beyond this are left out of the chart (the table still lists all rows)
    max_chart_bars: int = 20

    # Optional: data files the report was built from
    source_files: Optional[List[str]] = None


def _stacked_bar_chart(
    rows: Sequence[AggregateBucket],
    breakdown: Optional[str],
    title: str,
    out_path: str,
) -> str:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    import numpy as np

    labels = [r.key for r in rows]
    x = np.arange(len(rows))
    plt.figure()

    entries_per_row = [r.breakdown(breakdown) if breakdown else None for r in rows]
    if breakdown and all(entries_per_row):
        # Dense breakdowns: position i is the same key in every row
        keys = [e.key for e in entries_per_row[0]]
        bottoms = np.zeros(len(rows))
        for i, key in enumerate(keys):
            heights = np.array([entries[i].total_paid for entries in entries_per_row])
            plt.bar(x, heights, bottom=bottoms, label=key)
            bottoms += heights
        plt.legend(title=DIMENSION_LABELS[breakdown], fontsize="small")
    else:
        plt.bar(x, [r.total_paid for r in rows])

    plt.xticks(x, labels, rotation=45, ha="right")
    plt.title(title)
    plt.ylabel("Paid")
    plt.tight_layout()
    plt.savefig(out_path, dpi=200)
    plt.close()
    return out_path


def generate_docx_report(
    report: ReportData,
    out_path: str,
    primary: str,
    breakdown: Optional[str] = None,
    *,
    config: Optional[ReportConfig] = None,
) -> str:
    """
    Generate a DOCX summary (table + chart) for one view of a report.

    The report is read only; nothing is recomputed here.
    """
    config = config or ReportConfig()

    # Lazy imports: only required when a DOCX report is requested.
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    if config.include_chart:
        try:
            import matplotlib  # noqa: F401
            import numpy  # noqa: F401
        except ImportError as e:
            raise ImportError(
                "Missing dependency: matplotlib (and numpy).\n"
                "Install with: python -m pip install matplotlib numpy"
            ) from e

    rows = report.rows_for(primary)
    if not rows:
        raise ValueError("No rows to report on (report is empty).")

    has_breakdown = breakdown is not None
    columns = get_columns_for_table(primary, has_breakdown, breakdown)
    view_label = DIMENSION_LABELS[primary]
    if has_breakdown:
        view_label += f" by {DIMENSION_LABELS[breakdown]}"

    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(10)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    _center_title(config.title, 20, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    _kv("Event", report.event_name or "(unnamed event)")
    _kv("View", view_label)
    total = totals_row(rows, primary)
    _kv("Valid tickets", str(total.valid_count))
    _kv("Cancelled tickets", str(total.cancelled_count))
    if config.source_files:
        _kv("Source files", ", ".join(os.path.basename(p) for p in config.source_files))

    # -----------------------------
    # Summary table
    # -----------------------------
    doc.add_heading("Summary", level=1)
    t = doc.add_table(rows=1, cols=len(columns))
    t.style = "Table Grid"
    for cell, c in zip(t.rows[0].cells, columns):
        cell.text = c.label

    def _add_row(label: str, source: AggregateBucket, bold: bool = False) -> None:
        cells = t.add_row().cells
        values = [label] + [c.display(source) for c in columns[1:]]
        for cell, value in zip(cells, values):
            cell.text = value
            if bold:
                for run in cell.paragraphs[0].runs:
                    run.bold = True

    for row in rows:
        _add_row(columns[0].display(row), row, bold=has_breakdown)
        if has_breakdown:
            for entry in row.breakdown(breakdown) or ():
                _add_row("    " + entry.key, entry)
    _add_row("TOTAL", total, bold=True)

    # -----------------------------
    # Chart
    # -----------------------------
    if config.include_chart:
        tmpdir = tempfile.mkdtemp(prefix="hxsummary_report_")
        chart_rows = rows[:config.max_chart_bars]
        chart = _stacked_bar_chart(
            chart_rows,
            breakdown,
            f"Paid by {view_label}",
            os.path.join(tmpdir, "paid.png"),
        )
        doc.add_heading("Paid", level=1)
        doc.add_picture(chart, width=Inches(config.chart_width))
        if len(rows) > len(chart_rows):
            doc.add_paragraph(f"Chart shows the first {len(chart_rows)} of {len(rows)} rows.")

    # -----------------------------
    # Footer
    # -----------------------------
    from . import __version__ as pkg_version
    from datetime import datetime as _dt
    generated_at = _dt.now().isoformat(timespec="seconds")

    doc.add_paragraph("")
    doc.add_paragraph(f"hxsummary version: {pkg_version}")
    doc.add_paragraph(f"Report generated at: {generated_at}")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    log.info("Report written to %s", out_path)
    return out_path
