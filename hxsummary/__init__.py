"""
hxsummary package
=================

Event sales summary: aggregates the valid and cancelled attendee exports of
one event by ticket type, payment gateway and sales channel.

- Aggregation is in `hxsummary/engine.py` (`generate_report`).
- Column definitions shared by every output are in `hxsummary/columns.py`.
- CSV / JSON export is in `hxsummary/export.py`.
- Loading the exports is in `hxsummary/loader.py`.
- The CLI entry point is in `hxsummary/cli.py`.
"""

__version__ = '0.3.0'

from .engine import generate_report  # noqa: E402
from .export import to_csv  # noqa: E402
from .columns import get_columns_for_table, get_columns_for_view  # noqa: E402
