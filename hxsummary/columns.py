"""
Column registry
===============

One list of column descriptors drives every output: the text table, the DOCX
report and the CSV export. A column knows

- how to pull its raw value out of a row (`extract_value`)
- how to show it on screen (`format_value`, optional)
- how to write it to CSV (`csv_format_value`, optional)

Extractors read attributes by field name, so the same column works on every
row shape that has that field: a ticket-type row, a gateway breakdown entry,
a sales-channel row, and so on.
"""

from __future__ import annotations

from dataclasses import dataclass
from operator import attrgetter
from typing import Any, Callable, List, Optional

from .config import CSV_DECIMALS, CURRENCY_SYMBOL, FEE_COLUMNS
from .models import DIMENSION_LABELS, DIMENSIONS, FEE_FIELDS, GATEWAY, SALES_CHANNEL, TICKET_TYPE

ValueFormatter = Callable[[Any], str]
ValueExtractor = Callable[[Any], Any]


def format_currency(value: float) -> str:
    """Screen format for money, e.g. 1234.5 -> '$1,234.50', -5 -> '-$5.00'."""
    amount = float(value)
    text = f"{CURRENCY_SYMBOL}{abs(amount):,.2f}"
    # -0.004 rounds to zero: no sign
    if amount < 0 and text != f"{CURRENCY_SYMBOL}0.00":
        return "-" + text
    return text


def format_decimal(value: float) -> str:
    """CSV format for money: plain number with two decimals."""
    text = f"{float(value):.{CSV_DECIMALS}f}"
    return text.lstrip("-") if float(text) == 0 else text


@dataclass(frozen=True)
class Column:
    id: str
    label: str
    extract_value: ValueExtractor
    description: Optional[str] = None
    format_value: Optional[ValueFormatter] = None
    csv_format_value: Optional[ValueFormatter] = None

    def display(self, row: Any) -> str:
        value = self.extract_value(row)
        if self.format_value is not None:
            return self.format_value(value)
        return str(value)

    def csv_value(self, row: Any) -> str:
        """CSV text for a row: csv formatter, else screen formatter, else str()."""
        value = self.extract_value(row)
        if self.csv_format_value is not None:
            return self.csv_format_value(value)
        if self.format_value is not None:
            return self.format_value(value)
        return str(value)


def _money_column(id: str, label: str, getter: str, description: Optional[str] = None) -> Column:
    return Column(
        id=id,
        label=label,
        extract_value=attrgetter(getter),
        description=description,
        format_value=format_currency,
        csv_format_value=format_decimal,
    )


# Dimension key columns (primary or breakdown)
TICKET_TYPE_COLUMN = Column(TICKET_TYPE, DIMENSION_LABELS[TICKET_TYPE], attrgetter(TICKET_TYPE))
GATEWAY_COLUMN = Column(GATEWAY, DIMENSION_LABELS[GATEWAY], attrgetter(GATEWAY))
SALES_CHANNEL_COLUMN = Column(SALES_CHANNEL, DIMENSION_LABELS[SALES_CHANNEL], attrgetter(SALES_CHANNEL))

KEY_COLUMNS = {
    TICKET_TYPE: TICKET_TYPE_COLUMN,
    GATEWAY: GATEWAY_COLUMN,
    SALES_CHANNEL: SALES_CHANNEL_COLUMN,
}

# Metric columns
PAID_COLUMN = _money_column("total_paid", "Paid", "total_paid", "Total amount paid for tickets")
VALID_TICKETS_COLUMN = Column("valid_count", "Valid Tickets", attrgetter("valid_count"),
                              description="Number of valid tickets")
CANCELLED_TICKETS_COLUMN = Column("cancelled_count", "Cancelled Tickets", attrgetter("cancelled_count"),
                                  description="Number of cancelled tickets")

_FEE_DESCRIPTIONS = {
    "humanitix_passed_on_fees": "Booking fees passed on to the buyer",
    "humanitix_absorbed_fees": "Booking fees absorbed by the organiser",
    "amex_surcharge": "Surcharge on American Express payments",
    "zip_fee_absorbed": "Zip payment fees absorbed by the organiser",
    "afterpay_fee_absorbed": "Afterpay payment fees absorbed by the organiser",
    "your_earnings": "Net earnings paid out to the organiser",
}

FEE_COLUMN_DEFS = [
    _money_column(name, FEE_COLUMNS[name], f"fees.{name}", _FEE_DESCRIPTIONS.get(name))
    for name in FEE_FIELDS
]

METRIC_COLUMNS = [PAID_COLUMN, VALID_TICKETS_COLUMN, CANCELLED_TICKETS_COLUMN] + FEE_COLUMN_DEFS


def _check_dimensions(primary: str, has_breakdown: bool, breakdown: Optional[str]) -> None:
    if primary not in DIMENSIONS:
        raise ValueError(f"Unknown primary dimension: {primary!r}")
    if not has_breakdown:
        return
    if breakdown not in DIMENSIONS:
        raise ValueError(f"Unknown breakdown dimension: {breakdown!r}")
    if breakdown == primary:
        raise ValueError("Breakdown dimension must differ from the primary dimension")


def get_columns_for_view(primary: str, has_breakdown: bool, breakdown: Optional[str] = None) -> List[Column]:
    """Columns in CSV order: primary key, breakdown key (if any), metrics.

    The metric order is fixed; CSV consumers rely on it.
    """
    _check_dimensions(primary, has_breakdown, breakdown)
    columns = [KEY_COLUMNS[primary]]
    if has_breakdown:
        columns.append(KEY_COLUMNS[breakdown])
    columns.extend(METRIC_COLUMNS)
    return columns


def get_columns_for_table(primary: str, has_breakdown: bool, breakdown: Optional[str] = None) -> List[Column]:
    """Like get_columns_for_view, without the breakdown key column.

    Tables show the breakdown key as an indented sub-row label instead.
    """
    _check_dimensions(primary, has_breakdown, breakdown)
    return [KEY_COLUMNS[primary]] + list(METRIC_COLUMNS)
