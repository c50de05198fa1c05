"""
Data model (attendees, buckets, report rows)
============================================

Each row of an attendee export becomes one immutable `AttendeeRecord`.
The aggregation engine turns those records into buckets: one running total
of counts and money per dimension value (a ticket type, a gateway or a sales
channel).

Buckets are frozen. Adding a record returns a *new* bucket, so one bucket
object is never shared between two slots of the aggregation maps.

Shapes:
- `FeeTotals`: the 13 fee/earnings amounts carried by records and buckets
- `TicketTypeBreakdownRow` / `GatewayBreakdownRow` / `SalesChannelBreakdownRow`:
  one bucket keyed by one dimension value
- `ReportRow` / `GatewayReportRow` / `SalesChannelReportRow`: primary rows of
  each view, holding dense breakdowns over the other two dimensions
- `ReportData`: the three views for one event
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import ClassVar, Dict, Optional, Tuple, Type

# Dimension identifiers double as the attribute name of the key field.
TICKET_TYPE = "ticket_type"
GATEWAY = "gateway"
SALES_CHANNEL = "sales_channel"
DIMENSIONS = (TICKET_TYPE, GATEWAY, SALES_CHANNEL)

STATUS_VALID = "Valid"
STATUS_CANCELLED = "Cancelled"

# Canonical order (also the CSV column order after the count columns).
FEE_FIELDS = (
    "humanitix_passed_on_fees",
    "humanitix_absorbed_fees",
    "amex_surcharge",
    "custom_tax",
    "zip_fee_absorbed",
    "afterpay_fee_absorbed",
    "refunds",
    "fee_rebate",
    "your_earnings",
    "refunded_fees",
    "discount_redeemed",
    "tax_on_sales",
    "tax_on_booking_fees",
)


@dataclass(frozen=True)
class FeeTotals:
    """Fee and earnings amounts of one record, or their sum over a bucket."""
    humanitix_passed_on_fees: float = 0.0
    humanitix_absorbed_fees: float = 0.0
    amex_surcharge: float = 0.0
    custom_tax: float = 0.0
    zip_fee_absorbed: float = 0.0
    afterpay_fee_absorbed: float = 0.0
    refunds: float = 0.0
    fee_rebate: float = 0.0
    your_earnings: float = 0.0
    refunded_fees: float = 0.0
    discount_redeemed: float = 0.0
    tax_on_sales: float = 0.0
    tax_on_booking_fees: float = 0.0

    def __add__(self, other: "FeeTotals") -> "FeeTotals":
        return add_fees(self, other)


def add_fees(a: FeeTotals, b: FeeTotals) -> FeeTotals:
    """Elementwise sum of two FeeTotals.

    This is the one place that lists the tracked fee fields for arithmetic;
    a new fee column must be added here and in `FEE_FIELDS`.
    """
    return FeeTotals(
        humanitix_passed_on_fees=a.humanitix_passed_on_fees + b.humanitix_passed_on_fees,
        humanitix_absorbed_fees=a.humanitix_absorbed_fees + b.humanitix_absorbed_fees,
        amex_surcharge=a.amex_surcharge + b.amex_surcharge,
        custom_tax=a.custom_tax + b.custom_tax,
        zip_fee_absorbed=a.zip_fee_absorbed + b.zip_fee_absorbed,
        afterpay_fee_absorbed=a.afterpay_fee_absorbed + b.afterpay_fee_absorbed,
        refunds=a.refunds + b.refunds,
        fee_rebate=a.fee_rebate + b.fee_rebate,
        your_earnings=a.your_earnings + b.your_earnings,
        refunded_fees=a.refunded_fees + b.refunded_fees,
        discount_redeemed=a.discount_redeemed + b.discount_redeemed,
        tax_on_sales=a.tax_on_sales + b.tax_on_sales,
        tax_on_booking_fees=a.tax_on_booking_fees + b.tax_on_booking_fees,
    )


@dataclass(frozen=True)
class AttendeeRecord:
    """One attendee row from a valid or cancelled export."""
    event_name: str
    ticket_type: str
    paid: float
    status: str
    event_date_time: Optional[str] = None
    gateway: Optional[str] = None
    sales_channel: Optional[str] = None
    fees: FeeTotals = field(default_factory=FeeTotals)

    def dimension_value(self, dimension: str) -> Optional[str]:
        """Return the record's value for a dimension, or None when absent.

        Ticket type is always present (rows without one never become records);
        an empty gateway or sales channel counts as absent.
        """
        if dimension == TICKET_TYPE:
            return self.ticket_type
        if dimension == GATEWAY:
            return self.gateway or None
        if dimension == SALES_CHANNEL:
            return self.sales_channel or None
        raise ValueError(f"Unknown dimension: {dimension!r}")


# -----------------------------
# Buckets
# -----------------------------

@dataclass(frozen=True)
class AggregateBucket:
    """Counts and money sums for one dimension value."""
    total_paid: float = 0.0
    valid_count: int = 0
    cancelled_count: int = 0
    fees: FeeTotals = field(default_factory=FeeTotals)

    dimension: ClassVar[str] = ""

    @property
    def key(self) -> str:
        return getattr(self, self.dimension)

    @property
    def record_count(self) -> int:
        return self.valid_count + self.cancelled_count

    def with_record(self, record: AttendeeRecord) -> "AggregateBucket":
        """Return a copy of this bucket with one more record added."""
        valid = record.status == STATUS_VALID
        return replace(
            self,
            total_paid=self.total_paid + record.paid,
            valid_count=self.valid_count + (1 if valid else 0),
            cancelled_count=self.cancelled_count + (0 if valid else 1),
            fees=self.fees + record.fees,
        )

    def merged(self, other: "AggregateBucket") -> "AggregateBucket":
        """Return a copy of this bucket with another bucket's totals added."""
        return replace(
            self,
            total_paid=self.total_paid + other.total_paid,
            valid_count=self.valid_count + other.valid_count,
            cancelled_count=self.cancelled_count + other.cancelled_count,
            fees=self.fees + other.fees,
        )


@dataclass(frozen=True)
class TicketTypeBreakdownRow(AggregateBucket):
    ticket_type: str = ""
    dimension: ClassVar[str] = TICKET_TYPE


@dataclass(frozen=True)
class GatewayBreakdownRow(AggregateBucket):
    gateway: str = ""
    dimension: ClassVar[str] = GATEWAY


@dataclass(frozen=True)
class SalesChannelBreakdownRow(AggregateBucket):
    sales_channel: str = ""
    dimension: ClassVar[str] = SALES_CHANNEL


# -----------------------------
# Primary rows (one per view)
# -----------------------------

class _HasBreakdowns:
    def breakdown(self, dimension: str) -> Optional[Tuple[AggregateBucket, ...]]:
        """Breakdown rows for `dimension`, or None if this row has none."""
        attr = BREAKDOWN_ATTRS.get(dimension)
        return getattr(self, attr, None) if attr else None


@dataclass(frozen=True)
class ReportRow(_HasBreakdowns, TicketTypeBreakdownRow):
    """Ticket-type view row."""
    gateway_breakdown: Optional[Tuple[GatewayBreakdownRow, ...]] = None
    sales_channel_breakdown: Optional[Tuple[SalesChannelBreakdownRow, ...]] = None


@dataclass(frozen=True)
class GatewayReportRow(_HasBreakdowns, GatewayBreakdownRow):
    """Gateway view row."""
    ticket_type_breakdown: Optional[Tuple[TicketTypeBreakdownRow, ...]] = None
    sales_channel_breakdown: Optional[Tuple[SalesChannelBreakdownRow, ...]] = None


@dataclass(frozen=True)
class SalesChannelReportRow(_HasBreakdowns, SalesChannelBreakdownRow):
    """Sales-channel view row."""
    ticket_type_breakdown: Optional[Tuple[TicketTypeBreakdownRow, ...]] = None
    gateway_breakdown: Optional[Tuple[GatewayBreakdownRow, ...]] = None


@dataclass(frozen=True)
class ReportData:
    """The aggregated report for one event: three parallel views."""
    event_name: str = ""
    rows: Tuple[ReportRow, ...] = ()
    gateway_rows: Tuple[GatewayReportRow, ...] = ()
    sales_channel_rows: Tuple[SalesChannelReportRow, ...] = ()

    def rows_for(self, dimension: str) -> Tuple[AggregateBucket, ...]:
        if dimension == TICKET_TYPE:
            return self.rows
        if dimension == GATEWAY:
            return self.gateway_rows
        if dimension == SALES_CHANNEL:
            return self.sales_channel_rows
        raise ValueError(f"Unknown dimension: {dimension!r}")


# -----------------------------
# Dimension lookup tables
# -----------------------------

BUCKET_TYPES: Dict[str, Type[AggregateBucket]] = {
    TICKET_TYPE: TicketTypeBreakdownRow,
    GATEWAY: GatewayBreakdownRow,
    SALES_CHANNEL: SalesChannelBreakdownRow,
}

ROW_TYPES: Dict[str, Type[AggregateBucket]] = {
    TICKET_TYPE: ReportRow,
    GATEWAY: GatewayReportRow,
    SALES_CHANNEL: SalesChannelReportRow,
}

BREAKDOWN_ATTRS: Dict[str, str] = {
    TICKET_TYPE: "ticket_type_breakdown",
    GATEWAY: "gateway_breakdown",
    SALES_CHANNEL: "sales_channel_breakdown",
}

DIMENSION_LABELS: Dict[str, str] = {
    TICKET_TYPE: "Ticket Type",
    GATEWAY: "Gateway",
    SALES_CHANNEL: "Sales Channel",
}

_DIMENSION_ALIASES = {
    "tickettype": TICKET_TYPE,
    "ticket": TICKET_TYPE,
    "type": TICKET_TYPE,
    "gateway": GATEWAY,
    "saleschannel": SALES_CHANNEL,
    "channel": SALES_CHANNEL,
}


def zero_bucket(dimension: str, key: str) -> AggregateBucket:
    """A bucket with all counts and sums at 0 for one dimension value."""
    return BUCKET_TYPES[dimension](**{dimension: key})


def parse_dimension(text: str) -> str:
    """Map user input like 'ticketType', 'ticket-type' or 'channel' to a dimension id."""
    norm = re.sub(r"[^a-z0-9]+", "", str(text).lower())
    if norm not in _DIMENSION_ALIASES:
        raise ValueError(f"dimension must be one of: ticket_type, gateway, sales_channel (got {text!r})")
    return _DIMENSION_ALIASES[norm]
