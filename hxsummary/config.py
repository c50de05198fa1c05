"""
Configuration constants
=======================

Everything here is plain data: the attendee export column names, how money
is shown on screen, and the logging format. The DOCX report has its own
`ReportConfig` dataclass in `hxsummary/report.py`.
"""

from __future__ import annotations

# ---- Attendee export columns ------------------------------------------------
# Keys are AttendeeRecord / FeeTotals field names, values are the column
# headers of the ticketing platform's attendee export.

EVENT_NAME_COLUMN = "Event"
EVENT_DATE_COLUMN = "Event date"
EVENT_TIME_COLUMN = "Event time"
TICKET_TYPE_COLUMN = "Ticket type"
PAID_COLUMN = "Paid"
GATEWAY_COLUMN = "Gateway"
SALES_CHANNEL_COLUMN = "Sales Channel"

FEE_COLUMNS = {
    "humanitix_passed_on_fees": "Humanitix passed-on fees",
    "humanitix_absorbed_fees": "Humanitix absorbed fees",
    "amex_surcharge": "Amex surcharge",
    "custom_tax": "Custom tax",
    "zip_fee_absorbed": "Zip fee(absorbed)",
    "afterpay_fee_absorbed": "Afterpay fee(absorbed)",
    "refunds": "Refunds",
    "fee_rebate": "Fee rebate",
    "your_earnings": "Your earnings",
    "refunded_fees": "Refunded fees",
    "discount_redeemed": "Discount redeemed",
    "tax_on_sales": "Tax on sales",
    "tax_on_booking_fees": "Tax on booking fees",
}

# ---- Money display ----------------------------------------------------------

CURRENCY_SYMBOL = "$"
CSV_DECIMALS = 2

# ---- Export ----------------------------------------------------------------

CSV_MIME_TYPE = "text/csv;charset=utf-8"
CSV_ENCODING = "utf-8"

# ---- Logging ---------------------------------------------------------------

LOGGER_NAME = "hxsummary"
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"
