from __future__ import annotations

import itertools
from typing import List

import pytest

from hxsummary.models import STATUS_CANCELLED, STATUS_VALID, AttendeeRecord, FeeTotals


def _record(ticket_type="GA", paid=0.0, status=STATUS_VALID, gateway=None,
            sales_channel=None, event_name="Spring Gala", **fees) -> AttendeeRecord:
    return AttendeeRecord(
        event_name=event_name,
        ticket_type=ticket_type,
        paid=float(paid),
        status=status,
        gateway=gateway,
        sales_channel=sales_channel,
        fees=FeeTotals(**fees),
    )


@pytest.fixture
def make_record():
    return _record


@pytest.fixture
def attendees():
    """(valid, cancelled) lists covering all three dimensions, with gaps.

    Amounts are multiples of 0.25 so float sums are exact in any order.
    """
    ticket_types = ["VIP", "General Admission", "student"]
    gateways = ["Stripe", "PayPal", None]
    channels = ["Online", "Box Office", None]

    valid: List[AttendeeRecord] = []
    cancelled: List[AttendeeRecord] = []
    for i, (tt, gw, ch) in enumerate(itertools.product(ticket_types, gateways, channels)):
        if i % 4 == 3:
            continue  # leave some combinations empty
        valid.append(_record(tt, paid=10 + i * 2.5, gateway=gw, sales_channel=ch,
                             humanitix_passed_on_fees=1.25, your_earnings=9 + i, refunds=0.0))
        if i % 3 == 0:
            cancelled.append(_record(tt, paid=5 + i * 0.5, status=STATUS_CANCELLED, gateway=gw,
                                     sales_channel=ch, refunds=5 + i * 0.5, refunded_fees=0.75))
    # Only ever sold without a gateway or sales channel
    valid.append(_record("Donation", paid=25))
    return valid, cancelled
