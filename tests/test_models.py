import pytest

from hxsummary.models import (
    FEE_FIELDS,
    GATEWAY,
    SALES_CHANNEL,
    STATUS_CANCELLED,
    TICKET_TYPE,
    FeeTotals,
    GatewayBreakdownRow,
    ReportRow,
    TicketTypeBreakdownRow,
    add_fees,
    parse_dimension,
    zero_bucket,
)


def test_add_fees_is_elementwise():
    a = FeeTotals(**{name: float(i) for i, name in enumerate(FEE_FIELDS)})
    b = FeeTotals(**{name: 10.0 for name in FEE_FIELDS})
    total = add_fees(a, b)
    for i, name in enumerate(FEE_FIELDS):
        assert getattr(total, name) == i + 10.0
    assert a + b == total


def test_with_record_returns_new_bucket(make_record):
    empty = zero_bucket(TICKET_TYPE, "GA")
    r = make_record("GA", paid=20, refunds=2.5)
    b = empty.with_record(r).with_record(make_record("GA", paid=5, status=STATUS_CANCELLED))

    assert empty.total_paid == 0 and empty.record_count == 0
    assert isinstance(b, TicketTypeBreakdownRow)
    assert b.key == "GA"
    assert b.total_paid == 25
    assert (b.valid_count, b.cancelled_count) == (1, 1)
    assert b.fees.refunds == 2.5


def test_merged_adds_totals_and_keeps_key():
    a = GatewayBreakdownRow(gateway="Stripe", total_paid=10, valid_count=2, fees=FeeTotals(custom_tax=1))
    b = GatewayBreakdownRow(gateway="Stripe", total_paid=5, cancelled_count=1, fees=FeeTotals(custom_tax=2))
    m = a.merged(b)
    assert m == GatewayBreakdownRow(gateway="Stripe", total_paid=15, valid_count=2,
                                    cancelled_count=1, fees=FeeTotals(custom_tax=3))


def test_dimension_value_treats_empty_as_missing(make_record):
    r = make_record("GA", gateway="", sales_channel=None)
    assert r.dimension_value(TICKET_TYPE) == "GA"
    assert r.dimension_value(GATEWAY) is None
    assert r.dimension_value(SALES_CHANNEL) is None


def test_breakdown_lookup_on_primary_row():
    gw = (GatewayBreakdownRow(gateway="Stripe"),)
    row = ReportRow(ticket_type="GA", gateway_breakdown=gw)
    assert row.breakdown(GATEWAY) == gw
    assert row.breakdown(SALES_CHANNEL) is None
    assert row.breakdown(TICKET_TYPE) is None


@pytest.mark.parametrize("text,expected", [
    ("ticketType", TICKET_TYPE),
    ("ticket-type", TICKET_TYPE),
    ("Gateway", GATEWAY),
    ("salesChannel", SALES_CHANNEL),
    ("sales_channel", SALES_CHANNEL),
])
def test_parse_dimension(text, expected):
    assert parse_dimension(text) == expected


def test_parse_dimension_rejects_unknown():
    with pytest.raises(ValueError):
        parse_dimension("venue")
