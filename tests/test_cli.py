import csv

import pytest

from hxsummary.cli import handle, main
from hxsummary.engine import generate_report
from hxsummary.models import GATEWAY, SALES_CHANNEL, TICKET_TYPE
from hxsummary.table import ViewState

VALID_CSV = """Event,Ticket type,Paid,Gateway,Sales Channel
Spring Gala,VIP,$100.00,Stripe,Online
Spring Gala,GA,$40.00,PayPal,Online
Spring Gala,GA,$40.00,Stripe,Box Office
"""

CANCELLED_CSV = """Event,Ticket type,Paid,Gateway,Sales Channel,Refunds
Spring Gala,VIP,$100.00,Stripe,Online,$100.00
"""


@pytest.fixture
def exports(tmp_path):
    valid = tmp_path / "valid.csv"
    cancelled = tmp_path / "cancelled.csv"
    valid.write_text(VALID_CSV, encoding="utf-8")
    cancelled.write_text(CANCELLED_CSV, encoding="utf-8")
    return str(valid), str(cancelled)


def test_one_shot_csv_export(tmp_path, exports):
    out = tmp_path / "summary.csv"
    code = main(["--valid", exports[0], "--cancelled", exports[1],
                 "--view", "gateway", "--breakdown", "salesChannel", "--export-csv", str(out)])
    assert code == 0

    with open(out, encoding="utf-8", newline="") as f:
        lines = list(csv.reader(f))
    assert lines[0][:3] == ["Gateway", "Sales Channel", "Paid"]
    # 2 gateways x 2 sales channels
    assert [line[:3] for line in lines[1:]] == [
        ["PayPal", "Box Office", "0.00"],
        ["PayPal", "Online", "40.00"],
        ["Stripe", "Box Office", "40.00"],
        ["Stripe", "Online", "200.00"],
    ]


def test_same_view_and_breakdown_is_an_error(exports):
    assert main(["--valid", exports[0], "--view", "gateway", "--breakdown", "gateway",
                 "--export-csv", "unused.csv"]) == 1


def test_missing_file_is_an_error(tmp_path):
    assert main(["--valid", str(tmp_path / "nope.csv"), "--export-csv", str(tmp_path / "o.csv")]) == 1


def test_repl_commands(tmp_path, capsys, make_record):
    report = generate_report(
        [make_record("GA", paid=10, gateway="Stripe", sales_channel="Online"),
         make_record("VIP", paid=30, gateway="PayPal", sales_channel="Online")], [])
    state = ViewState()

    handle(report, state, "view gateway")
    assert state.primary == GATEWAY

    handle(report, state, "breakdown ticket_type")
    assert state.breakdown == TICKET_TYPE
    assert state.expanded == {"PayPal", "Stripe"}

    handle(report, state, "collapse Stripe")
    assert state.expanded == {"PayPal"}

    with pytest.raises(ValueError):
        handle(report, state, "breakdown gateway")
    with pytest.raises(ValueError):
        handle(report, state, "expand Nowhere")

    handle(report, state, "breakdown none")
    assert state.breakdown is None

    out = tmp_path / "view.csv"
    handle(report, state, f'export csv "{out}"')
    assert out.read_text(encoding="utf-8").startswith("Gateway,Paid,")

    handle(report, state, "view sales_channel")
    assert state.primary == SALES_CHANNEL
    assert "Online" in capsys.readouterr().out


def test_view_without_dimension_is_a_usage_error(make_record):
    report = generate_report([make_record("GA", paid=10, gateway="Stripe")], [])
    state = ViewState()
    with pytest.raises(ValueError, match="Usage: view <dimension>"):
        handle(report, state, "view")
    assert state.primary == TICKET_TYPE


def test_default_export_name_stays_in_current_directory(tmp_path, monkeypatch, make_record):
    monkeypatch.chdir(tmp_path)
    report = generate_report([make_record("GA", paid=10, event_name="AC/DC Tribute")], [])

    handle(report, ViewState(), "export csv")

    written = list(tmp_path.iterdir())
    assert len(written) == 1
    assert written[0].is_file()
    assert written[0].name.startswith("AC_DC Tribute_")
