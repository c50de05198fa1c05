import pytest

docx = pytest.importorskip("docx")
pytest.importorskip("matplotlib")

from hxsummary.engine import generate_report  # noqa: E402
from hxsummary.report import ReportConfig, generate_docx_report  # noqa: E402
from hxsummary.models import GATEWAY, TICKET_TYPE  # noqa: E402


def _report(make_record):
    return generate_report(
        [make_record("GA", paid=100, gateway="Stripe"), make_record("GA", paid=50, gateway="PayPal")],
        [make_record("VIP", paid=200, status="Cancelled", gateway="Stripe")],
    )


def test_docx_with_breakdown(tmp_path, make_record):
    out = tmp_path / "reports" / "summary.docx"
    path = generate_docx_report(_report(make_record), str(out), TICKET_TYPE, GATEWAY)

    doc = docx.Document(path)
    table = doc.tables[0]
    # header + 2 rows x (1 + 2 gateways) + total
    assert len(table.rows) == 1 + 2 * 3 + 1
    assert table.rows[0].cells[0].text == "Ticket Type"
    assert table.rows[2].cells[0].text.strip() == "PayPal"
    assert table.rows[-1].cells[0].text == "TOTAL"
    assert table.rows[-1].cells[1].text == "$350.00"
    assert len(doc.inline_shapes) == 1


def test_docx_without_chart(tmp_path, make_record):
    path = generate_docx_report(_report(make_record), str(tmp_path / "s.docx"), GATEWAY,
                                config=ReportConfig(include_chart=False))
    doc = docx.Document(path)
    assert len(doc.tables[0].rows) == 1 + 2 + 1
    assert len(doc.inline_shapes) == 0


def test_empty_report_rejected(tmp_path):
    with pytest.raises(ValueError):
        generate_docx_report(generate_report([], []), str(tmp_path / "x.docx"), TICKET_TYPE)
