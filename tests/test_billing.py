import pytest

from servicekit.billing import (
    TABLE_ROW_HEIGHT,
    BillingUseCase,
    InvoiceData,
    InvoiceItem,
    draw_footer,
    draw_header,
    draw_summary,
    draw_table,
    render_invoice,
)
from servicekit.pdf import PdfCanvas


def _canvas():
    pdf = PdfCanvas()
    pdf.add_font("roboto", "Helvetica")
    pdf.add_font("roboto-bold", "Helvetica-Bold")
    return pdf


def _data(**kwargs):
    base = dict(
        number="00001",
        date="MM/DD/YYYY",
        items=[InvoiceItem("Your item name", "$0.00", "1", "$0.00")],
        subtotal="$0.00",
        total="$0.00",
        terms="Please pay invoice by MM/DD/YYYY",
    )
    base.update(kwargs)
    return InvoiceData(**base)


def test_render_contains_fields():
    data = render_invoice(_data()).to_bytes()
    assert b"(INVOICE NUMBER:) Tj" in data
    assert b"(00001) Tj" in data
    assert b"(Your item name) Tj" in data
    assert b"(Please pay invoice by MM/DD/YYYY) Tj" in data


def test_header_height_does_not_depend_on_data():
    first = draw_header(_canvas(), _data())
    second = draw_header(_canvas(), _data(number="42", date="today"))
    assert first == second
    assert first > 50.0


def test_table_grows_one_row_per_item():
    items = [InvoiceItem("a", "b", "c", "d")] * 3
    empty = draw_table(_canvas(), [], 0.0)
    full = draw_table(_canvas(), items, 0.0)
    assert full - empty == 3 * TABLE_ROW_HEIGHT


def test_summary_spacing():
    assert draw_summary(_canvas(), _data(), 300.0) - 300.0 == 110


def test_footer_bank_details_only_when_present():
    without = _canvas()
    draw_footer(without, _data(), 600.0)
    assert b"(Bank Details:) Tj" not in without.to_bytes()

    with_details = _canvas()
    draw_footer(with_details, _data(bank_details=["Account Holder:"]), 600.0)
    out = with_details.to_bytes()
    assert b"(Bank Details:) Tj" in out
    assert b"(Account Holder:) Tj" in out


def test_generate_invoice_pdf_writes_file(tmp_path):
    path = tmp_path / "invoice_00001.pdf"
    data = _data()
    BillingUseCase().generate_invoice_pdf(data, path)
    assert path.read_bytes() == render_invoice(data).to_bytes()


def test_generate_invoice_pdf_missing_directory(tmp_path):
    with pytest.raises(OSError):
        BillingUseCase().generate_invoice_pdf(_data(), tmp_path / "nope" / "x.pdf")