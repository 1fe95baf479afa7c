"""Renders a sample invoice with a gridded table to a PDF file."""

from __future__ import annotations

import argparse

from servicekit.billing import (
    BOLD_FONT,
    COLUMN_WIDTHS,
    HEADING_COLOR,
    MARGIN_LEFT,
    PAGE_HEIGHT,
    PAGE_WIDTH,
    REGULAR_FONT,
    TABLE_ROW_HEIGHT,
    TEXT_COLOR,
    InvoiceData,
    InvoiceItem,
    column_starts,
    draw_header,
    draw_table_rows,
    new_canvas,
    text_at,
)
from servicekit.pdf import PdfCanvas

DEFAULT_OUTPUT = "hello.pdf"

BANK_DETAILS = (
    "Account Holder:",
    "Account number:",
    "ABA rtn: 000000000",
    "Wire rtn: 000000000",
)


def sample_invoice() -> InvoiceData:
    """An invoice filled with placeholder values."""
    return InvoiceData(
        number="00001",
        date="MM/DD/YYYY",
        items=[InvoiceItem("Your item name", "$0.00", "1", "$0.00") for _ in range(8)],
        subtotal="$0.00",
        discount="$0.00",
        tax_rate="0 %",
        tax="$0.00",
        total="$0.00",
        terms="Please pay invoice by MM/DD/YYYY",
    )


def _draw_table(pdf: PdfCanvas, items: list[InvoiceItem], start_y: float) -> float:
    row_y = draw_table_rows(pdf, items, start_y)
    left = MARGIN_LEFT
    width = PAGE_WIDTH - 2 * MARGIN_LEFT
    bottom = start_y + TABLE_ROW_HEIGHT * (len(items) + 1)

    pdf.set_line_width(0.3)
    pdf.set_stroke_color(220, 220, 220)
    for i in range(len(items) + 2):
        y = start_y + i * TABLE_ROW_HEIGHT
        pdf.line(left, y, left + width, y)
    for x in [*column_starts(), MARGIN_LEFT + sum(COLUMN_WIDTHS)]:
        pdf.line(x, start_y, x, bottom)

    pdf.set_text_color(*TEXT_COLOR)
    return row_y


def _draw_summary(pdf: PdfCanvas, data: InvoiceData, start_y: float) -> float:
    pdf.set_font(REGULAR_FONT, 10)
    offset = MARGIN_LEFT + sum(COLUMN_WIDTHS[:3])
    label_x = offset - 10
    value_x = offset + 30
    rows = (
        ("Subtotal", data.subtotal),
        ("Discount", data.discount),
        ("Tax rate", data.tax_rate),
        ("Tax", data.tax),
    )
    for i, (label, value) in enumerate(rows):
        y = start_y + 10 + i * 15
        text_at(pdf, label_x, y, label)
        text_at(pdf, value_x, y, value)
    return start_y + 70


def _draw_footer(pdf: PdfCanvas, data: InvoiceData, start_y: float) -> None:
    footer_y = start_y + 40
    total_x = PAGE_WIDTH - MARGIN_LEFT - 100

    pdf.set_font(BOLD_FONT, 10)
    pdf.set_text_color(*HEADING_COLOR)
    text_at(pdf, MARGIN_LEFT, footer_y, "TERMS")
    text_at(pdf, MARGIN_LEFT + 150, footer_y, "BANK ACCOUNT DETAILS")
    text_at(pdf, total_x, footer_y, "INVOICE TOTAL")

    pdf.set_font(REGULAR_FONT, 9)
    pdf.set_text_color(*TEXT_COLOR)
    text_at(pdf, MARGIN_LEFT, footer_y + 15, data.terms)
    for i, line in enumerate(BANK_DETAILS):
        text_at(pdf, MARGIN_LEFT + 150, footer_y + 15 + i * 15, line)

    pdf.set_font(BOLD_FONT, 18)
    pdf.set_text_color(0, 150, 0)
    text_at(pdf, total_x, footer_y + 15, data.total)

    pdf.set_font(REGULAR_FONT, 9)
    pdf.set_text_color(*TEXT_COLOR)
    text_at(pdf, PAGE_WIDTH - MARGIN_LEFT - 180, PAGE_HEIGHT - 40, "Send money abroad with Wise.")


def render_demo_invoice(data: InvoiceData) -> PdfCanvas:
    """Lay out the sample invoice page with a gridded item table."""
    pdf = new_canvas()
    header_bottom = draw_header(pdf, data)
    table_bottom = _draw_table(pdf, data.items, header_bottom)
    summary_bottom = _draw_summary(pdf, data, table_bottom)
    _draw_footer(pdf, data, summary_bottom)
    return pdf


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Render a sample invoice to PDF.")
    parser.add_argument("output", nargs="?", default=DEFAULT_OUTPUT, help="output file")
    args = parser.parse_args(argv)
    render_demo_invoice(sample_invoice()).write(args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())