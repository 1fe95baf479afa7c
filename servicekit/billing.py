"""Invoice PDF rendering and the billing use case."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import accumulate
from pathlib import Path

from servicekit.pdf import A4_HEIGHT, A4_WIDTH, PdfCanvas

MARGIN_LEFT = 50.0
MARGIN_TOP = 50.0
LINE_HEIGHT = 20.0
PAGE_WIDTH = A4_WIDTH
PAGE_HEIGHT = A4_HEIGHT
TABLE_ROW_HEIGHT = 18.0
TRIM_MARGIN = 22.68
COLUMN_WIDTHS = (200.0, 100.0, 100.0, 100.0)

REGULAR_FONT = "roboto"
BOLD_FONT = "roboto-bold"
HEADING_COLOR = (30, 60, 120)
TEXT_COLOR = (0, 0, 0)

BILLED_TO = ("Client name", "123 Your Street", "City,State, Country", "Zip Code", "Phone")
COMPANY_INFO = ("Building name", "123 Your Street", "City,State, Country", "Zip Code", "Phone")
COMPANY_CONTACT = ("[phone]", "[email]", "yourwebsite.com")


@dataclass
class InvoiceItem:
    """One line of an invoice."""

    description: str = ""
    unit_cost: str = ""
    qty: str = ""
    amount: str = ""


@dataclass
class InvoiceData:
    """Everything printed on an invoice."""

    number: str = ""
    date: str = ""
    billed_to: list[str] = field(default_factory=list)
    company_info: list[str] = field(default_factory=list)
    items: list[InvoiceItem] = field(default_factory=list)
    subtotal: str = ""
    discount: str = ""
    tax_rate: str = ""
    tax: str = ""
    total: str = ""
    terms: str = ""
    bank_details: list[str] = field(default_factory=list)


def column_starts() -> list[float]:
    """Left edge of each table column."""
    return list(accumulate(COLUMN_WIDTHS[:-1], initial=MARGIN_LEFT))


def new_canvas() -> PdfCanvas:
    """An A4 canvas with the invoice fonts registered."""
    pdf = PdfCanvas(PAGE_WIDTH, PAGE_HEIGHT, trim=TRIM_MARGIN)
    pdf.add_font(REGULAR_FONT, "Helvetica")
    pdf.add_font(BOLD_FONT, "Helvetica-Bold")
    return pdf


def text_at(pdf: PdfCanvas, x: float, y: float, text: str) -> None:
    pdf.set_x(x)
    pdf.set_y(y)
    pdf.cell(text)


def draw_header(pdf: PdfCanvas, data: InvoiceData) -> float:
    """Draw title, logo box, number, date and address blocks; return the y below them."""
    pdf.set_font(BOLD_FONT, 28)
    pdf.set_text_color(*HEADING_COLOR)
    text_at(pdf, MARGIN_LEFT, MARGIN_TOP, "Invoice")

    logo_size = 80.0
    logo_x = PAGE_WIDTH - MARGIN_LEFT - logo_size
    logo_y = MARGIN_TOP
    pdf.set_line_width(0.5)
    pdf.rect(logo_x, logo_y, logo_size, logo_size, "D")
    pdf.set_font(REGULAR_FONT, 11)
    pdf.set_text_color(*TEXT_COLOR)
    text_at(pdf, logo_x + 10, logo_y + logo_size / 2, "YOUR LOGO")

    top_info_y = MARGIN_TOP + 45
    col1_x = MARGIN_LEFT
    col2_x = MARGIN_LEFT + 180
    col3_x = MARGIN_LEFT + 350

    pdf.set_font(BOLD_FONT, 11)
    pdf.set_text_color(*HEADING_COLOR)
    text_at(pdf, col1_x, top_info_y, "INVOICE NUMBER:")
    text_at(pdf, col2_x, top_info_y, "DATE OF ISSUE:")

    pdf.set_font(REGULAR_FONT, 11)
    pdf.set_text_color(*TEXT_COLOR)
    text_at(pdf, col1_x, top_info_y + 15, data.number)
    text_at(pdf, col2_x, top_info_y + 15, data.date)

    section_y = top_info_y + 40
    pdf.set_font(BOLD_FONT, 11)
    pdf.set_text_color(*HEADING_COLOR)
    text_at(pdf, col1_x, section_y, "BILLED TO")
    text_at(pdf, col2_x, section_y, "YOUR COMPANY NAME")
    text_at(pdf, col3_x, section_y, "")

    pdf.set_font(REGULAR_FONT, 10)
    pdf.set_text_color(*TEXT_COLOR)
    for i, (billed, company) in enumerate(zip(BILLED_TO, COMPANY_INFO)):
        y = section_y + 15 + i * 13
        text_at(pdf, col1_x, y, billed)
        text_at(pdf, col2_x, y, company)
        if i < len(COMPANY_CONTACT):
            text_at(pdf, col3_x, y, COMPANY_CONTACT[i])

    return section_y + 15 + len(BILLED_TO) * 13 + 10


def draw_table_rows(pdf: PdfCanvas, items: list[InvoiceItem], top: float) -> float:
    """Draw the table heading and item rows; return the y below the last row."""
    left = MARGIN_LEFT
    width = PAGE_WIDTH - 2 * MARGIN_LEFT
    starts = column_starts()

    pdf.set_fill_color(240, 245, 250)
    pdf.rect(left, top, width, TABLE_ROW_HEIGHT, "F")

    pdf.set_font(BOLD_FONT, 11)
    pdf.set_text_color(*HEADING_COLOR)
    for x, title in zip(starts, ("Description", "Unit cost", "QTY/HR Rate", "Amount")):
        text_at(pdf, x + 8, top + 4, title)

    pdf.set_stroke_color(200, 200, 200)
    pdf.line(left, top + TABLE_ROW_HEIGHT, left + width, top + TABLE_ROW_HEIGHT)

    pdf.set_font(REGULAR_FONT, 10)
    pdf.set_text_color(*TEXT_COLOR)
    row_y = top + TABLE_ROW_HEIGHT
    for item in items:
        values = (item.description, item.unit_cost, item.qty, item.amount)
        for x, value in zip(starts, values):
            text_at(pdf, x + 8, row_y + 4, value)
        row_y += TABLE_ROW_HEIGHT
    return row_y


def draw_table(pdf: PdfCanvas, items: list[InvoiceItem], start_y: float) -> float:
    """Draw the item table; return the y below it with spacing."""
    row_y = draw_table_rows(pdf, items, start_y)
    pdf.set_stroke_color(200, 200, 200)
    pdf.line(MARGIN_LEFT, row_y, PAGE_WIDTH - MARGIN_LEFT, row_y)
    return row_y + 10


def draw_summary(pdf: PdfCanvas, data: InvoiceData, start_y: float) -> float:
    """Draw subtotal, discount, tax and total; return the y below them."""
    left = PAGE_WIDTH - MARGIN_LEFT - 200
    pdf.set_font(BOLD_FONT, 11)
    pdf.set_text_color(*HEADING_COLOR)
    rows = (
        ("Subtotal:", data.subtotal),
        ("Discount:", data.discount),
        ("Tax Rate:", data.tax_rate),
        ("Tax:", data.tax),
    )
    for i, (label, value) in enumerate(rows):
        y = start_y + i * 18
        text_at(pdf, left, y, label)
        text_at(pdf, left + 120, y, value)

    pdf.set_font(BOLD_FONT, 13)
    pdf.set_text_color(*HEADING_COLOR)
    text_at(pdf, left, start_y + 80, "Total:")
    text_at(pdf, left + 120, start_y + 80, data.total)
    return start_y + 110


def draw_footer(pdf: PdfCanvas, data: InvoiceData, start_y: float) -> None:
    """Draw the payment terms and, if any, the bank details."""
    pdf.set_font(REGULAR_FONT, 10)
    pdf.set_text_color(*TEXT_COLOR)
    text_at(pdf, MARGIN_LEFT, start_y, data.terms)

    if data.bank_details:
        pdf.set_font(BOLD_FONT, 11)
        pdf.set_text_color(*HEADING_COLOR)
        text_at(pdf, MARGIN_LEFT, start_y + 30, "Bank Details:")
        pdf.set_font(REGULAR_FONT, 10)
        pdf.set_text_color(*TEXT_COLOR)
        for i, line in enumerate(data.bank_details):
            text_at(pdf, MARGIN_LEFT, start_y + 50 + i * 13, line)


def render_invoice(data: InvoiceData) -> PdfCanvas:
    """Lay out a complete invoice page."""
    pdf = new_canvas()
    header_bottom = draw_header(pdf, data)
    table_bottom = draw_table(pdf, data.items, header_bottom)
    summary_bottom = draw_summary(pdf, data, table_bottom)
    draw_footer(pdf, data, summary_bottom)
    return pdf


class BillingUseCase:
    """Generates invoice documents."""

    def generate_invoice_pdf(self, data: InvoiceData, output_path: str | Path) -> None:
        """Render the invoice and write it to output_path."""
        render_invoice(data).write(output_path)