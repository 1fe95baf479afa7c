import re

import pytest

from servicekit.pdf import A4_HEIGHT, PdfCanvas


def _canvas():
    pdf = PdfCanvas()
    pdf.add_font("roboto", "Helvetica")
    pdf.add_font("roboto-bold", "Helvetica-Bold")
    pdf.set_font("roboto", 11)
    return pdf


def test_document_frame():
    data = _canvas().to_bytes()
    assert data.startswith(b"%PDF-")
    assert data.endswith(b"%%EOF\n")


def test_startxref_points_at_xref_table():
    data = _canvas().to_bytes()
    offset = int(re.search(rb"startxref\n(\d+)\n", data).group(1))
    assert data[offset : offset + 4] == b"xref"


def test_xref_entries_point_at_objects():
    data = _canvas().to_bytes()
    offset = int(re.search(rb"startxref\n(\d+)\n", data).group(1))
    entries = re.findall(rb"(\d{10}) 00000 n ", data[offset:])
    assert entries
    for number, entry in enumerate(entries, 1):
        position = int(entry)
        assert data[position:].startswith(b"%d 0 obj" % number)


def test_cell_writes_text_and_advances_x():
    pdf = _canvas()
    pdf.set_x(50)
    pdf.set_y(50)
    width = pdf.cell("Invoice")
    assert width > 0
    assert pdf.x == 50 + width
    assert b"(Invoice) Tj" in pdf.to_bytes()


def test_cell_escapes_parentheses_and_backslash():
    pdf = _canvas()
    pdf.cell("a(b)\\")
    assert b"(a\\(b\\)\\\\) Tj" in pdf.to_bytes()


def test_unencodable_character_is_replaced():
    pdf = _canvas()
    pdf.cell("\u1eed")
    assert b"(?) Tj" in pdf.to_bytes()


def test_fonts_are_declared():
    data = _canvas().to_bytes()
    assert b"/BaseFont /Helvetica-Bold" in data
    assert b"/BaseFont /Helvetica " in data


def test_media_box_is_a4():
    assert b"595.28 841.89" in _canvas().to_bytes()


def test_trim_box_written_when_given():
    pdf = PdfCanvas(trim=22.68)
    assert b"/TrimBox [22.68 22.68" in pdf.to_bytes()


def test_line_flips_y_axis():
    pdf = _canvas()
    pdf.line(0, 0, 10, 0)
    data = pdf.to_bytes()
    assert f"0 {A4_HEIGHT} m".encode() in data


def test_rect_styles():
    pdf = _canvas()
    pdf.rect(10, 10, 20, 20, "D")
    pdf.rect(10, 10, 20, 20, "F")
    data = pdf.to_bytes()
    assert b"re S" in data
    assert b"re f" in data


def test_rect_rejects_unknown_style():
    with pytest.raises(ValueError):
        _canvas().rect(0, 0, 1, 1, "X")


def test_unknown_base_font_rejected():
    with pytest.raises(ValueError):
        PdfCanvas().add_font("roboto", "Roboto-Regular")


def test_unregistered_font_rejected():
    with pytest.raises(ValueError):
        PdfCanvas().set_font("roboto", 10)


def test_cell_without_font_fails():
    with pytest.raises(RuntimeError):
        PdfCanvas().cell("text")


def test_colour_out_of_range():
    with pytest.raises(ValueError):
        _canvas().set_text_color(0, 256, 0)


def test_write_matches_bytes(tmp_path):
    pdf = _canvas()
    pdf.cell("Invoice")
    path = tmp_path / "out.pdf"
    pdf.write(path)
    assert path.read_bytes() == pdf.to_bytes()