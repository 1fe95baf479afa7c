"""A minimal single-page PDF canvas drawing text, rectangles and lines."""

from __future__ import annotations

from pathlib import Path

A4_WIDTH = 595.28
A4_HEIGHT = 841.89

STANDARD_FONTS = frozenset(
    {
        "Courier",
        "Courier-Bold",
        "Courier-Oblique",
        "Courier-BoldOblique",
        "Helvetica",
        "Helvetica-Bold",
        "Helvetica-Oblique",
        "Helvetica-BoldOblique",
        "Times-Roman",
        "Times-Bold",
        "Times-Italic",
        "Times-BoldItalic",
        "Symbol",
        "ZapfDingbats",
    }
)

_SYMBOLIC = {"Symbol", "ZapfDingbats"}
_RECT_OPERATORS = {"D": b"S", "F": b"f", "FD": b"B", "DF": b"B"}
# Distance from the top of a text cell to its baseline, as a fraction of the size.
_ASCENT = 0.8


def _num(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _escape(text: str) -> bytes:
    raw = text.encode("cp1252", errors="replace")
    return raw.replace(b"\\", b"\\\\").replace(b"(", b"\\(").replace(b")", b"\\)")


def _color(r: int, g: int, b: int) -> tuple[int, int, int]:
    for component in (r, g, b):
        if not isinstance(component, int) or not 0 <= component <= 255:
            raise ValueError(f"colour component out of range 0-255: {component!r}")
    return (r, g, b)


def _color_operands(color: tuple[int, int, int]) -> str:
    return " ".join(_num(c / 255) for c in color)


class PdfCanvas:
    """Draws on one page using top-left coordinates in points.

    Fonts are the standard PDF base fonts, registered under names of the
    caller's choosing. Text widths are estimated from the font size.
    """

    def __init__(
        self,
        width: float = A4_WIDTH,
        height: float = A4_HEIGHT,
        trim: float | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.trim = trim
        self.x = 0.0
        self.y = 0.0
        self._fonts: dict[str, tuple[str, str]] = {}
        self._font: str | None = None
        self._font_size = 0.0
        self._text_color = (0, 0, 0)
        self._fill_color = (0, 0, 0)
        self._stroke_color = (0, 0, 0)
        self._line_width = 1.0
        self._ops: list[bytes] = []

    def add_font(self, name: str, base_font: str) -> None:
        """Register a standard base font under a name."""
        if base_font not in STANDARD_FONTS:
            raise ValueError(f"unknown base font: {base_font!r}")
        resource = self._fonts[name][0] if name in self._fonts else f"F{len(self._fonts) + 1}"
        self._fonts[name] = (resource, base_font)

    def set_font(self, name: str, size: float) -> None:
        if name not in self._fonts:
            raise ValueError(f"font not registered: {name!r}")
        if size <= 0:
            raise ValueError(f"font size must be positive: {size!r}")
        self._font = name
        self._font_size = float(size)

    def set_text_color(self, r: int, g: int, b: int) -> None:
        self._text_color = _color(r, g, b)

    def set_fill_color(self, r: int, g: int, b: int) -> None:
        self._fill_color = _color(r, g, b)

    def set_stroke_color(self, r: int, g: int, b: int) -> None:
        self._stroke_color = _color(r, g, b)

    def set_line_width(self, width: float) -> None:
        if width < 0:
            raise ValueError(f"line width must not be negative: {width!r}")
        self._line_width = float(width)

    def set_x(self, x: float) -> None:
        self.x = float(x)

    def set_y(self, y: float) -> None:
        self.y = float(y)

    def _text_width(self, text: str) -> float:
        base = self._fonts[self._font][1] if self._font else ""
        factor = 0.6 if base.startswith("Courier") else 0.5
        return len(text) * self._font_size * factor

    def cell(self, text: str) -> float:
        """Draw text with its top-left corner at the current position.

        The current x moves past the text; the estimated width is returned.
        """
        if self._font is None:
            raise RuntimeError("no font selected")
        resource = self._fonts[self._font][0]
        baseline = self.height - (self.y + self._font_size * _ASCENT)
        op = (
            f"q BT /{resource} {_num(self._font_size)} Tf "
            f"{_color_operands(self._text_color)} rg "
            f"{_num(self.x)} {_num(baseline)} Td ("
        ).encode("ascii")
        self._ops.append(op + _escape(text) + b") Tj ET Q")
        width = self._text_width(text)
        self.x += width
        return width

    def rect(self, x: float, y: float, width: float, height: float, style: str) -> None:
        """Draw a rectangle from its upper-left corner; style is D, F, FD or DF."""
        operator = _RECT_OPERATORS.get(style.upper())
        if operator is None:
            raise ValueError(f"unknown rectangle style: {style!r}")
        bottom = self.height - y - height
        op = (
            f"q {_color_operands(self._fill_color)} rg "
            f"{_color_operands(self._stroke_color)} RG {_num(self._line_width)} w "
            f"{_num(x)} {_num(bottom)} {_num(width)} {_num(height)} re "
        ).encode("ascii")
        self._ops.append(op + operator + b" Q")

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        op = (
            f"q {_color_operands(self._stroke_color)} RG {_num(self._line_width)} w "
            f"{_num(x1)} {_num(self.height - y1)} m "
            f"{_num(x2)} {_num(self.height - y2)} l S Q"
        )
        self._ops.append(op.encode("ascii"))

    def to_bytes(self) -> bytes:
        """Serialise the page as a complete PDF document."""
        content = b"\n".join(self._ops)
        fonts = list(self._fonts.values())
        first_font = 5
        font_refs = " ".join(
            f"/{resource} {first_font + i} 0 R" for i, (resource, _) in enumerate(fonts)
        )
        boxes = f"/MediaBox [0 0 {_num(self.width)} {_num(self.height)}]"
        if self.trim is not None:
            boxes += (
                f" /TrimBox [{_num(self.trim)} {_num(self.trim)} "
                f"{_num(self.width - self.trim)} {_num(self.height - self.trim)}]"
            )
        objects = [
            b"<< /Type /Catalog /Pages 2 0 R >>",
            b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
            (
                f"<< /Type /Page /Parent 2 0 R {boxes} "
                f"/Resources << /Font << {font_refs} >> >> /Contents 4 0 R >>"
            ).encode("ascii"),
            b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        ]
        for _, base in fonts:
            encoding = "" if base in _SYMBOLIC else " /Encoding /WinAnsiEncoding"
            objects.append(
                f"<< /Type /Font /Subtype /Type1 /BaseFont /{base}{encoding} >>".encode("ascii")
            )

        out = bytearray(b"%PDF-1.4\n")
        offsets = []
        for number, body in enumerate(objects, 1):
            offsets.append(len(out))
            out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
        xref = len(out)
        out += b"xref\n0 %d\n" % (len(objects) + 1)
        out += b"0000000000 65535 f \n"
        for offset in offsets:
            out += b"%010d 00000 n \n" % offset
        out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
            len(objects) + 1,
            xref,
        )
        return bytes(out)

    def write(self, path: str | Path) -> None:
        """Write the document to a file."""
        Path(path).write_bytes(self.to_bytes())