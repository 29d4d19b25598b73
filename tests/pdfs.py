"""
Builds small PDFs in memory for the validation tests.

Text is positioned with a cm translation so its origin is exactly the
(x, y) given, in PDF user space (origin bottom-left).
"""

from dataclasses import dataclass, field
from io import BytesIO
from typing import Optional

from pypdf import PdfWriter
from pypdf.generic import DecodedStreamObject, DictionaryObject, NameObject, NumberObject

MM = 72 / 25.4

A4_WIDTH_PT = 595.28
A4_HEIGHT_PT = 841.89
LETTER_WIDTH_PT = 612
LETTER_HEIGHT_PT = 792


@dataclass
class FontSpec:
    base_font: str = "Helvetica"
    subtype: str = "Type1"
    with_descriptor: bool = False
    embedded: bool = False


@dataclass
class PageSpec:
    width: float = A4_WIDTH_PT
    height: float = A4_HEIGHT_PT
    # (x, y, text) in points from the bottom-left corner
    texts: list = field(default_factory=list)
    fonts: list = field(default_factory=lambda: [FontSpec()])
    # Extra content stream operators, appended after the texts
    content: str = ""
    # /Contents points at a number instead of a stream
    broken_contents: bool = False


def landscape(**kwargs) -> PageSpec:
    return PageSpec(width=A4_HEIGHT_PT, height=A4_WIDTH_PT, **kwargs)


def _font_object(writer: PdfWriter, spec: FontSpec):
    font = DictionaryObject({
        NameObject("/Type"): NameObject("/Font"),
        NameObject("/Subtype"): NameObject(f"/{spec.subtype}"),
        NameObject("/BaseFont"): NameObject(f"/{spec.base_font}"),
    })
    if spec.with_descriptor:
        descriptor = DictionaryObject({
            NameObject("/Type"): NameObject("/FontDescriptor"),
            NameObject("/FontName"): NameObject(f"/{spec.base_font}"),
            NameObject("/Flags"): NumberObject(32),
        })
        if spec.embedded:
            font_file = DecodedStreamObject()
            font_file.set_data(b"\x00\x01\x00\x00" + b"\x00" * 12)
            descriptor[NameObject("/FontFile2")] = writer._add_object(font_file)
        font[NameObject("/FontDescriptor")] = writer._add_object(descriptor)
    return writer._add_object(font)


def build_pdf(pages, version: Optional[str] = None, password: Optional[str] = None) -> bytes:
    """Write a PDF with one page per PageSpec. The first font is used for text."""
    writer = PdfWriter()

    for spec in pages:
        page = writer.add_blank_page(width=spec.width, height=spec.height)

        fonts = DictionaryObject()
        for index, font_spec in enumerate(spec.fonts, start=1):
            fonts[NameObject(f"/F{index}")] = _font_object(writer, font_spec)
        page[NameObject("/Resources")] = DictionaryObject({NameObject("/Font"): fonts})

        operations = [
            f"q 1 0 0 1 {x} {y} cm BT /F1 10 Tf ({text}) Tj ET Q"
            for x, y, text in spec.texts
        ]
        if spec.content:
            operations.append(spec.content)

        if spec.broken_contents:
            page[NameObject("/Contents")] = NumberObject(0)
        elif operations:
            content = DecodedStreamObject()
            content.set_data("\n".join(operations).encode("latin-1"))
            page[NameObject("/Contents")] = writer._add_object(content)

    if version is not None:
        writer.pdf_header = f"%PDF-{version}"

    if password is not None:
        writer.encrypt(user_password=password, algorithm="RC4-128")

    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def a4_pages(count: int) -> list:
    return [PageSpec() for _ in range(count)]
