"""
Text extraction restricted to a rectangle of a page.

pypdf reports positions per text run only, so region text is read from
MuPDF's per-character layout instead.
"""

import fitz  # PyMuPDF

from .geometry import SilentZone


def iter_characters(page: fitz.Page):
    """
    Yield (character, x, y) for every character on the page.

    x and y are the character origin on its baseline, top-left origin at the
    crop box corner, with the page's /Rotate undone.
    """
    derotate = page.derotation_matrix
    for block in page.get_text("rawdict")["blocks"]:
        for line in block.get("lines", ()):
            for span in line["spans"]:
                for char in span["chars"]:
                    origin = fitz.Point(char["origin"]) * derotate
                    yield char["c"], origin.x, origin.y


def extract_text_in_area(page: fitz.Page, area: SilentZone) -> str:
    """Return the characters whose origin falls inside area, in content order."""
    return "".join(c for c, x, y in iter_characters(page) if area.contains(x, y))
